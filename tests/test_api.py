from healthchat.core.session_context import get_session_registry


def _drain(client, user_id):
    ctx = get_session_registry().get(user_id)
    client.portal.call(ctx.conversations.drain)


# --- Auth


def test_signup_then_login(client, db):
    resp = client.post("/api/auth/signup", json={
        "email": "New@Example.com", "password": "pass1234", "firstName": "Sam", "lastName": "Lee",
    })
    assert resp.status_code == 200
    assert resp.json()["user"]["email"] == "new@example.com"

    resp = client.post("/api/auth/login", json={"email": "new@example.com", "password": "pass1234"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["token"]
    assert body["user"]["name"] == "Sam Lee"


def test_duplicate_signup_conflicts(client, user):
    resp = client.post("/api/auth/signup", json={"email": "jane@example.com", "password": "another1"})
    assert resp.status_code == 409


def test_login_wrong_password(client, user):
    resp = client.post("/api/auth/login", json={"email": "jane@example.com", "password": "nope"})
    assert resp.status_code == 401


def test_protected_route_requires_token(client):
    assert client.get("/api/session").status_code == 401
    assert client.get("/api/records/symptoms", headers={"Authorization": "Bearer junk"}).status_code == 401


def test_me(client, auth_headers):
    resp = client.get("/api/auth/me", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["user"]["email"] == "jane@example.com"


def test_password_reset_flow(client, db, user):
    from healthchat.models import PasswordResetToken

    resp = client.post("/api/auth/password-reset", json={"email": "jane@example.com"})
    assert resp.status_code == 200
    unknown = client.post("/api/auth/password-reset", json={"email": "ghost@example.com"})
    assert unknown.json() == resp.json()

    token = db.query(PasswordResetToken).filter(PasswordResetToken.user_id == user.id).one().token
    resp = client.post("/api/auth/password-reset/confirm", json={"token": token, "newPassword": "fresh-pass"})
    assert resp.status_code == 200

    assert client.post("/api/auth/login", json={"email": "jane@example.com", "password": "fresh-pass"}).status_code == 200
    again = client.post("/api/auth/password-reset/confirm", json={"token": token, "newPassword": "other-pass"})
    assert again.status_code == 400


def test_oauth_unconfigured_and_unsupported(client, monkeypatch):
    monkeypatch.delenv("GOOGLE_CLIENT_ID", raising=False)
    assert client.get("/api/auth/oauth/google").status_code == 503
    assert client.get("/api/auth/oauth/github").status_code == 400

    monkeypatch.setenv("GOOGLE_CLIENT_ID", "client-123")
    resp = client.get("/api/auth/oauth/google")
    assert resp.status_code == 200
    assert "client_id=client-123" in resp.json()["url"]


# --- Session and conversations


def test_session_page_starts_with_one_conversation(client, auth_headers):
    page = client.get("/api/session", headers=auth_headers).json()
    assert page["view"] == "chat"
    assert page["selectedModel"] == "GPT-4"
    assert len(page["conversations"]) == 1
    assert page["activeConversationId"] == page["conversations"][0]["id"]


def test_switch_view_to_tracker(client, auth_headers):
    resp = client.put("/api/session/view", json={"view": "tracker"}, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["view"] == "tracker"
    assert resp.json()["activeConversation"] is None
    assert client.put("/api/session/view", json={"view": "settings"}, headers=auth_headers).status_code == 422


def test_new_conversation_twice(client, auth_headers):
    client.post("/api/conversations", headers=auth_headers)
    created = client.post("/api/conversations", headers=auth_headers).json()
    listing = client.get("/api/conversations", headers=auth_headers).json()
    assert len(listing["conversations"]) == 3
    assert listing["activeConversationId"] == created["conversation"]["id"]


def test_send_message_and_receive_reply(client, auth_headers, user):
    resp = client.post("/api/conversations/active/messages", json={"content": "Slept badly"}, headers=auth_headers)
    assert resp.status_code == 200
    conv = resp.json()["conversation"]
    assert conv["title"] == "Slept badly..."
    assert [m["isUser"] for m in conv["messages"]] == [True]

    _drain(client, user.id)
    conv = client.get(f"/api/conversations/{conv['id']}", headers=auth_headers).json()["conversation"]
    assert [m["content"] for m in conv["messages"]] == ["Slept badly", 'This is a response to: "Slept badly"']


def test_blank_message_rejected(client, auth_headers):
    resp = client.post("/api/conversations/active/messages", json={"content": "  "}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Message cannot be empty"


def test_select_and_delete(client, auth_headers):
    first = client.get("/api/conversations", headers=auth_headers).json()["activeConversationId"]
    second = client.post("/api/conversations", headers=auth_headers).json()["conversation"]["id"]

    resp = client.post(f"/api/conversations/{first}/select", headers=auth_headers)
    assert resp.json()["activeConversationId"] == first

    resp = client.delete(f"/api/conversations/{first}", headers=auth_headers).json()
    assert resp["activeConversationId"] == second

    resp = client.delete(f"/api/conversations/{second}", headers=auth_headers).json()
    assert len(resp["conversations"]) == 1
    assert resp["activeConversationId"] not in (first, second)

    assert client.delete(f"/api/conversations/{second}", headers=auth_headers).status_code == 404


def test_search_conversations(client, auth_headers, user):
    client.post("/api/conversations/active/messages", json={"content": "Knee pain"}, headers=auth_headers)
    client.post("/api/conversations", headers=auth_headers)
    _drain(client, user.id)
    resp = client.get("/api/conversations", params={"q": "knee"}, headers=auth_headers).json()
    assert [c["title"] for c in resp["conversations"]] == ["Knee pain..."]


# --- Records, analysis, settings


def test_add_record_clears_form_and_lists_first(client, auth_headers):
    client.post("/api/records/symptoms", json={
        "symptom_name": "Cough", "severity": 3, "recorded_at": "2026-10-01T09:00:00Z",
    }, headers=auth_headers)
    resp = client.post("/api/records/symptoms", json={
        "symptom_name": "Headache", "severity": 6, "recorded_at": "2026-10-02T09:00:00Z",
    }, headers=auth_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Symptom logged successfully!"
    assert body["form"]["symptom_name"] == ""
    assert body["form"]["severity"] == 5

    listed = client.get("/api/records/symptoms", headers=auth_headers).json()["symptoms"]
    assert listed[0]["id"] == body["record"]["id"]
    assert [r["symptom_name"] for r in listed] == ["Headache", "Cough"]


def test_add_record_missing_required_field(client, auth_headers):
    resp = client.post("/api/records/medications", json={"medication_name": "Aspirin"}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Please fill in all required fields"
    assert client.get("/api/records/medications", headers=auth_headers).json()["medications"] == []


def test_add_record_out_of_range(client, auth_headers):
    resp = client.post("/api/records/moods", json={"mood_name": "Great", "mood_value": 11}, headers=auth_headers)
    assert resp.status_code == 422


def test_unknown_record_kind(client, auth_headers):
    assert client.get("/api/records/sleep", headers=auth_headers).status_code == 404
    resp = client.post("/api/records/sleep", json={"hours": 8}, headers=auth_headers)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Unknown record type: sleep"


def test_record_times_come_back_in_utc(client, auth_headers):
    resp = client.post("/api/records/meals", json={
        "meal_type": "lunch", "food_items": "Soup", "recorded_at": "2026-10-02T09:00:00+02:00",
    }, headers=auth_headers)
    added = resp.json()["record"]["recorded_at"]
    listed = client.get("/api/records/meals", headers=auth_headers).json()["meals"][0]["recorded_at"]
    for value in (added, listed):
        assert value.startswith("2026-10-02T07:00:00")
        assert value.endswith(("Z", "+00:00"))


def test_database_error_reaches_client(client, auth_headers, db):
    from healthchat.models import Meal

    Meal.__table__.drop(bind=db.get_bind())
    resp = client.post("/api/records/meals", json={"meal_type": "lunch", "food_items": "Soup"}, headers=auth_headers)
    assert resp.status_code == 500
    assert resp.json()["detail"].startswith("Error logging meal: ")
    assert "no such table" in resp.json()["detail"]


def test_blank_form_endpoint(client, auth_headers):
    resp = client.get("/api/records/meals/form", headers=auth_headers)
    assert resp.json()["form"]["meal_type"] == ""


def test_analysis_endpoint(client, auth_headers):
    client.post("/api/records/moods", json={"mood_name": "Good", "mood_value": 8}, headers=auth_headers)
    client.post("/api/records/meals", json={"meal_type": "snack", "food_items": "Apple"}, headers=auth_headers)
    body = client.get("/api/analysis", headers=auth_headers).json()
    assert body["summary"]["moods"] == 1
    assert body["summary"]["meals"] == 1
    assert {i["title"] for i in body["insights"]} == {"Mood Trend", "Eating Patterns"}

    export = client.post("/api/analysis/export", headers=auth_headers).json()
    assert export["success"] is False


def test_settings_update(client, auth_headers):
    resp = client.put("/api/settings", json={"theme": "Dark", "selectedModel": "Gemini", "pushNotifications": True},
                      headers=auth_headers)
    assert resp.status_code == 200
    settings = client.get("/api/settings", headers=auth_headers).json()["settings"]
    assert settings["theme"] == "Dark"
    assert settings["selectedModel"] == "Gemini"
    assert settings["pushNotifications"] is True
    assert settings["language"] == "Auto-detect"

    assert client.put("/api/settings", json={"theme": "Neon"}, headers=auth_headers).status_code == 422


def test_export_data_and_delete_account(client, auth_headers):
    client.post("/api/records/symptoms", json={"symptom_name": "Rash"}, headers=auth_headers)
    data = client.post("/api/settings/export-data", headers=auth_headers).json()["data"]
    assert [r["symptom_name"] for r in data["symptoms"]] == ["Rash"]
    assert data["meals"] == []

    resp = client.post("/api/settings/delete-account", headers=auth_headers).json()
    assert resp["message"] == "Account deletion initiated"


def test_detect_language_endpoint(client, auth_headers):
    resp = client.post("/api/voice/detect-language", json={"text": "Ich heiße Anna", "draft": "Hallo"},
                       headers=auth_headers)
    assert resp.json() == {"language": "German", "draft": "Hallo Ich heiße Anna"}


def test_robots_and_noindex_header(client):
    resp = client.get("/robots.txt")
    assert resp.text == "User-agent: *\nDisallow: /\n"
    assert resp.headers["X-Robots-Tag"] == "noindex, nofollow"
