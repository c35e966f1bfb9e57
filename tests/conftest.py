import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REPLY_DELAY_SECONDS"] = "0"
os.environ["CHAT_BACKEND"] = "echo"
os.environ["JWT_SECRET"] = "test-secret"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from healthchat.db.session import Base, get_db
from healthchat.core.ai_engine import EchoBackend
from healthchat.core.security import hash_password
from healthchat.core.session_context import reset_session_registry
from healthchat.models import User

import main

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def user(db):
    u = User(email="jane@example.com", password_hash=hash_password("secret123"), first_name="Jane", last_name="Doe")
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


@pytest.fixture
def registry():
    reg = reset_session_registry(EchoBackend(delay=0))
    yield reg
    reg.clear()


@pytest.fixture
def client(db, registry):
    def override_get_db():
        yield db

    main.app.dependency_overrides[get_db] = override_get_db
    with TestClient(main.app) as c:
        yield c
    main.app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client, user):
    resp = client.post("/api/auth/login", json={"email": "jane@example.com", "password": "secret123"})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['token']}"}
