"""Create tables and seed a demo user with a few health records."""
import sys
import os
import datetime

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from healthchat.db.session import SessionLocal, engine, Base
from healthchat.models import User
from healthchat.core.records import RECORD_KINDS, RecordTracker
from healthchat.core.security import hash_password

Base.metadata.create_all(bind=engine)
db = SessionLocal()

# Demo user: demo@healthchat.local / demo1234
user = db.query(User).filter(User.email == "demo@healthchat.local").first()
if not user:
    user = User(
        email="demo@healthchat.local",
        password_hash=hash_password("demo1234"),
        first_name="Demo",
        last_name="User",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    print("Created user: demo@healthchat.local / demo1234")

    now = datetime.datetime.now(datetime.timezone.utc)
    samples = {
        "symptoms": [
            {"symptom_name": "Headache", "severity": 6, "recorded_at": now - datetime.timedelta(days=1)},
            {"symptom_name": "Fatigue", "severity": 4, "recorded_at": now - datetime.timedelta(days=3)},
        ],
        "moods": [
            {"mood_name": "Calm", "mood_value": 7, "recorded_at": now - datetime.timedelta(days=1)},
            {"mood_name": "Anxious", "mood_value": 4, "recorded_at": now - datetime.timedelta(days=2)},
        ],
        "meals": [
            {"meal_type": "breakfast", "food_items": "Oatmeal, banana", "calories": 350, "recorded_at": now},
        ],
        "medications": [
            {"medication_name": "Ibuprofen", "dosage": "200mg", "frequency": "As needed", "taken_at": now},
        ],
    }
    for kind, rows in samples.items():
        tracker = RecordTracker(RECORD_KINDS[kind])
        for fields in rows:
            tracker.add(db, user.id, fields)
    print("Created sample records")

db.close()
print("Init complete.")
