"""
Health record trackers: symptoms, moods, meals, medications.

Each kind is described by a RecordKind (model, time column, required fields,
validation message, blank form). RecordTracker runs list/add for one kind.
Records are append-only: there is no update or delete path.
"""
import datetime
import logging
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from healthchat.core.errors import RecordStorageError, RecordValidationError
from healthchat.db.session import Base
from healthchat.models import Symptom, Mood, Meal, Medication

logger = logging.getLogger(__name__)

MEAL_TYPES = ("breakfast", "lunch", "dinner", "snack")


@dataclass(frozen=True)
class RecordKind:
    name: str
    label: str
    model: type[Base]
    time_field: str
    required: tuple[str, ...]
    missing_message: str
    defaults: dict[str, Any] = field(default_factory=dict)
    choices: dict[str, tuple[str, ...]] = field(default_factory=dict)

    @property
    def time_column(self):
        return getattr(self.model, self.time_field)


SYMPTOMS = RecordKind(
    name="symptoms",
    label="symptom",
    model=Symptom,
    time_field="recorded_at",
    required=("symptom_name",),
    missing_message="Please enter a symptom",
    defaults={"symptom_name": "", "severity": 5, "notes": ""},
)

MOODS = RecordKind(
    name="moods",
    label="mood",
    model=Mood,
    time_field="recorded_at",
    required=("mood_name",),
    missing_message="Please enter a mood",
    defaults={"mood_name": "", "mood_value": 5, "notes": ""},
)

MEALS = RecordKind(
    name="meals",
    label="meal",
    model=Meal,
    time_field="recorded_at",
    required=("meal_type", "food_items"),
    missing_message="Please fill in meal type and food items",
    defaults={"meal_type": "", "food_items": "", "calories": None, "notes": ""},
    choices={"meal_type": MEAL_TYPES},
)

MEDICATIONS = RecordKind(
    name="medications",
    label="medication",
    model=Medication,
    time_field="taken_at",
    required=("medication_name", "dosage", "frequency"),
    missing_message="Please fill in all required fields",
    defaults={"medication_name": "", "dosage": "", "frequency": "", "notes": ""},
)

RECORD_KINDS: dict[str, RecordKind] = {k.name: k for k in (SYMPTOMS, MOODS, MEALS, MEDICATIONS)}


def to_utc(value: datetime.datetime | None) -> datetime.datetime:
    """None -> now. Naive values are taken as UTC."""
    if value is None:
        return datetime.datetime.now(datetime.timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value.astimezone(datetime.timezone.utc)


class RecordTracker:
    def __init__(self, kind: RecordKind):
        self.kind = kind

    def blank_form(self) -> dict[str, Any]:
        form = dict(self.kind.defaults)
        form[self.kind.time_field] = None
        return form

    def validate(self, fields: dict[str, Any]) -> dict[str, Any]:
        """Trimmed copy of the fields. Raises RecordValidationError on a missing required field."""
        clean = dict(fields)
        for name in self.kind.required:
            value = clean.get(name)
            if value is None or not str(value).strip():
                raise RecordValidationError(self.kind.missing_message)
            clean[name] = str(value).strip()
        for name, allowed in self.kind.choices.items():
            value = clean.get(name)
            if value is not None and value.lower() not in allowed:
                raise RecordValidationError(f"Unknown {name.replace('_', ' ')}: {value}")
            if value is not None:
                clean[name] = value.lower()
        if "notes" in clean:
            clean["notes"] = (clean["notes"] or "").strip() or None
        clean[self.kind.time_field] = to_utc(clean.get(self.kind.time_field))
        return clean

    def add(self, db: Session, user_id: str, fields: dict[str, Any]):
        clean = self.validate(fields)
        columns = self.kind.model.__table__.columns.keys()
        row = self.kind.model(user_id=user_id, **{k: v for k, v in clean.items() if k in columns})
        try:
            db.add(row)
            db.commit()
            db.refresh(row)
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Could not log %s for user %s", self.kind.label, user_id)
            raise RecordStorageError(f"Error logging {self.kind.label}: {exc}") from exc
        logger.info("Logged %s %s for user %s", self.kind.label, row.id, user_id)
        return row

    def list(self, db: Session, user_id: str, limit: int | None = 10, since: datetime.datetime | None = None):
        q = db.query(self.kind.model).filter(self.kind.model.user_id == user_id)
        if since is not None:
            q = q.filter(self.kind.time_column >= to_utc(since))
        q = q.order_by(self.kind.time_column.desc(), self.kind.model.created_at.desc())
        if limit is not None:
            q = q.limit(limit)
        return q.all()


def get_tracker(kind: str) -> RecordTracker | None:
    record_kind = RECORD_KINDS.get(kind)
    return RecordTracker(record_kind) if record_kind else None
