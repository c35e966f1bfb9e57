from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from healthchat.db.session import get_db
from healthchat.models.user import User
from healthchat.api.deps import get_current_user
from healthchat.core.config import get_recent_records_limit
from healthchat.core.records import RECORD_KINDS, RecordTracker, get_tracker
from healthchat.schemas.record import (
    SymptomCreate, SymptomOut,
    MoodCreate, MoodOut,
    MealCreate, MealOut,
    MedicationCreate, MedicationOut,
)

router = APIRouter(prefix="/api/records", tags=["Health Records"])

OUT_SCHEMAS = {
    "symptoms": SymptomOut,
    "moods": MoodOut,
    "meals": MealOut,
    "medications": MedicationOut,
}


def _tracker_or_404(kind: str) -> RecordTracker:
    tracker = get_tracker(kind)
    if not tracker:
        raise HTTPException(status_code=404, detail=f"Unknown record type: {kind}")
    return tracker


def serialize_records(kind: str, rows) -> list[dict]:
    schema = OUT_SCHEMAS[kind]
    return [schema.model_validate(r).model_dump(mode="json") for r in rows]


@router.get("/{kind}")
def list_records(
    kind: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    limit: int | None = Query(None, ge=1, le=500),
):
    tracker = _tracker_or_404(kind)
    rows = tracker.list(db, user.id, limit=limit or get_recent_records_limit())
    return {kind: serialize_records(kind, rows)}


@router.get("/{kind}/form")
def blank_form(kind: str, user: User = Depends(get_current_user)):
    return {"form": _tracker_or_404(kind).blank_form()}


def _add(kind: str, fields: dict, db: Session, user: User) -> dict:
    tracker = RecordTracker(RECORD_KINDS[kind])
    row = tracker.add(db, user.id, fields)
    return {
        "success": True,
        "message": f"{tracker.kind.label.capitalize()} logged successfully!",
        "record": serialize_records(kind, [row])[0],
        "form": tracker.blank_form(),
    }


@router.post("/symptoms")
def add_symptom(data: SymptomCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return _add("symptoms", data.model_dump(), db, user)


@router.post("/moods")
def add_mood(data: MoodCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return _add("moods", data.model_dump(), db, user)


@router.post("/meals")
def add_meal(data: MealCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return _add("meals", data.model_dump(), db, user)


@router.post("/medications")
def add_medication(data: MedicationCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return _add("medications", data.model_dump(), db, user)


@router.post("/{kind}")
def add_unknown(kind: str, user: User = Depends(get_current_user)):
    # Every known kind has its own POST route above.
    raise HTTPException(status_code=404, detail=f"Unknown record type: {kind}")
