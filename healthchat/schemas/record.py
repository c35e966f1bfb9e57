from pydantic import BaseModel, Field, field_validator
from datetime import datetime, timezone
from typing import Optional


class SymptomCreate(BaseModel):
    symptom_name: Optional[str] = None
    severity: Optional[int] = Field(None, ge=1, le=10)
    notes: Optional[str] = None
    recorded_at: Optional[datetime] = None


class MoodCreate(BaseModel):
    mood_name: Optional[str] = None
    mood_value: Optional[int] = Field(None, ge=1, le=10)
    notes: Optional[str] = None
    recorded_at: Optional[datetime] = None


class MealCreate(BaseModel):
    meal_type: Optional[str] = None  # breakfast | lunch | dinner | snack
    food_items: Optional[str] = None
    calories: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None
    recorded_at: Optional[datetime] = None


class MedicationCreate(BaseModel):
    medication_name: Optional[str] = None
    dosage: Optional[str] = None
    frequency: Optional[str] = None
    notes: Optional[str] = None
    taken_at: Optional[datetime] = None


class _RecordOut(BaseModel):
    id: str
    user_id: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @field_validator("created_at", "recorded_at", "taken_at", check_fields=False)
    @classmethod
    def assume_utc(cls, value):
        # SQLite drops the offset; stored values are UTC.
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class SymptomOut(_RecordOut):
    symptom_name: str
    severity: Optional[int] = None
    recorded_at: datetime


class MoodOut(_RecordOut):
    mood_name: str
    mood_value: Optional[int] = None
    recorded_at: datetime


class MealOut(_RecordOut):
    meal_type: str
    food_items: str
    calories: Optional[int] = None
    recorded_at: datetime


class MedicationOut(_RecordOut):
    medication_name: str
    dosage: str
    frequency: str
    taken_at: datetime
