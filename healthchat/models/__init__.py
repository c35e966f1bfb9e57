from healthchat.models.user import User, PasswordResetToken
from healthchat.models.symptom import Symptom
from healthchat.models.mood import Mood
from healthchat.models.meal import Meal
from healthchat.models.medication import Medication

__all__ = ["User", "PasswordResetToken", "Symptom", "Mood", "Meal", "Medication"]
