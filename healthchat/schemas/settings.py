from pydantic import BaseModel, Field
from typing import Literal, Optional

Theme = Literal["System", "Light", "Dark"]
Language = Literal["Auto-detect", "English", "Spanish", "French", "German"]
Voice = Literal["Ember", "Alloy", "Echo", "Fable", "Nova"]
ViewMode = Literal["chat", "tracker"]


class SettingsUpdateRequest(BaseModel):
    """Frontend sends camelCase; snake_case is accepted too."""
    theme: Optional[Theme] = None
    language: Optional[Language] = None
    voice: Optional[Voice] = None
    selected_model: Optional[str] = Field(None, alias="selectedModel")
    follow_up_suggestions: Optional[bool] = Field(None, alias="followUpSuggestions")
    email_notifications: Optional[bool] = Field(None, alias="emailNotifications")
    push_notifications: Optional[bool] = Field(None, alias="pushNotifications")
    data_sharing: Optional[bool] = Field(None, alias="dataSharing")
    two_factor_auth: Optional[bool] = Field(None, alias="twoFactorAuth")

    model_config = {"populate_by_name": True}


class ViewModeRequest(BaseModel):
    view: ViewMode


class DetectLanguageRequest(BaseModel):
    text: str
    draft: Optional[str] = None
