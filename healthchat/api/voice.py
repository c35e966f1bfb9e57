from fastapi import APIRouter, Depends

from healthchat.models.user import User
from healthchat.api.deps import get_current_user
from healthchat.core.voice import detect_language, append_transcription
from healthchat.schemas.settings import DetectLanguageRequest

router = APIRouter(prefix="/api/voice", tags=["Voice"])


@router.post("/detect-language")
def detect(data: DetectLanguageRequest, user: User = Depends(get_current_user)):
    return {
        "language": detect_language(data.text),
        "draft": append_transcription(data.draft, data.text),
    }
