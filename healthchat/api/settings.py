import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from healthchat.db.session import get_db
from healthchat.models.user import User
from healthchat.api.deps import get_current_user, get_session
from healthchat.core.records import RECORD_KINDS, RecordTracker
from healthchat.core.session_context import SessionContext
from healthchat.api.records import serialize_records
from healthchat.schemas.settings import SettingsUpdateRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/settings", tags=["Settings"])


def _settings_out(ctx: SessionContext) -> dict:
    return {"selectedModel": ctx.selected_model, **ctx.preferences.to_dict()}


@router.get("")
async def get_settings(ctx: SessionContext = Depends(get_session)):
    return {"settings": _settings_out(ctx)}


@router.put("")
async def update_settings(data: SettingsUpdateRequest, ctx: SessionContext = Depends(get_session)):
    ctx.update_preferences(data.model_dump(exclude_unset=True))
    return {"success": True, "settings": _settings_out(ctx)}


@router.post("/export-data")
def export_data(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    data = {
        name: serialize_records(name, RecordTracker(kind).list(db, user.id, limit=None))
        for name, kind in RECORD_KINDS.items()
    }
    logger.info("Exported health data for user %s", user.id)
    return {"success": True, "data": data}


@router.post("/delete-account")
def delete_account(user: User = Depends(get_current_user)):
    # Simulated: nothing is removed yet.
    logger.info("Account deletion requested by user %s", user.id)
    return {"success": True, "message": "Account deletion initiated"}
