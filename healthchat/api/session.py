from fastapi import APIRouter, Depends

from healthchat.models.user import User
from healthchat.api.deps import get_current_user, get_session
from healthchat.api.auth import user_out
from healthchat.core.session_context import SessionContext
from healthchat.schemas.settings import ViewModeRequest

router = APIRouter(prefix="/api/session", tags=["Session"])


def _page(user: User, ctx: SessionContext) -> dict:
    """Sidebar + main panel state in one payload."""
    manager = ctx.conversations
    return {
        "user": user_out(user),
        "view": ctx.view_mode,
        "selectedModel": ctx.selected_model,
        "conversations": [c.summary() for c in manager.conversations],
        "activeConversationId": manager.active_id,
        "activeConversation": manager.active.to_dict() if ctx.view_mode == "chat" else None,
        "settings": ctx.preferences.to_dict(),
    }


@router.get("")
async def get_page(user: User = Depends(get_current_user), ctx: SessionContext = Depends(get_session)):
    return _page(user, ctx)


@router.put("/view")
async def set_view(data: ViewModeRequest, user: User = Depends(get_current_user), ctx: SessionContext = Depends(get_session)):
    ctx.set_view(data.view)
    return _page(user, ctx)
