from fastapi import APIRouter, Depends, Query

from healthchat.api.deps import get_session
from healthchat.core.session_context import SessionContext
from healthchat.schemas.conversation import SendMessageRequest

router = APIRouter(prefix="/api/conversations", tags=["Conversations"])

# Handlers are async: send() schedules the reply on the running loop.


def _listing(ctx: SessionContext, q: str | None = None) -> dict:
    return {
        "conversations": [c.summary() for c in ctx.conversations.search(q)],
        "activeConversationId": ctx.conversations.active_id,
    }


@router.get("")
async def list_conversations(ctx: SessionContext = Depends(get_session), q: str | None = Query(None)):
    return _listing(ctx, q)


@router.post("")
async def create_conversation(ctx: SessionContext = Depends(get_session)):
    conv = ctx.conversations.create()
    return {"conversation": conv.to_dict(), **_listing(ctx)}


@router.post("/active/messages")
async def send_to_active(data: SendMessageRequest, ctx: SessionContext = Depends(get_session)):
    message = ctx.conversations.send(data.content)
    return {"message": message.to_dict(), "conversation": ctx.conversations.active.to_dict()}


@router.get("/{conversation_id}")
async def get_conversation(conversation_id: str, ctx: SessionContext = Depends(get_session)):
    return {"conversation": ctx.conversations.get(conversation_id).to_dict()}


@router.post("/{conversation_id}/select")
async def select_conversation(conversation_id: str, ctx: SessionContext = Depends(get_session)):
    conv = ctx.conversations.select(conversation_id)
    return {"conversation": conv.to_dict(), **_listing(ctx)}


@router.delete("/{conversation_id}")
async def delete_conversation(conversation_id: str, ctx: SessionContext = Depends(get_session)):
    ctx.conversations.delete(conversation_id)
    return {"success": True, **_listing(ctx)}


@router.post("/{conversation_id}/messages")
async def send_message(conversation_id: str, data: SendMessageRequest, ctx: SessionContext = Depends(get_session)):
    message = ctx.conversations.send(data.content, conversation_id=conversation_id)
    return {"message": message.to_dict(), "conversation": ctx.conversations.get(conversation_id).to_dict()}
