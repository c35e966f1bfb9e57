"""
In-memory conversation state for one user session.

Conversations are never persisted. The list is never empty: a session starts
with one conversation and deleting the last one synthesises a replacement.
Assistant replies run as asyncio tasks owned by the conversation they answer;
deleting a conversation cancels its pending replies.
"""
import asyncio
import datetime
import functools
import logging
import uuid
from dataclasses import dataclass, field

from healthchat.core.ai_engine import EchoBackend, ReplyBackend
from healthchat.core.errors import ConversationNotFound, MessageValidationError

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "New Conversation"
TITLE_MAX_CHARS = 30


def _now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


def derive_title(content: str) -> str:
    return content[:TITLE_MAX_CHARS] + "..."


@dataclass(frozen=True)
class Message:
    id: str
    content: str
    is_user: bool
    timestamp: datetime.datetime

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "content": self.content,
            "isUser": self.is_user,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class Conversation:
    id: str = field(default_factory=_new_id)
    title: str = DEFAULT_TITLE
    created_at: datetime.datetime = field(default_factory=_now)
    _messages: list[Message] = field(default_factory=list, repr=False)

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    def append(self, message: Message) -> None:
        self._messages.append(message)

    def summary(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "createdAt": self.created_at.isoformat(),
            "messageCount": len(self._messages),
        }

    def to_dict(self) -> dict:
        data = self.summary()
        data["messages"] = [m.to_dict() for m in self._messages]
        return data


class ConversationManager:
    def __init__(self, backend: ReplyBackend | None = None):
        self.backend = backend or EchoBackend()
        self._conversations: list[Conversation] = []
        self._active_id: str | None = None
        self._pending: dict[str, set[asyncio.Task]] = {}
        self.create()

    @property
    def conversations(self) -> list[Conversation]:
        return list(self._conversations)

    @property
    def active_id(self) -> str:
        return self._active_id

    @property
    def active(self) -> Conversation:
        return self.get(self._active_id)

    def get(self, conversation_id: str) -> Conversation:
        for conv in self._conversations:
            if conv.id == conversation_id:
                return conv
        raise ConversationNotFound(conversation_id)

    def search(self, query: str | None) -> list[Conversation]:
        if not query:
            return self.conversations
        q = query.lower()
        return [c for c in self._conversations if q in c.title.lower()]

    def create(self) -> Conversation:
        conv = Conversation()
        self._conversations.insert(0, conv)
        self._active_id = conv.id
        logger.debug("Created conversation %s", conv.id)
        return conv

    def select(self, conversation_id: str) -> Conversation:
        conv = self.get(conversation_id)
        self._active_id = conv.id
        return conv

    def delete(self, conversation_id: str) -> None:
        conv = self.get(conversation_id)
        for task in self._pending.pop(conv.id, set()):
            task.cancel()
        self._conversations.remove(conv)
        logger.debug("Deleted conversation %s", conv.id)
        if not self._conversations:
            self.create()
        elif conversation_id == self._active_id:
            self._active_id = self._conversations[0].id

    def send(self, content: str, conversation_id: str | None = None) -> Message:
        """Append a user message now and schedule the assistant reply.

        Must be called from a running event loop. The reply always lands in the
        conversation the message was sent to.
        """
        text = (content or "").strip()
        if not text:
            raise MessageValidationError("Message cannot be empty")
        conv = self.get(conversation_id or self._active_id)
        history = [{"content": m.content, "is_user": m.is_user} for m in conv.messages]
        message = Message(id=_new_id(), content=text, is_user=True, timestamp=_now())
        if not history:
            conv.title = derive_title(text)
        conv.append(message)

        task = asyncio.get_running_loop().create_task(self._reply(conv, text, history))
        self._pending.setdefault(conv.id, set()).add(task)
        task.add_done_callback(functools.partial(self._forget, conv.id))
        return message

    def _forget(self, conversation_id: str, task: asyncio.Task) -> None:
        pending = self._pending.get(conversation_id)
        if pending is None:
            return
        pending.discard(task)
        if not pending:
            del self._pending[conversation_id]

    async def _reply(self, conv: Conversation, text: str, history: list[dict]) -> None:
        try:
            reply = await self.backend.reply(conv.id, text, history)
        except asyncio.CancelledError:
            logger.debug("Reply for conversation %s cancelled", conv.id)
            raise
        except Exception:
            logger.exception("Assistant reply failed for conversation %s", conv.id)
            return
        if not any(c is conv for c in self._conversations):
            return
        conv.append(Message(id=_new_id(), content=reply, is_user=False, timestamp=_now()))

    def pending_count(self, conversation_id: str | None = None) -> int:
        if conversation_id is not None:
            return len(self._pending.get(conversation_id, ()))
        return sum(len(tasks) for tasks in self._pending.values())

    async def drain(self) -> None:
        """Wait until no reply is pending."""
        while True:
            tasks = [t for tasks in self._pending.values() for t in tasks if not t.done()]
            if not tasks:
                return
            await asyncio.gather(*tasks, return_exceptions=True)

    def cancel_all(self) -> None:
        for tasks in self._pending.values():
            for task in tasks:
                task.cancel()
        self._pending.clear()
