"""
One SessionContext per signed-in user: conversations, view mode, selected model
and preferences. Held in process memory by the SessionRegistry.
"""
import logging
from dataclasses import dataclass, field, asdict

from healthchat.core.ai_engine import ReplyBackend, build_backend
from healthchat.core.conversations import ConversationManager

logger = logging.getLogger(__name__)

VIEW_MODES = ("chat", "tracker")
DEFAULT_MODEL = "GPT-4"


@dataclass
class Preferences:
    theme: str = "System"
    language: str = "Auto-detect"
    voice: str = "Ember"
    follow_up_suggestions: bool = True
    email_notifications: bool = True
    push_notifications: bool = False
    data_sharing: bool = False
    two_factor_auth: bool = False

    def to_dict(self) -> dict:
        d = asdict(self)
        return {
            "theme": d["theme"],
            "language": d["language"],
            "voice": d["voice"],
            "followUpSuggestions": d["follow_up_suggestions"],
            "emailNotifications": d["email_notifications"],
            "pushNotifications": d["push_notifications"],
            "dataSharing": d["data_sharing"],
            "twoFactorAuth": d["two_factor_auth"],
        }


@dataclass
class SessionContext:
    user_id: str
    conversations: ConversationManager
    view_mode: str = "chat"
    selected_model: str = DEFAULT_MODEL
    preferences: Preferences = field(default_factory=Preferences)

    def set_view(self, view: str) -> None:
        if view not in VIEW_MODES:
            raise ValueError(f"Unknown view mode: {view}")
        self.view_mode = view

    def update_preferences(self, changes: dict) -> None:
        for key, value in changes.items():
            if value is None:
                continue
            if key == "selected_model":
                self.selected_model = value
            elif hasattr(self.preferences, key):
                setattr(self.preferences, key, value)


class SessionRegistry:
    def __init__(self, backend: ReplyBackend | None = None):
        self._backend = backend
        self._sessions: dict[str, SessionContext] = {}

    @property
    def backend(self) -> ReplyBackend:
        if self._backend is None:
            self._backend = build_backend()
        return self._backend

    def get(self, user_id: str) -> SessionContext:
        ctx = self._sessions.get(user_id)
        if ctx is None:
            ctx = SessionContext(user_id=user_id, conversations=ConversationManager(self.backend))
            self._sessions[user_id] = ctx
            logger.info("Opened session for user %s", user_id)
        return ctx

    def drop(self, user_id: str) -> None:
        ctx = self._sessions.pop(user_id, None)
        if ctx:
            ctx.conversations.cancel_all()

    def clear(self) -> None:
        for user_id in list(self._sessions):
            self.drop(user_id)


_registry: SessionRegistry | None = None


def get_session_registry() -> SessionRegistry:
    global _registry
    if _registry is None:
        _registry = SessionRegistry()
    return _registry


def reset_session_registry(backend: ReplyBackend | None = None) -> SessionRegistry:
    """Fresh registry (tests, shutdown)."""
    global _registry
    if _registry is not None:
        _registry.clear()
    _registry = SessionRegistry(backend)
    return _registry
