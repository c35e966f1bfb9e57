"""Central config. Everything is read from the environment (.env is loaded once here)."""
import os
from dotenv import load_dotenv

load_dotenv()


def _int_env(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    return int(raw) if raw else default


def _float_env(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    return float(raw) if raw else default


def get_database_url() -> str:
    return (os.getenv("DATABASE_URL") or "").strip() or "sqlite:///./healthchat.db"


def get_jwt_secret() -> str:
    return (os.getenv("JWT_SECRET") or "").strip() or "change-me-in-production"


def get_jwt_expire_minutes() -> int:
    return _int_env("JWT_EXPIRE_MINUTES", 60 * 24)


def get_reply_delay_seconds() -> float:
    """Delay of the echo assistant before it answers."""
    return _float_env("REPLY_DELAY_SECONDS", 1.0)


def get_chat_backend() -> str:
    """echo | gemini"""
    return (os.getenv("CHAT_BACKEND") or "").strip().lower() or "echo"


def get_gemini_api_key() -> str | None:
    return (os.getenv("GEMINI_API_KEY") or "").strip() or None


def get_gemini_model() -> str:
    return (os.getenv("GEMINI_MODEL_NAME") or "").strip() or "gemini-1.5-flash"


def get_analysis_window_days() -> int:
    return _int_env("ANALYSIS_WINDOW_DAYS", 30)


def get_recent_records_limit() -> int:
    return _int_env("RECENT_RECORDS_LIMIT", 10)


def get_frontend_origins() -> list[str]:
    extra = os.getenv("FRONTEND_ORIGINS")
    if not extra:
        return ["*"]
    return [o.strip() for o in extra.split(",") if o.strip()]


def get_google_client_id() -> str | None:
    return (os.getenv("GOOGLE_CLIENT_ID") or "").strip() or None


def get_oauth_redirect_uri() -> str:
    return (os.getenv("OAUTH_REDIRECT_URI") or "").strip() or "http://localhost:5173/auth/callback"


def get_log_level() -> str:
    return (os.getenv("LOG_LEVEL") or "").strip().upper() or "INFO"
