"""Voice input helpers. Speech capture itself happens in the browser."""
import re

# Checked in order; first match wins.
LANGUAGE_PATTERNS = (
    ("Spanish", re.compile(r"[ñáéíóúü]", re.IGNORECASE)),
    ("French", re.compile(r"[àâäéèêëïîôöùûüÿç]", re.IGNORECASE)),
    ("German", re.compile(r"[äöüß]", re.IGNORECASE)),
    ("Italian", re.compile(r"[àèéìíîòóù]", re.IGNORECASE)),
)
DEFAULT_LANGUAGE = "English"


def detect_language(text: str) -> str:
    for lang, pattern in LANGUAGE_PATTERNS:
        if pattern.search(text or ""):
            return lang
    return DEFAULT_LANGUAGE


def append_transcription(draft: str | None, text: str) -> str:
    draft = draft or ""
    return draft + (" " if draft else "") + text
