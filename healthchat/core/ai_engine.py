"""
Assistant reply backends.
- Contract: reply(conversation_id, text, history) -> reply text, asynchronously
- echo: fixed delay, answers 'This is a response to: "<text>"' (default, no AI wired in)
- gemini: Google Gemini via google-generativeai, last N messages sent as history
"""
import asyncio
import logging
from typing import Protocol, Sequence

import google.generativeai as genai

from healthchat.core.config import (
    get_chat_backend,
    get_gemini_api_key,
    get_gemini_model,
    get_reply_delay_seconds,
)

logger = logging.getLogger(__name__)

# Max messages sent to Gemini as history
MAX_CONTEXT_MESSAGES = 8

HEALTH_ASSISTANT_PROMPT = """You are a friendly personal health-journaling assistant.
Keep replies short and plain. You are not a doctor: for anything urgent or
serious, tell the user to contact a healthcare professional."""


class ReplyBackend(Protocol):
    async def reply(self, conversation_id: str, text: str, history: Sequence[dict] = ()) -> str:
        ...


class EchoBackend:
    def __init__(self, delay: float | None = None):
        self.delay = get_reply_delay_seconds() if delay is None else delay

    async def reply(self, conversation_id: str, text: str, history: Sequence[dict] = ()) -> str:
        if self.delay > 0:
            await asyncio.sleep(self.delay)
        return f'This is a response to: "{text}"'


class GeminiBackend:
    def __init__(self, api_key: str, model_name: str | None = None, system_prompt: str = HEALTH_ASSISTANT_PROMPT):
        genai.configure(api_key=api_key)
        self.model_name = model_name or get_gemini_model()
        self.model = genai.GenerativeModel(self.model_name, system_instruction=system_prompt)

    @staticmethod
    def build_history(history: Sequence[dict]) -> list[dict]:
        """Gemini chat history from {'content', 'is_user'} dicts, last N only."""
        recent = list(history)[-MAX_CONTEXT_MESSAGES:]
        return [
            {"role": "user" if m.get("is_user") else "model", "parts": [m.get("content", "")]}
            for m in recent
        ]

    async def reply(self, conversation_id: str, text: str, history: Sequence[dict] = ()) -> str:
        chat = self.model.start_chat(history=self.build_history(history))
        response = await chat.send_message_async(text)
        return response.text if response and response.text else "AI response empty."


def build_backend(name: str | None = None) -> ReplyBackend:
    name = (name or get_chat_backend()).lower()
    if name == "gemini":
        key = get_gemini_api_key()
        if key:
            return GeminiBackend(key)
        logger.warning("CHAT_BACKEND=gemini but GEMINI_API_KEY is not set, using echo backend")
    elif name != "echo":
        logger.warning("Unknown CHAT_BACKEND %r, using echo backend", name)
    return EchoBackend()
