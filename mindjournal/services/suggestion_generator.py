"""
Coping suggestions generated by a Groq-hosted chat model.

Like the emotion classifier this never raises: missing configuration, empty
completions and provider errors each map to a fixed supportive message.
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional

from groq import Groq

from mindjournal.config import GroqCredentials
from mindjournal.errors import UpstreamAIError

logger = logging.getLogger("services.suggestion")

UNAVAILABLE_SUGGESTION = (
    "AI-powered coping suggestions are currently unavailable. "
    "Consider talking to a trusted friend or professional about how you're feeling."
)
EMPTY_RESPONSE_SUGGESTION = (
    "I'm here to support you. Consider talking to someone about how you're feeling."
)
ERROR_SUGGESTION = (
    "I'm here to support you. Consider talking to a trusted friend or professional about how you're feeling."
)

SYSTEM_PROMPT = "You are a supportive mental health assistant."


def build_messages(emotion: str, content: str) -> List[Dict[str, str]]:
    prompt = (
        f"The user is feeling {emotion} about: {content}. "
        "Provide a brief, supportive coping suggestion."
    )
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": prompt},
    ]


class SuggestionGenerator:
    def __init__(self, credentials: Optional[GroqCredentials] = None, *, client: Any = None):
        self._credentials = credentials
        self._client = client

    @property
    def enabled(self) -> bool:
        return self._credentials is not None

    def _get_client(self) -> Any:
        if self._client is None:
            creds = self._credentials
            if creds is None:
                raise RuntimeError("GROQ_API_KEY is not configured")
            # One bounded attempt per entry; the SDK would otherwise retry twice
            self._client = Groq(api_key=creds.api_key, timeout=creds.timeout_seconds, max_retries=0)
            logger.debug("Groq client initialized.")
        return self._client

    def _chat(self, messages: List[Dict[str, str]]) -> Optional[str]:
        """Blocking completion call; returns the raw message content (may be empty)."""
        creds = self._credentials
        if creds is None:
            raise RuntimeError("GROQ_API_KEY is not configured")
        logger.debug("Sending chat request to Groq: model=%s", creds.model)
        try:
            resp = self._get_client().chat.completions.create(
                model=creds.model,
                messages=messages,
                temperature=creds.temperature,
                max_tokens=creds.max_tokens,
            )
        except Exception as exc:
            raise UpstreamAIError(f"Groq request failed: {exc}") from exc

        choices = getattr(resp, "choices", None)
        if not choices:
            return None
        message = getattr(choices[0], "message", None)
        return getattr(message, "content", None)

    async def suggest(self, emotion: str, content: str) -> str:
        if not self.enabled:
            logger.warning("GROQ_API_KEY not configured. Coping suggestions disabled.")
            return UNAVAILABLE_SUGGESTION

        try:
            text = await asyncio.to_thread(self._chat, build_messages(emotion, content))
        except UpstreamAIError as exc:
            logger.error("Error getting coping suggestion: %s", exc)
            return ERROR_SUGGESTION

        if not isinstance(text, str) or not text.strip():
            logger.warning("Groq returned empty content; using generic suggestion")
            return EMPTY_RESPONSE_SUGGESTION

        logger.info("Suggestion generated (len=%d)", len(text.strip()))
        return text.strip()
