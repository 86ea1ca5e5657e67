"""
Emotion classification through the Hugging Face inference API.

The classifier is fail-open: whatever happens upstream, ``classify`` returns
an ``EmotionResult``. When no API key is configured it never touches the
network and answers ``neutral`` with full confidence.
"""
import logging
from dataclasses import dataclass
from typing import Any, List, Optional

import httpx

from mindjournal.config import HuggingFaceCredentials
from mindjournal.errors import UpstreamAIError

logger = logging.getLogger("services.emotion")

NEUTRAL_EMOTION = "neutral"
NEUTRAL_CONFIDENCE = 1.0


@dataclass(frozen=True)
class EmotionResult:
    emotion: str
    confidence: float
    ai_enabled: bool = True
    fallback_reason: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        return self.fallback_reason is not None


def _neutral(ai_enabled: bool, reason: str) -> EmotionResult:
    return EmotionResult(
        emotion=NEUTRAL_EMOTION,
        confidence=NEUTRAL_CONFIDENCE,
        ai_enabled=ai_enabled,
        fallback_reason=reason,
    )


def pick_top_emotion(scores: List[Any]) -> EmotionResult:
    """
    Return the label with the highest score.

    Ties keep the first element encountered; the upstream service does not
    promise any ordering, so equal scores are resolved by list position only.
    """
    # The inference API wraps single-input results in an outer list
    if isinstance(scores, list) and scores and isinstance(scores[0], list):
        scores = scores[0]
    if not isinstance(scores, list) or not scores:
        raise UpstreamAIError("Empty response from emotion classification service")

    best_label: Optional[str] = None
    best_score = -1.0
    for item in scores:
        if not isinstance(item, dict):
            raise UpstreamAIError("Invalid item in emotion classification response")
        label = item.get("label")
        score = item.get("score")
        if not isinstance(label, str) or not label.strip():
            raise UpstreamAIError("Emotion label missing from classification response")
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            raise UpstreamAIError(f"Score for {label!r} is not a number")
        if not 0.0 <= float(score) <= 1.0:
            raise UpstreamAIError(f"Score for {label!r} out of range: {score}")
        if float(score) > best_score:
            best_label, best_score = label.strip(), float(score)

    return EmotionResult(emotion=best_label or NEUTRAL_EMOTION, confidence=best_score)


class EmotionClassifier:
    def __init__(
        self,
        credentials: Optional[HuggingFaceCredentials] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._credentials = credentials
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return self._credentials is not None

    async def _request_scores(self, text: str) -> List[Any]:
        creds = self._credentials
        if creds is None:
            raise RuntimeError("HF_API_KEY is not configured")
        timeout = httpx.Timeout(creds.timeout_seconds)
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
                resp = await client.post(
                    creds.model_url,
                    json={"inputs": text},
                    headers={"Authorization": f"Bearer {creds.api_key}"},
                )
                resp.raise_for_status()
                payload = resp.json()
        except httpx.TimeoutException as exc:
            raise UpstreamAIError("Emotion classification timed out") from exc
        except httpx.HTTPStatusError as exc:
            raise UpstreamAIError(f"Emotion classification returned HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise UpstreamAIError(f"Emotion classification request failed: {exc}") from exc
        except ValueError as exc:
            raise UpstreamAIError("Emotion classification returned invalid JSON") from exc

        if not isinstance(payload, list):
            raise UpstreamAIError("Unexpected payload from emotion classification service")
        return payload

    async def classify(self, text: str) -> EmotionResult:
        if not self.enabled:
            logger.warning("HF_API_KEY not configured. Emotion classification disabled.")
            return _neutral(ai_enabled=False, reason="disabled")

        try:
            scores = await self._request_scores(text)
            result = pick_top_emotion(scores)
        except UpstreamAIError as exc:
            logger.warning("Emotion classification failed, using neutral: %s", exc)
            return _neutral(ai_enabled=True, reason="upstream_error")
        except Exception:
            logger.exception("Unexpected error during emotion classification, using neutral")
            return _neutral(ai_enabled=True, reason="upstream_error")

        logger.info("Emotion classified: %s (%.3f)", result.emotion, result.confidence)
        return result
