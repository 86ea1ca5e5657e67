from types import SimpleNamespace

import httpx
import pytest

from mindjournal import crud
from mindjournal.config import GroqCredentials, HuggingFaceCredentials, Settings
from mindjournal.errors import NotFoundError, PersistenceError, ValidationError
from mindjournal.schemas import JournalOut
from mindjournal.services.emotion_classifier import EmotionClassifier
from mindjournal.services.journal_service import JournalService, build_journal_service
from mindjournal.services.suggestion_generator import (
    UNAVAILABLE_SUGGESTION,
    SuggestionGenerator,
)

HF = HuggingFaceCredentials(api_key="hf_test", model_url="https://inference.test/emotion", timeout_seconds=1.0)
GROQ = GroqCredentials(api_key="gsk_test", model="test-model", timeout_seconds=1.0)


class RecordingCompletions:
    def __init__(self, content="Be gentle with yourself today."):
        self.content = content
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=self.content))])


def _offline_service() -> JournalService:
    return JournalService(EmotionClassifier(None), SuggestionGenerator(None))


def _live_service(handler, completions) -> JournalService:
    classifier = EmotionClassifier(HF, transport=httpx.MockTransport(handler))
    generator = SuggestionGenerator(GROQ, client=SimpleNamespace(chat=SimpleNamespace(completions=completions)))
    return JournalService(classifier, generator)


@pytest.mark.asyncio
async def test_unconfigured_ai_uses_fallbacks(owner_id):
    entry = await _offline_service().create_entry(owner_id, "I feel okay today")

    assert entry.emotion == "neutral"
    assert entry.confidence == 1.0
    assert entry.suggestion == UNAVAILABLE_SUGGESTION
    assert entry.owner_id == owner_id


@pytest.mark.asyncio
async def test_pipeline_feeds_classified_emotion_into_suggestion(owner_id):
    def handler(request):
        return httpx.Response(200, json=[{"label": "joy", "score": 0.2}, {"label": "sadness", "score": 0.9}])

    completions = RecordingCompletions()
    entry = await _live_service(handler, completions).create_entry(owner_id, "  I miss my friends  ")

    assert entry.content == "I miss my friends"
    assert (entry.emotion, entry.confidence) == ("sadness", pytest.approx(0.9))
    assert entry.suggestion == "Be gentle with yourself today."
    prompt = completions.calls[0]["messages"][1]["content"]
    assert "sadness" in prompt and "I miss my friends" in prompt


@pytest.mark.asyncio
async def test_classifier_timeout_still_persists(owner_id):
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    service = _live_service(handler, RecordingCompletions())
    entry = await service.create_entry(owner_id, "Rough commute")

    assert (entry.emotion, entry.confidence) == ("neutral", 1.0)
    stored = await crud.get_journal(entry.id, owner_id)
    assert stored is not None


@pytest.mark.asyncio
@pytest.mark.parametrize("content", ["", "   ", "\n\t", None])
async def test_blank_content_is_rejected_and_not_stored(owner_id, content):
    with pytest.raises(ValidationError):
        await _offline_service().create_entry(owner_id, content)
    assert await crud.get_journals(owner_id) == []


@pytest.mark.asyncio
async def test_persistence_failure_propagates(monkeypatch, owner_id):
    async def failing_create(*args, **kwargs):
        raise PersistenceError()

    monkeypatch.setattr(crud, "create_journal", failing_create)

    with pytest.raises(PersistenceError):
        await _offline_service().create_entry(owner_id, "This will not be saved")


@pytest.mark.asyncio
async def test_get_entry_round_trip(owner_id):
    service = _offline_service()
    created = await service.create_entry(owner_id, "Round trip")

    fetched = await service.get_entry(created.id, owner_id)

    assert JournalOut.model_validate(fetched) == JournalOut.model_validate(created)


@pytest.mark.asyncio
async def test_get_entry_of_other_owner_is_not_found(owner_id):
    service = _offline_service()
    created = await service.create_entry(owner_id, "Private thoughts")

    with pytest.raises(NotFoundError):
        await service.get_entry(created.id, "another-owner")
    with pytest.raises(NotFoundError):
        await service.get_entry("missing-id", "another-owner")


def test_build_service_selects_capabilities_from_settings():
    offline = build_journal_service(Settings(HF_API_KEY="", GROQ_API_KEY=""))
    assert offline.ai_status() == {"emotionClassification": False, "copingSuggestions": False}

    live = build_journal_service(Settings(HF_API_KEY="hf_x", GROQ_API_KEY="  "))
    assert live.ai_status() == {"emotionClassification": True, "copingSuggestions": False}
