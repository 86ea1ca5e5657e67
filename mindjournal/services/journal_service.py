import logging
from typing import Dict, List

from mindjournal import crud
from mindjournal.config import Settings
from mindjournal.errors import NotFoundError, ValidationError
from mindjournal.models.models import JournalEntry
from mindjournal.services.emotion_classifier import EmotionClassifier
from mindjournal.services.suggestion_generator import SuggestionGenerator

logger = logging.getLogger("services.journal")


class JournalService:
    """Creates entries (classify -> suggest -> persist) and reads them back per owner."""

    def __init__(self, classifier: EmotionClassifier, generator: SuggestionGenerator):
        self.classifier = classifier
        self.generator = generator

    async def create_entry(self, owner_id: str, raw_content: str) -> JournalEntry:
        content = raw_content.strip() if isinstance(raw_content, str) else ""
        if not content:
            raise ValidationError("Content is required and cannot be empty")

        emotion = await self.classifier.classify(content)
        suggestion = await self.generator.suggest(emotion.emotion, content)

        # PersistenceError propagates unchanged; nothing was written before this point
        entry = await crud.create_journal(
            owner_id,
            content,
            emotion=emotion.emotion,
            confidence=emotion.confidence,
            suggestion=suggestion,
        )
        logger.info(
            "Journal entry %s saved for user %s (emotion=%s, fallback=%s)",
            entry.id,
            owner_id,
            emotion.emotion,
            emotion.is_fallback,
        )
        return entry

    async def list_entries(self, owner_id: str) -> List[JournalEntry]:
        return await crud.get_journals(owner_id)

    async def get_entry(self, entry_id: str, owner_id: str) -> JournalEntry:
        entry = await crud.get_journal(entry_id, owner_id)
        if entry is None:
            raise NotFoundError()
        return entry

    def ai_status(self) -> Dict[str, bool]:
        return {
            "emotionClassification": self.classifier.enabled,
            "copingSuggestions": self.generator.enabled,
        }


def build_journal_service(settings: Settings) -> JournalService:
    """Pick each AI capability once, from settings, at process start."""
    classifier = EmotionClassifier(settings.classifier_credentials())
    generator = SuggestionGenerator(settings.generator_credentials())
    logger.info(
        "AI features: emotion classification=%s, coping suggestions=%s",
        "on" if classifier.enabled else "off",
        "on" if generator.enabled else "off",
    )
    return JournalService(classifier, generator)
