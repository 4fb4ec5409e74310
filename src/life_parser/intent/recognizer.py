from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from life_parser.config import Settings, settings as default_settings
from life_parser.entities.extractor import EntityExtractor
from life_parser.entities.types import Context, EntityValue
from life_parser.telemetry.unknown_log import UnknownInputLog
from life_parser.utils.text import normalize_input

from .classifier import IntentClassifier
from .registry import VocabularyRegistry
from .types import UNKNOWN_INTENT, RecognitionResult


class IntentRecognizer:
    """Classify a sentence, then extract only the winning intent's slots."""

    def __init__(
        self,
        registry: VocabularyRegistry,
        unknown_log: UnknownInputLog | None = None,
        extractor: EntityExtractor | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self.registry = registry
        # Empty logs are falsy, so compare against None
        if unknown_log is None:
            unknown_log = UnknownInputLog(settings=self.settings)
        if extractor is None:
            extractor = EntityExtractor(self.settings)
        self.unknown_log = unknown_log
        self.extractor = extractor
        self.classifier = IntentClassifier(registry, self.settings)

    def recognize(
        self, text: object, context: Context | Mapping[str, Any] | None = None
    ) -> RecognitionResult:
        raw = text if isinstance(text, str) else ""
        normalized = normalize_input(text)
        if not normalized:
            # Nothing worth logging
            return RecognitionResult(raw_input=raw)

        classified = self.classifier.classify(normalized)
        if classified.intent == UNKNOWN_INTENT:
            self.unknown_log.record(raw)
            return RecognitionResult(raw_input=raw)

        entities = self.extract_entities(
            classified.intent, normalized, Context.coerce(context)
        )
        return RecognitionResult(
            intent=classified.intent,
            entities=entities,
            raw_input=raw,
            confidence=classified.confidence,
        )

    def extract_entities(
        self, intent: str, text: str, context: Context | Mapping[str, Any] | None
    ) -> dict[str, EntityValue]:
        definition = self.registry.get(intent)
        if definition is None:
            return {}
        ctx = Context.coerce(context)
        verbs = frozenset(definition.keywords)
        entities: dict[str, EntityValue] = {}
        for slot in definition.slots:
            value = self.extractor.extract(slot, text, ctx, verbs)
            if value is not None:
                entities[slot] = value
        return entities
