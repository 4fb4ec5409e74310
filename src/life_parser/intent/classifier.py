"""Weighted keyword/pattern intent classifier."""

from __future__ import annotations

from dataclasses import dataclass

from life_parser.config import Settings, settings as default_settings
from life_parser.utils.text import normalize_input, tokenize

from .registry import VocabularyRegistry
from .types import UNKNOWN_INTENT, ClassificationResult, IntentDefinition


@dataclass
class IntentScore:
    intent: str
    confidence: float
    matches: int
    priority: int


class IntentClassifier:
    def __init__(
        self, registry: VocabularyRegistry, settings: Settings | None = None
    ) -> None:
        self.registry = registry
        self.settings = settings or default_settings

    def score(self, text: str, name: str, definition: IntentDefinition) -> IntentScore | None:
        """Score one intent; ``None`` when nothing in it matched."""
        cfg = self.settings
        tokens = tokenize(text)
        if not tokens:
            return None

        score = 0.0
        matches = 0
        for keyword in definition.keywords:
            if keyword in tokens or keyword in text:
                score += cfg.KEYWORD_WEIGHT
                matches += 1
        for pattern in definition.patterns:
            if pattern in text:
                score += cfg.PATTERN_WEIGHT
                matches += 1
        if matches == 0:
            return None

        if tokens[0] in definition.keywords:
            score += cfg.START_BONUS

        if len(tokens) == 1 and tokens[0] in definition.keywords:
            # Exact one-word command. Unlike the sentence path this is not scaled
            # by priority, so every default keyword on its own stays at 0.95;
            # the cost is that a low-priority one-word command is as confident
            # as a high-priority one.
            confidence = cfg.SINGLE_WORD_CONFIDENCE
        else:
            confidence = score / (len(tokens) * cfg.TOKEN_NORMALIZER + 1)
            confidence *= definition.priority / cfg.PRIORITY_SCALE

        return IntentScore(
            intent=name,
            confidence=max(0.0, min(confidence, 1.0)),
            matches=matches,
            priority=definition.priority,
        )

    def scores(self, text: str) -> list[IntentScore]:
        """All candidates, best first (confidence, then priority, then name)."""
        normalized = normalize_input(text)
        candidates = [
            scored
            for name, definition in self.registry
            if (scored := self.score(normalized, name, definition)) is not None
        ]
        candidates.sort(key=lambda s: (-s.confidence, -s.priority, s.intent))
        return candidates

    def classify(self, text: str) -> ClassificationResult:
        candidates = self.scores(text)
        if not candidates:
            return ClassificationResult()
        best = candidates[0]
        if best.confidence < self.settings.MIN_INTENT_CONFIDENCE:
            return ClassificationResult(intent=UNKNOWN_INTENT, confidence=0.0)
        return ClassificationResult(intent=best.intent, confidence=best.confidence)
