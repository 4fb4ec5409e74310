"""Entity extraction for the fixed set of entity kinds.

Each kind is described by exactly one EntitySpec. It carries only the
data its own extraction needs (strip words, marker words, value sets) and
knows how to pull a single value out of normalized text. Extraction never
raises: a failed match is ``None``.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass

from life_parser.config import Settings, settings as default_settings
from life_parser.utils.text import (
    fold_accents,
    normalize_input,
    strip_edge_punctuation,
    strip_leading,
    tokenize,
)

from .types import (
    DIRECTIONS,
    AmountEntity,
    Context,
    DirectionEntity,
    DurationEntity,
    EntityKind,
    EntityValue,
    ResolvedEntity,
    TextEntity,
)

STOP_WORDS: frozenset[str] = frozenset(
    {
        "a",
        "an",
        "the",
        "to",
        "at",
        "in",
        "on",
        "for",
        "with",
        "from",
        "my",
        "your",
        "is",
        "are",
        "was",
        "were",
        "can",
        "could",
        "should",
        "would",
        "some",
        "please",
    }
)

ARTICLES: frozenset[str] = frozenset({"a", "an", "the", "my", "your", "some"})

_LOCATION_STRIP: frozenset[str] = frozenset(
    {
        "go",
        "walk",
        "move",
        "travel",
        "head",
        "run",
        "enter",
        "visit",
        "goto",
        "to",
        "at",
        "in",
        "into",
        "toward",
        "towards",
    }
) | ARTICLES

_CHARACTER_STRIP: frozenset[str] = frozenset(
    {
        "talk",
        "speak",
        "chat",
        "ask",
        "tell",
        "discuss",
        "greet",
        "converse",
        "to",
        "with",
    }
) | ARTICLES

_TARGET_STRIP: frozenset[str] = frozenset(
    {"check", "view", "show", "display", "examine", "inspect"}
)

_REST_WORDS: frozenset[str] = frozenset(
    {
        "sleep",
        "sleeping",
        "rest",
        "resting",
        "nap",
        "napping",
        "slumber",
        "bed",
    }
)

# $5,000 / 5000 / 2.5k / 2m; the suffix must end the word ("5 minutes" is 5).
_AMOUNT_RE = re.compile(
    r"\$?\s*(\d{1,3}(?:,\d{3})+|\d+)(\.\d+)?(?:([km])\b)?", re.IGNORECASE
)
_AMOUNT_MULTIPLIERS = {"k": 1_000, "m": 1_000_000}
_HOURS_RE = re.compile(r"(\d+)\s*(?:hours?|hrs?)\b")
_DIRECTION_RE = re.compile(r"\b(" + "|".join(DIRECTIONS) + r")\b")
_SEGMENT_SPLIT_RE = re.compile(r"[_\s\-]+")


class EntitySpec(ABC):
    kind: str

    @abstractmethod
    def extract(
        self,
        text: str,
        context: Context,
        verbs: frozenset[str],
        cfg: Settings,
    ) -> EntityValue | None: ...

    def rescan(
        self,
        text: str,
        context: Context,
        verbs: frozenset[str],
        cfg: Settings,
    ) -> EntityValue | None:
        """Second, whole-input pass used by the normalizer's fallback."""
        return self.extract(text, context, verbs, cfg)


@dataclass(frozen=True)
class ContextMatchSpec(EntitySpec):
    kind: str
    source: str
    strip_words: frozenset[str]

    def extract(self, text, context, verbs, cfg):
        cleaned = " ".join(strip_leading(tokenize(text), self.strip_words | verbs))
        return self._best_match(cleaned, context, cfg)

    def rescan(self, text, context, verbs, cfg):
        # Also accept short word prefixes: "talk to mar" -> maria_gonzalez
        ignored = self.strip_words | verbs | STOP_WORDS
        fragments = [
            word
            for word in map(strip_edge_punctuation, tokenize(fold_accents(text)))
            if len(word) >= 3 and word not in ignored
        ]
        return self._best_match(text, context, cfg, fragments)

    def _best_match(
        self,
        text: str,
        context: Context,
        cfg: Settings,
        fragments: list[str] | None = None,
    ) -> ResolvedEntity | None:
        table = context.table(self.source)
        text = fold_accents(text)
        if not text or not table:
            return None

        words = [
            strip_edge_punctuation(w)
            for w in tokenize(text)
            if len(strip_edge_punctuation(w)) >= cfg.PARTIAL_MIN_WORD_LENGTH
            and w not in STOP_WORDS
        ]
        best: tuple[str, str] | None = None
        best_conf = 0.0

        for key, entry in table.items():
            name = str((entry or {}).get("name") or key)
            key_l = fold_accents(key.lower())
            name_l = fold_accents(name.lower())
            conf = 0.0

            for form in {key_l, key_l.replace("_", " ")}:
                if form and form in text:
                    conf = max(conf, min(len(form) / len(text) + cfg.ID_MATCH_BONUS, 1.0))
            if name_l and name_l in text:
                conf = max(
                    conf, min(len(name_l) / len(text) + cfg.NAME_MATCH_BONUS, 1.0)
                )

            segments = [s for s in _SEGMENT_SPLIT_RE.split(key_l) if s]
            segments += [s for s in name_l.split() if s]
            if any(word in seg for word in words for seg in segments):
                conf = max(conf, cfg.PARTIAL_MATCH_CONFIDENCE)

            if fragments and any(
                seg.startswith(frag) for frag in fragments for seg in segments
            ):
                conf = max(conf, cfg.FRAGMENT_MATCH_CONFIDENCE)

            if conf > best_conf:
                best_conf = conf
                best = (key, name)

        if best is None or best_conf < cfg.ENTITY_MIN_CONFIDENCE:
            return None
        return ResolvedEntity(
            kind=self.kind, key=best[0], name=best[1], confidence=round(best_conf, 4)
        )


@dataclass(frozen=True)
class AmountSpec(EntitySpec):
    kind: str = EntityKind.AMOUNT.value

    def extract(self, text, context, verbs, cfg):
        for match in _AMOUNT_RE.finditer(text):
            number = float(match.group(1).replace(",", "") + (match.group(2) or ""))
            suffix = (match.group(3) or "").lower()
            value = int(number * _AMOUNT_MULTIPLIERS.get(suffix, 1))
            if value > 0:
                return AmountEntity(value=value)
        return None


@dataclass(frozen=True)
class DurationSpec(EntitySpec):
    kind: str = EntityKind.DURATION.value
    rest_words: frozenset[str] = _REST_WORDS

    def extract(self, text, context, verbs, cfg):
        for match in _HOURS_RE.finditer(text):
            hours = int(match.group(1))
            if hours > 0:
                return DurationEntity(hours=hours)
        tokens = {strip_edge_punctuation(t) for t in tokenize(text)}
        if tokens & self.rest_words:
            return DurationEntity(hours=cfg.DEFAULT_SLEEP_HOURS, confidence=0.7)
        return None


@dataclass(frozen=True)
class DirectionSpec(EntitySpec):
    kind: str = EntityKind.DIRECTION.value

    def extract(self, text, context, verbs, cfg):
        match = _DIRECTION_RE.search(text)
        return DirectionEntity(value=match.group(1)) if match else None


@dataclass(frozen=True)
class TopicSpec(EntitySpec):
    kind: str = EntityKind.TOPIC.value
    markers: tuple[str, ...] = ("about", "regarding")

    def extract(self, text, context, verbs, cfg):
        pattern = r"\b(?:" + "|".join(map(re.escape, self.markers)) + r")\s+(.+)"
        match = re.search(pattern, text)
        if not match:
            return None
        topic = strip_edge_punctuation(match.group(1))
        return TextEntity(kind=self.kind, value=topic, confidence=0.9) if topic else None


@dataclass(frozen=True)
class FreeTextSpec(EntitySpec):
    kind: str
    strip_words: frozenset[str] = frozenset()

    def extract(self, text, context, verbs, cfg):
        remaining = strip_leading(
            tokenize(text), self.strip_words | verbs | ARTICLES | STOP_WORDS
        )
        value = strip_edge_punctuation(" ".join(remaining))
        return TextEntity(kind=self.kind, value=value) if value else None


ENTITY_SPECS: dict[str, EntitySpec] = {
    EntityKind.LOCATION.value: ContextMatchSpec(
        kind=EntityKind.LOCATION.value, source="locations", strip_words=_LOCATION_STRIP
    ),
    EntityKind.CHARACTER.value: ContextMatchSpec(
        kind=EntityKind.CHARACTER.value,
        source="characters",
        strip_words=_CHARACTER_STRIP,
    ),
    EntityKind.AMOUNT.value: AmountSpec(),
    EntityKind.DURATION.value: DurationSpec(),
    EntityKind.DIRECTION.value: DirectionSpec(),
    EntityKind.TOPIC.value: TopicSpec(),
    EntityKind.TARGET.value: FreeTextSpec(
        kind=EntityKind.TARGET.value, strip_words=_TARGET_STRIP
    ),
    EntityKind.BUSINESS.value: FreeTextSpec(kind=EntityKind.BUSINESS.value),
}


class EntityExtractor:
    """Pulls one typed value per entity kind out of a sentence."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or default_settings

    def extract(
        self,
        kind: str,
        text: object,
        context: Context | None = None,
        verbs: Iterable[str] = (),
    ) -> EntityValue | None:
        spec = ENTITY_SPECS.get(kind)
        normalized = normalize_input(text)
        if spec is None or not normalized:
            return None
        if context is None:
            context = Context()
        return spec.extract(normalized, context, frozenset(verbs), self.settings)

    def rescan(
        self,
        kind: str,
        text: object,
        context: Context | None = None,
        verbs: Iterable[str] = (),
    ) -> EntityValue | None:
        spec = ENTITY_SPECS.get(kind)
        normalized = normalize_input(text)
        if spec is None or not normalized:
            return None
        if context is None:
            context = Context()
        return spec.rescan(normalized, context, frozenset(verbs), self.settings)

    def extract_all(
        self, text: object, context: Context | None = None
    ) -> dict[str, EntityValue]:
        """Run the context-independent and context-backed kinds over ``text``."""
        context = context if context is not None else Context()
        kinds = [
            EntityKind.LOCATION,
            EntityKind.CHARACTER,
            EntityKind.AMOUNT,
            EntityKind.DURATION,
            EntityKind.TOPIC,
            EntityKind.DIRECTION,
        ]
        found: dict[str, EntityValue] = {}
        for kind in kinds:
            value = self.extract(kind.value, text, context)
            if value is not None:
                found[kind.value] = value
        return found
