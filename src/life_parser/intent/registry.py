"""Vocabulary registry: the mutable table of intent definitions."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from life_parser.config import Settings, settings as default_settings
from life_parser.logging import get_logger

from .types import UNKNOWN_INTENT, IntentDefinition

logger = get_logger(__name__)

# Keywords stay unique across intents so an exact one-word command is never
# ambiguous.
_DEFAULT_VOCABULARY: dict[str, dict[str, Any]] = {
    "move": {
        "keywords": [
            "go",
            "walk",
            "move",
            "travel",
            "head",
            "run",
            "enter",
            "visit",
            "goto",
            "leave",
            "exit",
        ],
        "patterns": ["to", "toward", "towards"],
        "slots": ["location", "direction"],
        "priority": 10,
    },
    "look": {
        "keywords": ["look", "observe", "see", "survey"],
        "patterns": ["around", "at the room", "at surroundings"],
        "slots": [],
        "priority": 5,
    },
    "talk": {
        "keywords": [
            "talk",
            "speak",
            "chat",
            "ask",
            "tell",
            "discuss",
            "greet",
            "converse",
        ],
        "patterns": ["to", "with"],
        "slots": ["character", "topic"],
        "priority": 10,
    },
    "examine": {
        "keywords": ["check", "view", "show", "display", "examine", "inspect"],
        "patterns": ["my", "the"],
        "slots": ["target"],
        "priority": 8,
    },
    "work": {
        "keywords": ["work", "workout", "exercise", "train"],
        "patterns": ["at", "out"],
        "slots": [],
        "priority": 7,
    },
    "sleep": {
        "keywords": ["sleep", "rest", "nap", "slumber"],
        "patterns": [],
        "slots": ["duration"],
        "priority": 6,
    },
    "eat": {
        "keywords": ["eat", "drink", "consume", "have"],
        "patterns": ["food", "meal", "something"],
        "slots": ["target"],
        "priority": 6,
    },
    "loan": {
        "keywords": ["loan", "borrow"],
        "patterns": ["take", "get", "request", "for"],
        "slots": ["amount"],
        "priority": 9,
    },
    "apply": {
        "keywords": ["apply"],
        "patterns": ["for job", "for work", "for position"],
        "slots": [],
        "priority": 10,
    },
    "promote": {
        "keywords": ["promote", "promotion", "advance", "advancement"],
        "patterns": ["get", "request"],
        "slots": [],
        "priority": 8,
    },
    "careerinfo": {
        "keywords": ["career", "careerinfo"],
        "patterns": ["path", "info", "information", "details"],
        "slots": [],
        "priority": 7,
    },
    "buy": {
        "keywords": ["buy", "purchase", "acquire", "invest", "open"],
        "patterns": [],
        "slots": ["target", "business"],
        "priority": 9,
    },
    "help": {
        "keywords": ["help", "commands", "info", "?"],
        "patterns": [],
        "slots": [],
        "priority": 10,
    },
    "inventory": {
        "keywords": ["inventory", "inv", "items", "backpack", "bag"],
        "patterns": [],
        "slots": [],
        "priority": 10,
    },
    "jobs": {
        "keywords": ["jobs", "careers", "positions", "employment"],
        "patterns": [],
        "slots": [],
        "priority": 10,
    },
    "stats": {
        "keywords": ["stats", "status", "character", "profile"],
        "patterns": [],
        "slots": [],
        "priority": 10,
    },
    "save": {
        "keywords": ["save"],
        "patterns": ["game"],
        "slots": [],
        "priority": 10,
    },
    "load": {
        "keywords": ["load"],
        "patterns": ["game"],
        "slots": [],
        "priority": 10,
    },
}


def _coerce_definition(
    definition: IntentDefinition | Mapping[str, Any], cfg: Settings
) -> IntentDefinition:
    if isinstance(definition, IntentDefinition):
        return definition
    if not isinstance(definition, Mapping):
        raise ValueError("Intent definition must be a mapping or IntentDefinition")
    keywords = definition.get("keywords")
    if not isinstance(keywords, (list, tuple)):
        raise ValueError("Intent must have keywords array")
    slots = definition.get("slots", definition.get("entities", []))
    priority = definition.get("priority")
    return IntentDefinition(
        keywords=list(keywords),
        patterns=list(definition.get("patterns") or []),
        slots=list(slots or []),
        priority=cfg.DEFAULT_PRIORITY if priority is None else priority,
    )


class VocabularyRegistry:
    """Ordered name -> IntentDefinition table, extendable at runtime."""

    def __init__(
        self,
        definitions: Mapping[str, IntentDefinition | Mapping[str, Any]] | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self._intents: dict[str, IntentDefinition] = {}
        for name, definition in (definitions or {}).items():
            self._store(name, definition)

    def register(
        self, name: str, definition: IntentDefinition | Mapping[str, Any]
    ) -> IntentDefinition:
        stored = self._store(name, definition)
        logger.info(
            f"Registered intent '{name}' ({len(stored.keywords)} keywords, "
            f"priority {stored.priority})"
        )
        return stored

    def _store(
        self, name: str, definition: IntentDefinition | Mapping[str, Any]
    ) -> IntentDefinition:
        key = (name or "").strip().lower() if isinstance(name, str) else ""
        if not key:
            raise ValueError("Intent name is required")
        if key == UNKNOWN_INTENT:
            raise ValueError(f"'{UNKNOWN_INTENT}' is reserved")
        stored = _coerce_definition(definition, self.settings)
        self._intents[key] = stored
        return stored

    def get(self, name: str) -> IntentDefinition | None:
        return self._intents.get(name)

    def intents(self) -> dict[str, IntentDefinition]:
        return dict(self._intents)

    def __contains__(self, name: object) -> bool:
        return name in self._intents

    def __iter__(self) -> Iterator[tuple[str, IntentDefinition]]:
        return iter(list(self._intents.items()))

    def __len__(self) -> int:
        return len(self._intents)


def default_vocabulary(settings: Settings | None = None) -> VocabularyRegistry:
    return VocabularyRegistry(_DEFAULT_VOCABULARY, settings=settings)
