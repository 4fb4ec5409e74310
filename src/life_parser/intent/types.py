from __future__ import annotations

import time
from dataclasses import dataclass, field

from life_parser.entities.types import ENTITY_KINDS, EntityValue

UNKNOWN_INTENT = "unknown"


@dataclass
class IntentDefinition:
    keywords: list[str]
    patterns: list[str] = field(default_factory=list)
    slots: list[str] = field(default_factory=list)  # entity kinds, in extraction order
    priority: int = 5

    def __post_init__(self) -> None:
        if not self.keywords:
            raise ValueError("Intent must have at least one keyword")
        self.keywords = _clean_terms(self.keywords, "keyword")
        self.patterns = _clean_terms(self.patterns, "pattern")
        self.slots = _clean_terms(self.slots, "entity slot")
        unknown = [slot for slot in self.slots if slot not in ENTITY_KINDS]
        if unknown:
            raise ValueError(f"Unknown entity slot(s): {', '.join(unknown)}")
        if int(self.priority) <= 0:
            raise ValueError("Intent priority must be positive")
        self.priority = int(self.priority)


def _clean_terms(values: list[str], label: str) -> list[str]:
    if isinstance(values, str):
        raise ValueError(f"Expected a list of {label}s, got a string")
    out: list[str] = []
    for value in values:
        text = str(value or "").strip().lower()
        if not text:
            raise ValueError(f"Empty {label} in intent definition")
        if text not in out:
            out.append(text)
    return out


@dataclass
class ClassificationResult:
    intent: str = UNKNOWN_INTENT
    confidence: float = 0.0  # 0..1


@dataclass
class RecognitionResult:
    intent: str = UNKNOWN_INTENT
    entities: dict[str, EntityValue] = field(default_factory=dict)
    raw_input: str = ""
    confidence: float = 0.0  # 0..1
    timestamp: float = field(default_factory=time.time)

    @property
    def is_unknown(self) -> bool:
        return self.intent == UNKNOWN_INTENT
