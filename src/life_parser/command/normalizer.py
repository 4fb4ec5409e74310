"""Canonical command construction from recognition results."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from life_parser.config import Settings, settings as default_settings
from life_parser.entities.types import Context, EntityKind
from life_parser.intent.recognizer import IntentRecognizer
from life_parser.intent.types import UNKNOWN_INTENT, RecognitionResult

COMMAND_FIELDS: tuple[str, ...] = (
    "target",
    "direction",
    "topic",
    "amount",
    "duration",
    "input",
)
INTEGER_FIELDS: frozenset[str] = frozenset({"amount", "duration"})


@dataclass
class Command:
    """The wording-independent record handed to simulation handlers.

    Equality ignores ``original_input`` and ``confidence`` so the same request
    reached through different phrasings (or dialogue turns) compares equal.
    """

    action: str
    target: str | None = None
    direction: str | None = None
    topic: str | None = None
    amount: int | None = None
    duration: int | None = None
    input: str | None = None
    confirmed: bool = False
    details: dict[str, Any] = field(default_factory=dict)
    original_input: str = field(default="", compare=False)
    confidence: float = field(default=0.0, compare=False)

    @classmethod
    def from_data(cls, action: str, data: Mapping[str, Any], **extra: Any) -> Command:
        """Build a command, routing canonical keys to fields and the rest to details."""
        fields_ = {k: v for k, v in data.items() if k in COMMAND_FIELDS and v is not None}
        details = {k: v for k, v in data.items() if k not in COMMAND_FIELDS}
        details.update(extra.pop("details", None) or {})
        return cls(action=action, details=details, **fields_, **extra)

    def fields(self) -> dict[str, Any]:
        return {
            name: getattr(self, name)
            for name in COMMAND_FIELDS
            if getattr(self, name) is not None
        }

    def with_fields(self, **changes: Any) -> Command:
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"action": self.action, **self.fields()}
        if self.confirmed:
            out["confirmed"] = True
        if self.details:
            out["details"] = dict(self.details)
        out["original_input"] = self.original_input
        out["confidence"] = self.confidence
        return out


# Where each entity kind lands on the command; the first filled slot wins.
_SLOT_FIELDS: dict[str, str] = {
    EntityKind.LOCATION.value: "target",
    EntityKind.CHARACTER.value: "target",
    EntityKind.TARGET.value: "target",
    EntityKind.BUSINESS.value: "target",
    EntityKind.AMOUNT.value: "amount",
    EntityKind.DURATION.value: "duration",
    EntityKind.DIRECTION.value: "direction",
    EntityKind.TOPIC.value: "topic",
}

# Intents that get one whole-input re-scan when a slot came back empty
_FALLBACK_KINDS: dict[str, tuple[str, ...]] = {
    "move": (EntityKind.LOCATION.value,),
    "talk": (EntityKind.CHARACTER.value,),
    "loan": (EntityKind.AMOUNT.value,),
    "buy": (EntityKind.TARGET.value,),
}

# move is {target | direction}: a resolved target suppresses the direction
_EXCLUSIVE_FIELDS: dict[str, tuple[str, ...]] = {"move": ("target", "direction")}


class CommandNormalizer:
    def __init__(
        self, recognizer: IntentRecognizer, settings: Settings | None = None
    ) -> None:
        self.recognizer = recognizer
        self.settings = settings or default_settings

    def normalize(
        self,
        result: RecognitionResult,
        context: Context | Mapping[str, Any] | None = None,
        defaults: bool = True,
    ) -> Command:
        raw = result.raw_input or ""
        if result.intent == UNKNOWN_INTENT:
            return Command(
                action=UNKNOWN_INTENT,
                input=raw.strip().lower(),
                original_input=raw,
                confidence=result.confidence,
            )

        ctx = Context.coerce(context)
        definition = self.recognizer.registry.get(result.intent)
        slots = definition.slots if definition else list(result.entities)
        verbs = frozenset(definition.keywords) if definition else frozenset()

        values: dict[str, Any] = {}
        for slot in slots:
            entity = result.entities.get(slot)
            target_field = _SLOT_FIELDS.get(slot)
            if entity is None or target_field is None or target_field in values:
                continue
            values[target_field] = entity.value

        exclusive = _EXCLUSIVE_FIELDS.get(result.intent, ())
        if not any(name in values for name in exclusive):
            for kind in _FALLBACK_KINDS.get(result.intent, ()):
                if _SLOT_FIELDS[kind] in values:
                    continue
                entity = self.recognizer.extractor.rescan(kind, raw, ctx, verbs)
                if entity is not None:
                    values[_SLOT_FIELDS[kind]] = entity.value

        for name in exclusive[1:]:
            if exclusive[0] in values:
                values.pop(name, None)

        if defaults and result.intent == "sleep" and "duration" not in values:
            values["duration"] = self.settings.DEFAULT_SLEEP_HOURS

        return Command(
            action=result.intent,
            original_input=raw,
            confidence=result.confidence,
            **values,
        )

    def parse(
        self, text: object, context: Context | Mapping[str, Any] | None = None
    ) -> Command:
        ctx = Context.coerce(context)
        return self.normalize(self.recognizer.recognize(text, ctx), ctx)

    def normalize_fragment(
        self,
        action: str,
        text: str,
        context: Context | Mapping[str, Any] | None = None,
        defaults: bool = True,
    ) -> Command:
        """Read ``text`` as if it were the rest of an ``action`` sentence.

        With ``defaults=False`` nothing is filled in that the text did not say.
        """
        ctx = Context.coerce(context)
        entities = self.recognizer.extract_entities(action, text or "", ctx)
        result = RecognitionResult(
            intent=action, entities=entities, raw_input=text or "", confidence=1.0
        )
        return self.normalize(result, ctx, defaults=defaults)
