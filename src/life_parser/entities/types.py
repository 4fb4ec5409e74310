"""Entity value variants and the content context they are resolved against."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, ClassVar, Union


class EntityKind(str, Enum):
    LOCATION = "location"
    CHARACTER = "character"
    AMOUNT = "amount"
    DURATION = "duration"
    DIRECTION = "direction"
    TOPIC = "topic"
    TARGET = "target"
    BUSINESS = "business"


ENTITY_KINDS: frozenset[str] = frozenset(kind.value for kind in EntityKind)

DIRECTIONS: tuple[str, ...] = ("north", "south", "east", "west", "up", "down")


@dataclass(frozen=True)
class ResolvedEntity:
    """A location or character resolved against the context tables."""

    kind: str
    key: str
    name: str
    confidence: float

    @property
    def value(self) -> str:
        return self.key


@dataclass(frozen=True)
class AmountEntity:
    kind: ClassVar[str] = EntityKind.AMOUNT.value
    value: int
    confidence: float = 0.9


@dataclass(frozen=True)
class DurationEntity:
    kind: ClassVar[str] = EntityKind.DURATION.value
    hours: int
    confidence: float = 0.95

    @property
    def value(self) -> int:
        return self.hours


@dataclass(frozen=True)
class DirectionEntity:
    kind: ClassVar[str] = EntityKind.DIRECTION.value
    value: str
    confidence: float = 0.95


@dataclass(frozen=True)
class TextEntity:
    """Free-form topic/target/business text."""

    kind: str
    value: str
    confidence: float = 0.8


EntityValue = Union[
    ResolvedEntity, AmountEntity, DurationEntity, DirectionEntity, TextEntity
]


def _coerce_table(table: Any) -> dict[str, dict[str, Any]]:
    if not isinstance(table, Mapping):
        return {}
    out: dict[str, dict[str, Any]] = {}
    for key, entry in table.items():
        key_str = str(key).strip()
        if not key_str:
            continue
        if isinstance(entry, Mapping):
            data = dict(entry)
        else:
            data = {}
        name = data.get("name")
        data["name"] = str(name) if name else key_str
        out[key_str] = data
    return out


@dataclass
class Context:
    """Known locations and characters supplied fresh for each recognition call.

    ``characters`` is ``None`` while character content has not been loaded.
    """

    locations: dict[str, dict[str, Any]] = field(default_factory=dict)
    characters: dict[str, dict[str, Any]] | None = None

    @classmethod
    def coerce(cls, value: Context | Mapping[str, Any] | None) -> Context:
        if isinstance(value, Context):
            return value
        if not isinstance(value, Mapping):
            return cls()
        characters = value.get("characters")
        return cls(
            locations=_coerce_table(value.get("locations")),
            characters=_coerce_table(characters) if characters is not None else None,
        )

    def table(self, source: str) -> dict[str, dict[str, Any]]:
        if source == "characters":
            return self.characters or {}
        return self.locations


def entity_to_dict(entity: EntityValue) -> dict[str, Any]:
    data = asdict(entity)
    data["kind"] = entity.kind
    data["value"] = entity.value
    return data
