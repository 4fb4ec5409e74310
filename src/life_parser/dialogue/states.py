"""The pending-dialogue variants. At most one is active per session."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

from life_parser.command.normalizer import COMMAND_FIELDS


@dataclass
class IncompleteCommand:
    kind: ClassVar[str] = "incomplete_command"
    action: str
    missing_slot: str
    partial_command_data: dict[str, Any] = field(default_factory=dict)
    prompt: str | None = None

    def __post_init__(self) -> None:
        if self.missing_slot not in COMMAND_FIELDS:
            raise ValueError(f"Unknown command field: {self.missing_slot!r}")


@dataclass
class Confirmation:
    kind: ClassVar[str] = "confirmation"
    action: str
    details: dict[str, Any] = field(default_factory=dict)
    prompt: str | None = None


@dataclass
class Clarification:
    kind: ClassVar[str] = "clarification"
    action: str
    options: list[str] = field(default_factory=list)
    extra_context: dict[str, Any] = field(default_factory=dict)
    prompt: str | None = None

    def __post_init__(self) -> None:
        self.options = [str(option) for option in self.options if str(option).strip()]
        if not self.options:
            raise ValueError("Clarification needs at least one option")


@dataclass
class YesNo:
    kind: ClassVar[str] = "yes_no"
    on_confirm: str
    on_cancel: str | None = None
    extra_context: dict[str, Any] = field(default_factory=dict)
    prompt: str | None = None


DialogueState = Union[IncompleteCommand, Confirmation, Clarification, YesNo]

STATE_TYPES: dict[str, type] = {
    cls.kind: cls for cls in (IncompleteCommand, Confirmation, Clarification, YesNo)
}

_KEY_ALIASES = {
    "missingSlot": "missing_slot",
    "partialCommandData": "partial_command_data",
    "extraContext": "extra_context",
    "onConfirmToken": "on_confirm",
    "onCancelToken": "on_cancel",
    "on_confirm_token": "on_confirm",
    "on_cancel_token": "on_cancel",
}


def build_state(
    kind: str, payload: Mapping[str, Any] | None = None, prompt: str | None = None
) -> DialogueState:
    """Construct a state from a kind name and a plain payload mapping."""
    cls = STATE_TYPES.get(kind)
    if cls is None:
        raise ValueError(f"Unknown dialogue kind: {kind!r}")
    data = {_KEY_ALIASES.get(k, k): v for k, v in (payload or {}).items()}
    if prompt is not None:
        data["prompt"] = prompt
    try:
        return cls(**data)
    except TypeError as exc:
        raise ValueError(f"Invalid payload for {kind!r}: {exc}") from exc
