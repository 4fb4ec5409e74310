import pytest

from life_parser.dialogue.states import (
    STATE_TYPES,
    Clarification,
    IncompleteCommand,
    YesNo,
    build_state,
)


def test_state_kinds() -> None:
    assert set(STATE_TYPES) == {
        "incomplete_command",
        "confirmation",
        "clarification",
        "yes_no",
    }


def test_build_state_accepts_camel_case_keys() -> None:
    state = build_state(
        "yes_no",
        {"onConfirmToken": "accept", "onCancelToken": "decline", "extraContext": {"a": 1}},
        "Sure?",
    )

    assert state == YesNo(
        on_confirm="accept", on_cancel="decline", extra_context={"a": 1}, prompt="Sure?"
    )


def test_clarification_drops_blank_options() -> None:
    state = Clarification(action="move", options=["cafe", " ", "bank"])

    assert state.options == ["cafe", "bank"]


def test_incomplete_command_validates_slot() -> None:
    with pytest.raises(ValueError):
        IncompleteCommand(action="move", missing_slot="location")
