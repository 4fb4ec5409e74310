from typing import Any

from life_parser.command.normalizer import Command
from life_parser.config import Settings
from life_parser.entities.types import Context
from life_parser.intent.registry import VocabularyRegistry
from life_parser.session import ParserSession


def test_sessions_share_nothing() -> None:
    first = ParserSession()
    second = ParserSession()

    first.recognize("juggle the oranges")
    first.register_intent("dance", {"keywords": ["dance"]})
    first.open_dialogue("yes_no", {"on_confirm": "accept"})

    assert second.get_unknown_inputs() == []
    assert "dance" not in second.get_intents()
    assert not second.dialogue.is_active


def test_context_provider_is_read_each_turn(content: dict[str, Any]) -> None:
    current: dict[str, Any] = {"locations": {}}
    session = ParserSession(context=lambda: current)

    assert session.parse("go to cafe") == Command(action="move")

    current = content
    assert session.parse("go to cafe") == Command(action="move", target="cafe")
    assert session.current_context().locations["cafe"]["name"] == "Coffee Bean Café"


def test_explicit_context_overrides_session_context(content: dict[str, Any]) -> None:
    session = ParserSession(context=content)

    result = session.recognize("go to the bank", {"locations": {"vault": {}}})

    assert "location" not in result.entities


def test_set_context(content: dict[str, Any]) -> None:
    session = ParserSession()
    session.set_context(Context.coerce(content))

    assert session.parse("visit the central park").target == "city_park"


def test_history_is_bounded() -> None:
    session = ParserSession(settings=Settings(HISTORY_LIMIT=3))

    for text in ("look", "", "sleep", "   ", "stats", "help"):
        session.handle(text)

    assert list(session.history) == ["sleep", "stats", "help"]


def test_unknown_inputs_roundtrip(session: ParserSession) -> None:
    session.handle("juggle the oranges")
    session.handle("look")

    assert session.get_unknown_inputs() == ["juggle the oranges"]
    session.clear_unknown_inputs()
    assert session.get_unknown_inputs() == []


def test_register_intent_through_session(
    session: ParserSession, executed: list[Command]
) -> None:
    session.register_intent("dance", {"keywords": ["dance"], "slots": ["location"]})

    session.handle("dance")

    assert executed == [Command(action="dance")]
    assert "dance" in session.get_intents()


def test_session_log_is_the_recognizer_log() -> None:
    session = ParserSession()

    session.recognize("juggle the oranges")

    assert session.recognizer.unknown_log is session.unknown_log
    assert session.get_unknown_inputs() == ["juggle the oranges"]


def test_empty_registry_is_kept() -> None:
    registry = VocabularyRegistry()
    session = ParserSession(registry=registry)

    assert session.registry is registry
    assert session.get_intents() == {}
    assert session.parse("look") == Command(action="unknown", input="look")
