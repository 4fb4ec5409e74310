from pathlib import Path

from life_parser.config import Settings
from life_parser.telemetry.unknown_log import UnknownInputLog
from life_parser.utils.jsonl import read_jsonl


def test_capacity_drops_oldest() -> None:
    log = UnknownInputLog()

    for i in range(60):
        log.record(f"gibberish {i}")

    entries = log.entries()
    assert log.capacity == 50
    assert len(entries) == 50
    assert entries[0] == "gibberish 10"
    assert entries[-1] == "gibberish 59"


def test_capacity_from_settings() -> None:
    log = UnknownInputLog(settings=Settings(UNKNOWN_LOG_CAPACITY=3))

    for text in ("a", "b", "c", "d"):
        log.record(text)

    assert log.entries() == ["b", "c", "d"]


def test_duplicates_and_blank_are_ignored() -> None:
    log = UnknownInputLog(capacity=5)

    assert log.record("flibber") is True
    assert log.record("flibber") is False
    assert log.record("   ") is False
    assert log.record("") is False
    assert log.record("Flibber") is True

    assert log.entries() == ["flibber", "Flibber"]
    assert "flibber" in log


def test_entries_is_a_copy() -> None:
    log = UnknownInputLog()
    log.record("flibber")

    log.entries().clear()

    assert len(log) == 1


def test_clear() -> None:
    log = UnknownInputLog()
    log.record("flibber")

    log.clear()

    assert log.entries() == []
    assert log.record("flibber") is True


def test_export_jsonl(tmp_path: Path) -> None:
    log = UnknownInputLog()
    log.record("flibber")
    log.record("juggle the oranges")

    path = tmp_path / "out" / "unknown.jsonl"
    count = log.export(path)

    assert count == 2
    assert read_jsonl(path) == [
        {"index": 0, "input": "flibber"},
        {"index": 1, "input": "juggle the oranges"},
    ]
