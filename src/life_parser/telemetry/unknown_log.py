"""Bounded, de-duplicated record of utterances the classifier rejected."""

from __future__ import annotations

from collections import deque
from pathlib import Path

from life_parser.config import Settings, settings as default_settings
from life_parser.logging import get_logger
from life_parser.utils.jsonl import write_jsonl

logger = get_logger(__name__)


class UnknownInputLog:
    def __init__(
        self, capacity: int | None = None, settings: Settings | None = None
    ) -> None:
        cfg = settings or default_settings
        self.capacity = max(1, capacity or cfg.UNKNOWN_LOG_CAPACITY)
        self._entries: deque[str] = deque(maxlen=self.capacity)

    def record(self, raw_input: str) -> bool:
        """Append ``raw_input``; returns False for empty text or exact duplicates."""
        if not isinstance(raw_input, str) or not raw_input.strip():
            return False
        if raw_input in self._entries:
            return False
        # deque(maxlen) drops the oldest entry once full
        self._entries.append(raw_input)
        logger.info(f"Unknown intent: {raw_input!r}")
        return True

    def entries(self) -> list[str]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def export(self, path: str | Path) -> int:
        records = [
            {"index": idx, "input": text} for idx, text in enumerate(self._entries)
        ]
        write_jsonl(records, path)
        return len(records)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, item: object) -> bool:
        return item in self._entries
