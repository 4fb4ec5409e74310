"""One play session's parser: registry, unknown log, pipeline and dialogue."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Mapping
from typing import Any, Optional, Union

from life_parser.command.normalizer import Command, CommandNormalizer
from life_parser.config import Settings, settings as default_settings
from life_parser.dialogue.controller import DialogueController, Executor, Notifier
from life_parser.entities.types import Context
from life_parser.intent.recognizer import IntentRecognizer
from life_parser.intent.registry import VocabularyRegistry, default_vocabulary
from life_parser.intent.types import IntentDefinition, RecognitionResult
from life_parser.logging import get_logger
from life_parser.telemetry.unknown_log import UnknownInputLog

logger = get_logger(__name__)

ContextSource = Optional[Union[Context, Mapping[str, Any], Callable[[], Any]]]


class ParserSession:
    """Explicitly constructed parser state; sessions never share anything."""

    def __init__(
        self,
        executor: Executor | None = None,
        context: ContextSource = None,
        registry: VocabularyRegistry | None = None,
        notify: Notifier | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self.registry = (
            registry if registry is not None else default_vocabulary(self.settings)
        )
        self.unknown_log = UnknownInputLog(settings=self.settings)
        self.recognizer = IntentRecognizer(
            self.registry, unknown_log=self.unknown_log, settings=self.settings
        )
        self.normalizer = CommandNormalizer(self.recognizer, settings=self.settings)
        self._context = context
        self.dialogue = DialogueController(
            self.normalizer,
            executor=executor,
            notify=notify,
            context_provider=self.current_context,
        )
        self.history: deque[str] = deque(maxlen=max(1, self.settings.HISTORY_LIMIT))

    def current_context(self) -> Context:
        source = self._context
        if callable(source):
            source = source()
        return Context.coerce(source)

    def set_context(self, context: ContextSource) -> None:
        self._context = context

    def _context_for(self, context: Context | Mapping[str, Any] | None) -> Context:
        return Context.coerce(context) if context is not None else self.current_context()

    def recognize(
        self, text: object, context: Context | Mapping[str, Any] | None = None
    ) -> RecognitionResult:
        return self.recognizer.recognize(text, self._context_for(context))

    def normalize(
        self,
        result: RecognitionResult,
        context: Context | Mapping[str, Any] | None = None,
    ) -> Command:
        return self.normalizer.normalize(result, self._context_for(context))

    def parse(
        self, text: object, context: Context | Mapping[str, Any] | None = None
    ) -> Command:
        ctx = self._context_for(context)
        return self.normalizer.normalize(self.recognizer.recognize(text, ctx), ctx)

    def handle(
        self, text: object, context: Context | Mapping[str, Any] | None = None
    ) -> Command | None:
        """Process one player turn through the dialogue controller."""
        if isinstance(text, str) and text.strip():
            self.history.append(text)
        return self.dialogue.handle(text, self._context_for(context))

    def open_dialogue(
        self,
        kind: str,
        payload: Mapping[str, Any] | None = None,
        prompt: str | None = None,
    ) -> None:
        self.dialogue.open(kind, payload, prompt)

    def register_intent(
        self, name: str, definition: IntentDefinition | Mapping[str, Any]
    ) -> IntentDefinition:
        return self.registry.register(name, definition)

    def get_intents(self) -> dict[str, IntentDefinition]:
        return self.registry.intents()

    def get_unknown_inputs(self) -> list[str]:
        return self.unknown_log.entries()

    def clear_unknown_inputs(self) -> None:
        self.unknown_log.clear()
        logger.debug("Unknown-input log cleared")
