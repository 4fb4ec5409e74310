"""Single-slot dialogue state machine.

While a state is pending every raw input is routed to it until it resolves,
or the player cancels. With nothing pending, input goes through the normal
recognize -> normalize -> execute path.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from life_parser.command.normalizer import INTEGER_FIELDS, Command, CommandNormalizer
from life_parser.entities.types import Context, EntityKind
from life_parser.logging import get_logger
from life_parser.utils.text import normalize_input

from .states import (
    Clarification,
    Confirmation,
    DialogueState,
    IncompleteCommand,
    YesNo,
    build_state,
)

logger = get_logger(__name__)

Executor = Callable[[Command], None]
Notifier = Callable[[str], None]
DialogueCallback = Callable[[dict[str, Any]], None]
ContextProvider = Callable[[], Any]

CANCEL_WORDS: frozenset[str] = frozenset({"cancel", "quit", "exit"})
YES_WORDS: frozenset[str] = frozenset({"yes", "y"})
NO_WORDS: frozenset[str] = frozenset({"no", "n"})

# Entity kinds that can answer a prompt for each command field
_FIELD_KINDS: dict[str, tuple[str, ...]] = {
    "target": (EntityKind.LOCATION.value, EntityKind.CHARACTER.value),
    "direction": (EntityKind.DIRECTION.value,),
    "topic": (EntityKind.TOPIC.value,),
    "amount": (EntityKind.AMOUNT.value,),
    "duration": (EntityKind.DURATION.value,),
}

CANCELLED_MESSAGE = "Cancelled."
YES_NO_MESSAGE = "Please answer yes or no."
INVALID_STATE_MESSAGE = "Something went wrong with the pending question; it has been cleared."


def _log_notice(message: str) -> None:
    logger.info(f"[dialogue] {message}")


def _kind_of(state: object) -> str:
    return getattr(state, "kind", type(state).__name__)


def _drop_command(command: Command) -> None:
    logger.warning(f"No executor configured; dropping command {command.action!r}")


class DialogueController:
    def __init__(
        self,
        normalizer: CommandNormalizer,
        executor: Executor | None = None,
        notify: Notifier | None = None,
        context_provider: ContextProvider | None = None,
    ) -> None:
        self.normalizer = normalizer
        self.executor: Executor = executor or _drop_command
        self.notify: Notifier = notify or _log_notice
        self.context_provider = context_provider
        self._state: DialogueState | None = None
        self._callbacks: dict[str, DialogueCallback] = {}

    @property
    def state(self) -> DialogueState | None:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is not None

    def register_callback(self, token: str, callback: DialogueCallback) -> None:
        if not token:
            raise ValueError("Callback token is required")
        self._callbacks[token] = callback

    def open(
        self,
        kind: str,
        payload: Mapping[str, Any] | None = None,
        prompt: str | None = None,
    ) -> DialogueState:
        """Open a pending dialogue; used by simulation handlers."""
        return self.open_state(build_state(kind, payload, prompt))

    def open_state(self, state: DialogueState) -> DialogueState:
        if self._state is not None:
            # Last write wins
            logger.warning(
                f"Replacing pending {_kind_of(self._state)} dialogue with {_kind_of(state)}"
            )
        self._state = state
        logger.info(f"Opened {_kind_of(state)} dialogue")
        if getattr(state, "prompt", None):
            self.notify(state.prompt)
        return state

    def clear(self) -> None:
        self._state = None

    def handle(
        self, text: object, context: Context | Mapping[str, Any] | None = None
    ) -> Command | None:
        """Consume one raw input; returns the command dispatched this turn, if any."""
        ctx = self._resolve_context(context)
        if self._state is None:
            if not normalize_input(text):
                return None
            command = self.normalizer.parse(text, ctx)
            self.executor(command)
            return command

        reply = normalize_input(text)
        if reply in CANCEL_WORDS:
            logger.info(f"Cancelled {_kind_of(self._state)} dialogue")
            self.clear()
            self.notify(CANCELLED_MESSAGE)
            return None

        state = self._state
        if isinstance(state, IncompleteCommand):
            return self._handle_incomplete(state, text, ctx)
        if isinstance(state, Confirmation):
            return self._handle_confirmation(state, reply)
        if isinstance(state, Clarification):
            return self._handle_clarification(state, reply)
        if isinstance(state, YesNo):
            return self._handle_yes_no(state, reply)

        logger.error(f"Unrecognized dialogue state {state!r}; clearing")
        self.clear()
        self.notify(INVALID_STATE_MESSAGE)
        return None

    def _resolve_context(self, context: Context | Mapping[str, Any] | None) -> Context:
        if context is None and self.context_provider is not None:
            context = self.context_provider()
        return Context.coerce(context)

    def _dispatch(self, command: Command) -> Command:
        logger.info(f"Dialogue resolved into {command.action!r}")
        self.executor(command)
        return command

    def _handle_incomplete(
        self, state: IncompleteCommand, text: object, ctx: Context
    ) -> Command | None:
        raw = text.strip() if isinstance(text, str) else ""
        slot = state.missing_slot
        value: Any = None
        if raw:
            parsed = self.normalizer.normalize_fragment(
                state.action, raw, ctx, defaults=False
            )
            value = getattr(parsed, slot)
            if value is None:
                value = self._read_slot(slot, raw, ctx)
            if value is None and slot not in INTEGER_FIELDS:
                value = raw
        if value is None:
            logger.debug(f"Could not read {slot!r} from {raw!r}")
            self.notify(f"Please provide the {slot}.")
            return None

        self.clear()
        data = {**state.partial_command_data, slot: value}
        return self._dispatch(Command.from_data(state.action, data, original_input=raw))

    def _read_slot(self, slot: str, raw: str, ctx: Context) -> Any:
        """Read the reply as the missing field itself, whatever the action declares."""
        extractor = self.normalizer.recognizer.extractor
        for kind in _FIELD_KINDS.get(slot, ()):
            entity = extractor.extract(kind, raw, ctx)
            if entity is not None:
                return entity.value
        return None

    def _handle_confirmation(self, state: Confirmation, reply: str) -> Command | None:
        if reply in YES_WORDS:
            self.clear()
            command = Command.from_data(
                state.action, state.details, confirmed=True, details=state.details
            )
            return self._dispatch(command)
        if reply in NO_WORDS:
            self.clear()
            self.notify(CANCELLED_MESSAGE)
            return None
        logger.debug(f"Expected yes/no, got {reply!r}")
        self.notify(YES_NO_MESSAGE)
        return None

    def _handle_clarification(self, state: Clarification, reply: str) -> Command | None:
        selected = self._select_option(state.options, reply)
        if selected is None:
            logger.debug(f"Invalid selection {reply!r}")
            self.notify(
                f"Invalid selection. Choose 1-{len(state.options)} or type one of: "
                + ", ".join(state.options)
            )
            return None
        self.clear()
        command = Command.from_data(
            state.action, {"target": selected}, details=state.extra_context
        )
        return self._dispatch(command)

    @staticmethod
    def _select_option(options: list[str], reply: str) -> str | None:
        if not reply:
            return None
        if reply.isdecimal():
            index = int(reply)
            return options[index - 1] if 1 <= index <= len(options) else None
        lowered = [option.lower() for option in options]
        if reply in lowered:
            return options[lowered.index(reply)]
        for option, low in zip(options, lowered):
            if reply in low or low in reply:
                return option
        return None

    def _handle_yes_no(self, state: YesNo, reply: str) -> Command | None:
        if reply in YES_WORDS:
            token: str | None = state.on_confirm
        elif reply in NO_WORDS:
            token = state.on_cancel
            if token is None:
                self.clear()
                self.notify(CANCELLED_MESSAGE)
                return None
        else:
            logger.debug(f"Expected yes/no, got {reply!r}")
            self.notify(YES_NO_MESSAGE)
            return None

        self.clear()
        callback = self._callbacks.get(token or "")
        if callback is None:
            logger.error(f"No callback registered for token {token!r}")
            self.notify(INVALID_STATE_MESSAGE)
            return None
        logger.info(f"Yes/no dialogue resolved via {token!r}")
        callback(dict(state.extra_context))
        return None
