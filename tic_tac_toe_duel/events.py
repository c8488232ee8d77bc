import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar, cast

from tic_tac_toe_duel.board import PlayerSymbol
from tic_tac_toe_duel.rules import WinCombination

logger = logging.getLogger(__name__)


class Event:
    pass


@dataclass(frozen=True)
class MoveApplied(Event):
    player: PlayerSymbol
    index: int
    by_computer: bool = False


@dataclass(frozen=True)
class MoveRejected(Event):
    player: PlayerSymbol
    index: int
    error_msg: str


@dataclass(frozen=True)
class GameWon(Event):
    player: PlayerSymbol
    combination: WinCombination


@dataclass(frozen=True)
class GameDrawn(Event):
    pass


@dataclass(frozen=True)
class OpponentThinkingStarted(Event):
    player: PlayerSymbol
    delay: float


@dataclass(frozen=True)
class GameRestarted(Event):
    pass


@dataclass(frozen=True)
class ScoreChanged(Event):
    scores: dict[PlayerSymbol, int]


@dataclass(frozen=True)
class ProfileChanged(Event):
    name: str


@dataclass(frozen=True)
class ModeChanged(Event):
    mode: str


@dataclass(frozen=True)
class UiClick(Event):
    pass


E = TypeVar("E", bound=Event)


class EventBus:
    """Synchronous publish/subscribe keyed on the event's exact type."""

    def __init__(self) -> None:
        self._handlers: dict[type[Event], list[Callable[[Event], None]]] = {}

    def subscribe(self, event_type: type[E], handler: Callable[[E], None]) -> None:  # noqa: D102
        self._handlers.setdefault(event_type, []).append(cast("Callable[[Event], None]", handler))

    def unsubscribe(self, event_type: type[E], handler: Callable[[E], None]) -> None:  # noqa: D102
        handlers = self._handlers.get(event_type)
        if not handlers:
            return
        try:
            handlers.remove(cast("Callable[[Event], None]", handler))
        except ValueError:
            return
        if not handlers:
            self._handlers.pop(event_type, None)

    def publish(self, event: Event) -> None:
        """Deliver event to every handler, in subscription order, before returning."""
        handlers = self._handlers.get(type(event), []).copy()
        logger.debug("Publishing %s to %d handler(s)", event, len(handlers))
        for handler in handlers:
            handler(event)

    def close(self) -> None:  # noqa: D102
        self._handlers.clear()
