"""Domain events — what happened in the game, for whoever wants to know.

Model operations only append events to ``state.pending_events``. The
presentation layer drains them after each action and decides what to show
and what to forward to the notifier.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from tapgame.engine.game_state import GameState


@dataclass(frozen=True)
class QuestCompleted:
    quest_id: str
    quest_name: str
    reward: int


@dataclass(frozen=True)
class LevelUp:
    new_level: int


@dataclass(frozen=True)
class PrizeWon:
    prize_name: str


GameEvent = Union[QuestCompleted, LevelUp, PrizeWon]


def drain_events(state: GameState) -> list[GameEvent]:
    """Return all pending events in emission order and clear the outbox."""
    events = list(state.pending_events)
    state.pending_events.clear()
    return events


def describe(event: GameEvent) -> str:
    """One-line plain text summary, used for toasts and the web feed."""
    if isinstance(event, QuestCompleted):
        return f"Quest complete: {event.quest_name}! +{event.reward} coins"
    if isinstance(event, LevelUp):
        return f"Level up! Your character is now level {event.new_level}"
    if isinstance(event, PrizeWon):
        return f"You won a prize: {event.prize_name}!"
    raise TypeError(f"Not a game event: {event!r}")
