"""Round state machine and its observable state."""

from blackjack.game.events import GameEvent, EventType
from blackjack.game.state import RoundState
from blackjack.game.snapshot import TableSnapshot
from blackjack.game.engine import RoundStateMachine

__all__ = [
    "GameEvent",
    "EventType",
    "RoundState",
    "TableSnapshot",
    "RoundStateMachine",
]
