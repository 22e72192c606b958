"""Round state enumeration."""

from enum import Enum, auto


class RoundState(Enum):
    """
    Round state machine states.

    Flow: BETTING → PLAYING → DEALER_TURN → RESOLVED → BETTING
    """

    # Accepting chips; the only state a round can start from
    BETTING = auto()

    # Player hits or stands
    PLAYING = auto()

    # Dealer draws to 17, one card per step
    DEALER_TURN = auto()

    # Outcome paid; stays here only when the player is bankrupt
    RESOLVED = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


# Valid state transitions
VALID_TRANSITIONS: dict[RoundState, list[RoundState]] = {
    RoundState.BETTING: [RoundState.PLAYING, RoundState.RESOLVED, RoundState.BETTING],  # RESOLVED on a natural
    RoundState.PLAYING: [RoundState.DEALER_TURN, RoundState.RESOLVED, RoundState.BETTING],
    RoundState.DEALER_TURN: [RoundState.RESOLVED],
    RoundState.RESOLVED: [RoundState.BETTING],
}


def is_valid_transition(from_state: RoundState, to_state: RoundState) -> bool:
    """
    Check if a state transition is valid.

    Args:
        from_state: Current state
        to_state: Desired state

    Returns:
        True if the transition is allowed
    """
    return to_state in VALID_TRANSITIONS.get(from_state, [])
