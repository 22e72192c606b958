"""Player balance and lifetime statistics."""

from dataclasses import dataclass
from typing import Any

STARTING_BALANCE = 1000


@dataclass
class BalanceLedger:
    """Balance in whole currency units plus win/game counters."""

    balance: int = STARTING_BALANCE
    wins: int = 0
    games_played: int = 0

    def apply_delta(self, amount: int) -> None:
        """Add ``amount`` (negative to deduct) to the balance."""
        if self.balance + amount < 0:
            raise ValueError("Balance cannot go negative")
        self.balance += amount

    def record_game(self, is_win: bool) -> None:
        """Count a resolved round."""
        self.games_played += 1
        if is_win:
            self.wins += 1

    def reset(self) -> None:
        """Restore the starting balance and zero the statistics."""
        self.balance = STARTING_BALANCE
        self.wins = 0
        self.games_played = 0

    @property
    def is_bankrupt(self) -> bool:
        return self.balance == 0

    def to_record(self) -> dict[str, Any]:
        """Serialize to the persisted record format."""
        return {
            "balance": self.balance,
            "stats": {"wins": self.wins, "gamesPlayed": self.games_played},
        }

    @classmethod
    def from_record(cls, record: Any) -> "BalanceLedger":
        """
        Restore a ledger from a persisted record.

        Falls back to a fresh ledger when the record is missing or malformed.
        """
        if not isinstance(record, dict):
            return cls()

        balance = record.get("balance")
        stats = record.get("stats")
        if not _is_count(balance) or not isinstance(stats, dict):
            return cls()

        wins = stats.get("wins")
        games_played = stats.get("gamesPlayed")
        if not _is_count(wins) or not _is_count(games_played):
            return cls()

        return cls(balance=balance, wins=wins, games_played=games_played)


def _is_count(value: Any) -> bool:
    """Check for a non-negative int (bools excluded)."""
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0
