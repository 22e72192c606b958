"""Persistence port for the balance ledger."""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from typing import Any

logger = logging.getLogger(__name__)


class BalanceStore(ABC):
    """Abstract key/value store for the persisted ledger record."""

    @abstractmethod
    def load(self) -> dict[str, Any] | None:
        """Return the stored record, or None if nothing is stored."""
        ...

    @abstractmethod
    def save(self, record: dict[str, Any]) -> None:
        """Durably store the record."""
        ...


class InMemoryBalanceStore(BalanceStore):
    """Process-local store, used by tests and by the API session cache."""

    def __init__(self, record: dict[str, Any] | None = None) -> None:
        self.record = record
        self.saves = 0

    def load(self) -> dict[str, Any] | None:
        return self.record

    def save(self, record: dict[str, Any]) -> None:
        self.record = dict(record)
        self.saves += 1


class JsonFileBalanceStore(BalanceStore):
    """Stores the ledger record in a local JSON file.

    A missing, unreadable or corrupted file loads as None so the game starts
    from the default ledger.
    """

    def __init__(self, path: str | None = None) -> None:
        """Initialize the store.

        Args:
            path: Path to the file. Defaults to ~/.blackjack_balance.json
        """
        if path is None:
            path = os.path.join(os.path.expanduser("~"), ".blackjack_balance.json")
        self.path = path

    def load(self) -> dict[str, Any] | None:
        if not os.path.exists(self.path):
            return None

        # ValueError covers undecodable bytes, bad JSON and oversized ints
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not read balance file %s: %s", self.path, e)
            return None

    def save(self, record: dict[str, Any]) -> None:
        """Write the record to a temp file, then swap it into place."""
        directory = os.path.dirname(os.path.abspath(self.path))
        tmp_path = None
        try:
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=directory, suffix=".tmp", delete=False
            ) as f:
                tmp_path = f.name
                json.dump(record, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.warning("Could not write balance file %s: %s", self.path, e)
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)
