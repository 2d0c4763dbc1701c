# mutualpool/services/custody.py
"""Value-transfer seam: where pooled funds are actually held."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Tuple

from mutualpool.core.exceptions import InvalidInputError, TransferFailedError
from mutualpool.core.logging import get_logger

logger = get_logger(__name__)


class FundCustody(ABC):
    """Holds the underlying funds. The ledger only keeps the books."""

    @property
    @abstractmethod
    def balance(self) -> int:
        """Funds currently held."""
        pass

    @abstractmethod
    def deposit(self, amount: int, sender: str):
        """Accept funds arriving with a call."""
        pass

    @abstractmethod
    def transfer(self, amount: int, to: str):
        """Send funds out. Raises TransferFailedError on rejection."""
        pass

    @abstractmethod
    def snapshot(self) -> Any:
        """Opaque marker of the current holdings."""
        pass

    @abstractmethod
    def restore(self, snapshot: Any):
        """Reverse every movement since ``snapshot`` was taken."""
        pass


class InMemoryCustody(FundCustody):
    """Custody kept in process memory, with per-identity payment records."""

    def __init__(self, opening_balance: int = 0):
        self._balance = opening_balance
        self.received: Dict[str, int] = {}
        self.disbursed: Dict[str, int] = {}

    @property
    def balance(self) -> int:
        return self._balance

    def deposit(self, amount: int, sender: str):
        if amount < 0:
            raise InvalidInputError("deposit must not be negative", field="amount")
        self._balance += amount
        self.received[sender] = self.received.get(sender, 0) + amount

    def transfer(self, amount: int, to: str):
        if amount > self._balance:
            raise TransferFailedError(to, amount, reason="custody balance too low")
        self._balance -= amount
        self.disbursed[to] = self.disbursed.get(to, 0) + amount
        logger.debug(f"Transferred {amount} to {to}")

    def snapshot(self) -> Tuple[int, Dict[str, int], Dict[str, int]]:
        return self._balance, dict(self.received), dict(self.disbursed)

    def restore(self, snapshot: Tuple[int, Dict[str, int], Dict[str, int]]):
        self._balance, self.received, self.disbursed = snapshot
