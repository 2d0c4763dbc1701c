# mutualpool/services/pool_ledger.py
"""
Pool ledger: the single source of truth for funds available to pay claims.

Every change to the pool balance goes through ``credit``, ``debit`` or
``drain_all`` so the non-negative balance and the conservation identity

    balance == premiums + contributions - payouts - drains

are enforced in one place.
"""

from typing import Dict

from mutualpool.core.exceptions import InvalidInputError, InsufficientPoolError
from mutualpool.core.logging import get_logger
from mutualpool.models.enums import LedgerEntryKind
from mutualpool.services.custody import FundCustody
from mutualpool.storage.ledger_store import LedgerStore

logger = get_logger(__name__)


class PoolLedger:

    def __init__(self, store: LedgerStore, custody: FundCustody):
        self.store = store
        self.custody = custody

    # ===================
    # Reads
    # ===================

    @property
    def balance(self) -> int:
        return self.store.state.pool_balance

    @property
    def totals(self) -> Dict[str, int]:
        return dict(self.store.state.totals)

    def contribution_of(self, identity: str) -> int:
        return self.store.state.contributions.get(identity, 0)

    def is_balanced(self) -> bool:
        state = self.store.state
        return state.pool_balance >= 0 and state.pool_balance == state.expected_balance()

    # ===================
    # Mutations
    # ===================

    def credit(self, amount: int, kind: LedgerEntryKind = LedgerEntryKind.PREMIUM):
        if amount <= 0:
            raise InvalidInputError("credit amount must be positive", field="amount")
        state = self.store.state
        state.pool_balance += amount
        self._add_total(kind, amount)
        self.store.touch()
        logger.debug(f"Credited {amount}", kind=kind.value, balance=state.pool_balance)

    def debit(self, amount: int, kind: LedgerEntryKind = LedgerEntryKind.PAYOUT):
        if amount <= 0:
            raise InvalidInputError("debit amount must be positive", field="amount")
        state = self.store.state
        if amount > state.pool_balance:
            raise InsufficientPoolError(amount, state.pool_balance)
        state.pool_balance -= amount
        self._add_total(kind, amount)
        self.store.touch()
        logger.debug(f"Debited {amount}", kind=kind.value, balance=state.pool_balance)

    def record_contribution(self, identity: str, amount: int) -> int:
        """Add to the contributor's running total. Never decremented."""
        if amount <= 0:
            raise InvalidInputError("contribution must be positive", field="amount")
        contributions = self.store.state.contributions
        contributions[identity] = contributions.get(identity, 0) + amount
        self.store.touch()
        return contributions[identity]

    def drain_all(self, administrator: str) -> int:
        """Zero the pool and send every held fund to the administrator.

        Returns the amount transferred out of custody.
        """
        state = self.store.state
        booked = state.pool_balance
        state.pool_balance = 0
        self._add_total(LedgerEntryKind.DRAIN, booked)
        self.store.touch()

        held = self.custody.balance
        if held > 0:
            self.custody.transfer(held, administrator)
        logger.warning(f"Pool drained to {administrator}", booked=booked, transferred=held)
        return held

    def _add_total(self, kind: LedgerEntryKind, amount: int):
        totals = self.store.state.totals
        totals[kind.value] = totals.get(kind.value, 0) + amount
