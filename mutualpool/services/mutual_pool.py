# mutualpool/services/mutual_pool.py
"""
Public entry points of the mutual pool.

Every mutating operation runs as one transaction: a process-wide lock is held
for its whole duration, the stores journal what they overwrite, and any raised
error rolls the stores and custody back and drops the operation's events.
State reaches disk only at the end, ledger counters first; if a later file
fails to write, the files already written are rewritten from the rolled-back
state. Reads do not take the lock.
"""

import threading
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from mutualpool.core.clock import Clock, SystemClock
from mutualpool.core.config import Settings
from mutualpool.core.exceptions import (
    MutualPoolException, InvalidInputError, UnauthorizedError
)
from mutualpool.core.logging import get_logger
from mutualpool.models.claim import Claim
from mutualpool.models.enums import EventType, LedgerEntryKind
from mutualpool.models.events import LedgerEvent
from mutualpool.models.policy import Policy
from mutualpool.services.claim_workflow import ClaimWorkflow
from mutualpool.services.custody import FundCustody, InMemoryCustody
from mutualpool.services.events import EventLog
from mutualpool.services.policy_registry import PolicyRegistry
from mutualpool.services.pool_ledger import PoolLedger
from mutualpool.storage.claim_store import ClaimStore
from mutualpool.storage.ledger_store import LedgerStore
from mutualpool.storage.policy_store import PolicyStore

logger = get_logger(__name__)


class MutualPool:

    def __init__(
        self,
        settings: Settings,
        data_dir: Optional[str] = None,
        clock: Optional[Clock] = None,
        custody: Optional[FundCustody] = None
    ):
        self.administrator = settings.ADMIN_IDENTITY
        self.clock = clock or SystemClock()

        self.policy_store = PolicyStore(data_dir)
        self.claim_store = ClaimStore(data_dir)
        self.ledger_store = LedgerStore(data_dir)
        self.events = EventLog(data_dir)

        # Custody restarts from the booked balance
        self.custody = custody or InMemoryCustody(
            opening_balance=self.ledger_store.state.pool_balance
        )

        self.ledger = PoolLedger(self.ledger_store, self.custody)
        self.registry = PolicyRegistry(
            self.policy_store, self.ledger_store, self.ledger, self.events, settings
        )
        self.claims = ClaimWorkflow(
            self.claim_store, self.ledger_store, self.registry, self.ledger,
            self.events, self.administrator
        )

        # Counters first, so a failed write never leaves ids ahead of them
        self._stores = [self.ledger_store, self.policy_store, self.claim_store, self.events]
        self._lock = threading.RLock()

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "MutualPool":
        return cls(settings, data_dir=settings.storage_dir, **kwargs)

    # ===================
    # Transactions
    # ===================

    @contextmanager
    def _transaction(self, operation: str, actor: str):
        with self._lock:
            for store in self._stores:
                store.begin()
            custody_snapshot = self.custody.snapshot()
            flushed = []
            try:
                yield self.clock.now()
                for store in self._stores:
                    store.flush()
                    flushed.append(store)
            except MutualPoolException as e:
                self._rollback(custody_snapshot, flushed)
                logger.warning(f"{operation} rejected: {e.message}", actor=actor, error_code=e.error_code)
                raise
            except Exception:
                self._rollback(custody_snapshot, flushed)
                logger.exception(f"{operation} failed", actor=actor)
                raise
            for store in self._stores:
                store.commit()

    def _rollback(self, custody_snapshot, flushed):
        for store in self._stores:
            store.rollback()
        self.custody.restore(custody_snapshot)
        # Files written before the failing one go back to the restored state
        for store in flushed:
            store.persist()

    def _require_administrator(self, identity: str, operation: str):
        if identity != self.administrator:
            raise UnauthorizedError(identity, operation)

    # ===================
    # Mutating Operations
    # ===================

    def purchase(self, holder: str, coverage_amount: int, duration_days: int, payment_amount: int) -> int:
        with self._transaction("purchase", holder) as now:
            policy_id = self.registry.purchase(
                holder, coverage_amount, duration_days, payment_amount, now
            )
            self.custody.deposit(payment_amount, holder)
        return policy_id

    def submit_claim(self, claimant: str, policy_id: int, claim_amount: int, description: str) -> int:
        with self._transaction("submit_claim", claimant) as now:
            claim_id = self.claims.submit(policy_id, claim_amount, description, claimant, now)
        return claim_id

    def adjudicate(self, acting_identity: str, claim_id: int, approve: bool) -> Claim:
        with self._transaction("adjudicate", acting_identity) as now:
            claim = self.claims.adjudicate(claim_id, approve, acting_identity, now)
        return claim

    def contribute(self, contributor: str, amount: int) -> int:
        """Voluntary contribution; returns the contributor's new total."""
        with self._transaction("contribute", contributor) as now:
            if amount <= 0:
                raise InvalidInputError("contribution must be positive", field="amount")
            self.ledger.credit(amount, LedgerEntryKind.CONTRIBUTION)
            total = self.ledger.record_contribution(contributor, amount)
            self.custody.deposit(amount, contributor)
            self.events.emit(
                EventType.CONTRIBUTION_MADE, now, contributor,
                amount=amount, total=total
            )
        return total

    def emergency_drain(self, acting_identity: str) -> int:
        with self._transaction("emergency_drain", acting_identity) as now:
            self._require_administrator(acting_identity, "drain the pool")
            drained = self.ledger.drain_all(acting_identity)
            self.events.emit(EventType.EMERGENCY_DRAINED, now, acting_identity, amount=drained)
        return drained

    # ===================
    # Reads
    # ===================

    def get_policy(self, policy_id: int) -> Policy:
        return self.registry.get(policy_id)

    def get_claim(self, claim_id: int) -> Claim:
        return self.claims.get(claim_id)

    def policies_of(self, holder: str) -> List[int]:
        return self.registry.policies_of(holder)

    def pool_balance(self) -> int:
        """Funds actually held, as opposed to the ledger counter."""
        return self.custody.balance

    def ledger_balance(self) -> int:
        return self.ledger.balance

    def contribution_of(self, identity: str) -> int:
        return self.ledger.contribution_of(identity)

    def required_premium(self, coverage_amount: int) -> int:
        return self.registry.required_premium(coverage_amount)

    def claims_of_policy(self, policy_id: int) -> List[Claim]:
        return self.claims.claims_of_policy(policy_id)

    def pending_claims(self) -> List[Claim]:
        return self.claims.pending()

    def list_events(self, event_type: Optional[EventType] = None, skip: int = 0, limit: int = 100) -> List[LedgerEvent]:
        return self.events.list_events(event_type, skip, limit)

    def statistics(self) -> Dict[str, Any]:
        now = self.clock.now()
        return {
            "policies": {
                "total": self.policy_store.count(),
                "claimed": len(self.policy_store.get_claimed()),
                "covering": len(self.policy_store.get_covering(now)),
                "holders": len(self.ledger_store.state.holder_policies),
            },
            "claims": self.claim_store.get_statistics(),
            "pool": {
                "ledger_balance": self.ledger.balance,
                "fund_balance": self.custody.balance,
                "totals": self.ledger.totals,
                "contributors": len(self.ledger_store.state.contributions),
                "balanced": self.ledger.is_balanced(),
            },
            "events": self.events.count(),
        }
