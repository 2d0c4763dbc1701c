# mutualpool/services/policy_registry.py
from typing import List

from mutualpool.core.config import Settings
from mutualpool.core.constants import BASIS_POINTS, SECONDS_PER_DAY
from mutualpool.core.exceptions import (
    InvalidInputError, InsufficientPremiumError, NotPolicyholderError,
    PolicyInactiveError, PolicyExpiredError
)
from mutualpool.core.logging import get_logger
from mutualpool.models.enums import EventType, LedgerEntryKind
from mutualpool.models.policy import Policy
from mutualpool.services.events import EventLog
from mutualpool.services.pool_ledger import PoolLedger
from mutualpool.storage.ledger_store import LedgerStore
from mutualpool.storage.policy_store import PolicyStore

logger = get_logger(__name__)


class PolicyRegistry:
    """Creates, stores and time-bounds coverage records."""

    def __init__(
        self,
        store: PolicyStore,
        ledger_store: LedgerStore,
        ledger: PoolLedger,
        events: EventLog,
        settings: Settings
    ):
        self.store = store
        self.ledger_store = ledger_store
        self.ledger = ledger
        self.events = events
        self.premium_rate_bps = settings.PREMIUM_RATE_BPS
        self.min_duration_days = settings.MIN_DURATION_DAYS
        self.max_duration_days = settings.MAX_DURATION_DAYS

    def required_premium(self, coverage_amount: int) -> int:
        """Fixed-rate premium, truncated to whole units."""
        return coverage_amount * self.premium_rate_bps // BASIS_POINTS

    def purchase(
        self,
        holder: str,
        coverage_amount: int,
        duration_days: int,
        paid_amount: int,
        now: int
    ) -> int:
        if coverage_amount <= 0:
            raise InvalidInputError("coverage amount must be positive", field="coverage_amount")
        if not self.min_duration_days <= duration_days <= self.max_duration_days:
            raise InvalidInputError(
                f"duration must be between {self.min_duration_days} and {self.max_duration_days} days",
                field="duration_days"
            )
        if paid_amount < 0:
            raise InvalidInputError("payment must not be negative", field="payment_amount")

        required = self.required_premium(coverage_amount)
        if paid_amount < required:
            raise InsufficientPremiumError(required, paid_amount)

        state = self.ledger_store.state
        policy_id = state.next_policy_id
        state.next_policy_id += 1

        policy = Policy(
            policy_id=policy_id,
            holder=holder,
            coverage_amount=coverage_amount,
            premium_paid=paid_amount,
            start_time=now,
            end_time=now + duration_days * SECONDS_PER_DAY
        )
        self.store.save(policy)
        state.holder_policies.setdefault(holder, []).append(policy_id)
        self.ledger_store.touch()

        # Overpayment is pooled, never refunded
        if paid_amount > 0:
            self.ledger.credit(paid_amount, LedgerEntryKind.PREMIUM)

        self.events.emit(
            EventType.POLICY_CREATED, now, holder,
            policy_id=policy_id, coverage_amount=coverage_amount, end_time=policy.end_time
        )
        self.events.emit(
            EventType.PREMIUM_PAID, now, holder,
            policy_id=policy_id, amount=paid_amount
        )
        logger.info(f"Policy {policy_id} purchased by {holder}", coverage=coverage_amount, premium=paid_amount)
        return policy_id

    def get(self, policy_id: int) -> Policy:
        """Lookup that never fails: unknown ids yield the zero-value policy."""
        return self.store.get(policy_id) or Policy.empty()

    def policies_of(self, holder: str) -> List[int]:
        return list(self.ledger_store.state.holder_policies.get(holder, []))

    def require_active_holder(self, policy_id: int, identity: str, now: int) -> Policy:
        """Active-holder check shared by every holder-initiated action."""
        policy = self.get(policy_id)
        if not policy.exists or policy.holder != identity:
            raise NotPolicyholderError(policy_id, identity)
        if not policy.is_active:
            raise PolicyInactiveError(policy_id)
        if policy.is_expired(now):
            raise PolicyExpiredError(policy_id, policy.end_time, now)
        return policy

    def mark_claimed(self, policy_id: int) -> Policy:
        policy = self.get(policy_id).model_copy(update={"has_claimed": True})
        return self.store.save(policy)
