# mutualpool/services/claim_workflow.py
"""
Claim workflow: submission by policyholders, one-time adjudication by the
administrator, and payout from the pool on approval.

A claim moves ``submitted -> approved`` or ``submitted -> denied`` exactly
once. Approval is the only path that debits the pool and the only path that
marks a policy as claimed.
"""

from typing import List

from mutualpool.core.exceptions import (
    InvalidInputError, EmptyDescriptionError, AlreadyClaimedError,
    ExceedsCoverageError, InsufficientPoolError, UnauthorizedError,
    ClaimNotFoundError, AlreadyProcessedError
)
from mutualpool.core.logging import get_logger
from mutualpool.models.claim import Claim
from mutualpool.models.enums import EventType, LedgerEntryKind
from mutualpool.services.events import EventLog
from mutualpool.services.policy_registry import PolicyRegistry
from mutualpool.services.pool_ledger import PoolLedger
from mutualpool.storage.claim_store import ClaimStore
from mutualpool.storage.ledger_store import LedgerStore

logger = get_logger(__name__)


class ClaimWorkflow:

    def __init__(
        self,
        store: ClaimStore,
        ledger_store: LedgerStore,
        registry: PolicyRegistry,
        ledger: PoolLedger,
        events: EventLog,
        administrator: str
    ):
        self.store = store
        self.ledger_store = ledger_store
        self.registry = registry
        self.ledger = ledger
        self.events = events
        self.administrator = administrator

    def submit(
        self,
        policy_id: int,
        claim_amount: int,
        description: str,
        claimant: str,
        now: int
    ) -> int:
        policy = self.registry.require_active_holder(policy_id, claimant, now)
        if policy.has_claimed:
            raise AlreadyClaimedError(policy_id)
        if claim_amount <= 0:
            raise InvalidInputError("claim amount must be positive", field="claim_amount")
        if claim_amount > policy.coverage_amount:
            raise ExceedsCoverageError(policy_id, claim_amount, policy.coverage_amount)
        # Point-in-time only; re-checked at adjudication
        if claim_amount > self.ledger.balance:
            raise InsufficientPoolError(claim_amount, self.ledger.balance)
        if not description:
            raise EmptyDescriptionError()

        state = self.ledger_store.state
        claim_id = state.next_claim_id
        state.next_claim_id += 1
        self.ledger_store.touch()

        self.store.save(Claim(
            claim_id=claim_id,
            policy_id=policy_id,
            claimant=claimant,
            claim_amount=claim_amount,
            timestamp=now,
            description=description
        ))
        self.events.emit(
            EventType.CLAIM_SUBMITTED, now, claimant,
            claim_id=claim_id, policy_id=policy_id, amount=claim_amount
        )
        logger.info(f"Claim {claim_id} submitted against policy {policy_id}", amount=claim_amount)
        return claim_id

    def adjudicate(self, claim_id: int, approve: bool, acting_identity: str, now: int) -> Claim:
        """Decide a claim once.

        A failed approval (pool short of funds, transfer rejected) raises and
        the caller's transaction rolls back, so the claim stays unprocessed.
        """
        if acting_identity != self.administrator:
            raise UnauthorizedError(acting_identity, "adjudicate claims")
        claim = self.get(claim_id)
        if not claim.exists:
            raise ClaimNotFoundError(claim_id)
        if claim.processed:
            raise AlreadyProcessedError(claim_id)

        claim = claim.model_copy(update={"processed": True, "approved": approve})
        self.store.save(claim)

        if approve:
            # Several claims may be pending against one policy; only one pays
            if self.registry.get(claim.policy_id).has_claimed:
                raise AlreadyClaimedError(claim.policy_id)
            if self.ledger.balance < claim.claim_amount:
                raise InsufficientPoolError(claim.claim_amount, self.ledger.balance)
            self.registry.mark_claimed(claim.policy_id)
            self.ledger.debit(claim.claim_amount, LedgerEntryKind.PAYOUT)
            self.ledger.custody.transfer(claim.claim_amount, claim.claimant)

        self.events.emit(
            EventType.CLAIM_PROCESSED, now, acting_identity,
            claim_id=claim_id, approved=approve, payout=claim.payout
        )
        logger.info(
            f"Claim {claim_id} {claim.status.value}",
            policy_id=claim.policy_id, payout=claim.payout
        )
        return claim

    def get(self, claim_id: int) -> Claim:
        return self.store.get(claim_id) or Claim.empty()

    def claims_of_policy(self, policy_id: int) -> List[Claim]:
        return self.store.get_by_policy(policy_id)

    def pending(self) -> List[Claim]:
        return self.store.get_pending()
