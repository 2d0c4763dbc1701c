# mutualpool/models/ledger.py
"""Pool ledger state and pool-facing API models."""

from pydantic import BaseModel, Field
from typing import Dict, List

from mutualpool.core.constants import FIRST_POLICY_ID, FIRST_CLAIM_ID
from mutualpool.models.enums import LedgerEntryKind


def _empty_totals() -> Dict[str, int]:
    return {kind.value: 0 for kind in LedgerEntryKind}


class LedgerState(BaseModel):
    """Scalar counters and small tables persisted alongside the records."""
    pool_balance: int = 0
    contributions: Dict[str, int] = Field(default_factory=dict)
    totals: Dict[str, int] = Field(default_factory=_empty_totals)
    holder_policies: Dict[str, List[int]] = Field(default_factory=dict)
    next_policy_id: int = FIRST_POLICY_ID
    next_claim_id: int = FIRST_CLAIM_ID

    def expected_balance(self) -> int:
        """Premiums and contributions in, minus payouts and drains out."""
        return (
            self.totals.get(LedgerEntryKind.PREMIUM.value, 0)
            + self.totals.get(LedgerEntryKind.CONTRIBUTION.value, 0)
            - self.totals.get(LedgerEntryKind.PAYOUT.value, 0)
            - self.totals.get(LedgerEntryKind.DRAIN.value, 0)
        )


# ===================
# API Request/Response Models
# ===================

class ContributionRequest(BaseModel):
    amount: int

class ContributionResponse(BaseModel):
    success: bool
    contributor: str
    amount: int
    total_contributed: int

class ContributorTotalResponse(BaseModel):
    contributor: str
    total_contributed: int

class PoolBalanceResponse(BaseModel):
    balance: int

class DrainResponse(BaseModel):
    success: bool
    drained: int
    recipient: str
