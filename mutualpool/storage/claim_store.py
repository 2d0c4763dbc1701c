# mutualpool/storage/claim_store.py
"""Claim storage implementation."""

from typing import Dict, Any, Optional, List

from mutualpool.storage.base import BaseStore
from mutualpool.models.claim import Claim
from mutualpool.models.enums import ClaimStatus


class ClaimStore(BaseStore[Claim]):
    """Storage for claim entities."""

    def __init__(self, data_dir: Optional[str] = None):
        super().__init__(data_dir=data_dir, filename="claims.json")

    def _get_id(self, entity: Claim) -> int:
        return entity.claim_id

    def _serialize(self, entity: Claim) -> Dict[str, Any]:
        return entity.model_dump(mode='json')

    def _deserialize(self, data: Dict[str, Any]) -> Claim:
        return Claim(**data)

    def _copy(self, entity: Claim) -> Claim:
        return entity.model_copy()

    # Custom query methods
    def get_by_policy(self, policy_id: int) -> List[Claim]:
        """Get all claims for a policy."""
        return [c for c in self.get_all() if c.policy_id == policy_id]

    def get_by_status(self, status: ClaimStatus) -> List[Claim]:
        return [c for c in self.get_all() if c.status == status]

    def get_pending(self) -> List[Claim]:
        """Claims awaiting adjudication."""
        return self.get_by_status(ClaimStatus.SUBMITTED)

    # Statistics
    def get_statistics(self) -> Dict[str, Any]:
        all_claims = self.get_all()

        by_status = {status.value: 0 for status in ClaimStatus}
        total_claimed = 0
        total_paid = 0

        for claim in all_claims:
            by_status[claim.status.value] += 1
            total_claimed += claim.claim_amount
            total_paid += claim.payout

        decided = by_status[ClaimStatus.APPROVED.value] + by_status[ClaimStatus.DENIED.value]

        return {
            "total": len(all_claims),
            "by_status": by_status,
            "total_claimed": total_claimed,
            "total_paid": total_paid,
            "approval_rate": round(by_status[ClaimStatus.APPROVED.value] / decided * 100, 2) if decided else 0,
        }
