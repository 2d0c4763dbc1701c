# mutualpool/models/claim.py
from pydantic import BaseModel, Field
from typing import List

from mutualpool.core.constants import ABSENT_ID
from mutualpool.models.enums import ClaimStatus

# ===================
# Main Claim Model
# ===================

class Claim(BaseModel):
    """Claim record owned by the claim workflow."""
    claim_id: int
    policy_id: int
    claimant: str
    claim_amount: int
    timestamp: int
    processed: bool = False
    approved: bool = False
    description: str

    @classmethod
    def empty(cls) -> "Claim":
        """Zero-value record returned for unknown ids."""
        return cls(
            claim_id=ABSENT_ID,
            policy_id=ABSENT_ID,
            claimant="",
            claim_amount=0,
            timestamp=0,
            description=""
        )

    @property
    def exists(self) -> bool:
        return self.claim_id != ABSENT_ID

    @property
    def status(self) -> ClaimStatus:
        if not self.processed:
            return ClaimStatus.SUBMITTED
        return ClaimStatus.APPROVED if self.approved else ClaimStatus.DENIED

    @property
    def payout(self) -> int:
        return self.claim_amount if self.processed and self.approved else 0

# ===================
# API Request/Response Models
# ===================

class ClaimCreateRequest(BaseModel):
    """For submitting a new claim."""
    policy_id: int
    claim_amount: int
    description: str

    class Config:
        json_schema_extra = {
            "example": {
                "policy_id": 1,
                "claim_amount": 50000,
                "description": "flood damage"
            }
        }

class ClaimSubmitResponse(BaseModel):
    """Response after claim submission."""
    success: bool
    claim_id: int
    message: str
    status: ClaimStatus

class ClaimResponse(BaseModel):
    claim_id: int
    policy_id: int
    claimant: str
    claim_amount: int
    timestamp: int
    processed: bool
    approved: bool
    description: str
    status: ClaimStatus

    @classmethod
    def from_claim(cls, claim: Claim) -> "ClaimResponse":
        return cls(status=claim.status, **claim.model_dump())

class ClaimListResponse(BaseModel):
    total: int
    claims: List[ClaimResponse] = Field(default_factory=list)

class AdjudicateRequest(BaseModel):
    approve: bool

class AdjudicateResponse(BaseModel):
    success: bool
    claim_id: int
    status: ClaimStatus
    payout: int
    message: str
