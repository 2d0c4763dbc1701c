# mutualpool/models/policy.py
from pydantic import BaseModel, Field
from typing import List

from mutualpool.core.constants import ABSENT_ID

# ===================
# Main Policy Model
# ===================

class Policy(BaseModel):
    """Coverage record owned by the policy registry."""
    policy_id: int
    holder: str
    coverage_amount: int
    premium_paid: int
    start_time: int
    end_time: int
    is_active: bool = True
    has_claimed: bool = False

    @classmethod
    def empty(cls) -> "Policy":
        """Zero-value record returned for unknown ids."""
        return cls(
            policy_id=ABSENT_ID,
            holder="",
            coverage_amount=0,
            premium_paid=0,
            start_time=0,
            end_time=0,
            is_active=False,
            has_claimed=False
        )

    @property
    def exists(self) -> bool:
        return self.policy_id != ABSENT_ID

    def is_expired(self, now: int) -> bool:
        return now > self.end_time

    def covers(self, now: int) -> bool:
        return self.is_active and not self.is_expired(now)

    class Config:
        json_schema_extra = {
            "example": {
                "policy_id": 1,
                "holder": "alice",
                "coverage_amount": 100000,
                "premium_paid": 1000,
                "start_time": 1700000000,
                "end_time": 1702592000,
                "is_active": True,
                "has_claimed": False
            }
        }

# ===================
# API Request/Response Models
# ===================

class PolicyPurchaseRequest(BaseModel):
    """Purchase a policy; payment arrives with the request."""
    coverage_amount: int
    duration_days: int
    payment_amount: int

    class Config:
        json_schema_extra = {
            "example": {
                "coverage_amount": 100000,
                "duration_days": 30,
                "payment_amount": 1000
            }
        }

class PolicyPurchaseResponse(BaseModel):
    success: bool
    policy_id: int
    message: str

class HolderPoliciesResponse(BaseModel):
    holder: str
    total: int
    policy_ids: List[int] = Field(default_factory=list)

class PremiumQuoteResponse(BaseModel):
    coverage_amount: int
    required_premium: int
    premium_rate_bps: int
