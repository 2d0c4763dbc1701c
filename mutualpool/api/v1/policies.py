# mutualpool/api/v1/policies.py
from fastapi import APIRouter, Depends, Query

from mutualpool.core.dependencies import get_mutual_pool, get_caller_identity
from mutualpool.models.policy import (
    Policy, PolicyPurchaseRequest, PolicyPurchaseResponse,
    HolderPoliciesResponse, PremiumQuoteResponse
)

router = APIRouter()

# ===================
# Endpoints
# ===================

@router.post("/", response_model=PolicyPurchaseResponse)
def purchase_policy(
    request: PolicyPurchaseRequest,
    identity: str = Depends(get_caller_identity),
    pool=Depends(get_mutual_pool)
):
    """
    Purchase a policy. The full payment is pooled, including any amount
    above the required premium.
    """
    policy_id = pool.purchase(
        identity,
        request.coverage_amount,
        request.duration_days,
        request.payment_amount
    )
    return PolicyPurchaseResponse(
        success=True,
        policy_id=policy_id,
        message=f"Policy {policy_id} created"
    )

@router.get("/quote", response_model=PremiumQuoteResponse)
def quote_premium(
    coverage_amount: int = Query(..., gt=0),
    pool=Depends(get_mutual_pool)
):
    """Premium required for a given coverage amount."""
    return PremiumQuoteResponse(
        coverage_amount=coverage_amount,
        required_premium=pool.required_premium(coverage_amount),
        premium_rate_bps=pool.registry.premium_rate_bps
    )

@router.get("/holder/{holder}", response_model=HolderPoliciesResponse)
def list_holder_policies(holder: str, pool=Depends(get_mutual_pool)):
    """Policy ids held by an identity, in purchase order."""
    policy_ids = pool.policies_of(holder)
    return HolderPoliciesResponse(holder=holder, total=len(policy_ids), policy_ids=policy_ids)

@router.get("/{policy_id}", response_model=Policy)
def get_policy(policy_id: int, pool=Depends(get_mutual_pool)):
    """Policy record; unknown ids return the zero-value record."""
    return pool.get_policy(policy_id)
