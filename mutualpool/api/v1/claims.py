# mutualpool/api/v1/claims.py
from fastapi import APIRouter, Depends

from mutualpool.core.dependencies import get_mutual_pool, get_caller_identity
from mutualpool.core.logging import get_logger
from mutualpool.models.claim import (
    ClaimCreateRequest, ClaimSubmitResponse, ClaimResponse, ClaimListResponse,
    AdjudicateRequest, AdjudicateResponse
)
from mutualpool.models.enums import ClaimStatus

logger = get_logger(__name__)
router = APIRouter()


@router.post("/", response_model=ClaimSubmitResponse)
def submit_claim(
    request: ClaimCreateRequest,
    identity: str = Depends(get_caller_identity),
    pool=Depends(get_mutual_pool)
):
    """Submit a claim against one of the caller's policies."""
    claim_id = pool.submit_claim(
        identity, request.policy_id, request.claim_amount, request.description
    )
    return ClaimSubmitResponse(
        success=True,
        claim_id=claim_id,
        message="Claim submitted successfully",
        status=ClaimStatus.SUBMITTED
    )

@router.get("/pending", response_model=ClaimListResponse)
def list_pending_claims(pool=Depends(get_mutual_pool)):
    """Claims awaiting adjudication."""
    claims = [ClaimResponse.from_claim(c) for c in pool.pending_claims()]
    return ClaimListResponse(total=len(claims), claims=claims)

@router.get("/policy/{policy_id}", response_model=ClaimListResponse)
def list_policy_claims(policy_id: int, pool=Depends(get_mutual_pool)):
    """All claims filed against a policy."""
    claims = [ClaimResponse.from_claim(c) for c in pool.claims_of_policy(policy_id)]
    return ClaimListResponse(total=len(claims), claims=claims)

@router.get("/{claim_id}", response_model=ClaimResponse)
def get_claim(claim_id: int, pool=Depends(get_mutual_pool)):
    """Claim record; unknown ids return the zero-value record."""
    return ClaimResponse.from_claim(pool.get_claim(claim_id))

@router.post("/{claim_id}/adjudicate", response_model=AdjudicateResponse)
def adjudicate_claim(
    claim_id: int,
    request: AdjudicateRequest,
    identity: str = Depends(get_caller_identity),
    pool=Depends(get_mutual_pool)
):
    """Approve or deny a claim (administrator only, once per claim)."""
    claim = pool.adjudicate(identity, claim_id, request.approve)
    return AdjudicateResponse(
        success=True,
        claim_id=claim.claim_id,
        status=claim.status,
        payout=claim.payout,
        message=f"Claim {claim.claim_id} {claim.status.value}"
    )
