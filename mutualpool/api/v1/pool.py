# mutualpool/api/v1/pool.py
from fastapi import APIRouter, Depends

from mutualpool.core.dependencies import get_mutual_pool, get_caller_identity
from mutualpool.models.ledger import (
    ContributionRequest, ContributionResponse, ContributorTotalResponse,
    PoolBalanceResponse
)

router = APIRouter()


@router.post("/contributions", response_model=ContributionResponse)
def contribute(
    request: ContributionRequest,
    identity: str = Depends(get_caller_identity),
    pool=Depends(get_mutual_pool)
):
    """Voluntary contribution to the pool. Not a withdrawal claim."""
    total = pool.contribute(identity, request.amount)
    return ContributionResponse(
        success=True,
        contributor=identity,
        amount=request.amount,
        total_contributed=total
    )

@router.get("/contributions/{identity}", response_model=ContributorTotalResponse)
def get_contribution_total(identity: str, pool=Depends(get_mutual_pool)):
    return ContributorTotalResponse(
        contributor=identity,
        total_contributed=pool.contribution_of(identity)
    )

@router.get("/balance", response_model=PoolBalanceResponse)
def get_pool_balance(pool=Depends(get_mutual_pool)):
    """Funds held by the pool."""
    return PoolBalanceResponse(balance=pool.pool_balance())
