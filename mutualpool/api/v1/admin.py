# mutualpool/api/v1/admin.py
from typing import Optional

from fastapi import APIRouter, Depends, Query

from mutualpool.core.config import settings
from mutualpool.core.dependencies import get_mutual_pool, get_caller_identity
from mutualpool.core.logging import get_logger
from mutualpool.models.enums import EventType
from mutualpool.models.events import EventListResponse
from mutualpool.models.ledger import DrainResponse

logger = get_logger(__name__)
router = APIRouter()

@router.get("/health")
def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "persistent": settings.PERSIST_STATE,
        "debug_mode": settings.DEBUG
    }

@router.get("/stats")
def get_system_stats(pool=Depends(get_mutual_pool)):
    """Policy, claim and pool statistics."""
    return pool.statistics()

@router.get("/events", response_model=EventListResponse)
def list_events(
    event_type: Optional[EventType] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    pool=Depends(get_mutual_pool)
):
    events = pool.list_events(event_type, skip, limit)
    return EventListResponse(total=len(events), events=events)

@router.post("/emergency-drain", response_model=DrainResponse)
def emergency_drain(
    identity: str = Depends(get_caller_identity),
    pool=Depends(get_mutual_pool)
):
    """Withdraw every held fund to the administrator."""
    drained = pool.emergency_drain(identity)
    return DrainResponse(success=True, drained=drained, recipient=identity)
