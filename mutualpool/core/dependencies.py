# mutualpool/core/dependencies.py
from typing import Optional

from fastapi import Header, HTTPException

from mutualpool.core.config import settings
from mutualpool.core.logging import get_logger

logger = get_logger(__name__)

# ===================
# Service Instances
# ===================

_mutual_pool = None

def get_mutual_pool():
    """Get the mutual pool service instance."""
    global _mutual_pool
    if _mutual_pool is None:
        from mutualpool.services.mutual_pool import MutualPool
        _mutual_pool = MutualPool.from_settings(settings)
        logger.info("Mutual pool initialized", data_dir=settings.storage_dir)
    return _mutual_pool

# ===================
# Caller Identity
# ===================

def get_caller_identity(x_identity: Optional[str] = Header(None)) -> str:
    """Identity of the caller, as delivered by the transport."""
    if not x_identity:
        raise HTTPException(status_code=401, detail="Missing X-Identity header")
    return x_identity

# ===================
# Cleanup
# ===================

def reset_mutual_pool():
    """Drop the service instance so the next request rebuilds it."""
    global _mutual_pool
    _mutual_pool = None
