# mutualpool/main.py
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from mutualpool.core.config import settings
from mutualpool.core.dependencies import reset_mutual_pool
from mutualpool.core.exceptions import MutualPoolException
from mutualpool.core.logging import get_logger

logger = get_logger(__name__)

# ===================
# Lifespan Management
# ===================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown."""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Administrator: {settings.ADMIN_IDENTITY}, state dir: {settings.storage_dir}")
    yield
    reset_mutual_pool()
    logger.info("Shutting down...")

# ===================
# Application Setup
# ===================

app = FastAPI(
    title=settings.APP_NAME,
    description="Mutual insurance ledger: premiums, claims and pooled payouts",
    version=settings.APP_VERSION,
    lifespan=lifespan
)

# ===================
# CORS Middleware
# ===================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ===================
# Error Handling
# ===================

@app.exception_handler(MutualPoolException)
async def mutual_pool_exception_handler(request: Request, exc: MutualPoolException):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

# ===================
# Include Routers
# ===================

from mutualpool.api.v1.policies import router as policies_router
from mutualpool.api.v1.claims import router as claims_router
from mutualpool.api.v1.pool import router as pool_router
from mutualpool.api.v1.admin import router as admin_router

app.include_router(policies_router, prefix=f"{settings.API_PREFIX}/policies", tags=["policies"])
app.include_router(claims_router, prefix=f"{settings.API_PREFIX}/claims", tags=["claims"])
app.include_router(pool_router, prefix=f"{settings.API_PREFIX}/pool", tags=["pool"])
app.include_router(admin_router, prefix=f"{settings.API_PREFIX}/admin", tags=["admin"])

# ===================
# Root Endpoints
# ===================

@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "docs": "/docs",
        "endpoints": {
            "policies": f"{settings.API_PREFIX}/policies",
            "claims": f"{settings.API_PREFIX}/claims",
            "pool": f"{settings.API_PREFIX}/pool",
            "admin": f"{settings.API_PREFIX}/admin"
        }
    }

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": settings.APP_VERSION}
