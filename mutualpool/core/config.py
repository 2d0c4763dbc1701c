# mutualpool/core/config.py
from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List, Optional


class Settings(BaseSettings):
    # ===================================
    # APPLICATION SETTINGS
    # ===================================
    APP_NAME: str = "MutualPool - Mutual Insurance Ledger"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # ===================================
    # API SETTINGS
    # ===================================
    API_PREFIX: str = "/api/v1"
    ALLOWED_ORIGINS: List[str] = ["*"]

    # ===================================
    # GOVERNANCE
    # ===================================
    ADMIN_IDENTITY: str = "admin"

    # ===================================
    # POLICY TERMS
    # ===================================
    PREMIUM_RATE_BPS: int = 100  # 1% of coverage
    MIN_DURATION_DAYS: int = 30
    MAX_DURATION_DAYS: int = 365

    # ===================================
    # FILE STORAGE
    # ===================================
    DATA_DIR: str = "data"
    PERSIST_STATE: bool = True

    # ===================================
    # COMPUTED PROPERTIES
    # ===================================
    @property
    def storage_dir(self) -> Optional[str]:
        """Directory for JSON state, or None when running in memory."""
        return self.DATA_DIR if self.PERSIST_STATE else None

    # ===================================
    # PYDANTIC CONFIG
    # ===================================
    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "allow"


# ===================================
# SINGLETON PATTERN
# ===================================
@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
