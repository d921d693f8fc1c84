"""
Skillshare progress service settings.

Extends the base settings with progress-specific configuration.
"""

from common.config import BaseAppSettings


class Settings(BaseAppSettings):
    """Progress service settings."""

    # ==========================================================================
    # Storage
    # ==========================================================================
    PROGRESS_COLLECTION: str = "user_plan_progress"

    # ==========================================================================
    # HTTP
    # ==========================================================================
    # Prefix for all routers, e.g. "/api"
    API_PREFIX: str = ""


# Global settings instance
settings = Settings()
