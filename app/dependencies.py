"""
FastAPI dependencies for the Skillshare progress application.

Initializes every service at startup and re-exports the getters.
"""

import logging

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.config import settings
from app.auth.dependencies import get_auth_provider, require_auth
from app.progress.dependencies import init_progress_services, get_progress_service

logger = logging.getLogger(__name__)


def init_all_services(db: AsyncIOMotorDatabase) -> None:
    """
    Initialize all services with the database connection.

    Called once at application startup.

    Args:
        db: MongoDB database connection
    """
    init_progress_services(db=db, collection_name=settings.PROGRESS_COLLECTION)
    logger.info(f"Progress services initialized on collection {settings.PROGRESS_COLLECTION}")


__all__ = [
    "init_all_services",
    "get_auth_provider",
    "require_auth",
    "get_progress_service",
]
