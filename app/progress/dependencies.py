"""
FastAPI dependencies for Progress system.

Provides dependency injection for progress-related services.
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.progress.services.progress_service import PlanProgressService, DEFAULT_COLLECTION


_progress_service: Optional[PlanProgressService] = None


def init_progress_services(
    db: AsyncIOMotorDatabase,
    collection_name: str = DEFAULT_COLLECTION,
) -> None:
    """
    Initialize progress services with database connection.

    Called once at application startup.

    Args:
        db: MongoDB database connection
        collection_name: Collection holding progress documents
    """
    global _progress_service

    _progress_service = PlanProgressService(db=db, collection_name=collection_name)


def get_progress_service() -> PlanProgressService:
    """Get plan progress service instance."""
    if _progress_service is None:
        raise RuntimeError("Progress services not initialized. Call init_progress_services first.")
    return _progress_service
