"""Progress services."""

from app.progress.services.progress_service import PlanProgressService

__all__ = [
    "PlanProgressService",
]
