"""
Progress System

Tracks which lessons of a learning plan each enrolled user has completed,
plus time spent per lesson.
"""

from app.progress.services.progress_service import PlanProgressService

__all__ = [
    "PlanProgressService",
]
