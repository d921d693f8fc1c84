"""
Progress system pipeline functions.

Stateless orchestration logic for plan progress operations.
"""

import logging
from typing import List

from app.progress.services.progress_service import PlanProgressService

logger = logging.getLogger(__name__)


async def enroll_pipeline(
    progress_service: PlanProgressService,
    user_id: str,
    plan_id: str
) -> dict:
    """
    Enroll the user in a plan, returning any existing enrollment.

    Args:
        progress_service: For progress persistence
        user_id: Caller's user ID
        plan_id: Learning plan ID

    Returns:
        Progress record dict
    """
    logger.info(f"Enroll requested: user {user_id}, plan {plan_id}")
    return await progress_service.enroll(user_id, plan_id)


async def get_progress_pipeline(
    progress_service: PlanProgressService,
    user_id: str,
    plan_id: str
) -> dict:
    """
    Get the user's progress for a plan.

    Raises:
        NotFoundException: User is not enrolled
    """
    return await progress_service.get_progress(user_id, plan_id)


async def update_progress_pipeline(
    progress_service: PlanProgressService,
    user_id: str,
    plan_id: str,
    completed_lessons: List[int]
) -> dict:
    """
    Replace the user's completed lessons for a plan.

    Args:
        progress_service: For progress persistence
        user_id: Caller's user ID
        plan_id: Learning plan ID
        completed_lessons: Lesson indices the user has completed

    Returns:
        Updated progress record dict

    Raises:
        NotFoundException: User is not enrolled
    """
    logger.info(
        f"Progress update requested: user {user_id}, plan {plan_id}, "
        f"{len(completed_lessons)} lessons"
    )
    return await progress_service.update_progress(user_id, plan_id, completed_lessons)


async def record_lesson_time_pipeline(
    progress_service: PlanProgressService,
    user_id: str,
    plan_id: str,
    lesson_index: int,
    seconds: int
) -> dict:
    """Add time spent on one lesson of an enrolled plan."""
    return await progress_service.record_lesson_time(user_id, plan_id, lesson_index, seconds)


async def delete_progress_pipeline(
    progress_service: PlanProgressService,
    user_id: str,
    plan_id: str
) -> None:
    """
    Remove all of the user's progress for a plan.

    Succeeds whether or not anything was enrolled.
    """
    deleted = await progress_service.delete_progress(user_id, plan_id)
    if deleted > 1:
        logger.warning(f"Removed {deleted} duplicate progress records for user {user_id}, plan {plan_id}")
