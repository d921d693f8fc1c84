"""
FastAPI router for Progress system endpoints.

Provides enroll, read, update, and delete endpoints for a user's progress
through a learning plan. The caller is always the authenticated user.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Body, Depends, Path, Response, status

from app.auth.dependencies import require_auth
from app.progress.dependencies import get_progress_service
from app.progress.services.progress_service import PlanProgressService, MAX_BSON_INT
from app.progress.models import (
    CompletedLessonsRequest,
    LessonTimeRequest,
    PlanProgressResponse,
)
from app.progress import pipelines

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/learning-plans/{plan_id}/progress", tags=["progress"])


@router.post("/enroll", response_model=PlanProgressResponse)
async def enroll(
    plan_id: str,
    user_id: Annotated[str, Depends(require_auth)],
    progress_service: Annotated[PlanProgressService, Depends(get_progress_service)],
):
    """
    Enroll in a learning plan.

    Returns the existing progress record when already enrolled.
    """
    progress = await pipelines.enroll_pipeline(
        progress_service=progress_service,
        user_id=user_id,
        plan_id=plan_id
    )
    return PlanProgressResponse(**progress)


@router.get("", response_model=PlanProgressResponse)
async def get_progress(
    plan_id: str,
    user_id: Annotated[str, Depends(require_auth)],
    progress_service: Annotated[PlanProgressService, Depends(get_progress_service)],
):
    """Get current user's progress for a plan."""
    progress = await pipelines.get_progress_pipeline(
        progress_service=progress_service,
        user_id=user_id,
        plan_id=plan_id
    )
    return PlanProgressResponse(**progress)


@router.put("", response_model=PlanProgressResponse)
async def update_progress(
    plan_id: str,
    completed_lessons: Annotated[CompletedLessonsRequest, Body()],
    user_id: Annotated[str, Depends(require_auth)],
    progress_service: Annotated[PlanProgressService, Depends(get_progress_service)],
):
    """
    Replace the set of completed lessons.

    Body is a JSON array of lesson indices. Requires a prior enroll.
    """
    progress = await pipelines.update_progress_pipeline(
        progress_service=progress_service,
        user_id=user_id,
        plan_id=plan_id,
        completed_lessons=completed_lessons
    )
    return PlanProgressResponse(**progress)


@router.post("/lessons/{lesson_index}/time", response_model=PlanProgressResponse)
async def record_lesson_time(
    plan_id: str,
    lesson_index: Annotated[int, Path(ge=0, le=MAX_BSON_INT)],
    body: LessonTimeRequest,
    user_id: Annotated[str, Depends(require_auth)],
    progress_service: Annotated[PlanProgressService, Depends(get_progress_service)],
):
    """Add time spent on a lesson."""
    progress = await pipelines.record_lesson_time_pipeline(
        progress_service=progress_service,
        user_id=user_id,
        plan_id=plan_id,
        lesson_index=lesson_index,
        seconds=body.seconds
    )
    return PlanProgressResponse(**progress)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_progress(
    plan_id: str,
    user_id: Annotated[str, Depends(require_auth)],
    progress_service: Annotated[PlanProgressService, Depends(get_progress_service)],
):
    """Delete current user's progress for a plan. Idempotent."""
    await pipelines.delete_progress_pipeline(
        progress_service=progress_service,
        user_id=user_id,
        plan_id=plan_id
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
