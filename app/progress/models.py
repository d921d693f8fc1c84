"""
Pydantic models for Progress system request/response validation.

Defines schemas for plan progress records.
"""

from datetime import datetime
from typing import Annotated, Optional, List, Dict
from pydantic import BaseModel, Field, StrictInt

from app.progress.services.progress_service import MAX_BSON_INT

# Strict: JSON true or "3" is rejected rather than coerced
LessonIndex = Annotated[
    StrictInt, Field(ge=0, le=MAX_BSON_INT, description="Zero-based lesson index")
]

# PUT body is a bare JSON array of lesson indices
CompletedLessonsRequest = List[LessonIndex]


class PlanProgressResponse(BaseModel):
    """Plan progress in API responses."""
    id: str
    userId: str
    planId: str
    completedLessons: List[int] = []
    timeSpentPerLesson: Dict[int, int] = {}
    createdAt: Optional[datetime] = None
    updatedAt: datetime

    class Config:
        from_attributes = True


class LessonTimeRequest(BaseModel):
    """Request body for recording time spent on a lesson."""
    seconds: StrictInt = Field(..., gt=0, le=MAX_BSON_INT, description="Seconds spent on the lesson")
