"""
Plan progress tracking service.

Tracks which lessons of a learning plan a user has completed.
One document per (userId, planId) in MongoDB, guarded by a unique index.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Dict, Any, Iterable, List

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from common.utils.exceptions import APIException, NotFoundException, ValidationException

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION = "user_plan_progress"
UNIQUE_INDEX_NAME = "userId_planId_unique"

# Legacy duplicates resolve to the earliest created record.
FIRST_MATCH_SORT = [("_id", ASCENDING)]

# Largest integer BSON can store (int64)
MAX_BSON_INT = 2**63 - 1

# Upsert attempts before giving up on a racing enroll
ENROLL_ATTEMPTS = 3


def _utcnow() -> datetime:
    """Get current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Motor returns naive datetimes unless the client is tz_aware
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class PlanProgressService:
    """
    Manages PlanProgress records for enrolled users.

    Every operation takes the caller's user id explicitly.
    """

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str = DEFAULT_COLLECTION):
        """
        Initialize PlanProgressService.

        Args:
            db: MongoDB database connection
            collection_name: Collection holding progress documents
        """
        self._db = db
        self._progress_collection = db[collection_name]

    async def ensure_indexes(self) -> None:
        """Create the unique (userId, planId) index."""
        await self._progress_collection.create_index(
            [("userId", ASCENDING), ("planId", ASCENDING)],
            unique=True,
            name=UNIQUE_INDEX_NAME,
        )
        logger.info(f"Ensured index {UNIQUE_INDEX_NAME}")

    async def enroll(self, user_id: str, plan_id: str) -> Dict[str, Any]:
        """
        Enroll a user in a plan, or return the existing enrollment.

        Args:
            user_id: Caller's user ID
            plan_id: Learning plan ID

        Returns:
            Progress record
        """
        for attempt in range(1, ENROLL_ATTEMPTS + 1):
            now = _utcnow()
            try:
                record = await self._progress_collection.find_one_and_update(
                    {"userId": user_id, "planId": plan_id},
                    {
                        "$setOnInsert": {
                            "userId": user_id,
                            "planId": plan_id,
                            "completedLessons": [],
                            "timeSpentPerLesson": {},
                            "createdAt": now,
                            "updatedAt": now,
                        }
                    },
                    upsert=True,
                    sort=FIRST_MATCH_SORT,
                    return_document=ReturnDocument.AFTER,
                )
            except DuplicateKeyError:
                # A concurrent enroll inserted first; return its record
                logger.info(
                    f"Concurrent enroll for user {user_id}, plan {plan_id} "
                    f"(attempt {attempt}); reading winner"
                )
                record = await self._find_first(user_id, plan_id)

            if record is not None:
                logger.info(f"User {user_id} enrolled in plan {plan_id}: {record['_id']}")
                return self._format_record(record)

        logger.error(f"Enroll for user {user_id}, plan {plan_id} lost {ENROLL_ATTEMPTS} races")
        raise APIException(
            status_code=409,
            message="Enrollment conflicted with concurrent changes; retry",
            code="ENROLL_CONFLICT",
        )

    async def get_progress(self, user_id: str, plan_id: str) -> Dict[str, Any]:
        """
        Get a user's progress for a plan.

        Raises:
            NotFoundException: User is not enrolled in the plan
        """
        record = await self._find_first(user_id, plan_id)
        if not record:
            raise self._not_found(plan_id)

        return self._format_record(record)

    async def update_progress(
        self,
        user_id: str,
        plan_id: str,
        completed_lessons: Iterable[int],
    ) -> Dict[str, Any]:
        """
        Replace the set of completed lessons.

        Does not create a record; callers must enroll first.

        Args:
            user_id: Caller's user ID
            plan_id: Learning plan ID
            completed_lessons: Lesson indices (duplicates collapse)

        Returns:
            Updated progress record

        Raises:
            ValidationException: A lesson index is not a non-negative integer
            NotFoundException: User is not enrolled in the plan
        """
        lessons = self._normalize_lessons(completed_lessons)

        record = await self._progress_collection.find_one_and_update(
            {"userId": user_id, "planId": plan_id},
            {"$set": {"completedLessons": lessons, "updatedAt": _utcnow()}},
            sort=FIRST_MATCH_SORT,
            return_document=ReturnDocument.AFTER,
        )
        if not record:
            raise self._not_found(plan_id)

        logger.info(
            f"Progress updated for user {user_id}, plan {plan_id}: "
            f"{len(lessons)} lessons completed"
        )
        return self._format_record(record)

    async def record_lesson_time(
        self,
        user_id: str,
        plan_id: str,
        lesson_index: int,
        seconds: int,
    ) -> Dict[str, Any]:
        """
        Add time spent on a lesson.

        Raises:
            ValidationException: Negative lesson index or non-positive seconds
            NotFoundException: User is not enrolled in the plan
        """
        if not self._is_lesson_index(lesson_index):
            raise ValidationException(
                message="Lesson index must be a non-negative integer",
                code="INVALID_LESSON_INDEX",
            )
        if isinstance(seconds, bool) or not isinstance(seconds, int) or not 0 < seconds <= MAX_BSON_INT:
            raise ValidationException(
                message="Seconds must be a positive integer",
                code="INVALID_DURATION",
            )

        record = await self._progress_collection.find_one_and_update(
            {"userId": user_id, "planId": plan_id},
            {
                "$inc": {f"timeSpentPerLesson.{lesson_index}": seconds},
                "$set": {"updatedAt": _utcnow()},
            },
            sort=FIRST_MATCH_SORT,
            return_document=ReturnDocument.AFTER,
        )
        if not record:
            raise self._not_found(plan_id)

        logger.debug(f"Recorded {seconds}s on lesson {lesson_index} for user {user_id}, plan {plan_id}")
        return self._format_record(record)

    async def delete_progress(self, user_id: str, plan_id: str) -> int:
        """
        Delete every progress record for a user and plan.

        Always succeeds, including when nothing matched.

        Returns:
            Number of records deleted
        """
        result = await self._progress_collection.delete_many(
            {"userId": user_id, "planId": plan_id}
        )

        logger.info(f"Deleted {result.deleted_count} progress records for user {user_id}, plan {plan_id}")
        return result.deleted_count

    async def _find_first(self, user_id: str, plan_id: str) -> Optional[dict]:
        logger.debug(f"Looking up progress for user {user_id}, plan {plan_id}")
        return await self._progress_collection.find_one(
            {"userId": user_id, "planId": plan_id},
            sort=FIRST_MATCH_SORT,
        )

    @staticmethod
    def _not_found(plan_id: str) -> NotFoundException:
        return NotFoundException(
            message=f"No progress found for plan {plan_id}",
            code="PROGRESS_NOT_FOUND",
        )

    @staticmethod
    def _is_lesson_index(value: Any) -> bool:
        return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= MAX_BSON_INT

    def _normalize_lessons(self, completed_lessons: Iterable[int]) -> List[int]:
        lessons = list(completed_lessons)
        invalid = [value for value in lessons if not self._is_lesson_index(value)]
        if invalid:
            raise ValidationException(
                message="Lesson indices must be non-negative integers",
                code="INVALID_LESSON_INDEX",
                details={"invalid": invalid},
            )
        return sorted(set(lessons))

    def _format_record(self, record: dict) -> Dict[str, Any]:
        """Format progress document for API response."""
        time_spent = record.get("timeSpentPerLesson") or {}
        return {
            "id": str(record["_id"]),
            "userId": record["userId"],
            "planId": record["planId"],
            "completedLessons": sorted(set(record.get("completedLessons") or [])),
            "timeSpentPerLesson": {int(k): v for k, v in time_spent.items()},
            "createdAt": _as_utc(record.get("createdAt")),
            "updatedAt": _as_utc(record.get("updatedAt")),
        }
