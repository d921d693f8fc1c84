"""Unit tests for PlanProgressService against a mocked Motor collection."""

import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.progress.services.progress_service import (
    ENROLL_ATTEMPTS,
    MAX_BSON_INT,
    PlanProgressService,
    UNIQUE_INDEX_NAME,
)
from common.utils.exceptions import APIException, NotFoundException, ValidationException


@pytest.fixture
def service(mock_db):
    return PlanProgressService(mock_db)


# ─────────────────────────────────────────────────────────────────
# ensure_indexes
# ─────────────────────────────────────────────────────────────────


class TestEnsureIndexes:
    @pytest.mark.asyncio
    async def test_creates_unique_compound_index(self, service, mock_collection):
        await service.ensure_indexes()

        mock_collection.create_index.assert_called_once_with(
            [("userId", ASCENDING), ("planId", ASCENDING)],
            unique=True,
            name=UNIQUE_INDEX_NAME,
        )

    def test_uses_configured_collection_name(self, mock_db):
        PlanProgressService(mock_db, collection_name="progress_test")

        mock_db.__getitem__.assert_called_with("progress_test")


# ─────────────────────────────────────────────────────────────────
# enroll
# ─────────────────────────────────────────────────────────────────


class TestEnroll:
    @pytest.mark.asyncio
    async def test_upserts_with_set_on_insert_only(
        self, service, mock_collection, sample_user_id, sample_plan_id, sample_progress_doc,
    ):
        mock_collection.find_one_and_update.return_value = sample_progress_doc

        await service.enroll(sample_user_id, sample_plan_id)

        call_args = mock_collection.find_one_and_update.call_args
        assert call_args[0][0] == {"userId": sample_user_id, "planId": sample_plan_id}
        update = call_args[0][1]
        assert set(update.keys()) == {"$setOnInsert"}
        assert update["$setOnInsert"]["completedLessons"] == []
        assert update["$setOnInsert"]["timeSpentPerLesson"] == {}
        assert call_args[1]["upsert"] is True
        assert call_args[1]["sort"] == [("_id", ASCENDING)]
        assert call_args[1]["return_document"] == ReturnDocument.AFTER

    @pytest.mark.asyncio
    async def test_new_record_timestamps_match(
        self, service, mock_collection, sample_user_id, sample_plan_id, sample_progress_doc,
    ):
        mock_collection.find_one_and_update.return_value = sample_progress_doc

        await service.enroll(sample_user_id, sample_plan_id)

        on_insert = mock_collection.find_one_and_update.call_args[0][1]["$setOnInsert"]
        assert on_insert["createdAt"] == on_insert["updatedAt"]
        assert on_insert["createdAt"].tzinfo is not None

    @pytest.mark.asyncio
    async def test_returns_formatted_record(
        self, service, mock_collection, sample_user_id, sample_plan_id, sample_progress_doc,
    ):
        mock_collection.find_one_and_update.return_value = sample_progress_doc

        result = await service.enroll(sample_user_id, sample_plan_id)

        assert result["id"] == str(sample_progress_doc["_id"])
        assert result["userId"] == sample_user_id
        assert result["planId"] == sample_plan_id
        assert result["completedLessons"] == [1, 3]
        assert result["timeSpentPerLesson"] == {1: 120}

    @pytest.mark.asyncio
    async def test_duplicate_key_race_returns_winner(
        self, service, mock_collection, sample_user_id, sample_plan_id, sample_progress_doc,
    ):
        mock_collection.find_one_and_update.side_effect = DuplicateKeyError("E11000")
        mock_collection.find_one.return_value = sample_progress_doc

        result = await service.enroll(sample_user_id, sample_plan_id)

        assert result["id"] == str(sample_progress_doc["_id"])
        mock_collection.find_one.assert_called_once_with(
            {"userId": sample_user_id, "planId": sample_plan_id},
            sort=[("_id", ASCENDING)],
        )

    @pytest.mark.asyncio
    async def test_store_failure_propagates(
        self, service, mock_collection, sample_user_id, sample_plan_id,
    ):
        mock_collection.find_one_and_update.side_effect = RuntimeError("store unavailable")

        with pytest.raises(RuntimeError):
            await service.enroll(sample_user_id, sample_plan_id)

    @pytest.mark.asyncio
    async def test_retries_when_race_winner_vanishes(
        self, service, mock_collection, sample_user_id, sample_plan_id, sample_progress_doc,
    ):
        mock_collection.find_one_and_update.side_effect = [
            DuplicateKeyError("E11000"),
            sample_progress_doc,
        ]
        mock_collection.find_one.return_value = None

        result = await service.enroll(sample_user_id, sample_plan_id)

        assert result["id"] == str(sample_progress_doc["_id"])
        assert mock_collection.find_one_and_update.call_count == 2

    @pytest.mark.asyncio
    async def test_gives_up_after_bounded_attempts(
        self, service, mock_collection, sample_user_id, sample_plan_id,
    ):
        mock_collection.find_one_and_update.side_effect = DuplicateKeyError("E11000")
        mock_collection.find_one.return_value = None

        with pytest.raises(APIException) as exc_info:
            await service.enroll(sample_user_id, sample_plan_id)

        assert exc_info.value.status_code == 409
        assert exc_info.value.code == "ENROLL_CONFLICT"
        assert mock_collection.find_one_and_update.call_count == ENROLL_ATTEMPTS


# ─────────────────────────────────────────────────────────────────
# get_progress
# ─────────────────────────────────────────────────────────────────


class TestGetProgress:
    @pytest.mark.asyncio
    async def test_returns_earliest_matching_record(
        self, service, mock_collection, sample_user_id, sample_plan_id, sample_progress_doc,
    ):
        mock_collection.find_one.return_value = sample_progress_doc

        result = await service.get_progress(sample_user_id, sample_plan_id)

        assert result["id"] == str(sample_progress_doc["_id"])
        assert mock_collection.find_one.call_args[1]["sort"] == [("_id", ASCENDING)]

    @pytest.mark.asyncio
    async def test_raises_not_found_when_absent(
        self, service, mock_collection, sample_user_id, sample_plan_id,
    ):
        mock_collection.find_one.return_value = None

        with pytest.raises(NotFoundException) as exc_info:
            await service.get_progress(sample_user_id, sample_plan_id)

        assert exc_info.value.status_code == 404
        assert exc_info.value.code == "PROGRESS_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_legacy_document_gets_defaults(
        self, service, mock_collection, sample_user_id, sample_plan_id, legacy_progress_doc,
    ):
        mock_collection.find_one.return_value = legacy_progress_doc

        result = await service.get_progress(sample_user_id, sample_plan_id)

        assert result["timeSpentPerLesson"] == {}
        assert result["createdAt"] is None
        assert result["updatedAt"] == datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


# ─────────────────────────────────────────────────────────────────
# update_progress
# ─────────────────────────────────────────────────────────────────


class TestUpdateProgress:
    @pytest.mark.asyncio
    async def test_sets_deduplicated_sorted_lessons(
        self, service, mock_collection, sample_user_id, sample_plan_id, sample_progress_doc,
    ):
        mock_collection.find_one_and_update.return_value = sample_progress_doc

        await service.update_progress(sample_user_id, sample_plan_id, [5, 1, 3, 5, 1])

        call_args = mock_collection.find_one_and_update.call_args
        update = call_args[0][1]
        assert update["$set"]["completedLessons"] == [1, 3, 5]
        assert "updatedAt" in update["$set"]
        assert "upsert" not in call_args[1]

    @pytest.mark.asyncio
    async def test_accepts_any_iterable(
        self, service, mock_collection, sample_user_id, sample_plan_id, sample_progress_doc,
    ):
        mock_collection.find_one_and_update.return_value = sample_progress_doc

        await service.update_progress(sample_user_id, sample_plan_id, {2, 4})

        update = mock_collection.find_one_and_update.call_args[0][1]
        assert update["$set"]["completedLessons"] == [2, 4]

    @pytest.mark.asyncio
    async def test_empty_set_clears_lessons(
        self, service, mock_collection, sample_user_id, sample_plan_id, sample_progress_doc,
    ):
        mock_collection.find_one_and_update.return_value = sample_progress_doc

        await service.update_progress(sample_user_id, sample_plan_id, [])

        update = mock_collection.find_one_and_update.call_args[0][1]
        assert update["$set"]["completedLessons"] == []

    @pytest.mark.asyncio
    async def test_raises_not_found_when_not_enrolled(
        self, service, mock_collection, sample_user_id, sample_plan_id,
    ):
        mock_collection.find_one_and_update.return_value = None

        with pytest.raises(NotFoundException):
            await service.update_progress(sample_user_id, sample_plan_id, [1])

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad", [[-1], [1, "2"], [True], [1.5], [MAX_BSON_INT + 1]])
    async def test_rejects_invalid_lesson_indices(
        self, service, mock_collection, sample_user_id, sample_plan_id, bad,
    ):
        with pytest.raises(ValidationException) as exc_info:
            await service.update_progress(sample_user_id, sample_plan_id, bad)

        assert exc_info.value.code == "INVALID_LESSON_INDEX"
        mock_collection.find_one_and_update.assert_not_called()


# ─────────────────────────────────────────────────────────────────
# record_lesson_time
# ─────────────────────────────────────────────────────────────────


class TestRecordLessonTime:
    @pytest.mark.asyncio
    async def test_increments_lesson_time(
        self, service, mock_collection, sample_user_id, sample_plan_id, sample_progress_doc,
    ):
        mock_collection.find_one_and_update.return_value = sample_progress_doc

        await service.record_lesson_time(sample_user_id, sample_plan_id, 4, 90)

        update = mock_collection.find_one_and_update.call_args[0][1]
        assert update["$inc"] == {"timeSpentPerLesson.4": 90}
        assert "updatedAt" in update["$set"]

    @pytest.mark.asyncio
    async def test_raises_not_found_when_not_enrolled(
        self, service, mock_collection, sample_user_id, sample_plan_id,
    ):
        mock_collection.find_one_and_update.return_value = None

        with pytest.raises(NotFoundException):
            await service.record_lesson_time(sample_user_id, sample_plan_id, 0, 30)

    @pytest.mark.asyncio
    async def test_rejects_negative_lesson_index(self, service, sample_user_id, sample_plan_id):
        with pytest.raises(ValidationException) as exc_info:
            await service.record_lesson_time(sample_user_id, sample_plan_id, -1, 30)

        assert exc_info.value.code == "INVALID_LESSON_INDEX"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("seconds", [0, -5, MAX_BSON_INT + 1])
    async def test_rejects_out_of_range_seconds(
        self, service, sample_user_id, sample_plan_id, seconds,
    ):
        with pytest.raises(ValidationException) as exc_info:
            await service.record_lesson_time(sample_user_id, sample_plan_id, 1, seconds)

        assert exc_info.value.code == "INVALID_DURATION"


# ─────────────────────────────────────────────────────────────────
# delete_progress
# ─────────────────────────────────────────────────────────────────


class TestDeleteProgress:
    @pytest.mark.asyncio
    async def test_deletes_all_matching_records(
        self, service, mock_collection, sample_user_id, sample_plan_id,
    ):
        mock_collection.delete_many.return_value = MagicMock(deleted_count=2)

        deleted = await service.delete_progress(sample_user_id, sample_plan_id)

        assert deleted == 2
        mock_collection.delete_many.assert_called_once_with(
            {"userId": sample_user_id, "planId": sample_plan_id}
        )

    @pytest.mark.asyncio
    async def test_nothing_to_delete_is_not_an_error(
        self, service, mock_collection, sample_user_id, sample_plan_id,
    ):
        mock_collection.delete_many.return_value = MagicMock(deleted_count=0)

        deleted = await service.delete_progress(sample_user_id, sample_plan_id)

        assert deleted == 0
