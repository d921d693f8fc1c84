"""Shared test fixtures for Skillshare progress tests."""

import pytest
from datetime import datetime, timezone, timedelta
from unittest.mock import AsyncMock, MagicMock
from bson import ObjectId

from tests.fakes import FakeCollection, FakeDatabase


@pytest.fixture
def sample_user_id():
    return "user_1"


@pytest.fixture
def sample_plan_id():
    return "plan_1"


@pytest.fixture
def mock_collection():
    collection = AsyncMock()
    # Motor's find() and aggregate() return cursors synchronously
    collection.find = MagicMock()
    collection.aggregate = MagicMock()
    return collection


@pytest.fixture
def mock_db(mock_collection):
    db = MagicMock()
    db.__getitem__ = MagicMock(return_value=mock_collection)
    return db


@pytest.fixture
def fake_collection():
    return FakeCollection()


@pytest.fixture
def fake_db(fake_collection):
    return FakeDatabase({"user_plan_progress": fake_collection})


@pytest.fixture
def sample_progress_doc(sample_user_id, sample_plan_id):
    created = datetime.now(timezone.utc) - timedelta(days=2)
    return {
        "_id": ObjectId(),
        "userId": sample_user_id,
        "planId": sample_plan_id,
        "completedLessons": [3, 1],
        "timeSpentPerLesson": {"1": 120},
        "createdAt": created,
        "updatedAt": created,
    }


@pytest.fixture
def legacy_progress_doc(sample_progress_doc):
    """Old-format document: naive timestamps, no createdAt or time map."""
    doc = dict(sample_progress_doc)
    doc.pop("createdAt")
    doc.pop("timeSpentPerLesson")
    doc["updatedAt"] = datetime(2024, 5, 1, 12, 0, 0)
    return doc
