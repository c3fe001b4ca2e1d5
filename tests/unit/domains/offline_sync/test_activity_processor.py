# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the activity processor with a mocked session."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from src.domains.offline_sync import ActivityProcessor
from src.infrastructure.database.models import OfflineActivity


def _activity(activity_type: str = "content_view", **overrides) -> OfflineActivity:
    data = {
        "id": "activity-1",
        "user_id": "user-1",
        "activity_type": activity_type,
        "content_id": "course-1",
        "content_type": "course",
        "details": {},
        "created_at": datetime(2025, 5, 4, tzinfo=timezone.utc),
        "sync_status": "pending",
    }
    data.update(overrides)
    return OfflineActivity(**data)


def _result(value) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    result.rowcount = 1
    return result


@pytest.fixture
def processor(mock_db) -> ActivityProcessor:
    """Create activity processor with mock database."""
    return ActivityProcessor(mock_db)


class TestActivityProcessor:
    """Tests for ActivityProcessor.process."""

    @pytest.mark.asyncio
    async def test_content_view_success(self, processor, mock_db) -> None:
        """Test that a view on existing content is synced."""
        mock_db.get.return_value = MagicMock(id="course-1")
        mock_db.execute.return_value = _result(MagicMock(id="bucket-1"))
        activity = _activity()

        assert await processor.process(activity) is True

        assert activity.sync_status == "synced"
        assert activity.synced_at is not None
        mock_db.commit.assert_awaited_once()
        mock_db.rollback.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_activity_type_is_marked_failed(self, processor, mock_db) -> None:
        """Test that an unsupported activity type fails without raising."""
        activity = _activity("teleport")

        assert await processor.process(activity) is False

        mock_db.rollback.assert_awaited_once()
        mock_db.execute.assert_awaited_once()
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_missing_content_is_marked_failed(self, processor, mock_db) -> None:
        """Test that a view on nonexistent content fails without raising."""
        mock_db.get.return_value = None

        assert await processor.process(_activity()) is False

        mock_db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_quiz_without_answers_is_marked_failed(self, processor, mock_db) -> None:
        """Test that an unscorable quiz attempt fails before any lookup."""
        activity = _activity("quiz_attempt", details={"quiz_answers": []})

        assert await processor.process(activity) is False

        mock_db.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_failure_to_mark_failed_is_swallowed(self, processor, mock_db) -> None:
        """Test that a database error while marking failure does not propagate."""
        mock_db.get.return_value = None
        mock_db.execute = AsyncMock(side_effect=OperationalError("UPDATE", {}, Exception("gone")))

        assert await processor.process(_activity()) is False

        assert mock_db.rollback.await_count == 2

    @pytest.mark.asyncio
    async def test_process_many_counts_missing_rows_as_failed(self, processor, mock_db) -> None:
        """Test that an activity that vanished before processing counts as failed."""
        mock_db.get.return_value = None

        result = await processor.process_many([_activity()])

        assert result.synced == 0
        assert result.failed == 1
