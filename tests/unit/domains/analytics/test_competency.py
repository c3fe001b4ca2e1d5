# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for competency banding and outcome recording helpers."""

import pytest

from src.domains.analytics import (
    EngagementAggregator,
    LearningOutcomeRecorder,
    determine_competency_level,
)
from src.domains.analytics.outcomes import curriculum_code_of
from src.models.common import CompetencyLevel


class TestDetermineCompetencyLevel:
    """Tests for determine_competency_level."""

    @pytest.mark.parametrize(
        ("percentage", "expected"),
        [
            (0.0, CompetencyLevel.BEGINNER),
            (49.99, CompetencyLevel.BEGINNER),
            (50.0, CompetencyLevel.INTERMEDIATE),
            (69.99, CompetencyLevel.INTERMEDIATE),
            (70.0, CompetencyLevel.ADVANCED),
            (89.99, CompetencyLevel.ADVANCED),
            (90.0, CompetencyLevel.EXPERT),
            (100.0, CompetencyLevel.EXPERT),
        ],
    )
    def test_bands(self, percentage: float, expected: CompetencyLevel) -> None:
        """Test band boundaries."""
        assert determine_competency_level(percentage) is expected


class TestCurriculumCode:
    """Tests for curriculum_code_of."""

    def test_takes_part_before_first_dot(self) -> None:
        """Test code extraction."""
        assert curriculum_code_of("MTH.JSS1.ALG") == "MTH"

    def test_code_without_dot(self) -> None:
        """Test that a bare code is returned whole."""
        assert curriculum_code_of("MTH") == "MTH"


class TestLearningOutcomeRecorder:
    """Tests for LearningOutcomeRecorder.record."""

    @pytest.mark.asyncio
    async def test_non_positive_max_score_raises(self, mock_db) -> None:
        """Test that a percentage cannot be derived from max_score 0."""
        recorder = LearningOutcomeRecorder(mock_db)

        with pytest.raises(ValueError, match="max_score"):
            await recorder.record("u-1", "c-1", "quiz", score=1, max_score=0)

        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_derives_percentage_and_band(self, mock_db) -> None:
        """Test the stored derived fields."""
        recorder = LearningOutcomeRecorder(mock_db)

        outcome = await recorder.record("u-1", "c-1", "exam", score=18, max_score=20)

        assert outcome.percentage == 90.0
        assert outcome.competency_level == "expert"
        assert outcome.topic == "Unknown"
        assert outcome.activity_date is not None
        mock_db.add.assert_called_once_with(outcome)
        mock_db.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unknown_activity_type_raises(self, mock_db) -> None:
        """Test that only known outcome types are accepted."""
        recorder = LearningOutcomeRecorder(mock_db)

        with pytest.raises(ValueError):
            await recorder.record("u-1", "c-1", "homework", score=1, max_score=2)


class TestEngagementRatingRange:
    """Tests for rating validation in EngagementAggregator."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rating", [0, 0.5, 5.5, 6, -1])
    async def test_out_of_range_rating_is_ignored(self, mock_db, rating: float) -> None:
        """Test that out-of-range ratings touch nothing."""
        aggregator = EngagementAggregator(mock_db)

        assert await aggregator.record_rating("c-1", "course", rating) is None

        mock_db.execute.assert_not_called()
        mock_db.add.assert_not_called()
