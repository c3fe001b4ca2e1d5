# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learning outcome recording.

Writes LearningOutcome rows with their derived percentage and competency
level, and keeps per-user curriculum progress in step. Nothing here
commits; the caller owns the unit of work.
"""

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database.models.analytics import CurriculumProgress, LearningOutcome
from src.models.common import CompetencyLevel, OutcomeActivityType
from src.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)

# Lower bounds (percent) of each band above beginner
COMPETENCY_THRESHOLDS: tuple[tuple[float, CompetencyLevel], ...] = (
    (90.0, CompetencyLevel.EXPERT),
    (70.0, CompetencyLevel.ADVANCED),
    (50.0, CompetencyLevel.INTERMEDIATE),
)

TOPIC_COMPLETION_THRESHOLD = 70.0
DEFAULT_TOPICS_TOTAL = 20
UNKNOWN_TOPIC = "Unknown"


def determine_competency_level(percentage: float) -> CompetencyLevel:
    """Band a percentage score.

    <50 beginner, <70 intermediate, <90 advanced, otherwise expert.
    """
    for lower_bound, level in COMPETENCY_THRESHOLDS:
        if percentage >= lower_bound:
            return level
    return CompetencyLevel.BEGINNER


def curriculum_code_of(nerdc_code: str) -> str:
    """Get the curriculum part of a NERDC topic code (before the first dot)."""
    return nerdc_code.split(".", 1)[0]


class LearningOutcomeRecorder:
    """Writes learning outcomes and curriculum progress.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def record(
        self,
        user_id: str,
        course_id: str,
        activity_type: OutcomeActivityType | str,
        score: float,
        max_score: float,
        activity_date: datetime | None = None,
        topic: str | None = None,
        curriculum_tag: str | None = None,
        nerdc_code: str | None = None,
    ) -> LearningOutcome:
        """Add a learning outcome.

        The percentage is computed here, once, and stored.

        Args:
            user_id: Learner.
            course_id: Course (or content) the activity belongs to.
            activity_type: quiz, assignment, project or exam.
            score: Raw score.
            max_score: Maximum achievable score, must be positive.
            activity_date: When the activity happened. Defaults to now.
            topic: Topic name, "Unknown" if missing.
            curriculum_tag: NERDC, WAEC or NECO.
            nerdc_code: NERDC competency code.

        Returns:
            The flushed LearningOutcome.

        Raises:
            ValueError: If max_score is not positive.
        """
        if max_score <= 0:
            raise ValueError("max_score must be greater than zero")

        percentage = score / max_score * 100
        outcome = LearningOutcome(
            user_id=user_id,
            course_id=course_id,
            activity_date=ensure_utc(activity_date) if activity_date else utc_now(),
            activity_type=OutcomeActivityType(activity_type).value,
            score=score,
            max_score=max_score,
            percentage=percentage,
            competency_level=determine_competency_level(percentage).value,
            topic=topic or UNKNOWN_TOPIC,
            curriculum_tag=curriculum_tag,
            nerdc_competency_code=nerdc_code,
        )
        self.db.add(outcome)
        await self.db.flush()

        logger.debug(
            "Recorded %s outcome for user %s on %s: %.1f%%",
            outcome.activity_type,
            user_id,
            course_id,
            percentage,
        )
        return outcome

    async def update_curriculum_progress(
        self,
        user_id: str,
        nerdc_code: str,
        subject: str,
        topic: str,
        percentage: float,
    ) -> CurriculumProgress:
        """Store a topic score and recompute progress through the subject.

        A topic scoring at least 70% is marked completed once.
        """
        curriculum_code = curriculum_code_of(nerdc_code)

        result = await self.db.execute(
            select(CurriculumProgress).where(
                CurriculumProgress.user_id == user_id,
                CurriculumProgress.curriculum_code == curriculum_code,
                CurriculumProgress.subject == subject,
            )
        )
        progress = result.scalar_one_or_none()

        if progress is None:
            progress = CurriculumProgress(
                user_id=user_id,
                curriculum_code=curriculum_code,
                subject=subject,
                topics_completed=[],
                topics_total=DEFAULT_TOPICS_TOTAL,
                progress_percentage=0.0,
                competency_scores={},
            )
            self.db.add(progress)

        # Reassign JSON columns so the change is detected
        scores = dict(progress.competency_scores or {})
        scores[topic] = percentage
        progress.competency_scores = scores

        completed = list(progress.topics_completed or [])
        if percentage >= TOPIC_COMPLETION_THRESHOLD and topic not in completed:
            completed.append(topic)
        progress.topics_completed = completed

        progress.progress_percentage = len(completed) / progress.topics_total * 100
        progress.last_activity_date = utc_now()

        await self.db.flush()
        return progress
