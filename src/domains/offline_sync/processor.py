# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Activity processor.

Applies one offline activity's effect and moves it from pending to
synced or failed. Each activity is its own unit of work: a failure rolls
back that activity's partial writes, marks it failed and is logged, and
never propagates to the caller, so sibling activities in the same batch
are unaffected.

Effects by activity type:
- quiz_attempt: learning outcome for the user, one completion
- content_view: one view
- download: content download_count + 1, one download

Engagement counters go to today's (UTC) bucket of the target content.
"""

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.analytics.engagement import EngagementAggregator
from src.domains.analytics.outcomes import LearningOutcomeRecorder
from src.domains.content.store import ContentStore
from src.domains.offline_sync.exceptions import (
    ActivityProcessingError,
    ActivityValidationError,
)
from src.infrastructure.database.models.offline_sync import OfflineActivity
from src.models.common import ActivityType, OutcomeActivityType, SyncStatus
from src.utils.datetime import utc_now
from src.utils.logging import get_logger

logger = get_logger(__name__)

# Fraction of questions counted as correct for an offline quiz attempt.
# Answers are not graded against a key; this is a fixed placeholder score.
ASSUMED_CORRECT_RATIO = Decimal("0.7")


@dataclass
class SyncResult:
    """Outcome counts of processing a set of activities."""

    synced: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.synced + self.failed


def score_quiz_answers(answers: Sequence[object]) -> int:
    """Score an offline quiz attempt.

    Returns round_half_up(0.7 * number_of_answers), regardless of what was
    answered.

    Raises:
        ActivityValidationError: If there are no answers.
    """
    if not answers:
        raise ActivityValidationError("Quiz attempt has no answers")
    score = (ASSUMED_CORRECT_RATIO * len(answers)).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return int(score)


class ActivityProcessor:
    """Applies offline activities one at a time.

    Attributes:
        db: Async database session.
        content: Content store for lookups and download counters.
        engagement: Per-day engagement aggregator.
        outcomes: Learning outcome recorder.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.content = ContentStore(db)
        self.engagement = EngagementAggregator(db)
        self.outcomes = LearningOutcomeRecorder(db)
        self._handlers: dict[str, Callable[[OfflineActivity], Awaitable[None]]] = {
            ActivityType.QUIZ_ATTEMPT.value: self._apply_quiz_attempt,
            ActivityType.CONTENT_VIEW.value: self._apply_content_view,
            ActivityType.DOWNLOAD.value: self._apply_download,
        }

    async def process(self, activity: OfflineActivity) -> bool:
        """Apply an activity and record its new status.

        Args:
            activity: A pending activity attached to this session.

        Returns:
            True if the activity was synced, False if it failed.
        """
        # Captured up front: a rollback expires the instance
        activity_id = activity.id
        activity_type = activity.activity_type
        user_id = activity.user_id

        try:
            handler = self._handlers.get(activity_type)
            if handler is None:
                raise ActivityValidationError(
                    f"Invalid activity type: {activity_type}",
                    details={"activity_type": activity_type},
                )

            await handler(activity)

            activity.sync_status = SyncStatus.SYNCED.value
            activity.synced_at = utc_now()
            await self.db.commit()
        except Exception as e:
            error = ActivityProcessingError(activity_id, activity_type, user_id, e)
            logger.error(
                "Offline activity failed",
                activity_id=activity_id,
                activity_type=activity_type,
                user_id=user_id,
                error=error.message,
                error_type=error.details["error_type"],
            )
            await self._mark_failed(activity_id)
            return False

        logger.debug("Synced offline activity %s (%s)", activity_id, activity_type)
        return True

    async def process_many(self, activities: Sequence[OfflineActivity]) -> SyncResult:
        """Apply activities sequentially, isolating failures per activity."""
        result = SyncResult()
        activity_ids = [activity.id for activity in activities]

        for activity_id in activity_ids:
            activity = await self.db.get(OfflineActivity, activity_id, populate_existing=True)
            if activity is None:
                logger.warning("Offline activity %s disappeared before processing", activity_id)
                result.failed += 1
                continue

            if await self.process(activity):
                result.synced += 1
            else:
                result.failed += 1

        logger.info(
            "Processed %d offline activities: %d synced, %d failed",
            result.total,
            result.synced,
            result.failed,
        )
        return result

    async def _mark_failed(self, activity_id: str) -> None:
        try:
            await self.db.rollback()
            await self.db.execute(
                update(OfflineActivity)
                .where(OfflineActivity.id == activity_id)
                .values(sync_status=SyncStatus.FAILED.value, synced_at=None)
                .execution_options(synchronize_session=False)
            )
            await self.db.commit()
        except SQLAlchemyError:
            logger.exception("Could not mark offline activity %s as failed", activity_id)
            await self.db.rollback()

    async def _apply_quiz_attempt(self, activity: OfflineActivity) -> None:
        answers = (activity.details or {}).get("quiz_answers") or []
        score = score_quiz_answers(answers)

        content = await self.content.require(activity.content_id, activity.content_type)
        tags = content.curriculum_tags or []

        await self.outcomes.record(
            user_id=activity.user_id,
            course_id=activity.content_id,
            activity_type=OutcomeActivityType.QUIZ,
            score=score,
            max_score=len(answers),
            activity_date=activity.created_at,
            topic=content.title,
            curriculum_tag=tags[0] if tags else None,
            nerdc_code=content.nerdc_topic_code,
        )
        await self.engagement.record_event(
            activity.content_id,
            activity.content_type,
            completions=1,
        )

    async def _apply_content_view(self, activity: OfflineActivity) -> None:
        await self.content.require(activity.content_id, activity.content_type)
        await self.engagement.record_event(
            activity.content_id,
            activity.content_type,
            views=1,
        )

    async def _apply_download(self, activity: OfflineActivity) -> None:
        await self.content.increment_counter(
            activity.content_id,
            activity.content_type,
            "download_count",
        )
        await self.engagement.record_event(
            activity.content_id,
            activity.content_type,
            downloads=1,
        )
