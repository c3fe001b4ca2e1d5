# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Analytics service module.

This module provides the AnalyticsService class for:
- Tracking content engagement (views, downloads, completions, ratings)
- Recording learning outcomes and curriculum progress
- Content engagement reports over a trailing window
- Per-user learning reports
- Platform-wide content and curriculum adoption report

Usage:
    from src.domains.analytics import AnalyticsService

    service = AnalyticsService(db)

    await service.track_engagement(content_id, "course", "view", rating=5)

    report = await service.get_content_engagement(content_id, "course")
    learning = await service.get_user_learning_analytics(user_id)
"""

import logging
from datetime import timedelta

from sqlalchemy import Float, cast, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.analytics.engagement import EngagementAggregator
from src.domains.analytics.outcomes import LearningOutcomeRecorder
from src.domains.content.store import ContentStore, resolve_kind
from src.infrastructure.database.models.analytics import (
    ContentEngagement,
    CurriculumProgress,
    LearningOutcome,
)
from src.infrastructure.database.models.content import OERResource, UnifiedCourse
from src.models.analytics import (
    ActivityTypeAverage,
    ContentEngagementReport,
    ContentStats,
    CurriculumAdoption,
    CurriculumProgressResponse,
    DailyEngagement,
    EngagementTotals,
    LearningOutcomeResponse,
    RatingSummary,
    SystemAnalyticsReport,
    TopContent,
    UserLearningReport,
)
from src.models.common import ContentKind, EngagementAction, OutcomeActivityType
from src.utils.datetime import utc_today

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 30
RECENT_OUTCOMES_LIMIT = 10
TOP_CONTENT_LIMIT = 10
TOP_CONTENT_MIN_VIEWS = 10

_ACTION_COUNTERS: dict[EngagementAction, str] = {
    EngagementAction.VIEW: "views",
    EngagementAction.DOWNLOAD: "downloads",
    EngagementAction.COMPLETE: "completions",
}


class AnalyticsServiceError(Exception):
    """Base exception for analytics service errors."""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class AnalyticsValidationError(AnalyticsServiceError):
    """Raised when analytics input is invalid."""

    pass


class AnalyticsService:
    """Service for learning analytics.

    Attributes:
        db: Async database session.
        window_days: Default trailing window for engagement reports.
    """

    def __init__(self, db: AsyncSession, window_days: int = DEFAULT_WINDOW_DAYS) -> None:
        """Initialize analytics service.

        Args:
            db: Async database session.
            window_days: Default trailing window for engagement reports.
        """
        self.db = db
        self.window_days = window_days
        self.content = ContentStore(db)
        self.engagement = EngagementAggregator(db)
        self.outcomes = LearningOutcomeRecorder(db)

    async def track_engagement(
        self,
        content_id: str,
        kind: ContentKind | str,
        action: EngagementAction | str,
        rating: float | None = None,
    ) -> None:
        """Count an engagement action and fold in an optional rating.

        Failures are logged and not raised, so tracking never breaks the
        caller's primary operation. Out-of-range ratings are ignored.

        Args:
            content_id: Content ID.
            kind: Content kind.
            action: view, download or complete.
            rating: Optional 1-5 rating.
        """
        try:
            counter = _ACTION_COUNTERS[EngagementAction(action)]
            await self.engagement.record_event(content_id, kind, **{counter: 1})
            if rating is not None:
                await self.engagement.record_rating(content_id, kind, rating)
            await self.db.commit()
        except Exception as e:
            logger.error("Error tracking content engagement for %s: %s", content_id, e)
            await self.db.rollback()

    async def record_learning_outcome(
        self,
        user_id: str,
        course_id: str,
        activity_type: OutcomeActivityType | str,
        score: float,
        max_score: float,
        topic: str | None = None,
        curriculum_tag: str | None = None,
        nerdc_code: str | None = None,
    ) -> LearningOutcome:
        """Record a scored learning activity.

        Missing topic, curriculum tag and NERDC code are taken from the
        course when it exists. When both a NERDC code and a curriculum tag
        are known, the user's curriculum progress is updated too; failures
        there are logged and do not affect the recorded outcome.

        Args:
            user_id: Learner.
            course_id: Course ID.
            activity_type: quiz, assignment, project or exam.
            score: Raw score.
            max_score: Maximum achievable score.
            topic: Topic name.
            curriculum_tag: NERDC, WAEC or NECO.
            nerdc_code: NERDC competency code.

        Returns:
            The committed LearningOutcome.

        Raises:
            AnalyticsValidationError: If required input is missing or
                max_score is not positive.
        """
        if not user_id or not course_id:
            raise AnalyticsValidationError("User ID and Course ID are required")
        if max_score <= 0:
            raise AnalyticsValidationError(
                "max_score must be greater than zero",
                details={"max_score": max_score},
            )

        if not topic or not curriculum_tag or not nerdc_code:
            course = await self.content.get(course_id, ContentKind.COURSE)
            if course is not None:
                tags = course.curriculum_tags or []
                topic = topic or course.title
                curriculum_tag = curriculum_tag or (tags[0] if tags else None)
                nerdc_code = nerdc_code or course.nerdc_topic_code

        outcome = await self.outcomes.record(
            user_id=user_id,
            course_id=course_id,
            activity_type=activity_type,
            score=score,
            max_score=max_score,
            topic=topic,
            curriculum_tag=curriculum_tag,
            nerdc_code=nerdc_code,
        )
        await self.db.commit()

        logger.info(
            "Recorded learning outcome %s for user %s: %.1f%% (%s)",
            outcome.id,
            user_id,
            outcome.percentage,
            outcome.competency_level,
        )

        if nerdc_code and curriculum_tag:
            try:
                await self.outcomes.update_curriculum_progress(
                    user_id=user_id,
                    nerdc_code=nerdc_code,
                    subject=curriculum_tag,
                    topic=outcome.topic,
                    percentage=outcome.percentage,
                )
                await self.db.commit()
            except Exception as e:
                logger.error("Error updating curriculum progress for user %s: %s", user_id, e)
                await self.db.rollback()
                await self.db.refresh(outcome)

        return outcome

    async def get_content_engagement(
        self,
        content_id: str,
        kind: ContentKind | str,
        days: int | None = None,
    ) -> ContentEngagementReport:
        """Build the engagement report of a content item.

        Args:
            content_id: Content ID.
            kind: Content kind.
            days: Trailing window in days. Defaults to window_days.

        Returns:
            Daily buckets (oldest first), totals, completion rate and
            rating summary.

        Raises:
            ContentNotFoundError: If the content does not exist.
            InvalidContentTypeError: If kind is not a known content kind.
        """
        kind = resolve_kind(kind)
        await self.content.require(content_id, kind)

        since = utc_today() - timedelta(days=days if days is not None else self.window_days)
        buckets = await self.engagement.list_buckets(content_id, kind, since)

        totals = EngagementTotals(
            views=sum(b.views for b in buckets),
            downloads=sum(b.downloads for b in buckets),
            completions=sum(b.completions for b in buckets),
        )
        completion_rate = totals.completions / totals.views * 100 if totals.views else 0.0

        # Unweighted mean of the daily averages
        average_rating = sum(b.avg_rating for b in buckets) / len(buckets) if buckets else 0.0

        return ContentEngagementReport(
            content_id=content_id,
            content_type=kind,
            daily_engagement=[DailyEngagement.model_validate(b) for b in buckets],
            totals=totals,
            completion_rate=completion_rate,
            rating=RatingSummary(
                average=average_rating,
                count=sum(b.rating_count for b in buckets),
            ),
        )

    async def get_user_learning_analytics(self, user_id: str) -> UserLearningReport:
        """Build the learning report of a user.

        Args:
            user_id: Learner.

        Returns:
            The most recent outcomes, average percentage per activity type
            and curriculum progress records.
        """
        recent_result = await self.db.execute(
            select(LearningOutcome)
            .where(LearningOutcome.user_id == user_id)
            .order_by(LearningOutcome.activity_date.desc())
            .limit(RECENT_OUTCOMES_LIMIT)
        )
        recent = recent_result.scalars().all()

        averages_result = await self.db.execute(
            select(
                LearningOutcome.activity_type,
                func.avg(LearningOutcome.percentage),
                func.count(LearningOutcome.id),
            )
            .where(LearningOutcome.user_id == user_id)
            .group_by(LearningOutcome.activity_type)
            .order_by(LearningOutcome.activity_type)
        )
        averages = [
            ActivityTypeAverage(
                activity_type=activity_type,
                average_percentage=float(average or 0.0),
                count=count,
            )
            for activity_type, average, count in averages_result.all()
        ]

        progress_result = await self.db.execute(
            select(CurriculumProgress)
            .where(CurriculumProgress.user_id == user_id)
            .order_by(CurriculumProgress.curriculum_code, CurriculumProgress.subject)
        )
        progress = progress_result.scalars().all()

        return UserLearningReport(
            user_id=user_id,
            recent_activity=[LearningOutcomeResponse.model_validate(o) for o in recent],
            average_scores=averages,
            curriculum_progress=[CurriculumProgressResponse.model_validate(p) for p in progress],
        )

    async def get_system_analytics(self) -> SystemAnalyticsReport:
        """Build the platform-wide analytics report.

        Top content is ranked by all-time completion rate among items with
        more than TOP_CONTENT_MIN_VIEWS views. Curriculum adoption counts
        progress records per curriculum subject, most followed first.

        Returns:
            Content totals, top content and curriculum adoption.
        """
        total_courses = await self.db.scalar(select(func.count()).select_from(UnifiedCourse))
        total_oer_resources = await self.db.scalar(
            select(func.count()).select_from(OERResource)
        )

        views = func.sum(ContentEngagement.views)
        completions = cast(func.sum(ContentEngagement.completions), Float)
        completion_rate = (completions * 100 / views).label("completion_rate")
        top_result = await self.db.execute(
            select(
                ContentEngagement.content_id,
                ContentEngagement.content_type,
                views.label("views"),
                func.sum(ContentEngagement.downloads).label("downloads"),
                func.sum(ContentEngagement.completions).label("completions"),
                func.avg(ContentEngagement.avg_rating).label("avg_rating"),
                completion_rate,
            )
            .group_by(ContentEngagement.content_id, ContentEngagement.content_type)
            .having(views > TOP_CONTENT_MIN_VIEWS)
            .order_by(completion_rate.desc(), ContentEngagement.content_id)
            .limit(TOP_CONTENT_LIMIT)
        )

        top_content = []
        for row in top_result.all():
            content = await self.content.get(row.content_id, row.content_type)
            subjects = content.subjects if content is not None else []
            top_content.append(
                TopContent(
                    content_id=row.content_id,
                    content_type=row.content_type,
                    title=content.title if content is not None else None,
                    subject=subjects[0] if subjects else None,
                    views=row.views,
                    downloads=row.downloads,
                    completions=row.completions,
                    completion_rate=float(row.completion_rate),
                    avg_rating=float(row.avg_rating or 0.0),
                )
            )

        users_count = func.count(CurriculumProgress.id)
        adoption_result = await self.db.execute(
            select(
                CurriculumProgress.curriculum_code,
                CurriculumProgress.subject,
                users_count,
                func.avg(CurriculumProgress.progress_percentage),
            )
            .group_by(CurriculumProgress.curriculum_code, CurriculumProgress.subject)
            .order_by(
                users_count.desc(),
                CurriculumProgress.curriculum_code,
                CurriculumProgress.subject,
            )
        )
        adoption = [
            CurriculumAdoption(
                curriculum_code=code,
                subject=subject,
                users_count=count,
                avg_progress=float(average or 0.0),
            )
            for code, subject, count, average in adoption_result.all()
        ]

        return SystemAnalyticsReport(
            content_stats=ContentStats(
                total_courses=total_courses or 0,
                total_oer_resources=total_oer_resources or 0,
                top_content=top_content,
            ),
            curriculum_adoption=adoption,
        )
