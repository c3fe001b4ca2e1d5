# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Analytics API schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from src.models.common import CompetencyLevel, ContentKind, EngagementAction, OutcomeActivityType


class TrackEngagementRequest(BaseModel):
    """Engagement event reported by a client."""

    content_id: str = Field(min_length=1, description="Content ID")
    content_type: ContentKind = Field(description="Content kind")
    action: EngagementAction = Field(description="What the learner did")
    rating: float | None = Field(
        default=None,
        description="Optional 1-5 rating; values outside the range are ignored",
    )


class LearningOutcomeCreateRequest(BaseModel):
    """Scored learning activity reported for the current user."""

    course_id: str = Field(min_length=1, description="Course ID")
    activity_type: OutcomeActivityType = Field(description="Kind of activity")
    score: float = Field(ge=0, description="Raw score")
    max_score: float = Field(description="Maximum achievable score")
    topic: str | None = Field(default=None, description="Topic name")
    curriculum_tag: str | None = Field(default=None, description="NERDC, WAEC or NECO")
    nerdc_code: str | None = Field(default=None, description="NERDC competency code")


class LearningOutcomeResponse(BaseModel):
    """Stored learning outcome."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    course_id: str
    activity_date: datetime
    activity_type: str
    score: float
    max_score: float
    percentage: float
    competency_level: CompetencyLevel
    topic: str
    curriculum_tag: str | None = None
    nerdc_competency_code: str | None = None


class DailyEngagement(BaseModel):
    """One day of engagement for a content item."""

    model_config = ConfigDict(from_attributes=True)

    day: date
    views: int
    downloads: int
    completions: int
    avg_rating: float
    rating_count: int


class EngagementTotals(BaseModel):
    """Summed engagement counters."""

    views: int = 0
    downloads: int = 0
    completions: int = 0


class RatingSummary(BaseModel):
    """Rating figures over a window."""

    average: float = Field(description="Mean of daily average ratings")
    count: int = Field(description="Number of ratings")


class ContentEngagementReport(BaseModel):
    """Engagement analytics for a content item."""

    content_id: str
    content_type: ContentKind
    daily_engagement: list[DailyEngagement]
    totals: EngagementTotals
    completion_rate: float = Field(description="Completions per view, in percent")
    rating: RatingSummary


class ActivityTypeAverage(BaseModel):
    """Average percentage for one kind of scored activity."""

    activity_type: str
    average_percentage: float
    count: int


class CurriculumProgressResponse(BaseModel):
    """Progress through a curriculum subject."""

    model_config = ConfigDict(from_attributes=True)

    curriculum_code: str
    subject: str
    topics_completed: list[str]
    topics_total: int
    progress_percentage: float
    competency_scores: dict[str, float]
    last_activity_date: datetime | None = None


class UserLearningReport(BaseModel):
    """Learning analytics for a user."""

    user_id: str
    recent_activity: list[LearningOutcomeResponse]
    average_scores: list[ActivityTypeAverage]
    curriculum_progress: list[CurriculumProgressResponse]


class TopContent(BaseModel):
    """Content item ranked by completion rate."""

    content_id: str
    content_type: ContentKind
    title: str | None = None
    subject: str | None = None
    views: int
    downloads: int
    completions: int
    completion_rate: float = Field(description="Completions per view, in percent")
    avg_rating: float = Field(description="Mean of daily average ratings")


class ContentStats(BaseModel):
    """Content catalogue size and best performing items."""

    total_courses: int
    total_oer_resources: int
    top_content: list[TopContent]


class CurriculumAdoption(BaseModel):
    """How many learners follow a curriculum subject."""

    curriculum_code: str
    subject: str
    users_count: int
    avg_progress: float


class SystemAnalyticsReport(BaseModel):
    """Platform-wide content and curriculum analytics."""

    content_stats: ContentStats
    curriculum_adoption: list[CurriculumAdoption]


class EngagementTrackedResponse(BaseModel):
    """Acknowledgement of a tracked engagement event."""

    message: str
