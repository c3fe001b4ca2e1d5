# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learning analytics models.

- ContentEngagement: per-day, per-content counters (one row per bucket)
- LearningOutcome: scored learning activity with competency banding
- CurriculumProgress: per-user progress through a curriculum subject
"""

from datetime import date, datetime
from typing import Any

from sqlalchemy import Date, DateTime, Float, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from src.utils.datetime import utc_now


class ContentEngagement(UUIDPrimaryKeyMixin, Base):
    """Engagement bucket for one content item on one UTC day."""

    __tablename__ = "content_engagements"
    __table_args__ = (
        UniqueConstraint(
            "content_id",
            "content_type",
            "day",
            name="uq_content_engagements_bucket",
        ),
    )

    content_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    content_type: Mapped[str] = mapped_column(String(20), nullable=False)
    day: Mapped[date] = mapped_column(Date, nullable=False)
    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    downloads: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    completions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    avg_rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    rating_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<ContentEngagement {self.content_id} {self.day}>"


class LearningOutcome(UUIDPrimaryKeyMixin, Base):
    """Scored learning activity for a user on a course."""

    __tablename__ = "learning_outcomes"
    __table_args__ = (
        Index("ix_learning_outcomes_user_date", "user_id", "activity_date"),
    )

    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    course_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    activity_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    activity_type: Mapped[str] = mapped_column(String(20), nullable=False)
    score: Mapped[float] = mapped_column(Float, nullable=False)
    max_score: Mapped[float] = mapped_column(Float, nullable=False)
    percentage: Mapped[float] = mapped_column(Float, nullable=False)
    competency_level: Mapped[str] = mapped_column(String(20), nullable=False)
    topic: Mapped[str] = mapped_column(String(255), nullable=False, default="Unknown")
    curriculum_tag: Mapped[str | None] = mapped_column(String(20))
    nerdc_competency_code: Mapped[str | None] = mapped_column(String(50))

    def __repr__(self) -> str:
        return f"<LearningOutcome {self.user_id} {self.percentage:.1f}%>"


class CurriculumProgress(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Progress of one user through one curriculum subject."""

    __tablename__ = "curriculum_progress"
    __table_args__ = (
        Index(
            "ix_curriculum_progress_lookup",
            "user_id",
            "curriculum_code",
            "subject",
        ),
    )

    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    curriculum_code: Mapped[str] = mapped_column(String(50), nullable=False)
    subject: Mapped[str] = mapped_column(String(100), nullable=False)
    topics_completed: Mapped[list[str]] = mapped_column(default=list)
    topics_total: Mapped[int] = mapped_column(Integer, nullable=False, default=20)
    progress_percentage: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    competency_scores: Mapped[dict[str, Any]] = mapped_column(default=dict)
    last_activity_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
