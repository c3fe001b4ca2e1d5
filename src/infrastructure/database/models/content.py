# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Content entity models.

Unified courses (synced from Moodle / Open edX) and open educational
resources. Both carry an all-time download counter that offline download
activities increment.
"""

from typing import Any

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class UnifiedCourse(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Course imported from an external LMS."""

    __tablename__ = "unified_courses"

    original_id: Mapped[str] = mapped_column(String(100), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    short_title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    source: Mapped[str] = mapped_column(String(20), nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    format: Mapped[str] = mapped_column(String(50), nullable=False, default="online")
    language: Mapped[str] = mapped_column(String(5), nullable=False, default="en", index=True)
    approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    nerdc_topic_code: Mapped[str | None] = mapped_column(String(50), index=True)
    curriculum_tags: Mapped[list[str]] = mapped_column(default=list)
    subjects: Mapped[list[str]] = mapped_column(default=list)
    download_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    category: Mapped[str | None] = mapped_column(String(100))
    course_metadata: Mapped[dict[str, Any]] = mapped_column(default=dict)

    def __repr__(self) -> str:
        return f"<UnifiedCourse {self.id} {self.title!r}>"


class OERResource(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Open educational resource (video, text, quiz or audio)."""

    __tablename__ = "oer_resources"

    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text)
    provider: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    url: Mapped[str] = mapped_column(String(1000), nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    language: Mapped[str] = mapped_column(String(5), nullable=False, default="en")
    license: Mapped[str] = mapped_column(String(100), nullable=False)
    subjects: Mapped[list[str]] = mapped_column(default=list)
    curriculum_tags: Mapped[list[str]] = mapped_column(default=list)
    nerdc_topic_code: Mapped[str | None] = mapped_column(String(50), index=True)
    download_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    resource_metadata: Mapped[dict[str, Any]] = mapped_column(default=dict)

    def __repr__(self) -> str:
        return f"<OERResource {self.id} {self.title!r}>"
