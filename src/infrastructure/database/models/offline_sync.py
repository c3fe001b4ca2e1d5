# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Offline synchronization models.

OfflineActivity rows are the activity queue: created as pending, moved
once to synced or failed, never deleted. ContentVersion rows form an
append-only ledger per content item.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import Base, UUIDPrimaryKeyMixin
from src.utils.datetime import utc_now


class OfflineActivity(UUIDPrimaryKeyMixin, Base):
    """Client-recorded learning activity awaiting server-side application."""

    __tablename__ = "offline_activities"
    __table_args__ = (
        Index("ix_offline_activities_user_status", "user_id", "sync_status"),
        Index("ix_offline_activities_content_type", "content_id", "activity_type"),
    )

    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    activity_type: Mapped[str] = mapped_column(String(30), nullable=False)
    content_id: Mapped[str] = mapped_column(String(36), nullable=False)
    content_type: Mapped[str] = mapped_column(String(20), nullable=False)
    details: Mapped[dict[str, Any]] = mapped_column(default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    synced_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    sync_status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    version_hash: Mapped[str | None] = mapped_column(String(64))

    def __repr__(self) -> str:
        return f"<OfflineActivity {self.id} {self.activity_type} {self.sync_status}>"


class ContentVersion(UUIDPrimaryKeyMixin, Base):
    """Immutable snapshot marker of a content item's state."""

    __tablename__ = "content_versions"
    __table_args__ = (
        Index(
            "ix_content_versions_content_number",
            "content_id",
            "content_type",
            "version_number",
        ),
    )

    content_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    content_type: Mapped[str] = mapped_column(String(20), nullable=False)
    version_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    version_number: Mapped[int] = mapped_column(Integer, nullable=False)
    changes: Mapped[list[str]] = mapped_column(default=list)
    created_by: Mapped[str | None] = mapped_column(String(36))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<ContentVersion {self.content_id} v{self.version_number}>"
