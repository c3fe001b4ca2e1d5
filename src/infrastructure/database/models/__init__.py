# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy ORM models.

Importing this package registers every table on Base.metadata, which is
what migrations and test fixtures rely on.
"""

from src.infrastructure.database.models.analytics import (
    ContentEngagement,
    CurriculumProgress,
    LearningOutcome,
)
from src.infrastructure.database.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from src.infrastructure.database.models.content import OERResource, UnifiedCourse
from src.infrastructure.database.models.offline_sync import ContentVersion, OfflineActivity

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    # Content
    "UnifiedCourse",
    "OERResource",
    # Offline sync
    "OfflineActivity",
    "ContentVersion",
    # Analytics
    "ContentEngagement",
    "LearningOutcome",
    "CurriculumProgress",
]
