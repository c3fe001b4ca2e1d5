# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared enumerations used by schemas, services and models."""

from enum import Enum


class ContentKind(str, Enum):
    """Kind of content an activity or version refers to."""

    COURSE = "course"
    OER_RESOURCE = "oer_resource"


class ActivityType(str, Enum):
    """Kinds of client-recorded offline activity."""

    QUIZ_ATTEMPT = "quiz_attempt"
    CONTENT_VIEW = "content_view"
    DOWNLOAD = "download"


class SyncStatus(str, Enum):
    """Lifecycle state of an offline activity."""

    PENDING = "pending"
    SYNCED = "synced"
    FAILED = "failed"


class OutcomeActivityType(str, Enum):
    """Kinds of scored learning activity."""

    QUIZ = "quiz"
    ASSIGNMENT = "assignment"
    PROJECT = "project"
    EXAM = "exam"


class CompetencyLevel(str, Enum):
    """Four-tier banding of a percentage score."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class EngagementAction(str, Enum):
    """Engagement actions tracked directly by clients."""

    VIEW = "view"
    DOWNLOAD = "download"
    COMPLETE = "complete"
