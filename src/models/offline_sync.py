# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Offline sync API schemas.

Request/response models for submitting offline activities, checking
content freshness and creating content versions.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.models.common import ActivityType, ContentKind, SyncStatus


class QuizAnswer(BaseModel):
    """One answered question of an offline quiz attempt."""

    question_id: str = Field(description="Question identifier")
    selected_option: str = Field(description="Option chosen by the learner")


class ActivityDetails(BaseModel):
    """Kind-specific payload of an offline activity."""

    quiz_answers: list[QuizAnswer] | None = Field(
        default=None,
        description="Answers for quiz_attempt activities",
    )
    view_duration: int | None = Field(
        default=None,
        ge=0,
        description="Seconds spent viewing, for content_view activities",
    )
    download_completed: bool | None = Field(
        default=None,
        description="Whether the download finished, for download activities",
    )


class ActivityInput(BaseModel):
    """An activity recorded by a client while offline.

    user_id is optional on the wire: the authenticated user always
    replaces it.
    """

    activity_type: ActivityType = Field(description="Kind of activity")
    content_id: str = Field(min_length=1, description="Target content ID")
    content_type: ContentKind = Field(description="Target content kind")
    details: ActivityDetails = Field(default_factory=ActivityDetails)
    user_id: str | None = Field(default=None, description="Owning user ID")
    created_at: datetime | None = Field(
        default=None,
        description="When the activity happened on the client",
    )
    version_hash: str | None = Field(
        default=None,
        description="Content version hash the client had cached",
    )


class BatchSyncRequest(BaseModel):
    """Batch of offline activities to persist and apply."""

    activities: list[ActivityInput] = Field(description="Activities to sync")


class SyncResultResponse(BaseModel):
    """Per-item outcome counts of a sync run."""

    synced: int = Field(description="Activities applied successfully")
    failed: int = Field(description="Activities that could not be applied")
    message: str = Field(description="Human-readable summary")


class OfflineActivityResponse(BaseModel):
    """Stored offline activity."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    activity_type: str
    content_id: str
    content_type: str
    details: dict
    created_at: datetime
    synced_at: datetime | None = None
    sync_status: SyncStatus
    version_hash: str | None = None


class PendingActivityListResponse(BaseModel):
    """Pending activities of the current user."""

    items: list[OfflineActivityResponse]
    total: int


class UpdateCheckResponse(BaseModel):
    """Whether a client's cached copy of a content item is stale."""

    needs_update: bool = Field(description="True if the client should re-download")
    latest_version_hash: str | None = Field(
        default=None,
        description="Hash of the latest version, if any version exists",
    )


class CreateVersionRequest(BaseModel):
    """Request to snapshot the current state of a content item."""

    changes: list[str] = Field(description="Human-readable change descriptions")


class ContentVersionResponse(BaseModel):
    """Content version ledger entry."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    content_id: str
    content_type: str
    version_hash: str
    version_number: int
    changes: list[str]
    created_by: str | None = None
    created_at: datetime


class ContentVersionListResponse(BaseModel):
    """Version history of a content item, newest first."""

    items: list[ContentVersionResponse]
    total: int
