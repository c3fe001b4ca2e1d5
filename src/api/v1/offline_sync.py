# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Offline sync API endpoints.

This module provides endpoints for offline activity synchronization and
content versioning:
- POST /user - Sync the current user's pending activities
- POST /batch - Submit and sync a batch of activities
- GET /pending - List the current user's pending activities
- GET /updates - Check whether a cached content copy is stale
- POST /versions/{content_type}/{content_id} - Create a content version
- GET /versions/{content_type}/{content_id} - List content versions

All endpoints require authentication. Activities are always attributed to
the authenticated user.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db, require_auth
from src.api.middleware.auth import CurrentUser
from src.api.middleware.rate_limit import limiter
from src.core.config import get_settings
from src.domains.content import ContentNotFoundError, InvalidContentTypeError
from src.domains.offline_sync import ActivityValidationError, OfflineSyncService
from src.models.offline_sync import (
    BatchSyncRequest,
    ContentVersionListResponse,
    ContentVersionResponse,
    CreateVersionRequest,
    OfflineActivityResponse,
    PendingActivityListResponse,
    SyncResultResponse,
    UpdateCheckResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

settings = get_settings()


def _get_service(db: AsyncSession) -> OfflineSyncService:
    """Get offline sync service instance.

    Args:
        db: Database session.

    Returns:
        Configured OfflineSyncService instance.
    """
    return OfflineSyncService(db=db, max_batch_size=settings.offline_sync.max_batch_size)


@router.post(
    "/user",
    response_model=SyncResultResponse,
    summary="Sync pending activities",
    description="Process all pending offline activities of the current user.",
)
async def sync_user_activities(
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> SyncResultResponse:
    """Process the current user's pending activities.

    Individual failures are counted, not raised.

    Args:
        current_user: Authenticated user.
        db: Database session.

    Returns:
        Synced and failed counts.
    """
    service = _get_service(db)
    result = await service.sync_user_activities(current_user.id)

    return SyncResultResponse(
        synced=result.synced,
        failed=result.failed,
        message=f"Sync completed: {result.synced} activities synced, {result.failed} failed",
    )


@router.post(
    "/batch",
    response_model=SyncResultResponse,
    summary="Batch sync activities",
    description="Store a batch of offline activities and process each of them.",
)
@limiter.limit(settings.rate_limit.sync_batch_limit)
async def batch_sync_activities(
    request: Request,
    data: BatchSyncRequest,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> SyncResultResponse:
    """Submit and process a batch of activities.

    Args:
        request: HTTP request, used for rate limiting.
        data: Activities to sync.
        current_user: Authenticated user; owns every activity.
        db: Database session.

    Returns:
        Synced and failed counts.

    Raises:
        HTTPException: If the batch is empty or otherwise invalid.
    """
    logger.info(
        "Batch sync of %d activities by %s",
        len(data.activities),
        current_user.id,
    )

    service = _get_service(db)

    try:
        result = await service.batch_sync_activities(
            data.activities,
            session_user_id=current_user.id,
        )
    except ActivityValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )

    return SyncResultResponse(
        synced=result.synced,
        failed=result.failed,
        message=f"Batch sync completed: {result.synced} activities synced, {result.failed} failed",
    )


@router.get(
    "/pending",
    response_model=PendingActivityListResponse,
    summary="List pending activities",
    description="List the current user's activities that have not been processed yet.",
)
async def list_pending_activities(
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> PendingActivityListResponse:
    """List the current user's pending activities."""
    service = _get_service(db)
    activities = await service.list_pending(current_user.id)

    return PendingActivityListResponse(
        items=[OfflineActivityResponse.model_validate(a) for a in activities],
        total=len(activities),
    )


@router.get(
    "/updates",
    response_model=UpdateCheckResponse,
    summary="Check for content updates",
    description="Tell whether the client's cached copy of a content item is stale.",
)
async def check_content_updates(
    content_id: Annotated[str, Query(min_length=1, description="Content ID")],
    content_type: Annotated[str, Query(description="course or oer_resource")],
    version_hash: Annotated[
        str | None, Query(description="Version hash cached by the client")
    ] = None,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> UpdateCheckResponse:
    """Check whether a cached content copy is stale.

    Raises:
        HTTPException: If the content type is invalid.
    """
    service = _get_service(db)

    try:
        check = await service.check_for_update(content_id, content_type, version_hash)
    except InvalidContentTypeError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )

    return UpdateCheckResponse(
        needs_update=check.needs_update,
        latest_version_hash=check.latest_version_hash,
    )


@router.post(
    "/versions/{content_type}/{content_id}",
    response_model=ContentVersionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create content version",
    description="Snapshot the current state of a content item as a new version.",
)
async def create_content_version(
    content_type: str,
    content_id: str,
    data: CreateVersionRequest,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> ContentVersionResponse:
    """Create a new version of a content item.

    The current user is recorded as the author.

    Raises:
        HTTPException: If the content type is invalid or content not found.
    """
    logger.info(
        "Creating version of %s/%s by %s",
        content_type,
        content_id,
        current_user.id,
    )

    service = _get_service(db)

    try:
        version = await service.create_version(
            content_id,
            content_type,
            data.changes,
            author_id=current_user.id,
        )
    except InvalidContentTypeError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )
    except ContentNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Content not found",
        )

    return ContentVersionResponse.model_validate(version)


@router.get(
    "/versions/{content_type}/{content_id}",
    response_model=ContentVersionListResponse,
    summary="List content versions",
    description="Version history of a content item, newest first.",
)
async def list_content_versions(
    content_type: str,
    content_id: str,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> ContentVersionListResponse:
    """List versions of a content item.

    Raises:
        HTTPException: If the content type is invalid.
    """
    service = _get_service(db)

    try:
        versions = await service.list_versions(content_id, content_type)
    except InvalidContentTypeError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )

    return ContentVersionListResponse(
        items=[ContentVersionResponse.model_validate(v) for v in versions],
        total=len(versions),
    )
