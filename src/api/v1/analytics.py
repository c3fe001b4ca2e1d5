# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Analytics API endpoints.

This module provides learning analytics endpoints:
- POST /engagement - Track a content engagement event
- POST /learning-outcome - Record a learning outcome for the current user
- GET /content/{content_type}/{content_id} - Content engagement report
- GET /user - Learning report of the current user
- GET /user/{user_id} - Learning report of a user (self or admin)
- GET /system - Platform-wide analytics (admin)

All endpoints require authentication.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db, require_admin, require_auth
from src.api.middleware.auth import CurrentUser
from src.core.config import get_settings
from src.domains.analytics import AnalyticsService, AnalyticsValidationError
from src.domains.content import ContentNotFoundError, InvalidContentTypeError
from src.models.analytics import (
    ContentEngagementReport,
    EngagementTrackedResponse,
    LearningOutcomeCreateRequest,
    LearningOutcomeResponse,
    SystemAnalyticsReport,
    TrackEngagementRequest,
    UserLearningReport,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_service(db: AsyncSession) -> AnalyticsService:
    """Get analytics service instance.

    Args:
        db: Database session.

    Returns:
        Configured AnalyticsService instance.
    """
    settings = get_settings()
    return AnalyticsService(db=db, window_days=settings.offline_sync.engagement_window_days)


@router.post(
    "/engagement",
    response_model=EngagementTrackedResponse,
    summary="Track content engagement",
    description="Count a view, download or completion, with an optional 1-5 rating.",
)
async def track_engagement(
    data: TrackEngagementRequest,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> EngagementTrackedResponse:
    """Track a content engagement event.

    Tracking failures are logged by the service and never surface here.
    """
    service = _get_service(db)
    await service.track_engagement(
        data.content_id,
        data.content_type,
        data.action,
        rating=data.rating,
    )

    return EngagementTrackedResponse(message="Content engagement tracked successfully")


@router.post(
    "/learning-outcome",
    response_model=LearningOutcomeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record learning outcome",
    description="Record a scored learning activity for the current user.",
)
async def record_learning_outcome(
    data: LearningOutcomeCreateRequest,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> LearningOutcomeResponse:
    """Record a learning outcome for the current user.

    Raises:
        HTTPException: If the outcome input is invalid.
    """
    service = _get_service(db)

    try:
        outcome = await service.record_learning_outcome(
            user_id=current_user.id,
            course_id=data.course_id,
            activity_type=data.activity_type,
            score=data.score,
            max_score=data.max_score,
            topic=data.topic,
            curriculum_tag=data.curriculum_tag,
            nerdc_code=data.nerdc_code,
        )
    except AnalyticsValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )

    return LearningOutcomeResponse.model_validate(outcome)


@router.get(
    "/content/{content_type}/{content_id}",
    response_model=ContentEngagementReport,
    summary="Content engagement report",
    description="Daily engagement, totals, completion rate and ratings of a content item.",
)
async def get_content_analytics(
    content_type: str,
    content_id: str,
    days: Annotated[
        int | None, Query(ge=1, le=365, description="Trailing window in days")
    ] = None,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> ContentEngagementReport:
    """Get the engagement report of a content item.

    Raises:
        HTTPException: If the content type is invalid or content not found.
    """
    service = _get_service(db)

    try:
        return await service.get_content_engagement(content_id, content_type, days=days)
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


@router.get(
    "/user",
    response_model=UserLearningReport,
    summary="My learning report",
    description="Recent outcomes, averages and curriculum progress of the current user.",
)
async def get_my_analytics(
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> UserLearningReport:
    """Get the current user's learning report."""
    service = _get_service(db)
    return await service.get_user_learning_analytics(current_user.id)


@router.get(
    "/user/{user_id}",
    response_model=UserLearningReport,
    summary="User learning report",
    description="Learning report of a user. Other users' reports require admin access.",
)
async def get_user_analytics(
    user_id: str,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> UserLearningReport:
    """Get a user's learning report.

    Raises:
        HTTPException: If a non-admin asks for another user's report.
    """
    if user_id != current_user.id and not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to view this user's analytics",
        )

    service = _get_service(db)
    return await service.get_user_learning_analytics(user_id)


@router.get(
    "/system",
    response_model=SystemAnalyticsReport,
    summary="System analytics",
    description="Content totals, top content by completion rate and curriculum adoption.",
)
async def get_system_analytics(
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> SystemAnalyticsReport:
    """Get the platform-wide analytics report. Admin only."""
    service = _get_service(db)
    return await service.get_system_analytics()
