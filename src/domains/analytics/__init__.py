# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Analytics domain services.

This module provides services for learning analytics:
- Per-day content engagement buckets (views, downloads, completions, ratings)
- Learning outcomes with competency banding
- Curriculum progress per user and subject
- Content engagement and user learning reports

Usage:
    from src.domains.analytics import AnalyticsService

    service = AnalyticsService(db)
    await service.track_engagement(content_id, "course", "complete")
    report = await service.get_content_engagement(content_id, "course")

    # Lower-level building blocks, used by offline sync
    from src.domains.analytics import EngagementAggregator

    aggregator = EngagementAggregator(db)
    await aggregator.record_event(content_id, "course", views=1)
"""

from src.domains.analytics.engagement import EngagementAggregator
from src.domains.analytics.outcomes import (
    LearningOutcomeRecorder,
    determine_competency_level,
)
from src.domains.analytics.service import (
    AnalyticsService,
    AnalyticsServiceError,
    AnalyticsValidationError,
)

__all__ = [
    "AnalyticsService",
    "AnalyticsServiceError",
    "AnalyticsValidationError",
    "EngagementAggregator",
    "LearningOutcomeRecorder",
    "determine_competency_level",
]
