# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Engagement aggregation.

Maintains one ContentEngagement bucket per (content, kind, UTC day):
- record_event: additive view/download/completion counters
- record_rating: running weighted average of 1-5 ratings
- list_buckets: buckets of a content item since a given day

Counter changes are applied with a single UPDATE ... SET col = col + delta
statement so concurrent writers do not lose increments. Nothing here
commits; the caller owns the unit of work.

Usage:
    aggregator = EngagementAggregator(db)
    await aggregator.record_event(content_id, ContentKind.COURSE, views=1)
    await aggregator.record_rating(content_id, ContentKind.COURSE, 4)
    await db.commit()
"""

import logging
from datetime import date, datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.content.store import resolve_kind
from src.infrastructure.database.models.analytics import ContentEngagement
from src.models.common import ContentKind
from src.utils.datetime import to_utc_day

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


class EngagementAggregator:
    """Per-day engagement counters for content items.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def record_event(
        self,
        content_id: str,
        kind: ContentKind | str,
        day: date | datetime | None = None,
        views: int = 0,
        downloads: int = 0,
        completions: int = 0,
    ) -> ContentEngagement:
        """Add counter deltas to a content item's bucket for a day.

        Args:
            content_id: Content ID.
            kind: Content kind.
            day: Bucket day; datetimes are truncated to their UTC day.
                Defaults to today (UTC).
            views: Views to add.
            downloads: Downloads to add.
            completions: Completions to add.

        Returns:
            The bucket with its stored values.
        """
        bucket = await self._get_or_create(content_id, kind, to_utc_day(day))

        deltas = {
            name: delta
            for name, delta in (
                ("views", views),
                ("downloads", downloads),
                ("completions", completions),
            )
            if delta
        }
        if deltas:
            await self.db.execute(
                update(ContentEngagement)
                .where(ContentEngagement.id == bucket.id)
                .values(
                    {
                        name: getattr(ContentEngagement, name) + delta
                        for name, delta in deltas.items()
                    }
                )
                .execution_options(synchronize_session=False)
            )
            await self.db.refresh(bucket)

        return bucket

    async def record_rating(
        self,
        content_id: str,
        kind: ContentKind | str,
        rating: float,
        day: date | datetime | None = None,
    ) -> ContentEngagement | None:
        """Fold a rating into the day's running average.

        Ratings outside 1-5 are ignored: nothing is created or changed and
        None is returned.

        Returns:
            The bucket with its stored values, or None if ignored.
        """
        if rating is None or not MIN_RATING <= rating <= MAX_RATING:
            logger.debug("Ignoring out-of-range rating %s for %s", rating, content_id)
            return None

        bucket = await self._get_or_create(content_id, kind, to_utc_day(day))

        # Every SET expression sees the pre-update row values
        await self.db.execute(
            update(ContentEngagement)
            .where(ContentEngagement.id == bucket.id)
            .values(
                avg_rating=(
                    ContentEngagement.avg_rating * ContentEngagement.rating_count + rating
                )
                / (ContentEngagement.rating_count + 1),
                rating_count=ContentEngagement.rating_count + 1,
            )
            .execution_options(synchronize_session=False)
        )
        await self.db.refresh(bucket)

        return bucket

    async def get_bucket(
        self,
        content_id: str,
        kind: ContentKind | str,
        day: date | datetime | None = None,
    ) -> ContentEngagement | None:
        """Get the bucket of a content item for a day, if it exists."""
        result = await self.db.execute(
            select(ContentEngagement).where(
                ContentEngagement.content_id == content_id,
                ContentEngagement.content_type == resolve_kind(kind).value,
                ContentEngagement.day == to_utc_day(day),
            )
        )
        return result.scalar_one_or_none()

    async def list_buckets(
        self,
        content_id: str,
        kind: ContentKind | str,
        since: date,
    ) -> list[ContentEngagement]:
        """Get the buckets of a content item from a day onward, oldest first."""
        result = await self.db.execute(
            select(ContentEngagement)
            .where(
                ContentEngagement.content_id == content_id,
                ContentEngagement.content_type == resolve_kind(kind).value,
                ContentEngagement.day >= since,
            )
            .order_by(ContentEngagement.day.asc())
        )
        return list(result.scalars().all())

    async def _get_or_create(
        self,
        content_id: str,
        kind: ContentKind | str,
        day: date,
    ) -> ContentEngagement:
        bucket = await self.get_bucket(content_id, kind, day)
        if bucket is not None:
            return bucket

        bucket = ContentEngagement(
            content_id=content_id,
            content_type=resolve_kind(kind).value,
            day=day,
            views=0,
            downloads=0,
            completions=0,
            avg_rating=0.0,
            rating_count=0,
        )
        self.db.add(bucket)
        await self.db.flush()

        logger.debug("Created engagement bucket %s/%s on %s", kind, content_id, day)
        return bucket
