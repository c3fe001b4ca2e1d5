# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Activity queue.

Durable staging area for client-submitted offline activities. Submitted
activities are stored as pending; nothing else happens at this stage.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.offline_sync.exceptions import ActivityValidationError
from src.infrastructure.database.models.offline_sync import OfflineActivity
from src.models.common import SyncStatus
from src.models.offline_sync import ActivityInput
from src.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)


class ActivityQueue:
    """Persists offline activities and lists the pending ones.

    Attributes:
        db: Async database session.
        max_batch_size: Largest accepted submission, or None for no limit.
    """

    def __init__(self, db: AsyncSession, max_batch_size: int | None = None) -> None:
        self.db = db
        self.max_batch_size = max_batch_size

    async def submit(
        self,
        activities: list[ActivityInput],
        session_user_id: str | None = None,
    ) -> list[OfflineActivity]:
        """Store activities as pending.

        When a session user is given it replaces every input's user_id, so
        a submission is always attributed to the authenticated user.

        Args:
            activities: Client-recorded activities.
            session_user_id: Authenticated user, if any.

        Returns:
            The stored activities, in input order.

        Raises:
            ActivityValidationError: If the list is empty, too large, or an
                activity has no owning user.
        """
        if not activities:
            raise ActivityValidationError("No activities provided")

        if self.max_batch_size is not None and len(activities) > self.max_batch_size:
            raise ActivityValidationError(
                f"Too many activities in one batch (max {self.max_batch_size})",
                details={"count": len(activities), "max": self.max_batch_size},
            )

        records: list[OfflineActivity] = []
        for index, item in enumerate(activities):
            user_id = session_user_id or item.user_id
            if not user_id:
                raise ActivityValidationError(
                    "Activity is missing user_id",
                    details={"index": index},
                )

            records.append(
                OfflineActivity(
                    user_id=user_id,
                    activity_type=item.activity_type.value,
                    content_id=item.content_id,
                    content_type=item.content_type.value,
                    details=item.details.model_dump(exclude_none=True),
                    created_at=ensure_utc(item.created_at) if item.created_at else utc_now(),
                    sync_status=SyncStatus.PENDING.value,
                    version_hash=item.version_hash,
                )
            )

        self.db.add_all(records)
        await self.db.commit()

        logger.info(
            "Queued %d offline activities for user %s",
            len(records),
            session_user_id or "<per-item>",
        )

        return records

    async def list_pending(self, user_id: str) -> list[OfflineActivity]:
        """Get all pending activities of a user. Order is not guaranteed."""
        result = await self.db.execute(
            select(OfflineActivity).where(
                OfflineActivity.user_id == user_id,
                OfflineActivity.sync_status == SyncStatus.PENDING.value,
            )
        )
        return list(result.scalars().all())
