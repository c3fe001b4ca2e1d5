# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Offline sync service.

This module provides the OfflineSyncService class for:
- Syncing a user's pending offline activities
- Submitting and syncing a batch of activities
- Checking whether cached content is stale
- Creating and listing content versions

Usage:
    from src.domains.offline_sync import OfflineSyncService

    service = OfflineSyncService(db)
    result = await service.batch_sync_activities(activities, session_user_id=user.id)
    print(result.synced, result.failed)
"""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.content.store import ContentStore
from src.domains.offline_sync.processor import ActivityProcessor, SyncResult
from src.domains.offline_sync.queue import ActivityQueue
from src.domains.offline_sync.versions import ContentVersionLedger, UpdateCheck
from src.infrastructure.database.models.offline_sync import ContentVersion, OfflineActivity
from src.models.common import ContentKind
from src.models.offline_sync import ActivityInput

logger = logging.getLogger(__name__)


class OfflineSyncService:
    """Service for offline activity synchronization and content versioning.

    Activities are always processed one after another. A failed activity
    stays failed; it is not retried.

    Attributes:
        db: Async database session.
        queue: Activity queue.
        processor: Activity processor.
        ledger: Content version ledger.
    """

    def __init__(self, db: AsyncSession, max_batch_size: int | None = None) -> None:
        """Initialize offline sync service.

        Args:
            db: Async database session.
            max_batch_size: Largest accepted batch, or None for no limit.
        """
        self.db = db
        self.queue = ActivityQueue(db, max_batch_size=max_batch_size)
        self.processor = ActivityProcessor(db)
        self.ledger = ContentVersionLedger(db, ContentStore(db))

    async def sync_user_activities(self, user_id: str) -> SyncResult:
        """Process all pending activities of a user.

        Args:
            user_id: User whose queue is drained.

        Returns:
            Counts of synced and failed activities.
        """
        pending = await self.queue.list_pending(user_id)
        if not pending:
            logger.debug("No pending offline activities for user %s", user_id)
            return SyncResult()

        return await self.processor.process_many(pending)

    async def batch_sync_activities(
        self,
        activities: list[ActivityInput],
        session_user_id: str | None = None,
    ) -> SyncResult:
        """Store a batch as pending, then process each stored activity.

        Args:
            activities: Client-recorded activities.
            session_user_id: Authenticated user; overrides every user_id.

        Returns:
            Counts of synced and failed activities.

        Raises:
            ActivityValidationError: If the batch cannot be accepted.
        """
        created = await self.queue.submit(activities, session_user_id=session_user_id)
        return await self.processor.process_many(created)

    async def list_pending(self, user_id: str) -> list[OfflineActivity]:
        """Get a user's pending activities."""
        return await self.queue.list_pending(user_id)

    async def check_for_update(
        self,
        content_id: str,
        kind: ContentKind | str,
        client_version_hash: str | None = None,
    ) -> UpdateCheck:
        """Tell whether a client's cached copy of content is stale."""
        return await self.ledger.check_for_update(content_id, kind, client_version_hash)

    async def create_version(
        self,
        content_id: str,
        kind: ContentKind | str,
        changes: list[str],
        author_id: str | None = None,
    ) -> ContentVersion:
        """Snapshot the current state of content as a new version."""
        return await self.ledger.create_version(content_id, kind, changes, author_id)

    async def list_versions(
        self,
        content_id: str,
        kind: ContentKind | str,
    ) -> list[ContentVersion]:
        """Get the version history of content, newest first."""
        return await self.ledger.list_versions(content_id, kind)
