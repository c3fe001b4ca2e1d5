# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Offline sync domain.

Clients record learning activity while offline and submit it later.
Submitted activities are queued as pending, then applied one by one by
the ActivityProcessor, which moves each to synced or failed. The content
version ledger lets clients tell whether their cached content is stale.

Usage:
    from src.domains.offline_sync import OfflineSyncService

    service = OfflineSyncService(db)
    result = await service.sync_user_activities(user_id)
    check = await service.check_for_update(content_id, "course", cached_hash)
"""

from src.domains.offline_sync.exceptions import (
    ActivityProcessingError,
    ActivityValidationError,
    OfflineSyncError,
)
from src.domains.offline_sync.processor import ActivityProcessor, SyncResult, score_quiz_answers
from src.domains.offline_sync.queue import ActivityQueue
from src.domains.offline_sync.service import OfflineSyncService
from src.domains.offline_sync.versions import (
    ContentVersionLedger,
    UpdateCheck,
    compute_content_hash,
)

__all__ = [
    "OfflineSyncService",
    "ActivityQueue",
    "ActivityProcessor",
    "ContentVersionLedger",
    "SyncResult",
    "UpdateCheck",
    "score_quiz_answers",
    "compute_content_hash",
    "OfflineSyncError",
    "ActivityValidationError",
    "ActivityProcessingError",
]
