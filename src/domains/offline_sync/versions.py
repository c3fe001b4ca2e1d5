# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Content version ledger.

Append-only sequence of version markers per content item. Each marker
holds a monotonically increasing number and a hash of the content's full
state at the time it was taken, which lets an offline client decide
whether its cached copy is stale.

The next version number is read and then written with no lock and no
unique constraint: two concurrent create_version calls for the same item
may produce the same number.
"""

import hashlib
import json
import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.content.store import ContentStore, resolve_kind
from src.infrastructure.database.models.offline_sync import ContentVersion
from src.models.common import ContentKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpdateCheck:
    """Whether a client should re-download a content item."""

    needs_update: bool
    latest_version_hash: str | None = None


def compute_content_hash(snapshot: dict[str, Any]) -> str:
    """Hash a content snapshot.

    MD5 over canonical JSON (sorted keys, compact separators). Used for
    change detection only.
    """
    payload = json.dumps(snapshot, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.md5(payload.encode("utf-8"), usedforsecurity=False).hexdigest()


class ContentVersionLedger:
    """Reads and appends content version markers.

    Attributes:
        db: Async database session.
        content: Content store used to snapshot content state.
    """

    def __init__(self, db: AsyncSession, content: ContentStore | None = None) -> None:
        self.db = db
        self.content = content or ContentStore(db)

    async def latest_version(
        self,
        content_id: str,
        kind: ContentKind | str,
    ) -> ContentVersion | None:
        """Get the highest-numbered version of a content item."""
        result = await self.db.execute(
            select(ContentVersion)
            .where(
                ContentVersion.content_id == content_id,
                ContentVersion.content_type == resolve_kind(kind).value,
            )
            .order_by(ContentVersion.version_number.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def check_for_update(
        self,
        content_id: str,
        kind: ContentKind | str,
        client_version_hash: str | None = None,
    ) -> UpdateCheck:
        """Compare a client's cached version against the latest version.

        - No version recorded yet: no update needed.
        - Client sent no hash: update needed.
        - Otherwise: update needed when the hashes differ.

        Args:
            content_id: Content ID.
            kind: Content kind.
            client_version_hash: Hash the client has cached, if any.

        Returns:
            UpdateCheck with the latest hash when a version exists.

        Raises:
            InvalidContentTypeError: If kind is not a known content kind.
        """
        latest = await self.latest_version(content_id, kind)
        if latest is None:
            return UpdateCheck(needs_update=False)

        if not client_version_hash:
            return UpdateCheck(needs_update=True, latest_version_hash=latest.version_hash)

        return UpdateCheck(
            needs_update=client_version_hash != latest.version_hash,
            latest_version_hash=latest.version_hash,
        )

    async def create_version(
        self,
        content_id: str,
        kind: ContentKind | str,
        changes: list[str],
        author_id: str | None = None,
    ) -> ContentVersion:
        """Append a version marker for the content's current state.

        Args:
            content_id: Content ID.
            kind: Content kind.
            changes: Human-readable change descriptions.
            author_id: User creating the version, if known.

        Returns:
            The committed ContentVersion.

        Raises:
            ContentNotFoundError: If the content does not exist.
            InvalidContentTypeError: If kind is not a known content kind.
        """
        kind = resolve_kind(kind)
        snapshot = await self.content.snapshot(content_id, kind)
        version_hash = compute_content_hash(snapshot)

        result = await self.db.execute(
            select(func.max(ContentVersion.version_number)).where(
                ContentVersion.content_id == content_id,
                ContentVersion.content_type == kind.value,
            )
        )
        current = result.scalar()
        version_number = (current or 0) + 1

        version = ContentVersion(
            content_id=content_id,
            content_type=kind.value,
            version_hash=version_hash,
            version_number=version_number,
            changes=list(changes),
            created_by=author_id,
        )
        self.db.add(version)
        await self.db.commit()
        await self.db.refresh(version)

        logger.info(
            "Created version %d of %s/%s (%s)",
            version_number,
            kind.value,
            content_id,
            version_hash,
        )
        return version

    async def list_versions(
        self,
        content_id: str,
        kind: ContentKind | str,
    ) -> list[ContentVersion]:
        """Get all versions of a content item, newest first."""
        result = await self.db.execute(
            select(ContentVersion)
            .where(
                ContentVersion.content_id == content_id,
                ContentVersion.content_type == resolve_kind(kind).value,
            )
            .order_by(ContentVersion.version_number.desc())
        )
        return list(result.scalars().all())
