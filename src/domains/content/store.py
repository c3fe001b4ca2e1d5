# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Content store.

Read access to content entities (unified courses and OER resources) by
(id, kind), full-state snapshots for version hashing, and atomic counter
increments for download tracking.

Content kinds resolve to ORM models through CONTENT_MODELS, an explicit
lookup table keyed by ContentKind.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.content.exceptions import ContentNotFoundError, InvalidContentTypeError
from src.infrastructure.database.models.content import OERResource, UnifiedCourse
from src.models.common import ContentKind

logger = logging.getLogger(__name__)

ContentEntity = UnifiedCourse | OERResource

CONTENT_MODELS: dict[ContentKind, type[UnifiedCourse] | type[OERResource]] = {
    ContentKind.COURSE: UnifiedCourse,
    ContentKind.OER_RESOURCE: OERResource,
}

# Counters that may be incremented through increment_counter()
COUNTER_FIELDS = frozenset({"download_count"})


def resolve_kind(kind: ContentKind | str) -> ContentKind:
    """Convert a content kind tag into a ContentKind.

    Args:
        kind: ContentKind member or its string value.

    Returns:
        The matching ContentKind.

    Raises:
        InvalidContentTypeError: If the tag is not a known kind.
    """
    if isinstance(kind, ContentKind):
        return kind
    try:
        return ContentKind(kind)
    except ValueError:
        raise InvalidContentTypeError(str(kind)) from None


class ContentStore:
    """Accessor for content entities.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize content store.

        Args:
            db: Async database session.
        """
        self.db = db

    @staticmethod
    def model_for(kind: ContentKind | str) -> type[UnifiedCourse] | type[OERResource]:
        """Get the ORM model for a content kind."""
        return CONTENT_MODELS[resolve_kind(kind)]

    async def get(self, content_id: str, kind: ContentKind | str) -> ContentEntity | None:
        """Get a content entity, or None if it does not exist."""
        model = self.model_for(kind)
        return await self.db.get(model, content_id)

    async def require(self, content_id: str, kind: ContentKind | str) -> ContentEntity:
        """Get a content entity.

        Raises:
            ContentNotFoundError: If the entity does not exist.
        """
        content = await self.get(content_id, kind)
        if content is None:
            raise ContentNotFoundError(content_id, resolve_kind(kind).value)
        return content

    async def snapshot(self, content_id: str, kind: ContentKind | str) -> dict[str, Any]:
        """Serialize the full current state of a content entity.

        The entity is refreshed first so the snapshot reflects what is
        stored, not what an earlier load in this session saw.

        Raises:
            ContentNotFoundError: If the entity does not exist.
        """
        content = await self.require(content_id, kind)
        await self.db.refresh(content)
        return content.to_dict()

    async def increment_counter(
        self,
        content_id: str,
        kind: ContentKind | str,
        field: str = "download_count",
        amount: int = 1,
    ) -> None:
        """Atomically add to a stored counter of a content entity.

        Issues a single UPDATE ... SET field = field + amount so concurrent
        increments are not lost.

        Raises:
            ValueError: If field is not an incrementable counter.
            ContentNotFoundError: If the entity does not exist.
        """
        if field not in COUNTER_FIELDS:
            raise ValueError(f"Not a counter field: {field}")

        model = self.model_for(kind)
        column = getattr(model, field)
        result = await self.db.execute(
            update(model)
            .where(model.id == content_id)
            .values({field: column + amount})
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise ContentNotFoundError(content_id, resolve_kind(kind).value)

        logger.debug("Incremented %s on %s/%s by %d", field, kind, content_id, amount)
