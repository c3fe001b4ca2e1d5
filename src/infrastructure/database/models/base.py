# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Declarative base and shared column mixins.

Column types are kept dialect-neutral (String ids, generic JSON) so the
same metadata runs on PostgreSQL in deployment and on SQLite in tests.
"""

from datetime import date, datetime
from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, DateTime, String, inspect
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from src.utils.datetime import format_iso, utc_now


def generate_uuid() -> str:
    """Generate a new primary key value."""
    return str(uuid4())


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""

    type_annotation_map = {
        dict[str, Any]: JSON,
        list[str]: JSON,
        list[dict[str, Any]]: JSON,
    }

    def to_dict(self) -> dict[str, Any]:
        """Serialize every mapped column to JSON-compatible values.

        Datetimes are rendered as ISO-8601 UTC and dates as ISO dates, so
        the result is stable for a given row regardless of the driver.
        """
        data: dict[str, Any] = {}
        for attr in inspect(self).mapper.column_attrs:
            value = getattr(self, attr.key)
            if isinstance(value, datetime):
                value = format_iso(value)
            elif isinstance(value, date):
                value = value.isoformat()
            data[attr.key] = value
        return data


class UUIDPrimaryKeyMixin:
    """String UUID primary key."""

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=generate_uuid,
    )


class TimestampMixin:
    """created_at / updated_at columns maintained by the ORM."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )
