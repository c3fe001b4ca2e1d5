# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Content domain: lookup of courses and OER resources by kind."""

from src.domains.content.exceptions import (
    ContentNotFoundError,
    ContentServiceError,
    InvalidContentTypeError,
)
from src.domains.content.store import CONTENT_MODELS, ContentStore, resolve_kind

__all__ = [
    "ContentStore",
    "CONTENT_MODELS",
    "resolve_kind",
    "ContentServiceError",
    "ContentNotFoundError",
    "InvalidContentTypeError",
]
