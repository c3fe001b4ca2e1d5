# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Exceptions for content store operations.

- ContentServiceError: Base exception for content lookups
- ContentNotFoundError: Referenced content does not exist
- InvalidContentTypeError: Content kind tag is not recognised
"""


class ContentServiceError(Exception):
    """Base exception for all content store errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional error context.
    """

    def __init__(self, message: str, details: dict | None = None):
        """Initialize content error.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation with details if available."""
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ContentNotFoundError(ContentServiceError):
    """Raised when a content item does not exist.

    Attributes:
        content_id: ID that was looked up.
        content_type: Kind that was looked up.
    """

    def __init__(self, content_id: str, content_type: str):
        self.content_id = content_id
        self.content_type = content_type
        super().__init__(
            f"Content not found: {content_type}/{content_id}",
            details={"content_id": content_id, "content_type": content_type},
        )


class InvalidContentTypeError(ContentServiceError):
    """Raised when a content kind is neither course nor oer_resource."""

    def __init__(self, content_type: str):
        self.content_type = content_type
        super().__init__(
            f"Invalid content type: {content_type}",
            details={"content_type": content_type},
        )
