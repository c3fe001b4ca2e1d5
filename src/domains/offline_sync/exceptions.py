# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Offline sync exceptions.

- OfflineSyncError: Base exception for the offline sync domain
- ActivityValidationError: Malformed or missing activity input
- ActivityProcessingError: An activity handler failed
"""


class OfflineSyncError(Exception):
    """Base exception for offline sync errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional error context.
    """

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ActivityValidationError(OfflineSyncError):
    """Raised when activity input is missing or malformed.

    Examples: an empty batch, a quiz attempt without answers, an unknown
    activity type.
    """

    pass


class ActivityProcessingError(OfflineSyncError):
    """Raised when applying an activity's effect fails.

    Attributes:
        activity_id: ID of the activity being processed.
        activity_type: Kind of the activity.
        user_id: Owning user.
        cause: Exception raised by the handler.
    """

    def __init__(
        self,
        activity_id: str,
        activity_type: str,
        user_id: str,
        cause: Exception,
    ):
        self.activity_id = activity_id
        self.activity_type = activity_type
        self.user_id = user_id
        self.cause = cause
        message = getattr(cause, "message", None) or str(cause) or type(cause).__name__
        super().__init__(
            f"Failed to process activity {activity_id}: {message}",
            details={
                "activity_id": activity_id,
                "activity_type": activity_type,
                "user_id": user_id,
                "error_type": type(cause).__name__,
            },
        )
