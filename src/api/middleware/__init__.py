# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API middleware components.

This package provides middleware for request processing:
- AuthMiddleware: JWT authentication.
- limiter: slowapi rate limiter shared by the routers.

Exports:
    AuthMiddleware: JWT authentication middleware.
    limiter: Rate limiter instance.
"""

from src.api.middleware.auth import AuthMiddleware
from src.api.middleware.rate_limit import limiter

__all__ = [
    "AuthMiddleware",
    "limiter",
]
