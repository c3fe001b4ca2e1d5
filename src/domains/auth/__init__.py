# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication domain services.

Access tokens are issued by the platform's identity service. This package
verifies them.

Exports:
    AccessTokenVerifier: Bearer token verification.
    TokenPayload: Verified token claims.
"""

from src.domains.auth.jwt import AccessTokenVerifier, TokenPayload

__all__ = [
    "AccessTokenVerifier",
    "TokenPayload",
]
