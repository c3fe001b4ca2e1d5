# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Access token verification.

Learners sign in through the platform's identity service, which issues
the bearer tokens. The sync API never mints tokens; it checks the
signature and expiry against the shared secret and turns the claims into
a TokenPayload.

Example:
    >>> from src.core.config import get_settings
    >>> verifier = AccessTokenVerifier(get_settings().jwt)
    >>> claims = verifier.verify(token)
    >>> claims.sub
    'user-123'
"""

import logging
from typing import Literal

from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel, ValidationError

from src.core.config.settings import JWTSettings

logger = logging.getLogger(__name__)


class TokenPayload(BaseModel):
    """Claims of a verified access token.

    Attributes:
        sub: Subject (user ID).
        type: Token type. Only access tokens are accepted.
        user_type: User type (student, teacher, admin, ...).
        roles: List of role codes.
        exp: Expiration timestamp.
        iat: Issued at timestamp.
        jti: Token ID assigned by the identity service.
    """

    sub: str
    type: Literal["access", "refresh"]
    user_type: str | None = None
    roles: list[str] = []
    exp: int
    iat: int
    jti: str


class TokenVerificationError(Exception):
    """Base exception for rejected tokens."""


class TokenExpiredError(TokenVerificationError):
    """Raised when a token has expired."""


class InvalidTokenError(TokenVerificationError):
    """Raised when a token is malformed, badly signed or not an access token."""


class AccessTokenVerifier:
    """Verifies bearer tokens issued by the identity service."""

    def __init__(self, settings: JWTSettings) -> None:
        self._secret = settings.secret_key.get_secret_value()
        self._algorithms = [settings.algorithm]

    def verify(self, token: str) -> TokenPayload:
        """Verify an access token and return its claims.

        Args:
            token: Encoded JWT from the Authorization header.

        Returns:
            TokenPayload with the verified claims.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the signature, claims or token type
                are not acceptable.
        """
        try:
            claims = jwt.decode(token, self._secret, algorithms=self._algorithms)
        except ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except JWTError as e:
            logger.warning("Token rejected: %s", e)
            raise InvalidTokenError(f"Invalid token: {e}") from e

        try:
            payload = TokenPayload.model_validate(claims)
        except ValidationError as e:
            raise InvalidTokenError(f"Invalid token claims: {e.error_count()} errors") from e

        if payload.type != "access":
            raise InvalidTokenError(f"Expected access token, got {payload.type}")

        return payload
