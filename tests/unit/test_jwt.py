# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for access token verification.

Tokens are signed with the test JWT settings, as the identity service
would sign them.
"""

from datetime import timedelta
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from jose import jwt
from pydantic import SecretStr

from src.core.config import get_settings
from src.domains.auth.jwt import (
    AccessTokenVerifier,
    InvalidTokenError,
    TokenExpiredError,
    TokenPayload,
)


@pytest.fixture
def verifier() -> AccessTokenVerifier:
    """Create a verifier with the test settings."""
    return AccessTokenVerifier(get_settings().jwt)


class TestAccessTokenVerifier:
    """Tests for AccessTokenVerifier."""

    def test_verify_returns_payload(
        self,
        verifier: AccessTokenVerifier,
        token_factory,
    ) -> None:
        """Test that verify returns the token claims."""
        user_id = str(uuid4())
        token = token_factory(user_id, user_type="student", roles=["student", "reader"])

        payload = verifier.verify(token)

        assert isinstance(payload, TokenPayload)
        assert payload.sub == user_id
        assert payload.type == "access"
        assert payload.user_type == "student"
        assert payload.roles == ["student", "reader"]
        assert payload.exp - payload.iat == 30 * 60

    def test_optional_claims_default(
        self,
        verifier: AccessTokenVerifier,
        token_factory,
    ) -> None:
        """Test a token without user type or roles."""
        payload = verifier.verify(token_factory(str(uuid4())))

        assert payload.roles == []
        assert payload.user_type is None

    def test_refresh_token_is_rejected(
        self,
        verifier: AccessTokenVerifier,
        token_factory,
    ) -> None:
        """Test that only access tokens are accepted."""
        token = token_factory(str(uuid4()), token_type="refresh")

        with pytest.raises(InvalidTokenError, match="Expected access token"):
            verifier.verify(token)

    def test_expired_token_raises_error(
        self,
        verifier: AccessTokenVerifier,
        token_factory,
    ) -> None:
        """Test that verify raises error for expired token."""
        token = token_factory(str(uuid4()), lifetime=timedelta(seconds=-10))

        with pytest.raises(TokenExpiredError, match="Token has expired"):
            verifier.verify(token)

    def test_malformed_token_raises_error(self, verifier: AccessTokenVerifier) -> None:
        """Test that verify raises error for a malformed token."""
        with pytest.raises(InvalidTokenError):
            verifier.verify("invalid.token.here")

    def test_wrong_secret_raises_error(self, token_factory) -> None:
        """Test that a token signed with another secret is rejected."""
        settings = MagicMock()
        settings.secret_key = SecretStr("different-secret-key")
        settings.algorithm = "HS256"
        other = AccessTokenVerifier(settings)

        with pytest.raises(InvalidTokenError):
            other.verify(token_factory(str(uuid4())))

    def test_missing_claims_raise_error(self, verifier: AccessTokenVerifier) -> None:
        """Test that a token without required claims is rejected."""
        settings = get_settings().jwt
        token = jwt.encode(
            {"sub": str(uuid4()), "type": "access"},
            settings.secret_key.get_secret_value(),
            algorithm=settings.algorithm,
        )

        with pytest.raises(InvalidTokenError, match="Invalid token claims"):
            verifier.verify(token)
