# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the authentication middleware.

Tests the middleware components in isolation from database. Tokens are
signed with the test JWT settings the middleware reads.
"""

from datetime import timedelta
from uuid import uuid4

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from src.api.middleware.auth import AuthMiddleware, CurrentUser, get_current_user
from src.api.middleware.rate_limit import get_client_identifier
from src.domains.auth.jwt import TokenPayload


def _make_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(AuthMiddleware)

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    @app.get("/api/v1/test")
    async def test_endpoint(request: Request) -> dict:
        user = get_current_user(request)
        return {
            "user_id": user.id if user else None,
            "client": get_client_identifier(request),
        }

    return app


class TestAuthMiddleware:
    """Tests for AuthMiddleware."""

    def test_public_path_bypasses_auth(self) -> None:
        """Test that public paths don't require authentication."""
        client = TestClient(_make_app())

        response = client.get("/health", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == 200

    def test_valid_token_sets_user(self, token_factory) -> None:
        """Test that valid token sets request.state.user."""
        user_id = str(uuid4())
        token = token_factory(user_id, user_type="student")

        client = TestClient(_make_app())
        response = client.get("/api/v1/test", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert response.json()["user_id"] == user_id
        assert response.json()["client"] == f"user:{user_id}"

    def test_no_token_sets_user_none(self) -> None:
        """Test that missing token sets request.state.user to None."""
        client = TestClient(_make_app())
        response = client.get("/api/v1/test")

        assert response.status_code == 200
        assert response.json()["user_id"] is None
        assert response.json()["client"].startswith("ip:")

    @pytest.mark.parametrize(
        "header",
        ["Bearer invalid.token.here", "Basic dXNlcjpwYXNz", "Bearer", "token-without-scheme"],
    )
    def test_invalid_header_sets_user_none(self, header: str) -> None:
        """Test that malformed or invalid credentials are ignored."""
        client = TestClient(_make_app())
        response = client.get("/api/v1/test", headers={"Authorization": header})

        assert response.status_code == 200
        assert response.json()["user_id"] is None

    def test_expired_token_sets_user_none(self, token_factory) -> None:
        """Test that expired tokens are ignored."""
        token = token_factory(str(uuid4()), lifetime=timedelta(seconds=-10))

        client = TestClient(_make_app())
        response = client.get("/api/v1/test", headers={"Authorization": f"Bearer {token}"})

        assert response.json()["user_id"] is None

    def test_refresh_token_sets_user_none(self, token_factory) -> None:
        """Test that refresh tokens do not authenticate requests."""
        token = token_factory(str(uuid4()), token_type="refresh")

        client = TestClient(_make_app())
        response = client.get("/api/v1/test", headers={"Authorization": f"Bearer {token}"})

        assert response.json()["user_id"] is None


class TestCurrentUser:
    """Tests for CurrentUser."""

    @staticmethod
    def _payload(user_type: str | None, roles: list[str]) -> TokenPayload:
        return TokenPayload(
            sub="user-1",
            type="access",
            user_type=user_type,
            roles=roles,
            exp=2_000_000_000,
            iat=1_700_000_000,
            jti="jti",
        )

    @pytest.mark.parametrize(
        ("user_type", "roles", "expected"),
        [
            ("student", ["student"], False),
            ("teacher", [], False),
            (None, [], False),
            ("admin", [], True),
            ("superadmin", [], True),
            ("teacher", ["admin"], True),
        ],
    )
    def test_is_admin(self, user_type: str | None, roles: list[str], expected: bool) -> None:
        """Test admin detection by user type or role."""
        assert CurrentUser(self._payload(user_type, roles)).is_admin is expected

    def test_has_role(self) -> None:
        """Test role membership."""
        user = CurrentUser(self._payload("teacher", ["teacher", "reviewer"]))

        assert user.has_role("reviewer") is True
        assert user.has_role("admin") is False
