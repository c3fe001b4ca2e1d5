# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests
- Integration tests
- End-to-end tests

The test environment is applied before any application module is
imported: the rate limiter and the settings singleton read it at import
time.
"""

import os

TEST_ENVIRONMENT = {
    "ENVIRONMENT": "test",
    "DEBUG": "true",
    "LOG_LEVEL": "DEBUG",
    "DATABASE_URL": "sqlite+aiosqlite:///:memory:",
    "JWT_SECRET_KEY": "test-secret-key-for-testing-only",
    "JWT_ALGORITHM": "HS256",
    "RATE_LIMIT_ENABLED": "false",
    "RATE_LIMIT_STORAGE_URI": "memory://",
}

for _key, _value in TEST_ENVIRONMENT.items():
    os.environ.setdefault(_key, _value)

import secrets  # noqa: E402
from collections.abc import Callable  # noqa: E402
from datetime import datetime, timedelta, timezone  # noqa: E402
from typing import Any  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402
from jose import jwt  # noqa: E402

from src.core.config import clear_settings_cache, get_settings  # noqa: E402

clear_settings_cache()


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def test_environment() -> dict[str, str]:
    """Provide test environment variables.

    Returns:
        Dictionary of environment variables for testing.
    """
    return dict(TEST_ENVIRONMENT)


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (uses a database)"
    )
    config.addinivalue_line(
        "markers", "e2e: mark test as an end-to-end test (runs the full application)"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


# =============================================================================
# Common Fixtures
# =============================================================================


@pytest.fixture
def mock_db() -> AsyncMock:
    """Create mock database session."""
    db = AsyncMock()
    db.add = MagicMock()
    db.add_all = MagicMock()
    db.flush = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    db.execute = AsyncMock()
    db.get = AsyncMock()
    return db


TokenFactory = Callable[..., str]


def issue_token(
    secret: str,
    user_id: str,
    *,
    user_type: str | None = None,
    roles: list[str] | None = None,
    token_type: str = "access",
    lifetime: timedelta = timedelta(minutes=30),
    algorithm: str = "HS256",
) -> str:
    """Sign a token the way the identity service does."""
    now = datetime.now(timezone.utc)
    claims: dict[str, Any] = {
        "sub": user_id,
        "type": token_type,
        "user_type": user_type,
        "roles": roles or [],
        "exp": int((now + lifetime).timestamp()),
        "iat": int(now.timestamp()),
        "jti": secrets.token_urlsafe(16),
    }
    return jwt.encode(claims, secret, algorithm=algorithm)


@pytest.fixture
def token_factory() -> TokenFactory:
    """Issue tokens signed with the test JWT settings."""
    settings = get_settings().jwt

    def factory(user_id: str, **kwargs: Any) -> str:
        return issue_token(
            settings.secret_key.get_secret_value(),
            user_id,
            algorithm=settings.algorithm,
            **kwargs,
        )

    return factory


@pytest.fixture
def user_id() -> str:
    """Generate a user ID."""
    return str(uuid4())


@pytest.fixture
def auth_headers(token_factory: TokenFactory, user_id: str) -> dict[str, str]:
    """Authorization header of a student."""
    token = token_factory(
        user_id,
        user_type="student",
        roles=["student"],
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(token_factory: TokenFactory) -> dict[str, str]:
    """Authorization header of an admin."""
    token = token_factory(
        str(uuid4()),
        user_type="admin",
        roles=["admin"],
    )
    return {"Authorization": f"Bearer {token}"}
