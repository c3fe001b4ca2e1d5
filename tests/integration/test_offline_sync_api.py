# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for offline sync API endpoints."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from fastapi import FastAPI
from fastapi.routing import APIRoute
from fastapi.testclient import TestClient

from src.api.dependencies import get_db
from src.api.middleware.auth import AuthMiddleware
from src.api.v1 import router as v1_router
from src.domains.content import ContentNotFoundError
from src.domains.offline_sync import SyncResult, UpdateCheck
from src.infrastructure.database.models import ContentVersion, OfflineActivity

BASE = "/api/v1/offline-sync"


@pytest.fixture
def app(mock_db) -> FastAPI:
    """Create test FastAPI app with a mocked database session."""
    app = FastAPI()
    app.add_middleware(AuthMiddleware)
    app.include_router(v1_router)

    async def override_get_db():
        yield mock_db

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def mock_service() -> MagicMock:
    """Create mock offline sync service."""
    service = MagicMock()
    service.sync_user_activities = AsyncMock()
    service.batch_sync_activities = AsyncMock()
    service.list_pending = AsyncMock()
    service.check_for_update = AsyncMock()
    service.create_version = AsyncMock()
    service.list_versions = AsyncMock()
    return service


def _version(content_id: str, number: int = 1, author: str | None = None) -> ContentVersion:
    return ContentVersion(
        id=str(uuid4()),
        content_id=content_id,
        content_type="course",
        version_hash="0cc175b9c0f1b6a831c399e269772661",
        version_number=number,
        changes=["Initial"],
        created_by=author,
        created_at=datetime(2025, 6, 1, tzinfo=timezone.utc),
    )


class TestOfflineSyncAPIRouting:
    """Tests for offline sync API routing."""

    def test_routes_registered(self, app: FastAPI) -> None:
        """Test that offline sync routes are registered."""
        routes = [route.path for route in app.routes if isinstance(route, APIRoute)]

        assert f"{BASE}/user" in routes
        assert f"{BASE}/batch" in routes
        assert f"{BASE}/pending" in routes
        assert f"{BASE}/updates" in routes
        assert f"{BASE}/versions/{{content_type}}/{{content_id}}" in routes

    @pytest.mark.parametrize(
        ("method", "path"),
        [
            ("post", f"{BASE}/user"),
            ("post", f"{BASE}/batch"),
            ("get", f"{BASE}/pending"),
            ("get", f"{BASE}/updates?content_id=c&content_type=course"),
            ("get", f"{BASE}/versions/course/c"),
        ],
    )
    def test_requires_authentication(self, client: TestClient, method: str, path: str) -> None:
        """Test that every endpoint rejects anonymous requests."""
        response = getattr(client, method)(path)

        assert response.status_code == 401


class TestBatchSyncEndpoint:
    """Tests for POST /batch."""

    def test_empty_batch_is_bad_request(self, client: TestClient, auth_headers: dict) -> None:
        """Test that an empty batch is rejected by the service."""
        response = client.post(f"{BASE}/batch", json={"activities": []}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "No activities provided"

    def test_unknown_activity_type_is_unprocessable(
        self,
        client: TestClient,
        auth_headers: dict,
    ) -> None:
        """Test request validation of activity types."""
        payload = {
            "activities": [
                {"activity_type": "teleport", "content_id": "c-1", "content_type": "course"}
            ]
        }

        response = client.post(f"{BASE}/batch", json=payload, headers=auth_headers)

        assert response.status_code == 422

    @patch("src.api.v1.offline_sync._get_service")
    def test_batch_sync_success(
        self,
        mock_get_service: MagicMock,
        client: TestClient,
        auth_headers: dict,
        mock_service: MagicMock,
        user_id: str,
    ) -> None:
        """Test batch summary and attribution to the session user."""
        mock_get_service.return_value = mock_service
        mock_service.batch_sync_activities.return_value = SyncResult(synced=2, failed=1)
        payload = {
            "activities": [
                {
                    "activity_type": "quiz_attempt",
                    "content_id": "c-1",
                    "content_type": "course",
                    "user_id": "spoofed-user",
                    "details": {"quiz_answers": [{"question_id": "q1", "selected_option": "a"}]},
                },
                {"activity_type": "content_view", "content_id": "c-2", "content_type": "oer_resource"},
                {"activity_type": "download", "content_id": "c-3", "content_type": "course"},
            ]
        }

        response = client.post(f"{BASE}/batch", json=payload, headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {
            "synced": 2,
            "failed": 1,
            "message": "Batch sync completed: 2 activities synced, 1 failed",
        }
        args, kwargs = mock_service.batch_sync_activities.call_args
        assert len(args[0]) == 3
        assert kwargs["session_user_id"] == user_id


class TestSyncUserEndpoint:
    """Tests for POST /user and GET /pending."""

    @patch("src.api.v1.offline_sync._get_service")
    def test_sync_user_activities(
        self,
        mock_get_service: MagicMock,
        client: TestClient,
        auth_headers: dict,
        mock_service: MagicMock,
        user_id: str,
    ) -> None:
        """Test the sync summary."""
        mock_get_service.return_value = mock_service
        mock_service.sync_user_activities.return_value = SyncResult(synced=3, failed=0)

        response = client.post(f"{BASE}/user", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Sync completed: 3 activities synced, 0 failed"
        mock_service.sync_user_activities.assert_awaited_once_with(user_id)

    @patch("src.api.v1.offline_sync._get_service")
    def test_list_pending(
        self,
        mock_get_service: MagicMock,
        client: TestClient,
        auth_headers: dict,
        mock_service: MagicMock,
        user_id: str,
    ) -> None:
        """Test the pending activity listing."""
        mock_get_service.return_value = mock_service
        mock_service.list_pending.return_value = [
            OfflineActivity(
                id=str(uuid4()),
                user_id=user_id,
                activity_type="content_view",
                content_id="c-1",
                content_type="course",
                details={"view_duration": 30},
                created_at=datetime(2025, 6, 1, tzinfo=timezone.utc),
                synced_at=None,
                sync_status="pending",
                version_hash=None,
            )
        ]

        response = client.get(f"{BASE}/pending", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["sync_status"] == "pending"
        assert data["items"][0]["details"] == {"view_duration": 30}


class TestContentVersionEndpoints:
    """Tests for update checks and versions."""

    @patch("src.api.v1.offline_sync._get_service")
    def test_check_for_updates(
        self,
        mock_get_service: MagicMock,
        client: TestClient,
        auth_headers: dict,
        mock_service: MagicMock,
    ) -> None:
        """Test the update check response."""
        mock_get_service.return_value = mock_service
        mock_service.check_for_update.return_value = UpdateCheck(
            needs_update=True,
            latest_version_hash="abc",
        )

        response = client.get(
            f"{BASE}/updates",
            params={"content_id": "c-1", "content_type": "course", "version_hash": "old"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json() == {"needs_update": True, "latest_version_hash": "abc"}
        mock_service.check_for_update.assert_awaited_once_with("c-1", "course", "old")

    def test_check_for_updates_invalid_type(self, client: TestClient, auth_headers: dict) -> None:
        """Test that an unknown content type is a bad request."""
        response = client.get(
            f"{BASE}/updates",
            params={"content_id": "c-1", "content_type": "podcast"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid content type: podcast"

    @patch("src.api.v1.offline_sync._get_service")
    def test_create_version(
        self,
        mock_get_service: MagicMock,
        client: TestClient,
        auth_headers: dict,
        mock_service: MagicMock,
        user_id: str,
    ) -> None:
        """Test version creation with the current user as author."""
        mock_get_service.return_value = mock_service
        mock_service.create_version.return_value = _version("c-1", author=user_id)

        response = client.post(
            f"{BASE}/versions/course/c-1",
            json={"changes": ["Initial"]},
            headers=auth_headers,
        )

        assert response.status_code == 201
        assert response.json()["version_number"] == 1
        assert response.json()["created_by"] == user_id
        mock_service.create_version.assert_awaited_once_with(
            "c-1", "course", ["Initial"], author_id=user_id
        )

    @patch("src.api.v1.offline_sync._get_service")
    def test_create_version_missing_content(
        self,
        mock_get_service: MagicMock,
        client: TestClient,
        auth_headers: dict,
        mock_service: MagicMock,
    ) -> None:
        """Test that versioning missing content is not found."""
        mock_get_service.return_value = mock_service
        mock_service.create_version.side_effect = ContentNotFoundError("c-404", "course")

        response = client.post(
            f"{BASE}/versions/course/c-404",
            json={"changes": ["Initial"]},
            headers=auth_headers,
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Content not found"

    @patch("src.api.v1.offline_sync._get_service")
    def test_list_versions(
        self,
        mock_get_service: MagicMock,
        client: TestClient,
        auth_headers: dict,
        mock_service: MagicMock,
    ) -> None:
        """Test the version history listing."""
        mock_get_service.return_value = mock_service
        mock_service.list_versions.return_value = [_version("c-1", 2), _version("c-1", 1)]

        response = client.get(f"{BASE}/versions/course/c-1", headers=auth_headers)

        assert response.status_code == 200
        assert [v["version_number"] for v in response.json()["items"]] == [2, 1]
        assert response.json()["total"] == 2
