# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

This package contains all v1 API endpoint definitions.
Each module provides a FastAPI router for a specific domain.

Modules:
    offline_sync: Offline activity sync and content version endpoints.
    analytics: Content engagement and learning analytics endpoints.
"""

from fastapi import APIRouter

from src.api.v1 import analytics, offline_sync

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

# Include domain routers
router.include_router(offline_sync.router, prefix="/offline-sync", tags=["Offline Sync"])
router.include_router(analytics.router, prefix="/analytics", tags=["Analytics"])

__all__ = ["router"]
