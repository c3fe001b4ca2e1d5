# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer.

This package contains domain services that encapsulate business logic.
Each domain module provides services that orchestrate operations
across the persistence layer.

Domains:
    analytics: Content engagement, learning outcomes and curriculum progress.
    auth: Access token verification.
    content: Lookup of courses and OER resources by kind.
    offline_sync: Offline activity queue, processing and content versions.
"""
