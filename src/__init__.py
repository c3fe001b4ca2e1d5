"""Courses Sync API Backend.

Offline activity synchronization, content versioning and learning
analytics for courses and open educational resources.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
