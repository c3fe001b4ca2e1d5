# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Rate limiting for sync clients, using slowapi.

A device coming back online may replay a large backlog, so batch
submission carries its own limit on top of the per-client default. The
client key is the authenticated learner when there is one, otherwise the
remote address. Counters are kept in the store named by
``rate_limit_storage_uri`` (Redis unless overridden).
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from src.core.config import get_settings

logger = logging.getLogger(__name__)

DEFAULT_RETRY_AFTER_SECONDS = 60


def get_client_identifier(request: Request) -> str:
    """Key rate limit counters by learner, falling back to the remote address."""
    user = getattr(request.state, "user", None)
    if user is not None:
        return f"user:{user.id}"
    return f"ip:{get_remote_address(request)}"


def _build_limiter() -> Limiter:
    settings = get_settings()
    return Limiter(
        key_func=get_client_identifier,
        default_limits=[f"{settings.rate_limit.requests_per_minute}/minute"],
        storage_uri=settings.rate_limit_storage_uri,
        enabled=settings.rate_limit.enabled,
    )


limiter = _build_limiter()


def _retry_after(exc: RateLimitExceeded) -> int:
    limit = getattr(exc, "limit", None)
    if limit is None:
        return DEFAULT_RETRY_AFTER_SECONDS
    return int(limit.limit.get_expiry())


async def rate_limit_exceeded_handler(
    request: Request,
    exc: RateLimitExceeded,
) -> JSONResponse:
    """Reject the request with 429. Retry-After is the exceeded window length."""
    retry_after = _retry_after(exc)
    logger.warning(
        "Rate limit %s exceeded by %s on %s",
        exc.detail,
        get_client_identifier(request),
        request.url.path,
    )
    return JSONResponse(
        status_code=429,
        content={
            "detail": "Too many requests. Please try again later.",
            "limit": exc.detail,
            "retry_after": retry_after,
        },
        headers={"Retry-After": str(retry_after)},
    )
