"""Simple in-memory sliding-window rate limiter.

Sufficient for a single-instance deployment; every worker process keeps
its own window.  Liveness probes are never limited.
"""

from __future__ import annotations

import time
from collections import defaultdict, deque
from typing import Any, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from src.config import Settings, get_settings

EXEMPT_PATHS = frozenset({"/health"})


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Per-IP sliding window rate limiter."""

    def __init__(
        self,
        app: Any,
        settings: Settings | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(app)
        s = settings or get_settings()
        self._max_requests = s.rate_limit_per_minute
        self._window_seconds = 60
        self._clock = clock
        # ip -> request timestamps, oldest first
        self._requests: dict[str, deque[float]] = defaultdict(deque)

    def _client_ip(self, request: Request) -> str:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"

    def _expire(self, ip: str, now: float) -> deque[float]:
        window = self._requests[ip]
        cutoff = now - self._window_seconds
        while window and window[0] <= cutoff:
            window.popleft()
        return window

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in EXEMPT_PATHS:
            return await call_next(request)

        ip = self._client_ip(request)
        now = self._clock()
        window = self._expire(ip, now)

        if len(window) >= self._max_requests:
            retry_after = int(self._window_seconds - (now - window[0]))
            return Response(
                content='{"detail":"Rate limit exceeded"}',
                status_code=429,
                media_type="application/json",
                headers={"Retry-After": str(max(retry_after, 1))},
            )

        window.append(now)

        response = await call_next(request)

        # Inform clients of their remaining budget
        remaining = self._max_requests - len(window)
        response.headers["X-RateLimit-Limit"] = str(self._max_requests)
        response.headers["X-RateLimit-Remaining"] = str(max(remaining, 0))

        return response
