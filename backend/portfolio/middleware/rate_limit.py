"""
Rate limiting middleware using fixed windows per client IP.

Protects the endpoints that accept anonymous writes:
- POST {prefix}/auth/login: brute force against the admin password
- POST {prefix}/contact: contact form spam

Fixed Window Algorithm:
- Each (rule, IP) pair gets a counter and the time its window opened
- Each request increments the counter
- When the window has elapsed the counter resets
- Requests beyond the limit inside a window are rejected with 429

Limits are per IP, not per account, and no lockout state is kept: the
auth endpoints stay safe to call repeatedly.

Note: This is an in-memory implementation (not shared across processes).
"""

import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple
import logging

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitRule:
    """
    Limit applied to one method + path.

    Attributes:
        name: Rule identifier (used in bucket keys and logs)
        method: HTTP method the rule applies to
        path: Exact request path
        limit: Requests allowed per window
        window_seconds: Window length
        message: Error message returned when the limit is hit
    """
    name: str
    method: str
    path: str
    limit: int
    window_seconds: int
    message: str = "Too many requests, please try again later"

    def matches(self, method: str, path: str) -> bool:
        return method == self.method and path.rstrip("/") == self.path.rstrip("/")


class FixedWindowCounter:
    """
    Request counter for a single fixed window.

    Attributes:
        limit: Maximum requests per window
        window_seconds: Window length in seconds
        count: Requests seen in the current window
        window_start: Timestamp the current window opened
    """

    def __init__(self, limit: int, window_seconds: int, now: Optional[float] = None):
        self.limit = limit
        self.window_seconds = window_seconds
        self.count = 0
        self.window_start = time.time() if now is None else now

    def hit(self, now: Optional[float] = None) -> bool:
        """
        Record a request.

        Returns:
            True if the request is within the limit, False if rejected
        """
        now = time.time() if now is None else now
        if now - self.window_start >= self.window_seconds:
            self.window_start = now
            self.count = 0

        if self.count >= self.limit:
            return False

        self.count += 1
        return True

    @property
    def remaining(self) -> int:
        return max(self.limit - self.count, 0)

    def reset_in(self, now: Optional[float] = None) -> float:
        now = time.time() if now is None else now
        return max(self.window_start + self.window_seconds - now, 0.0)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Fixed-window rate limiting keyed by client IP and rule.

    Requests that match no rule pass through untouched.

    Example:
        app.add_middleware(
            RateLimitMiddleware,
            rules=[RateLimitRule("login", "POST", "/api/auth/login", 5, 900)],
        )

    Security Notes:
    - Uses client IP for bucketing; X-Forwarded-For is only honoured when
      trust_forwarded_for is set (i.e. behind a trusted proxy)
    - In-memory storage (not shared across instances)
    """

    def __init__(
        self,
        app,
        rules: List[RateLimitRule],
        enabled: bool = True,
        trust_forwarded_for: bool = False,
        cleanup_interval: int = 300,
    ):
        """
        Initialize rate limiting middleware.

        Args:
            app: ASGI application
            rules: Limits to enforce
            enabled: When False every request passes
            trust_forwarded_for: Take the client IP from X-Forwarded-For
            cleanup_interval: Seconds between sweeps of expired counters
        """
        super().__init__(app)
        self.rules = rules
        self.enabled = enabled
        self.trust_forwarded_for = trust_forwarded_for
        self.cleanup_interval = cleanup_interval

        # Storage: {(rule name, ip): counter}
        self.counters: Dict[Tuple[str, str], FixedWindowCounter] = {}
        self.last_cleanup = time.time()

        logger.info(
            "Rate limiting initialized",
            extra={
                "enabled": enabled,
                "rules": [f"{r.method} {r.path} {r.limit}/{r.window_seconds}s" for r in rules],
            }
        )

    def _get_client_ip(self, request: Request) -> str:
        """
        Extract client IP address from request.
        """
        if self.trust_forwarded_for:
            forwarded = request.headers.get("X-Forwarded-For")
            if forwarded:
                # Take first IP in chain (original client)
                return forwarded.split(",")[0].strip()

        if request.client:
            return request.client.host
        return "unknown"

    def _match_rule(self, method: str, path: str) -> Optional[RateLimitRule]:
        for rule in self.rules:
            if rule.matches(method, path):
                return rule
        return None

    def _get_counter(self, rule: RateLimitRule, ip: str, now: float) -> FixedWindowCounter:
        if now - self.last_cleanup > self.cleanup_interval:
            self._cleanup_expired(now)

        key = (rule.name, ip)
        counter = self.counters.get(key)
        if counter is None:
            counter = FixedWindowCounter(rule.limit, rule.window_seconds, now=now)
            self.counters[key] = counter
        return counter

    def _cleanup_expired(self, now: float) -> None:
        """
        Drop counters whose window has closed.

        Prevents memory growth from accumulating client IPs.
        """
        expired = [
            key for key, counter in self.counters.items()
            if now - counter.window_start >= counter.window_seconds
        ]
        for key in expired:
            del self.counters[key]

        if expired:
            logger.info(
                "Cleaned up expired rate limit counters",
                extra={"count": len(expired)}
            )

        self.last_cleanup = now

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        if not self.enabled:
            return await call_next(request)

        rule = self._match_rule(request.method, request.url.path)
        if rule is None:
            return await call_next(request)

        now = time.time()
        client_ip = self._get_client_ip(request)
        counter = self._get_counter(rule, client_ip, now)

        if not counter.hit(now):
            retry_after = int(counter.reset_in(now)) + 1

            logger.warning(
                "Rate limit exceeded",
                extra={
                    "client_ip": client_ip,
                    "path": request.url.path,
                    "rule": rule.name,
                    "limit": rule.limit,
                    "request_id": getattr(request.state, "request_id", None),
                }
            )

            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"error": rule.message},
                headers={
                    "Retry-After": str(retry_after),
                    "X-RateLimit-Limit": str(rule.limit),
                    "X-RateLimit-Remaining": "0",
                    "X-RateLimit-Reset": str(retry_after),
                }
            )

        response = await call_next(request)

        response.headers["X-RateLimit-Limit"] = str(rule.limit)
        response.headers["X-RateLimit-Remaining"] = str(counter.remaining)
        response.headers["X-RateLimit-Reset"] = str(int(counter.reset_in()) + 1)

        return response
