"""Rate limiting utilities for unauthenticated endpoints.

Provides in-memory rate limiting keyed by client (usually the remote IP).
Uses a sliding window approach with automatic cleanup of expired entries.
"""

import time
from collections import defaultdict
from dataclasses import dataclass
from typing import TypeAlias

from fastapi import HTTPException, Request, status


@dataclass
class RateLimitConfig:
    """Configuration for rate limiting."""

    requests: int  # Maximum requests allowed
    window_seconds: int  # Time window in seconds


# Default configurations for different endpoint types
TOKEN_REFRESH_LIMIT = RateLimitConfig(requests=5, window_seconds=3600)  # 5 refreshes per hour
RFQ_SUBMIT_LIMIT = RateLimitConfig(requests=10, window_seconds=3600)  # 10 RFQs per hour


ClientKey: TypeAlias = str
Timestamp: TypeAlias = float


def client_key(request: Request) -> ClientKey:
    """Identify the caller by remote address (proxy headers already applied)."""
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


class RateLimiter:
    """In-memory rate limiter with sliding window.

    Tracks request timestamps per client and enforces configurable limits.
    Automatically cleans up expired entries to prevent memory bloat.

    Note: This is an in-memory implementation suitable for single-instance
    deployments. For multi-instance deployments, consider Redis-based limiting.
    """

    def __init__(self) -> None:
        # Map of client -> endpoint_key -> list of timestamps
        self._requests: dict[ClientKey, dict[str, list[Timestamp]]] = defaultdict(
            lambda: defaultdict(list)
        )
        self._last_cleanup = time.time()
        self._cleanup_interval = 300  # Clean up every 5 minutes

    def _cleanup_expired(self, window_seconds: int) -> None:
        """Remove expired entries to prevent memory growth."""
        now = time.time()

        if now - self._last_cleanup < self._cleanup_interval:
            return

        cutoff = now - window_seconds
        clients_to_remove: list[ClientKey] = []

        for client, endpoints in self._requests.items():
            for endpoint in [e for e, ts in endpoints.items() if all(t <= cutoff for t in ts)]:
                del endpoints[endpoint]
            if not endpoints:
                clients_to_remove.append(client)

        for client in clients_to_remove:
            del self._requests[client]

        self._last_cleanup = now

    def check_rate_limit(
        self,
        client: ClientKey,
        endpoint_key: str,
        config: RateLimitConfig,
    ) -> None:
        """Check if request is within rate limits.

        Args:
            client: Caller identity, e.g. the remote IP
            endpoint_key: Unique identifier for the endpoint (e.g., "token_refresh")
            config: Rate limit configuration to apply

        Raises:
            HTTPException: 429 Too Many Requests if limit exceeded
        """
        now = time.time()
        cutoff = now - config.window_seconds

        self._cleanup_expired(config.window_seconds)

        timestamps = self._requests[client][endpoint_key]
        recent_requests = [ts for ts in timestamps if ts > cutoff]

        if len(recent_requests) >= config.requests:
            retry_after = int(min(recent_requests) + config.window_seconds - now) + 1
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail=f"Rate limit exceeded. Try again in {retry_after} seconds.",
                headers={"Retry-After": str(retry_after)},
            )

        recent_requests.append(now)
        self._requests[client][endpoint_key] = recent_requests

    def reset(self) -> None:
        """Forget all recorded requests."""
        self._requests.clear()


# Singleton instance for application-wide use
rate_limiter = RateLimiter()
