"""
Submission rate limiting.

In-memory sliding window per client address. State lives in the process, so each
worker keeps its own counters.
"""

import asyncio
import math
import time
from collections import defaultdict, deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Request, Response

from app.core.config import settings
from app.core.exceptions import RateLimitError


@dataclass(frozen=True)
class RateLimitState:
    allowed: bool
    limit: int
    remaining: int
    reset_after: int
    """Seconds until the oldest request in the window expires"""

    @property
    def headers(self) -> dict[str, str]:
        return {
            "RateLimit-Limit": str(self.limit),
            "RateLimit-Remaining": str(self.remaining),
            "RateLimit-Reset": str(self.reset_after),
        }


class SlidingWindowRateLimiter:
    def __init__(
        self, limit: int, window_seconds: float, clock: Callable[[], float] = time.monotonic
    ) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._requests: defaultdict[str, deque[float]] = defaultdict(deque)
        self._next_sweep: float | None = None
        self._lock = asyncio.Lock()

    @property
    def tracked_clients(self) -> int:
        return len(self._requests)

    def _sweep(self, now: float) -> None:
        """Forget every client whose newest request has left the window."""
        cutoff = now - self.window_seconds
        expired = [
            key for key, stamps in self._requests.items() if not stamps or stamps[-1] <= cutoff
        ]
        for key in expired:
            del self._requests[key]
        self._next_sweep = now + self.window_seconds

    async def hit(self, key: str) -> RateLimitState:
        """Record a request for key unless it would exceed the limit."""
        now = self._clock()

        async with self._lock:
            if self._next_sweep is None or now >= self._next_sweep:
                self._sweep(now)

            timestamps = self._requests[key]
            while timestamps and timestamps[0] <= now - self.window_seconds:
                timestamps.popleft()

            allowed = len(timestamps) < self.limit
            if allowed:
                timestamps.append(now)

            oldest = timestamps[0] if timestamps else now
            reset_after = max(0, math.ceil(oldest + self.window_seconds - now))
            remaining = self.limit - len(timestamps)

            if not timestamps:
                del self._requests[key]

        return RateLimitState(
            allowed=allowed, limit=self.limit, remaining=remaining, reset_after=reset_after
        )

    def reset(self) -> None:
        self._requests.clear()
        self._next_sweep = None


def get_client_address(request: Request, trusted_hops: int) -> str:
    """Resolve the client address the way a server behind trusted_hops proxies sees it.

    Each trusted proxy appends the address it received the request from to
    X-Forwarded-For, so the real client sits trusted_hops entries from the right.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded and trusted_hops > 0:
        addresses = [addr.strip() for addr in forwarded.split(",") if addr.strip()]
        if addresses:
            return addresses[max(0, len(addresses) - trusted_hops)]

    if request.client is not None:
        return request.client.host
    return "unknown"


submit_limiter = SlidingWindowRateLimiter(
    limit=settings.rate_limit_max, window_seconds=settings.rate_limit_window_seconds
)


def get_submit_limiter() -> SlidingWindowRateLimiter:
    return submit_limiter


async def limit_submissions(
    request: Request,
    response: Response,
    limiter: Annotated[SlidingWindowRateLimiter, Depends(get_submit_limiter)],
) -> None:
    address = get_client_address(request, settings.trusted_proxy_hops)
    state = await limiter.hit(address)

    if not state.allowed:
        raise RateLimitError(retry_after=state.reset_after, headers=state.headers)

    response.headers.update(state.headers)
