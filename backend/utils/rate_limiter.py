"""Per-client-IP sliding window rate limiting, used as a FastAPI dependency."""

import logging
import time
from collections import defaultdict, deque
from typing import Deque, Dict

from fastapi import Request, HTTPException, status

logger = logging.getLogger(__name__)


class RateLimiter:
    def __init__(self, requests_limit: int, time_window: int, name: str = "default"):
        self.requests_limit = requests_limit
        self.time_window = time_window  # in seconds
        self.name = name
        self.ip_requests: Dict[str, Deque[float]] = defaultdict(deque)
        self.cleanup_interval = 600  # Cleanup every 10 minutes
        self.last_cleanup = time.time()

    def _get_client_ip(self, request: Request) -> str:
        """
        Get the real client IP, respecting X-Forwarded-For if behind a proxy.
        The first address in X-Forwarded-For is the original client.
        """
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        if request.client and request.client.host:
            return request.client.host
        return "127.0.0.1"

    async def __call__(self, request: Request):
        client_ip = self._get_client_ip(request)
        current_time = time.time()

        if current_time - self.last_cleanup > self.cleanup_interval:
            self._cleanup(current_time)
            self.last_cleanup = current_time

        # Drop timestamps that fell out of the window
        request_times = self.ip_requests[client_ip]
        while request_times and current_time - request_times[0] >= self.time_window:
            request_times.popleft()

        if len(request_times) >= self.requests_limit:
            logger.warning("Rate limit '%s' hit for %s", self.name, client_ip)
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Too many requests. Please try again later."
            )

        request_times.append(current_time)
        return True

    def _cleanup(self, current_time: float):
        """Forget IPs whose newest request is older than the window."""
        stale = [
            ip for ip, timestamps in self.ip_requests.items()
            if not timestamps or current_time - timestamps[-1] > self.time_window
        ]
        for ip in stale:
            del self.ip_requests[ip]

    def reset(self):
        self.ip_requests.clear()


# Note: In a real distributed system, use Redis. For this app, memory is fine.
# 5 requests per minute for expensive receipt scans
scan_rate_limiter = RateLimiter(requests_limit=5, time_window=60, name="scan")

# 10 attempts per minute for access code checks (slows down guessing)
access_rate_limiter = RateLimiter(requests_limit=10, time_window=60, name="access")
