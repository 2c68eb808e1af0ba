import time
from typing import Dict, Tuple

from fastapi import HTTPException, Request


class RateLimiter:
    """
    Simple in-memory rate limiter using a fixed window algorithm.
    Tracks requests per client identifier within a time window.
    """

    def __init__(self, max_requests: int = 100, window_seconds: int = 15 * 60):
        self.max_requests = max_requests
        self.window = window_seconds
        # identifier -> (count, window_start_time)
        self.requests: Dict[str, Tuple[int, float]] = {}
        self._last_cleanup = time.time()

    def is_allowed(self, identifier: str) -> bool:
        now = time.time()
        count, start_time = self.requests.get(identifier, (0, now))

        if now - start_time > self.window:
            self.requests[identifier] = (1, now)
            return True

        if count >= self.max_requests:
            return False

        self.requests[identifier] = (count + 1, start_time)
        return True

    def cleanup(self) -> None:
        """Drop expired windows so the table does not grow without bound."""
        now = time.time()
        keys_to_delete = [k for k, v in self.requests.items() if now - v[1] > self.window]
        for k in keys_to_delete:
            del self.requests[k]
        self._last_cleanup = now

    def __call__(self, request: Request) -> None:
        if time.time() - self._last_cleanup > self.window:
            self.cleanup()
        identifier = request.client.host if request.client else "anonymous"
        if not self.is_allowed(identifier):
            raise HTTPException(status_code=429, detail="Too many requests, please try again later.")
