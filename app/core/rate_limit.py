import threading
import time
from typing import Callable, Dict

from fastapi import Request

from scenario_generation.errors import RateLimitError
from utils.logger import get_logger

logger = get_logger(__name__)


class RateLimiter:
    """
    Fixed-window limiter keyed by client address.
    One instance per app, shared across requests.
    """

    def __init__(self, window_seconds: int, max_requests: int, clock: Callable[[], float] = time.monotonic):
        self.window_seconds = window_seconds
        self.max_requests = max_requests
        self._clock = clock
        self._state: Dict[str, Dict[str, float]] = {}
        self._lock = threading.Lock()

    def hit(self, key: str) -> None:
        now = self._clock()
        with self._lock:
            self._purge_expired(now)
            st = self._state.get(key)
            if not st or now >= st["reset"]:
                st = {"reset": now + self.window_seconds, "count": 0}
                self._state[key] = st
            st["count"] += 1
            count = st["count"]
            seconds_left = int(st["reset"] - now)

        if count > self.max_requests:
            logger.warning(f"Rate limit exceeded for {key} ({self.max_requests}/{self.window_seconds}s)")
            raise RateLimitError(f"Try again in {seconds_left}s.")

    def _purge_expired(self, now: float) -> None:
        # Caller holds the lock
        expired = [k for k, st in self._state.items() if now >= st["reset"]]
        for k in expired:
            del self._state[k]

    def __len__(self) -> int:
        with self._lock:
            return len(self._state)

    def reset(self) -> None:
        with self._lock:
            self._state.clear()


def _client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def enforce_rate_limit(request: Request) -> None:
    """Route dependency: counts the request against the app's limiter."""
    request.app.state.rate_limiter.hit(_client_key(request))
