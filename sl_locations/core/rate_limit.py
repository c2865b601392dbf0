"""Per-client sliding-window rate limiting."""
import threading
import time
from collections import deque
from typing import Callable, Deque, Dict, Optional
from sl_locations.core.config import RATE_LIMIT_WINDOW_MS
from sl_locations.core.exceptions import RateLimitError
from sl_locations.utils.logging import log_warning


def _now_ms() -> float:
    return time.monotonic() * 1000.0


class RateLimiter:
    """
    Sliding-window admission control keyed by client id.

    Each client has its own sequence of request timestamps. On every check,
    timestamps that fell out of the window are dropped; the request is admitted
    and recorded only if fewer than ``max_requests`` remain. A denied request
    is not recorded and so does not use up a slot.
    """

    def __init__(
        self,
        max_requests: int,
        window_ms: int = RATE_LIMIT_WINDOW_MS,
        clock: Callable[[], float] = _now_ms,
        name: str = "default"
    ):
        """
        Initialize rate limiter.

        Args:
            max_requests: Requests allowed per client within one window
            window_ms: Window length in milliseconds
            clock: Time source returning milliseconds
            name: Operation class this limiter guards, used in logs
        """
        self.max_requests = max_requests
        self.window_ms = window_ms
        self.name = name
        self._clock = clock
        self._windows: Dict[str, Deque[float]] = {}
        self._lock = threading.Lock()

    def allow(
        self,
        client_id: str,
        max_requests: Optional[int] = None,
        window_ms: Optional[int] = None
    ) -> bool:
        """
        Check and record a request.

        Args:
            client_id: Identifier of the calling client
            max_requests: Override of the configured request budget
            window_ms: Override of the configured window length

        Returns:
            True if the request is admitted
        """
        limit = self.max_requests if max_requests is None else max_requests
        window = self.window_ms if window_ms is None else window_ms

        with self._lock:
            now = self._clock()
            timestamps = self._windows.setdefault(client_id, deque())
            while timestamps and now - timestamps[0] >= window:
                timestamps.popleft()

            if len(timestamps) >= limit:
                return False

            timestamps.append(now)
            return True

    def check(self, client_id: str):
        """
        Admit a request or raise.

        Raises:
            RateLimitError: If the client has used up its budget
        """
        if not self.allow(client_id):
            log_warning(
                "Rate limit exceeded",
                limiter=self.name,
                client_id=client_id,
                max_requests=self.max_requests,
                window_ms=self.window_ms,
            )
            raise RateLimitError(client_id, self.max_requests, self.window_ms)

    def request_count(self, client_id: str) -> int:
        """Number of recorded requests for a client, including stale ones not yet pruned."""
        with self._lock:
            return len(self._windows.get(client_id, ()))

    def reset(self, client_id: Optional[str] = None):
        """Forget one client's history, or every client's."""
        with self._lock:
            if client_id is None:
                self._windows.clear()
            else:
                self._windows.pop(client_id, None)
