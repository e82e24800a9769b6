"""Per-provider request throttling."""

import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field


@dataclass
class RequestThrottle:
    """Sliding-window request counter keyed by provider operation."""

    max_requests: int = 60
    window_seconds: float = 60.0
    clock: Callable[[], float] = time.monotonic
    _requests: dict[str, deque[float]] = field(default_factory=dict, repr=False)

    def acquire(self, key: str) -> bool:
        """Record a request for key, or return False when the window is full."""
        now = self.clock()
        requests = self._requests.setdefault(key, deque())
        while requests and now - requests[0] >= self.window_seconds:
            requests.popleft()
        if len(requests) >= self.max_requests:
            return False
        requests.append(now)
        return True
