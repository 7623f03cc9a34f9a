import time
from typing import Optional

from linkshort.core.exceptions import Timeout


class Deadline:
    """Per-request time budget, checked before every storage call."""

    def __init__(self, seconds: Optional[float]):
        self.seconds = seconds
        self.expires_at = None if seconds is None else time.monotonic() + seconds

    @property
    def remaining(self) -> Optional[float]:
        if self.expires_at is None:
            return None
        return max(0.0, self.expires_at - time.monotonic())

    @property
    def expired(self) -> bool:
        return self.expires_at is not None and time.monotonic() >= self.expires_at

    def check(self, operation: str = "operation"):
        if self.expired:
            raise Timeout(f"Deadline of {self.seconds}s exceeded before {operation}")
