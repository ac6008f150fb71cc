from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_MANAGER_SESSION_MINUTES

logger = logging.getLogger(__name__)


class ManagerAuthService:
    """Shared manager PIN with a short validity window.

    Expiry is passive: every read compares the clock with the deadline and
    drops the session once it has passed.
    """

    def __init__(
        self,
        pin_hash: str,
        *,
        timeout: timedelta = timedelta(minutes=DEFAULT_MANAGER_SESSION_MINUTES),
        clock: Callable[[], datetime] = now_local,
    ):
        self._pin_hash = pin_hash
        self._timeout = timeout
        self._clock = clock
        self._authenticated_at: Optional[datetime] = None
        self._guard = threading.Lock()

    @classmethod
    def from_pin(cls, pin: str, **kwargs) -> "ManagerAuthService":
        return cls(generate_password_hash(pin), **kwargs)

    @property
    def timeout(self) -> timedelta:
        return self._timeout

    def authenticate(self, pin: str) -> bool:
        pin = (pin or "").strip()
        with self._guard:
            if not pin or not check_password_hash(self._pin_hash, pin):
                self._authenticated_at = None
                logger.warning("Manager PIN rejected")
                return False
            self._authenticated_at = self._clock()
            logger.info("Manager authenticated for %s", self._timeout)
            return True

    def is_valid(self) -> bool:
        with self._guard:
            return self._check()

    def remaining(self) -> timedelta:
        with self._guard:
            if not self._check():
                return timedelta(0)
            return self._authenticated_at + self._timeout - self._clock()

    def extend(self) -> bool:
        """Restart the window from now, if still valid."""
        with self._guard:
            if not self._check():
                return False
            self._authenticated_at = self._clock()
            return True

    def clear(self) -> None:
        with self._guard:
            self._authenticated_at = None

    def status_message(self) -> str:
        with self._guard:
            had_session = self._authenticated_at is not None
            if not self._check():
                return "Manager session expired" if had_session else "Manager authentication required"
            remaining = self._authenticated_at + self._timeout - self._clock()
        minutes = max(int(remaining.total_seconds() // 60), 0)
        return f"Manager authenticated ({minutes} min remaining)"

    def _check(self) -> bool:
        if self._authenticated_at is None:
            return False
        if self._clock() - self._authenticated_at >= self._timeout:
            self._authenticated_at = None
            return False
        return True
