from __future__ import annotations

import threading
from typing import Dict


class EmployeeLocks:
    """One lock per employee id, created on first use."""

    def __init__(self):
        self._locks: Dict[int, threading.Lock] = {}
        self._guard = threading.Lock()

    def for_employee(self, employee_id: int) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(int(employee_id))
            if lock is None:
                lock = self._locks[int(employee_id)] = threading.Lock()
            return lock
