from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from decimal import Decimal


class PayCalculator(ABC):
    """Calculator interface (Strategy Pattern for billable hours)."""

    @abstractmethod
    def compute_hours(
        self,
        clock_in: datetime,
        clock_out: datetime,
        break_threshold: timedelta,
        break_duration: timedelta,
    ) -> Decimal:
        raise NotImplementedError

    @abstractmethod
    def gross_pay(self, hours: Decimal, pay_rate: Decimal) -> Decimal:
        raise NotImplementedError
