from __future__ import annotations

from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from ...core.exceptions import InvalidDurationError
from .base import PayCalculator

TWO_PLACES = Decimal("0.01")
SECONDS_PER_HOUR = Decimal(3600)


class BreakDeductionCalculator(PayCalculator):
    """Standard rule: (out - in), minus the unpaid break once the raw span
    exceeds the threshold, in hours rounded to 2 places.
    """

    def compute_hours(
        self,
        clock_in: datetime,
        clock_out: datetime,
        break_threshold: timedelta,
        break_duration: timedelta,
    ) -> Decimal:
        raw = clock_out - clock_in
        if raw <= timedelta(0):
            raise InvalidDurationError(f"Clock-out {clock_out} is not after clock-in {clock_in}")

        worked = raw - break_duration if raw > break_threshold else raw
        hours = Decimal(str(worked.total_seconds())) / SECONDS_PER_HOUR
        return hours.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)

    def gross_pay(self, hours: Decimal, pay_rate: Decimal) -> Decimal:
        return (Decimal(hours) * Decimal(pay_rate)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
