from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Employee as seen by the time clock. Managed outside the kiosk."""

    employee_id: int
    first_name: str
    last_name: str
    pay_rate: Decimal
    job_title: str = ""
    is_active: bool = True
    date_hired: Optional[date] = None
    phone_number: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
