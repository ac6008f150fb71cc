from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def list_active(self) -> Sequence[Employee]:
        raise NotImplementedError

    def create(
        self,
        *,
        first_name: str,
        last_name: str,
        pay_rate: Decimal,
        job_title: str = "",
        phone_number: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def set_active(self, employee_id: int, is_active: bool) -> bool:
        raise NotImplementedError

    def list_job_titles(self) -> Sequence[str]:
        raise NotImplementedError
