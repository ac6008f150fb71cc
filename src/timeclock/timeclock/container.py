from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from .auth.service import ManagerAuthService
from .core.constants import DEFAULT_MANAGER_SESSION_MINUTES
from .corrections.service import CorrectionService
from .database.connection import DBConfig, DatabaseConnection
from .employees.sql_employee_repository import SQLEmployeeRepository
from .payroll.calculator.standard_calculator import BreakDeductionCalculator
from .photos.service import NullPhotoCapture, PhotoCapture, PlaceholderPhotoCapture
from .reports.service import ReportService
from .shifts.locks import EmployeeLocks
from .shifts.policy import ShiftPolicy
from .shifts.service import ShiftLifecycleService
from .shifts.sql_shift_repository import SQLShiftRepository
from .status.service import StatusService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    policy: ShiftPolicy

    employees_repo: SQLEmployeeRepository
    shifts_repo: SQLShiftRepository

    manager_auth: ManagerAuthService
    lifecycle_service: ShiftLifecycleService
    correction_service: CorrectionService
    status_service: StatusService
    report_service: ReportService


def build_photo_capture(settings) -> PhotoCapture:
    if str(getattr(settings, "PHOTO_CAPTURE", "placeholder")).lower() == "none":
        return NullPhotoCapture()
    return PlaceholderPhotoCapture(getattr(settings, "PHOTO_DIR", "photos"))


def build_container(settings, *, conn: DatabaseConnection | None = None) -> Container:
    conn = conn or DatabaseConnection.get_instance(
        DBConfig(url=str(settings.DATABASE_URL), echo=bool(getattr(settings, "SQL_ECHO", False)))
    )
    policy = ShiftPolicy.from_settings(settings)
    calculator = BreakDeductionCalculator()
    locks = EmployeeLocks()

    employees_repo = SQLEmployeeRepository(conn)
    shifts_repo = SQLShiftRepository(conn)

    manager_auth = ManagerAuthService.from_pin(
        str(settings.MANAGER_PIN),
        timeout=timedelta(
            minutes=float(getattr(settings, "MANAGER_SESSION_MINUTES", DEFAULT_MANAGER_SESSION_MINUTES))
        ),
    )
    lifecycle_service = ShiftLifecycleService(
        shifts_repo,
        employees_repo,
        calculator=calculator,
        photos=build_photo_capture(settings),
        policy=policy,
        locks=locks,
    )
    correction_service = CorrectionService(
        shifts_repo,
        employees_repo,
        manager_auth,
        calculator=calculator,
        policy=policy,
        locks=locks,
    )
    status_service = StatusService(shifts_repo)
    report_service = ReportService(shifts_repo, employees_repo)

    return Container(
        conn=conn,
        policy=policy,
        employees_repo=employees_repo,
        shifts_repo=shifts_repo,
        manager_auth=manager_auth,
        lifecycle_service=lifecycle_service,
        correction_service=correction_service,
        status_service=status_service,
        report_service=report_service,
    )
