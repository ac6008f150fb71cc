from __future__ import annotations

import logging
from datetime import date, timedelta
from functools import wraps
from typing import Optional

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..common.validators import optional_date, optional_datetime, require_positive_int
from ..core.constants import DEFAULT_REPORT_DAYS
from ..core.enums import ErrorKind, GroupBy
from ..core.exceptions import StoreError, ValidationError
from ..core.result import Result
from ..container import Container
from ..employees.model import Employee
from ..reports.service import ReportSummary
from ..shifts.model import EmployeeShiftStatus, ShiftRecord, ShiftReportRow

logger = logging.getLogger(__name__)

HTTP_STATUS = {
    ErrorKind.EMPLOYEE_NOT_FOUND: 404,
    ErrorKind.SHIFT_NOT_FOUND: 404,
    ErrorKind.NOT_AUTHORIZED: 401,
    ErrorKind.PERSISTENCE_FAILED: 503,
    ErrorKind.EMPLOYEE_INACTIVE: 409,
    ErrorKind.ALREADY_CLOCKED_IN: 409,
    ErrorKind.NOT_CLOCKED_IN: 409,
    ErrorKind.COOLDOWN_ACTIVE: 409,
}


def _iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def shift_to_dict(s: ShiftRecord) -> dict:
    return {
        "shift_id": s.shift_id,
        "employee_id": s.employee_id,
        "shift_date": _iso(s.shift_date),
        "clock_in": _iso(s.effective_clock_in),
        "clock_out": _iso(s.effective_clock_out),
        "is_active": s.is_active,
        "total_hours": str(s.total_hours),
        "gross_pay": str(s.gross_pay),
        "notes": s.notes,
        "clock_in_photo": s.clock_in_photo,
        "clock_out_photo": s.clock_out_photo,
    }


def status_to_dict(s: EmployeeShiftStatus) -> dict:
    return {
        "employee_id": s.employee_id,
        "is_working": s.is_working,
        "working_hours": s.working_hours,
        "shift_started": _iso(s.shift_started),
        "shift_date": _iso(s.shift_date),
        "is_cross_midnight": s.is_cross_midnight,
        "today_completed_hours": str(s.today_completed_hours),
        "last_clock_out": _iso(s.last_clock_out),
        "status_text": s.status_text,
    }


def employee_to_dict(e: Employee) -> dict:
    return {
        "employee_id": e.employee_id,
        "name": e.full_name,
        "job_title": e.job_title,
        "pay_rate": str(e.pay_rate),
        "is_active": e.is_active,
    }


def report_row_to_dict(r: ShiftReportRow) -> dict:
    return {
        "shift_id": r.shift_id,
        "employee_id": r.employee_id,
        "employee_name": r.employee_name,
        "job_title": r.job_title,
        "shift_date": r.shift_date.isoformat(),
        "day_name": r.day_name,
        "clock_in": _iso(r.clock_in),
        "clock_out": _iso(r.clock_out),
        "total_hours": str(r.total_hours),
        "gross_pay": str(r.gross_pay),
        "status": r.status,
        "notes": r.notes,
    }


def summary_to_dict(s: ReportSummary) -> dict:
    return {
        "group_key": s.group_key,
        "employee_name": s.employee_name,
        "job_title": s.job_title,
        "total_hours": str(s.total_hours),
        "total_pay": str(s.total_pay),
        "days_worked": s.days_worked,
        "average_hours_per_day": str(s.average_hours_per_day),
        "entries": s.entries,
    }


def result_response(result: Result[ShiftRecord], *, ok_status: int = 200):
    if result.ok:
        return jsonify(
            {
                "success": True,
                "message": result.message,
                "warning": result.warning,
                "shift": shift_to_dict(result.value),
            }
        ), ok_status

    failure = result.failure
    body = {"success": False, "error": failure.kind.value, "message": failure.message}
    if failure.remaining is not None:
        body["remaining_seconds"] = int(failure.remaining.total_seconds())
    if failure.available_at is not None:
        body["available_at"] = failure.available_at.isoformat()
    return jsonify(body), HTTP_STATUS.get(failure.kind, 422)


def _report_range() -> tuple[date, date]:
    end = optional_date(request.args.get("end"), "end") or now_local().date()
    start = optional_date(request.args.get("start"), "start") or end - timedelta(days=DEFAULT_REPORT_DAYS - 1)
    if start > end:
        raise ValidationError("start must not be after end")
    return start, end


def _optional_employee_id() -> Optional[int]:
    value = request.args.get("employee_id")
    return require_positive_int(value, "employee_id") if value else None


def register(app: Flask, container: Container) -> None:
    def manager_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if not container.manager_auth.is_valid():
                return jsonify(
                    {
                        "success": False,
                        "error": ErrorKind.NOT_AUTHORIZED.value,
                        "message": container.manager_auth.status_message(),
                    }
                ), 401
            return view(*args, **kwargs)

        return wrapper

    @app.errorhandler(ValidationError)
    def handle_validation_error(e: ValidationError):
        return jsonify({"success": False, "error": "VALIDATION", "message": str(e)}), 400

    @app.errorhandler(StoreError)
    def handle_store_error(e: StoreError):
        logger.error("Store failure while serving %s", request.path, exc_info=e)
        return jsonify(
            {"success": False, "error": ErrorKind.PERSISTENCE_FAILED.value, "message": "Please try again."}
        ), 503

    @app.route("/api/employees", methods=["GET"], endpoint="api_employees")
    def api_employees():
        employees = container.employees_repo.list_active()
        return jsonify(
            [
                {**employee_to_dict(e), "is_clocked_in": container.lifecycle_service.is_clocked_in(e.employee_id)}
                for e in employees
            ]
        )

    @app.route("/api/employees/<int:employee_id>/status", methods=["GET"], endpoint="api_employee_status")
    def api_employee_status(employee_id: int):
        employee = container.employees_repo.get_by_id(employee_id)
        if not employee:
            return jsonify(
                {"success": False, "error": ErrorKind.EMPLOYEE_NOT_FOUND.value, "message": "Employee not found."}
            ), 404
        status = container.status_service.get_status(employee_id)
        body = status_to_dict(status)
        body["name"] = employee.full_name
        body["state"] = container.lifecycle_service.get_state(employee_id).value
        return jsonify(body)

    @app.route("/api/employees/<int:employee_id>/clock-in", methods=["POST"], endpoint="api_clock_in")
    def api_clock_in(employee_id: int):
        data = request.get_json(silent=True) or {}
        result = container.lifecycle_service.clock_in(employee_id, notes=str(data.get("notes") or ""))
        return result_response(result, ok_status=201)

    @app.route("/api/employees/<int:employee_id>/clock-out", methods=["POST"], endpoint="api_clock_out")
    def api_clock_out(employee_id: int):
        data = request.get_json(silent=True) or {}
        result = container.lifecycle_service.clock_out(employee_id, notes=str(data.get("notes") or ""))
        return result_response(result)

    @app.route("/api/manager/login", methods=["POST"], endpoint="api_manager_login")
    def api_manager_login():
        data = request.get_json(silent=True) or {}
        pin = str(data.get("pin") or "")
        if not container.manager_auth.authenticate(pin):
            return jsonify({"success": False, "error": ErrorKind.NOT_AUTHORIZED.value, "message": "Invalid PIN."}), 401
        return jsonify(
            {
                "success": True,
                "message": container.manager_auth.status_message(),
                "remaining_seconds": int(container.manager_auth.remaining().total_seconds()),
            }
        )

    @app.route("/api/manager/session", methods=["GET"], endpoint="api_manager_session")
    def api_manager_session():
        return jsonify(
            {
                "authenticated": container.manager_auth.is_valid(),
                "remaining_seconds": int(container.manager_auth.remaining().total_seconds()),
                "message": container.manager_auth.status_message(),
            }
        )

    @app.route("/api/manager/logout", methods=["POST"], endpoint="api_manager_logout")
    def api_manager_logout():
        container.manager_auth.clear()
        return jsonify({"success": True, "message": container.manager_auth.status_message()})

    @app.route(
        "/api/employees/<int:employee_id>/shifts/<int:shift_id>/correction",
        methods=["POST"],
        endpoint="api_correct_shift",
    )
    def api_correct_shift(employee_id: int, shift_id: int):
        data = request.get_json(silent=True) or {}
        result = container.correction_service.correct_shift(
            employee_id,
            shift_id,
            corrected_in=optional_datetime(data.get("clock_in"), "clock_in"),
            corrected_out=optional_datetime(data.get("clock_out"), "clock_out"),
            reason=str(data.get("reason") or ""),
        )
        return result_response(result)

    @app.route("/api/employees/<int:employee_id>/shifts", methods=["DELETE"], endpoint="api_delete_shifts")
    @manager_required
    def api_delete_shifts(employee_id: int):
        shift_date = optional_date(request.args.get("date"), "date")
        if shift_date is None:
            raise ValidationError("date is required")
        with container.lifecycle_service.locks.for_employee(employee_id):
            deleted = container.shifts_repo.delete_for_date(employee_id, shift_date)
        logger.info("Deleted %s shift(s) of employee %s on %s", deleted, employee_id, shift_date)
        return jsonify({"success": True, "deleted": deleted})

    @app.route("/api/reports/shifts", methods=["GET"], endpoint="api_report_shifts")
    def api_report_shifts():
        start, end = _report_range()
        rows = container.report_service.get_shift_rows(
            start=start,
            end=end,
            employee_id=_optional_employee_id(),
            job_title=request.args.get("job_title") or None,
        )
        return jsonify({"start": start.isoformat(), "end": end.isoformat(), "rows": [report_row_to_dict(r) for r in rows]})

    @app.route("/api/reports/summary", methods=["GET"], endpoint="api_report_summary")
    def api_report_summary():
        start, end = _report_range()
        raw_group = (request.args.get("group_by") or GroupBy.EMPLOYEE.value).lower()
        try:
            group_by = GroupBy(raw_group)
        except ValueError:
            raise ValidationError(f"group_by must be one of: {', '.join(g.value for g in GroupBy)}") from None
        summary = container.report_service.get_summary(
            start=start,
            end=end,
            group_by=group_by,
            employee_id=_optional_employee_id(),
            job_title=request.args.get("job_title") or None,
        )
        return jsonify(
            {
                "start": start.isoformat(),
                "end": end.isoformat(),
                "group_by": group_by.value,
                "summary": [summary_to_dict(s) for s in summary],
            }
        )

    @app.route("/api/reports/job-titles", methods=["GET"], endpoint="api_report_job_titles")
    def api_report_job_titles():
        return jsonify(list(container.report_service.get_job_titles()))
