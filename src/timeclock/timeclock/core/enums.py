from __future__ import annotations

from enum import Enum


class ShiftState(str, Enum):
    """Observable per-employee state of the lifecycle engine."""

    AVAILABLE = "AVAILABLE"
    WORKING = "WORKING"
    COOLING_DOWN = "COOLING_DOWN"


class PhotoEvent(str, Enum):
    CLOCK_IN = "clockin"
    CLOCK_OUT = "clockout"


class ErrorKind(str, Enum):
    """Failure kinds carried by lifecycle and correction results."""

    EMPLOYEE_NOT_FOUND = "EMPLOYEE_NOT_FOUND"
    EMPLOYEE_INACTIVE = "EMPLOYEE_INACTIVE"
    ALREADY_CLOCKED_IN = "ALREADY_CLOCKED_IN"
    COOLDOWN_ACTIVE = "COOLDOWN_ACTIVE"
    NOT_CLOCKED_IN = "NOT_CLOCKED_IN"
    TOO_SOON = "TOO_SOON"
    MAX_DURATION_EXCEEDED = "MAX_DURATION_EXCEEDED"
    NEGATIVE_OR_ZERO_DURATION = "NEGATIVE_OR_ZERO_DURATION"
    SHIFT_NOT_FOUND = "SHIFT_NOT_FOUND"
    NOTHING_TO_CORRECT = "NOTHING_TO_CORRECT"
    FUTURE_TIME = "FUTURE_TIME"
    NOT_AUTHORIZED = "NOT_AUTHORIZED"
    PERSISTENCE_FAILED = "PERSISTENCE_FAILED"


class GroupBy(str, Enum):
    EMPLOYEE = "employee"
    JOB_TITLE = "jobtitle"
    WEEK = "week"
    MONTH = "month"
    DATE = "date"
