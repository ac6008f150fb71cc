from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Generic, Optional, TypeVar

from .enums import ErrorKind

T = TypeVar("T")


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str
    remaining: Optional[timedelta] = None
    available_at: Optional[datetime] = None


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a lifecycle or correction operation.

    Exactly one of ``value`` / ``failure`` is set. ``warning`` is a soft signal
    (e.g. an extended shift) that never turns a success into a failure.
    """

    value: Optional[T] = None
    failure: Optional[Failure] = None
    message: str = ""
    warning: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def kind(self) -> Optional[ErrorKind]:
        return self.failure.kind if self.failure else None

    @classmethod
    def success(cls, value: T, *, message: str = "", warning: Optional[str] = None) -> "Result[T]":
        return cls(value=value, message=message, warning=warning)

    @classmethod
    def fail(
        cls,
        kind: ErrorKind,
        message: str,
        *,
        remaining: Optional[timedelta] = None,
        available_at: Optional[datetime] = None,
    ) -> "Result[T]":
        return cls(
            failure=Failure(kind=kind, message=message, remaining=remaining, available_at=available_at),
            message=message,
        )
