class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidDurationError(DomainError):
    """Raised when a clock-out does not come after its clock-in."""


class StoreError(Exception):
    """Raised when the persistent store fails (I/O, constraint, driver).

    Nothing is written before validation passes, so callers may retry.
    """


class SchemaMigrationError(StoreError):
    """Raised when a schema upgrade step fails. Fatal at startup."""

    def __init__(self, message: str, *, version: int | None = None):
        super().__init__(message)
        self.version = version
