"""
Seating error taxonomy.

CapacityError is the only hard failure; preference and blocked-seat
conflicts are soft and recovered from inside the engine. Anything
unexpected is wrapped in UnknownSeatingError at the run boundary.
"""

from enum import StrEnum
from typing import Optional

from src.platform.exception.exceptions import DomainError


class ErrorSeverity(StrEnum):
    WARNING = 'warning'
    ERROR = 'error'
    CRITICAL = 'critical'


class SeatingErrorCode(StrEnum):
    CAPACITY_EXCEEDED = 'CAPACITY_EXCEEDED'
    PREFERENCE_CONFLICT = 'PREFERENCE_CONFLICT'
    BLOCKED_SEAT_CONFLICT = 'BLOCKED_SEAT_CONFLICT'
    NO_SEATS_FOUND = 'NO_SEATS_FOUND'
    UNKNOWN_ERROR = 'UNKNOWN_ERROR'


class SeatingError(DomainError):
    def __init__(
        self,
        message: str,
        *,
        code: SeatingErrorCode,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        solution: Optional[str] = None,
        status_code: int = 400,
    ) -> None:
        self.code = code
        self.severity = severity
        self.solution = solution
        super().__init__(message, status_code)


class CapacityError(SeatingError):
    def __init__(self, *, day: str, requested: int, remaining: int) -> None:
        super().__init__(
            f'Not enough capacity on {day}: {requested} seats requested, {remaining} left',
            code=SeatingErrorCode.CAPACITY_EXCEEDED,
            severity=ErrorSeverity.ERROR,
            solution='Try another day or reduce the number of tickets',
            status_code=409,
        )
        self.day = day
        self.requested = requested
        self.remaining = remaining


class PreferenceConflictError(SeatingError):
    def __init__(self, message: str) -> None:
        super().__init__(
            message,
            code=SeatingErrorCode.PREFERENCE_CONFLICT,
            severity=ErrorSeverity.WARNING,
            solution='The guest is seated without the preferred seatmate',
        )


class BlockedSeatConflictError(SeatingError):
    def __init__(self, message: str) -> None:
        super().__init__(
            message,
            code=SeatingErrorCode.BLOCKED_SEAT_CONFLICT,
            severity=ErrorSeverity.WARNING,
            solution='Choose another day, move small groups or release blocked seats',
        )


class UnknownSeatingError(SeatingError):
    def __init__(self, cause: BaseException) -> None:
        super().__init__(
            f'Sorry, an unexpected error occurred while assigning seats: {cause}',
            code=SeatingErrorCode.UNKNOWN_ERROR,
            severity=ErrorSeverity.CRITICAL,
            solution='Restart the application and run the seating again',
            status_code=500,
        )
        self.cause = cause
