# backend/agenda/services/errors.py
"""
Domain error taxonomy.

Raised by services, translated to HTTP responses in main.py:

    ValidationFailed → 400 {message, field}
    Unauthorized     → 401 {message}
    NotFound         → 404 {message}
    Conflict         → 409 {message}
    InternalError    → 500 {message}
"""

from typing import Optional

ABSENT_MESSAGE = "Business owner is absent during this time."
BOOKED_MESSAGE = "Time slot already booked."


class BookingError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict:
        return {"message": self.message}


class ValidationFailed(BookingError):
    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field

    def to_payload(self) -> dict:
        return {"message": self.message, "field": self.field}


class Unauthorized(BookingError):
    status_code = 401


class NotFound(BookingError):
    status_code = 404


class Conflict(BookingError):
    """Scheduling overlap. Carries one of two fixed messages."""
    status_code = 409

    @classmethod
    def owner_absent(cls) -> "Conflict":
        return cls(ABSENT_MESSAGE)

    @classmethod
    def already_booked(cls) -> "Conflict":
        return cls(BOOKED_MESSAGE)


class InternalError(BookingError):
    status_code = 500

    def __init__(self, message: str = "Internal server error."):
        super().__init__(message)
