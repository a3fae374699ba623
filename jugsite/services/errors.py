"""Alert codes and domain errors for event registration."""

from enum import Enum


class AlertCode(str, Enum):
    """Alert codes shown to the user after a registration attempt"""

    INVALID_REGISTRATION = "invalidRegistration"
    REGISTERED = "registered"


class RegistrationErrorCode(str, Enum):
    """Business rule violations, each with its own alert code"""

    ALREADY_REGISTERED = "alreadyRegistered"
    EVENT_FULLY_BOOKED = "eventFullyBooked"
    EVENT_CLOSED = "eventClosedForRegistration"


class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    def __init__(self, code: RegistrationErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class DuplicateRegistrationError(DomainError):
    """Raised by the store when (event, email) is already registered."""

    def __init__(self, event_id: int) -> None:
        super().__init__(
            code=RegistrationErrorCode.ALREADY_REGISTERED,
            message="Already registered for this event",
        )
        self.event_id = event_id


class EventFullyBookedError(DomainError):
    """Raised by the store when the event has no seats left."""

    def __init__(self, event_id: int) -> None:
        super().__init__(
            code=RegistrationErrorCode.EVENT_FULLY_BOOKED,
            message="Event is fully booked",
        )
        self.event_id = event_id


class RegistrationStoreError(Exception):
    """Unexpected persistence failure; not something the user can correct."""
