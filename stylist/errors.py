"""Exception hierarchy shared across the stylist modules."""


class StylistError(Exception):
    """Base class for all domain errors raised by the service."""


class DuplicateEmailError(StylistError):
    """Raised when a user with the same email address already exists."""

    def __init__(self, email: str) -> None:
        super().__init__("Email already registered. You can only sign up once per email address.")
        self.email = email


class UnknownTimezoneError(StylistError, ValueError):
    """Raised when a timezone string is neither an IANA zone nor a fixed offset."""


class ForecastUnavailableError(StylistError):
    """Raised when the weather provider cannot return a usable forecast."""


class EmailDeliveryError(StylistError):
    """Raised when the email transport rejects or fails to send a message."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
