from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations.

    Every subclass carries the HTTP status the API boundary reports it with.
    """

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when credentials or tokens are missing or invalid."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    status_code = 404


class ConflictError(DomainError):
    """Raised when an action collides with existing state (duplicates)."""

    status_code = 409


class ConfigurationError(DomainError):
    """Raised when the system is missing configuration an action needs."""


class AlreadyClockedInError(ConflictError):
    def __init__(self, message: str = "You have already clocked in today"):
        super().__init__(message)


class AlreadyClockedOutError(ConflictError):
    def __init__(self, message: str = "You have already clocked out today"):
        super().__init__(message)


class NoClockInError(ValidationError):
    def __init__(self, message: str = "You have not clocked in today"):
        super().__init__(message)


class GeofenceNotConfiguredError(ConfigurationError):
    def __init__(self, message: str = "Office location has not been configured"):
        super().__init__(message)


class OutsideGeofenceError(ValidationError):
    def __init__(self, distance: int):
        super().__init__(f"You are outside the office radius ({distance}m from the office)")
        self.distance = distance


class InvalidRefreshTokenError(AuthenticationError):
    def __init__(self, message: str = "Invalid refresh token"):
        super().__init__(message)


class TokenExpiredError(AuthenticationError):
    def __init__(self, message: str = "Token has expired, please refresh it"):
        super().__init__(message)
