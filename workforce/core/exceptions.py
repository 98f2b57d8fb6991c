import math
from typing import Optional


class DomainError(Exception):
    """Base exception for expected, user-facing failures."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthenticationRequired(DomainError):
    status_code = 401

    def __init__(self, message: str = "Please sign in to continue"):
        super().__init__(message)


class AuthorizationDenied(DomainError):
    status_code = 403


class InvalidToken(DomainError):
    def __init__(self, message: str = "Invalid or expired QR code. Please scan the current code."):
        super().__init__(message)


class LocationRequired(DomainError):
    def __init__(self, message: str = "Location unavailable. Please grant location permission and rescan."):
        super().__init__(message)


class GeofenceViolation(DomainError):
    """Raised when the reported position is outside the allowed radius."""

    def __init__(self, distance: float, allowed: float, message: Optional[str] = None):
        self.distance = distance
        self.allowed = allowed
        super().__init__(
            message
            or f"You are {math.ceil(distance)}m from the office (allowed: {math.floor(allowed)}m). "
            "Move closer to the office and rescan."
        )


class ConflictError(DomainError):
    status_code = 409


class NotFoundError(DomainError):
    status_code = 404


class ValidationError(DomainError):
    """Raised when input data violates a business rule."""
