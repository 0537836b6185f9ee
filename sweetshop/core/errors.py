"""Error taxonomy raised by services and auth dependencies.

Each error carries the HTTP status it maps to; the handlers registered in
``sweetshop.main`` render them as ``{"error": message}``.
"""

from fastapi import status


class SweetShopError(Exception):
    """Base error for expected, client-facing failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Bad request"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(SweetShopError):
    """Malformed or missing input."""

    default_message = "Invalid input"


class ConflictError(SweetShopError):
    """Uniqueness violation (duplicate username, email or sweet name)."""

    default_message = "Resource already exists"


class AuthenticationError(SweetShopError):
    """Missing, invalid or expired token, or bad login credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class AuthorizationError(SweetShopError):
    """Valid identity without the required role."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Admin access required"


class NotFoundError(SweetShopError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class DomainError(SweetShopError):
    """Business rule violation, e.g. purchasing an out-of-stock sweet."""

    default_message = "Operation not allowed"
