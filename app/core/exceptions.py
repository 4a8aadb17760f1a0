"""
Domain errors of the API.

Every error knows the HTTP status it maps to; app.main renders them as
``{"detail": message}``.
"""
from typing import Optional


class AppError(Exception):
    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class AuthError(AppError):
    status_code = 401
    message = "Authentication required"


class MissingTokenError(AuthError):
    message = "No token provided"


class InvalidTokenError(AuthError):
    message = "Invalid token"


class InvalidCredentialsError(AuthError):
    message = "Invalid email or password"


class ValidationError(AppError):
    status_code = 400
    message = "Invalid request"


class DuplicateEmailError(ValidationError):
    message = "Email already registered"


class NotFoundError(AppError):
    status_code = 404
    message = "Not found"


class PermissionDeniedError(AppError):
    status_code = 403
    message = "Not enough permissions"


class AggregateInconsistencyError(AppError):
    """The daily progress row could not be updated together with a meal write."""

    status_code = 500
    message = "Daily progress could not be updated, the meal change was not saved"
