"""Failure taxonomy for the authentication flows.

Every error carries the status code and the user-facing message the transport
layer renders as ``{"success": false, "message": ...}``.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldViolation:
    field: str
    message: str

    def as_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


class AuthError(Exception):
    status_code: int = 400
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_body(self) -> dict:
        return {"success": False, "message": self.message}


class ValidationError(AuthError):
    default_message = "Validation failed"

    def __init__(self, violations: list[FieldViolation], message: str | None = None) -> None:
        super().__init__(message)
        self.violations = list(violations)

    def to_body(self) -> dict:
        body = super().to_body()
        body["errors"] = [violation.as_dict() for violation in self.violations]
        return body


class ConflictError(AuthError):
    default_message = "User already exists with this email"


class InvalidCredentials(AuthError):
    default_message = "Invalid credentials"


class InvalidOrExpiredSecret(AuthError):
    default_message = "Invalid or expired verification code"


class NotFound(AuthError):
    default_message = "User not found"


class Unauthenticated(AuthError):
    status_code = 401
    default_message = "Unauthorized - no token provided"


class InvalidToken(AuthError):
    default_message = "Invalid Token"


class Forbidden(AuthError):
    status_code = 403
    default_message = "Forbidden - You do not have permission to access this resource"


class DispatchFailure(AuthError):
    status_code = 500
    default_message = "Failed to send email"


class InternalError(AuthError):
    status_code = 500
    default_message = "Server Error"
