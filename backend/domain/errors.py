"""
Application error types.

Every error carries the HTTP status the API boundary should answer with.
The core raises these; logging happens where they are handled (api/errors.py).
"""
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class FieldError:
    """A single validation failure tagged with the offending field path."""
    field: str
    message: str

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


class AppError(Exception):
    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    """Input failed validation. Always recoverable."""
    status_code = 400

    def __init__(self, errors: List[FieldError]):
        self.errors = list(errors)
        first = self.errors[0] if self.errors else None
        message = first.message if first else "Invalid input"
        super().__init__(message)

    @property
    def field(self) -> Optional[str]:
        return self.errors[0].field if self.errors else None


class RenderingUnavailable(AppError):
    """No drawable surface (canvas or font) could be obtained."""
    status_code = 503


class NotFoundError(AppError):
    status_code = 404

    def __init__(self, resource: str = "Resource"):
        super().__init__(f"{resource} not found")


class AuthenticationError(AppError):
    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class AuthorizationError(AppError):
    status_code = 403

    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message)


class PaymentError(AppError):
    """The payment provider could not be reached or refused the request."""
    status_code = 502
