"""
Domain errors raised by services and the authorization policy.

Every error carries the HTTP status it maps to; ``main.py`` installs a single
handler that renders them as ``{"detail": message}``.
"""


class AppError(Exception):
    status_code = 500
    default_message = "Internal error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class Forbidden(AppError):
    status_code = 403
    default_message = "Not authorized"


class Unauthenticated(AppError):
    status_code = 401
    default_message = "Authentication required"


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid data provided"


class InvalidStatus(ValidationError):
    default_message = "Invalid status"


class Conflict(AppError):
    status_code = 409
    default_message = "Conflict"


class InvalidStatusTransition(Conflict):
    default_message = "Status transition not allowed"


class SlotUnavailable(AppError):
    status_code = 409
    default_message = "The selected time slot is not available"


class PaymentAuthorizationFailed(AppError):
    status_code = 502
    default_message = "Payment processing failed"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code
