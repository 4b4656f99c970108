"""
Application error taxonomy.

Services raise these; api.errors maps each kind to a single HTTP status.
NotFoundException is deliberately coarse: it covers both missing accounts and
credential mismatches.
"""


class AppError(Exception):
    code = "INTERNAL_ERROR"
    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundException(AppError):
    code = "NOT_FOUND"
    default_message = "Resource not found"


class DuplicateException(AppError):
    code = "CONFLICT"
    default_message = "Already in use"


class UnAuthorizedException(AppError):
    code = "UNAUTHORIZED"
    default_message = "Authentication required"


class IllegalArgumentException(AppError):
    code = "BAD_REQUEST"
    default_message = "Invalid argument"


class MalformedTokenError(IllegalArgumentException):
    code = "MALFORMED_TOKEN"
    default_message = "Malformed token"
