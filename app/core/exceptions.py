"""
Service-layer exceptions.

Every exception carries an HTTP `status_code` and a stable
`error_code` (an `ErrorKind`) so the API layer can render it without
knowing which service raised it.  See `app.core.error_handling`.
"""

import enum


class ErrorKind(str, enum.Enum):
    USER_NOT_FOUND = "USER_NOT_FOUND"
    INVALID_TOKEN = "INVALID_TOKEN"
    EXPIRED_TOKEN = "EXPIRED_TOKEN"
    # never raised: deletes and last-access updates treat a missing
    # session as success (see session_service)
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    CONCURRENCY_CONFLICT = "CONCURRENCY_CONFLICT"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    ACCOUNT_RESTRICTED = "ACCOUNT_RESTRICTED"
    DUPLICATE_RESOURCE = "DUPLICATE_RESOURCE"
    NOT_FOUND = "NOT_FOUND"
    BAD_REQUEST = "BAD_REQUEST"
    FORBIDDEN = "FORBIDDEN"


class ServiceError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 400
    error_code: ErrorKind = ErrorKind.BAD_REQUEST
    default_message: str = "Bad request"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequestError(ServiceError):
    pass


class NotFoundError(ServiceError):
    status_code = 404
    error_code = ErrorKind.NOT_FOUND
    default_message = "Resource not found"


class UserNotFoundError(NotFoundError):
    error_code = ErrorKind.USER_NOT_FOUND
    default_message = "User not found"


class DuplicateResourceError(ServiceError):
    status_code = 409
    error_code = ErrorKind.DUPLICATE_RESOURCE
    default_message = "Resource already exists"


class AuthenticationError(ServiceError):
    status_code = 401
    error_code = ErrorKind.INVALID_CREDENTIALS
    default_message = "Not authenticated"


class InvalidCredentialsError(AuthenticationError):
    default_message = "Invalid credentials"


class InvalidTokenError(AuthenticationError):
    """Bad signature, issuer, audience or token class.  Never retry."""

    error_code = ErrorKind.INVALID_TOKEN
    default_message = "Invalid token"


class ExpiredTokenError(AuthenticationError):
    """Token lifetime is over.  Never retry with the same token."""

    error_code = ErrorKind.EXPIRED_TOKEN
    default_message = "Token has expired"


class ForbiddenError(ServiceError):
    status_code = 403
    error_code = ErrorKind.FORBIDDEN
    default_message = "Insufficient permissions"


class AccountStatusError(ForbiddenError):
    error_code = ErrorKind.ACCOUNT_RESTRICTED
    default_message = "Account is restricted"


class ConcurrencyConflictError(ServiceError):
    """Transient storage conflict that survived the internal retries."""

    status_code = 503
    error_code = ErrorKind.CONCURRENCY_CONFLICT
    default_message = "Temporary conflict, please retry"
