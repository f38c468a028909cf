"""
Error taxonomy shared by the auth flow, the whitelist and the HTTP layer.

Every failure that can reach a client is an AuthError tagged with an
ErrorKind; the kind fixes the HTTP status. Handlers render the kind name,
status and message only, never the underlying exception.
"""
from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    CONFLICT = "CONFLICT"
    NOT_FOUND = "NOT_FOUND"
    SERVER_ERROR = "SERVER_ERROR"


STATUS_BY_KIND = {
    ErrorKind.VALIDATION_ERROR: 422,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.CONFLICT: 409,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.SERVER_ERROR: 500,
}


class AuthError(Exception):
    """Classified failure carrying {kind, status, message}."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.status = STATUS_BY_KIND[kind]
        self.message = message

    def __repr__(self):
        return f"<AuthError {self.kind.value} {self.status}: {self.message}>"


def validation_error(message: str) -> AuthError:
    return AuthError(ErrorKind.VALIDATION_ERROR, message)


def unauthorized(message: str = "Unauthorized") -> AuthError:
    return AuthError(ErrorKind.UNAUTHORIZED, message)


def forbidden(message: str = "Forbidden") -> AuthError:
    return AuthError(ErrorKind.FORBIDDEN, message)


def conflict(message: str) -> AuthError:
    return AuthError(ErrorKind.CONFLICT, message)


def not_found(message: str = "Resource not found") -> AuthError:
    return AuthError(ErrorKind.NOT_FOUND, message)


def server_error(message: str = "An unexpected error occurred") -> AuthError:
    return AuthError(ErrorKind.SERVER_ERROR, message)
