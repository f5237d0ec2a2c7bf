from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules.

    Validation happens before anything is sent to the backend.
    """


class NotFoundError(DomainError):
    """Raised when the target of an operation does not exist."""


class AuthenticationError(DomainError):
    """Raised when credentials are invalid or no session is active."""


class StaleSessionError(AuthenticationError):
    """Raised when the session expired (or ended) while a request was in flight."""


class RemoteFailure(DomainError):
    """Raised when the backend call failed; the local store is left untouched."""

    def __init__(self, message: str = "", *, status: Optional[int] = None):
        super().__init__(message)
        self.status = status

    def with_fallback(self, fallback: str) -> "RemoteFailure":
        if str(self).strip():
            return self
        err = RemoteFailure(fallback, status=self.status)
        err.__cause__ = self
        return err
