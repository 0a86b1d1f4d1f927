"""
Application error taxonomy.

Every error the service layer raises derives from IdmError. The class decides
its canonical `error_code`; the HTTP boundary turns that into a status via
`http_status()` and into a client-safe body via `to_payload()`.
"""

from typing import Iterable


class IdmError(Exception):
    """
    Base exception for repository/service errors.

    - message: human-friendly message (safe to show to clients)
    - fields: optional list of field names related to the error (e.g., ['age'])
    - constraint: optional DB constraint name (for logs only)
    - error_code: canonical short code used by the HTTP boundary
    """

    ERROR_CODE_TO_STATUS = {
        "request_validation": 400,
        "empty_argument": 400,
        "already_exists": 400,
        "not_found": 404,
        "unauthorized": 401,
        "forbidden": 403,
        # anything else is an infrastructure fault -> 500
    }

    default_code: str | None = None

    def __init__(self, message: str, *, fields: Iterable[str] | None = None,
                 constraint: str | None = None, error_code: str | None = None):
        super().__init__(message)
        self.message = message
        self.fields = list(fields) if fields else None
        self.constraint = constraint
        self.error_code = error_code or self.default_code

    def __str__(self) -> str:
        parts = []
        if self.fields:
            parts.append(f"fields: {', '.join(self.fields)}")
        if self.constraint:
            parts.append(f"constraint: {self.constraint}")
        if self.error_code:
            parts.append(f"code: {self.error_code}")
        if parts:
            return f"{self.message} ({'; '.join(parts)})"
        return self.message

    def to_payload(self) -> dict:
        """
        Return a JSON-serializable dict describing the error.

        The constraint name is a storage detail and stays in the logs.
        """
        payload = {"detail": self.message}
        if self.error_code:
            payload["code"] = self.error_code
        if self.fields:
            payload["fields"] = list(self.fields)
        return payload

    def http_status(self) -> int:
        return self.ERROR_CODE_TO_STATUS.get(self.error_code, 500)


class RequestValidationError(IdmError):
    """Malformed or out-of-bounds input; the caller can fix and retry."""
    default_code = "request_validation"


class EmptyArgumentError(IdmError):
    """A bulk operation was called with an empty id set."""
    default_code = "empty_argument"

    def __init__(self, message: str = "ids must not be empty", **kwargs):
        super().__init__(message, **kwargs)


class AlreadyExistsError(IdmError):
    default_code = "already_exists"


class NotFoundError(IdmError):
    default_code = "not_found"

    def __init__(self, message: str = "Not found", **kwargs):
        super().__init__(message, **kwargs)


class RepositoryError(IdmError):
    """Infrastructure fault while talking to the database."""
    default_code = "repository_error"


class TransactionBeginError(RepositoryError):
    default_code = "transaction_begin"


class InsertError(RepositoryError):
    default_code = "insert_failure"


class CommitError(RepositoryError):
    default_code = "commit_failure"


class AuthenticationError(IdmError):
    """Missing, malformed or expired bearer token."""
    default_code = "unauthorized"


class PermissionDeniedError(IdmError):
    """Valid token without the role the endpoint requires."""
    default_code = "forbidden"


__all__ = [
    "IdmError",
    "RequestValidationError",
    "EmptyArgumentError",
    "AlreadyExistsError",
    "NotFoundError",
    "RepositoryError",
    "TransactionBeginError",
    "InsertError",
    "CommitError",
    "AuthenticationError",
    "PermissionDeniedError",
]
