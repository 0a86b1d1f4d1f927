from .base import (
    IdmError,
    RequestValidationError,
    EmptyArgumentError,
    AlreadyExistsError,
    NotFoundError,
    RepositoryError,
    TransactionBeginError,
    InsertError,
    CommitError,
    AuthenticationError,
    PermissionDeniedError,
)
from .mapper import db_error_handler, map_integrity_error

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
    "db_error_handler",
    "map_integrity_error",
]
