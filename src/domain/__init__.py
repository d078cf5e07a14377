"""Domain layer: errors, schemas, constants."""

from .errors import (
    AppError,
    AuthFailure,
    DuplicateKey,
    ErrorCodes,
    PersistenceError,
    UploadError,
)
from .schemas import SessionRecord, User

__all__ = [
    "AppError",
    "AuthFailure",
    "DuplicateKey",
    "ErrorCodes",
    "PersistenceError",
    "UploadError",
    "SessionRecord",
    "User",
]
