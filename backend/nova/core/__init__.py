"""Core module - logging setup and the session error taxonomy."""

from .errors import (
    SessionStoreError,
    SessionValidationError,
    SessionNotFoundError,
    SessionConflictError,
)

__all__ = [
    'SessionStoreError',
    'SessionValidationError',
    'SessionNotFoundError',
    'SessionConflictError',
]
