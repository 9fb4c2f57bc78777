"""
Session store error taxonomy.

The API layer maps these to HTTP status codes; the sync client only sees
the resulting status codes.
"""


class SessionStoreError(Exception):
    """Base class for all session store errors."""

    status_code = 500

    def __init__(self, message: str, session_id: str | None = None):
        super().__init__(message)
        self.message = message
        self.session_id = session_id


class SessionValidationError(SessionStoreError):
    """A mandatory field is missing or the id is malformed. Nothing was written."""

    status_code = 400


class SessionNotFoundError(SessionStoreError):
    """No session exists with the given id."""

    status_code = 404


class SessionConflictError(SessionStoreError):
    """A session with the given id already exists."""

    status_code = 409
