"""
Typed failures raised by the service layer.

Every error carries a human readable ``message``, a machine readable
``code`` and the offending input (``invalid_args``) so that the API
layer can report it back to the caller.  None of them is fatal to the
process: a failure only ends the request that raised it.
"""

from typing import Any, Dict, Optional


class LibraryError(Exception):
    """Base class for request-scoped failures."""

    code = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str, invalid_args: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.invalid_args: Dict[str, Any] = dict(invalid_args or {})

    def __str__(self) -> str:
        return self.message


class ValidationError(LibraryError):
    """Missing or malformed input, including future-dated years."""

    code = "BAD_USER_INPUT"


class NotFoundError(LibraryError):
    """A referenced entity does not exist."""

    code = "NOT_FOUND"


class AuthError(LibraryError):
    """Missing or invalid token, or wrong credentials."""

    code = "UNAUTHENTICATED"


class PersistenceError(LibraryError):
    """The store rejected an operation."""

    code = "PERSISTENCE_ERROR"


class DuplicateKeyError(PersistenceError):
    """A uniqueness constraint was violated."""
