"""Domain errors raised by the mutation handlers.

The API layer maps each class onto an HTTP status; handlers never build HTTP
responses themselves.
"""

from __future__ import annotations


class BoardError(Exception):
    """Base class for errors surfaced to the caller of a board operation."""

    status_code = 500

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class ValidationError(BoardError):
    """Input is well-formed JSON but violates a domain rule."""

    status_code = 400


class ForbiddenError(BoardError):
    """The acting user may not touch the target board."""

    status_code = 403


class NotFoundError(BoardError):
    """A referenced entity does not exist."""

    status_code = 404


class PersistenceError(BoardError):
    """The transaction failed and was rolled back."""

    status_code = 500
