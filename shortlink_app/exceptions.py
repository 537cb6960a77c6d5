"""
Domain exceptions for the URL shortener.

Raised by the store and the service layer, converted to HTTP responses by the
handlers registered in main.create_app. Every error carries an ErrorKind tag
so callers branch on the kind instead of matching message strings; the
underlying exception (if any) is kept as ``cause`` for diagnostics.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Tag identifying what went wrong"""
    INVALID_URL = "invalid_url"
    NOT_FOUND = "not_found"
    STORAGE = "storage"
    EXHAUSTED_RETRIES = "exhausted_retries"
    GENERATION = "generation"


class ShortenerError(Exception):
    """
    Base class for all shortener errors.

    Attributes:
        message: Human-readable error message.
        cause: Lower-level exception that triggered this one, if any.
    """

    kind: ErrorKind = ErrorKind.STORAGE

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.message = message
        self.cause = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause


class InvalidURLError(ShortenerError):
    """Raised when a URL is not an absolute http(s) URL with a host."""

    kind = ErrorKind.INVALID_URL


class NotFoundError(ShortenerError):
    """Raised when no mapping exists for a short code."""

    kind = ErrorKind.NOT_FOUND


class StorageError(ShortenerError):
    """Raised when the mapping store fails."""

    kind = ErrorKind.STORAGE


class DuplicateShortCodeError(StorageError):
    """Raised by a store when an insert violates short code uniqueness."""


class ExhaustedRetriesError(ShortenerError):
    """Raised when no free short code was found within the retry budget."""

    kind = ErrorKind.EXHAUSTED_RETRIES


class GenerationError(ShortenerError):
    """Raised when the random source fails. Never retried."""

    kind = ErrorKind.GENERATION
