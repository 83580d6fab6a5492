"""
Exceptions for plainverse

Corpus structural errors are fatal for a run. Transform errors are contained
at the verse level and recorded as failure sentinels in the checkpoint.
"""

from typing import Optional


class PlainverseError(Exception):
    """Base error for plainverse."""
    pass


class CorpusStructureError(PlainverseError):
    """
    Raised when a corpus file is missing, unparseable or structurally invalid.

    Attributes:
        path: The corpus file that failed to load
        reason: Description of what is wrong with it
    """

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        message = f"Invalid corpus '{path}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ScopeNotFoundError(PlainverseError):
    """
    Raised when a requested book or chapter does not exist in the source corpus.

    Attributes:
        book: Requested book short name
        chapter: Requested chapter number (optional)
    """

    def __init__(self, book: str, chapter: Optional[int] = None):
        self.book = book
        self.chapter = chapter
        if chapter is None:
            message = f"Book not found: {book}"
        else:
            message = f"Chapter not found: {book} {chapter}"
        super().__init__(message)


class TransformError(PlainverseError):
    """Base class for per-verse transform failures."""
    pass


class TransientServiceError(TransformError):
    """Rate limit, quota or temporary server failure. Safe to retry."""
    pass


class ServiceError(TransformError):
    """Non-retryable failure from the language model service."""
    pass


class RetryExhaustedError(TransformError):
    """
    Raised when every retry attempt failed with a transient error.

    Attributes:
        attempts: Number of calls made
        last_error: The error raised by the final attempt
    """

    def __init__(self, attempts: int, last_error: Exception):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Retries exhausted after {attempts} attempts: {last_error}")
