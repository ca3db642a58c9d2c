"""
Error kinds raised while resolving and running a minification batch.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    UNSUPPORTED_TYPE = "UnsupportedType"
    MISSING_BACKEND = "MissingBackend"
    MINIFICATION_FAILURE = "MinificationFailure"
    READ_FAILURE = "ReadFailure"
    WRITE_FAILURE = "WriteFailure"
    AMBIGUOUS_DESTINATION = "AmbiguousDestination"
    MISSING_DESTINATION = "MissingDestination"


class MinifyError(Exception):
    """Base class for failures that abort a batch."""

    kind: ErrorKind

    def __init__(self, message: str, job=None):
        super().__init__(message)
        self.message = message
        self.job = job


class UnsupportedTypeError(MinifyError):
    kind = ErrorKind.UNSUPPORTED_TYPE

    def __init__(self, extension: str, job=None, message: Optional[str] = None):
        super().__init__(message or f'Unsupported extension "{extension}".', job)
        self.extension = extension


class MissingBackendError(MinifyError):
    kind = ErrorKind.MISSING_BACKEND

    def __init__(self, backend: str, package: str, job=None):
        super().__init__(
            f"{backend} is not available. Install it with: pip install {package}", job
        )
        self.backend = backend
        self.package = package


class MinificationFailedError(MinifyError):
    kind = ErrorKind.MINIFICATION_FAILURE


class ReadFailedError(MinifyError):
    kind = ErrorKind.READ_FAILURE


class WriteFailedError(MinifyError):
    kind = ErrorKind.WRITE_FAILURE


class AmbiguousDestinationError(MinifyError):
    kind = ErrorKind.AMBIGUOUS_DESTINATION


class MissingDestinationError(MinifyError):
    kind = ErrorKind.MISSING_DESTINATION


def attach_job(error: MinifyError, job) -> MinifyError:
    """Record the implicated job on an error if it does not carry one yet."""
    if error.job is None:
        error.job = job
    return error


__all__ = [
    "ErrorKind",
    "MinifyError",
    "UnsupportedTypeError",
    "MissingBackendError",
    "MinificationFailedError",
    "ReadFailedError",
    "WriteFailedError",
    "AmbiguousDestinationError",
    "MissingDestinationError",
    "attach_job",
]
