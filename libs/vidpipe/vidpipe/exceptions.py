"""VidPipe exception hierarchy."""

from __future__ import annotations

from vidpipe.error_codes import ErrorCode


class VidPipeError(Exception):
    """Base error for VidPipe."""

    error_code: ErrorCode = ErrorCode.UNKNOWN

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(VidPipeError):
    """Raised when configuration is invalid."""

    error_code = ErrorCode.CONFIGURATION


class InvalidInputError(VidPipeError):
    """Raised when a request references missing sources or bad parameters."""

    error_code = ErrorCode.INVALID_INPUT


class UploadTooLargeError(InvalidInputError):
    error_code = ErrorCode.UPLOAD_TOO_LARGE


class StorageUnavailableError(VidPipeError):
    """Raised when a staging directory or file cannot be created or written."""

    error_code = ErrorCode.STORAGE_UNAVAILABLE


class EncoderFailureError(VidPipeError):
    """Raised when the external encoder reports an error."""

    error_code = ErrorCode.ENCODER_FAILURE


class CatalogWriteError(VidPipeError):
    """Raised when the asset insert fails after the file was produced.

    The file at `location` exists on disk but has no catalog record.
    """

    error_code = ErrorCode.CATALOG_WRITE_FAILURE

    def __init__(self, location: str, message: str) -> None:
        super().__init__(f"{message} (orphaned output: {location})")
        self.location = location
