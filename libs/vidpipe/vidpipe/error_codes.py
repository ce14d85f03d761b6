"""Canonical error codes surfaced to API clients."""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    UNKNOWN = "UNKNOWN"
    CONFIGURATION = "CONFIGURATION"

    INVALID_INPUT = "INVALID_INPUT"
    UPLOAD_TOO_LARGE = "UPLOAD_TOO_LARGE"
    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"
    ENCODER_FAILURE = "ENCODER_FAILURE"
    CATALOG_WRITE_FAILURE = "CATALOG_WRITE_FAILURE"
