"""Processing intents and encoder results (never persisted)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from vidpipe.models.asset import AssetKind


class JobState(str, Enum):
    VALIDATING = "validating"
    STAGING = "staging"
    ENCODING = "encoding"
    PERSISTING = "persisting"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class TrimIntent:
    source_location: str
    start_offset: float
    duration: float

    @property
    def kind(self) -> AssetKind:
        return AssetKind.TRIMMED


@dataclass(frozen=True)
class MergeIntent:
    source_locations: tuple[str, ...]

    @property
    def kind(self) -> AssetKind:
        return AssetKind.MERGED


ProcessingIntent = TrimIntent | MergeIntent


@dataclass(frozen=True)
class EncodeResult:
    ok: bool
    output_path: str = ""
    message: str = ""

    @classmethod
    def success(cls, output_path: str) -> "EncodeResult":
        return cls(ok=True, output_path=str(output_path))

    @classmethod
    def failure(cls, message: str) -> "EncodeResult":
        return cls(ok=False, message=str(message or "encoder failed"))
