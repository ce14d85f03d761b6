"""Core data models for VidPipe."""

from vidpipe.models.asset import Asset, AssetKind
from vidpipe.models.intent import (
    EncodeResult,
    JobState,
    MergeIntent,
    ProcessingIntent,
    TrimIntent,
)

__all__ = [
    "Asset",
    "AssetKind",
    "EncodeResult",
    "JobState",
    "MergeIntent",
    "ProcessingIntent",
    "TrimIntent",
]
