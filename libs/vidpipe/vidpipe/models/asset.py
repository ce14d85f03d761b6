"""Asset model (one video file known to the catalog)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class AssetKind(str, Enum):
    UPLOADED = "uploaded"
    TRIMMED = "trimmed"
    MERGED = "merged"


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


@dataclass
class Asset:
    id: str
    location: str
    kind: AssetKind
    created_at: datetime = field(default_factory=_utcnow)
