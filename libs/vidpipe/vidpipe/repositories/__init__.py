"""PostgreSQL repository layer (asset catalog)."""

from vidpipe.repositories.asset_repo import AssetRepository
from vidpipe.repositories.base import BaseRepository, DatabasePool

__all__ = [
    "AssetRepository",
    "BaseRepository",
    "DatabasePool",
]
