"""On-disk staging area for uploads, encoder outputs and ephemeral files."""

from __future__ import annotations

import asyncio
import logging
import time
from enum import Enum
from pathlib import Path
from typing import Protocol, Sequence
from uuid import uuid4

from vidpipe.config import Settings
from vidpipe.exceptions import StorageUnavailableError, UploadTooLargeError
from vidpipe.models.asset import AssetKind
from vidpipe.utils.ffmpeg import concat_manifest_line

logger = logging.getLogger(__name__)


class StagingRole(str, Enum):
    UPLOADS = "uploads"
    OUTPUTS = "outputs"
    EPHEMERAL = "ephemeral"


class AsyncReader(Protocol):
    async def read(self, size: int = -1) -> bytes: ...


def _token() -> str:
    # ms timestamp keeps names sortable; the uuid part keeps same-tick callers apart.
    return f"{int(time.time() * 1000)}_{uuid4().hex[:12]}"


def _safe_suffix(filename: str | None) -> str:
    suffix = Path(str(filename or "").replace("\x00", "")).suffix.lower()
    if not suffix or len(suffix) > 16 or not suffix[1:].isalnum():
        return ""
    return suffix


class StagingArea:
    def __init__(
        self,
        uploads_dir: str | Path,
        outputs_dir: str | Path,
        ephemeral_dir: str | Path,
        *,
        output_extension: str = ".mp4",
    ) -> None:
        self._dirs: dict[StagingRole, Path] = {
            StagingRole.UPLOADS: Path(uploads_dir),
            StagingRole.OUTPUTS: Path(outputs_dir),
            StagingRole.EPHEMERAL: Path(ephemeral_dir),
        }
        self.output_extension = output_extension

    @classmethod
    def from_settings(cls, settings: Settings) -> "StagingArea":
        return cls(
            settings.uploads_dir,
            settings.outputs_dir,
            settings.ephemeral_dir,
            output_extension=settings.encoder.output_extension,
        )

    def directory(self, role: StagingRole) -> Path:
        return self._dirs[StagingRole(role)]

    def ensure_directory(self, role: StagingRole) -> Path:
        path = self.directory(role)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageUnavailableError(f"cannot create {role.value} directory {path}: {exc}") from exc
        return path

    def allocate_output_path(self, kind: AssetKind) -> str:
        directory = self.ensure_directory(StagingRole.OUTPUTS)
        return str(directory / f"{AssetKind(kind).value}_{_token()}{self.output_extension}")

    def allocate_upload_path(self, filename: str | None) -> str:
        directory = self.ensure_directory(StagingRole.UPLOADS)
        return str(directory / f"{_token()}{_safe_suffix(filename)}")

    def write_manifest(self, paths: Sequence[str]) -> str:
        """Write a concat list file and return its path."""
        directory = self.ensure_directory(StagingRole.EPHEMERAL)
        manifest = directory / f"concat_{_token()}.txt"
        content = "\n".join(concat_manifest_line(p) for p in paths) + "\n"
        try:
            # "x" mode: never reuse a manifest another job still owns.
            with manifest.open("x", encoding="utf-8") as f:
                f.write(content)
        except OSError as exc:
            raise StorageUnavailableError(f"cannot write manifest {manifest}: {exc}") from exc
        return str(manifest)

    async def write_stream(
        self,
        reader: AsyncReader,
        target: str | Path,
        *,
        max_bytes: int,
        chunk_size: int = 8 * 1024 * 1024,
    ) -> int:
        target_path = Path(target)
        written = 0
        try:
            target_path.parent.mkdir(parents=True, exist_ok=True)
            with target_path.open("wb") as f:
                while True:
                    chunk = await reader.read(chunk_size)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > max_bytes:
                        raise UploadTooLargeError(f"file too large (limit {max_bytes} bytes)")
                    f.write(chunk)
        except (UploadTooLargeError, asyncio.CancelledError):
            self.release(target_path)
            raise
        except OSError as exc:
            self.release(target_path)
            raise StorageUnavailableError(f"cannot write upload {target_path}: {exc}") from exc
        return written

    def release(self, path: str | Path) -> bool:
        """Best-effort delete. Never raises."""
        try:
            Path(path).unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("failed to release ephemeral resource %s: %s", path, exc)
            return False
        return True
