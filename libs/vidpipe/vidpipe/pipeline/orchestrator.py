"""Request-level pipeline orchestrator (validate -> stage -> encode -> persist)."""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Sequence

from vidpipe.config import Settings
from vidpipe.exceptions import CatalogWriteError, EncoderFailureError, InvalidInputError
from vidpipe.models.asset import Asset, AssetKind
from vidpipe.models.intent import JobState, MergeIntent, ProcessingIntent, TrimIntent
from vidpipe.pipeline.job import EncodeJob
from vidpipe.providers.encoder.base import Encoder
from vidpipe.storage.staging import AsyncReader, StagingArea
from vidpipe.utils.logging_setup import job_context

logger = logging.getLogger(__name__)

# Smallest duration ffmpeg can represent.
_MIN_DURATION_S = 1e-6


class AssetCatalog(Protocol):
    async def insert(self, location: str, kind: AssetKind) -> Asset: ...


@dataclass(frozen=True)
class PipelineResult:
    path: str
    kind: AssetKind
    asset_id: str


def _resolve_source(path: object) -> str:
    raw = str(path or "").strip()
    if not raw:
        raise InvalidInputError("Invalid video path: empty")
    p = Path(raw).expanduser()
    if not p.is_file():
        raise InvalidInputError(f"Invalid video path: {raw}")
    return str(p.resolve())


def _as_seconds(name: str, value: object) -> float:
    try:
        seconds = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise InvalidInputError(f"{name} must be a number of seconds (got {value!r})") from None
    if not math.isfinite(seconds):
        raise InvalidInputError(f"{name} must be finite (got {value!r})")
    return seconds


def _log_discarded(task: asyncio.Task) -> None:
    if task.cancelled():
        logger.warning("detached job cancelled after caller left")
        return
    exc = task.exception()
    if exc is not None:
        logger.warning("caller left before job finished; failure discarded: %s", exc)
        return
    logger.info("caller left before job finished; result discarded: %s", task.result().path)


class PipelineOrchestrator:
    """Runs trim/merge/upload requests and commits catalog records."""

    def __init__(
        self,
        settings: Settings,
        staging: StagingArea,
        encoder: Encoder,
        catalog: AssetCatalog,
    ) -> None:
        self.settings = settings
        self.staging = staging
        self.encoder = encoder
        self.catalog = catalog
        self._detached: set[asyncio.Task] = set()

    # Validation

    @staticmethod
    def build_trim_intent(source_path: object, start_offset: object, duration: object) -> TrimIntent:
        start = _as_seconds("startTime", start_offset)
        length = _as_seconds("duration", duration)
        if start < 0:
            raise InvalidInputError(f"startTime must be >= 0 (got {start})")
        if length <= 0:
            raise InvalidInputError(f"duration must be > 0 (got {length})")
        if length < _MIN_DURATION_S:
            raise InvalidInputError(f"duration must be at least {_MIN_DURATION_S:.6f}s (got {length})")
        return TrimIntent(source_location=_resolve_source(source_path), start_offset=start, duration=length)

    @staticmethod
    def build_merge_intent(source_paths: object) -> MergeIntent:
        if not isinstance(source_paths, (list, tuple)) or len(source_paths) < 2:
            raise InvalidInputError("Invalid video paths: at least two sources are required")
        return MergeIntent(source_locations=tuple(_resolve_source(p) for p in source_paths))

    # Public operations

    async def submit_trim(self, source_path: object, start_offset: object, duration: object) -> PipelineResult:
        intent = self.build_trim_intent(source_path, start_offset, duration)
        return await self._run_detached(intent)

    async def submit_merge(self, source_paths: Sequence[str]) -> PipelineResult:
        intent = self.build_merge_intent(source_paths)
        return await self._run_detached(intent)

    async def submit_upload(self, stream: AsyncReader | None, filename: str | None = None) -> PipelineResult:
        if stream is None:
            raise InvalidInputError("No file uploaded")

        staged = self.staging.allocate_upload_path(filename)
        size = await self.staging.write_stream(
            stream, staged, max_bytes=int(self.settings.upload_max_bytes)
        )
        if size <= 0 or not Path(staged).is_file():
            self.staging.release(staged)
            raise InvalidInputError("No file uploaded")
        logger.info("file uploaded to %s (%d bytes)", staged, size)

        asset = await self._persist(staged, AssetKind.UPLOADED)
        return PipelineResult(path=staged, kind=AssetKind.UPLOADED, asset_id=asset.id)

    async def drain(self) -> None:
        """Wait for jobs whose callers went away."""
        pending = list(self._detached)
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    # Execution

    async def _run_detached(self, intent: ProcessingIntent) -> PipelineResult:
        # The encode must not be aborted mid-flight when the caller is cancelled.
        task = asyncio.ensure_future(self._execute(intent))
        self._detached.add(task)
        task.add_done_callback(self._detached.discard)
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            if not task.done():
                task.add_done_callback(_log_discarded)
            raise

    async def _execute(self, intent: ProcessingIntent) -> PipelineResult:
        job = EncodeJob(intent, self.staging)
        with job_context(job.id):
            return await self._run_job(job)

    async def _run_job(self, job: EncodeJob) -> PipelineResult:
        intent = job.intent
        async with job:
            job.transition(JobState.STAGING)
            output_path = job.set_output(self.staging.allocate_output_path(intent.kind))
            if isinstance(intent, MergeIntent):
                manifest_path = job.track(self.staging.write_manifest(intent.source_locations))
                job.transition(JobState.ENCODING)
                logger.info("merging %s -> %s", ", ".join(intent.source_locations), output_path)
                result = await self.encoder.merge_by_concat(manifest_path, output_path)
            else:
                job.transition(JobState.ENCODING)
                logger.info("trimming %s -> %s", intent.source_location, output_path)
                result = await self.encoder.trim(
                    intent.source_location, intent.start_offset, intent.duration, output_path
                )
            if not result.ok:
                logger.error("%s failed: %s", intent.kind.value, result.message)
                raise EncoderFailureError(result.message)
            job.keep_output()

            job.transition(JobState.PERSISTING)
            asset = await self._persist(output_path, intent.kind)
            job.transition(JobState.COMPLETED)

        logger.info("%s video saved to %s", intent.kind.value, output_path)
        return PipelineResult(path=output_path, kind=intent.kind, asset_id=asset.id)

    async def _persist(self, location: str, kind: AssetKind) -> Asset:
        try:
            return await self.catalog.insert(location, kind)
        except Exception as exc:
            logger.error("catalog insert failed for %s (file left on disk): %s", location, exc)
            raise CatalogWriteError(location, f"catalog insert failed: {exc}") from exc
