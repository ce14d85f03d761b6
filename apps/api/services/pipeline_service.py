"""Wiring of the pipeline core for the API process."""

from __future__ import annotations

from psycopg_pool import AsyncConnectionPool

from vidpipe.config import Settings
from vidpipe.pipeline import PipelineOrchestrator
from vidpipe.providers import get_encoder
from vidpipe.repositories import AssetRepository
from vidpipe.storage import StagingArea, StagingRole


def build_orchestrator(settings: Settings, pool: AsyncConnectionPool) -> PipelineOrchestrator:
    staging = StagingArea.from_settings(settings)
    # Fail at startup rather than on the first request.
    for role in StagingRole:
        staging.ensure_directory(role)
    return PipelineOrchestrator(
        settings,
        staging,
        get_encoder(settings.encoder),
        AssetRepository(pool),
    )
