from __future__ import annotations

import sys
from pathlib import Path
from uuid import uuid4

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from vidpipe.config import Settings
from vidpipe.models.asset import Asset, AssetKind
from vidpipe.models.intent import EncodeResult
from vidpipe.pipeline import PipelineOrchestrator
from vidpipe.providers.encoder.base import Encoder
from vidpipe.storage import StagingArea

_API_ROOT = Path(__file__).resolve().parents[1]
if str(_API_ROOT) not in sys.path:
    sys.path.insert(0, str(_API_ROOT))


class FakeCatalog:
    def __init__(self) -> None:
        self.assets: list[Asset] = []
        self.fail: Exception | None = None

    async def insert(self, location: str, kind: AssetKind) -> Asset:
        if self.fail is not None:
            raise self.fail
        asset = Asset(id=uuid4().hex, location=str(location), kind=AssetKind(kind))
        self.assets.append(asset)
        return asset


class FakeEncoder(Encoder):
    def __init__(self) -> None:
        self.fail_message: str | None = None
        self.calls: list[str] = []

    def _finish(self, output_path: str) -> EncodeResult:
        if self.fail_message is not None:
            return EncodeResult.failure(self.fail_message)
        Path(output_path).write_bytes(b"video")
        return EncodeResult.success(output_path)

    async def trim(
        self, source_path: str, start_offset: float, duration: float, output_path: str
    ) -> EncodeResult:
        self.calls.append("trim")
        return self._finish(output_path)

    async def merge_by_concat(self, manifest_path: str, output_path: str) -> EncodeResult:
        self.calls.append("merge")
        return self._finish(output_path)


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        data_dir=str(tmp_path / "data"),
        log_dir=str(tmp_path / "logs"),
    )


@pytest.fixture()
def catalog() -> FakeCatalog:
    return FakeCatalog()


@pytest.fixture()
def encoder() -> FakeEncoder:
    return FakeEncoder()


@pytest.fixture()
def app(settings: Settings, catalog: FakeCatalog, encoder: FakeEncoder) -> FastAPI:
    from routes.videos import router as videos_router

    test_app = FastAPI()
    test_app.state.settings = settings
    test_app.state.orchestrator = PipelineOrchestrator(
        settings, StagingArea.from_settings(settings), encoder, catalog
    )
    test_app.include_router(videos_router)
    return test_app


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def video_file(tmp_path) -> str:
    path = tmp_path / "in" / "clip.mp4"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"video")
    return str(path)
