from __future__ import annotations

import pytest

from vidpipe.config import Settings
from vidpipe.storage.staging import StagingArea


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        data_dir=str(tmp_path / "data"),
        log_dir=str(tmp_path / "logs"),
    )


@pytest.fixture()
def staging(settings: Settings) -> StagingArea:
    return StagingArea.from_settings(settings)


@pytest.fixture()
def make_video(tmp_path):
    def _make(name: str, content: bytes = b"\x00\x00\x00\x18ftypmp42") -> str:
        path = tmp_path / "sources" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return str(path)

    return _make
