from __future__ import annotations

from pathlib import Path

import pytest

from vidpipe.exceptions import StorageUnavailableError, UploadTooLargeError
from vidpipe.models.asset import AssetKind
from vidpipe.storage.staging import StagingArea, StagingRole


class _ChunkReader:
    def __init__(self, chunks: list[bytes]) -> None:
        self._chunks = list(chunks)

    async def read(self, size: int = -1) -> bytes:  # noqa: ARG002
        return self._chunks.pop(0) if self._chunks else b""


def test_ensure_directory_is_idempotent(staging: StagingArea) -> None:
    first = staging.ensure_directory(StagingRole.OUTPUTS)
    second = staging.ensure_directory(StagingRole.OUTPUTS)
    assert first == second
    assert first.is_dir()


def test_ensure_directory_raises_storage_unavailable(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a dir", encoding="utf-8")
    area = StagingArea(blocker / "uploads", tmp_path / "out", tmp_path / "tmp")
    with pytest.raises(StorageUnavailableError):
        area.ensure_directory(StagingRole.UPLOADS)


def test_allocate_output_path_layout(staging: StagingArea, settings) -> None:
    path = Path(staging.allocate_output_path(AssetKind.TRIMMED))
    assert path.parent == Path(settings.outputs_dir)
    assert path.name.startswith("trimmed_")
    assert path.suffix == ".mp4"
    assert not path.exists()


def test_allocate_output_path_never_repeats_within_a_tick(staging: StagingArea) -> None:
    paths = [staging.allocate_output_path(AssetKind.MERGED) for _ in range(500)]
    assert len(set(paths)) == len(paths)


def test_allocate_upload_path_keeps_extension_only(staging: StagingArea, settings) -> None:
    path = Path(staging.allocate_upload_path("../../etc/My Clip.MOV"))
    assert path.parent == Path(settings.uploads_dir)
    assert path.suffix == ".mov"
    assert Path(staging.allocate_upload_path(None)).suffix == ""


def test_write_manifest_format(staging: StagingArea, settings) -> None:
    manifest = Path(staging.write_manifest(["/v/a.mp4", "/v/it's.mp4"]))
    assert manifest.parent == Path(settings.ephemeral_dir)
    assert manifest.read_text(encoding="utf-8") == (
        "file '/v/a.mp4'\n"
        "file '/v/it'\\''s.mp4'\n"
    )


def test_write_manifest_paths_are_distinct(staging: StagingArea) -> None:
    a = staging.write_manifest(["/v/a.mp4", "/v/b.mp4"])
    b = staging.write_manifest(["/v/c.mp4", "/v/d.mp4"])
    assert a != b
    assert "c.mp4" not in Path(a).read_text(encoding="utf-8")


def test_release_is_best_effort(staging: StagingArea, tmp_path: Path) -> None:
    f = tmp_path / "x.txt"
    f.write_text("x", encoding="utf-8")
    assert staging.release(f) is True
    assert not f.exists()
    assert staging.release(f) is True

    d = tmp_path / "a_dir"
    d.mkdir()
    assert staging.release(d) is False
    assert d.exists()


@pytest.mark.asyncio
async def test_write_stream_writes_all_chunks(staging: StagingArea, tmp_path: Path) -> None:
    target = tmp_path / "up" / "clip.mp4"
    written = await staging.write_stream(_ChunkReader([b"ab", b"cd", b"e"]), target, max_bytes=100)
    assert written == 5
    assert target.read_bytes() == b"abcde"


@pytest.mark.asyncio
async def test_write_stream_rejects_oversized_upload(staging: StagingArea, tmp_path: Path) -> None:
    target = tmp_path / "up" / "clip.mp4"
    with pytest.raises(UploadTooLargeError):
        await staging.write_stream(_ChunkReader([b"abc", b"def"]), target, max_bytes=4)
    assert not target.exists()
