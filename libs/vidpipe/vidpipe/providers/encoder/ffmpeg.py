"""FFmpeg-based trim/concat encoder."""

from __future__ import annotations

import asyncio
import logging
import subprocess
from pathlib import Path

from vidpipe.models.intent import EncodeResult
from vidpipe.providers.encoder.base import Encoder
from vidpipe.utils.ffmpeg import format_command, resolve_ffmpeg_bin
from vidpipe.utils.subprocess import run_subprocess

logger = logging.getLogger(__name__)


def _seconds(value: float) -> str:
    # ffmpeg parses time values with microsecond resolution and no exponent.
    return f"{float(value):.6f}".rstrip("0").rstrip(".") or "0"


class FFmpegEncoder(Encoder):
    def __init__(
        self,
        ffmpeg_bin: str = "ffmpeg",
        *,
        timeout_s: float | None = 3600.0,
        max_concurrency: int = 4,
    ) -> None:
        self.ffmpeg_bin = resolve_ffmpeg_bin(ffmpeg_bin)
        self.timeout_s = timeout_s
        self._slots = asyncio.Semaphore(max(1, int(max_concurrency)))

    def trim_args(self, source_path: str, start_offset: float, duration: float, output_path: str) -> list[str]:
        # -ss before -i seeks the input; -t limits the output.
        return [
            self.ffmpeg_bin,
            "-y",
            "-ss",
            _seconds(start_offset),
            "-i",
            str(source_path),
            "-t",
            _seconds(duration),
            str(output_path),
        ]

    def concat_args(self, manifest_path: str, output_path: str) -> list[str]:
        return [
            self.ffmpeg_bin,
            "-y",
            "-f",
            "concat",
            "-safe",
            "0",
            "-i",
            str(manifest_path),
            "-c",
            "copy",
            str(output_path),
        ]

    async def _run(self, args: list[str], output_path: str) -> EncodeResult:
        cmd = format_command(args)
        async with self._slots:
            logger.debug("ffmpeg start: %s", cmd)
            try:
                result = await run_subprocess(args, timeout_s=self.timeout_s)
            except FileNotFoundError:
                return EncodeResult.failure(
                    f"ffmpeg binary not found: {self.ffmpeg_bin}. "
                    "Install ffmpeg and ensure it is in PATH (or install `imageio-ffmpeg` in the env, "
                    "or set ENCODER_FFMPEG_BIN)."
                )
            except subprocess.TimeoutExpired:
                return EncodeResult.failure(f"ffmpeg timed out after {self.timeout_s}s\ncmd: {cmd}")
            except OSError as exc:
                return EncodeResult.failure(f"ffmpeg could not start: {exc}\ncmd: {cmd}")

        if not result.ok:
            return EncodeResult.failure(
                f"ffmpeg failed (code={result.returncode}).\n"
                f"cmd: {cmd}\n"
                f"stderr: {result.stderr_tail()}"
            )
        if not Path(output_path).is_file():
            return EncodeResult.failure(f"ffmpeg exited cleanly but wrote no output: {output_path}")
        logger.debug("ffmpeg done in %.1fs: %s", result.elapsed_s, output_path)
        return EncodeResult.success(output_path)

    async def trim(
        self, source_path: str, start_offset: float, duration: float, output_path: str
    ) -> EncodeResult:
        return await self._run(
            self.trim_args(source_path, start_offset, duration, output_path), output_path
        )

    async def merge_by_concat(self, manifest_path: str, output_path: str) -> EncodeResult:
        return await self._run(self.concat_args(manifest_path, output_path), output_path)
