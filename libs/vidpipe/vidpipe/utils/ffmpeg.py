"""FFmpeg binary resolution and concat-manifest helpers.

Prefer system `ffmpeg`, fallback to `imageio-ffmpeg` bundled binary.
"""

from __future__ import annotations

import logging
import shlex
import shutil
from pathlib import Path
from typing import Sequence

logger = logging.getLogger(__name__)


def resolve_ffmpeg_bin(ffmpeg_bin: str = "ffmpeg") -> str:
    ffmpeg_bin = (ffmpeg_bin or "ffmpeg").strip()

    if Path(ffmpeg_bin).exists():
        return ffmpeg_bin

    found = shutil.which(ffmpeg_bin)
    if found:
        return found

    try:
        import imageio_ffmpeg

        return str(imageio_ffmpeg.get_ffmpeg_exe())
    except Exception as exc:
        logger.warning("failed to resolve bundled ffmpeg (%s); fallback to %r", exc, ffmpeg_bin)
        return ffmpeg_bin


def concat_manifest_line(path: str) -> str:
    """Return one concat-demuxer line: ``file '<path>'``.

    Inside single quotes the demuxer only understands ``'\\''`` as an
    embedded quote.
    """
    escaped = str(path).replace("'", "'\\''")
    return f"file '{escaped}'"


def format_command(args: Sequence[str]) -> str:
    return " ".join(shlex.quote(str(a)) for a in args)
