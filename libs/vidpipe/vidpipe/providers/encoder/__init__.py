"""Encoder implementations."""

from vidpipe.providers.encoder.base import Encoder
from vidpipe.providers.encoder.ffmpeg import FFmpegEncoder

__all__ = ["Encoder", "FFmpegEncoder"]
