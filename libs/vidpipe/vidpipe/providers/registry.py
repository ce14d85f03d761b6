"""Provider factory and registry."""

from __future__ import annotations

from vidpipe.config import EncoderConfig
from vidpipe.exceptions import ConfigurationError
from vidpipe.providers.encoder.base import Encoder


def get_encoder(config: EncoderConfig) -> Encoder:
    """Get encoder based on configuration."""
    provider_type = str(config.provider or "ffmpeg").strip().lower()

    match provider_type:
        case "ffmpeg":
            from vidpipe.providers.encoder.ffmpeg import FFmpegEncoder

            return FFmpegEncoder(
                ffmpeg_bin=config.ffmpeg_bin,
                timeout_s=float(config.timeout_s),
                max_concurrency=int(config.max_concurrency),
            )
        case _:
            raise ConfigurationError(f"Unknown encoder provider: {provider_type}")
