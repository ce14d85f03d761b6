"""Provider abstractions for external services."""

from vidpipe.providers.registry import get_encoder

__all__ = ["get_encoder"]
