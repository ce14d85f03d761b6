"""Encoder abstractions."""

from __future__ import annotations

from abc import ABC, abstractmethod

from vidpipe.models.intent import EncodeResult


class Encoder(ABC):
    """One call is one external invocation with exactly one EncodeResult.

    Implementations report failures through the result instead of raising.
    """

    @abstractmethod
    async def trim(
        self, source_path: str, start_offset: float, duration: float, output_path: str
    ) -> EncodeResult:
        raise NotImplementedError

    @abstractmethod
    async def merge_by_concat(self, manifest_path: str, output_path: str) -> EncodeResult:
        raise NotImplementedError
