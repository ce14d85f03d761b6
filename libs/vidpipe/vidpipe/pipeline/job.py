"""Per-request encode job scope."""

from __future__ import annotations

import logging
from types import TracebackType
from uuid import uuid4

from vidpipe.models.intent import JobState, ProcessingIntent
from vidpipe.storage.staging import StagingArea

logger = logging.getLogger(__name__)


class EncodeJob:
    """Owns the ephemeral files of one encoder invocation.

    Leaving the `async with` block releases every tracked path, whatever the
    outcome. The output path is tracked until `keep_output()` is called, so a
    partial output of a failed encode is deleted as well.
    """

    def __init__(self, intent: ProcessingIntent, staging: StagingArea) -> None:
        self.id = uuid4().hex[:12]
        self.intent = intent
        self.output_path = ""
        self.ephemeral_resources: set[str] = set()
        self.state = JobState.VALIDATING
        self._staging = staging

    def transition(self, state: JobState) -> None:
        logger.debug("%s -> %s", self.state.value, state.value)
        self.state = state

    def track(self, path: str) -> str:
        self.ephemeral_resources.add(str(path))
        return str(path)

    def set_output(self, path: str) -> str:
        self.output_path = self.track(path)
        return self.output_path

    def keep_output(self) -> None:
        self.ephemeral_resources.discard(self.output_path)

    async def __aenter__(self) -> "EncodeJob":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc is not None and self.state != JobState.FAILED:
            self.transition(JobState.FAILED)
        for path in sorted(self.ephemeral_resources):
            self._staging.release(path)
        self.ephemeral_resources.clear()
