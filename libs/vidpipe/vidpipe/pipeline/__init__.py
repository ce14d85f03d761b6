"""Pipeline orchestration."""

from vidpipe.pipeline.job import EncodeJob
from vidpipe.pipeline.orchestrator import PipelineOrchestrator, PipelineResult

__all__ = ["EncodeJob", "PipelineOrchestrator", "PipelineResult"]
