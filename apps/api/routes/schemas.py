from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# Body fields stay untyped: shape errors are reported by the orchestrator as
# INVALID_INPUT (400) instead of FastAPI's 422.
class TrimRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    video_path: Any = Field(default=None, alias="videoPath")
    start_time: Any = Field(default=0, alias="startTime")
    duration: Any = None


class MergeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    video_paths: Any = Field(default=None, alias="videoPaths")


class AssetResponse(BaseModel):
    path: str
    kind: str
    asset_id: str


class ErrorResponse(BaseModel):
    error_kind: str
    message: str
