"""Video upload/trim/merge routes."""

from __future__ import annotations

import logging

from fastapi import APIRouter, File, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse

from vidpipe.error_codes import ErrorCode
from vidpipe.exceptions import VidPipeError
from vidpipe.pipeline import PipelineOrchestrator, PipelineResult

from .schemas import AssetResponse, ErrorResponse, MergeRequest, TrimRequest

logger = logging.getLogger("vidpipe.api")

router = APIRouter(tags=["videos"])

_STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.UPLOAD_TOO_LARGE: 413,
    ErrorCode.STORAGE_UNAVAILABLE: 503,
    ErrorCode.ENCODER_FAILURE: 500,
    ErrorCode.CATALOG_WRITE_FAILURE: 500,
}

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    413: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


def orchestrator(request: Request) -> PipelineOrchestrator:
    orch = getattr(request.app.state, "orchestrator", None)
    if orch is None:
        raise HTTPException(status_code=500, detail="orchestrator not initialized")
    return orch


def error_response(exc: VidPipeError) -> JSONResponse:
    status = _STATUS_BY_CODE.get(exc.error_code, 500)
    if status >= 500:
        logger.error("%s: %s", exc.error_code.value, exc.message)
    else:
        logger.info("rejected request (%s): %s", exc.error_code.value, exc.message)
    body = ErrorResponse(error_kind=exc.error_code.value, message=exc.message)
    return JSONResponse(status_code=status, content=body.model_dump())


def to_response(result: PipelineResult) -> AssetResponse:
    return AssetResponse(path=result.path, kind=result.kind.value, asset_id=result.asset_id)


@router.post("/upload", response_model=AssetResponse, responses=_ERROR_RESPONSES)
async def upload_video(request: Request, video: UploadFile | None = File(default=None)):
    try:
        result = await orchestrator(request).submit_upload(video, video.filename if video else None)
    except VidPipeError as exc:
        return error_response(exc)
    finally:
        if video is not None:
            await video.close()
    return to_response(result)


@router.post("/trim", response_model=AssetResponse, responses=_ERROR_RESPONSES)
async def trim_video(request: Request, payload: TrimRequest):
    try:
        result = await orchestrator(request).submit_trim(
            payload.video_path, payload.start_time, payload.duration
        )
    except VidPipeError as exc:
        return error_response(exc)
    return to_response(result)


@router.post("/merge", response_model=AssetResponse, responses=_ERROR_RESPONSES)
async def merge_videos(request: Request, payload: MergeRequest):
    try:
        result = await orchestrator(request).submit_merge(payload.video_paths)
    except VidPipeError as exc:
        return error_response(exc)
    return to_response(result)
