from __future__ import annotations

import logging
from pathlib import PurePath

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response

from justapply.api.converter import ConversionRequest, DocumentConverter
from justapply.api.deps import get_app_settings, get_converter
from justapply.api.schemas import ConvertAckResponse, ErrorResponse, HealthResponse
from justapply.config import Settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["relay"])


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok")


@router.post(
    "/convert",
    response_model=ConvertAckResponse,
    responses={
        200: {"content": {"application/pdf": {}}},
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
    },
)
async def convert(
    file: UploadFile | None = File(None),
    username: str = Form(""),
    company: str = Form(""),
    job_role: str = Form("", alias="jobRole"),
    settings: Settings = Depends(get_app_settings),
    converter: DocumentConverter = Depends(get_converter),
) -> Response:
    if file is None:
        return JSONResponse(status_code=400, content=ErrorResponse(error="No file uploaded").model_dump())

    content = await file.read(settings.max_upload_bytes + 1)
    if len(content) > settings.max_upload_bytes:
        logger.warning("Rejected upload %s larger than %d bytes", file.filename, settings.max_upload_bytes)
        return JSONResponse(status_code=413, content=ErrorResponse(error="File too large").model_dump())

    request = ConversionRequest(
        filename=file.filename or "upload",
        content=content,
        content_type=file.content_type or "application/octet-stream",
        username=username,
        company=company,
        job_role=job_role,
    )
    document = await run_in_threadpool(converter.convert, request)
    if not document:
        return JSONResponse(ConvertAckResponse().model_dump())

    output_name = f"{PurePath(request.filename).stem}.pdf"
    return Response(
        content=document,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{output_name}"'},
    )
