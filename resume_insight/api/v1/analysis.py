import logging
from typing import AsyncIterator

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status
from fastapi.responses import JSONResponse

from resume_insight.core.config import settings
from resume_insight.core.rate_limit import rate_limit
from resume_insight.integrations.analysis_api import (
    AnalysisApiClient,
    AnalyticsUnavailableError,
    UploadFailedError,
)
from resume_insight.services.upload_checks import (
    FileTooLargeError,
    ResumeFile,
    UploadRejectedError,
    check_resume_file,
)

logger = logging.getLogger(__name__)

router = APIRouter()

READ_CHUNK_BYTES = 1024 * 64


async def get_analysis_client() -> AsyncIterator[AnalysisApiClient]:
    async with AnalysisApiClient() as client:
        yield client


async def _read_upload(upload: UploadFile) -> ResumeFile:
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await upload.read(READ_CHUNK_BYTES)
        if not chunk:
            break
        total += len(chunk)
        chunks.append(chunk)
        if total > settings.max_upload_bytes:
            break
    return ResumeFile(
        filename=upload.filename or "resume",
        content=b"".join(chunks),
        content_type=upload.content_type or "",
    )


async def _analyze(upload: UploadFile, client: AnalysisApiClient, *, fresh: bool):
    resume = await _read_upload(upload)
    try:
        check_resume_file(resume, settings.max_upload_bytes)
    except FileTooLargeError as exc:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=str(exc)) from exc
    except UploadRejectedError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    submit = client.submit_fresh if fresh else client.submit
    try:
        return await submit(resume)
    except UploadFailedError as exc:
        logger.info("analysis_gateway_upstream_failed status=%s fresh=%s", exc.status_code, fresh)
        return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content=exc.result)


@router.post("/analysis", summary="Analyze a resume")
@rate_limit()
async def analyze_resume(
    request: Request,
    resume: UploadFile = File(...),
    client: AnalysisApiClient = Depends(get_analysis_client),
):
    _ = request
    return await _analyze(resume, client, fresh=False)


@router.post("/analysis/fresh", summary="Analyze a resume, bypassing cached results")
@rate_limit()
async def analyze_resume_fresh(
    request: Request,
    resume: UploadFile = File(...),
    client: AnalysisApiClient = Depends(get_analysis_client),
):
    _ = request
    return await _analyze(resume, client, fresh=True)


@router.get("/analytics", summary="Aggregate analysis statistics")
async def analytics(client: AnalysisApiClient = Depends(get_analysis_client)):
    try:
        return await client.get_analytics()
    except AnalyticsUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
