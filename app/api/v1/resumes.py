import asyncio
import mimetypes

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, Response, UploadFile, status

from app.api.deps import get_resume_service, raise_service_error
from app.core.config import settings
from app.core.rate_limit import rate_limit
from app.core.security import require_api_key
from app.schemas.resume import JobMatch, Resume
from app.services.resume_service import ResumeService, ResumeServiceError

router = APIRouter(dependencies=[Depends(require_api_key)])

_UPLOAD_CHUNK_BYTES = 1024 * 64


async def _read_limited(file: UploadFile, limit: int) -> bytes:
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(_UPLOAD_CHUNK_BYTES)
        if not chunk:
            break
        total += len(chunk)
        if total > limit:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File too large. Maximum allowed size is {limit} bytes.",
            )
        chunks.append(chunk)
    return b"".join(chunks)


@router.post("/resumes", response_model=Resume, status_code=status.HTTP_201_CREATED)
@rate_limit("20/minute")
async def upload_resume(
    request: Request,
    file: UploadFile = File(...),
    company_name: str | None = Form(default=None, alias="companyName"),
    job_title: str | None = Form(default=None, alias="jobTitle"),
    job_description: str | None = Form(default=None, alias="jobDescription"),
    service: ResumeService = Depends(get_resume_service),
):
    _ = request
    content = await _read_limited(file, settings.max_upload_bytes)
    try:
        return await asyncio.to_thread(
            service.upload_resume,
            filename=file.filename or "resume.pdf",
            content=content,
            company_name=company_name,
            job_title=job_title,
            job_description=job_description,
        )
    except ResumeServiceError as exc:
        raise_service_error(exc)


@router.get("/resumes", response_model=list[Resume])
async def list_resumes(service: ResumeService = Depends(get_resume_service)):
    return await asyncio.to_thread(service.load_resumes)


@router.get("/resumes/{resume_id}", response_model=Resume)
async def resume_detail(resume_id: str, service: ResumeService = Depends(get_resume_service)):
    try:
        return await asyncio.to_thread(service.get_resume, resume_id)
    except ResumeServiceError as exc:
        raise_service_error(exc)


@router.get("/resumes/{resume_id}/file")
async def resume_file(resume_id: str, service: ResumeService = Depends(get_resume_service)):
    try:
        resume, content = await asyncio.to_thread(service.read_resume_file, resume_id)
    except ResumeServiceError as exc:
        raise_service_error(exc)
    media_type = mimetypes.guess_type(resume.resume_path)[0] or "application/octet-stream"
    return Response(content=content, media_type=media_type)


@router.delete("/resumes/{resume_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_resume(resume_id: str, service: ResumeService = Depends(get_resume_service)):
    try:
        await asyncio.to_thread(service.delete_resume, resume_id)
    except ResumeServiceError as exc:
        raise_service_error(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/resumes/{resume_id}/feedback", response_model=Resume)
@rate_limit("20/minute")
async def regenerate_feedback(
    request: Request,
    resume_id: str,
    service: ResumeService = Depends(get_resume_service),
):
    _ = request
    try:
        return await asyncio.to_thread(service.regenerate_feedback, resume_id)
    except ResumeServiceError as exc:
        raise_service_error(exc)


@router.post("/resumes/{resume_id}/matches/{job_id}", response_model=JobMatch)
@rate_limit()
async def analyze_job(
    request: Request,
    resume_id: str,
    job_id: str,
    service: ResumeService = Depends(get_resume_service),
):
    _ = request
    try:
        return await asyncio.to_thread(service.analyze_job, resume_id, job_id)
    except ResumeServiceError as exc:
        raise_service_error(exc)


@router.get("/resumes/{resume_id}/matches", response_model=list[JobMatch])
async def job_matches(resume_id: str, service: ResumeService = Depends(get_resume_service)):
    try:
        await asyncio.to_thread(service.get_resume, resume_id)
    except ResumeServiceError as exc:
        raise_service_error(exc)
    return await asyncio.to_thread(service.load_job_matches, resume_id)
