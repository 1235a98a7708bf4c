from fastapi import HTTPException, Request

from app.services.resume_service import ResumeService, ResumeServiceError


def get_resume_service(request: Request) -> ResumeService:
    return request.app.state.resume_service


def raise_service_error(exc: ResumeServiceError) -> None:
    raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc
