from fastapi import APIRouter, Depends, HTTPException, status

from app.core.security import require_api_key
from app.data.jobs import get_job, list_jobs
from app.normalize.job_match import get_job_match_color, get_job_match_label
from app.schemas.resume import JobPosting

router = APIRouter(dependencies=[Depends(require_api_key)])


@router.get("/jobs", response_model=list[JobPosting])
async def jobs():
    return list_jobs()


@router.get("/jobs/{job_id}", response_model=JobPosting)
async def job_detail(job_id: str):
    job = get_job(job_id)
    if job is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Job posting '{job_id}' not found.")
    return job


@router.get("/jobs/match-label/{score}")
async def match_label(score: int):
    return {"score": score, "label": get_job_match_label(score), "color": get_job_match_color(score)}
