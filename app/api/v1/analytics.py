import asyncio

from fastapi import APIRouter, Depends, Query

from app.analytics.calculator import calculate_score_change
from app.analytics.display import analytics_card
from app.api.deps import get_resume_service, raise_service_error
from app.core.security import require_api_key
from app.schemas.resume import AnalyticsCard, ComparisonData, JobStats, ResumeAnalytics, ScoreChange
from app.services.resume_service import ResumeService, ResumeServiceError

router = APIRouter(dependencies=[Depends(require_api_key)])


@router.get("/analytics/comparison", response_model=ComparisonData)
async def comparison(service: ResumeService = Depends(get_resume_service)):
    return await service.load_comparison()


@router.get("/analytics/job-stats", response_model=JobStats)
async def job_stats(service: ResumeService = Depends(get_resume_service)):
    return await asyncio.to_thread(service.load_job_stats)


@router.get("/analytics/score-change", response_model=ScoreChange)
async def score_change(current: float = Query(...), previous: float = Query(...)):
    return calculate_score_change(current, previous)


async def _resume_analytics(resume_id: str, service: ResumeService) -> ResumeAnalytics:
    try:
        resume = await asyncio.to_thread(service.get_resume, resume_id)
    except ResumeServiceError as exc:
        raise_service_error(exc)
    return await asyncio.to_thread(service.resume_analytics, resume)


@router.get("/analytics/resumes/{resume_id}", response_model=ResumeAnalytics)
async def resume_analytics(resume_id: str, service: ResumeService = Depends(get_resume_service)):
    return await _resume_analytics(resume_id, service)


@router.get("/analytics/resumes/{resume_id}/card", response_model=AnalyticsCard)
async def resume_analytics_card(resume_id: str, service: ResumeService = Depends(get_resume_service)):
    return analytics_card(await _resume_analytics(resume_id, service))
