from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta, timezone

from app.core.config.scoring import get_scoring_value
from app.normalize.utils import round_half_up
from app.schemas.resume import (
    CategoryScores,
    JobMatch,
    JobStats,
    RecentActivity,
    Resume,
    ResumeAnalytics,
    ScoreChange,
    Trend,
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Naive timestamps are stored UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def classify_improvement_trend(job_matches: Sequence[JobMatch], window_start: datetime) -> Trend:
    """Two-bucket mean shift between matches before and after ``window_start``."""
    if len(job_matches) < 2:
        return "stable"

    recent = [m.score.overall for m in job_matches if as_utc(m.analyzed_at) >= window_start]
    older = [m.score.overall for m in job_matches if as_utc(m.analyzed_at) < window_start]
    if not recent or not older:
        return "stable"

    threshold = get_scoring_value("analytics.improvement_trend_delta", 5)
    difference = _mean(recent) - _mean(older)
    if difference > threshold:
        return "up"
    if difference < -threshold:
        return "down"
    return "stable"


def category_snapshot(resume: Resume) -> CategoryScores:
    feedback = resume.feedback
    if feedback is None:
        return CategoryScores()
    return CategoryScores(
        ats=feedback.ats.score,
        tone_and_style=feedback.tone_and_style.score,
        content=feedback.content.score,
        structure=feedback.structure.score,
        skills=feedback.skills.score,
    )


def calculate_resume_analytics(
    resume: Resume,
    job_matches: Sequence[JobMatch],
    now: datetime | None = None,
) -> ResumeAnalytics:
    """Reduce one resume and its complete match list to an analytics summary."""
    now = as_utc(now) if now is not None else utc_now()
    recent_start = now - timedelta(days=get_scoring_value("analytics.recent_window_days", 7))
    activity_start = now - timedelta(days=get_scoring_value("analytics.activity_window_days", 30))

    overall_scores = [m.score.overall for m in job_matches]
    total = len(overall_scores)
    average = round_half_up(_mean(overall_scores)) if total else 0
    best = max(overall_scores) if total else 0

    last_analyzed = None
    if job_matches:
        last_analyzed = max(job_matches, key=lambda m: as_utc(m.analyzed_at)).analyzed_at

    return ResumeAnalytics(
        resume_id=resume.id,
        uploaded_at=resume.uploaded_at or now,
        total_job_matches=total,
        average_match_score=average,
        best_match_score=best,
        improvement_trend=classify_improvement_trend(job_matches, recent_start),
        category_scores=category_snapshot(resume),
        recent_activity=RecentActivity(
            matches_last_7_days=sum(1 for m in job_matches if as_utc(m.analyzed_at) >= recent_start),
            matches_last_30_days=sum(1 for m in job_matches if as_utc(m.analyzed_at) >= activity_start),
            last_analyzed=last_analyzed,
        ),
    )


def default_resume_analytics(resume: Resume, now: datetime | None = None) -> ResumeAnalytics:
    """Placeholder summary for a resume whose matches could not be loaded."""
    return ResumeAnalytics(
        resume_id=resume.id,
        uploaded_at=resume.uploaded_at or now or utc_now(),
        category_scores=category_snapshot(resume),
    )


def calculate_score_change(current: float, previous: float) -> ScoreChange:
    change = current - previous
    percentage = round_half_up(change / previous * 100) if previous > 0 else 0
    return ScoreChange(change=change, percentage=percentage)


def summarize_job_stats(job_matches: Sequence[JobMatch], now: datetime | None = None) -> JobStats:
    now = as_utc(now) if now is not None else utc_now()
    cutoff = now - timedelta(hours=get_scoring_value("analytics.job_stats_window_hours", 24))

    scores = [m.score.overall for m in job_matches]
    if not scores:
        return JobStats()
    return JobStats(
        total_matches=len(scores),
        average_score=round_half_up(_mean(scores)),
        top_match=max(scores),
        recent_matches=sum(1 for m in job_matches if as_utc(m.analyzed_at) > cutoff),
    )
