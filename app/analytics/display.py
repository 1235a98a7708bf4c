from __future__ import annotations

from datetime import datetime

from app.normalize.job_match import get_job_match_label
from app.schemas.resume import AnalyticsCard, ResumeAnalytics, Trend

from .calculator import as_utc, utc_now

_TREND_ICONS = {"up": "↗️", "down": "↘️"}
_TREND_COLORS = {"up": "text-green-600", "down": "text-red-600"}


def get_trend_icon(trend: Trend) -> str:
    return _TREND_ICONS.get(trend, "→")


def get_trend_color(trend: Trend) -> str:
    return _TREND_COLORS.get(trend, "text-gray-600")


def format_time_ago(when: datetime | str, now: datetime | None = None) -> str:
    if isinstance(when, str):
        when = datetime.fromisoformat(when.replace("Z", "+00:00"))
    now = as_utc(now) if now is not None else utc_now()
    seconds = abs((now - as_utc(when)).total_seconds())

    minutes = int(seconds // 60)
    hours = int(seconds // 3600)
    days = int(seconds // 86400)

    if minutes < 60:
        return f"{minutes} minutes ago"
    if hours < 24:
        return f"{hours} hours ago"
    if days < 7:
        return f"{days} days ago"
    if days < 30:
        return f"{days // 7} weeks ago"
    return f"{days // 30} months ago"


def analytics_card(analytics: ResumeAnalytics, now: datetime | None = None) -> AnalyticsCard:
    """Presentation strings for one resume's analytics summary."""
    trend = analytics.improvement_trend
    last_analyzed = analytics.recent_activity.last_analyzed
    return AnalyticsCard(
        resume_id=analytics.resume_id,
        improvement_trend=trend,
        trend_icon=get_trend_icon(trend),
        trend_color=get_trend_color(trend),
        match_label=get_job_match_label(analytics.best_match_score) if analytics.total_job_matches else None,
        uploaded_ago=format_time_ago(analytics.uploaded_at, now=now),
        last_analyzed_ago=format_time_ago(last_analyzed, now=now) if last_analyzed is not None else None,
    )
