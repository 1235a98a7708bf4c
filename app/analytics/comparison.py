from __future__ import annotations

import math
from collections.abc import Sequence

from app.core.config.scoring import get_scoring_value
from app.normalize.utils import round_half_up
from app.schemas.resume import CATEGORY_KEYS, CategoryTrend, ComparisonInsights, Resume, ResumeAnalytics, Trend

_CATEGORY_RECOMMENDATIONS: tuple[tuple[str, str], ...] = (
    ("ATS", "Improve ATS compatibility by using more relevant keywords and standard formatting"),
    ("skills", "Update skills section with more in-demand technologies and certifications"),
    ("content", "Strengthen content with more quantified achievements and relevant experience"),
)
_START_ANALYZING = "Start analyzing your resumes against job postings to identify improvement areas"


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def _best_performer(analytics: Sequence[ResumeAnalytics]) -> ResumeAnalytics:
    best = analytics[0]
    for current in analytics[1:]:
        if current.average_match_score > best.average_match_score:
            best = current
    return best


def _most_improved(analytics: Sequence[ResumeAnalytics]) -> ResumeAnalytics:
    # First record trending up, not the largest improvement.
    for record in analytics:
        if record.improvement_trend == "up":
            return record
    return analytics[0]


def portfolio_category_means(analytics: Sequence[ResumeAnalytics]) -> dict[str, float]:
    return {key: _mean([a.category_scores.get(key) for a in analytics]) for key in CATEGORY_KEYS}


def _recommendations(analytics: Sequence[ResumeAnalytics]) -> list[str]:
    floor = get_scoring_value("analytics.recommendation_floor", 70)
    means = portfolio_category_means(analytics)

    recommendations = [text for key, text in _CATEGORY_RECOMMENDATIONS if means[key] < floor]
    if any(a.total_job_matches == 0 for a in analytics):
        recommendations.append(_START_ANALYZING)
    return recommendations


def category_trend(category: str, scores: Sequence[float]) -> CategoryTrend:
    """Compare the back half of ``scores`` against the whole sequence.

    List position stands in for recency, so callers must pass scores in
    upload order.
    """
    threshold = get_scoring_value("analytics.category_trend_delta", 2)
    overall_avg = _mean(scores)
    recent_avg = _mean(scores[-math.ceil(len(scores) / 2):])
    change = recent_avg - overall_avg

    trend: Trend = "stable"
    if change > threshold:
        trend = "up"
    elif change < -threshold:
        trend = "down"
    return CategoryTrend(category=category, trend=trend, change=round_half_up(change))


def generate_comparison_insights(
    resumes: Sequence[Resume],
    analytics: Sequence[ResumeAnalytics],
) -> ComparisonInsights:
    """Derive portfolio-level insights from per-resume analytics.

    ``resumes`` is accepted alongside ``analytics`` so callers can pass the
    comparison page data as loaded; every insight is computed from
    ``analytics``, whose order must match upload order.
    """
    if not analytics:
        return ComparisonInsights()

    trends = [
        category_trend(key, [a.category_scores.get(key) for a in analytics])
        for key in CATEGORY_KEYS
    ]
    return ComparisonInsights(
        best_performer=_best_performer(analytics).resume_id,
        most_improved=_most_improved(analytics).resume_id,
        recommendations=_recommendations(analytics),
        trends=trends,
    )
