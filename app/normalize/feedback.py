from __future__ import annotations

import json
import logging
import math
from collections.abc import Mapping
from typing import Any

from app.core.config.scoring import get_scoring_value
from app.schemas.resume import ATSCategory, ATSTip, CATEGORY_KEYS, Feedback, FeedbackCategory, Tip

from .utils import AIResponseFormatError, clamp_score, extract_response_text, get_field, is_number, parse_json_object

logger = logging.getLogger(__name__)

_TIP_TYPES = {"good", "improve"}


def _max_tips() -> int:
    return int(get_scoring_value("feedback.max_tips_per_category", 4))


def sanitize_score(value: Any) -> int:
    if not is_number(value) or math.isnan(value):
        return int(get_scoring_value("feedback.default_score", 50))
    return clamp_score(value)


def _is_valid_tip(tip: Any, has_explanation: bool) -> bool:
    if not isinstance(tip, Mapping):
        return False
    if not tip.get("type") or not tip.get("tip"):
        return False
    if has_explanation and not tip.get("explanation"):
        return False
    if not isinstance(tip["type"], str) or tip["type"] not in _TIP_TYPES:
        return False
    if not isinstance(tip["tip"], str):
        return False
    if has_explanation and not isinstance(tip["explanation"], str):
        return False
    return True


def sanitize_tips(tips: Any, has_explanation: bool = True) -> list[dict[str, str]]:
    """Keep the first valid tips in their original order."""
    if not isinstance(tips, list):
        return []

    kept: list[dict[str, str]] = []
    for tip in tips:
        if not _is_valid_tip(tip, has_explanation):
            continue
        entry = {"type": tip["type"], "tip": tip["tip"]}
        if has_explanation:
            entry["explanation"] = tip["explanation"]
        kept.append(entry)
    return kept[: _max_tips()]


def sanitize_feedback(raw: Any) -> Feedback:
    """Repair an untrusted feedback payload into a complete Feedback record."""
    ats = get_field(raw, "ATS")

    def category(key: str) -> FeedbackCategory:
        data = get_field(raw, key)
        return FeedbackCategory(
            score=sanitize_score(get_field(data, "score")),
            tips=[Tip(**tip) for tip in sanitize_tips(get_field(data, "tips"))],
        )

    return Feedback(
        overall_score=sanitize_score(get_field(raw, "overallScore")),
        ats=ATSCategory(
            score=sanitize_score(get_field(ats, "score")),
            tips=[ATSTip(**tip) for tip in sanitize_tips(get_field(ats, "tips"), has_explanation=False)],
        ),
        tone_and_style=category("toneAndStyle"),
        content=category("content"),
        structure=category("structure"),
        skills=category("skills"),
    )


def validate_feedback_structure(raw: Any) -> bool:
    if not isinstance(raw, Mapping):
        return False
    if not raw.get("overallScore"):
        return False

    for key in CATEGORY_KEYS:
        data = raw.get(key)
        if not data or not isinstance(data, Mapping):
            return False
        if not data.get("score") or not isinstance(data.get("tips"), list):
            return False
        for tip in data["tips"]:
            if not isinstance(tip, Mapping):
                return False
            if not tip.get("type") or not tip.get("tip"):
                return False
            if key != "ATS" and not tip.get("explanation"):
                return False
    return True


def generate_fallback_feedback(job_title: str | None = None) -> Feedback:
    job_specific = f" for a {job_title} position" if job_title else ""

    return Feedback(
        overall_score=65,
        ats=ATSCategory(
            score=70,
            tips=[
                ATSTip(type="improve", tip="Add more relevant keywords"),
                ATSTip(type="good", tip="Clean formatting structure"),
                ATSTip(type="improve", tip="Use standard section headings"),
            ],
        ),
        tone_and_style=FeedbackCategory(
            score=75,
            tips=[
                Tip(
                    type="good",
                    tip="Professional language",
                    explanation="Your resume uses appropriate professional language and maintains a formal tone throughout.",
                ),
                Tip(
                    type="improve",
                    tip="Strengthen action verbs",
                    explanation=(
                        f"Consider using more powerful action verbs{job_specific} "
                        "to better demonstrate your impact and achievements."
                    ),
                ),
                Tip(
                    type="improve",
                    tip="Quantify achievements",
                    explanation=(
                        "Add specific numbers, percentages, or metrics to make your "
                        "accomplishments more compelling and measurable."
                    ),
                ),
            ],
        ),
        content=FeedbackCategory(
            score=60,
            tips=[
                Tip(
                    type="improve",
                    tip="Add relevant experience details",
                    explanation=(
                        "Include more specific details about your experience that directly "
                        f"relates to{job_specific} requirements."
                    ),
                ),
                Tip(
                    type="improve",
                    tip="Highlight key achievements",
                    explanation=(
                        "Focus on major accomplishments rather than just listing job duties "
                        "to better showcase your value."
                    ),
                ),
                Tip(
                    type="good",
                    tip="Clear work history",
                    explanation="Your employment history is clearly presented with proper dates and company information.",
                ),
            ],
        ),
        structure=FeedbackCategory(
            score=80,
            tips=[
                Tip(
                    type="good",
                    tip="Logical section organization",
                    explanation=(
                        "Your resume follows a clear, logical structure that's easy to follow "
                        "for both ATS and human reviewers."
                    ),
                ),
                Tip(
                    type="improve",
                    tip="Optimize section order",
                    explanation=(
                        "Consider reordering sections to highlight your most relevant "
                        f"qualifications{job_specific} first."
                    ),
                ),
                Tip(
                    type="good",
                    tip="Consistent formatting",
                    explanation="You maintain consistent formatting throughout the document, which improves readability.",
                ),
            ],
        ),
        skills=FeedbackCategory(
            score=65,
            tips=[
                Tip(
                    type="improve",
                    tip="Add technical skills",
                    explanation=(
                        "Include more technical skills and tools that are specifically "
                        f"mentioned in{job_specific} job descriptions."
                    ),
                ),
                Tip(
                    type="improve",
                    tip="Organize skills by relevance",
                    explanation=(
                        "Group your skills by category and prioritize those most relevant "
                        "to your target role."
                    ),
                ),
                Tip(
                    type="good",
                    tip="Skills section present",
                    explanation=(
                        "You have a dedicated skills section, which is important for ATS "
                        "scanning and recruiter review."
                    ),
                ),
            ],
        ),
    )


def parse_feedback_response(response: Any, job_title: str | None = None) -> Feedback:
    """Turn an AI completion response into Feedback, falling back on any defect."""
    try:
        payload = parse_json_object(extract_response_text(response))
    except (AIResponseFormatError, json.JSONDecodeError) as exc:
        logger.warning("feedback_response_unusable: %s", exc)
        return generate_fallback_feedback(job_title)

    if not validate_feedback_structure(payload):
        logger.info("feedback_response_repaired")
    return sanitize_feedback(payload)
