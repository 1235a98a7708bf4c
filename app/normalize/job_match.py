from __future__ import annotations

import logging
import math
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import ValidationError

from app.core.config.scoring import get_scoring_value
from app.schemas.resume import JobMatchScore, JobPosting

from .utils import clamp_score, extract_response_text, is_number, parse_json_object, string_list

logger = logging.getLogger(__name__)

AICall = Callable[[str, str], Any]

_SUBSCORE_KEYS = ("overall", "skillsMatch", "experienceMatch", "keywordMatch")


class InvalidJobMatchError(ValueError):
    pass


def job_matching_prompt(job: JobPosting) -> str:
    return f"""
You are an expert recruiter and ATS specialist. Analyze how well this resume matches the following job posting and provide a detailed compatibility score.

JOB POSTING:
Title: {job.title}
Company: {job.company}
Description: {job.description}
Requirements: {', '.join(job.requirements)}
Required Skills: {', '.join(job.skills)}
Experience Level: {job.experience or 'Not specified'}
Type: {job.type or 'Not specified'}

ANALYSIS REQUIREMENTS:
1. Overall Match Score (0-100): Consider all factors
2. Skills Match Score (0-100): How well skills align
3. Experience Match Score (0-100): Experience level fit
4. Keyword Match Score (0-100): Relevant keywords present
5. Missing Skills: Critical skills the candidate lacks
6. Matching Skills: Skills that align well
7. Recommendations: Specific advice to improve match

Return the analysis in this exact JSON format:
{{
  "overall": number,
  "skillsMatch": number,
  "experienceMatch": number,
  "keywordMatch": number,
  "missingSkills": ["skill1", "skill2"],
  "matchingSkills": ["skill1", "skill2"],
  "recommendations": ["recommendation1", "recommendation2"]
}}

Be thorough but realistic in your scoring. Consider:
- Technical skills alignment
- Years of experience
- Industry relevance
- Educational background
- Project experience
- Soft skills mentioned
- Keywords from job description

Return only the JSON object, no additional text.
"""


def _require_numeric_subscores(payload: Mapping[str, Any], allow_zero: bool) -> None:
    for key in _SUBSCORE_KEYS:
        value = payload.get(key)
        if value is None or (not allow_zero and not value):
            raise InvalidJobMatchError(f"missing or empty '{key}'")
        if not is_number(value) or math.isnan(value):
            raise InvalidJobMatchError(f"'{key}' is not a number")


def _clamped_score(payload: Mapping[str, Any]) -> JobMatchScore:
    try:
        return JobMatchScore(
            overall=clamp_score(payload["overall"]),
            skills_match=clamp_score(payload["skillsMatch"]),
            experience_match=clamp_score(payload["experienceMatch"]),
            keyword_match=clamp_score(payload["keywordMatch"]),
            missing_skills=string_list(payload.get("missingSkills")),
            matching_skills=string_list(payload.get("matchingSkills")),
            recommendations=string_list(payload.get("recommendations")),
        )
    except ValidationError as exc:
        raise InvalidJobMatchError(str(exc)) from exc


def coerce_job_match_score(payload: dict[str, Any]) -> JobMatchScore:
    """Build a JobMatchScore from a parsed AI payload or raise InvalidJobMatchError."""
    _require_numeric_subscores(payload, allow_zero=False)
    return _clamped_score(payload)


def repair_stored_job_match_score(payload: Any) -> JobMatchScore:
    """Clamp a previously stored score; only missing or non-numeric subscores are fatal."""
    if not isinstance(payload, Mapping):
        raise InvalidJobMatchError("stored score is not an object")
    _require_numeric_subscores(payload, allow_zero=True)
    return _clamped_score(payload)


def analyze_job_match(resume_locator: str, job: JobPosting, ai_call: AICall) -> JobMatchScore:
    """Score a resume against a posting; never raises, falls back instead."""
    try:
        response = ai_call(resume_locator, job_matching_prompt(job))
        payload = parse_json_object(extract_response_text(response))
        return coerce_job_match_score(payload)
    except Exception as exc:  # noqa: BLE001 - deterministic fallback is expected
        logger.warning("job_match_analysis_failed job_id=%s: %s", job.id, exc)
        return generate_fallback_job_match(job)


def generate_fallback_job_match(job: JobPosting) -> JobMatchScore:
    first_skill = job.skills[0] if job.skills else "key technologies"
    first_requirement = job.requirements[0] if job.requirements else "relevant work"

    return JobMatchScore(
        overall=65,
        skills_match=60,
        experience_match=70,
        keyword_match=65,
        missing_skills=job.skills[0:3],
        matching_skills=job.skills[3:6],
        recommendations=[
            f"Highlight experience with {first_skill} more prominently",
            f"Add specific examples of {first_requirement} in your experience section",
            "Include keywords from the job description in your resume",
            "Consider adding a summary section that directly addresses the role requirements",
        ],
    )


def get_job_match_color(score: float) -> str:
    if score >= get_scoring_value("job_match.excellent_min", 80):
        return "text-green-600 bg-green-50 border-green-200"
    if score >= get_scoring_value("job_match.good_min", 60):
        return "text-yellow-600 bg-yellow-50 border-yellow-200"
    return "text-red-600 bg-red-50 border-red-200"


def get_job_match_label(score: float) -> str:
    if score >= get_scoring_value("job_match.excellent_min", 80):
        return "Excellent Match"
    if score >= get_scoring_value("job_match.good_min", 60):
        return "Good Match"
    if score >= get_scoring_value("job_match.fair_min", 40):
        return "Fair Match"
    return "Poor Match"
