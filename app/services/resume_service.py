from __future__ import annotations

import asyncio
import json
import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from app.ai.feedback_client import FeedbackAI
from app.ai.prompts import prepare_instructions
from app.analytics.calculator import (
    as_utc,
    calculate_resume_analytics,
    default_resume_analytics,
    summarize_job_stats,
    utc_now,
)
from app.analytics.comparison import generate_comparison_insights
from app.data.jobs import get_job
from app.normalize.feedback import generate_fallback_feedback, parse_feedback_response, sanitize_feedback
from app.normalize.job_match import analyze_job_match, repair_stored_job_match_score
from app.schemas.resume import (
    ComparisonData,
    Feedback,
    JobMatch,
    JobPosting,
    JobStats,
    Resume,
    ResumeAnalytics,
)
from app.store.files import FileStore
from app.store.kv import RESUME_PREFIX, KeyValueStore, job_match_key, job_match_prefix, resume_key

logger = logging.getLogger(__name__)


class ResumeServiceError(RuntimeError):
    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class ResumeNotFoundError(ResumeServiceError):
    def __init__(self, resume_id: str):
        super().__init__(f"Resume '{resume_id}' not found.", status_code=404)


class JobNotFoundError(ResumeServiceError):
    def __init__(self, job_id: str):
        super().__init__(f"Job posting '{job_id}' not found.", status_code=404)


class InvalidUploadError(ResumeServiceError):
    pass


def _upload_order(resume: Resume) -> tuple[int, datetime]:
    if resume.uploaded_at is None:
        return (0, datetime.min.replace(tzinfo=timezone.utc))
    return (1, as_utc(resume.uploaded_at))


def parse_resume_record(raw: str) -> Resume | None:
    """Decode a stored resume, repairing its embedded AI feedback."""
    try:
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError("resume record is not an object")
        if data.get("feedback") is not None:
            data = {**data, "feedback": sanitize_feedback(data["feedback"])}
        return Resume.model_validate(data)
    except (ValueError, ValidationError) as exc:
        logger.warning("resume_record_unparsable: %s", exc)
        return None


def parse_job_match_record(raw: str) -> JobMatch | None:
    """Decode a stored job match, clamping the AI score it was saved with."""
    try:
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError("job match record is not an object")
        data = {**data, "score": repair_stored_job_match_score(data.get("score"))}
        return JobMatch.model_validate(data)
    except (ValueError, ValidationError) as exc:
        logger.warning("job_match_record_unparsable: %s", exc)
        return None


class ResumeService:
    """Fetch-and-reduce orchestration over injected store, file and AI collaborators."""

    def __init__(
        self,
        store: KeyValueStore,
        files: FileStore,
        ai: FeedbackAI,
        job_lookup: Callable[[str], JobPosting | None] = get_job,
    ):
        self._store = store
        self._files = files
        self._ai = ai
        self._job_lookup = job_lookup

    def _save(self, key: str, record: Any) -> None:
        self._store.set(key, json.dumps(record.to_json_dict(), ensure_ascii=False))

    def request_feedback(self, locator: str, job_title: str | None, job_description: str | None) -> Feedback:
        try:
            response = self._ai.feedback(locator, prepare_instructions(job_title, job_description))
        except Exception as exc:  # noqa: BLE001 - deterministic fallback is expected
            logger.warning("resume_feedback_failed locator=%s: %s", locator, exc)
            return generate_fallback_feedback(job_title)
        return parse_feedback_response(response, job_title)

    def upload_resume(
        self,
        *,
        filename: str,
        content: bytes,
        company_name: str | None = None,
        job_title: str | None = None,
        job_description: str | None = None,
    ) -> Resume:
        if not content:
            raise InvalidUploadError("Uploaded file is empty.")
        try:
            locator = self._files.write(filename, content)
        except ValueError as exc:
            raise InvalidUploadError(str(exc)) from exc

        resume = Resume(
            id=str(uuid.uuid4()),
            company_name=company_name or None,
            job_title=job_title or None,
            job_description=job_description or None,
            image_path="",
            resume_path=locator,
            feedback=self.request_feedback(locator, job_title, job_description),
            uploaded_at=utc_now(),
        )
        self._save(resume_key(resume.id), resume)
        logger.info("resume_uploaded resume_id=%s", resume.id)
        return resume

    def regenerate_feedback(self, resume_id: str) -> Resume:
        resume = self.get_resume(resume_id)
        feedback = self.request_feedback(resume.resume_path, resume.job_title, resume.job_description)
        updated = resume.model_copy(update={"feedback": feedback})
        self._save(resume_key(resume_id), updated)
        return updated

    def load_resumes(self) -> list[Resume]:
        """All parsable resumes, oldest upload first."""
        items = self._store.list(f"{RESUME_PREFIX}*", True)
        resumes = [r for r in (parse_resume_record(item.value) for item in items) if r is not None]
        return sorted(resumes, key=_upload_order)

    def get_resume(self, resume_id: str) -> Resume:
        raw = self._store.get(resume_key(resume_id))
        resume = parse_resume_record(raw) if raw is not None else None
        if resume is None:
            raise ResumeNotFoundError(resume_id)
        return resume

    def read_resume_file(self, resume_id: str) -> tuple[Resume, bytes]:
        resume = self.get_resume(resume_id)
        try:
            return resume, self._files.read(resume.resume_path)
        except (FileNotFoundError, ValueError) as exc:
            raise ResumeServiceError(str(exc), status_code=404) from exc

    def delete_resume(self, resume_id: str) -> None:
        """Remove a resume, its stored file and every job match recorded for it."""
        resume = self.get_resume(resume_id)
        for key in self._store.list(f"{job_match_prefix(resume_id)}*"):
            self._store.delete(key)
        self._store.delete(resume_key(resume_id))
        if resume.resume_path:
            try:
                self._files.delete(resume.resume_path)
            except ValueError as exc:
                logger.warning("resume_file_delete_skipped resume_id=%s: %s", resume_id, exc)
        logger.info("resume_deleted resume_id=%s", resume_id)

    def _job(self, job_id: str) -> JobPosting:
        job = self._job_lookup(job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        return job

    def analyze_job(self, resume_id: str, job_id: str) -> JobMatch:
        resume = self.get_resume(resume_id)
        job = self._job(job_id)

        match = JobMatch(
            job_id=job.id,
            resume_id=resume.id,
            score=analyze_job_match(resume.resume_path, job, self._ai.feedback),
            analyzed_at=utc_now(),
        )
        self._save(job_match_key(resume.id, job.id), match)
        logger.info("job_match_stored resume_id=%s job_id=%s overall=%s", resume.id, job.id, match.score.overall)
        return match

    def load_job_matches(self, resume_id: str) -> list[JobMatch]:
        items = self._store.list(f"{job_match_prefix(resume_id)}*", True)
        return [m for m in (parse_job_match_record(item.value) for item in items) if m is not None]

    def resume_analytics(self, resume: Resume, now: datetime | None = None) -> ResumeAnalytics:
        return calculate_resume_analytics(resume, self.load_job_matches(resume.id), now=now)

    def _resume_analytics_or_default(self, resume: Resume, now: datetime | None) -> ResumeAnalytics:
        try:
            return self.resume_analytics(resume, now=now)
        except Exception as exc:  # noqa: BLE001 - one broken resume must not fail the page
            logger.warning("resume_analytics_failed resume_id=%s: %s", resume.id, exc)
            return default_resume_analytics(resume, now=now)

    async def load_comparison(self, now: datetime | None = None) -> ComparisonData:
        resumes = await asyncio.to_thread(self.load_resumes)
        if not resumes:
            return ComparisonData()

        analytics = await asyncio.gather(
            *(asyncio.to_thread(self._resume_analytics_or_default, resume, now) for resume in resumes)
        )
        return ComparisonData(
            resumes=resumes,
            analytics=list(analytics),
            insights=generate_comparison_insights(resumes, analytics),
        )

    def load_job_stats(self, now: datetime | None = None) -> JobStats:
        matches: list[JobMatch] = []
        for resume in self.load_resumes():
            matches.extend(self.load_job_matches(resume.id))
        return summarize_job_stats(matches, now=now)
