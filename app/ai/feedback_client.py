from __future__ import annotations

import logging
import os
import time
from typing import Any, Protocol

from openai import OpenAI

from app.core.config import Settings, settings as default_settings
from app.store.files import FileStore

logger = logging.getLogger(__name__)

_SYSTEM_PROMPT = (
    "You review resumes. Answer with a single JSON object that follows the "
    "format given in the instructions, and nothing else."
)


class AIUnavailableError(RuntimeError):
    def __init__(self, message: str, *, code: str = "ai_unavailable"):
        super().__init__(message)
        self.code = code


class FeedbackAI(Protocol):
    def feedback(self, resource_locator: str, prompt: str) -> dict[str, Any]: ...


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo"}


def ai_enabled(config: Settings = default_settings) -> bool:
    if not config.ai_enabled:
        return False
    api_key = (os.getenv("OPENAI_API_KEY") or "").strip()
    if not api_key or _looks_like_placeholder(api_key):
        return False
    return True


class OpenAIFeedbackClient:
    """Completion collaborator: resume file + prompt in, ``{"message": {"content": text}}`` out."""

    def __init__(self, files: FileStore, config: Settings = default_settings):
        self._files = files
        self._config = config
        self._client: OpenAI | None = None

    def _openai(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(
                api_key=(os.getenv("OPENAI_API_KEY") or "").strip(),
                base_url=(os.getenv("OPENAI_BASE_URL") or None),
                timeout=self._config.ai_timeout_s,
                max_retries=self._config.ai_max_retries,
            )
        return self._client

    def feedback(self, resource_locator: str, prompt: str) -> dict[str, Any]:
        if not ai_enabled(self._config):
            raise AIUnavailableError("AI completion is disabled or OPENAI_API_KEY is not configured.", code="ai_disabled")

        resume_text = self._files.extract_text(resource_locator).strip()
        if not resume_text:
            raise AIUnavailableError(f"No extractable text in '{resource_locator}'.", code="empty_document")
        resume_text = resume_text[: self._config.ai_max_resume_chars]

        started = time.perf_counter()
        try:
            response = self._openai().chat.completions.create(
                model=self._config.ai_model,
                messages=[
                    {"role": "system", "content": _SYSTEM_PROMPT},
                    {"role": "user", "content": f"{prompt}\n\nRESUME:\n{resume_text}"},
                ],
                temperature=0.2,
                response_format={"type": "json_object"},
                max_tokens=self._config.ai_max_output_tokens,
            )
        except Exception as exc:  # noqa: BLE001 - callers fall back on AIUnavailableError
            logger.warning("ai_feedback_failed model=%s prompt_len=%s: %s", self._config.ai_model, len(prompt), exc)
            raise AIUnavailableError(str(exc), code="ai_exception") from exc

        content = response.choices[0].message.content if response.choices else ""
        logger.info(
            "ai_feedback_completed model=%s latency_ms=%s empty=%s",
            self._config.ai_model,
            int((time.perf_counter() - started) * 1000),
            not content,
        )
        if not content:
            raise AIUnavailableError("AI completion returned an empty response.", code="empty_response")
        return {"message": {"content": content}}
