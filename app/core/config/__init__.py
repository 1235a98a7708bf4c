from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    api_key: str | None
    rate_limit: str
    rate_limit_enabled: bool
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    cors_allow_credentials: bool
    store_db_path: str
    files_root: str
    max_upload_bytes: int
    ai_enabled: bool
    ai_model: str
    ai_timeout_s: float
    ai_max_retries: int
    ai_max_output_tokens: int
    ai_max_resume_chars: int


def load_settings() -> Settings:
    return Settings(
        api_key=_get_env("API_KEY"),
        rate_limit=_get_env("RATE_LIMIT", "60/minute") or "60/minute",
        rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
        log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
        sentry_dsn=_get_env("SENTRY_DSN"),
        cors_allowed_origins=_get_env_list(
            "CORS_ALLOWED_ORIGINS",
            [
                "http://localhost:5173",
                "http://127.0.0.1:5173",
                "http://localhost:3000",
            ],
        ),
        cors_allow_credentials=_get_env_bool("CORS_ALLOW_CREDENTIALS", False),
        store_db_path=_get_env("STORE_DB_PATH", "data/store.db") or "data/store.db",
        files_root=_get_env("FILES_ROOT", "data/files") or "data/files",
        max_upload_bytes=_get_env_int("MAX_UPLOAD_BYTES", 10 * 1024 * 1024),
        ai_enabled=_get_env_bool("AI_ENABLED", True),
        ai_model=(_get_env("AI_MODEL") or _get_env("OPENAI_MODEL") or "gpt-4o-mini").strip(),
        ai_timeout_s=_get_env_float("AI_TIMEOUT_S", 30.0),
        ai_max_retries=_get_env_int("OPENAI_MAX_RETRIES", 2),
        ai_max_output_tokens=_get_env_int("AI_MAX_OUTPUT_TOKENS", 1800),
        ai_max_resume_chars=_get_env_int("AI_MAX_RESUME_CHARS", 24000),
    )


settings = load_settings()

__all__ = ["Settings", "load_settings", "settings"]
