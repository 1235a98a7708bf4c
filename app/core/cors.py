from __future__ import annotations

from typing import Any

from app.core.config import Settings, settings as default_settings


def cors_options(config: Settings = default_settings) -> dict[str, Any]:
    """Keyword arguments for CORSMiddleware; a wildcard origin never sends credentials."""
    origins = list(config.cors_allowed_origins)
    return {
        "allow_origins": origins,
        "allow_credentials": config.cors_allow_credentials and "*" not in origins,
        "allow_methods": ["GET", "POST", "OPTIONS"],
        "allow_headers": ["Content-Type", "X-API-Key"],
    }
