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


@dataclass(frozen=True)
class Settings:
    log_level: str
    sentry_dsn: str | None
    rate_limit: str
    rate_limit_enabled: bool
    ai_rate_limit: str
    ai_max_retries: int
    ai_network_retry_count: int
    ai_backoff_base_ms: int
    ai_request_timeout_s: float
    content_quality_timeout_s: float
    pii_redaction_enabled: bool


settings = Settings(
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    rate_limit=_get_env("RATE_LIMIT", "30/minute") or "30/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    ai_rate_limit=_get_env("AI_RATE_LIMIT", "10/minute") or "10/minute",
    ai_max_retries=_get_env_int("AI_MAX_RETRIES", 3),
    ai_network_retry_count=_get_env_int("AI_NETWORK_RETRY_COUNT", 1),
    ai_backoff_base_ms=_get_env_int("AI_BACKOFF_BASE_MS", 1000),
    ai_request_timeout_s=_get_env_float("AI_REQUEST_TIMEOUT_S", 60.0),
    content_quality_timeout_s=_get_env_float("CONTENT_QUALITY_TIMEOUT_S", 15.0),
    pii_redaction_enabled=_get_env_bool("PII_REDACTION_ENABLED", True),
)

if settings.ai_max_retries < 0 or settings.ai_network_retry_count < 0:
    raise RuntimeError("AI_MAX_RETRIES and AI_NETWORK_RETRY_COUNT must be non-negative.")

__all__ = ["Settings", "settings"]
