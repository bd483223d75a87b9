import os
from dataclasses import dataclass

from resumefit.core.config import settings

SUPPORTED_PROVIDERS = ("openai",)


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    temperature: float
    timeout_s: float


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def load_ai_config() -> AIConfig:
    provider = os.getenv("AI_PROVIDER", "openai").strip().lower()
    model = os.getenv("AI_MODEL", "gpt-4o-mini").strip()
    return AIConfig(
        provider=provider,
        model=model,
        temperature=_float_env("AI_TEMPERATURE", 0.2),
        timeout_s=_float_env("AI_CALL_TIMEOUT_S", settings.ai_request_timeout_s),
    )
