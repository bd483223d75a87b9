from resumefit.ai.config import SUPPORTED_PROVIDERS, load_ai_config
from resumefit.ai.types import TextGenerator

from resumefit.ai.providers.openai_provider import OpenAIProvider


def get_text_generator() -> TextGenerator:
    cfg = load_ai_config()

    if cfg.provider == "openai":
        return OpenAIProvider(model=cfg.model, timeout_s=cfg.timeout_s, temperature=cfg.temperature)

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}' (supported: {', '.join(SUPPORTED_PROVIDERS)})")
