from __future__ import annotations

import os
from typing import Optional, Sequence

from openai import AsyncOpenAI

from resumefit.ai.types import ChatMessage
from resumefit.core.config import settings


class OpenAIProvider:
    # Retries belong to resumefit.ai.resilience, so the SDK's own are off.
    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: float | None = None,
        temperature: float = 0.2,
    ):
        self._model = model
        self._temperature = temperature
        key = (api_key or os.getenv("OPENAI_API_KEY") or "").strip()
        if not key:
            raise RuntimeError("OPENAI_API_KEY is missing")

        self._client = AsyncOpenAI(
            api_key=key,
            base_url=(base_url or os.getenv("OPENAI_BASE_URL") or None),
            timeout=float(timeout_s if timeout_s is not None else settings.ai_request_timeout_s),
            max_retries=0,
        )

    async def generate(
        self, messages: Sequence[ChatMessage], *, json_mode: bool = False
    ) -> str:
        payload = [{"role": m.role, "content": m.content} for m in messages]

        create_kwargs = {
            "model": self._model,
            "messages": payload,
            "temperature": self._temperature,
        }
        if json_mode:
            create_kwargs["response_format"] = {"type": "json_object"}

        response = await self._client.chat.completions.create(**create_kwargs)
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
