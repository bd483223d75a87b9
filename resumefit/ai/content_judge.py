from __future__ import annotations

import asyncio
import logging
from typing import Any

from resumefit.ai.pii import redact_pii
from resumefit.ai.resilience import SleepFn, create_ai_error, with_retry
from resumefit.ai.suggestion_output import load_json_object
from resumefit.ai.types import ChatMessage, TextGenerator
from resumefit.core.config import settings
from resumefit.core.errors import EngineError, OutputParseError
from resumefit.schemas.resume import ParsedResume
from resumefit.scoring.utils import round_half_up

logger = logging.getLogger(__name__)

JUDGED_SECTIONS = ("summary", "skills", "experience")
_DIMENSIONS = ("relevance", "clarity", "impact")

_SYSTEM_PROMPT = "You are a resume quality evaluator. Return only JSON."

_USER_PROMPT = """Rate this resume section's quality.

<resume_section type="{section}">
{content}
</resume_section>

<job_description>
{jd}
</job_description>

Rate this section 0-100 on:
- Relevance: How well does it match the job requirements?
- Clarity: Is it clear, concise, and professional?
- Impact: Does it demonstrate value and achievements?

Return ONLY a JSON object with three numeric scores:
{{"relevance": 85, "clarity": 90, "impact": 75}}"""


def parse_quality_scores(content: str) -> int:
    """Average of relevance/clarity/impact; each must be a number in 0-100."""
    payload: dict[str, Any] = load_json_object(content)
    values: list[float] = []
    for key in _DIMENSIONS:
        value = payload.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise OutputParseError(detail=f"quality score '{key}' is not numeric")
        if value < 0 or value > 100:
            raise OutputParseError(detail=f"quality score '{key}' out of range")
        values.append(float(value))
    return round_half_up(sum(values) / len(values))


async def _judge_section(
    generator: TextGenerator,
    section: str,
    content: str,
    jd_text: str,
    *,
    timeout_s: float,
    sleep: SleepFn,
) -> int:
    messages = [
        ChatMessage(role="system", content=_SYSTEM_PROMPT),
        ChatMessage(role="user", content=_USER_PROMPT.format(section=section, content=content, jd=jd_text)),
    ]

    async def _call() -> int:
        raw = await generator.generate(messages, json_mode=True)
        return parse_quality_scores(raw)

    try:
        return await asyncio.wait_for(
            with_retry(_call, f"content_quality:{section}", sleep=sleep),
            timeout=timeout_s,
        )
    except asyncio.TimeoutError as exc:
        raise create_ai_error("timeout", exc) from exc


async def judge_content_quality(
    resume: ParsedResume,
    jd_text: str,
    generator: TextGenerator,
    *,
    timeout_s: float | None = None,
    sleep: SleepFn = asyncio.sleep,
) -> int:
    """Judge summary/skills/experience concurrently and average the section scores.

    Sections that score 0 are left out of the average. Returns 0 when there is
    nothing to judge; raises the first section error when every section failed.
    """
    per_section_timeout = settings.content_quality_timeout_s if timeout_s is None else timeout_s
    redact = settings.pii_redaction_enabled

    sections: list[tuple[str, str]] = []
    for name in JUDGED_SECTIONS:
        text = resume.section_text(name)
        if text is None:
            continue
        sections.append((name, redact_pii(text).redacted_text if redact else text))

    if not sections:
        return 0

    jd_for_prompt = redact_pii(jd_text).redacted_text if redact else jd_text
    logger.info("content_quality_started sections=%s", ",".join(name for name, _ in sections))

    results = await asyncio.gather(
        *(
            _judge_section(
                generator,
                name,
                text,
                jd_for_prompt,
                timeout_s=per_section_timeout,
                sleep=sleep,
            )
            for name, text in sections
        ),
        return_exceptions=True,
    )

    scores: list[int] = []
    errors: list[EngineError] = []
    for (name, _), result in zip(sections, results):
        if isinstance(result, EngineError):
            logger.warning("content_quality_section_failed section=%s code=%s", name, result.code)
            errors.append(result)
            continue
        if isinstance(result, BaseException):
            raise result
        if result > 0:
            scores.append(result)

    if not scores and errors:
        raise errors[0]
    if not scores:
        return 0

    overall = round_half_up(sum(scores) / len(scores))
    logger.info("content_quality_scored sections=%s score=%s", len(scores), overall)
    return overall
