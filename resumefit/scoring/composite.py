from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from resumefit.ai.content_judge import judge_content_quality
from resumefit.ai.resilience import SleepFn
from resumefit.ai.types import TextGenerator
from resumefit.core.config import settings
from resumefit.core.config.scoring import get_weight_table
from resumefit.core.errors import AIInvocationError, InputValidationError, OutputParseError
from resumefit.schemas.resume import ParsedResume
from resumefit.schemas.scoring import ATSScore, KeywordAnalysis, ScoreBreakdown
from resumefit.scoring.constants import V1_DEGRADED_WEIGHTS, V1_WEIGHTS
from resumefit.scoring.section_score import calculate_section_coverage
from resumefit.scoring.utils import clamp_int_score, clamp_score, round_half_up

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QualityJudgment:
    """Either a content-quality value or the reason it is unavailable."""

    value: float | None = None
    degraded_reason: str | None = None

    @classmethod
    def ok(cls, value: float) -> "QualityJudgment":
        return cls(value=value)

    @classmethod
    def degraded(cls, reason: str) -> "QualityJudgment":
        return cls(degraded_reason=reason or "content quality unavailable")

    @property
    def is_degraded(self) -> bool:
        return self.degraded_reason is not None or self.value is None


def validate_score_inputs(
    keyword_analysis: KeywordAnalysis | None, resume: ParsedResume | None, jd_text: str | None
) -> None:
    if keyword_analysis is None:
        raise InputValidationError(detail="keyword analysis is missing")
    if not jd_text or not jd_text.strip():
        raise InputValidationError(detail="job description is empty")
    if resume is None or not resume.raw_text or not resume.raw_text.strip():
        raise InputValidationError(detail="resume raw text is missing")


def calculate_ats_score(
    keyword_analysis: KeywordAnalysis | None,
    resume: ParsedResume | None,
    jd_text: str | None,
    quality: QualityJudgment,
) -> ATSScore:
    """V1 composite score.

    Every sub-score is clamped to [0, 100] before it is weighted. When the
    quality judgment is degraded the content term drops out and the degraded
    weights apply; the overall is rounded once, at the end.
    """
    validate_score_inputs(keyword_analysis, resume, jd_text)

    keyword = clamp_score(keyword_analysis.match_rate)
    section = clamp_score(calculate_section_coverage(resume))

    if quality.is_degraded:
        weights = get_weight_table("v1.degraded_weights", V1_DEGRADED_WEIGHTS)
        content = 0.0
        raw = keyword * weights["keyword"] + section * weights["section_coverage"]
    else:
        weights = get_weight_table("v1.weights", V1_WEIGHTS)
        content = clamp_score(quality.value)
        raw = (
            keyword * weights["keyword"]
            + section * weights["section_coverage"]
            + content * weights["content_quality"]
        )

    overall = clamp_int_score(raw)
    if quality.is_degraded:
        logger.info("ats_score_degraded reason=%s overall=%s", quality.degraded_reason, overall)

    return ATSScore(
        overall=overall,
        breakdown=ScoreBreakdown(
            keyword_score=round_half_up(keyword),
            section_coverage_score=round_half_up(section),
            content_quality_score=round_half_up(content),
        ),
        degraded=quality.is_degraded,
        degraded_reason=quality.degraded_reason if quality.is_degraded else None,
    )


async def judge_quality(
    resume: ParsedResume,
    jd_text: str,
    generator: TextGenerator | None,
    *,
    timeout_s: float | None = None,
    sleep: SleepFn = asyncio.sleep,
) -> QualityJudgment:
    """Run the content judge and fold every failure into a degraded judgment."""
    if generator is None:
        return QualityJudgment.degraded("content quality judge not configured")

    deadline = settings.content_quality_timeout_s if timeout_s is None else timeout_s
    try:
        value = await asyncio.wait_for(
            judge_content_quality(resume, jd_text, generator, timeout_s=deadline, sleep=sleep),
            timeout=deadline,
        )
    except asyncio.TimeoutError:
        logger.warning("content_quality_timeout timeout_s=%s", deadline)
        return QualityJudgment.degraded("content quality timed out")
    except AIInvocationError as exc:
        logger.warning("content_quality_failed type=%s", exc.type)
        return QualityJudgment.degraded(f"content quality unavailable ({exc.type})")
    except OutputParseError as exc:
        logger.warning("content_quality_unparseable detail=%s", exc.detail)
        return QualityJudgment.degraded("content quality response was invalid")
    return QualityJudgment.ok(value)


async def score_resume(
    keyword_analysis: KeywordAnalysis | None,
    resume: ParsedResume | None,
    jd_text: str | None,
    generator: TextGenerator | None = None,
    *,
    timeout_s: float | None = None,
    sleep: SleepFn = asyncio.sleep,
) -> ATSScore:
    validate_score_inputs(keyword_analysis, resume, jd_text)
    quality = await judge_quality(resume, jd_text, generator, timeout_s=timeout_s, sleep=sleep)
    return calculate_ats_score(keyword_analysis, resume, jd_text, quality)
