from __future__ import annotations

import asyncio
import logging

from pydantic import BaseModel, Field

from resumefit.ai.resilience import SleepFn, create_ai_error
from resumefit.ai.types import TextGenerator
from resumefit.core.config import settings
from resumefit.features.section_ordering import detect_section_order, validate_section_order
from resumefit.features.structural_rules import generate_structural_suggestions
from resumefit.schemas.resume import CandidateArchetype, ParsedResume
from resumefit.schemas.scoring import ATSScore, KeywordAnalysis
from resumefit.schemas.suggestions import SectionOrderValidation, StructuralSuggestion
from resumefit.scoring.composite import score_resume, validate_score_inputs

logger = logging.getLogger(__name__)


class AnalysisRequest(BaseModel):
    keyword_analysis: KeywordAnalysis
    resume: ParsedResume
    jd_text: str
    archetype: CandidateArchetype = "fulltime"
    section_order: list[str] | None = None


class AnalysisResult(BaseModel):
    score: ATSScore
    structural_suggestions: list[StructuralSuggestion] = Field(default_factory=list)
    section_order: SectionOrderValidation


async def _structure(
    request: AnalysisRequest, order: list[str]
) -> tuple[list[StructuralSuggestion], SectionOrderValidation]:
    suggestions = generate_structural_suggestions(
        request.archetype,
        request.resume,
        order,
        request.resume.raw_text,
    )
    return suggestions, validate_section_order(order, request.archetype)


async def analyze(
    request: AnalysisRequest,
    generator: TextGenerator | None = None,
    *,
    timeout_s: float | None = None,
    sleep: SleepFn = asyncio.sleep,
) -> AnalysisResult:
    """Score the résumé and evaluate its structure concurrently.

    Without an explicit ``section_order`` the order is read from section
    headings in ``raw_text``; if none are found the order rules stay silent.
    The whole call is bounded by ``ai_request_timeout_s``; on expiry the
    pending retry sleep is cancelled.
    """
    validate_score_inputs(request.keyword_analysis, request.resume, request.jd_text)
    order = request.section_order
    if order is None:
        order = detect_section_order(request.resume.raw_text, request.resume.present_sections())
    deadline = settings.ai_request_timeout_s if timeout_s is None else timeout_s

    try:
        score, (suggestions, ordering) = await asyncio.wait_for(
            asyncio.gather(
                score_resume(request.keyword_analysis, request.resume, request.jd_text, generator, sleep=sleep),
                _structure(request, order),
            ),
            timeout=deadline,
        )
    except asyncio.TimeoutError as exc:
        logger.warning("analysis_timeout timeout_s=%s", deadline)
        raise create_ai_error("timeout", exc) from exc

    logger.info(
        "analysis_completed overall=%s degraded=%s structural=%s archetype=%s",
        score.overall,
        score.degraded,
        len(suggestions),
        request.archetype,
    )
    return AnalysisResult(score=score, structural_suggestions=suggestions, section_order=ordering)
