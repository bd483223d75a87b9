import logging
from functools import lru_cache

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field

from resumefit.ai.factory import get_text_generator
from resumefit.ai.types import TextGenerator
from resumefit.core.config import settings
from resumefit.core.rate_limit import rate_limit
from resumefit.features.section_ordering import detect_section_order, validate_section_order
from resumefit.features.structural_rules import generate_structural_suggestions
from resumefit.schemas.resume import CandidateArchetype, ParsedResume
from resumefit.schemas.scoring import (
    ATSScore,
    ATSScoreV21,
    JDQualifications,
    KeywordAnalysis,
    KeywordMatchV21,
    ResumeQualifications,
)
from resumefit.schemas.suggestions import (
    MergeResult,
    SectionOrderValidation,
    StructuralSuggestion,
    Suggestion,
)
from resumefit.scoring.ats_score_v21 import calculate_ats_score_v21
from resumefit.scoring.composite import score_resume
from resumefit.services.analysis_service import AnalysisRequest, AnalysisResult, analyze
from resumefit.services.merge_service import merge_accepted_suggestions
from resumefit.services.text_diff import DiffChunk, DiffStats, count_changes, diff_texts

logger = logging.getLogger(__name__)

router = APIRouter()


class ScoreRequest(BaseModel):
    keyword_analysis: KeywordAnalysis
    resume: ParsedResume
    jd_text: str


class ScoreV21Request(BaseModel):
    keywords: list[KeywordMatchV21] = Field(default_factory=list)
    jd_qualifications: JDQualifications = Field(default_factory=JDQualifications)
    resume_qualifications: ResumeQualifications = Field(default_factory=ResumeQualifications)
    resume: ParsedResume
    jd_text: str
    archetype: CandidateArchetype = "fulltime"


class StructuralRequest(BaseModel):
    archetype: CandidateArchetype
    resume: ParsedResume
    section_order: list[str] | None = None
    raw_text: str | None = None


class StructuralResponse(BaseModel):
    suggestions: list[StructuralSuggestion]
    section_order: SectionOrderValidation


class MergeRequest(BaseModel):
    resume: ParsedResume
    suggestions: list[Suggestion] = Field(default_factory=list)


class DiffRequest(BaseModel):
    original: str = ""
    suggested: str = ""


class DiffResponse(BaseModel):
    chunks: list[DiffChunk]
    stats: DiffStats


@lru_cache(maxsize=1)
def _shared_generator() -> TextGenerator:
    return get_text_generator()


def get_optional_generator() -> TextGenerator | None:
    """Return the shared generator; without credentials scoring runs degraded."""
    try:
        return _shared_generator()
    except (RuntimeError, ValueError) as exc:
        logger.warning("text_generator_unavailable error=%s", exc)
        return None


@router.post("/analysis", response_model=AnalysisResult)
@rate_limit(settings.ai_rate_limit)
async def run_analysis(
    request: Request,
    payload: AnalysisRequest,
    generator: TextGenerator | None = Depends(get_optional_generator),
):
    _ = request
    return await analyze(payload, generator)


@router.post("/analysis/score", response_model=ATSScore)
@rate_limit(settings.ai_rate_limit)
async def score(
    request: Request,
    payload: ScoreRequest,
    generator: TextGenerator | None = Depends(get_optional_generator),
):
    _ = request
    return await score_resume(payload.keyword_analysis, payload.resume, payload.jd_text, generator)


@router.post("/analysis/score-v21", response_model=ATSScoreV21)
@rate_limit()
async def score_v21(request: Request, payload: ScoreV21Request):
    _ = request
    return calculate_ats_score_v21(
        keywords=payload.keywords,
        jd_qualifications=payload.jd_qualifications,
        resume_qualifications=payload.resume_qualifications,
        resume=payload.resume,
        jd_text=payload.jd_text,
        archetype=payload.archetype,
    )


@router.post("/analysis/structural-suggestions", response_model=StructuralResponse)
@rate_limit()
async def structural_suggestions(request: Request, payload: StructuralRequest):
    _ = request
    raw_text = payload.raw_text if payload.raw_text is not None else payload.resume.raw_text
    order = payload.section_order
    if order is None:
        order = detect_section_order(raw_text, payload.resume.present_sections())
    return StructuralResponse(
        suggestions=generate_structural_suggestions(payload.archetype, payload.resume, order, raw_text),
        section_order=validate_section_order(order, payload.archetype),
    )


@router.post("/analysis/merge", response_model=MergeResult)
@rate_limit()
async def merge(request: Request, payload: MergeRequest):
    _ = request
    return merge_accepted_suggestions(payload.resume, payload.suggestions)


@router.post("/analysis/diff", response_model=DiffResponse)
@rate_limit()
async def diff(request: Request, payload: DiffRequest):
    _ = request
    chunks = diff_texts(payload.original, payload.suggested)
    return DiffResponse(chunks=chunks, stats=count_changes(chunks))
