from __future__ import annotations

import logging
import time
from typing import Sequence

from resumefit.core.config.scoring import get_scoring_value, get_weight_table
from resumefit.core.errors import InputValidationError
from resumefit.schemas.resume import CandidateArchetype, ParsedResume
from resumefit.schemas.scoring import (
    ActionItem,
    ActionPriority,
    ATSScoreV21,
    ComponentScore,
    JDQualifications,
    KeywordMatchV21,
    ResumeQualifications,
    ScoreBreakdown,
    ScoreBreakdownV21,
    ScoreMetadata,
    ScoreTier,
)
from resumefit.scoring.constants import ALGORITHM_VERSION_V21, MAX_ACTION_ITEMS, TIER_THRESHOLDS
from resumefit.scoring.content_quality import calculate_content_quality, content_quality_action_items
from resumefit.scoring.format_score import calculate_format_score_v21, format_action_items
from resumefit.scoring.keyword_score import calculate_keyword_score_v21, keyword_action_items
from resumefit.scoring.qualification_fit import calculate_qualification_fit, qualification_action_items
from resumefit.scoring.role_detection import detect_job_role, detect_seniority, select_component_weights
from resumefit.scoring.section_score import SectionInputs, calculate_section_score_v21, section_action_items
from resumefit.scoring.utils import clamp_int_score, round2, round_half_up

logger = logging.getLogger(__name__)

_PRIORITY_ORDER: dict[str, int] = {"critical": 0, "high": 1, "moderate": 2, "low": 3}


def get_score_tier(score: float) -> ScoreTier:
    tiers = get_weight_table("v21.tiers", TIER_THRESHOLDS)
    if score >= tiers["excellent"]:
        return "excellent"
    if score >= tiers["strong"]:
        return "strong"
    if score >= tiers["moderate"]:
        return "moderate"
    return "weak"


def _impact(category: str, priority: ActionPriority) -> int:
    if category == "Keywords":
        return {"critical": 15, "high": 10}.get(priority, 5)
    if category == "Qualifications":
        return 8
    if category == "Content":
        return 10 if priority == "high" else 5
    if category == "Sections":
        return 8 if priority == "high" else 4
    return 5 if priority == "high" else 2


def prioritize_action_items(items: Sequence[ActionItem], limit: int | None = None) -> list[ActionItem]:
    """Order by priority, then by descending potential impact; keep the top ``limit``."""
    cap = limit if limit is not None else int(get_scoring_value("v21.max_action_items", MAX_ACTION_ITEMS))
    ordered = sorted(items, key=lambda item: (_PRIORITY_ORDER[item.priority], -item.potential_impact))
    return ordered[:cap]


def _component(score: float, weight: float, details: dict) -> ComponentScore:
    value = clamp_int_score(score)
    return ComponentScore(score=value, weight=weight, weighted=round2(value * weight), details=details)


def calculate_ats_score_v21(
    *,
    keywords: Sequence[KeywordMatchV21],
    jd_qualifications: JDQualifications,
    resume_qualifications: ResumeQualifications,
    resume: ParsedResume,
    jd_text: str,
    archetype: CandidateArchetype = "fulltime",
) -> ATSScoreV21:
    if not jd_text or not jd_text.strip():
        raise InputValidationError(detail="job description is empty")
    if not resume.raw_text or not resume.raw_text.strip():
        raise InputValidationError(detail="resume raw text is missing")

    started = time.perf_counter()

    role = detect_job_role(jd_text)
    seniority = detect_seniority(jd_text, archetype)
    weights, weight_warning = select_component_weights(role, seniority, archetype)

    jd_keywords = [kw.keyword for kw in keywords]
    sections = SectionInputs.from_resume(resume, resume_qualifications.certifications)

    keyword_result = calculate_keyword_score_v21(keywords)
    qualification_result = calculate_qualification_fit(jd_qualifications, resume_qualifications)
    content_result = calculate_content_quality(
        sections.experience,
        jd_keywords,
        "coop" if archetype == "coop" else "fulltime",
    )
    section_result = calculate_section_score_v21(sections, archetype, jd_keywords)
    format_result = calculate_format_score_v21(
        resume.raw_text,
        has_experience=bool(sections.experience),
        has_summary=bool(sections.summary),
    )

    breakdown = ScoreBreakdownV21(
        keywords=_component(keyword_result.score, weights.keywords, keyword_result.model_dump()),
        qualification_fit=_component(
            qualification_result.score, weights.qualification_fit, qualification_result.model_dump()
        ),
        content_quality=_component(content_result.score, weights.content_quality, content_result.model_dump()),
        sections=_component(section_result.score, weights.sections, section_result.model_dump()),
        format=_component(format_result.score, weights.format, format_result.model_dump()),
    )

    overall = clamp_int_score(
        breakdown.keywords.score * weights.keywords
        + breakdown.qualification_fit.score * weights.qualification_fit
        + breakdown.content_quality.score * weights.content_quality
        + breakdown.sections.score * weights.sections
        + breakdown.format.score * weights.format
    )

    raw_items: list[ActionItem] = []
    for priority, message in keyword_action_items(keyword_result):
        raw_items.append(ActionItem(priority=priority, category="Keywords", message=message,
                                    potential_impact=_impact("Keywords", priority)))
    for message in qualification_action_items(qualification_result):
        raw_items.append(ActionItem(priority="high", category="Qualifications", message=message,
                                    potential_impact=_impact("Qualifications", "high")))
    for priority, message in content_quality_action_items(content_result):
        raw_items.append(ActionItem(priority=priority, category="Content", message=message,
                                    potential_impact=_impact("Content", priority)))
    for priority, message in section_action_items(section_result):
        raw_items.append(ActionItem(priority=priority, category="Sections", message=message,
                                    potential_impact=_impact("Sections", priority)))
    for priority, message in format_action_items(format_result):
        raw_items.append(ActionItem(priority=priority, category="Format", message=message,
                                    potential_impact=_impact("Format", priority)))

    processing_ms = round_half_up((time.perf_counter() - started) * 1000)
    logger.info(
        "ats_v21_scored overall=%s role=%s seniority=%s archetype=%s ms=%s",
        overall,
        role,
        seniority,
        archetype,
        processing_ms,
    )

    return ATSScoreV21(
        overall=overall,
        tier=get_score_tier(overall),
        breakdown=ScoreBreakdown(
            keyword_score=breakdown.keywords.score,
            section_coverage_score=breakdown.sections.score,
            content_quality_score=breakdown.content_quality.score,
        ),
        breakdown_v21=breakdown,
        action_items=prioritize_action_items(raw_items),
        metadata=ScoreMetadata(
            algorithm_hash=str(get_scoring_value("v21.algorithm_version", ALGORITHM_VERSION_V21)),
            processing_time_ms=processing_ms,
            detected_role=role,
            detected_seniority=seniority,
            weights_used=weights,
            weight_warning=weight_warning,
        ),
    )
