from __future__ import annotations

import logging
import re

from resumefit.core.config.scoring import get_scoring_value, get_weight_table
from resumefit.schemas.resume import CandidateArchetype
from resumefit.schemas.scoring import ComponentWeights, JobRole, SeniorityLevel
from resumefit.scoring.constants import (
    COMPONENT_WEIGHTS_V21,
    ROLE_ADJUSTMENTS_V21,
    WEIGHT_PROFILES_V21,
    WEIGHT_SUM_TOLERANCE,
)
from resumefit.scoring.utils import round2

logger = logging.getLogger(__name__)

# First role with any matching pattern wins.
_ROLE_PATTERNS: tuple[tuple[JobRole, tuple[re.Pattern[str], ...]], ...] = (
    (
        "software_engineer",
        tuple(
            re.compile(p, re.I)
            for p in (r"software\s+engineer", r"developer", r"frontend", r"backend", r"full\s*stack", r"swe\b")
        ),
    ),
    (
        "data_scientist",
        tuple(re.compile(p, re.I) for p in (r"data\s+scientist", r"machine\s+learning", r"ml\s+engineer", r"ai\s+engineer")),
    ),
    (
        "data_analyst",
        tuple(re.compile(p, re.I) for p in (r"data\s+analyst", r"business\s+analyst", r"\banalytics\b", r"bi\s+analyst")),
    ),
    (
        "product_manager",
        tuple(re.compile(p, re.I) for p in (r"product\s+manager", r"program\s+manager", r"project\s+manager", r"\bpm\b")),
    ),
    ("designer", tuple(re.compile(p, re.I) for p in (r"designer", r"\bux\b", r"\bui\b", r"user\s+experience"))),
    ("marketing", tuple(re.compile(p, re.I) for p in (r"marketing", r"growth", r"content\s+(?:manager|strategist)"))),
    ("finance", tuple(re.compile(p, re.I) for p in (r"finance", r"accounting", r"financial\s+analyst"))),
    ("operations", tuple(re.compile(p, re.I) for p in (r"operations", r"supply\s+chain", r"logistics"))),
)

_EXECUTIVE_RE = re.compile(r"\b(?:director|vp|vice\s+president|head\s+of|chief|principal)\b", re.I)
_SENIOR_RE = re.compile(r"\b(?:senior|sr\.?|lead|staff)\b", re.I)
_ENTRY_RE = re.compile(r"\b(?:junior|jr\.?|entry|associate|intern|co-?op)\b", re.I)
_SENIOR_YEARS_RE = re.compile(r"\b(?:7\+?\s*years?|10\+?\s*years?)\b", re.I)
_MID_YEARS_RE = re.compile(r"\b(?:3-?5\s*years?|5\+?\s*years?)\b", re.I)
_ENTRY_YEARS_RE = re.compile(r"\b(?:0-?2\s*years?|1-?3\s*years?|entry\s*level)\b", re.I)

_WEIGHT_KEYS = ("keywords", "qualification_fit", "content_quality", "sections", "format")


def detect_job_role(jd_text: str) -> JobRole:
    for role, patterns in _ROLE_PATTERNS:
        if any(pattern.search(jd_text) for pattern in patterns):
            return role
    return "general"


def detect_seniority(jd_text: str, archetype: CandidateArchetype = "fulltime") -> SeniorityLevel:
    # Co-op and career-changer candidates are scored as mid regardless of the posting.
    if archetype in ("coop", "career_changer"):
        return "mid"
    if _EXECUTIVE_RE.search(jd_text):
        return "executive"
    if _SENIOR_RE.search(jd_text):
        return "senior"
    if _ENTRY_RE.search(jd_text):
        return "entry"
    if _SENIOR_YEARS_RE.search(jd_text):
        return "senior"
    if _MID_YEARS_RE.search(jd_text):
        return "mid"
    if _ENTRY_YEARS_RE.search(jd_text):
        return "entry"
    return "mid"


def _profile_name(archetype: CandidateArchetype, seniority: SeniorityLevel) -> str:
    if seniority in ("senior", "executive"):
        return "senior_executive"
    if archetype == "coop":
        return "coop_entry"
    if archetype == "career_changer":
        return "career_changer"
    if seniority == "entry":
        return "coop_entry"
    return "base"


def select_component_weights(
    role: JobRole, seniority: SeniorityLevel, archetype: CandidateArchetype
) -> tuple[ComponentWeights, str | None]:
    """Pick the weight profile, apply role adjustments, normalize to 2 dp.

    A profile whose adjusted weights drift from 1.0 beyond the configured
    tolerance is still used; the mismatch is logged and returned as a warning.
    """
    profile = _profile_name(archetype, seniority)
    default = COMPONENT_WEIGHTS_V21 if profile == "base" else WEIGHT_PROFILES_V21[profile]
    weights = get_weight_table(f"v21.weights.{profile}", default)
    weights = {key: weights.get(key, default[key]) for key in _WEIGHT_KEYS}

    adjustments = get_scoring_value("v21.role_adjustments", ROLE_ADJUSTMENTS_V21)
    if not isinstance(adjustments, dict):
        adjustments = ROLE_ADJUSTMENTS_V21
    for key, delta in (adjustments.get(role) or {}).items():
        if key in weights:
            weights[key] += float(delta)

    tolerance = float(get_scoring_value("v21.weight_sum_tolerance", WEIGHT_SUM_TOLERANCE))
    total = sum(weights.values())
    warning: str | None = None
    if abs(total - 1.0) > tolerance:
        warning = f"Component weights for profile '{profile}' sum to {total:.3f}, expected 1.0"
        logger.warning("scoring_weight_sum_mismatch profile=%s role=%s total=%.4f", profile, role, total)

    if total <= 0:
        raise RuntimeError(f"Invalid scoring weights for profile '{profile}': sum is {total}")

    normalized = {key: round2(value / total) for key, value in weights.items()}
    return ComponentWeights(**normalized), warning
