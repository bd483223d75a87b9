from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

Importance = Literal["high", "medium", "low"]
MatchType = Literal["exact", "fuzzy", "semantic"]
KeywordRequirement = Literal["required", "preferred"]
PlacementLocation = Literal[
    "skills_section",
    "summary",
    "experience_bullet",
    "experience_paragraph",
    "education",
    "projects",
    "other",
]
DegreeLevel = Literal["high_school", "associate", "bachelor", "master", "phd"]
ScoreTier = Literal["excellent", "strong", "moderate", "weak"]
ActionPriority = Literal["critical", "high", "moderate", "low"]
JobRole = Literal[
    "software_engineer",
    "data_scientist",
    "data_analyst",
    "product_manager",
    "designer",
    "marketing",
    "finance",
    "operations",
    "general",
]
SeniorityLevel = Literal["entry", "mid", "senior", "executive"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MatchedKeyword(BaseModel):
    keyword: str
    category: str = "technical"
    found: bool = True
    match_type: MatchType | None = "exact"
    placement: PlacementLocation | None = None
    context: str | None = None


class MissingKeyword(BaseModel):
    keyword: str
    category: str = "technical"
    importance: Importance = "medium"


class KeywordAnalysis(BaseModel):
    match_rate: float
    matched: list[MatchedKeyword] = Field(default_factory=list)
    missing: list[MissingKeyword] = Field(default_factory=list)

    def keyword_strings(self) -> list[str]:
        return [item.keyword for item in self.matched] + [item.keyword for item in self.missing]


class ScoreBreakdown(BaseModel):
    keyword_score: int
    section_coverage_score: int
    content_quality_score: int


class ATSScore(BaseModel):
    overall: int
    breakdown: ScoreBreakdown
    degraded: bool = False
    degraded_reason: str | None = None
    calculated_at: datetime = Field(default_factory=_utcnow)


# ---------------------------------------------------------------------------
# V2.1 inputs
# ---------------------------------------------------------------------------


class KeywordMatchV21(BaseModel):
    keyword: str
    category: str = "technical"
    importance: Importance = "medium"
    requirement: KeywordRequirement = "preferred"
    found: bool = False
    match_type: MatchType | None = None
    placement: PlacementLocation | None = None
    context: str | None = None


class DegreeRequirement(BaseModel):
    level: DegreeLevel
    fields: list[str] = Field(default_factory=list)
    required: bool = True


class ExperienceRequirement(BaseModel):
    min_years: float
    max_years: float | None = None
    required: bool = True


class CertificationRequirement(BaseModel):
    certifications: list[str] = Field(default_factory=list)
    required: bool = True


class JDQualifications(BaseModel):
    degree_required: DegreeRequirement | None = None
    experience_required: ExperienceRequirement | None = None
    certifications_required: CertificationRequirement | None = None


class ResumeDegree(BaseModel):
    level: DegreeLevel
    field: str = ""
    institution: str | None = None
    gpa: float | None = None


class ResumeQualifications(BaseModel):
    degree: ResumeDegree | None = None
    total_experience_years: float = 0.0
    certifications: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# V2.1 component results
# ---------------------------------------------------------------------------


class KeywordScoreResult(BaseModel):
    score: int
    required_score: float
    preferred_bonus: float
    penalty_multiplier: float
    matched_required: list[str] = Field(default_factory=list)
    matched_preferred: list[str] = Field(default_factory=list)
    missing_required: list[str] = Field(default_factory=list)
    missing_preferred: list[str] = Field(default_factory=list)
    semantic_required: list[str] = Field(default_factory=list)


class QualificationFitResult(BaseModel):
    score: int
    degree_score: int
    experience_score: int
    certification_score: int
    degree_met: bool = True
    degree_note: str | None = None
    experience_met: bool = True
    experience_note: str | None = None
    certifications_met: list[str] = Field(default_factory=list)
    certifications_missing: list[str] = Field(default_factory=list)


class ContentQualityResult(BaseModel):
    score: int
    quantification_score: int = 0
    action_verb_score: int = 0
    keyword_density_score: int = 0
    total_bullets: int = 0
    bullets_with_metrics: int = 0
    high_tier_metrics: int = 0
    medium_tier_metrics: int = 0
    low_tier_metrics: int = 0
    strong_verb_count: int = 0
    moderate_verb_count: int = 0
    weak_verb_count: int = 0
    keywords_found: list[str] = Field(default_factory=list)
    keywords_missing: list[str] = Field(default_factory=list)


class SectionCheck(BaseModel):
    present: bool
    meets_threshold: bool
    points: float
    max_points: float
    quality_score: int | None = None
    issues: list[str] = Field(default_factory=list)


class SectionScoreResult(BaseModel):
    score: int
    sections: dict[str, SectionCheck] = Field(default_factory=dict)


class FormatScoreResult(BaseModel):
    score: int
    has_email: bool = False
    has_phone: bool = False
    has_linkedin: bool = False
    has_github: bool = False
    has_parseable_dates: bool = False
    has_section_headers: bool = False
    has_bullet_structure: bool = False
    appropriate_length: bool = True
    no_outdated_formats: bool = True
    issues: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# V2.1 output
# ---------------------------------------------------------------------------


class ComponentWeights(BaseModel):
    keywords: float
    qualification_fit: float
    content_quality: float
    sections: float
    format: float

    def total(self) -> float:
        return self.keywords + self.qualification_fit + self.content_quality + self.sections + self.format


class ComponentScore(BaseModel):
    score: int
    weight: float
    weighted: float
    details: dict[str, Any] = Field(default_factory=dict)

    @field_validator("score")
    @classmethod
    def _validate_score(cls, value: int) -> int:
        if value < 0 or value > 100:
            raise ValueError("component score must be between 0 and 100")
        return value


class ScoreBreakdownV21(BaseModel):
    keywords: ComponentScore
    qualification_fit: ComponentScore
    content_quality: ComponentScore
    sections: ComponentScore
    format: ComponentScore


class ActionItem(BaseModel):
    priority: ActionPriority
    category: str
    message: str
    potential_impact: int


class ScoreMetadata(BaseModel):
    version: str = "v2.1"
    algorithm_hash: str
    processing_time_ms: int
    detected_role: JobRole
    detected_seniority: SeniorityLevel
    weights_used: ComponentWeights
    weight_warning: str | None = None


class ATSScoreV21(BaseModel):
    overall: int
    tier: ScoreTier
    breakdown: ScoreBreakdown
    breakdown_v21: ScoreBreakdownV21
    action_items: list[ActionItem] = Field(default_factory=list)
    metadata: ScoreMetadata
    calculated_at: datetime = Field(default_factory=_utcnow)
