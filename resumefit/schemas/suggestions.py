from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field

from .resume import ParsedResume

SuggestionSection = Literal["experience", "education", "skills", "projects", "format"]
SuggestionStatus = Literal["pending", "accepted", "rejected"]
StructuralPriority = Literal["critical", "high", "moderate", "low"]
StructuralCategory = Literal["section_order", "section_presence", "section_heading"]

NO_CHANGES_SENTINEL = "No changes recommended"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Suggestion(BaseModel):
    id: str
    section: SuggestionSection
    item_index: int | None = None
    suggestion_type: str = "bullet_rewrite"
    original_text: str
    suggested_text: str
    reasoning: str = ""
    status: SuggestionStatus = "pending"
    created_at: datetime = Field(default_factory=_utcnow)


class StructuralSuggestion(BaseModel):
    id: str
    priority: StructuralPriority
    category: StructuralCategory
    message: str
    current_state: str
    recommended_action: str


class MergeWarning(BaseModel):
    suggestion_id: str
    reason: str


class DiffEntry(BaseModel):
    suggestion_id: str
    section: SuggestionSection
    item_index: int | None = None
    original: str
    suggested: str
    is_diff_content: bool = True


class MergeResult(BaseModel):
    merged_content: ParsedResume
    applied_count: int = 0
    skipped_count: int = 0
    noop_count: int = 0
    warnings: list[MergeWarning] = Field(default_factory=list)
    diffs: list[DiffEntry] = Field(default_factory=list)


class SectionOrderViolation(BaseModel):
    section: str
    expected_position: int
    actual_position: int
    description: str


class SectionOrderValidation(BaseModel):
    is_correct_order: bool
    violations: list[SectionOrderViolation] = Field(default_factory=list)
    recommended_order: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Generator output (bullet rewrites)
# ---------------------------------------------------------------------------


class BulletRewrite(BaseModel):
    original: str
    suggested: str
    metrics_added: list[str] = Field(default_factory=list)
    keywords_incorporated: list[str] = Field(default_factory=list)
    point_value: float | None = None


class ExperienceEntryRewrite(BaseModel):
    company: str
    role: str
    dates: str
    original_bullets: list[str] = Field(default_factory=list)
    suggested_bullets: list[BulletRewrite] = Field(default_factory=list)


class ExperienceRewritePayload(BaseModel):
    experience_entries: list[ExperienceEntryRewrite] = Field(default_factory=list)
    total_point_value: float | None = None
    summary: str
