from .resume import (
    CandidateArchetype,
    EducationEntry,
    JobEntry,
    ParsedResume,
    Skill,
    normalize_section_text,
)
from .scoring import (
    ATSScore,
    ATSScoreV21,
    ActionItem,
    ComponentScore,
    ComponentWeights,
    JDQualifications,
    KeywordAnalysis,
    KeywordMatchV21,
    MatchedKeyword,
    MissingKeyword,
    ResumeQualifications,
    ScoreBreakdown,
    ScoreBreakdownV21,
)
from .suggestions import (
    BulletRewrite,
    ExperienceEntryRewrite,
    ExperienceRewritePayload,
    NO_CHANGES_SENTINEL,
    DiffEntry,
    MergeResult,
    MergeWarning,
    SectionOrderValidation,
    SectionOrderViolation,
    StructuralSuggestion,
    Suggestion,
)

__all__ = [
    "CandidateArchetype",
    "EducationEntry",
    "JobEntry",
    "ParsedResume",
    "Skill",
    "normalize_section_text",
    "ATSScore",
    "ATSScoreV21",
    "ActionItem",
    "ComponentScore",
    "ComponentWeights",
    "JDQualifications",
    "KeywordAnalysis",
    "KeywordMatchV21",
    "MatchedKeyword",
    "MissingKeyword",
    "ResumeQualifications",
    "ScoreBreakdown",
    "ScoreBreakdownV21",
    "BulletRewrite",
    "ExperienceEntryRewrite",
    "ExperienceRewritePayload",
    "NO_CHANGES_SENTINEL",
    "DiffEntry",
    "MergeResult",
    "MergeWarning",
    "SectionOrderValidation",
    "SectionOrderViolation",
    "StructuralSuggestion",
    "Suggestion",
]
