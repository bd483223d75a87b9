from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Sequence

from resumefit.schemas.resume import CandidateArchetype, ParsedResume
from resumefit.schemas.suggestions import StructuralSuggestion

logger = logging.getLogger(__name__)

# Informal heading -> ATS-friendly replacement.
UNSAFE_HEADERS: dict[str, str] = {
    "my journey": "Professional Experience",
    "track record": "Professional Experience",
    "career path": "Professional Experience",
    "what i've done": "Professional Experience",
    "what i know": "Technical Skills",
    "my toolkit": "Technical Skills",
    "tech stack": "Technical Skills",
    "learning": "Education",
    "where i studied": "Education",
    "things i've built": "Projects",
    "my work": "Projects",
    "about me": "Professional Summary",
    "who i am": "Professional Summary",
}

# A heading is a line holding nothing but the heading text (optionally with a colon).
_HEADER_PATTERNS = tuple(
    (header, replacement, re.compile(rf"^[ \t]*{re.escape(header)}[ \t]*:?[ \t]*$", re.MULTILINE))
    for header, replacement in UNSAFE_HEADERS.items()
)


@dataclass(frozen=True)
class RuleContext:
    archetype: CandidateArchetype
    resume: ParsedResume
    section_order: tuple[str, ...]
    raw_text: str | None = None

    def position(self, section: str) -> int | None:
        try:
            return self.section_order.index(section)
        except ValueError:
            return None

    def has(self, section: str) -> bool:
        return self.resume.has_section(section)

    def order_pair(self) -> tuple[int, int] | None:
        experience = self.position("experience")
        education = self.position("education")
        if experience is None or education is None:
            return None
        return experience, education


@dataclass(frozen=True)
class StructuralRule:
    id: str
    predicate: Callable[[RuleContext], bool]
    builder: Callable[[RuleContext], StructuralSuggestion]
    archetypes: frozenset[str] = field(default_factory=frozenset)

    def applies_to(self, archetype: str) -> bool:
        return not self.archetypes or archetype in self.archetypes

    def evaluate(self, ctx: RuleContext) -> StructuralSuggestion | None:
        if not self.applies_to(ctx.archetype) or not self.predicate(ctx):
            return None
        return self.builder(ctx)


def detect_unsafe_headers(raw_text: str | None) -> list[tuple[str, str]]:
    """Return ``(heading, replacement)`` for each informal heading found on its own line."""
    if not raw_text:
        return []
    lowered = raw_text.lower()
    return [(header, replacement) for header, replacement, pattern in _HEADER_PATTERNS if pattern.search(lowered)]


def _exp_before_edu(ctx: RuleContext) -> bool:
    pair = ctx.order_pair()
    return pair is not None and pair[0] < pair[1]


def _edu_before_exp(ctx: RuleContext) -> bool:
    pair = ctx.order_pair()
    return pair is not None and pair[1] < pair[0]


def _skills_not_leading(ctx: RuleContext) -> bool:
    return not ctx.has("skills") or (bool(ctx.section_order) and ctx.section_order[0] != "skills")


def _suggestion(rule_id: str, priority: str, category: str, message: str, current: str, action: str):
    def build(_ctx: RuleContext) -> StructuralSuggestion:
        return StructuralSuggestion(
            id=rule_id,
            priority=priority,
            category=category,
            message=message,
            current_state=current,
            recommended_action=action,
        )

    return build


def _build_skills_at_top(ctx: RuleContext) -> StructuralSuggestion:
    return StructuralSuggestion(
        id="rule-coop-no-skills-at-top",
        priority="critical",
        category="section_presence",
        message="Co-op resumes must lead with Skills section",
        current_state="Skills section is missing" if not ctx.has("skills") else "Skills section is not positioned first",
        recommended_action=(
            "Add or move Skills section to the top of your resume (right after header). This maximizes "
            "keyword density for ATS systems and immediately demonstrates your technical capabilities."
        ),
    )


def _build_non_standard_headers(ctx: RuleContext) -> StructuralSuggestion:
    detected = ", ".join(f'"{header}" → "{replacement}"' for header, replacement in detect_unsafe_headers(ctx.raw_text))
    return StructuralSuggestion(
        id="rule-non-standard-headers",
        priority="moderate",
        category="section_heading",
        message="Non-standard section headings detected",
        current_state=f"Detected: {detected}",
        recommended_action=(
            "Replace creative or informal section headings with standard ATS-friendly headers. "
            "This ensures proper categorization by applicant tracking systems."
        ),
    )


STRUCTURAL_RULES: tuple[StructuralRule, ...] = (
    StructuralRule(
        id="rule-coop-exp-before-edu",
        archetypes=frozenset({"coop"}),
        predicate=_exp_before_edu,
        builder=_suggestion(
            "rule-coop-exp-before-edu",
            "high",
            "section_order",
            "For co-op/internship resumes, Education should come before Experience",
            "Experience section appears before Education section",
            "Move Education section above Experience. Co-op candidates benefit from showcasing their "
            "academic credentials before work history.",
        ),
    ),
    StructuralRule(
        id="rule-coop-no-skills-at-top",
        archetypes=frozenset({"coop"}),
        predicate=_skills_not_leading,
        builder=_build_skills_at_top,
    ),
    StructuralRule(
        id="rule-coop-generic-summary",
        archetypes=frozenset({"coop"}),
        predicate=lambda ctx: ctx.has("summary"),
        builder=_suggestion(
            "rule-coop-generic-summary",
            "high",
            "section_presence",
            "Co-op resumes typically should not include a Professional Summary",
            "Professional Summary section is present",
            "Consider removing the summary to save space; co-op/internship resumes benefit from leading "
            "with Skills instead. Use the extra space for Projects or relevant coursework.",
        ),
    ),
    StructuralRule(
        id="rule-coop-projects-heading",
        archetypes=frozenset({"coop"}),
        predicate=lambda ctx: ctx.has("projects"),
        builder=_suggestion(
            "rule-coop-projects-heading",
            "moderate",
            "section_heading",
            'Use "Project Experience" heading instead of "Projects"',
            'Section is likely titled "Projects"',
            'Rename the section heading to "Project Experience" for better ATS recognition and '
            "professional presentation.",
        ),
    ),
    StructuralRule(
        id="rule-fulltime-edu-before-exp",
        archetypes=frozenset({"fulltime"}),
        predicate=_edu_before_exp,
        builder=_suggestion(
            "rule-fulltime-edu-before-exp",
            "high",
            "section_order",
            "For full-time positions, Experience should come before Education",
            "Education section appears before Experience section",
            "Move Experience section above Education. Full-time candidates should emphasize professional "
            "experience over academic credentials.",
        ),
    ),
    StructuralRule(
        id="rule-career-changer-no-summary",
        archetypes=frozenset({"career_changer"}),
        predicate=lambda ctx: not ctx.has("summary"),
        builder=_suggestion(
            "rule-career-changer-no-summary",
            "critical",
            "section_presence",
            "Career changers must include a Professional Summary",
            "Professional Summary section is missing",
            "Add a Professional Summary at the top of your resume to explain your career transition and "
            "highlight transferable skills. This section is essential for career changers to frame your narrative.",
        ),
    ),
    StructuralRule(
        id="rule-career-changer-edu-below-exp",
        archetypes=frozenset({"career_changer"}),
        predicate=_exp_before_edu,
        builder=_suggestion(
            "rule-career-changer-edu-below-exp",
            "high",
            "section_order",
            "For career changers, Education should come before Experience",
            "Education section appears after Experience section",
            "Move Education section above Experience. Your degree is the pivot credential for your career "
            "change and should be prominently positioned.",
        ),
    ),
    StructuralRule(
        id="rule-non-standard-headers",
        predicate=lambda ctx: bool(detect_unsafe_headers(ctx.raw_text)),
        builder=_build_non_standard_headers,
    ),
)


def _normalize_order(section_order: Sequence[str] | None) -> tuple[str, ...]:
    return tuple(name.strip().lower() for name in (section_order or ()) if name and name.strip())


def generate_structural_suggestions(
    archetype: CandidateArchetype,
    resume: ParsedResume,
    section_order: Sequence[str] | None,
    raw_text: str | None = None,
    *,
    rules: Sequence[StructuralRule] = STRUCTURAL_RULES,
) -> list[StructuralSuggestion]:
    """Evaluate every rule independently; each rule contributes at most one suggestion."""
    ctx = RuleContext(
        archetype=archetype,
        resume=resume,
        section_order=_normalize_order(section_order),
        raw_text=raw_text,
    )
    suggestions: list[StructuralSuggestion] = []
    seen: set[str] = set()
    for rule in rules:
        if rule.id in seen:
            continue
        suggestion = rule.evaluate(ctx)
        if suggestion is not None:
            seen.add(rule.id)
            suggestions.append(suggestion)

    logger.debug(
        "structural_rules_evaluated archetype=%s triggered=%s",
        archetype,
        ",".join(s.id for s in suggestions) or "-",
    )
    return suggestions
