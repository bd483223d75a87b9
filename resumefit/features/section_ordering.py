from __future__ import annotations

import re
from typing import Sequence

from resumefit.schemas.resume import CandidateArchetype
from resumefit.schemas.suggestions import SectionOrderValidation, SectionOrderViolation

# The contact header always comes first and is not listed.
RECOMMENDED_ORDER: dict[str, tuple[str, ...]] = {
    "coop": ("skills", "education", "projects", "experience", "certifications"),
    "fulltime": ("summary", "skills", "experience", "projects", "education", "certifications"),
    "career_changer": ("summary", "skills", "education", "projects", "experience", "certifications"),
}

# Headings recognized when reading the section order back out of raw text.
SECTION_HEADINGS: dict[str, tuple[str, ...]] = {
    "summary": ("summary", "professional summary", "profile", "professional profile", "about me", "objective"),
    "skills": ("skills", "technical skills", "core competencies", "key skills", "technologies"),
    "experience": (
        "experience",
        "work experience",
        "professional experience",
        "relevant experience",
        "employment",
        "employment history",
        "work history",
    ),
    "education": ("education", "academic background"),
    "projects": ("projects", "project experience", "personal projects", "academic projects"),
}

_HEADING_PATTERNS = tuple(
    (
        section,
        re.compile(
            r"^[ \t]*(?:" + "|".join(re.escape(h) for h in headings) + r")[ \t]*:?[ \t]*$",
            re.IGNORECASE | re.MULTILINE,
        ),
    )
    for section, headings in SECTION_HEADINGS.items()
)


def detect_section_order(raw_text: str | None, present: Sequence[str] | None = None) -> list[str]:
    """Return sections in the order their headings first appear in ``raw_text``.

    Only whole-line headings count. When ``present`` is given, sections outside
    it are dropped. No headings yields an empty list.
    """
    if not raw_text:
        return []
    allowed = set(present) if present is not None else None
    positions: list[tuple[int, str]] = []
    for section, pattern in _HEADING_PATTERNS:
        if allowed is not None and section not in allowed:
            continue
        match = pattern.search(raw_text)
        if match:
            positions.append((match.start(), section))
    return [section for _, section in sorted(positions)]


def validate_section_order(
    present_sections: Sequence[str], archetype: CandidateArchetype
) -> SectionOrderValidation:
    """Compare the document order of known sections with the recommended order.

    Sections missing from the résumé are dropped from the recommendation
    before positions are compared, and unknown sections are ignored, so
    only relative order among the present known sections matters.
    """
    recommended = list(RECOMMENDED_ORDER[archetype])
    present = [name.strip().lower() for name in present_sections if name and name.strip()]

    if len(present) <= 1:
        return SectionOrderValidation(is_correct_order=True, violations=[], recommended_order=recommended)

    relevant = [section for section in recommended if section in present]
    expected_positions = {section: index for index, section in enumerate(relevant)}
    known = [section for section in present if section in expected_positions]

    violations: list[SectionOrderViolation] = []
    for actual, section in enumerate(known):
        expected = expected_positions[section]
        if actual != expected:
            violations.append(
                SectionOrderViolation(
                    section=section,
                    expected_position=expected,
                    actual_position=actual,
                    description=(
                        f'"{section}" appears at position {actual + 1} but should be at '
                        f"position {expected + 1} for {archetype} candidates"
                    ),
                )
            )

    return SectionOrderValidation(
        is_correct_order=not violations,
        violations=violations,
        recommended_order=recommended,
    )
