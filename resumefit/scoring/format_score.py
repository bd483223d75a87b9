from __future__ import annotations

from resumefit.schemas.scoring import ActionPriority, FormatScoreResult
from resumefit.scoring.constants import (
    BULLET_LINE_PATTERNS,
    COMPLEX_FORMATTING_RE,
    DATE_PATTERNS,
    FORMAT_EMAIL_RE,
    FORMAT_PHONE_RE,
    GITHUB_RE,
    LINKEDIN_RE,
    OBJECTIVE_RE,
    REFERENCES_RE,
    SECTION_HEADER_PATTERNS,
)
from resumefit.scoring.utils import round_half_up


def calculate_format_score_v21(resume_text: str, *, has_experience: bool, has_summary: bool) -> FormatScoreResult:
    """Start from a perfect score and subtract per detected formatting problem.

    ``issues`` are serious problems, ``warnings`` are minor ones.
    """
    text = resume_text or ""
    score = 1.0
    issues: list[str] = []
    warnings: list[str] = []

    has_email = bool(FORMAT_EMAIL_RE.search(text))
    if not has_email:
        score -= 0.1
        issues.append("No email address detected")

    has_phone = bool(FORMAT_PHONE_RE.search(text))
    if not has_phone:
        score -= 0.05
        warnings.append("No phone number detected")

    has_linkedin = bool(LINKEDIN_RE.search(text))
    if has_linkedin:
        score += 0.03
    has_github = bool(GITHUB_RE.search(text))
    if has_github:
        score += 0.02

    date_hits = sum(len(pattern.findall(text)) for pattern in DATE_PATTERNS)
    has_dates = date_hits >= 2
    if not has_dates and has_experience:
        score -= 0.1
        issues.append("Few or no parseable date formats found")

    headers_found = sum(1 for pattern in SECTION_HEADER_PATTERNS if pattern.search(text))
    has_headers = headers_found >= 3
    if not has_headers:
        score -= 0.08
        warnings.append(f"Only {headers_found} standard section headers detected")

    has_bullets = any(pattern.search(text) for pattern in BULLET_LINE_PATTERNS)
    if not has_bullets and has_experience:
        score -= 0.07
        warnings.append("No clear bullet point structure detected")

    word_count = len(text.split())
    appropriate_length = True
    if word_count < 200:
        score -= 0.12
        appropriate_length = False
        issues.append(f"Resume too sparse ({word_count} words, recommend 300+)")
    elif word_count > 1000:
        score -= 0.05
        appropriate_length = False
        warnings.append(f"Resume may be too long ({word_count} words, recommend under 800)")

    no_outdated = True
    if OBJECTIVE_RE.search(text) and not has_summary:
        score -= 0.1
        no_outdated = False
        issues.append('"Objective" section is outdated - use "Professional Summary" instead')
    if REFERENCES_RE.search(text):
        score -= 0.05
        no_outdated = False
        warnings.append('"References available upon request" is outdated - remove this line')

    if COMPLEX_FORMATTING_RE.search(text):
        score -= 0.05
        warnings.append("Complex formatting detected (tables/columns may cause parsing issues)")

    return FormatScoreResult(
        score=round_half_up(max(0.0, min(1.0, score)) * 100),
        has_email=has_email,
        has_phone=has_phone,
        has_linkedin=has_linkedin,
        has_github=has_github,
        has_parseable_dates=has_dates,
        has_section_headers=has_headers,
        has_bullet_structure=has_bullets,
        appropriate_length=appropriate_length,
        no_outdated_formats=no_outdated,
        issues=issues,
        warnings=warnings,
    )


def format_action_items(result: FormatScoreResult) -> list[tuple[ActionPriority, str]]:
    items: list[tuple[ActionPriority, str]] = [("high", issue) for issue in result.issues]
    items.extend(("low", warning) for warning in result.warnings)
    return items
