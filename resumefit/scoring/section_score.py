from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Sequence

from resumefit.core.config.scoring import get_scoring_value
from resumefit.schemas.resume import CandidateArchetype, ParsedResume
from resumefit.schemas.scoring import ActionPriority, SectionCheck, SectionScoreResult
from resumefit.scoring.constants import SECTION_CONFIG_V21, V1_REQUIRED_SECTIONS
from resumefit.scoring.utils import round_half_up

_COURSEWORK_RE = re.compile(r"(?:relevant\s+)?coursework[:\s]+([^.]+)", re.I)
_GPA_RE = re.compile(r"gpa[:\s]*(\d+\.?\d*)", re.I)
_ACADEMIC_PROJECT_RE = re.compile(r"capstone|project|thesis|research", re.I)
_HONORS_RE = re.compile(r"dean'?s?\s*list|honors?|cum\s*laude|magna|summa|distinction", re.I)
_EDU_DATE_RE = re.compile(
    r"(?:(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)[a-z]*\.?\s+)?\d{4}|Expected|Graduated", re.I
)
_LIST_MARKER_RE = re.compile(r"^\s*(?:[-*•▪▸►○◦◇]|\d+[.)])\s*")


def calculate_section_coverage(resume: ParsedResume) -> int:
    """Share of required sections with real content, e.g. 2 of 3 -> 67."""
    required = get_scoring_value("v1.required_sections", list(V1_REQUIRED_SECTIONS))
    if not isinstance(required, list) or not required:
        required = list(V1_REQUIRED_SECTIONS)
    present = sum(1 for name in required if resume.has_section(str(name)))
    return round_half_up(100 * present / len(required))


@dataclass(frozen=True)
class SectionInputs:
    summary: str = ""
    skills: list[str] = field(default_factory=list)
    experience: list[str] = field(default_factory=list)
    education: str = ""
    projects: list[str] = field(default_factory=list)
    certifications: list[str] = field(default_factory=list)

    @classmethod
    def from_resume(cls, resume: ParsedResume, certifications: Sequence[str] = ()) -> "SectionInputs":
        projects_text = resume.section_text("projects") or ""
        projects = [_LIST_MARKER_RE.sub("", line).strip() for line in projects_text.splitlines()]
        return cls(
            summary=resume.section_text("summary") or "",
            skills=[skill.name for skill in resume.skills if skill.name.strip()],
            experience=resume.all_bullets(),
            education=resume.section_text("education") or "",
            projects=[line for line in projects if line],
            certifications=[cert for cert in certifications if cert.strip()],
        )


def evaluate_education_quality(
    education_text: str, jd_keywords: Sequence[str], archetype: CandidateArchetype
) -> tuple[int, list[str]]:
    """Score 0-100 for coursework, GPA, projects, honors and dates, plus fix-it hints."""
    if not education_text.strip():
        return 0, ["Add education section"]

    coursework = _COURSEWORK_RE.search(education_text)
    coursework_match = 0.0
    if coursework and jd_keywords:
        listed = coursework.group(1).lower()
        hits = [kw for kw in jd_keywords if kw.lower() in listed]
        coursework_match = len(hits) / min(len(jd_keywords), 10)

    gpa = _GPA_RE.search(education_text)
    gpa_strong = bool(gpa) and float(gpa.group(1)) >= 3.5
    has_projects = bool(_ACADEMIC_PROJECT_RE.search(education_text))
    has_honors = bool(_HONORS_RE.search(education_text))
    has_dates = bool(_EDU_DATE_RE.search(education_text))

    suggestions: list[str] = []
    if archetype == "coop":
        score = (
            (0.3 if coursework else 0)
            + coursework_match * 0.25
            + ((0.15 if gpa_strong else 0.08) if gpa else 0)
            + (0.15 if has_projects else 0)
            + (0.1 if has_honors else 0)
            + (0.05 if has_dates else 0)
        )
        if not coursework:
            suggestions.append("Add relevant coursework matching JD requirements")
        if not gpa:
            suggestions.append("Add GPA if 3.0+ (critical for co-op applications)")
        if not has_projects:
            suggestions.append("Add capstone project or academic projects")
        if not has_honors and gpa_strong:
            suggestions.append("Add Dean's List or honors if applicable")
    else:
        score = (
            (0.2 if coursework else 0)
            + coursework_match * 0.15
            + (0.15 if gpa_strong else 0)
            + (0.15 if has_projects else 0)
            + (0.1 if has_honors else 0)
            + (0.1 if has_dates else 0)
            + 0.15
        )

    return round_half_up(min(1.0, score) * 100), suggestions


def _count_check(count: int, min_count: int, max_points: float, short_issue: str, absent_issue: str) -> SectionCheck:
    if count >= min_count:
        return SectionCheck(present=True, meets_threshold=True, points=max_points, max_points=max_points)
    if count > 0:
        partial = max_points * (count / min_count)
        return SectionCheck(
            present=True,
            meets_threshold=False,
            points=round_half_up(partial * 10) / 10,
            max_points=max_points,
            issues=[short_issue],
        )
    return SectionCheck(present=False, meets_threshold=False, points=0, max_points=max_points, issues=[absent_issue])


def calculate_section_score_v21(
    sections: SectionInputs,
    archetype: CandidateArchetype,
    jd_keywords: Sequence[str] = (),
) -> SectionScoreResult:
    config = SECTION_CONFIG_V21[archetype]
    achieved = 0.0
    possible = 0.0
    checks: dict[str, SectionCheck] = {}

    summary_cfg = config["summary"]
    summary_len = len(sections.summary.strip())
    possible += summary_cfg["max_points"]
    if summary_len >= summary_cfg["min_length"]:
        achieved += summary_cfg["max_points"]
        checks["summary"] = SectionCheck(
            present=True, meets_threshold=True, points=summary_cfg["max_points"], max_points=summary_cfg["max_points"]
        )
    elif summary_len > 0:
        partial = summary_cfg["max_points"] * min(1.0, summary_len / summary_cfg["min_length"])
        checks["summary"] = SectionCheck(
            present=True,
            meets_threshold=False,
            points=round_half_up(partial * 10) / 10,
            max_points=summary_cfg["max_points"],
            issues=[f"Summary too short ({summary_len}/{summary_cfg['min_length']} chars)"],
        )
        achieved += partial
    else:
        checks["summary"] = SectionCheck(
            present=False,
            meets_threshold=False,
            points=0,
            max_points=summary_cfg["max_points"],
            issues=["No professional summary section"],
        )

    skills_cfg = config["skills"]
    possible += skills_cfg["max_points"]
    skill_count = len(sections.skills)
    checks["skills"] = _count_check(
        skill_count,
        skills_cfg["min_items"],
        skills_cfg["max_points"],
        f"Only {skill_count} skills listed (recommend {skills_cfg['min_items']}+)",
        "No skills section",
    )
    achieved += skills_cfg["max_points"] * min(1.0, skill_count / skills_cfg["min_items"])

    exp_cfg = config["experience"]
    bullet_count = len(sections.experience)
    if exp_cfg["required"] or bullet_count:
        possible += exp_cfg["max_points"]
        checks["experience"] = _count_check(
            bullet_count,
            exp_cfg["min_bullets"],
            exp_cfg["max_points"],
            f"Only {bullet_count} experience bullets (recommend {exp_cfg['min_bullets']}+)",
            "No experience section",
        )
        achieved += exp_cfg["max_points"] * min(1.0, bullet_count / exp_cfg["min_bullets"])

    edu_cfg = config["education"]
    possible += edu_cfg["max_points"]
    education = sections.education.strip()
    if len(education) >= edu_cfg["min_length"]:
        quality, hints = evaluate_education_quality(education, jd_keywords, archetype)
        points = edu_cfg["max_points"] * (0.4 + quality / 100 * 0.6)
        achieved += points
        checks["education"] = SectionCheck(
            present=True,
            meets_threshold=quality >= 50,
            points=round_half_up(points * 10) / 10,
            max_points=edu_cfg["max_points"],
            quality_score=quality,
            issues=hints,
        )
    elif education:
        points = edu_cfg["max_points"] * 0.3
        achieved += points
        checks["education"] = SectionCheck(
            present=True,
            meets_threshold=False,
            points=round_half_up(points * 10) / 10,
            max_points=edu_cfg["max_points"],
            issues=["Education section is sparse - add coursework, GPA, or projects"],
        )
    else:
        checks["education"] = SectionCheck(
            present=False,
            meets_threshold=False,
            points=0,
            max_points=edu_cfg["max_points"],
            issues=["No education section"],
        )

    proj_cfg = config["projects"]
    project_count = len(sections.projects)
    if proj_cfg["required"] or project_count:
        possible += proj_cfg["max_points"]
        checks["projects"] = _count_check(
            project_count,
            proj_cfg["min_bullets"],
            proj_cfg["max_points"],
            f"Only {project_count} project entries (recommend {proj_cfg['min_bullets']}+)",
            "No projects section (important for co-op)",
        )
        achieved += proj_cfg["max_points"] * min(1.0, project_count / proj_cfg["min_bullets"])

    # Certifications only ever add points.
    cert_cfg = config["certifications"]
    if len(sections.certifications) >= cert_cfg["min_items"]:
        possible += cert_cfg["max_points"]
        achieved += cert_cfg["max_points"]
        checks["certifications"] = SectionCheck(
            present=True, meets_threshold=True, points=cert_cfg["max_points"], max_points=cert_cfg["max_points"]
        )

    score = round_half_up(achieved / possible * 100) if possible > 0 else 0
    return SectionScoreResult(score=score, sections=checks)


def section_action_items(result: SectionScoreResult) -> list[tuple[ActionPriority, str]]:
    items: list[tuple[ActionPriority, str]] = []
    for check in result.sections.values():
        if check.issues and not check.meets_threshold:
            items.append(("moderate" if check.present else "high", check.issues[0]))
    return items
