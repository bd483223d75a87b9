from __future__ import annotations

from datetime import date
from typing import Literal, Sequence

from resumefit.schemas.scoring import JDQualifications, QualificationFitResult, ResumeQualifications
from resumefit.scoring.constants import (
    DEGREE_FIELD_MATCHES,
    DEGREE_LEVELS,
    EXPERIENCE_RANGE_RE,
    QUALIFICATION_WEIGHTS,
)
from resumefit.scoring.utils import round_half_up

FieldMatch = Literal["exact", "related", "none"]

_OPEN_ENDED = {"present", "current", "now"}


def extract_experience_years(experience_text: str | None, *, current_year: int | None = None) -> float:
    """Sum year ranges like "Jan 2019 - Present"; each range adds a half-year of slack."""
    if not experience_text or not experience_text.strip():
        return 0.0

    this_year = current_year or date.today().year
    total_months = 0
    for match in EXPERIENCE_RANGE_RE.finditer(experience_text):
        start = int(match.group(1))
        end_raw = match.group(2).lower()
        end = this_year if end_raw in _OPEN_ENDED else int(end_raw)
        if end >= start:
            total_months += (end - start) * 12 + 6

    return round_half_up(total_months / 12 * 10) / 10


def check_field_match(resume_field: str, required_fields: Sequence[str]) -> FieldMatch:
    if not resume_field or not required_fields:
        return "none"

    field_lower = resume_field.lower()
    required_lower = [req.lower() for req in required_fields]

    for category, aliases in DEGREE_FIELD_MATCHES.items():
        if not any(alias in field_lower for alias in aliases):
            continue
        category_name = category.replace("_", " ", 1)
        if any(category_name in req or any(alias in req for alias in aliases) for req in required_lower):
            return "exact"

    if any("related" in req for req in required_lower):
        for aliases in DEGREE_FIELD_MATCHES.values():
            if any(alias in field_lower for alias in aliases):
                return "related"

    return "none"


def calculate_qualification_fit(
    jd_quals: JDQualifications, resume_quals: ResumeQualifications
) -> QualificationFitResult:
    degree_score = 100
    degree_met = True
    degree_note: str | None = None

    degree_req = jd_quals.degree_required
    if degree_req is not None:
        required_level = DEGREE_LEVELS[degree_req.level]
        has_level = DEGREE_LEVELS[resume_quals.degree.level] if resume_quals.degree else 0

        if has_level >= required_level:
            match = check_field_match(resume_quals.degree.field if resume_quals.degree else "", degree_req.fields)
            if match == "exact":
                degree_score, degree_note = 100, "Degree fully matches requirements"
            elif match == "related":
                degree_score, degree_note = 85, "Degree in related field"
            else:
                degree_score, degree_note = 70, "Degree level met but field differs"
        elif has_level == required_level - 1:
            degree_score = 50 if degree_req.required else 75
            degree_met = False
            degree_note = "Degree level below requirement"
        else:
            degree_score = 20 if degree_req.required else 50
            degree_met = False
            degree_note = (
                "Degree level significantly below requirement" if resume_quals.degree else "No degree listed"
            )

    experience_score = 100
    experience_met = True
    experience_note: str | None = None

    exp_req = jd_quals.experience_required
    if exp_req is not None:
        required = exp_req.min_years
        has = resume_quals.total_experience_years
        if has >= required:
            experience_score = 100
            experience_note = f"{has:g} years meets {required:g}+ requirement"
        elif has >= required * 0.75:
            experience_score = 75
            experience_met = False
            experience_note = f"{has:g} years slightly below {required:g}+ requirement"
        elif has >= required * 0.5:
            experience_score = 40 if exp_req.required else 60
            experience_met = False
            experience_note = f"{has:g} years below {required:g}+ requirement"
        else:
            experience_score = 15 if exp_req.required else 40
            experience_met = False
            experience_note = f"{has:g} years significantly below {required:g}+ requirement"

    certification_score = 100
    certifications_met: list[str] = []
    certifications_missing: list[str] = []

    cert_req = jd_quals.certifications_required
    if cert_req is not None and cert_req.certifications:
        held = [cert.lower() for cert in resume_quals.certifications if cert.strip()]
        for cert in cert_req.certifications:
            wanted = cert.lower()
            if any(wanted in have or have in wanted for have in held):
                certifications_met.append(cert)
            else:
                certifications_missing.append(cert)
        certification_score = round_half_up(len(certifications_met) / len(cert_req.certifications) * 100)

    score = round_half_up(
        degree_score * QUALIFICATION_WEIGHTS["degree"]
        + experience_score * QUALIFICATION_WEIGHTS["experience"]
        + certification_score * QUALIFICATION_WEIGHTS["certifications"]
    )

    return QualificationFitResult(
        score=score,
        degree_score=degree_score,
        experience_score=experience_score,
        certification_score=certification_score,
        degree_met=degree_met,
        degree_note=degree_note,
        experience_met=experience_met,
        experience_note=experience_note,
        certifications_met=certifications_met,
        certifications_missing=certifications_missing,
    )


def qualification_action_items(result: QualificationFitResult) -> list[str]:
    items: list[str] = []
    if not result.experience_met and result.experience_note:
        items.append(result.experience_note)
    if not result.degree_met and result.degree_note:
        items.append(result.degree_note)
    if result.certifications_missing:
        items.append("Missing certifications: " + ", ".join(result.certifications_missing[:2]))
    return items
