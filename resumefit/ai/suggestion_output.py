from __future__ import annotations

import json
import logging
import re
import uuid
from typing import Any

from resumefit.ai.pii import restore_pii
from resumefit.core.errors import OutputParseError
from resumefit.schemas.resume import ParsedResume
from resumefit.schemas.suggestions import (
    BulletRewrite,
    ExperienceEntryRewrite,
    ExperienceRewritePayload,
    NO_CHANGES_SENTINEL,
    Suggestion,
)

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^\s*```(?:json)?\s*(.*?)\s*```\s*$", re.DOTALL)


def load_json_object(content: str) -> dict[str, Any]:
    """Parse a JSON object from generator output, tolerating a markdown fence."""
    text = (content or "").strip()
    fenced = _FENCE_RE.match(text)
    if fenced:
        text = fenced.group(1)
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        raise OutputParseError(detail=f"invalid json: {exc.msg}") from exc
    if not isinstance(parsed, dict):
        raise OutputParseError(detail="expected a json object")
    return parsed


def _restore(value: str, mapping: dict[str, str] | None) -> str:
    return restore_pii(value, mapping) if mapping else value


def _valid_point_value(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if 0 <= value <= 100:
        return float(value)
    return None


def _parse_bullet(raw: Any, mapping: dict[str, str] | None) -> BulletRewrite:
    if not isinstance(raw, dict):
        raise OutputParseError(detail="suggested bullet is not an object")
    metrics = raw.get("metrics_added")
    keywords = raw.get("keywords_incorporated")
    return BulletRewrite(
        original=_restore(str(raw.get("original") or ""), mapping),
        suggested=_restore(str(raw.get("suggested") or ""), mapping),
        metrics_added=[str(item) for item in metrics] if isinstance(metrics, list) else [],
        keywords_incorporated=[str(item) for item in keywords] if isinstance(keywords, list) else [],
        point_value=_valid_point_value(raw.get("point_value")),
    )


def _parse_entry(raw: Any, mapping: dict[str, str] | None) -> ExperienceEntryRewrite:
    if not isinstance(raw, dict):
        raise OutputParseError(detail="experience entry is not an object")
    if not raw.get("company") or not raw.get("role") or not raw.get("dates"):
        raise OutputParseError(detail="experience entry missing company, role or dates")

    original_bullets = raw.get("original_bullets")
    suggested_bullets = raw.get("suggested_bullets")
    if not isinstance(original_bullets, list) or not isinstance(suggested_bullets, list):
        raise OutputParseError(detail="experience entry bullets are not lists")
    if len(suggested_bullets) != len(original_bullets):
        raise OutputParseError(
            detail=f"bullet count mismatch original={len(original_bullets)} suggested={len(suggested_bullets)}"
        )

    return ExperienceEntryRewrite(
        company=_restore(str(raw["company"]), mapping),
        role=_restore(str(raw["role"]), mapping),
        dates=str(raw["dates"]),
        original_bullets=[_restore(str(item), mapping) for item in original_bullets],
        suggested_bullets=[_parse_bullet(item, mapping) for item in suggested_bullets],
    )


def parse_experience_rewrites(
    content: str, mapping: dict[str, str] | None = None
) -> ExperienceRewritePayload:
    """Validate a bullet-rewrite payload and restore redacted tokens in it.

    Raises ``OutputParseError`` on invalid JSON, a missing ``experience_entries``
    list or ``summary`` string, an entry without company/role/dates, non-list
    bullets, or a suggested-bullet count that differs from the original count.
    Out-of-range ``point_value`` fields are dropped rather than rejected.
    """
    parsed = load_json_object(content)

    entries = parsed.get("experience_entries")
    if not isinstance(entries, list):
        raise OutputParseError(detail="invalid experience_entries structure")
    summary = parsed.get("summary")
    if not summary or not isinstance(summary, str):
        raise OutputParseError(detail="invalid summary structure")

    total = parsed.get("total_point_value")
    if isinstance(total, bool) or not isinstance(total, (int, float)) or total < 0:
        if total is not None:
            logger.warning("suggestion_output_total_ignored value=%r", total)
        total = None

    return ExperienceRewritePayload(
        experience_entries=[_parse_entry(entry, mapping) for entry in entries],
        total_point_value=total,
        summary=_restore(summary, mapping),
    )


def _match_job_index(resume: ParsedResume, entry: ExperienceEntryRewrite) -> int | None:
    company = entry.company.strip().lower()
    role = entry.role.strip().lower()
    fallback: int | None = None
    for index, job in enumerate(resume.experience):
        if job.company.strip().lower() != company:
            continue
        if job.title.strip().lower() == role:
            return index
        if fallback is None:
            fallback = index
    return fallback


def _reasoning(bullet: BulletRewrite) -> str:
    parts: list[str] = []
    if bullet.metrics_added:
        parts.append("Adds metrics: " + ", ".join(bullet.metrics_added))
    if bullet.keywords_incorporated:
        parts.append("Incorporates keywords: " + ", ".join(bullet.keywords_incorporated))
    return ". ".join(parts)


def build_bullet_suggestions(payload: ExperienceRewritePayload, resume: ParsedResume) -> list[Suggestion]:
    """Turn a validated payload into ``Suggestion`` records anchored in ``resume``.

    A rewrite whose original bullet does not exist verbatim in the matched job
    is discarded.
    """
    suggestions: list[Suggestion] = []
    for entry in payload.experience_entries:
        job_index = _match_job_index(resume, entry)
        if job_index is None:
            logger.warning("suggestion_output_job_unmatched company=%s", entry.company)
            continue
        bullets = resume.experience[job_index].bullet_points
        for bullet in entry.suggested_bullets:
            if bullet.original not in bullets:
                logger.warning("suggestion_output_bullet_unmatched job_index=%s", job_index)
                continue
            suggested = bullet.suggested.strip() or NO_CHANGES_SENTINEL
            if suggested == bullet.original:
                suggested = NO_CHANGES_SENTINEL
            suggestions.append(
                Suggestion(
                    id=uuid.uuid4().hex,
                    section="experience",
                    item_index=job_index,
                    suggestion_type="bullet_rewrite",
                    original_text=bullet.original,
                    suggested_text=suggested,
                    reasoning=_reasoning(bullet),
                )
            )
    return suggestions
