from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, Sequence

from resumefit.core.errors import InputValidationError
from resumefit.schemas.resume import ParsedResume
from resumefit.schemas.suggestions import (
    NO_CHANGES_SENTINEL,
    DiffEntry,
    MergeResult,
    MergeWarning,
    Suggestion,
)

logger = logging.getLogger(__name__)

NOT_FOUND_REASON = "not found"

_JOB_FIELDS = ("title", "company", "dates")
_EDUCATION_FIELDS = ("degree", "institution", "dates", "gpa")
_FORMAT_FIELDS = ("summary", "contact", "other")


def _sort_key(suggestion: Suggestion) -> datetime:
    created = suggestion.created_at
    if created.tzinfo is None:
        return created.replace(tzinfo=timezone.utc)
    return created


def _replace_in_list(values: list[str], original: str, suggested: str) -> bool:
    for index, value in enumerate(values):
        if value == original:
            values[index] = suggested
            return True
    return False


def _replace_text(current: str | None, original: str, suggested: str) -> str | None:
    """Return the new text when ``original`` is the whole value or one whole line of it."""
    if current is None:
        return None
    if current == original:
        return suggested
    lines = current.splitlines(keepends=True)
    for index, line in enumerate(lines):
        body = line.rstrip("\r\n")
        if body == original:
            lines[index] = suggested + line[len(body):]
            return "".join(lines)
    return None


def _replace_field(target: object, fields: Iterable[str], original: str, suggested: str) -> bool:
    for name in fields:
        if getattr(target, name) == original:
            setattr(target, name, suggested)
            return True
    return False


def _select(items: list, item_index: int | None) -> list:
    if item_index is None:
        return items
    if 0 <= item_index < len(items):
        return [items[item_index]]
    return []


def _apply(resume: ParsedResume, suggestion: Suggestion) -> bool:
    original = suggestion.original_text
    suggested = suggestion.suggested_text
    if not original:
        return False

    section = suggestion.section
    if section == "experience":
        for job in _select(resume.experience, suggestion.item_index):
            if _replace_in_list(job.bullet_points, original, suggested):
                return True
            if _replace_field(job, _JOB_FIELDS, original, suggested):
                return True
        return False

    if section == "education":
        return any(
            _replace_field(entry, _EDUCATION_FIELDS, original, suggested)
            for entry in _select(resume.education, suggestion.item_index)
        )

    if section == "skills":
        for skill in _select(resume.skills, suggestion.item_index):
            if skill.name == original:
                skill.name = suggested
                return True
        return False

    if section == "projects":
        updated = _replace_text(resume.projects, original, suggested)
        if updated is None:
            return False
        resume.projects = updated
        return True

    if section == "format":
        for name in _FORMAT_FIELDS:
            updated = _replace_text(getattr(resume, name), original, suggested)
            if updated is not None:
                setattr(resume, name, updated)
                return True
        return False

    return False


def merge_accepted_suggestions(
    resume: ParsedResume | None, suggestions: Sequence[Suggestion] | None
) -> MergeResult:
    """Apply accepted suggestions to a copy of ``resume`` in creation order.

    Each suggestion replaces the value that exactly equals its
    ``original_text`` inside the addressed section and item. Targets that no
    longer exist (including text rewritten by an earlier suggestion) are
    skipped with a warning; the batch never aborts. The input is not mutated.
    """
    if resume is None:
        raise InputValidationError(detail="resume is missing")
    if suggestions is None:
        raise InputValidationError(detail="suggestions are missing")

    merged = resume.model_copy(deep=True)
    accepted = sorted((s for s in suggestions if s.status == "accepted"), key=_sort_key)

    applied = skipped = noop = 0
    warnings: list[MergeWarning] = []
    diffs: list[DiffEntry] = []

    for suggestion in accepted:
        if suggestion.suggested_text.strip() == NO_CHANGES_SENTINEL:
            noop += 1
            continue

        if _apply(merged, suggestion):
            applied += 1
            diffs.append(
                DiffEntry(
                    suggestion_id=suggestion.id,
                    section=suggestion.section,
                    item_index=suggestion.item_index,
                    original=suggestion.original_text,
                    suggested=suggestion.suggested_text,
                )
            )
        else:
            skipped += 1
            warnings.append(MergeWarning(suggestion_id=suggestion.id, reason=NOT_FOUND_REASON))
            logger.info(
                "merge_suggestion_skipped id=%s section=%s item_index=%s",
                suggestion.id,
                suggestion.section,
                suggestion.item_index,
            )

    logger.info(
        "merge_completed accepted=%s applied=%s skipped=%s noop=%s",
        len(accepted),
        applied,
        skipped,
        noop,
    )
    return MergeResult(
        merged_content=merged,
        applied_count=applied,
        skipped_count=skipped,
        noop_count=noop,
        warnings=warnings,
        diffs=diffs,
    )
