from __future__ import annotations

import re
from typing import Literal, Sequence

from resumefit.schemas.scoring import ActionPriority, ContentQualityResult
from resumefit.scoring.constants import (
    CONTENT_QUALITY_WEIGHTS,
    MODERATE_ACTION_VERBS,
    QUANTIFICATION_PATTERNS,
    STRONG_ACTION_VERBS,
    TIER_POINTS,
    WEAK_ACTION_VERBS,
    WEAK_VERB_PHRASES,
)
from resumefit.scoring.utils import round_half_up

JobType = Literal["coop", "fulltime"]
VerbStrength = Literal["strong", "moderate", "weak", "unknown"]

_TIER_RANK = {"high": 3, "medium": 2, "low": 1}
_NON_ALPHA_RE = re.compile(r"[^a-z]")


def extract_quantifications(text: str) -> list[tuple[str, str, str]]:
    """Return ``(matched_text, tier, kind)`` for every pattern that hits ``text``."""
    found: list[tuple[str, str, str]] = []
    for pattern, tier, kind in QUANTIFICATION_PATTERNS:
        match = pattern.search(text)
        if match:
            found.append((match.group(0), tier, kind))
    return found


def classify_action_verb(bullet: str) -> VerbStrength:
    trimmed = bullet.strip().lower()
    if any(trimmed.startswith(phrase) for phrase in WEAK_VERB_PHRASES):
        return "weak"

    words = trimmed.split()
    first = _NON_ALPHA_RE.sub("", words[0]) if words else ""
    if not first:
        return "unknown"
    if first in STRONG_ACTION_VERBS:
        return "strong"
    if first in MODERATE_ACTION_VERBS:
        return "moderate"
    if first in WEAK_ACTION_VERBS:
        return "weak"
    return "unknown"


def _quantification(bullets: Sequence[str]) -> tuple[int, dict[str, int], int]:
    tiers = {"high": 0, "medium": 0, "low": 0}
    points = 0.0
    with_metrics = 0
    for bullet in bullets:
        quants = extract_quantifications(bullet)
        if not quants:
            continue
        with_metrics += 1
        best = max((tier for _, tier, _ in quants), key=lambda tier: _TIER_RANK[tier])
        tiers[best] += 1
        points += TIER_POINTS[best]

    coverage = with_metrics / len(bullets)
    quality = points / with_metrics if with_metrics else 0.0
    return round_half_up((coverage * 0.6 + quality * 0.4) * 100), tiers, with_metrics


def _action_verbs(bullets: Sequence[str], job_type: JobType) -> tuple[int, dict[str, int]]:
    counts = {"strong": 0, "moderate": 0, "weak": 0}
    for bullet in bullets:
        strength = classify_action_verb(bullet)
        if strength in counts:
            counts[strength] += 1

    if job_type == "coop":
        raw = (counts["strong"] + counts["moderate"]) / len(bullets) - counts["weak"] * 0.05
    else:
        raw = (counts["strong"] + counts["moderate"] * 0.6 - counts["weak"] * 0.2) / len(bullets)
    return round_half_up(max(0.0, min(1.0, raw)) * 100), counts


def _keyword_density(bullets: Sequence[str], jd_keywords: Sequence[str]) -> tuple[int, list[str], list[str]]:
    if not jd_keywords:
        return 50, [], []
    text = " ".join(bullets).lower()
    found = [kw for kw in jd_keywords if kw.lower() in text]
    missing = [kw for kw in jd_keywords if kw.lower() not in text]
    # Half of the keywords present in bullets already earns full marks.
    ratio = min(1.0, len(found) / len(jd_keywords) / 0.5)
    return round_half_up(ratio * 100), found, missing


def calculate_content_quality(
    bullets: Sequence[str], jd_keywords: Sequence[str], job_type: JobType = "fulltime"
) -> ContentQualityResult:
    bullets = [bullet for bullet in bullets if bullet and bullet.strip()]
    if not bullets:
        return ContentQualityResult(score=0, keywords_missing=list(jd_keywords))

    quant_score, tiers, with_metrics = _quantification(bullets)
    verb_score, verbs = _action_verbs(bullets, job_type)
    density_score, found, missing = _keyword_density(bullets, jd_keywords)

    score = round_half_up(
        quant_score * CONTENT_QUALITY_WEIGHTS["quantification"]
        + verb_score * CONTENT_QUALITY_WEIGHTS["action_verbs"]
        + density_score * CONTENT_QUALITY_WEIGHTS["keyword_density"]
    )

    return ContentQualityResult(
        score=score,
        quantification_score=quant_score,
        action_verb_score=verb_score,
        keyword_density_score=density_score,
        total_bullets=len(bullets),
        bullets_with_metrics=with_metrics,
        high_tier_metrics=tiers["high"],
        medium_tier_metrics=tiers["medium"],
        low_tier_metrics=tiers["low"],
        strong_verb_count=verbs["strong"],
        moderate_verb_count=verbs["moderate"],
        weak_verb_count=verbs["weak"],
        keywords_found=found,
        keywords_missing=missing,
    )


def content_quality_action_items(result: ContentQualityResult) -> list[tuple[ActionPriority, str]]:
    items: list[tuple[ActionPriority, str]] = []
    if result.quantification_score < 40:
        items.append(
            (
                "high",
                f"Add metrics to bullets (only {result.bullets_with_metrics}/{result.total_bullets} have quantification)",
            )
        )
    if result.weak_verb_count > result.strong_verb_count:
        items.append(
            ("high", 'Replace weak verbs ("Helped", "Worked on") with strong verbs ("Led", "Developed", "Built")')
        )
    if result.low_tier_metrics > result.high_tier_metrics and result.bullets_with_metrics > 0:
        items.append(("moderate", "Upgrade metrics to higher-impact numbers ($, %, large scale)"))
    if result.keyword_density_score < 50:
        items.append(("low", "Incorporate more JD keywords into your experience bullets"))
    return items
