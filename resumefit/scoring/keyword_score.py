from __future__ import annotations

from typing import Sequence

from resumefit.core.config.scoring import get_scoring_value, get_weight_table
from resumefit.schemas.scoring import ActionPriority, KeywordMatchV21, KeywordScoreResult
from resumefit.scoring.constants import (
    IMPORTANCE_WEIGHTS,
    MATCH_TYPE_WEIGHTS,
    MIN_PENALTY_MULTIPLIER,
    MISSING_REQUIRED_PENALTY,
    PLACEMENT_WEIGHTS,
    PREFERRED_BONUS_CAP,
)
from resumefit.scoring.utils import round2, round_half_up


def calculate_keyword_score_v21(keywords: Sequence[KeywordMatchV21]) -> KeywordScoreResult:
    """Required keywords form the base score, preferred ones add a capped bonus.

    Each missing required keyword lowers the ceiling by a fixed penalty, floored
    at ``min_penalty_multiplier``. With no required keywords the base is 1.0.
    """
    importance = get_weight_table("keywords.importance_weights", IMPORTANCE_WEIGHTS)
    match_weights = get_weight_table("keywords.match_type_weights", MATCH_TYPE_WEIGHTS)
    placement = get_weight_table("keywords.placement_weights", PLACEMENT_WEIGHTS)
    missing_penalty = float(get_scoring_value("keywords.missing_required_penalty", MISSING_REQUIRED_PENALTY))
    min_multiplier = float(get_scoring_value("keywords.min_penalty_multiplier", MIN_PENALTY_MULTIPLIER))
    bonus_cap = float(get_scoring_value("keywords.preferred_bonus_cap", PREFERRED_BONUS_CAP))
    other_weight = placement.get("other", PLACEMENT_WEIGHTS["other"])

    required = [kw for kw in keywords if kw.requirement == "required"]
    preferred = [kw for kw in keywords if kw.requirement == "preferred"]

    required_achieved = 0.0
    required_possible = 0.0
    matched_required: list[KeywordMatchV21] = []
    missing_required: list[str] = []
    for kw in required:
        weight = importance.get(kw.importance, importance["medium"])
        required_possible += weight
        if kw.found and kw.match_type:
            place = placement.get(kw.placement, other_weight) if kw.placement else other_weight
            required_achieved += weight * match_weights[kw.match_type] * place
            matched_required.append(kw)
        else:
            missing_required.append(kw.keyword)

    required_score = required_achieved / required_possible if required_possible > 0 else 1.0
    penalty_multiplier = max(min_multiplier, 1 - len(missing_required) * missing_penalty)

    preferred_achieved = 0.0
    preferred_possible = 0.0
    matched_preferred: list[str] = []
    missing_preferred: list[str] = []
    for kw in preferred:
        weight = importance.get(kw.importance, importance["medium"])
        preferred_possible += weight
        if kw.found and kw.match_type:
            place = placement.get(kw.placement, other_weight) if kw.placement else other_weight
            preferred_achieved += weight * match_weights[kw.match_type] * place
            matched_preferred.append(kw.keyword)
        else:
            missing_preferred.append(kw.keyword)

    preferred_ratio = preferred_achieved / preferred_possible if preferred_possible > 0 else 0.0
    preferred_bonus = preferred_ratio * bonus_cap

    final = min(1.0, required_score * penalty_multiplier + preferred_bonus)

    return KeywordScoreResult(
        score=round_half_up(final * 100),
        required_score=round2(required_score),
        preferred_bonus=round2(preferred_bonus),
        penalty_multiplier=round2(penalty_multiplier),
        matched_required=[kw.keyword for kw in matched_required],
        matched_preferred=matched_preferred,
        missing_required=missing_required,
        missing_preferred=missing_preferred,
        semantic_required=[kw.keyword for kw in matched_required if kw.match_type == "semantic"],
    )


def keyword_action_items(result: KeywordScoreResult) -> list[tuple[ActionPriority, str]]:
    items: list[tuple[ActionPriority, str]] = []
    if result.missing_required:
        items.append(("critical", "Add missing REQUIRED keywords: " + ", ".join(result.missing_required[:4])))
    if result.semantic_required:
        items.append(("high", "Use exact terminology for required skills: " + ", ".join(result.semantic_required[:2])))
    if len(result.missing_preferred) > 3:
        items.append(("moderate", "Consider adding preferred keywords: " + ", ".join(result.missing_preferred[:3])))
    return items
