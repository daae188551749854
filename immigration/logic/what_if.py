"""
What-If Engine

Evaluates a catalog of improvement actions against a profile:
marginal gain per action, best single action, and the combined maximum
score reached by folding every compatible action onto one profile copy.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Set

from pydantic import BaseModel

from .contracts import (
    ImprovementAction,
    Level,
    Milestone,
    PrioritizedAction,
    ScenarioEvaluation,
    ScoreResult,
    TimelineEstimate,
    WhatIfResult,
    BilingualText,
)
from .constants import (
    DEFAULT_TARGET_SCORE,
    MAX_RECOMMENDATIONS,
    QUICK_WIN_MAX_MONTHS,
    SIGNIFICANT_GAIN_POINTS,
    EXPRESS_ENTRY_PROCESSING_MONTHS,
    ITA_WAIT_BANDS,
)


logger = logging.getLogger(__name__)

Calculator = Callable[[Any], ScoreResult]


def evaluate_action(
    profile: BaseModel,
    action: ImprovementAction,
    calculator: Calculator,
    current_score: int,
) -> ScenarioEvaluation:
    """Check one action's precondition and score the transformed copy."""
    reason = action.precondition(profile)
    if reason is not None:
        return ScenarioEvaluation(
            action=action,
            new_score=current_score,
            points_gain=0,
            is_applicable=False,
            reason=reason,
        )

    new_score = calculator(action.apply(profile)).total_score
    return ScenarioEvaluation(
        action=action,
        new_score=new_score,
        points_gain=new_score - current_score,
        is_applicable=True,
    )


def _ranked_gains(scenarios: List[ScenarioEvaluation]) -> List[ScenarioEvaluation]:
    """Applicable positive-gain scenarios, highest gain first (stable for ties)."""
    gaining = [s for s in scenarios if s.is_applicable and s.points_gain > 0]
    return sorted(gaining, key=lambda s: s.points_gain, reverse=True)


def combined_max_score(
    profile: BaseModel,
    ranked: List[ScenarioEvaluation],
    calculator: Calculator,
) -> int:
    """
    Fold every compatible action onto one profile copy and score once.

    Actions flagged requires_external_approval are left out, and only the first
    action of each exclusive_group (in ranked order) is applied. Only
    positive-gain actions are folded, so the result is never below current_score.
    """
    working = profile
    used_groups: Set[str] = set()
    for scenario in ranked:
        action = scenario.action
        if action.requires_external_approval:
            continue
        if action.exclusive_group is not None:
            if action.exclusive_group in used_groups:
                continue
            used_groups.add(action.exclusive_group)
        working = action.apply(working)

    return calculator(working).total_score


def evaluate(
    profile: BaseModel,
    calculator: Calculator,
    catalog: Dict[str, ImprovementAction],
    program: str = "",
) -> WhatIfResult:
    """
    Run every catalog action against the profile.

    Args:
        profile: validated profile (never mutated)
        calculator: scorer for the profile's program
        catalog: improvement actions keyed by id
        program: program value echoed on the result

    Returns:
        WhatIfResult with per-action scenarios, best scenario and combined max
    """
    current_score = calculator(profile).total_score
    scenarios = [
        evaluate_action(profile, action, calculator, current_score)
        for action in catalog.values()
    ]

    ranked = _ranked_gains(scenarios)
    best: Optional[ImprovementAction] = next(
        (s.action for s in ranked if not s.action.requires_external_approval),
        None,
    )
    combined = combined_max_score(profile, ranked, calculator)

    logger.info(
        f"🔍 What-if: {len(ranked)}/{len(scenarios)} actions gain points "
        f"(current {current_score}, combined max {combined})"
    )

    return WhatIfResult(
        program=program,
        current_score=current_score,
        scenarios=scenarios,
        best_scenario=best,
        combined_max_score=combined,
    )


def efficiency(scenario: ScenarioEvaluation) -> float:
    return scenario.points_gain / scenario.action.timeline_months


def _priority(scenario: ScenarioEvaluation, gap: int, target_score: int):
    action = scenario.action
    gain = scenario.points_gain
    if gain >= gap:
        return Level.HIGH, f"Could help you reach target score of {target_score}"
    if action.difficulty == "easy" or action.timeline_months <= QUICK_WIN_MAX_MONTHS:
        return Level.HIGH, "Quick win with relatively low effort"
    if gain >= SIGNIFICANT_GAIN_POINTS:
        return Level.MEDIUM, f"Significant point boost of +{gain}"
    return Level.LOW, f"Moderate improvement of +{gain}"


def recommend(
    result: WhatIfResult,
    target_score: int = DEFAULT_TARGET_SCORE,
) -> List[PrioritizedAction]:
    """
    Greedy recommendation list ordered by points per month.

    Args:
        result: output of evaluate()
        target_score: score the applicant is aiming for

    Returns:
        At most five actions, sorted by non-increasing efficiency
    """
    gap = target_score - result.current_score
    candidates = sorted(_ranked_gains(result.scenarios), key=efficiency, reverse=True)

    recommendations = []
    for scenario in candidates[:MAX_RECOMMENDATIONS]:
        priority, reason = _priority(scenario, gap, target_score)
        recommendations.append(PrioritizedAction(
            action=scenario.action,
            points_gain=scenario.points_gain,
            efficiency=efficiency(scenario),
            priority=priority,
            reason=reason,
        ))
    return recommendations


def estimate_timeline(score: int, has_provincial_nomination: bool = False) -> TimelineEstimate:
    """
    Rough Express Entry timeline from the current CRS score.

    Args:
        score: current CRS score
        has_provincial_nomination: nominees are invited almost immediately

    Returns:
        TimelineEstimate with months to COPR and intermediate milestones
    """
    if has_provincial_nomination:
        wait_months, confidence = 1, "high"
    else:
        wait_months, confidence = ITA_WAIT_BANDS[-1][1], ITA_WAIT_BANDS[-1][2]
        for minimum, months, band_confidence in ITA_WAIT_BANDS:
            if score >= minimum:
                wait_months, confidence = months, band_confidence
                break

    factors: List[str] = []
    if score < 450:
        factors.append("Score below recent cutoffs - consider score improvement")
    if has_provincial_nomination:
        factors.append("Provincial nomination provides significant advantage")

    processing = EXPRESS_ENTRY_PROCESSING_MONTHS
    milestones = [
        Milestone(title=BilingualText(en="Receive ITA", ar="استلام الدعوة للتقديم"),
                  months_from_now=wait_months),
        Milestone(title=BilingualText(en="Submit application", ar="تقديم الطلب"),
                  months_from_now=wait_months + 1),
        Milestone(title=BilingualText(en="Application processing", ar="معالجة الطلب"),
                  months_from_now=wait_months + processing),
        Milestone(title=BilingualText(en="Receive COPR", ar="استلام تأكيد الإقامة الدائمة"),
                  months_from_now=wait_months + processing + 1),
    ]

    return TimelineEstimate(
        estimated_months=wait_months + processing + 1,
        confidence=confidence,
        factors=factors,
        milestones=milestones,
    )
