"""
Draw Intelligence

Trend analysis, next-cutoff prediction, score comparison and alerts over
historical admission rounds. Record lists are ordered most recent first;
index 0 is the latest round.
"""

import logging
import math
from collections import OrderedDict
from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

from .contracts import (
    AlertType,
    BilingualText,
    CategoryChance,
    DrawAlert,
    DrawPrediction,
    HistoricalDrawRecord,
    Level,
    TrendAnalysis,
    TrendDirection,
    UserDrawComparison,
)
from .constants import (
    DRAW_WINDOW_SIZE,
    DRAW_CADENCE_DAYS,
    TREND_SLOPE_SCALE,
    TREND_STRENGTH_LIMIT,
    TREND_STABLE_THRESHOLD,
    TREND_ALERT_THRESHOLD,
    VARIANCE_HIGH_CONFIDENCE,
    VARIANCE_MEDIUM_CONFIDENCE,
    VARIANCE_UNCERTAINTY_FACTOR,
    LIMITED_DATA_RECORDS,
    MIN_RECORDS_FOR_PREDICTION,
    PLAUSIBLE_CUTOFF_MIN,
    PLAUSIBLE_CUTOFF_MAX,
    DEFAULT_PREDICTED_CUTOFF,
    DEFAULT_RANGE_MIN,
    DEFAULT_RANGE_MAX,
    ALMOST_QUALIFYING_GAP,
)


logger = logging.getLogger(__name__)

CHANCE_ORDER = {"high": 0, "medium": 1, "low": 2}


def round_half_up(value: float) -> int:
    """Round .5 towards +infinity (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


def filter_records(
    records: Sequence[HistoricalDrawRecord],
    category_filter: Optional[str] = None,
) -> List[HistoricalDrawRecord]:
    """Case-insensitive substring match on the program label."""
    if not category_filter:
        return list(records)
    needle = category_filter.lower()
    return [r for r in records if needle in r.program_label.lower()]


def recent_window(
    records: Sequence[HistoricalDrawRecord],
    category_filter: Optional[str] = None,
) -> List[HistoricalDrawRecord]:
    return filter_records(records, category_filter)[:DRAW_WINDOW_SIZE]


def calculate_trend(values: Sequence[float]) -> Tuple[str, float]:
    """
    Least-squares slope of value against index, scaled into [-100, 100].

    Index 0 is the most recent value.

    Returns:
        (direction, strength)
    """
    n = len(values)
    if n < 2:
        return TrendDirection.STABLE.value, 0.0

    sum_x = n * (n - 1) / 2
    sum_y = sum(values)
    sum_xy = sum(x * y for x, y in enumerate(values))
    sum_x2 = n * (n - 1) * (2 * n - 1) / 6

    slope = (n * sum_xy - sum_x * sum_y) / (n * sum_x2 - sum_x * sum_x)
    strength = max(-TREND_STRENGTH_LIMIT, min(TREND_STRENGTH_LIMIT, slope * TREND_SLOPE_SCALE))

    if strength > TREND_STABLE_THRESHOLD:
        direction = TrendDirection.UP
    elif strength < -TREND_STABLE_THRESHOLD:
        direction = TrendDirection.DOWN
    else:
        direction = TrendDirection.STABLE
    return direction.value, float(strength)


def population_variance(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    mean = sum(values) / len(values)
    return sum((v - mean) ** 2 for v in values) / len(values)


# =============================================================================
# ANALYSIS
# =============================================================================

def analyze(
    records: Sequence[HistoricalDrawRecord],
    category_filter: Optional[str] = None,
) -> TrendAnalysis:
    """
    Aggregate statistics and trend over the most recent rounds.

    Args:
        records: rounds, most recent first
        category_filter: optional case-insensitive substring of the program label

    Returns:
        TrendAnalysis over at most the 10 most recent matching rounds
    """
    window = recent_window(records, category_filter)
    if not window:
        return TrendAnalysis()

    cutoffs = [r.cutoff_score for r in window]
    invitations = [r.invitations_issued for r in window]
    direction, strength = calculate_trend(cutoffs)

    return TrendAnalysis(
        average_cutoff=round_half_up(sum(cutoffs) / len(cutoffs)),
        lowest_cutoff=min(cutoffs),
        highest_cutoff=max(cutoffs),
        average_invitations=round_half_up(sum(invitations) / len(invitations)),
        total_invitations=sum(invitations),
        record_count=len(window),
        trend_direction=direction,
        trend_strength=strength,
    )


# =============================================================================
# PREDICTION
# =============================================================================

def _default_prediction(today: date, available: int) -> DrawPrediction:
    logger.warning(
        f"⚠️ Only {available} historical round(s) available - returning default prediction"
    )
    return DrawPrediction(
        predicted_cutoff=DEFAULT_PREDICTED_CUTOFF,
        confidence_level=Level.LOW,
        predicted_date=today + timedelta(days=DRAW_CADENCE_DAYS),
        range_min=DEFAULT_RANGE_MIN,
        range_max=DEFAULT_RANGE_MAX,
        factors=["Not enough historical data available for prediction"],
    )


def predict(
    records: Sequence[HistoricalDrawRecord],
    category_filter: Optional[str] = None,
    now: Optional[date] = None,
) -> DrawPrediction:
    """
    Predict the next cutoff from a recency-weighted average nudged by the trend.

    Args:
        records: rounds, most recent first
        category_filter: optional case-insensitive substring of the program label
        now: reference date (defaults to today)

    Returns:
        DrawPrediction. rangeMin/rangeMax are clamped to the plausible band
        independently, so the point estimate can fall outside its own range.
    """
    today = now or date.today()
    window = recent_window(records, category_filter)
    if len(window) < MIN_RECORDS_FOR_PREDICTION:
        return _default_prediction(today, len(window))

    analysis = analyze(records, category_filter)
    cutoffs = [r.cutoff_score for r in window]

    size = len(window)
    weights = [size - index for index in range(size)]
    weighted = sum(c * w for c, w in zip(cutoffs, weights)) / sum(weights)
    predicted = round_half_up(weighted)

    nudge = round_half_up(abs(analysis.trend_strength) / 10)
    if analysis.trend_direction == TrendDirection.UP:
        predicted += nudge
    elif analysis.trend_direction == TrendDirection.DOWN:
        predicted -= nudge

    variance = population_variance(cutoffs)
    if variance < VARIANCE_HIGH_CONFIDENCE:
        confidence = Level.HIGH
    elif variance < VARIANCE_MEDIUM_CONFIDENCE:
        confidence = Level.MEDIUM
    else:
        confidence = Level.LOW

    days_since_last = (today - window[0].draw_date).days
    predicted_date = today + timedelta(days=max(0, DRAW_CADENCE_DAYS - days_since_last))

    factors: List[str] = []
    if analysis.trend_direction == TrendDirection.UP:
        factors.append("Cutoffs have been increasing recently")
    elif analysis.trend_direction == TrendDirection.DOWN:
        factors.append("Cutoffs have been decreasing recently")
    if variance > VARIANCE_UNCERTAINTY_FACTOR:
        factors.append("High variance in recent rounds adds uncertainty")
    if size < LIMITED_DATA_RECORDS:
        factors.append("Limited recent data for this round type")

    std_dev = math.sqrt(variance)
    return DrawPrediction(
        predicted_cutoff=predicted,
        confidence_level=confidence,
        predicted_date=predicted_date,
        range_min=max(PLAUSIBLE_CUTOFF_MIN, round_half_up(predicted - std_dev)),
        range_max=min(PLAUSIBLE_CUTOFF_MAX, round_half_up(predicted + std_dev)),
        factors=factors,
    )


# =============================================================================
# COMPARISON
# =============================================================================

def _category_chances(user_score: int, records: Sequence[HistoricalDrawRecord]) -> List[CategoryChance]:
    by_label: Dict[str, List[int]] = OrderedDict()
    for record in records:
        by_label.setdefault(record.program_label, []).append(record.cutoff_score)

    chances = []
    for label, cutoffs in by_label.items():
        average = round_half_up(sum(cutoffs) / len(cutoffs))
        minimum = min(cutoffs)
        if user_score >= average:
            chance = Level.HIGH
        elif user_score >= minimum:
            chance = Level.MEDIUM
        else:
            chance = Level.LOW
        chances.append(CategoryChance(
            category=label, average_cutoff=average, minimum_cutoff=minimum, chance=chance
        ))

    return sorted(chances, key=lambda c: (CHANCE_ORDER[c.chance], c.average_cutoff))


def compare(user_score: int, records: Sequence[HistoricalDrawRecord]) -> UserDrawComparison:
    """
    Compare a score with every supplied round.

    A round qualifies when user_score >= its cutoff. average_gap is the mean
    of (cutoff - user_score), so a negative gap means the score is above
    the typical cutoff.
    """
    if not records:
        return UserDrawComparison(user_score=user_score, would_qualify_now=False)

    matching = [r for r in records if user_score >= r.cutoff_score]
    gaps = [r.cutoff_score - user_score for r in records]

    return UserDrawComparison(
        user_score=user_score,
        would_qualify_now=bool(matching),
        matching_records=matching,
        average_gap=round_half_up(sum(gaps) / len(gaps)),
        percentile=round_half_up(len(matching) / len(records) * 100),
        per_category_chance=_category_chances(user_score, records),
    )


# =============================================================================
# ALERTS
# =============================================================================

def alerts(
    user_score: int,
    records: Sequence[HistoricalDrawRecord],
    now: Optional[date] = None,
) -> List[DrawAlert]:
    """
    Rule-based alerts, in a fixed order. The next-round prediction is always last.
    """
    comparison = compare(user_score, records)
    analysis = analyze(records)
    prediction = predict(records, now=now)

    result: List[DrawAlert] = []

    if not comparison.would_qualify_now and comparison.average_gap < ALMOST_QUALIFYING_GAP and records:
        gap = abs(comparison.average_gap)
        result.append(DrawAlert(
            type=AlertType.OPPORTUNITY,
            title=BilingualText(en="Almost There!", ar="على وشك التأهل!"),
            message=BilingualText(
                en=f"You're only {gap} points away from qualifying for recent rounds. Consider improving your score.",
                ar=f"أنت على بعد {gap} نقطة فقط من التأهل للسحوبات الأخيرة. فكر في تحسين نقاطك.",
            ),
            priority=Level.HIGH,
        ))

    strong_trend = abs(analysis.trend_strength) > TREND_ALERT_THRESHOLD
    if analysis.trend_direction == TrendDirection.DOWN and strong_trend:
        result.append(DrawAlert(
            type=AlertType.OPPORTUNITY,
            title=BilingualText(en="Cutoffs Dropping", ar="انخفاض حدود CRS"),
            message=BilingualText(
                en="Recent round cutoffs have been decreasing. This might be a good time to prepare your application.",
                ar="حدود السحب الأخيرة في انخفاض. قد يكون هذا وقتًا جيدًا لإعداد طلبك.",
            ),
            priority=Level.MEDIUM,
        ))
    if analysis.trend_direction == TrendDirection.UP and strong_trend:
        result.append(DrawAlert(
            type=AlertType.WARNING,
            title=BilingualText(en="Cutoffs Rising", ar="ارتفاع حدود CRS"),
            message=BilingualText(
                en="Recent round cutoffs have been increasing. Consider improving your score soon.",
                ar="حدود السحب الأخيرة في ارتفاع. فكر في تحسين نقاطك قريبًا.",
            ),
            priority=Level.MEDIUM,
        ))

    high_chance = [c.category for c in comparison.per_category_chance if c.chance == Level.HIGH]
    if high_chance and not comparison.would_qualify_now:
        names = ", ".join(high_chance[:2])
        result.append(DrawAlert(
            type=AlertType.INFO,
            title=BilingualText(en="Category-Based Round Opportunity", ar="فرصة السحب القائم على الفئة"),
            message=BilingualText(
                en=f"You have a high chance in category-based rounds: {names}",
                ar=f"لديك فرصة عالية في السحوبات القائمة على الفئة: {names}",
            ),
            priority=Level.MEDIUM,
        ))

    when = prediction.predicted_date.isoformat()
    span = f"{prediction.range_min}-{prediction.range_max}"
    result.append(DrawAlert(
        type=AlertType.INFO,
        title=BilingualText(en="Next Round Prediction", ar="توقع السحب القادم"),
        message=BilingualText(
            en=f"Next round expected around {when} with a cutoff of ~{prediction.predicted_cutoff} (range: {span})",
            ar=f"السحب القادم متوقع حوالي {when} مع حد ~{prediction.predicted_cutoff} (المدى: {span})",
        ),
        priority=Level.LOW,
    ))
    return result
