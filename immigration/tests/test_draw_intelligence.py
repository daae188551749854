"""
Tests for draw trend analysis, cutoff prediction, score comparison and alerts.
"""

from datetime import date, timedelta

import pytest

from immigration.logic import (
    HistoricalDrawRecord,
    analyze_draws,
    compare_user_score,
    generate_alerts,
    predict_next_draw,
)
from immigration.logic.draw_history import RECENT_DRAWS
from immigration.logic.draw_intelligence import calculate_trend, round_half_up


TODAY = date(2026, 1, 10)


def make_records(cutoffs, labels=None, last_draw=date(2026, 1, 7)):
    """Records two weeks apart, most recent first."""
    labels = labels or ["All programs"] * len(cutoffs)
    return [
        HistoricalDrawRecord(
            draw_date=last_draw - timedelta(days=14 * index),
            program_label=label,
            cutoff_score=cutoff,
            invitations_issued=5000,
        )
        for index, (cutoff, label) in enumerate(zip(cutoffs, labels))
    ]


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(-2.5) == -2
    assert round_half_up(-24.75) == -25
    assert round_half_up(518.33) == 518


# =============================================================================
# ANALYSIS
# =============================================================================

def test_nearly_flat_window_is_not_rising():
    analysis = analyze_draws(make_records([520, 519, 522, 518, 515]))

    assert analysis.trend_direction in ("stable", "down")
    assert analysis.trend_strength == pytest.approx(-11.0)
    assert analysis.average_cutoff == 519
    assert analysis.lowest_cutoff == 515
    assert analysis.highest_cutoff == 522
    assert analysis.total_invitations == 25000
    assert analysis.record_count == 5


def test_trend_is_deterministic():
    records = make_records([524, 519, 336, 522, 481, 518])
    first = analyze_draws(records)
    second = analyze_draws(records)

    assert (first.trend_direction, first.trend_strength) == (second.trend_direction, second.trend_strength)


def test_trend_strength_is_clamped():
    direction, strength = calculate_trend([500, 600, 700])
    assert direction == "up"
    assert strength == 100.0

    assert calculate_trend([480]) == ("stable", 0.0)


def test_analysis_uses_ten_most_recent_rounds():
    records = make_records([500 + i for i in range(12)])
    analysis = analyze_draws(records)

    assert analysis.record_count == 10
    assert analysis.highest_cutoff == 509


def test_analysis_category_filter_is_case_insensitive():
    analysis = analyze_draws(list(RECENT_DRAWS), category_filter="stem")

    assert analysis.record_count == 1
    assert analysis.average_cutoff == 481
    assert analysis.trend_direction == "stable"


def test_analysis_of_nothing():
    analysis = analyze_draws([])

    assert analysis.record_count == 0
    assert analysis.average_cutoff == 0
    assert analysis.trend_direction == "stable"
    assert analysis.trend_strength == 0


# =============================================================================
# PREDICTION
# =============================================================================

def test_prediction_from_weighted_window():
    prediction = predict_next_draw(make_records([520, 519, 522, 518, 515]), now=TODAY)

    assert prediction.predicted_cutoff == 519
    assert prediction.confidence_level == "high"
    assert prediction.predicted_date == date(2026, 1, 21)
    assert (prediction.range_min, prediction.range_max) == (517, 521)
    assert prediction.factors == ["Cutoffs have been decreasing recently"]


def test_prediction_date_never_in_the_past():
    records = make_records([500, 505], last_draw=TODAY - timedelta(days=30))
    assert predict_next_draw(records, now=TODAY).predicted_date == TODAY


def test_prediction_variance_lowers_confidence():
    prediction = predict_next_draw(make_records([524, 336, 522, 481, 518]), now=TODAY)

    assert prediction.confidence_level == "low"
    assert "High variance in recent rounds adds uncertainty" in prediction.factors


def test_moderate_variance_gives_medium_confidence():
    # variance 125
    prediction = predict_next_draw(make_records([500, 520, 490, 510]), now=TODAY)

    assert prediction.confidence_level == "medium"
    assert "High variance in recent rounds adds uncertainty" not in prediction.factors


def test_default_prediction_with_thin_history():
    for records in ([], make_records([510])):
        prediction = predict_next_draw(records, now=TODAY)
        assert prediction.predicted_cutoff == 480
        assert prediction.confidence_level == "low"
        assert prediction.predicted_date == TODAY + timedelta(days=14)
        assert (prediction.range_min, prediction.range_max) == (450, 520)
        assert prediction.factors == ["Not enough historical data available for prediction"]


def test_range_clamped_independently_of_point_estimate():
    # Rounds above the plausible band: the estimate sits above its own range
    high = predict_next_draw(make_records([700, 700]), now=TODAY)
    assert high.predicted_cutoff == 700
    assert high.range_max == 600
    assert high.range_min == 700
    assert not high.range_min <= high.predicted_cutoff <= high.range_max

    low = predict_next_draw(make_records([350, 350]), now=TODAY)
    assert low.predicted_cutoff == 350
    assert (low.range_min, low.range_max) == (400, 350)
    assert "Limited recent data for this round type" in low.factors


# =============================================================================
# COMPARISON
# =============================================================================

MIXED_CUTOFFS = [524, 519, 336, 522]
MIXED_LABELS = ["All programs", "All programs", "French language proficiency", "All programs"]


def test_compare_qualifies_on_equal_or_higher_score():
    records = make_records(MIXED_CUTOFFS, MIXED_LABELS)

    comparison = compare_user_score(500, records)
    assert comparison.would_qualify_now is True
    assert [r.cutoff_score for r in comparison.matching_records] == [336]
    assert comparison.percentile == 25
    assert comparison.average_gap == -25

    comparison = compare_user_score(519, records)
    assert [r.cutoff_score for r in comparison.matching_records] == [519, 336]
    assert comparison.percentile == 50


def test_compare_per_category_chance():
    comparison = compare_user_score(520, make_records(MIXED_CUTOFFS, MIXED_LABELS))
    chances = [(c.category, c.chance, c.average_cutoff, c.minimum_cutoff) for c in comparison.per_category_chance]

    assert chances == [
        ("French language proficiency", "high", 336, 336),
        ("All programs", "medium", 522, 519),
    ]


def test_compare_chance_low_below_every_round():
    comparison = compare_user_score(300, make_records([500]))

    assert comparison.would_qualify_now is False
    assert [c.chance for c in comparison.per_category_chance] == ["low"]


def test_compare_without_records():
    comparison = compare_user_score(600, [])

    assert comparison.would_qualify_now is False
    assert comparison.matching_records == []
    assert comparison.percentile == 0
    assert comparison.average_gap == 0


# =============================================================================
# ALERTS
# =============================================================================

def test_alerts_almost_there_first_prediction_last():
    alerts = generate_alerts(500, make_records([511, 511, 511]), now=TODAY)

    assert [a.title.en for a in alerts] == ["Almost There!", "Next Round Prediction"]
    assert alerts[0].type == "opportunity"
    assert alerts[0].priority == "high"
    assert "11 points" in alerts[0].message.en
    assert alerts[-1].type == "info"
    assert alerts[-1].priority == "low"


def test_alerts_dropping_cutoffs():
    alerts = generate_alerts(500, make_records(MIXED_CUTOFFS, MIXED_LABELS), now=TODAY)

    assert [a.title.en for a in alerts] == ["Cutoffs Dropping", "Next Round Prediction"]
    assert alerts[0].type == "opportunity"
    assert alerts[0].priority == "medium"


def test_alerts_rising_cutoffs():
    alerts = generate_alerts(600, make_records([500, 520, 540, 560]), now=TODAY)

    assert alerts[0].title.en == "Cutoffs Rising"
    assert alerts[0].type == "warning"
    assert alerts[-1].title.en == "Next Round Prediction"


def test_alerts_without_history():
    alerts = generate_alerts(450, [], now=TODAY)

    assert len(alerts) == 1
    assert alerts[0].priority == "low"
    assert "2026-01-24" in alerts[0].message.en
    assert "(range: 450-520)" in alerts[0].message.en
