"""
Tests for the draw history store and score standing.
"""

from datetime import date

from immigration.logic import (
    AssessmentEngine,
    DrawHistoryStore,
    HistoricalDrawRecord,
    RECENT_DRAWS,
    assess_score_standing,
    category_slug,
)


def record(day: str, label: str, cutoff: int) -> HistoricalDrawRecord:
    return HistoricalDrawRecord(
        draw_date=date.fromisoformat(day),
        program_label=label,
        cutoff_score=cutoff,
        invitations_issued=3000,
    )


def test_seed_data_is_most_recent_first():
    dates = [r.draw_date for r in RECENT_DRAWS]
    assert len(RECENT_DRAWS) == 10
    assert dates == sorted(dates, reverse=True)


def test_store_orders_records():
    store = DrawHistoryStore([
        record("2025-11-01", "All programs", 510),
        record("2025-12-01", "All programs", 520),
    ])
    assert [r.cutoff_score for r in store.records] == [520, 510]


def test_store_replace_swaps_whole_series():
    store = DrawHistoryStore()
    snapshot = store.records

    store.replace([record("2026-02-05", "All programs", 530)])

    assert len(snapshot) == 10
    assert snapshot == RECENT_DRAWS
    assert [r.cutoff_score for r in store.records] == [530]


def test_engine_reads_its_store():
    store = DrawHistoryStore([
        record("2026-01-22", "All programs", 505),
        record("2026-01-08", "All programs", 505),
    ])
    engine = AssessmentEngine(store=store)

    assert engine.analyze_draws().record_count == 2
    assert engine.compare_user_score(505).percentile == 100
    assert engine.predict_next_draw(now=date(2026, 1, 29)).predicted_date == date(2026, 2, 5)


def test_category_slug():
    assert category_slug("STEM occupations") == "stem"
    assert category_slug("All programs") == "general"
    assert category_slug("Some new category") == "other"


def test_standing_bands():
    # General rounds: 524, 519, 522, 518, 515, 512 -> average 518, lowest 512
    excellent = assess_score_standing(540, RECENT_DRAWS)
    assert excellent.status == "excellent"
    assert excellent.average_cutoff == 518
    assert excellent.points_above_average == 22

    good = assess_score_standing(530, RECENT_DRAWS)
    assert good.status == "good"
    assert good.qualified_records_count == 9
    assert good.qualified_general_count == 6
    assert good.total_records == 10
    assert good.total_general_records == 6
    assert good.most_recent_record.cutoff_score == 524

    assert assess_score_standing(515, RECENT_DRAWS).status == "competitive"

    weak = assess_score_standing(500, RECENT_DRAWS)
    assert weak.status == "needs_improvement"
    assert weak.lowest_cutoff == 512
    assert weak.points_needed == 12


def test_standing_without_general_rounds():
    standing = assess_score_standing(400, [record("2025-12-04", "French language proficiency", 336)])

    assert standing.status == "needs_improvement"
    assert standing.average_cutoff == 0
    assert standing.most_recent_record is None
    assert standing.qualified_records_count == 1
    assert standing.total_general_records == 0
