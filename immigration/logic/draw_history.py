"""
Draw History

Seed dataset of recent Express Entry rounds and the read-only store that
serves it. The store never mutates records; a refresh swaps the whole
tuple in one assignment so readers always see a complete series.
"""

import logging
from datetime import date
from typing import Iterable, Optional, Sequence, Tuple

from .contracts import HistoricalDrawRecord, ScoreStanding, StandingStatus
from .constants import DRAW_CATEGORIES, GENERAL_DRAW_LABEL, STANDING_EXCELLENT_MARGIN
from .draw_intelligence import round_half_up


logger = logging.getLogger(__name__)


def _draw(day: str, label: str, label_ar: str, cutoff: int, invitations: int) -> HistoricalDrawRecord:
    return HistoricalDrawRecord(
        draw_date=date.fromisoformat(day),
        program_label=label,
        program_label_ar=label_ar,
        cutoff_score=cutoff,
        invitations_issued=invitations,
    )


# Last 10 rounds as of January 2026, most recent first
RECENT_DRAWS: Tuple[HistoricalDrawRecord, ...] = (
    _draw("2026-01-08", "All programs", "جميع البرامج", 524, 5500),
    _draw("2025-12-18", "All programs", "جميع البرامج", 519, 6000),
    _draw("2025-12-04", "French language proficiency", "إتقان اللغة الفرنسية", 336, 2000),
    _draw("2025-11-27", "All programs", "جميع البرامج", 522, 5750),
    _draw("2025-11-13", "STEM occupations", "مهن العلوم والتكنولوجيا", 481, 4500),
    _draw("2025-10-30", "All programs", "جميع البرامج", 518, 5500),
    _draw("2025-10-16", "Healthcare occupations", "المهن الصحية", 422, 3000),
    _draw("2025-10-02", "All programs", "جميع البرامج", 515, 5250),
    _draw("2025-09-18", "Provincial Nominee Program", "برنامج ترشيح المقاطعات", 732, 1500),
    _draw("2025-09-04", "All programs", "جميع البرامج", 512, 5000),
)


class DrawHistoryStore:
    """Holds an immutable, most-recent-first tuple of rounds."""

    def __init__(self, records: Iterable[HistoricalDrawRecord] = RECENT_DRAWS):
        self._records: Tuple[HistoricalDrawRecord, ...] = self._ordered(records)

    @staticmethod
    def _ordered(records: Iterable[HistoricalDrawRecord]) -> Tuple[HistoricalDrawRecord, ...]:
        return tuple(sorted(records, key=lambda r: r.draw_date, reverse=True))

    @property
    def records(self) -> Tuple[HistoricalDrawRecord, ...]:
        return self._records

    def replace(self, records: Iterable[HistoricalDrawRecord]) -> None:
        """Swap in a new series. Readers holding the old tuple are unaffected."""
        new_records = self._ordered(records)
        self._records = new_records
        logger.info(f"✅ Draw history replaced ({len(new_records)} rounds)")


default_store = DrawHistoryStore()


def category_slug(program_label: str) -> str:
    """Short slug for a program label, "other" when the label is unknown."""
    return DRAW_CATEGORIES.get(program_label, "other")


def assess_score_standing(
    score: int,
    records: Optional[Sequence[HistoricalDrawRecord]] = None,
) -> ScoreStanding:
    """
    Place a score against the general (all-program) rounds.

    Args:
        score: CRS score
        records: rounds, most recent first (defaults to the store's series)

    Returns:
        ScoreStanding: excellent (20+ above average), good (>= average),
        competitive (>= lowest) or needs_improvement with points_needed
    """
    records = default_store.records if records is None else records
    general = [r for r in records if r.program_label == GENERAL_DRAW_LABEL]
    qualified = [r for r in records if score >= r.cutoff_score]
    qualified_general = [r for r in general if score >= r.cutoff_score]

    if not general:
        return ScoreStanding(
            status=StandingStatus.NEEDS_IMPROVEMENT,
            average_cutoff=0,
            lowest_cutoff=0,
            qualified_records_count=len(qualified),
            qualified_general_count=0,
            total_records=len(records),
            total_general_records=0,
        )

    cutoffs = [r.cutoff_score for r in general]
    average = round_half_up(sum(cutoffs) / len(cutoffs))
    lowest = min(cutoffs)

    points_needed = 0
    if score >= average + STANDING_EXCELLENT_MARGIN:
        status = StandingStatus.EXCELLENT
    elif score >= average:
        status = StandingStatus.GOOD
    elif score >= lowest:
        status = StandingStatus.COMPETITIVE
    else:
        status = StandingStatus.NEEDS_IMPROVEMENT
        points_needed = lowest - score

    return ScoreStanding(
        status=status,
        average_cutoff=average,
        lowest_cutoff=lowest,
        most_recent_record=general[0],
        qualified_records_count=len(qualified),
        qualified_general_count=len(qualified_general),
        total_records=len(records),
        total_general_records=len(general),
        points_needed=points_needed,
        points_above_average=score - average,
    )
