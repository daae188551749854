"""
Assessment Engine

Facade over the score calculators, the what-if engine and draw intelligence.
This is the primary entry point for callers; it adds profile coercion and
a default draw dataset, and nothing else.
"""

import time
import logging
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import BaseModel

from .contracts import (
    DrawAlert,
    DrawPrediction,
    HistoricalDrawRecord,
    PrioritizedAction,
    ScoreResult,
    ScoreStanding,
    TrendAnalysis,
    UserDrawComparison,
    WhatIfResult,
)
from .errors import InputValidationError
from .constants import Program, DEFAULT_TARGET_SCORE
from .scorers import calculate_score, coerce_profile, resolve_program, scorer_for
from .scenarios import CATALOGS
from .what_if import evaluate, recommend
from .draw_history import DrawHistoryStore, default_store, assess_score_standing
from . import draw_intelligence


logger = logging.getLogger(__name__)

ProfileInput = Union[BaseModel, Dict[str, Any]]


class AssessmentEngine:
    """
    Main assessment engine.

    Pipeline flow:
    1. Profile coercion - dict or model, validated against the program contract
    2. Scoring - program calculator from the registry
    3. What-if - catalog evaluation and greedy recommendations
    4. Draw intelligence - trend / prediction / comparison over the store's rounds
    """

    def __init__(self, store: Optional[DrawHistoryStore] = None):
        """
        Args:
            store: draw history source. Defaults to the shared seed dataset.
        """
        self.store = store or default_store
        self.version = "1.0.0"

    def _records(self, records: Optional[Sequence[HistoricalDrawRecord]]) -> Sequence[HistoricalDrawRecord]:
        # Snapshot once so one call never mixes two series
        return self.store.records if records is None else records

    def score(self, profile: ProfileInput, program: Union[Program, str]) -> ScoreResult:
        return calculate_score(profile, program)

    def what_if(
        self,
        profile: ProfileInput,
        program: Union[Program, str],
        target_score: Optional[int] = None,
    ) -> WhatIfResult:
        """
        Evaluate the program's improvement catalog for a profile.

        With a target_score, the result also carries recommend() output for it.

        Raises:
            InputValidationError: invalid profile, or no catalog for the program
        """
        start_time = time.perf_counter()
        resolved = resolve_program(program)
        catalog = CATALOGS.get(resolved)
        if catalog is None:
            supported = ", ".join(p.value for p in CATALOGS)
            raise InputValidationError(
                f"No improvement catalog for {resolved.value}",
                [{"field": "program", "message": f"what-if supports {supported}", "type": "enum"}],
            )

        validated = coerce_profile(profile, resolved)
        result = evaluate(validated, scorer_for(resolved), catalog, program=resolved.value)
        if target_score is not None:
            result = result.model_copy(update={
                "target_score": target_score,
                "recommendations": recommend(result, target_score),
            })

        processing_time = (time.perf_counter() - start_time) * 1000
        logger.info(f"✅ What-if for {resolved.value} done in {processing_time:.2f}ms")
        return result

    def recommend(
        self,
        result: WhatIfResult,
        target_score: int = DEFAULT_TARGET_SCORE,
    ) -> List[PrioritizedAction]:
        return recommend(result, target_score)

    def analyze_draws(
        self,
        records: Optional[Sequence[HistoricalDrawRecord]] = None,
        category_filter: Optional[str] = None,
    ) -> TrendAnalysis:
        return draw_intelligence.analyze(self._records(records), category_filter)

    def predict_next_draw(
        self,
        records: Optional[Sequence[HistoricalDrawRecord]] = None,
        category_filter: Optional[str] = None,
        now: Optional[date] = None,
    ) -> DrawPrediction:
        return draw_intelligence.predict(self._records(records), category_filter, now)

    def compare_user_score(
        self,
        user_score: int,
        records: Optional[Sequence[HistoricalDrawRecord]] = None,
    ) -> UserDrawComparison:
        return draw_intelligence.compare(user_score, self._records(records))

    def generate_alerts(
        self,
        user_score: int,
        records: Optional[Sequence[HistoricalDrawRecord]] = None,
        now: Optional[date] = None,
    ) -> List[DrawAlert]:
        return draw_intelligence.alerts(user_score, self._records(records), now)

    def score_standing(
        self,
        score: int,
        records: Optional[Sequence[HistoricalDrawRecord]] = None,
    ) -> ScoreStanding:
        return assess_score_standing(score, self._records(records))


# Convenience functions for simple usage

def what_if(
    profile: ProfileInput,
    program: Union[Program, str],
    target_score: int = DEFAULT_TARGET_SCORE,
) -> WhatIfResult:
    """What-if analysis with the default engine, with recommendations for target_score."""
    return AssessmentEngine().what_if(profile, program, target_score)


def analyze_draws(
    records: Sequence[HistoricalDrawRecord],
    category_filter: Optional[str] = None,
) -> TrendAnalysis:
    return draw_intelligence.analyze(records, category_filter)


def predict_next_draw(
    records: Sequence[HistoricalDrawRecord],
    category_filter: Optional[str] = None,
    now: Optional[date] = None,
) -> DrawPrediction:
    return draw_intelligence.predict(records, category_filter, now)


def compare_user_score(
    user_score: int,
    records: Sequence[HistoricalDrawRecord],
) -> UserDrawComparison:
    return draw_intelligence.compare(user_score, records)


def generate_alerts(
    user_score: int,
    records: Sequence[HistoricalDrawRecord],
    now: Optional[date] = None,
) -> List[DrawAlert]:
    return draw_intelligence.alerts(user_score, records, now)
