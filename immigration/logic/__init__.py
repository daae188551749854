"""
Assessment Logic Module

Deterministic score calculators, what-if optimization and draw intelligence
for immigration programs.
"""

from .contracts import (
    AustraliaProfile,
    CanadaProfile,
    DrawAlert,
    DrawPrediction,
    HistoricalDrawRecord,
    ImprovementAction,
    LanguageScores,
    PortugalD2Profile,
    PortugalD7Profile,
    PortugalD8Profile,
    PrioritizedAction,
    ScenarioEvaluation,
    ScoreResult,
    TrendAnalysis,
    UserDrawComparison,
    VisaMatcherInput,
    WhatIfResult,
)
from .constants import Program
from .errors import InputValidationError, RuleTableError
from .scorers import calculate_score
from .what_if import evaluate, recommend, estimate_timeline
from .engine import (
    AssessmentEngine,
    what_if,
    analyze_draws,
    predict_next_draw,
    compare_user_score,
    generate_alerts,
)
from .language_conversion import convert_to_clb
from .portugal_scorer import match_visas
from .australia_scorer import english_level_from_scores
from .draw_history import DrawHistoryStore, RECENT_DRAWS, assess_score_standing, category_slug

__all__ = [
    # Main engine
    "AssessmentEngine",
    "calculate_score",
    "what_if",
    "recommend",
    "evaluate",
    "estimate_timeline",
    "analyze_draws",
    "predict_next_draw",
    "compare_user_score",
    "generate_alerts",

    # Helpers
    "convert_to_clb",
    "match_visas",
    "english_level_from_scores",
    "DrawHistoryStore",
    "RECENT_DRAWS",
    "assess_score_standing",
    "category_slug",

    # Contracts
    "CanadaProfile",
    "AustraliaProfile",
    "PortugalD2Profile",
    "PortugalD7Profile",
    "PortugalD8Profile",
    "LanguageScores",
    "VisaMatcherInput",
    "HistoricalDrawRecord",
    "ScoreResult",
    "ImprovementAction",
    "ScenarioEvaluation",
    "WhatIfResult",
    "PrioritizedAction",
    "TrendAnalysis",
    "DrawPrediction",
    "UserDrawComparison",
    "DrawAlert",

    # Enums / errors
    "Program",
    "InputValidationError",
    "RuleTableError",
]
