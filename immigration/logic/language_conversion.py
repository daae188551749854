"""
Language test -> CLB conversion for IELTS, CELPIP, TEF Canada and TCF Canada.
"""

import math
from typing import Mapping

from .contracts import LanguageScores
from .errors import InputValidationError
from .constants import CLB_CONVERSION_BANDS, CLB_TEST_MAX_SCORES, CELPIP_MAX_CLB


SKILLS = ("speaking", "listening", "reading", "writing")
SUPPORTED_TESTS = ("ielts", "celpip", "tef", "tcf")


def _band_clb(score: float, bands) -> int:
    for minimum, clb in bands:
        if score >= minimum:
            return clb
    return 0


def _celpip_clb(score: float) -> int:
    return min(math.floor(score + 0.5), CELPIP_MAX_CLB)


def convert_to_clb(test_type: str, scores: Mapping[str, float]) -> LanguageScores:
    """
    Convert raw test sub-scores to CLB levels.

    Args:
        test_type: one of ielts, celpip, tef, tcf
        scores: raw score per skill (speaking, listening, reading, writing)

    Returns:
        LanguageScores ready for the CRS calculator
    """
    test = test_type.lower()
    if test not in SUPPORTED_TESTS:
        raise InputValidationError(
            f"Unsupported language test: {test_type}",
            [{"field": "test_type", "message": f"expected one of {', '.join(SUPPORTED_TESTS)}", "type": "enum"}],
        )

    maximums = CLB_TEST_MAX_SCORES[test]
    errors = []
    for skill in SKILLS:
        if skill not in scores:
            errors.append({"field": skill, "message": "field required", "type": "missing"})
        elif scores[skill] < 0:
            errors.append({"field": skill, "message": "score must be >= 0", "type": "greater_than_equal"})
        elif scores[skill] > maximums[skill]:
            errors.append({
                "field": skill,
                "message": f"score must be <= {maximums[skill]:g}",
                "type": "less_than_equal",
            })
    if errors:
        raise InputValidationError(f"Invalid {test} scores", errors)

    if test == "celpip":
        levels = {skill: _celpip_clb(scores[skill]) for skill in SKILLS}
    else:
        bands = CLB_CONVERSION_BANDS[test]
        levels = {skill: _band_clb(scores[skill], bands[skill]) for skill in SKILLS}
    return LanguageScores(**levels)
