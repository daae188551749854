"""
Australia Points Scorer

Skilled migration points test (subclass 189/190/491).
Every factor is an independent category; overseas and Australian
experience share one category with a combined cap of 20.
"""

from typing import Dict, List, Mapping, Tuple

from .contracts import AustraliaProfile, ScoreResult
from .errors import InputValidationError, lookup
from .constants import (
    Program,
    AUS_AGE_BANDS,
    AUS_ENGLISH_POINTS,
    AUS_OVERSEAS_EXPERIENCE_BANDS,
    AUS_AUSTRALIAN_EXPERIENCE_BANDS,
    AUS_EDUCATION_POINTS,
    AUS_PARTNER_POINTS,
    AUS_NOMINATION_POINTS,
    AUS_SPECIALIST_EDUCATION_POINTS,
    AUS_AUSTRALIAN_STUDY_POINTS,
    AUS_PROFESSIONAL_YEAR_POINTS,
    AUS_COMMUNITY_LANGUAGE_POINTS,
    AUS_REGIONAL_STUDY_POINTS,
    AUS_PASS_MARK,
    AUS_CATEGORY_CAPS,
    AUS_ENGLISH_TEST_THRESHOLDS,
)


ENGLISH_SKILLS = ("listening", "reading", "writing", "speaking")


def _band_points(years: int, bands: Tuple[Tuple[int, int], ...]) -> int:
    for minimum_years, points in bands:
        if years >= minimum_years:
            return points
    return 0


def score_age(age: int) -> int:
    for low, high, points in AUS_AGE_BANDS:
        if low <= age <= high:
            return points
    # 45 and over
    return 0


def score_experience(profile: AustraliaProfile) -> Tuple[int, int]:
    """Return (overseas points, Australian points) before the combined cap."""
    return (
        _band_points(profile.overseas_work_years, AUS_OVERSEAS_EXPERIENCE_BANDS),
        _band_points(profile.australian_work_years, AUS_AUSTRALIAN_EXPERIENCE_BANDS),
    )


def calculate_australia_points(profile: AustraliaProfile) -> ScoreResult:
    """
    Calculate Australian skilled migration points.

    Args:
        profile: Australia applicant profile

    Returns:
        ScoreResult with one breakdown entry per points-test factor
    """
    overseas, australian = score_experience(profile)

    raw: Dict[str, int] = {
        "age": score_age(profile.age),
        "english": lookup("aus_english", AUS_ENGLISH_POINTS, profile.english_level),
        "experience": overseas + australian,
        "education": lookup("aus_education", AUS_EDUCATION_POINTS, profile.education_level),
        "specialist_education": AUS_SPECIALIST_EDUCATION_POINTS if profile.specialist_education else 0,
        "australian_study": AUS_AUSTRALIAN_STUDY_POINTS if profile.australian_study else 0,
        "professional_year": AUS_PROFESSIONAL_YEAR_POINTS if profile.professional_year else 0,
        "community_language": (
            AUS_COMMUNITY_LANGUAGE_POINTS if profile.credentialled_community_language else 0
        ),
        "regional_study": AUS_REGIONAL_STUDY_POINTS if profile.regional_study else 0,
        "partner": lookup("aus_partner", AUS_PARTNER_POINTS, profile.partner_skills),
        "nomination": lookup("aus_nomination", AUS_NOMINATION_POINTS, profile.nomination),
    }
    breakdown = {
        category: max(0, min(points, AUS_CATEGORY_CAPS[category]))
        for category, points in raw.items()
    }
    total = sum(breakdown.values())

    recommendations: List[str] = []
    if total < AUS_PASS_MARK:
        recommendations.append(
            f"Your score is below the {AUS_PASS_MARK}-point pass mark required to lodge an expression of interest"
        )
    if profile.english_level != "superior":
        recommendations.append("Superior English (IELTS 8 in each band) adds up to 20 points")
    if profile.nomination == "none":
        recommendations.append("State (190) or regional (491) nomination adds 5 or 15 points")

    return ScoreResult(
        program=Program.AUSTRALIA_POINTS.value,
        total_score=total,
        breakdown=breakdown,
        details={"overseas_experience": overseas, "australian_experience": australian},
        recommendations=recommendations,
    )


def english_level_from_scores(test_type: str, scores: Mapping[str, float]) -> str:
    """
    Derive the points-test English level from raw test sub-scores.

    Args:
        test_type: "ielts", "pte" or "toefl"
        scores: sub-score per skill (listening, reading, writing, speaking)

    Returns:
        "superior", "proficient" or "competent". Scores below every threshold
        still map to "competent", the visa's minimum English requirement.
    """
    thresholds = AUS_ENGLISH_TEST_THRESHOLDS.get(test_type.lower())
    if thresholds is None:
        raise InputValidationError(
            f"Unsupported English test: {test_type}",
            [{"field": "test_type", "message": "expected ielts, pte or toefl", "type": "enum"}],
        )
    missing = [skill for skill in ENGLISH_SKILLS if skill not in scores]
    if missing:
        raise InputValidationError(
            f"Missing English sub-scores: {', '.join(missing)}",
            [{"field": skill, "message": "field required", "type": "missing"} for skill in missing],
        )

    values = tuple(float(scores[skill]) for skill in ENGLISH_SKILLS)
    for level, minimums in thresholds:
        if all(value >= minimum for value, minimum in zip(values, minimums)):
            return level
    return "competent"
