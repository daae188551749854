"""
Canada CRS Scorer

Comprehensive Ranking System calculator for Express Entry.
Four categories are scored independently and each one is clamped to its cap:
core human capital, spouse factors, skill transferability and additional points.
"""

from typing import Dict, List, Optional, Tuple

from .contracts import CanadaProfile, LanguageScores, ScoreResult
from .errors import lookup
from .constants import (
    Program,
    CRS_MAX_AGE,
    CRS_MAX_CLB,
    CRS_MAX_CANADIAN_WORK_YEARS,
    CRS_MAX_FOREIGN_WORK_YEARS,
    CRS_AGE_POINTS_WITH_SPOUSE,
    CRS_AGE_POINTS_NO_SPOUSE,
    CRS_EDUCATION_POINTS_WITH_SPOUSE,
    CRS_EDUCATION_POINTS_NO_SPOUSE,
    CRS_LANGUAGE_POINTS_PER_SKILL_WITH_SPOUSE,
    CRS_LANGUAGE_POINTS_PER_SKILL_NO_SPOUSE,
    CRS_SECOND_LANGUAGE_MIN_CLB,
    CRS_SECOND_LANGUAGE_POINTS,
    CRS_CANADIAN_WORK_WITH_SPOUSE,
    CRS_CANADIAN_WORK_NO_SPOUSE,
    CRS_SPOUSE_EDUCATION_POINTS,
    CRS_SPOUSE_LANGUAGE_BANDS,
    CRS_SPOUSE_CANADIAN_WORK_POINTS,
    CRS_TRANSFERABILITY_MIN_AVG_CLB,
    CRS_EDUCATION_TRANSFER_TIER,
    CRS_EDUCATION_LANGUAGE_POINTS,
    CRS_EDUCATION_CANADIAN_WORK_POINTS,
    CRS_FOREIGN_LANGUAGE_POINTS,
    CRS_FOREIGN_CANADIAN_WORK_POINTS,
    CRS_TRANSFER_SUBTOTAL_CAP,
    CRS_NOMINATION_POINTS,
    CRS_JOB_OFFER_POINTS,
    CRS_CANADIAN_EDUCATION_POINTS,
    CRS_CERTIFICATE_POINTS,
    CRS_SIBLING_POINTS,
    CRS_FRENCH_POINTS,
    CRS_CATEGORY_CAPS_WITH_SPOUSE,
    CRS_CATEGORY_CAPS_NO_SPOUSE,
    CRS_SCORE_BANDS,
)


MIN_SCORED_AGE = 17


def _clamp(value: int, cap: int) -> int:
    return max(0, min(value, cap))


def score_core_human_capital(
    profile: CanadaProfile
) -> Tuple[int, Dict[str, int], List[str]]:
    """
    Score age, education, first and second language and Canadian work.

    Returns:
        (raw category points, per-factor details, recommendations)
    """
    with_spouse = profile.has_spouse
    details: Dict[str, int] = {}
    recommendations: List[str] = []

    # Age - outside the table means zero points
    if MIN_SCORED_AGE <= profile.age <= CRS_MAX_AGE:
        age_table = CRS_AGE_POINTS_WITH_SPOUSE if with_spouse else CRS_AGE_POINTS_NO_SPOUSE
        details["age"] = lookup("crs_age", age_table, profile.age)
    else:
        details["age"] = 0

    if 29 < profile.age < 35:
        recommendations.append("Your age is in the optimal range for CRS points")
    elif profile.age >= 35:
        recommendations.append("Consider applying soon as age points decrease after 29")

    # Education
    education_table = (
        CRS_EDUCATION_POINTS_WITH_SPOUSE if with_spouse else CRS_EDUCATION_POINTS_NO_SPOUSE
    )
    details["education"] = lookup("crs_education", education_table, profile.education_level)
    if profile.education_level in ("bachelor", "two_year"):
        recommendations.append("Consider pursuing a Master's degree to gain additional CRS points")

    # First official language, per skill then summed
    per_skill = (
        CRS_LANGUAGE_POINTS_PER_SKILL_WITH_SPOUSE
        if with_spouse
        else CRS_LANGUAGE_POINTS_PER_SKILL_NO_SPOUSE
    )
    details["first_language"] = sum(
        lookup("crs_language_per_skill", per_skill, min(skill, CRS_MAX_CLB))
        for skill in profile.first_language.as_tuple()
    )
    if profile.first_language.average < 9:
        recommendations.append("Improve your English/French test scores - aim for CLB 9+ in all skills")

    # Second official language
    second = profile.second_language
    if second is not None and second.all_at_least(CRS_SECOND_LANGUAGE_MIN_CLB):
        details["second_language"] = CRS_SECOND_LANGUAGE_POINTS
    else:
        details["second_language"] = 0
        recommendations.append("Learn French to CLB 5+ level to gain 24 additional points")

    # Canadian work experience
    work_table = CRS_CANADIAN_WORK_WITH_SPOUSE if with_spouse else CRS_CANADIAN_WORK_NO_SPOUSE
    canadian_years = min(profile.canadian_work_experience, CRS_MAX_CANADIAN_WORK_YEARS)
    details["canadian_work"] = lookup("crs_canadian_work", work_table, canadian_years)

    return sum(details.values()), details, recommendations


def _spouse_language_points(language: Optional[LanguageScores]) -> int:
    if language is None:
        return 0
    for min_clb, points in CRS_SPOUSE_LANGUAGE_BANDS:
        if language.all_at_least(min_clb):
            return points
    return 0


def score_spouse_factors(
    profile: CanadaProfile
) -> Tuple[int, Dict[str, int], List[str]]:
    """Score the accompanying spouse's education, language and Canadian work."""
    if not profile.has_spouse:
        return 0, {}, []

    details: Dict[str, int] = {
        "spouse_education": (
            lookup("crs_spouse_education", CRS_SPOUSE_EDUCATION_POINTS, profile.spouse_education)
            if profile.spouse_education is not None
            else 0
        ),
        "spouse_language": _spouse_language_points(profile.spouse_language),
        "spouse_work": lookup(
            "crs_spouse_canadian_work",
            CRS_SPOUSE_CANADIAN_WORK_POINTS,
            min(profile.spouse_canadian_work_experience, CRS_MAX_CANADIAN_WORK_YEARS),
        ),
    }
    total = sum(details.values())

    recommendations: List[str] = []
    if total < CRS_CATEGORY_CAPS_WITH_SPOUSE["spouse_factors"]:
        recommendations.append(
            "Your spouse can contribute up to 40 points - consider improving their credentials"
        )
    return total, details, recommendations


def score_skill_transferability(
    profile: CanadaProfile
) -> Tuple[int, Dict[str, int], List[str]]:
    """
    Score the education and foreign-experience combinations.

    Each group (education, foreign experience) adds its language combination and
    its Canadian-experience combination, and is capped at 50 on its own.
    """
    strong_language = profile.first_language.average >= CRS_TRANSFERABILITY_MIN_AVG_CLB
    canadian_years = min(profile.canadian_work_experience, 2)
    foreign_years = min(profile.foreign_work_experience, CRS_MAX_FOREIGN_WORK_YEARS)

    tier = lookup("crs_education_transfer_tier", CRS_EDUCATION_TRANSFER_TIER, profile.education_level)
    education_language = (
        lookup("crs_education_language", CRS_EDUCATION_LANGUAGE_POINTS, tier) if strong_language else 0
    )
    education_canadian = lookup(
        "crs_education_canadian_work", CRS_EDUCATION_CANADIAN_WORK_POINTS, (tier, canadian_years)
    )

    foreign_language = (
        lookup("crs_foreign_language", CRS_FOREIGN_LANGUAGE_POINTS, foreign_years)
        if strong_language
        else 0
    )
    foreign_canadian = lookup(
        "crs_foreign_canadian_work", CRS_FOREIGN_CANADIAN_WORK_POINTS, (foreign_years, canadian_years)
    )

    details = {
        "education_transferability": min(
            education_language + education_canadian, CRS_TRANSFER_SUBTOTAL_CAP
        ),
        "foreign_transferability": min(
            foreign_language + foreign_canadian, CRS_TRANSFER_SUBTOTAL_CAP
        ),
    }
    total = sum(details.values())

    recommendations: List[str] = []
    if total < CRS_CATEGORY_CAPS_NO_SPOUSE["skill_transferability"]:
        recommendations.append(
            "Gain more foreign work experience to maximize skill transferability points"
        )
    return total, details, recommendations


def score_additional_points(
    profile: CanadaProfile
) -> Tuple[int, Dict[str, int], List[str]]:
    """Score nomination, job offer, Canadian study, certificate, siblings and French."""
    details: Dict[str, int] = {}
    recommendations: List[str] = []

    if profile.has_provincial_nomination:
        details["nomination"] = CRS_NOMINATION_POINTS
    else:
        recommendations.append(
            "Consider applying for Provincial Nominee Program (PNP) for 600 additional points"
        )

    if profile.has_valid_job_offer:
        job_offer = lookup("crs_job_offer", CRS_JOB_OFFER_POINTS, profile.job_offer_noc)
        if job_offer:
            details["job_offer"] = job_offer

    if profile.has_canadian_education and profile.canadian_education_level:
        details["canadian_education"] = lookup(
            "crs_canadian_education", CRS_CANADIAN_EDUCATION_POINTS, profile.canadian_education_level
        )

    if profile.has_certificate_of_qualification:
        details["certificate"] = CRS_CERTIFICATE_POINTS
    if profile.has_canadian_siblings:
        details["siblings"] = CRS_SIBLING_POINTS
    if profile.has_french_language_skills:
        details["french"] = CRS_FRENCH_POINTS

    return sum(details.values()), details, recommendations


def _band_recommendation(total: int) -> str:
    for minimum, text in CRS_SCORE_BANDS:
        if total >= minimum:
            return text
    return CRS_SCORE_BANDS[-1][1]


def calculate_crs(profile: CanadaProfile) -> ScoreResult:
    """
    Calculate the CRS score for a validated profile.

    Args:
        profile: Canada applicant profile

    Returns:
        ScoreResult with the four CRS categories, factor details and advice
    """
    caps = CRS_CATEGORY_CAPS_WITH_SPOUSE if profile.has_spouse else CRS_CATEGORY_CAPS_NO_SPOUSE
    category_scorers = [
        ("core_human_capital", score_core_human_capital),
        ("spouse_factors", score_spouse_factors),
        ("skill_transferability", score_skill_transferability),
        ("additional_points", score_additional_points),
    ]

    breakdown: Dict[str, int] = {}
    details: Dict[str, int] = {}
    recommendations: List[str] = []
    for category, scorer in category_scorers:
        points, factor_details, advice = scorer(profile)
        breakdown[category] = _clamp(points, caps[category])
        details.update(factor_details)
        recommendations.extend(advice)

    total = sum(breakdown.values())
    recommendations.append(_band_recommendation(total))

    return ScoreResult(
        program=Program.CANADA_CRS.value,
        total_score=total,
        breakdown=breakdown,
        details=details,
        recommendations=recommendations,
    )
