"""
Tests for the CRS calculator.
"""

import pytest

from immigration.logic import (
    CanadaProfile,
    InputValidationError,
    LanguageScores,
    RuleTableError,
    calculate_score,
)
from immigration.logic import canada_scorer
from immigration.logic.constants import (
    CRS_CATEGORY_CAPS_NO_SPOUSE,
    CRS_CATEGORY_CAPS_WITH_SPOUSE,
)


def clb(level: int) -> LanguageScores:
    return LanguageScores(speaking=level, listening=level, reading=level, writing=level)


def base_profile(**overrides) -> CanadaProfile:
    data = dict(
        age=29,
        marital_status="single",
        education_level="bachelor",
        first_language=clb(9),
        foreign_work_experience=3,
    )
    data.update(overrides)
    return CanadaProfile(**data)


def test_single_applicant_breakdown():
    result = calculate_score(base_profile(), "canada_crs")

    assert result.breakdown == {
        "core_human_capital": 268,
        "spouse_factors": 0,
        "skill_transferability": 75,
        "additional_points": 0,
    }
    assert result.total_score == 343
    assert result.details["age"] == 120
    assert result.details["first_language"] == 28
    assert result.recommendations[-1].startswith("Your score is below the typical cutoff")


def test_total_is_sum_of_breakdown_and_caps_hold():
    profiles = [
        base_profile(),
        base_profile(
            has_provincial_nomination=True,
            has_valid_job_offer=True,
            job_offer_noc="00",
            has_certificate_of_qualification=True,
            has_canadian_siblings=True,
            has_french_language_skills=True,
        ),
        base_profile(
            marital_status="married",
            spouse_education="phd",
            spouse_language=clb(10),
            spouse_canadian_work_experience=9,
        ),
        base_profile(age=17, education_level="none", first_language=clb(0), foreign_work_experience=0),
    ]
    for profile in profiles:
        result = calculate_score(profile, "canada_crs")
        caps = CRS_CATEGORY_CAPS_WITH_SPOUSE if profile.has_spouse else CRS_CATEGORY_CAPS_NO_SPOUSE
        assert result.total_score == sum(result.breakdown.values())
        for category, points in result.breakdown.items():
            assert 0 <= points <= caps[category]


def test_additional_points_capped_at_600():
    profile = base_profile(
        has_provincial_nomination=True,
        has_valid_job_offer=True,
        job_offer_noc="00",
        has_certificate_of_qualification=True,
    )
    result = calculate_score(profile, "canada_crs")

    assert result.details["nomination"] == 600
    assert result.details["job_offer"] == 200
    assert result.breakdown["additional_points"] == 600


def test_spouse_counts_only_when_accompanying():
    married = base_profile(
        age=30,
        marital_status="married",
        spouse_education="master",
        spouse_language=clb(9),
        spouse_canadian_work_experience=5,
    )
    result = calculate_score(married, "canada_crs")
    assert result.details["age"] == 105
    assert result.breakdown["spouse_factors"] == 40

    staying_home = married.model_copy(update={"spouse_accompanying": False})
    result = calculate_score(staying_home, "canada_crs")
    assert result.details["age"] == 115
    assert result.breakdown["spouse_factors"] == 0


def test_spouse_language_bands():
    for level, expected in [(4, 0), (5, 5), (7, 10), (9, 20)]:
        profile = base_profile(marital_status="common_law", spouse_language=clb(level))
        assert calculate_score(profile, "canada_crs").details["spouse_language"] == expected


def test_skill_transferability_subtotals_capped():
    profile = base_profile(
        education_level="master",
        first_language=clb(10),
        canadian_work_experience=2,
        foreign_work_experience=3,
    )
    result = calculate_score(profile, "canada_crs")

    assert result.details["education_transferability"] == 50
    assert result.details["foreign_transferability"] == 50
    assert result.breakdown["skill_transferability"] == 100


def test_no_transferability_language_points_below_clb7():
    profile = base_profile(first_language=clb(6))
    result = calculate_score(profile, "canada_crs")
    assert result.breakdown["skill_transferability"] == 0


def test_experience_above_ceiling_counts_as_ceiling():
    at_ceiling = calculate_score(base_profile(canadian_work_experience=5), "canada_crs")
    above = calculate_score(base_profile(canadian_work_experience=6), "canada_crs")

    assert above.details["canadian_work"] == 80
    assert above.total_score == at_ceiling.total_score


def test_language_above_clb10_scored_as_10():
    at_ten = calculate_score(base_profile(first_language=clb(10)), "canada_crs")
    at_twelve = calculate_score(base_profile(first_language=clb(12)), "canada_crs")
    assert at_twelve.total_score == at_ten.total_score


def test_age_outside_table_scores_zero():
    assert calculate_score(base_profile(age=16), "canada_crs").details["age"] == 0
    assert calculate_score(base_profile(age=50), "canada_crs").details["age"] == 0


def test_second_language_requires_clb5_everywhere():
    weak = LanguageScores(speaking=5, listening=5, reading=5, writing=4)
    assert calculate_score(base_profile(second_language=weak), "canada_crs").details["second_language"] == 0
    assert calculate_score(base_profile(second_language=clb(5)), "canada_crs").details["second_language"] == 24


def test_dict_profile_accepted():
    data = base_profile().model_dump()
    assert calculate_score(data, "canada_crs").total_score == 343


def test_unknown_education_level_rejected():
    data = base_profile().model_dump()
    data["education_level"] = "doctorate"

    with pytest.raises(InputValidationError) as exc_info:
        calculate_score(data, "canada_crs")
    assert exc_info.value.errors[0]["field"] == "education_level"


def test_out_of_domain_numbers_rejected():
    for field, value in [("foreign_work_experience", -1), ("age", 121)]:
        data = base_profile().model_dump()
        data[field] = value
        with pytest.raises(InputValidationError):
            calculate_score(data, "canada_crs")

    data = base_profile().model_dump()
    data["first_language"]["reading"] = 13
    with pytest.raises(InputValidationError) as exc_info:
        calculate_score(data, "canada_crs")
    assert exc_info.value.errors[0]["field"] == "first_language.reading"


def test_misspelled_field_rejected():
    data = base_profile().model_dump()
    data["has_provincial_nominaton"] = True

    with pytest.raises(InputValidationError) as exc_info:
        calculate_score(data, "canada_crs")
    assert exc_info.value.errors[0]["field"] == "has_provincial_nominaton"
    assert exc_info.value.errors[0]["type"] == "extra_forbidden"


def test_unknown_program_rejected():
    with pytest.raises(InputValidationError):
        calculate_score(base_profile(), "new_zealand_points")


def test_missing_table_row_is_rule_table_error(monkeypatch):
    monkeypatch.setattr(canada_scorer, "CRS_JOB_OFFER_POINTS", {"00": 200, "none": 0})
    profile = base_profile(has_valid_job_offer=True, job_offer_noc="A")

    with pytest.raises(RuleTableError) as exc_info:
        calculate_score(profile, "canada_crs")
    assert not isinstance(exc_info.value, InputValidationError)
    assert exc_info.value.key == "A"
