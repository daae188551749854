"""
Tests for the what-if engine: action evaluation, combined maximum,
recommendations and the Express Entry timeline.
"""

import pytest

from immigration.logic import (
    AssessmentEngine,
    AustraliaProfile,
    CanadaProfile,
    ImprovementAction,
    InputValidationError,
    LanguageScores,
    estimate_timeline,
    evaluate,
    recommend,
    what_if,
)
from immigration.logic.australia_scorer import calculate_australia_points
from immigration.logic.canada_scorer import calculate_crs
from immigration.logic.contracts import BilingualText
from immigration.logic.scenarios import AUSTRALIA_ACTIONS, CANADA_ACTIONS


def clb(level: int) -> LanguageScores:
    return LanguageScores(speaking=level, listening=level, reading=level, writing=level)


def canada_profile(**overrides) -> CanadaProfile:
    data = dict(
        age=29,
        marital_status="single",
        education_level="bachelor",
        first_language=clb(9),
        foreign_work_experience=3,
    )
    data.update(overrides)
    return CanadaProfile(**data)


def gains(result):
    return {s.action.id: s.points_gain for s in result.scenarios}


def test_canada_what_if():
    result = what_if(canada_profile(), "canada_crs")

    print("\n" + "=" * 60)
    print("WHAT-IF: CANADA CRS")
    print("=" * 60)
    for scenario in result.scenarios:
        print(f"  {scenario.action.id}: +{scenario.points_gain} ({scenario.reason or 'applicable'})")

    assert result.program == "canada_crs"
    assert result.current_score == 343
    assert [s.action.id for s in result.scenarios] == list(CANADA_ACTIONS)
    assert gains(result) == {
        "improve_ielts_one_band": 4,
        "reach_clb_9_all": 0,
        "add_french_nclc_7": 74,
        "upgrade_to_masters": 40,
        "canadian_one_year_diploma": 15,
        "canadian_three_year_degree": 15,
        "gain_one_year_canadian_experience": 53,
        "gain_one_year_foreign_experience": 0,
        "get_provincial_nomination": 600,
        "get_job_offer_noc_0_A": 50,
        "trades_certificate": 50,
    }
    # Nomination needs outside approval, so the best self-driven action wins
    assert result.best_scenario.id == "add_french_nclc_7"
    assert result.combined_max_score == 616


def test_already_met_actions_are_not_applicable():
    profile = canada_profile(has_provincial_nomination=True)
    first = what_if(profile, "canada_crs")
    second = what_if(profile, "canada_crs")

    by_id = {s.action.id: s for s in first.scenarios}
    for action_id in ("reach_clb_9_all", "get_provincial_nomination"):
        assert by_id[action_id].is_applicable is False
        assert by_id[action_id].points_gain == 0
        assert by_id[action_id].new_score == first.current_score

    assert by_id["reach_clb_9_all"].reason == "Already at CLB 9 in all skills"
    assert [s.reason for s in first.scenarios] == [s.reason for s in second.scenarios]


def test_evaluation_never_changes_the_profile():
    profile = canada_profile()
    before = profile.model_dump()

    result = evaluate(profile, calculate_crs, CANADA_ACTIONS)

    assert profile.model_dump() == before
    assert calculate_crs(profile).total_score == result.current_score


def test_gain_never_negative_and_combined_at_least_current():
    profiles = [
        canada_profile(),
        canada_profile(age=44, education_level="phd", first_language=clb(10), canadian_work_experience=5),
        canada_profile(marital_status="married", spouse_language=clb(7), spouse_education="bachelor"),
    ]
    for profile in profiles:
        result = evaluate(profile, calculate_crs, CANADA_ACTIONS)
        assert all(s.points_gain >= 0 for s in result.scenarios)
        assert result.combined_max_score >= result.current_score


def test_capped_experience_after_transform():
    boost = ImprovementAction(
        id="two_more_canadian_years",
        title=BilingualText(en="Two more years of Canadian work"),
        description=BilingualText(en="Work two more years in Canada"),
        category="experience",
        difficulty="hard",
        timeline_months=24,
        precondition=lambda profile: None,
        apply=lambda profile: profile.model_copy(
            update={"canadian_work_experience": profile.canadian_work_experience + 2}
        ),
    )
    profile = canada_profile(canadian_work_experience=4)

    result = evaluate(profile, calculate_crs, {boost.id: boost})
    at_cap = calculate_crs(canada_profile(canadian_work_experience=5))

    assert result.scenarios[0].new_score == at_cap.total_score


def test_exclusive_group_applies_once():
    profile = AustraliaProfile(
        age=30,
        english_level="competent",
        australian_work_years=8,
        specialist_education=True,
        professional_year=True,
        credentialled_community_language=True,
        regional_study=True,
        nomination="regional_491",
    )
    result = evaluate(profile, calculate_australia_points, AUSTRALIA_ACTIONS)

    assert result.current_score == 115
    assert gains(result)["english_superior"] == 20
    assert gains(result)["english_proficient"] == 10
    assert result.combined_max_score == 135


def test_australia_what_if():
    profile = AustraliaProfile(
        age=30,
        english_level="proficient",
        overseas_work_years=5,
        australian_work_years=1,
    )
    result = AssessmentEngine().what_if(profile, "australia_points")
    by_id = {s.action.id: s for s in result.scenarios}

    assert result.current_score == 80
    assert by_id["english_proficient"].reason == "Already at Proficient English or higher"
    assert by_id["english_superior"].points_gain == 10
    assert by_id["regional_491_nomination"].points_gain == 15
    assert result.best_scenario.id == "english_superior"
    # 491 nomination is left out of the combined maximum
    assert result.combined_max_score == 115


def test_portugal_has_no_catalog():
    profile = {"employment_type": "freelancer"}
    with pytest.raises(InputValidationError):
        AssessmentEngine().what_if(profile, "portugal_d2")


def test_recommendations_ranked_by_efficiency():
    result = what_if(canada_profile(), "canada_crs")
    recommendations = recommend(result, target_score=480)

    assert [r.action.id for r in recommendations] == [
        "get_provincial_nomination",
        "get_job_offer_noc_0_A",
        "add_french_nclc_7",
        "gain_one_year_canadian_experience",
        "trades_certificate",
    ]
    efficiencies = [r.efficiency for r in recommendations]
    assert efficiencies == sorted(efficiencies, reverse=True)

    assert recommendations[0].priority == "high"
    assert recommendations[0].reason == "Could help you reach target score of 480"
    assert recommendations[1].priority == "high"
    assert recommendations[1].reason == "Quick win with relatively low effort"
    assert recommendations[2].priority == "medium"
    assert recommendations[2].reason == "Significant point boost of +74"


def test_slow_small_gain_is_low_priority():
    catalog = {"canadian_one_year_diploma": CANADA_ACTIONS["canadian_one_year_diploma"]}
    result = evaluate(canada_profile(), calculate_crs, catalog, "canada_crs")

    recommendations = recommend(result, target_score=1000)

    assert len(recommendations) == 1
    assert recommendations[0].priority == "low"
    assert recommendations[0].reason == "Moderate improvement of +15"


def test_what_if_with_target_carries_recommendations():
    result = what_if(canada_profile(), "canada_crs", target_score=480)

    assert result.target_score == 480
    assert result.recommendations == recommend(result, target_score=480)
    assert result.recommendations[0].action.id == "get_provincial_nomination"

    untargeted = AssessmentEngine().what_if(canada_profile(), "canada_crs")
    assert untargeted.target_score is None
    assert untargeted.recommendations == []


def test_recommend_skips_non_gaining_actions():
    profile = canada_profile(
        first_language=clb(10),
        education_level="phd",
        canadian_work_experience=5,
        has_provincial_nomination=True,
        has_valid_job_offer=True,
        job_offer_noc="00",
        has_certificate_of_qualification=True,
        has_french_language_skills=True,
        has_canadian_education=True,
        canadian_education_level="master_phd",
    )
    result = what_if(profile, "canada_crs")

    assert recommend(result) == []
    assert result.best_scenario is None
    assert result.combined_max_score == result.current_score


def test_timeline_estimate():
    slow = estimate_timeline(343)
    assert slow.estimated_months == 31
    assert slow.confidence == "low"
    assert slow.factors == ["Score below recent cutoffs - consider score improvement"]
    assert [m.months_from_now for m in slow.milestones] == [24, 25, 30, 31]

    fast = estimate_timeline(525)
    assert fast.estimated_months == 8
    assert fast.confidence == "high"

    nominated = estimate_timeline(400, has_provincial_nomination=True)
    assert nominated.estimated_months == 8
    assert "Provincial nomination provides significant advantage" in nominated.factors
