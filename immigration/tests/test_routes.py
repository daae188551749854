"""
API tests for the assessment and draw routes.
"""

from fastapi.testclient import TestClient

from main import app


client = TestClient(app)

CANADA_PROFILE = {
    "age": 29,
    "marital_status": "single",
    "education_level": "bachelor",
    "first_language": {"speaking": 9, "listening": 9, "reading": 9, "writing": 9},
    "foreign_work_experience": 3,
}


def test_health():
    assert client.get("/health").json() == {"status": "ok"}

    response = client.get("/assessment/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "canada_crs" in data["programs"]
    assert data["draw_records"] == 10


def test_score_canada():
    response = client.post("/assessment/score/canada_crs", json=CANADA_PROFILE)

    assert response.status_code == 200
    data = response.json()
    assert data["total_score"] == 343
    assert data["breakdown"]["skill_transferability"] == 75
    assert data["eligibility"] is None


def test_score_portugal_includes_eligibility():
    response = client.post("/assessment/score/portugal_d7", json={
        "income_source": "pension",
        "monthly_income": 1000,
        "has_income_documentation": True,
        "has_accommodation": True,
        "has_health_insurance": True,
    })

    assert response.status_code == 200
    assert response.json()["eligibility"]["status"] == "eligible"


def test_score_invalid_profile():
    response = client.post("/assessment/score/canada_crs", json={**CANADA_PROFILE, "education_level": "doctorate"})

    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["errors"][0]["field"] == "education_level"


def test_score_unknown_program():
    response = client.post("/assessment/score/new_zealand", json=CANADA_PROFILE)

    assert response.status_code == 422
    assert response.json()["detail"]["errors"][0]["field"] == "program"


def test_what_if_canada():
    response = client.post("/assessment/what-if/canada_crs", json={"profile": CANADA_PROFILE})

    assert response.status_code == 200
    data = response.json()
    assert data["target_score"] == 480
    assert data["result"]["current_score"] == 343
    assert data["result"]["combined_max_score"] == 616
    assert data["result"]["best_scenario"]["id"] == "add_french_nclc_7"
    assert "apply" not in data["result"]["best_scenario"]
    assert len(data["recommendations"]) == 5
    assert data["timeline"]["estimated_months"] == 31


def test_what_if_custom_target():
    response = client.post(
        "/assessment/what-if/canada_crs",
        json={"profile": CANADA_PROFILE, "target_score": 350},
    )

    data = response.json()
    assert data["target_score"] == 350
    assert all(r["priority"] == "high" for r in data["recommendations"])


def test_what_if_without_catalog():
    response = client.post(
        "/assessment/what-if/portugal_d8",
        json={"profile": {"employment_status": "remote_employee", "average_monthly_income": 4000}},
    )
    assert response.status_code == 422


def test_language_conversion():
    response = client.post("/assessment/language/clb", json={
        "test_type": "IELTS",
        "scores": {"listening": 8.5, "reading": 8.0, "speaking": 7.5, "writing": 7.5},
    })

    assert response.status_code == 200
    assert response.json() == {
        "test_type": "ielts",
        "clb": {"speaking": 10, "listening": 10, "reading": 10, "writing": 10},
    }


def test_portugal_match():
    response = client.post("/assessment/portugal/match", json={"monthly_income": 500})

    data = response.json()
    assert data["count"] == 2
    assert [r["visa_type"] for r in data["recommendations"]] == ["d7", "job_seeker"]


def test_draw_analysis_and_prediction():
    analysis = client.get("/draws/analysis").json()
    assert analysis["record_count"] == 10

    stem = client.get("/draws/analysis", params={"category": "STEM"}).json()
    assert stem["record_count"] == 1

    prediction = client.get("/draws/prediction", params={"today": "2026-01-10"}).json()
    assert prediction["predicted_date"] == "2026-01-22"


def test_draw_compare_and_alerts():
    data = client.get("/draws/compare", params={"score": 530}).json()
    assert data["comparison"]["would_qualify_now"] is True
    assert data["standing"]["status"] == "good"

    alerts = client.get("/draws/alerts", params={"score": 500, "today": "2026-01-10"}).json()
    assert alerts["count"] == len(alerts["alerts"])
    assert alerts["alerts"][-1]["priority"] == "low"

    assert client.get("/draws/compare", params={"score": -5}).status_code == 422
