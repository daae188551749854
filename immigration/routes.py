"""
Assessment API Routes

Exposes the score calculators, the what-if engine and draw intelligence via REST.
"""

import logging
from datetime import date
from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

import config
from .logic import (
    AssessmentEngine,
    InputValidationError,
    Program,
    RuleTableError,
    VisaMatcherInput,
    convert_to_clb,
    estimate_timeline,
    match_visas,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/assessment", tags=["assessment"])
draws_router = APIRouter(prefix="/draws", tags=["draws"])

engine = AssessmentEngine()


# =============================================================================
# REQUEST/RESPONSE SCHEMAS
# =============================================================================

class WhatIfRequest(BaseModel):
    """Request body for the what-if endpoint."""
    profile: Dict[str, Any] = Field(
        ...,
        description="Applicant profile for the program",
        examples=[{
            "age": 30,
            "marital_status": "single",
            "education_level": "bachelor",
            "first_language": {"speaking": 8, "listening": 8, "reading": 7, "writing": 7},
            "foreign_work_experience": 3,
        }],
    )
    target_score: Optional[int] = Field(
        default=None,
        ge=0,
        le=1200,
        description="Score to aim for (defaults to the configured target)",
    )


class ClbConversionRequest(BaseModel):
    test_type: str = Field(..., description="ielts, celpip, tef or tcf")
    scores: Dict[str, float] = Field(
        ...,
        examples=[{"speaking": 7.0, "listening": 8.0, "reading": 7.0, "writing": 6.5}],
    )


def _validation_error(e: InputValidationError) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail={"message": e.message, "errors": e.errors},
    )


def _rule_table_error(e: RuleTableError) -> JSONResponse:
    logger.exception(f"Rule table lookup failed: {e}")
    return JSONResponse(
        status_code=500,
        content={"error": "rule_table_error", "table": e.table, "key": str(e.key)},
    )


# =============================================================================
# SCORING ENDPOINTS
# =============================================================================

@router.post("/score/{program}", summary="Calculate a program score")
def score_profile(program: str, profile: Dict[str, Any]):
    """
    Score a profile for one program.

    **Path:** `program` - canada_crs, australia_points, portugal_d2, portugal_d7, portugal_d8

    **Response:** total score, category breakdown, factor details and advice
    """
    try:
        result = engine.score(profile, program)
    except InputValidationError as e:
        raise _validation_error(e)
    except RuleTableError as e:
        return _rule_table_error(e)
    return result.model_dump(mode="json")


@router.post("/what-if/{program}", summary="Explore score improvements")
def what_if_profile(program: str, request: WhatIfRequest):
    """
    Evaluate every improvement action for the profile.

    **Response:**
    - `result`: per-action scenarios, best scenario and combined max score
    - `recommendations`: top five actions by points per month
    - `timeline`: Express Entry timeline estimate (canada_crs only)
    """
    target = request.target_score if request.target_score is not None else config.DEFAULT_TARGET_SCORE
    try:
        result = engine.what_if(request.profile, program, target)
    except InputValidationError as e:
        raise _validation_error(e)
    except RuleTableError as e:
        return _rule_table_error(e)

    response_data = {
        "target_score": target,
        "result": result.model_dump(mode="json", exclude={"target_score", "recommendations"}),
        "recommendations": [r.model_dump(mode="json") for r in result.recommendations],
    }
    if result.program == Program.CANADA_CRS.value:
        nominated = bool(request.profile.get("has_provincial_nomination", False))
        response_data["timeline"] = estimate_timeline(result.current_score, nominated).model_dump(mode="json")
    return response_data


@router.post("/language/clb", summary="Convert test scores to CLB")
def language_to_clb(request: ClbConversionRequest):
    try:
        levels = convert_to_clb(request.test_type, request.scores)
    except InputValidationError as e:
        raise _validation_error(e)
    return {"test_type": request.test_type.lower(), "clb": levels.model_dump()}


@router.post("/portugal/match", summary="Shortlist Portuguese visas")
def portugal_match(situation: VisaMatcherInput):
    recommendations = match_visas(situation)
    return {
        "recommendations": [r.model_dump(mode="json") for r in recommendations],
        "count": len(recommendations),
    }


# =============================================================================
# DRAW ENDPOINTS
# =============================================================================

@draws_router.get("/analysis", summary="Trend analysis of recent rounds")
def draw_analysis(category: Optional[str] = Query(default=None, description="Program label filter")):
    return engine.analyze_draws(category_filter=category).model_dump(mode="json")


@draws_router.get("/prediction", summary="Predict the next round cutoff")
def draw_prediction(
    category: Optional[str] = Query(default=None, description="Program label filter"),
    today: Optional[date] = Query(default=None, description="Reference date (defaults to today)"),
):
    return engine.predict_next_draw(category_filter=category, now=today).model_dump(mode="json")


@draws_router.get("/compare", summary="Compare a score with recent rounds")
def draw_compare(score: int = Query(..., ge=0, le=1200)):
    comparison = engine.compare_user_score(score)
    standing = engine.score_standing(score)
    return {
        "comparison": comparison.model_dump(mode="json"),
        "standing": standing.model_dump(mode="json"),
    }


@draws_router.get("/alerts", summary="Alerts for a score")
def draw_alerts(
    score: int = Query(..., ge=0, le=1200),
    today: Optional[date] = Query(default=None, description="Reference date (defaults to today)"),
):
    alerts = engine.generate_alerts(score, now=today)
    return {"alerts": [a.model_dump(mode="json") for a in alerts], "count": len(alerts)}


# =============================================================================
# HEALTH CHECK
# =============================================================================

@router.get("/health", summary="Assessment engine health check")
def health_check():
    """Check if the assessment engine is operational."""
    return {
        "status": "ok",
        "engine": "assessment",
        "version": engine.version,
        "programs": [p.value for p in Program],
        "draw_records": len(engine.store.records),
    }
