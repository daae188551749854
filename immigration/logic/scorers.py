"""
Scorer Registry

Maps each Program to its profile contract and calculator function.
Calculators share one calling convention: calculate(profile) -> ScoreResult.
"""

import logging
from typing import Any, Callable, Dict, NamedTuple, Type, Union

from pydantic import BaseModel, ValidationError

from .contracts import (
    AustraliaProfile,
    CanadaProfile,
    PortugalD2Profile,
    PortugalD7Profile,
    PortugalD8Profile,
    ScoreResult,
)
from .errors import InputValidationError
from .constants import Program
from .canada_scorer import calculate_crs
from .australia_scorer import calculate_australia_points
from .portugal_scorer import calculate_d2, calculate_d7, calculate_d8


logger = logging.getLogger(__name__)


class Scorer(NamedTuple):
    profile_model: Type[BaseModel]
    calculate: Callable[[Any], ScoreResult]


SCORERS: Dict[Program, Scorer] = {
    Program.CANADA_CRS: Scorer(CanadaProfile, calculate_crs),
    Program.AUSTRALIA_POINTS: Scorer(AustraliaProfile, calculate_australia_points),
    Program.PORTUGAL_D2: Scorer(PortugalD2Profile, calculate_d2),
    Program.PORTUGAL_D7: Scorer(PortugalD7Profile, calculate_d7),
    Program.PORTUGAL_D8: Scorer(PortugalD8Profile, calculate_d8),
}


def resolve_program(program: Union[Program, str]) -> Program:
    try:
        return Program(program)
    except ValueError:
        supported = ", ".join(p.value for p in Program)
        raise InputValidationError(
            f"Unsupported program: {program}",
            [{"field": "program", "message": f"expected one of {supported}", "type": "enum"}],
        ) from None


def coerce_profile(profile: Union[BaseModel, Dict[str, Any]], program: Program) -> BaseModel:
    """
    Validate a profile for the program.

    Accepts the program's model or a plain dict. Any other model type, or a dict
    outside the documented domain, raises InputValidationError.
    """
    model = SCORERS[program].profile_model
    if isinstance(profile, model):
        return profile
    if isinstance(profile, BaseModel):
        raise InputValidationError(
            f"{program.value} expects {model.__name__}, got {type(profile).__name__}",
            [{"field": "<root>", "message": f"expected {model.__name__}", "type": "model_type"}],
        )
    try:
        return model.model_validate(profile)
    except ValidationError as e:
        raise InputValidationError.from_pydantic(e, model.__name__) from e


def calculate_score(
    profile: Union[BaseModel, Dict[str, Any]],
    program: Union[Program, str],
) -> ScoreResult:
    """
    Score a profile for one program.

    Args:
        profile: program profile model or dict
        program: Program member or its value (e.g. "canada_crs")

    Returns:
        ScoreResult with total_score == sum(breakdown)
    """
    resolved = resolve_program(program)
    validated = coerce_profile(profile, resolved)
    result = SCORERS[resolved].calculate(validated)
    logger.info(f"📊 {resolved.value} score: {result.total_score}")
    return result


def scorer_for(program: Union[Program, str]) -> Callable[[Any], ScoreResult]:
    """Calculator for a program, for callers that already hold a validated profile."""
    return SCORERS[resolve_program(program)].calculate
