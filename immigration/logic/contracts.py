"""
Data Contracts for the Assessment Engine

Defines Pydantic models for applicant profiles (input), score / what-if / draw
results (output) and the improvement-action catalog entries.
Input models are frozen: a "changed" profile is always a new instance.
"""

from datetime import date
from enum import Enum
from typing import Callable, Dict, List, Optional, Union

from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================

class MaritalStatus(str, Enum):
    SINGLE = "single"
    MARRIED = "married"
    COMMON_LAW = "common_law"
    DIVORCED = "divorced"
    WIDOWED = "widowed"


class EducationLevel(str, Enum):
    """CRS education levels, lowest to highest."""
    NONE = "none"
    HIGH_SCHOOL = "high_school"
    ONE_YEAR = "one_year"
    TWO_YEAR = "two_year"
    BACHELOR = "bachelor"
    TWO_OR_MORE = "two_or_more"
    MASTER = "master"
    PHD = "phd"


class NocSkillLevel(str, Enum):
    NOC_00 = "00"
    NOC_0 = "0"
    NOC_A = "A"
    NOC_B = "B"
    NONE = "none"


class CanadianEducationLevel(str, Enum):
    ONE_TWO_YEAR = "one_two_year"
    THREE_YEAR_PLUS = "three_year_plus"
    MASTER_PHD = "master_phd"


class EnglishLevel(str, Enum):
    COMPETENT = "competent"
    PROFICIENT = "proficient"
    SUPERIOR = "superior"


class AustraliaEducationLevel(str, Enum):
    DIPLOMA = "diploma"
    BACHELOR = "bachelor"
    MASTER = "master"
    PHD = "phd"
    RECOGNIZED_QUALIFICATION = "recognized_qualification"
    OTHER = "other"


class PartnerSkills(str, Enum):
    SINGLE = "single"
    PARTNER_SKILLED = "partner_skilled"
    PARTNER_ENGLISH = "partner_english"
    PARTNER_PR = "partner_pr"
    PARTNER_NO_POINTS = "partner_no_points"


class AustraliaNomination(str, Enum):
    NONE = "none"
    STATE_190 = "state_190"
    REGIONAL_491 = "regional_491"


class D2EmploymentType(str, Enum):
    FREELANCER = "freelancer"
    BUSINESS_OWNER = "business_owner"
    INVESTOR = "investor"
    LIBERAL_PROFESSION = "liberal_profession"


class D7IncomeSource(str, Enum):
    PENSION = "pension"
    RENTAL_INCOME = "rental_income"
    INVESTMENTS = "investments"
    DIVIDENDS = "dividends"
    INTELLECTUAL_PROPERTY = "intellectual_property"
    OTHER_PASSIVE = "other_passive"
    EMPLOYMENT = "employment"


class D8EmploymentStatus(str, Enum):
    REMOTE_EMPLOYEE = "remote_employee"
    FREELANCER_INTERNATIONAL = "freelancer_international"
    BUSINESS_OWNER_REMOTE = "business_owner_remote"


class PortugalVisaType(str, Enum):
    D1 = "d1"
    D2 = "d2"
    D7 = "d7"
    D8 = "d8"
    JOB_SEEKER = "job_seeker"


class EligibilityStatus(str, Enum):
    ELIGIBLE = "eligible"
    LIKELY_ELIGIBLE = "likely_eligible"
    NEEDS_MORE_INFO = "needs_more_info"
    NOT_ELIGIBLE = "not_eligible"


class ScenarioCategory(str, Enum):
    LANGUAGE = "language"
    EDUCATION = "education"
    EXPERIENCE = "experience"
    OTHER = "other"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Level(str, Enum):
    """Shared high/medium/low scale (priority, confidence, chance)."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TrendDirection(str, Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class AlertType(str, Enum):
    OPPORTUNITY = "opportunity"
    WARNING = "warning"
    INFO = "info"


class StandingStatus(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    COMPETITIVE = "competitive"
    NEEDS_IMPROVEMENT = "needs_improvement"


class BilingualText(BaseModel):
    en: str
    ar: str = ""

    class Config:
        frozen = True


# =============================================================================
# INPUT CONTRACTS
# =============================================================================

class LanguageScores(BaseModel):
    """CLB level per skill (0-12). Scoring counts anything above 10 as 10."""
    speaking: int = Field(ge=0, le=12)
    listening: int = Field(ge=0, le=12)
    reading: int = Field(ge=0, le=12)
    writing: int = Field(ge=0, le=12)

    class Config:
        frozen = True
        extra = "forbid"

    def as_tuple(self):
        return (self.speaking, self.listening, self.reading, self.writing)

    @property
    def average(self) -> float:
        return sum(self.as_tuple()) / 4

    def all_at_least(self, level: int) -> bool:
        return all(score >= level for score in self.as_tuple())


class CanadaProfile(BaseModel):
    """
    Input contract for the CRS calculator.
    Experience years above the table ceiling are accepted and clamped when scored.
    """
    age: int = Field(ge=0, le=120)
    marital_status: MaritalStatus = MaritalStatus.SINGLE
    spouse_accompanying: bool = True

    education_level: EducationLevel
    first_language: LanguageScores
    second_language: Optional[LanguageScores] = None

    canadian_work_experience: int = Field(default=0, ge=0, le=50)
    foreign_work_experience: int = Field(default=0, ge=0, le=50)

    # Spouse factors (only scored with an accompanying spouse)
    spouse_education: Optional[EducationLevel] = None
    spouse_language: Optional[LanguageScores] = None
    spouse_canadian_work_experience: int = Field(default=0, ge=0, le=50)

    # Additional points
    has_certificate_of_qualification: bool = False
    has_canadian_siblings: bool = False
    has_french_language_skills: bool = False
    has_provincial_nomination: bool = False
    has_valid_job_offer: bool = False
    job_offer_noc: NocSkillLevel = NocSkillLevel.NONE
    has_canadian_education: bool = False
    canadian_education_level: Optional[CanadianEducationLevel] = None

    class Config:
        frozen = True
        extra = "forbid"
        use_enum_values = True
        validate_default = True

    @property
    def has_spouse(self) -> bool:
        return (
            self.marital_status in (MaritalStatus.MARRIED, MaritalStatus.COMMON_LAW)
            and self.spouse_accompanying
        )


class AustraliaProfile(BaseModel):
    """Input contract for the Australian points test."""
    age: int = Field(ge=18, le=120)
    english_level: EnglishLevel = EnglishLevel.COMPETENT
    overseas_work_years: int = Field(default=0, ge=0, le=50)
    australian_work_years: int = Field(default=0, ge=0, le=50)
    education_level: AustraliaEducationLevel = AustraliaEducationLevel.BACHELOR
    specialist_education: bool = False
    australian_study: bool = False
    professional_year: bool = False
    credentialled_community_language: bool = False
    regional_study: bool = False
    partner_skills: PartnerSkills = PartnerSkills.SINGLE
    nomination: AustraliaNomination = AustraliaNomination.NONE

    class Config:
        frozen = True
        extra = "forbid"
        use_enum_values = True
        validate_default = True


class PortugalD2Profile(BaseModel):
    """D2 - entrepreneurs, freelancers and liberal professions."""
    employment_type: D2EmploymentType
    has_investment: bool = False
    investment_amount: Optional[float] = Field(default=None, ge=0)
    has_business_plan: bool = False
    has_service_contract: bool = False
    has_professional_qualification: bool = False
    has_financial_means_in_portugal: bool = False
    has_accommodation: bool = False
    has_criminal_record: bool = False
    has_health_insurance: bool = False

    class Config:
        frozen = True
        extra = "forbid"
        use_enum_values = True
        validate_default = True


class PortugalD7Profile(BaseModel):
    """D7 - passive income and retirees."""
    income_source: D7IncomeSource
    monthly_income: float = Field(ge=0)
    adult_dependents: int = Field(default=0, ge=0, le=20)
    child_dependents: int = Field(default=0, ge=0, le=20)
    has_income_documentation: bool = False
    has_accommodation: bool = False
    has_criminal_record: bool = False
    has_health_insurance: bool = False

    class Config:
        frozen = True
        extra = "forbid"
        use_enum_values = True
        validate_default = True


class PortugalD8Profile(BaseModel):
    """D8 - digital nomads working for employers abroad."""
    employment_status: D8EmploymentStatus
    employer_country: str = ""
    average_monthly_income: float = Field(ge=0)
    has_remote_work_contract: bool = False
    has_fiscal_residence: bool = False
    can_work_remotely: bool = True
    has_accommodation: bool = False
    has_criminal_record: bool = False
    has_health_insurance: bool = False
    has_bank_statements: bool = False

    class Config:
        frozen = True
        extra = "forbid"
        use_enum_values = True
        validate_default = True


class VisaMatcherInput(BaseModel):
    """Coarse situation used to shortlist Portuguese visa types."""
    has_portuguese_job_offer: bool = False
    is_remote_worker: bool = False
    has_passive_income: bool = False
    planning_business: bool = False
    monthly_income: float = Field(default=0, ge=0)
    employer_country: Optional[str] = None
    income_source: Optional[D7IncomeSource] = None

    class Config:
        frozen = True
        extra = "forbid"
        use_enum_values = True
        validate_default = True


Profile = Union[
    CanadaProfile,
    AustraliaProfile,
    PortugalD2Profile,
    PortugalD7Profile,
    PortugalD8Profile,
]


class HistoricalDrawRecord(BaseModel):
    """One admission round. Collections of these are ordered most recent first."""
    draw_date: date
    program_label: str
    program_label_ar: str = ""
    cutoff_score: int = Field(ge=0)
    invitations_issued: int = Field(ge=0)

    class Config:
        frozen = True


# =============================================================================
# SCORE OUTPUT CONTRACTS
# =============================================================================

class EligibilityCheck(BaseModel):
    category: str
    met: bool
    details: BilingualText


class EligibilityAssessment(BaseModel):
    """Requirement-level view attached to visa-eligibility scores."""
    status: EligibilityStatus
    meets_mandatory_requirements: bool
    checks: List[EligibilityCheck] = Field(default_factory=list)
    missing_requirements: List[BilingualText] = Field(default_factory=list)
    recommendations: List[BilingualText] = Field(default_factory=list)

    class Config:
        use_enum_values = True


class ScoreResult(BaseModel):
    """
    Output contract for every calculator.
    total_score is always the sum of breakdown; details are informational.
    """
    program: str
    total_score: int
    breakdown: Dict[str, int]
    details: Dict[str, int] = Field(default_factory=dict)
    recommendations: List[str] = Field(default_factory=list)
    eligibility: Optional[EligibilityAssessment] = None


class VisaRecommendation(BaseModel):
    visa_type: PortugalVisaType
    score: int = Field(ge=0, le=100)
    confidence: Level
    reasons: List[BilingualText] = Field(default_factory=list)
    warnings: List[BilingualText] = Field(default_factory=list)

    class Config:
        use_enum_values = True


# =============================================================================
# WHAT-IF CONTRACTS
# =============================================================================

class ImprovementAction(BaseModel):
    """
    Immutable catalog entry.
    `precondition` returns a reason string when the action is not applicable.
    `apply` returns a new profile and never mutates its argument.
    """
    id: str
    title: BilingualText
    description: BilingualText
    category: ScenarioCategory
    difficulty: Difficulty
    timeline_months: int = Field(gt=0)
    exclusive_group: Optional[str] = None
    requires_external_approval: bool = False
    precondition: Callable[[BaseModel], Optional[str]] = Field(exclude=True, repr=False)
    apply: Callable[[BaseModel], BaseModel] = Field(exclude=True, repr=False)

    class Config:
        frozen = True
        use_enum_values = True
        validate_default = True


class ScenarioEvaluation(BaseModel):
    action: ImprovementAction
    new_score: int
    points_gain: int
    is_applicable: bool
    reason: Optional[str] = None


class PrioritizedAction(BaseModel):
    action: ImprovementAction
    points_gain: int
    efficiency: float
    priority: Level
    reason: str

    class Config:
        use_enum_values = True


class WhatIfResult(BaseModel):
    """
    Per-action scenarios for one profile.
    target_score and recommendations are filled in when a target is given.
    """
    program: str
    current_score: int
    scenarios: List[ScenarioEvaluation] = Field(default_factory=list)
    best_scenario: Optional[ImprovementAction] = None
    combined_max_score: int
    target_score: Optional[int] = None
    recommendations: List[PrioritizedAction] = Field(default_factory=list)


class Milestone(BaseModel):
    title: BilingualText
    months_from_now: int


class TimelineEstimate(BaseModel):
    estimated_months: int
    confidence: Level
    factors: List[str] = Field(default_factory=list)
    milestones: List[Milestone] = Field(default_factory=list)

    class Config:
        use_enum_values = True


# =============================================================================
# DRAW INTELLIGENCE CONTRACTS
# =============================================================================

class TrendAnalysis(BaseModel):
    average_cutoff: int = 0
    lowest_cutoff: int = 0
    highest_cutoff: int = 0
    average_invitations: int = 0
    total_invitations: int = 0
    record_count: int = 0
    trend_direction: TrendDirection = TrendDirection.STABLE
    trend_strength: float = Field(default=0.0, ge=-100.0, le=100.0)

    class Config:
        use_enum_values = True
        validate_default = True


class DrawPrediction(BaseModel):
    predicted_cutoff: int
    confidence_level: Level
    predicted_date: date
    range_min: int
    range_max: int
    factors: List[str] = Field(default_factory=list)

    class Config:
        use_enum_values = True


class CategoryChance(BaseModel):
    category: str
    average_cutoff: int
    minimum_cutoff: int
    chance: Level

    class Config:
        use_enum_values = True


class UserDrawComparison(BaseModel):
    user_score: int
    would_qualify_now: bool
    matching_records: List[HistoricalDrawRecord] = Field(default_factory=list)
    average_gap: int = 0
    percentile: int = 0
    per_category_chance: List[CategoryChance] = Field(default_factory=list)


class DrawAlert(BaseModel):
    type: AlertType
    title: BilingualText
    message: BilingualText
    priority: Level

    class Config:
        use_enum_values = True


class ScoreStanding(BaseModel):
    """Where a score sits against the general (all-program) draws."""
    status: StandingStatus
    average_cutoff: int
    lowest_cutoff: int
    most_recent_record: Optional[HistoricalDrawRecord] = None
    qualified_records_count: int
    qualified_general_count: int
    total_records: int
    total_general_records: int
    points_needed: int = 0
    points_above_average: int = 0

    class Config:
        use_enum_values = True
