"""
Assessment Engine Constants

Point tables, category caps, thresholds and defaults used by the score
calculators, the what-if engine and the draw intelligence module.
All values are static reference data - no logic lives here.
"""

from enum import Enum
from typing import Dict, Tuple


class Program(str, Enum):
    """Programs with a registered score calculator."""
    CANADA_CRS = "canada_crs"
    AUSTRALIA_POINTS = "australia_points"
    PORTUGAL_D2 = "portugal_d2"
    PORTUGAL_D7 = "portugal_d7"
    PORTUGAL_D8 = "portugal_d8"


# =============================================================================
# CANADA - COMPREHENSIVE RANKING SYSTEM
# =============================================================================

CRS_MAX_AGE = 45
CRS_MAX_CLB = 10
CRS_MAX_CANADIAN_WORK_YEARS = 5
CRS_MAX_FOREIGN_WORK_YEARS = 3

# Age points (with accompanying spouse)
CRS_AGE_POINTS_WITH_SPOUSE: Dict[int, int] = {
    17: 0, 18: 90, 19: 95, 20: 100, 21: 105, 22: 110, 23: 110, 24: 110,
    25: 110, 26: 110, 27: 110, 28: 110, 29: 110, 30: 105, 31: 99,
    32: 94, 33: 88, 34: 83, 35: 77, 36: 72, 37: 66, 38: 61,
    39: 55, 40: 50, 41: 39, 42: 28, 43: 17, 44: 6, 45: 0,
}

# Age points (single, or spouse not accompanying)
CRS_AGE_POINTS_NO_SPOUSE: Dict[int, int] = {
    17: 0, 18: 99, 19: 105, 20: 110, 21: 115, 22: 120, 23: 120, 24: 120,
    25: 120, 26: 120, 27: 120, 28: 120, 29: 120, 30: 115, 31: 109,
    32: 103, 33: 97, 34: 91, 35: 85, 36: 79, 37: 73, 38: 67,
    39: 61, 40: 55, 41: 43, 42: 31, 43: 19, 44: 7, 45: 0,
}

CRS_EDUCATION_POINTS_WITH_SPOUSE: Dict[str, int] = {
    "none": 0,
    "high_school": 28,
    "one_year": 84,
    "two_year": 91,
    "bachelor": 112,
    "two_or_more": 119,
    "master": 126,
    "phd": 140,
}

CRS_EDUCATION_POINTS_NO_SPOUSE: Dict[str, int] = {
    "none": 0,
    "high_school": 30,
    "one_year": 90,
    "two_year": 98,
    "bachelor": 120,
    "two_or_more": 128,
    "master": 135,
    "phd": 150,
}

# First official language, points per skill keyed by CLB level
CRS_LANGUAGE_POINTS_PER_SKILL_WITH_SPOUSE: Dict[int, int] = {
    0: 0, 1: 0, 2: 0, 3: 0, 4: 0, 5: 1, 6: 1, 7: 3, 8: 5, 9: 6, 10: 6,
}

CRS_LANGUAGE_POINTS_PER_SKILL_NO_SPOUSE: Dict[int, int] = {
    0: 0, 1: 0, 2: 0, 3: 0, 4: 0, 5: 1, 6: 1, 7: 3, 8: 6, 9: 7, 10: 8,
}

CRS_SECOND_LANGUAGE_MIN_CLB = 5
CRS_SECOND_LANGUAGE_POINTS = 24

CRS_CANADIAN_WORK_WITH_SPOUSE: Dict[int, int] = {
    0: 0, 1: 35, 2: 46, 3: 56, 4: 63, 5: 70,
}

CRS_CANADIAN_WORK_NO_SPOUSE: Dict[int, int] = {
    0: 0, 1: 40, 2: 53, 3: 64, 4: 72, 5: 80,
}

CRS_SPOUSE_EDUCATION_POINTS: Dict[str, int] = {
    "none": 0,
    "high_school": 2,
    "one_year": 6,
    "two_year": 7,
    "bachelor": 8,
    "two_or_more": 9,
    "master": 10,
    "phd": 10,
}

# (minimum CLB in every skill, points) - checked highest first
CRS_SPOUSE_LANGUAGE_BANDS: Tuple[Tuple[int, int], ...] = (
    (9, 20),
    (7, 10),
    (5, 5),
)

CRS_SPOUSE_CANADIAN_WORK_POINTS: Dict[int, int] = {
    0: 0, 1: 5, 2: 7, 3: 8, 4: 9, 5: 10,
}

# Skill transferability
CRS_TRANSFERABILITY_MIN_AVG_CLB = 7

# Education tier used by the transferability combinations
CRS_EDUCATION_TRANSFER_TIER: Dict[str, str] = {
    "none": "none",
    "high_school": "none",
    "one_year": "post_secondary",
    "two_year": "post_secondary",
    "bachelor": "degree",
    "two_or_more": "degree",
    "master": "advanced",
    "phd": "advanced",
}

CRS_EDUCATION_LANGUAGE_POINTS: Dict[str, int] = {
    "none": 0,
    "post_secondary": 13,
    "degree": 25,
    "advanced": 50,
}

# Keyed by (education tier, Canadian work years clamped to 2)
CRS_EDUCATION_CANADIAN_WORK_POINTS: Dict[Tuple[str, int], int] = {
    ("none", 0): 0, ("none", 1): 0, ("none", 2): 0,
    ("post_secondary", 0): 0, ("post_secondary", 1): 7, ("post_secondary", 2): 13,
    ("degree", 0): 0, ("degree", 1): 13, ("degree", 2): 25,
    ("advanced", 0): 0, ("advanced", 1): 25, ("advanced", 2): 50,
}

CRS_FOREIGN_LANGUAGE_POINTS: Dict[int, int] = {
    0: 0, 1: 13, 2: 25, 3: 50,
}

# Keyed by (foreign work years clamped to 3, Canadian work years clamped to 2)
CRS_FOREIGN_CANADIAN_WORK_POINTS: Dict[Tuple[int, int], int] = {
    (0, 0): 0, (0, 1): 0, (0, 2): 0,
    (1, 0): 0, (1, 1): 13, (1, 2): 25,
    (2, 0): 0, (2, 1): 13, (2, 2): 25,
    (3, 0): 0, (3, 1): 25, (3, 2): 50,
}

CRS_TRANSFER_SUBTOTAL_CAP = 50

# Additional points
CRS_NOMINATION_POINTS = 600
CRS_JOB_OFFER_POINTS: Dict[str, int] = {
    "00": 200,
    "0": 50,
    "A": 50,
    "B": 50,
    "none": 0,
}
CRS_CANADIAN_EDUCATION_POINTS: Dict[str, int] = {
    "one_two_year": 15,
    "three_year_plus": 15,
    "master_phd": 30,
}
CRS_CERTIFICATE_POINTS = 50
CRS_SIBLING_POINTS = 15
CRS_FRENCH_POINTS = 50

CRS_CATEGORY_CAPS_WITH_SPOUSE: Dict[str, int] = {
    "core_human_capital": 500,
    "spouse_factors": 40,
    "skill_transferability": 100,
    "additional_points": 600,
}

CRS_CATEGORY_CAPS_NO_SPOUSE: Dict[str, int] = {
    "core_human_capital": 600,
    "spouse_factors": 0,
    "skill_transferability": 100,
    "additional_points": 600,
}

CRS_SCORE_BANDS: Tuple[Tuple[int, str], ...] = (
    (470, "Excellent score! You have a strong chance in upcoming Express Entry draws"),
    (450, "Your score is competitive. Monitor draw cutoffs and consider PNP options"),
    (0, "Your score is below the typical cutoff. Focus on improving language scores and gaining work experience"),
)

# =============================================================================
# AUSTRALIA - SKILLED MIGRATION POINTS TEST
# =============================================================================

# (min age, max age inclusive, points)
AUS_AGE_BANDS: Tuple[Tuple[int, int, int], ...] = (
    (18, 24, 25),
    (25, 32, 30),
    (33, 39, 25),
    (40, 44, 15),
)

AUS_ENGLISH_POINTS: Dict[str, int] = {
    "competent": 0,
    "proficient": 10,
    "superior": 20,
}

# (minimum years, points) - checked highest first
AUS_OVERSEAS_EXPERIENCE_BANDS: Tuple[Tuple[int, int], ...] = (
    (8, 15),
    (5, 10),
    (3, 5),
)

AUS_AUSTRALIAN_EXPERIENCE_BANDS: Tuple[Tuple[int, int], ...] = (
    (8, 20),
    (5, 15),
    (3, 10),
    (1, 5),
)

AUS_EDUCATION_POINTS: Dict[str, int] = {
    "phd": 20,
    "master": 15,
    "bachelor": 15,
    "diploma": 10,
    "recognized_qualification": 10,
    "other": 0,
}

AUS_PARTNER_POINTS: Dict[str, int] = {
    "single": 10,
    "partner_skilled": 10,
    "partner_pr": 10,
    "partner_english": 5,
    "partner_no_points": 0,
}

AUS_NOMINATION_POINTS: Dict[str, int] = {
    "none": 0,
    "state_190": 5,
    "regional_491": 15,
}

AUS_SPECIALIST_EDUCATION_POINTS = 10
AUS_AUSTRALIAN_STUDY_POINTS = 5
AUS_PROFESSIONAL_YEAR_POINTS = 5
AUS_COMMUNITY_LANGUAGE_POINTS = 5
AUS_REGIONAL_STUDY_POINTS = 5

AUS_PASS_MARK = 65

AUS_CATEGORY_CAPS: Dict[str, int] = {
    "age": 30,
    "english": 20,
    "experience": 20,
    "education": 20,
    "specialist_education": 10,
    "australian_study": 5,
    "professional_year": 5,
    "community_language": 5,
    "regional_study": 5,
    "partner": 10,
    "nomination": 15,
}

# Minimum sub-scores (listening, reading, writing, speaking) per English level
AUS_ENGLISH_TEST_THRESHOLDS: Dict[str, Tuple[Tuple[str, Tuple[float, float, float, float]], ...]] = {
    "ielts": (
        ("superior", (8, 8, 8, 8)),
        ("proficient", (7, 7, 7, 7)),
        ("competent", (6, 6, 6, 6)),
    ),
    "pte": (
        ("superior", (79, 79, 79, 79)),
        ("proficient", (65, 65, 65, 65)),
        ("competent", (50, 50, 50, 50)),
    ),
    "toefl": (
        ("superior", (28, 29, 30, 26)),
        ("proficient", (24, 24, 27, 23)),
        ("competent", (12, 13, 21, 18)),
    ),
}

# =============================================================================
# PORTUGAL - NATIONAL VISAS
# =============================================================================

PORTUGAL_MINIMUM_WAGE_EUR = 920
D8_MINIMUM_INCOME_EUR = PORTUGAL_MINIMUM_WAGE_EUR * 4

# D7 income share of the minimum wage per household member
D7_MAIN_APPLICANT_SHARE = 1.0
D7_ADULT_DEPENDENT_SHARE = 0.5
D7_CHILD_DEPENDENT_SHARE = 0.3

D7_PASSIVE_INCOME_SOURCES = (
    "pension",
    "rental_income",
    "investments",
    "dividends",
    "intellectual_property",
    "other_passive",
)

D2_POINTS: Dict[str, int] = {
    "business_plan_or_investment": 30,
    "service_contract": 15,
    "professional_qualification": 10,
    "financial_means": 15,
    "accommodation": 10,
    "criminal_record": 10,
    "health_insurance": 10,
}

D7_POINTS: Dict[str, int] = {
    "monthly_income": 40,
    "passive_income_type": 15,
    "income_documentation": 15,
    "accommodation": 10,
    "criminal_record": 10,
    "health_insurance": 10,
}

D8_POINTS: Dict[str, int] = {
    "monthly_income": 35,
    "employer_location": 20,
    "remote_work_contract": 15,
    "bank_statements": 10,
    "fiscal_residence": 5,
    "accommodation": 5,
    "criminal_record": 5,
    "health_insurance": 5,
}

ELIGIBLE_MIN_SCORE = 70
LIKELY_ELIGIBLE_MIN_SCORE = 50
NEEDS_MORE_INFO_MIN_SCORE = 30

PORTUGAL_DOMESTIC_COUNTRY_NAMES = ("portugal", "pt")

# =============================================================================
# WHAT-IF ENGINE
# =============================================================================

DEFAULT_TARGET_SCORE = 480
MAX_RECOMMENDATIONS = 5
QUICK_WIN_MAX_MONTHS = 6
SIGNIFICANT_GAIN_POINTS = 20

EXPRESS_ENTRY_PROCESSING_MONTHS = 6

# (minimum score, months to invitation, confidence) - checked highest first
ITA_WAIT_BANDS: Tuple[Tuple[int, int, str], ...] = (
    (520, 1, "high"),
    (480, 3, "medium"),
    (450, 6, "medium"),
    (420, 12, "low"),
    (0, 24, "low"),
)

# =============================================================================
# DRAW INTELLIGENCE
# =============================================================================

DRAW_WINDOW_SIZE = 10
DRAW_CADENCE_DAYS = 14

TREND_SLOPE_SCALE = 10
TREND_STRENGTH_LIMIT = 100
TREND_STABLE_THRESHOLD = 5
TREND_ALERT_THRESHOLD = 20

VARIANCE_HIGH_CONFIDENCE = 100
VARIANCE_MEDIUM_CONFIDENCE = 400
VARIANCE_UNCERTAINTY_FACTOR = 200
LIMITED_DATA_RECORDS = 5
MIN_RECORDS_FOR_PREDICTION = 2

PLAUSIBLE_CUTOFF_MIN = 400
PLAUSIBLE_CUTOFF_MAX = 600

DEFAULT_PREDICTED_CUTOFF = 480
DEFAULT_RANGE_MIN = 450
DEFAULT_RANGE_MAX = 520

ALMOST_QUALIFYING_GAP = 20
STANDING_EXCELLENT_MARGIN = 20

GENERAL_DRAW_LABEL = "All programs"

DRAW_CATEGORIES: Dict[str, str] = {
    "All programs": "general",
    "No program specified": "general",
    "Canadian Experience Class": "cec",
    "Federal Skilled Worker": "fsw",
    "Federal Skilled Trades": "fst",
    "Provincial Nominee Program": "pnp",
    "Healthcare occupations": "healthcare",
    "STEM occupations": "stem",
    "Trade occupations": "trades",
    "Transport occupations": "transport",
    "Agriculture and agri-food occupations": "agriculture",
    "French language proficiency": "french",
}

# =============================================================================
# LANGUAGE TEST -> CLB CONVERSION
# =============================================================================

# (minimum test score, CLB) per skill - checked highest first, below all -> 0
_TEF_PRODUCTIVE_BANDS = ((393, 10), (371, 9), (349, 8), (310, 7), (271, 6), (226, 5), (181, 4))
_TCF_PRODUCTIVE_BANDS = ((16, 10), (14, 9), (12, 8), (10, 7), (7, 6), (6, 5), (4, 4))

CLB_CONVERSION_BANDS: Dict[str, Dict[str, Tuple[Tuple[float, int], ...]]] = {
    "ielts": {
        "listening": ((8.5, 10), (8.0, 9), (7.5, 8), (6.0, 7), (5.5, 6), (5.0, 5), (4.5, 4)),
        "reading": ((8.0, 10), (7.0, 9), (6.5, 8), (6.0, 7), (5.0, 6), (4.0, 5), (3.5, 4)),
        "speaking": ((7.5, 10), (7.0, 9), (6.5, 8), (6.0, 7), (5.5, 6), (5.0, 5), (4.0, 4)),
        "writing": ((7.5, 10), (7.0, 9), (6.5, 8), (6.0, 7), (5.5, 6), (5.0, 5), (4.0, 4)),
    },
    "tef": {
        "listening": ((316, 10), (298, 9), (280, 8), (249, 7), (217, 6), (181, 5), (145, 4)),
        "reading": ((263, 10), (248, 9), (233, 8), (207, 7), (181, 6), (151, 5), (121, 4)),
        "speaking": _TEF_PRODUCTIVE_BANDS,
        "writing": _TEF_PRODUCTIVE_BANDS,
    },
    "tcf": {
        "listening": ((549, 10), (523, 9), (503, 8), (458, 7), (398, 6), (369, 5), (331, 4)),
        "reading": ((549, 10), (524, 9), (499, 8), (453, 7), (406, 6), (375, 5), (342, 4)),
        "speaking": _TCF_PRODUCTIVE_BANDS,
        "writing": _TCF_PRODUCTIVE_BANDS,
    },
}

# CELPIP levels map one-to-one onto CLB
CELPIP_MAX_CLB = 10

# Top of each test's scale per skill
CLB_TEST_MAX_SCORES: Dict[str, Dict[str, float]] = {
    "ielts": {"listening": 9, "reading": 9, "speaking": 9, "writing": 9},
    "celpip": {"listening": 12, "reading": 12, "speaking": 12, "writing": 12},
    "tef": {"listening": 360, "reading": 300, "speaking": 450, "writing": 450},
    "tcf": {"listening": 699, "reading": 699, "speaking": 20, "writing": 20},
}
