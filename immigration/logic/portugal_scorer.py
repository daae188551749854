"""
Portugal Visa Scorers

Per-visa eligibility scorers for the D2 (entrepreneur / freelancer),
D7 (passive income) and D8 (digital nomad) national visas, plus the
visa matcher that shortlists visa types from a coarse situation.

Each scorer walks a fixed list of requirement checks. A check adds its
points to the breakdown when met; a missed mandatory check blocks the
"eligible" and "likely eligible" statuses.
"""

import math
from typing import Dict, List, Optional

from .contracts import (
    BilingualText,
    EligibilityAssessment,
    EligibilityCheck,
    EligibilityStatus,
    Level,
    PortugalD2Profile,
    PortugalD7Profile,
    PortugalD8Profile,
    PortugalVisaType,
    ScoreResult,
    VisaMatcherInput,
    VisaRecommendation,
)
from .errors import lookup
from .constants import (
    Program,
    PORTUGAL_MINIMUM_WAGE_EUR,
    D8_MINIMUM_INCOME_EUR,
    D7_MAIN_APPLICANT_SHARE,
    D7_ADULT_DEPENDENT_SHARE,
    D7_CHILD_DEPENDENT_SHARE,
    D7_PASSIVE_INCOME_SOURCES,
    D2_POINTS,
    D7_POINTS,
    D8_POINTS,
    ELIGIBLE_MIN_SCORE,
    LIKELY_ELIGIBLE_MIN_SCORE,
    NEEDS_MORE_INFO_MIN_SCORE,
    PORTUGAL_DOMESTIC_COUNTRY_NAMES,
)


ACCOMMODATION_MISSING = BilingualText(
    en="Proof of accommodation in Portugal is required",
    ar="إثبات السكن في البرتغال مطلوب",
)
INSURANCE_MISSING = BilingualText(
    en="Valid travel/health insurance is required",
    ar="تأمين سفر/صحي صالح مطلوب",
)


def _eur(amount: float) -> str:
    return f"€{amount:,.0f}"


def _is_domestic(country: Optional[str]) -> bool:
    return (country or "").strip().lower() in PORTUGAL_DOMESTIC_COUNTRY_NAMES


def d7_required_income(adult_dependents: int, child_dependents: int) -> int:
    """Monthly income a D7 household must show, rounded up to whole euros."""
    return math.ceil(
        PORTUGAL_MINIMUM_WAGE_EUR * D7_MAIN_APPLICANT_SHARE
        + adult_dependents * PORTUGAL_MINIMUM_WAGE_EUR * D7_ADULT_DEPENDENT_SHARE
        + child_dependents * PORTUGAL_MINIMUM_WAGE_EUR * D7_CHILD_DEPENDENT_SHARE
    )


def classify_eligibility(score: int, mandatory_met: bool) -> EligibilityStatus:
    if mandatory_met and score >= ELIGIBLE_MIN_SCORE:
        return EligibilityStatus.ELIGIBLE
    if mandatory_met and score >= LIKELY_ELIGIBLE_MIN_SCORE:
        return EligibilityStatus.LIKELY_ELIGIBLE
    if score >= NEEDS_MORE_INFO_MIN_SCORE:
        return EligibilityStatus.NEEDS_MORE_INFO
    return EligibilityStatus.NOT_ELIGIBLE


class _Checklist:
    """Accumulates requirement checks for one visa."""

    def __init__(self, table_name: str, points_table: Dict[str, int]):
        self.table_name = table_name
        self.points_table = points_table
        self.breakdown: Dict[str, int] = {category: 0 for category in points_table}
        self.checks: List[EligibilityCheck] = []
        self.missing: List[BilingualText] = []
        self.recommendations: List[BilingualText] = []
        self.mandatory_met = True

    def check(
        self,
        category: str,
        met: bool,
        details: BilingualText,
        missing: Optional[BilingualText] = None,
        mandatory: bool = False,
    ) -> None:
        self.checks.append(EligibilityCheck(category=category, met=met, details=details))
        if met:
            self.breakdown[category] = lookup(self.table_name, self.points_table, category)
            return
        if mandatory:
            self.mandatory_met = False
        if missing is not None:
            self.missing.append(missing)

    def recommend(self, en: str, ar: str = "") -> None:
        self.recommendations.append(BilingualText(en=en, ar=ar))

    def result(self, program: Program) -> ScoreResult:
        total = sum(self.breakdown.values())
        status = classify_eligibility(total, self.mandatory_met)
        return ScoreResult(
            program=program.value,
            total_score=total,
            breakdown=self.breakdown,
            recommendations=[text.en for text in self.recommendations],
            eligibility=EligibilityAssessment(
                status=status,
                meets_mandatory_requirements=self.mandatory_met,
                checks=self.checks,
                missing_requirements=self.missing,
                recommendations=self.recommendations,
            ),
        )


def _common_checks(checklist: _Checklist, has_accommodation: bool,
                   has_criminal_record: bool, has_health_insurance: bool) -> None:
    checklist.check(
        "accommodation",
        has_accommodation,
        BilingualText(en="Accommodation proof available", ar="إثبات السكن متوفر")
        if has_accommodation
        else BilingualText(en="Accommodation proof required", ar="إثبات السكن مطلوب"),
        missing=ACCOMMODATION_MISSING,
        mandatory=True,
    )
    checklist.check(
        "criminal_record",
        not has_criminal_record,
        BilingualText(en="No criminal record", ar="لا يوجد سجل جنائي")
        if not has_criminal_record
        else BilingualText(en="Criminal record may affect application", ar="السجل الجنائي قد يؤثر على الطلب"),
    )
    checklist.check(
        "health_insurance",
        has_health_insurance,
        BilingualText(en="Health insurance available", ar="التأمين الصحي متوفر")
        if has_health_insurance
        else BilingualText(en="Health insurance required", ar="التأمين الصحي مطلوب"),
        missing=INSURANCE_MISSING,
        mandatory=True,
    )


# =============================================================================
# D2 - ENTREPRENEUR / FREELANCER
# =============================================================================

def calculate_d2(profile: PortugalD2Profile) -> ScoreResult:
    """Score D2 eligibility. A business plan or an investment is mandatory."""
    checklist = _Checklist("d2_points", D2_POINTS)

    has_plan_or_investment = profile.has_business_plan or profile.has_investment
    if profile.has_investment:
        amount = _eur(profile.investment_amount) if profile.investment_amount is not None else "N/A"
        details = BilingualText(en=f"Investment proof available ({amount})", ar=f"إثبات الاستثمار متوفر ({amount})")
    elif profile.has_business_plan:
        details = BilingualText(en="Business plan available", ar="خطة العمل متوفرة")
    else:
        details = BilingualText(
            en="Missing: Business plan OR investment proof required",
            ar="مفقود: خطة العمل أو إثبات الاستثمار مطلوب",
        )
    checklist.check(
        "business_plan_or_investment",
        has_plan_or_investment,
        details,
        missing=BilingualText(
            en="You must have either a viable business plan OR proof of executed investment in Portugal",
            ar="يجب أن يكون لديك إما خطة عمل قابلة للتطبيق أو إثبات استثمار منفذ في البرتغال",
        ),
        mandatory=True,
    )

    # Service contracts only count for liberal professions
    if profile.employment_type == "liberal_profession":
        checklist.check(
            "service_contract",
            profile.has_service_contract,
            BilingualText(en="Service contract or proposal available", ar="عقد الخدمات أو العرض متوفر")
            if profile.has_service_contract
            else BilingualText(
                en="Service contract recommended for liberal professions",
                ar="عقد الخدمات موصى به للمهن الحرة",
            ),
        )
        if not profile.has_service_contract:
            checklist.recommend(
                "For liberal professions, having a service contract or proposal strengthens your application",
                "للمهن الحرة، وجود عقد خدمات أو عرض يقوي طلبك",
            )

    if profile.has_professional_qualification:
        checklist.check(
            "professional_qualification",
            True,
            BilingualText(
                en="Professional qualification documents available",
                ar="وثائق المؤهلات المهنية متوفرة",
            ),
        )

    checklist.check(
        "financial_means",
        profile.has_financial_means_in_portugal,
        BilingualText(en="Proof of financial means available", ar="إثبات الموارد المالية متوفر")
        if profile.has_financial_means_in_portugal
        else BilingualText(en="Proof of financial means required", ar="إثبات الموارد المالية مطلوب"),
        missing=BilingualText(
            en="Proof of financial means available in Portugal is required",
            ar="إثبات الموارد المالية المتاحة في البرتغال مطلوب",
        ),
        mandatory=True,
    )

    _common_checks(
        checklist, profile.has_accommodation, profile.has_criminal_record, profile.has_health_insurance
    )
    if profile.has_criminal_record:
        checklist.recommend(
            "A criminal record may complicate your application - consult with an immigration lawyer",
            "السجل الجنائي قد يعقد طلبك - استشر محامي هجرة",
        )

    return checklist.result(Program.PORTUGAL_D2)


# =============================================================================
# D7 - PASSIVE INCOME
# =============================================================================

def calculate_d7(profile: PortugalD7Profile) -> ScoreResult:
    """Score D7 eligibility against the household income requirement."""
    checklist = _Checklist("d7_points", D7_POINTS)

    required = d7_required_income(profile.adult_dependents, profile.child_dependents)
    income = profile.monthly_income
    meets_income = income >= required
    gap = required - income
    checklist.check(
        "monthly_income",
        meets_income,
        BilingualText(en=f"Your income ({_eur(income)}) meets the required {_eur(required)}/month")
        if meets_income
        else BilingualText(
            en=f"Your income ({_eur(income)}) is below the required {_eur(required)}/month (gap: {_eur(gap)})"
        ),
        missing=BilingualText(
            en=f"You need {_eur(gap)} more monthly passive income",
            ar=f"تحتاج {_eur(gap)} إضافية من الدخل السلبي الشهري",
        ),
        mandatory=True,
    )

    source = profile.income_source
    checklist.check(
        "passive_income_type",
        source in D7_PASSIVE_INCOME_SOURCES,
        BilingualText(en=f"Income source: {source.replace('_', ' ')}"),
    )

    checklist.check(
        "income_documentation",
        profile.has_income_documentation,
        BilingualText(en="Income documentation available", ar="وثائق الدخل متوفرة")
        if profile.has_income_documentation
        else BilingualText(en="Income documentation required", ar="وثائق الدخل مطلوبة"),
        missing=BilingualText(
            en="Documentation proving your passive income is required (bank statements, pension certificate, etc.)",
            ar="مطلوب وثائق تثبت دخلك السلبي (كشوف حساب بنكية، شهادة تقاعد، إلخ)",
        ),
        mandatory=True,
    )

    _common_checks(
        checklist, profile.has_accommodation, profile.has_criminal_record, profile.has_health_insurance
    )

    if source == "pension":
        checklist.recommend(
            "As a pensioner, ensure you have official pension statements translated and apostilled",
            "كمتقاعد، تأكد من وجود كشوف المعاش الرسمية مترجمة ومصدقة",
        )

    return checklist.result(Program.PORTUGAL_D7)


# =============================================================================
# D8 - DIGITAL NOMAD
# =============================================================================

def calculate_d8(profile: PortugalD8Profile) -> ScoreResult:
    """Score D8 eligibility. Income must reach four times the minimum wage."""
    checklist = _Checklist("d8_points", D8_POINTS)

    income = profile.average_monthly_income
    meets_income = income >= D8_MINIMUM_INCOME_EUR
    gap = D8_MINIMUM_INCOME_EUR - income
    checklist.check(
        "monthly_income",
        meets_income,
        BilingualText(
            en=f"Your average income ({_eur(income)}) meets the {_eur(D8_MINIMUM_INCOME_EUR)}/month requirement"
        )
        if meets_income
        else BilingualText(
            en=f"Your income ({_eur(income)}) is {_eur(gap)} below the required {_eur(D8_MINIMUM_INCOME_EUR)}/month"
        ),
        missing=BilingualText(
            en=f"You need {_eur(gap)} more monthly income to qualify for the D8 visa",
            ar=f"تحتاج {_eur(gap)} إضافية شهرياً للتأهل لتأشيرة D8",
        ),
        mandatory=True,
    )
    if not meets_income:
        checklist.recommend(
            "Consider the D7 visa if your income is above €920/month but below €3,680/month",
            "فكر في تأشيرة D7 إذا كان دخلك أعلى من 920€/شهر ولكن أقل من 3,680€/شهر",
        )

    country = profile.employer_country.strip()
    employer_abroad = bool(country) and not _is_domestic(country)
    checklist.check(
        "employer_location",
        employer_abroad,
        BilingualText(
            en=f"Employer is based in {country} (outside Portugal)",
            ar=f"صاحب العمل موجود في {country} (خارج البرتغال)",
        )
        if employer_abroad
        else BilingualText(
            en="D8 visa requires employer to be outside Portugal",
            ar="تأشيرة D8 تتطلب أن يكون صاحب العمل خارج البرتغال",
        ),
        missing=BilingualText(
            en="Your employer must be based outside Portugal for the D8 visa",
            ar="يجب أن يكون صاحب عملك خارج البرتغال لتأشيرة D8",
        ),
        mandatory=True,
    )
    if not employer_abroad:
        checklist.recommend(
            "If your employer is in Portugal, consider the D1 (Subordinate Work) visa instead",
            "إذا كان صاحب عملك في البرتغال، فكر في تأشيرة D1 (العمل التابع) بدلاً من ذلك",
        )

    checklist.check(
        "remote_work_contract",
        profile.has_remote_work_contract,
        BilingualText(en="Remote work contract/proof available", ar="عقد/إثبات العمل عن بُعد متوفر")
        if profile.has_remote_work_contract
        else BilingualText(en="Remote work contract required", ar="عقد العمل عن بُعد مطلوب"),
        missing=BilingualText(
            en="You need a work contract or proof of remote service provision",
            ar="تحتاج عقد عمل أو إثبات تقديم خدمات عن بُعد",
        ),
        mandatory=True,
    )

    checklist.check(
        "bank_statements",
        profile.has_bank_statements,
        BilingualText(en="Bank statements for last 3 months available")
        if profile.has_bank_statements
        else BilingualText(en="Bank statements for last 3 months required"),
        missing=BilingualText(
            en="Bank statements for the last 3 months showing your income are required",
            ar="كشوف الحساب البنكية لآخر 3 أشهر توضح دخلك مطلوبة",
        ),
        mandatory=True,
    )

    # Not mandatory, but still listed as missing
    checklist.check(
        "fiscal_residence",
        profile.has_fiscal_residence,
        BilingualText(en="Fiscal residence proof available", ar="إثبات الإقامة الضريبية متوفر")
        if profile.has_fiscal_residence
        else BilingualText(en="Fiscal residence proof required", ar="إثبات الإقامة الضريبية مطلوب"),
        missing=BilingualText(
            en="Proof of fiscal residence in your current country is required",
            ar="إثبات الإقامة الضريبية في بلدك الحالي مطلوب",
        ),
    )

    _common_checks(
        checklist, profile.has_accommodation, profile.has_criminal_record, profile.has_health_insurance
    )

    if meets_income and employer_abroad:
        checklist.recommend(
            "D8 visa holders can also work for Portuguese entities, offering flexibility",
            "حاملو تأشيرة D8 يمكنهم أيضاً العمل لجهات برتغالية، مما يوفر مرونة",
        )

    return checklist.result(Program.PORTUGAL_D8)


# =============================================================================
# VISA MATCHER
# =============================================================================

def match_visas(situation: VisaMatcherInput) -> List[VisaRecommendation]:
    """
    Shortlist Portuguese visa types for a coarse situation.

    Args:
        situation: job offer / remote work / passive income / business flags and income

    Returns:
        Recommendations sorted by score, highest first
    """
    income = situation.monthly_income
    recommendations: List[VisaRecommendation] = []

    if situation.has_portuguese_job_offer:
        recommendations.append(VisaRecommendation(
            visa_type=PortugalVisaType.D1,
            score=95,
            confidence=Level.HIGH,
            reasons=[BilingualText(
                en="You have a job offer from a Portuguese employer",
                ar="لديك عرض عمل من صاحب عمل برتغالي",
            )],
        ))

    if situation.is_remote_worker and not _is_domestic(situation.employer_country):
        meets_income = income >= D8_MINIMUM_INCOME_EUR
        recommendations.append(VisaRecommendation(
            visa_type=PortugalVisaType.D8,
            score=90 if meets_income else 60,
            confidence=Level.HIGH if meets_income else Level.MEDIUM,
            reasons=[
                BilingualText(
                    en="You work remotely for a non-Portuguese company",
                    ar="تعمل عن بُعد لشركة غير برتغالية",
                ),
                BilingualText(
                    en=f"Your income ({_eur(income)}) meets the {_eur(D8_MINIMUM_INCOME_EUR)}/month requirement"
                )
                if meets_income
                else BilingualText(
                    en=f"Your income ({_eur(income)}) is below the {_eur(D8_MINIMUM_INCOME_EUR)}/month requirement"
                ),
            ],
            warnings=[] if meets_income else [BilingualText(
                en=f"You need {_eur(D8_MINIMUM_INCOME_EUR - income)} more monthly income",
                ar=f"تحتاج {_eur(D8_MINIMUM_INCOME_EUR - income)} إضافية شهرياً",
            )],
        ))

    no_other_route = not (
        situation.is_remote_worker or situation.has_portuguese_job_offer or situation.planning_business
    )
    if situation.has_passive_income or no_other_route:
        meets_income = income >= PORTUGAL_MINIMUM_WAGE_EUR
        recommendations.append(VisaRecommendation(
            visa_type=PortugalVisaType.D7,
            score=85 if meets_income else 50,
            confidence=Level.HIGH if meets_income else Level.LOW,
            reasons=[
                BilingualText(en="You have passive income sources", ar="لديك مصادر دخل سلبي")
                if situation.has_passive_income
                else BilingualText(
                    en="D7 visa allows you to live in Portugal with passive income",
                    ar="تأشيرة D7 تتيح لك العيش في البرتغال بدخل سلبي",
                ),
                BilingualText(
                    en=f"Your income ({_eur(income)}) meets the minimum {_eur(PORTUGAL_MINIMUM_WAGE_EUR)}/month"
                )
                if meets_income
                else BilingualText(
                    en=f"Minimum income required: {_eur(PORTUGAL_MINIMUM_WAGE_EUR)}/month"
                ),
            ],
        ))

    if situation.planning_business or (
        situation.is_remote_worker and _is_domestic(situation.employer_country)
    ):
        recommendations.append(VisaRecommendation(
            visa_type=PortugalVisaType.D2,
            score=75,
            confidence=Level.MEDIUM,
            reasons=[
                BilingualText(
                    en="You plan to start a business or work as a freelancer in Portugal",
                    ar="تخطط لبدء عمل تجاري أو العمل كمستقل في البرتغال",
                ),
                BilingualText(
                    en="Requires a viable business plan or service contracts",
                    ar="يتطلب خطة عمل قابلة للتطبيق أو عقود خدمات",
                ),
            ],
        ))

    if not situation.has_portuguese_job_offer and income < PORTUGAL_MINIMUM_WAGE_EUR:
        recommendations.append(VisaRecommendation(
            visa_type=PortugalVisaType.JOB_SEEKER,
            score=40,
            confidence=Level.LOW,
            reasons=[
                BilingualText(
                    en="Allows you to search for employment in Portugal for up to 120 days",
                    ar="يتيح لك البحث عن عمل في البرتغال لمدة تصل إلى 120 يوماً",
                ),
            ],
            warnings=[BilingualText(
                en="Job seeker visa has limited validity and recent policy changes",
                ar="تأشيرة البحث عن عمل لها صلاحية محدودة وتغييرات سياسية حديثة",
            )],
        ))

    return sorted(recommendations, key=lambda rec: rec.score, reverse=True)
