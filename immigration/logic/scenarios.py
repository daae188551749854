"""
Improvement Action Catalogs

Registries of what-if actions keyed by id, one per program.
Each action pairs a precondition (returns a reason when the action is not
applicable) with a pure transform that returns a new profile via model_copy.
"""

from typing import Dict, List, Optional

from .contracts import (
    AustraliaProfile,
    BilingualText,
    CanadaProfile,
    Difficulty,
    ImprovementAction,
    LanguageScores,
    ScenarioCategory,
)
from .constants import Program, CRS_MAX_CLB, CRS_MAX_CANADIAN_WORK_YEARS


FOREIGN_EXPERIENCE_CEILING = 5
AUSTRALIAN_EXPERIENCE_CEILING = 8


def _registry(actions: List[ImprovementAction]) -> Dict[str, ImprovementAction]:
    return {action.id: action for action in actions}


def _raise_language(scores: LanguageScores, floor: Optional[int] = None, step: int = 0) -> LanguageScores:
    """New LanguageScores with every skill raised by `step` (capped at CLB 10) or to `floor`."""
    def raised(value: int) -> int:
        if floor is not None:
            return max(value, floor)
        return min(CRS_MAX_CLB, value + step)

    return LanguageScores(
        speaking=raised(scores.speaking),
        listening=raised(scores.listening),
        reading=raised(scores.reading),
        writing=raised(scores.writing),
    )


# =============================================================================
# CANADA CRS ACTIONS
# =============================================================================

def _one_band_precondition(profile: CanadaProfile) -> Optional[str]:
    if profile.first_language.all_at_least(CRS_MAX_CLB):
        return "Already at CLB 10 in all skills"
    return None


def _one_band_apply(profile: CanadaProfile) -> CanadaProfile:
    return profile.model_copy(update={"first_language": _raise_language(profile.first_language, step=1)})


def _clb9_precondition(profile: CanadaProfile) -> Optional[str]:
    if profile.first_language.all_at_least(9):
        return "Already at CLB 9 in all skills"
    return None


def _clb9_apply(profile: CanadaProfile) -> CanadaProfile:
    return profile.model_copy(update={"first_language": _raise_language(profile.first_language, floor=9)})


def _french_precondition(profile: CanadaProfile) -> Optional[str]:
    if profile.has_french_language_skills:
        return "Already has French language skills"
    return None


def _french_apply(profile: CanadaProfile) -> CanadaProfile:
    second = profile.second_language or LanguageScores(speaking=0, listening=0, reading=0, writing=0)
    return profile.model_copy(update={
        "second_language": _raise_language(second, floor=7),
        "has_french_language_skills": True,
    })


def _masters_precondition(profile: CanadaProfile) -> Optional[str]:
    if profile.education_level == "master":
        return "Already has Master's degree"
    if profile.education_level == "phd":
        return "Already has PhD"
    return None


def _masters_apply(profile: CanadaProfile) -> CanadaProfile:
    return profile.model_copy(update={"education_level": "master"})


def _canadian_education_precondition(profile: CanadaProfile) -> Optional[str]:
    if profile.has_canadian_education:
        return "Already has Canadian education"
    return None


def _canadian_diploma_apply(profile: CanadaProfile) -> CanadaProfile:
    return profile.model_copy(update={
        "has_canadian_education": True,
        "canadian_education_level": "one_two_year",
    })


def _canadian_degree_apply(profile: CanadaProfile) -> CanadaProfile:
    return profile.model_copy(update={
        "has_canadian_education": True,
        "canadian_education_level": "three_year_plus",
    })


def _canadian_experience_precondition(profile: CanadaProfile) -> Optional[str]:
    if profile.canadian_work_experience >= CRS_MAX_CANADIAN_WORK_YEARS:
        return "Already has maximum Canadian work experience points"
    return None


def _canadian_experience_apply(profile: CanadaProfile) -> CanadaProfile:
    return profile.model_copy(update={"canadian_work_experience": profile.canadian_work_experience + 1})


def _foreign_experience_precondition(profile: CanadaProfile) -> Optional[str]:
    if profile.foreign_work_experience >= FOREIGN_EXPERIENCE_CEILING:
        return "Already has maximum foreign work experience points"
    return None


def _foreign_experience_apply(profile: CanadaProfile) -> CanadaProfile:
    years = min(profile.foreign_work_experience + 1, FOREIGN_EXPERIENCE_CEILING)
    return profile.model_copy(update={"foreign_work_experience": years})


def _nomination_precondition(profile: CanadaProfile) -> Optional[str]:
    if profile.has_provincial_nomination:
        return "Already has Provincial Nomination"
    return None


def _nomination_apply(profile: CanadaProfile) -> CanadaProfile:
    return profile.model_copy(update={"has_provincial_nomination": True})


def _job_offer_precondition(profile: CanadaProfile) -> Optional[str]:
    if profile.has_valid_job_offer:
        return "Already has valid job offer"
    return None


def _job_offer_apply(profile: CanadaProfile) -> CanadaProfile:
    return profile.model_copy(update={"has_valid_job_offer": True, "job_offer_noc": "A"})


def _certificate_precondition(profile: CanadaProfile) -> Optional[str]:
    if profile.has_certificate_of_qualification:
        return "Already has Certificate of Qualification"
    return None


def _certificate_apply(profile: CanadaProfile) -> CanadaProfile:
    return profile.model_copy(update={"has_certificate_of_qualification": True})


CANADA_ACTIONS: Dict[str, ImprovementAction] = _registry([
    # Language
    ImprovementAction(
        id="improve_ielts_one_band",
        title=BilingualText(
            en="Improve IELTS by 1 band (all sections)",
            ar="تحسين IELTS بدرجة واحدة (جميع الأقسام)",
        ),
        description=BilingualText(
            en="Study English and retake IELTS to score 1 band higher in all sections",
            ar="دراسة اللغة الإنجليزية وإعادة اختبار IELTS للحصول على درجة أعلى في جميع الأقسام",
        ),
        category=ScenarioCategory.LANGUAGE,
        difficulty=Difficulty.MEDIUM,
        timeline_months=3,
        precondition=_one_band_precondition,
        apply=_one_band_apply,
    ),
    ImprovementAction(
        id="reach_clb_9_all",
        title=BilingualText(
            en="Reach CLB 9 in all language skills",
            ar="الوصول إلى CLB 9 في جميع المهارات اللغوية",
        ),
        description=BilingualText(
            en="Achieve CLB 9 (IELTS 7.0) in all sections for maximum language points",
            ar="الوصول إلى CLB 9 (IELTS 7.0) في جميع الأقسام للحصول على أقصى نقاط اللغة",
        ),
        category=ScenarioCategory.LANGUAGE,
        difficulty=Difficulty.HARD,
        timeline_months=6,
        precondition=_clb9_precondition,
        apply=_clb9_apply,
    ),
    ImprovementAction(
        id="add_french_nclc_7",
        title=BilingualText(
            en="Learn French (NCLC 7 in all skills)",
            ar="تعلم الفرنسية (NCLC 7 في جميع المهارات)",
        ),
        description=BilingualText(
            en="Learn French and achieve NCLC 7+ to get bilingual bonus points",
            ar="تعلم اللغة الفرنسية وتحقيق NCLC 7+ للحصول على نقاط المكافأة ثنائية اللغة",
        ),
        category=ScenarioCategory.LANGUAGE,
        difficulty=Difficulty.HARD,
        timeline_months=12,
        precondition=_french_precondition,
        apply=_french_apply,
    ),
    # Education
    ImprovementAction(
        id="upgrade_to_masters",
        title=BilingualText(en="Earn a Master's degree", ar="الحصول على درجة الماجستير"),
        description=BilingualText(
            en="Complete a Master's degree program to increase education points",
            ar="إكمال برنامج الماجستير لزيادة نقاط التعليم",
        ),
        category=ScenarioCategory.EDUCATION,
        difficulty=Difficulty.HARD,
        timeline_months=24,
        precondition=_masters_precondition,
        apply=_masters_apply,
    ),
    ImprovementAction(
        id="canadian_one_year_diploma",
        title=BilingualText(en="Study 1-year program in Canada", ar="دراسة برنامج لمدة سنة في كندا"),
        description=BilingualText(
            en="Complete a 1-2 year credential in Canada for additional points",
            ar="إكمال برنامج من 1-2 سنة في كندا للحصول على نقاط إضافية",
        ),
        category=ScenarioCategory.EDUCATION,
        difficulty=Difficulty.HARD,
        timeline_months=12,
        exclusive_group="canadian_education",
        precondition=_canadian_education_precondition,
        apply=_canadian_diploma_apply,
    ),
    ImprovementAction(
        id="canadian_three_year_degree",
        title=BilingualText(en="Study 3+ year degree in Canada", ar="دراسة درجة 3+ سنوات في كندا"),
        description=BilingualText(
            en="Complete a 3+ year degree in Canada for maximum education bonus",
            ar="إكمال درجة 3+ سنوات في كندا للحصول على أقصى مكافأة تعليمية",
        ),
        category=ScenarioCategory.EDUCATION,
        difficulty=Difficulty.HARD,
        timeline_months=36,
        exclusive_group="canadian_education",
        precondition=_canadian_education_precondition,
        apply=_canadian_degree_apply,
    ),
    # Experience
    ImprovementAction(
        id="gain_one_year_canadian_experience",
        title=BilingualText(
            en="Gain 1 year Canadian work experience",
            ar="اكتساب سنة من الخبرة العملية الكندية",
        ),
        description=BilingualText(
            en="Work in Canada on a work permit for 1 year",
            ar="العمل في كندا بتصريح عمل لمدة سنة واحدة",
        ),
        category=ScenarioCategory.EXPERIENCE,
        difficulty=Difficulty.HARD,
        timeline_months=12,
        precondition=_canadian_experience_precondition,
        apply=_canadian_experience_apply,
    ),
    ImprovementAction(
        id="gain_one_year_foreign_experience",
        title=BilingualText(
            en="Gain 1 more year of foreign work experience",
            ar="اكتساب سنة إضافية من الخبرة الأجنبية",
        ),
        description=BilingualText(
            en="Continue working in your NOC code occupation for 1 more year",
            ar="استمر في العمل في مهنة كود NOC الخاصة بك لمدة سنة إضافية",
        ),
        category=ScenarioCategory.EXPERIENCE,
        difficulty=Difficulty.EASY,
        timeline_months=12,
        precondition=_foreign_experience_precondition,
        apply=_foreign_experience_apply,
    ),
    # Other
    ImprovementAction(
        id="get_provincial_nomination",
        title=BilingualText(en="Get Provincial Nomination (PNP)", ar="الحصول على ترشيح المقاطعة (PNP)"),
        description=BilingualText(
            en="Apply for and receive a Provincial Nominee Program nomination (+600 points)",
            ar="التقدم والحصول على ترشيح برنامج المرشح الإقليمي (+600 نقطة)",
        ),
        category=ScenarioCategory.OTHER,
        difficulty=Difficulty.HARD,
        timeline_months=6,
        requires_external_approval=True,
        precondition=_nomination_precondition,
        apply=_nomination_apply,
    ),
    ImprovementAction(
        id="get_job_offer_noc_0_A",
        title=BilingualText(en="Get job offer (NOC 0, A, or B)", ar="الحصول على عرض عمل (NOC 0، A، أو B)"),
        description=BilingualText(
            en="Secure a valid job offer from a Canadian employer in a skilled position",
            ar="الحصول على عرض عمل صالح من صاحب عمل كندي في وظيفة ماهرة",
        ),
        category=ScenarioCategory.OTHER,
        difficulty=Difficulty.HARD,
        timeline_months=3,
        precondition=_job_offer_precondition,
        apply=_job_offer_apply,
    ),
    ImprovementAction(
        id="trades_certificate",
        title=BilingualText(
            en="Get Certificate of Qualification in a trade",
            ar="الحصول على شهادة المؤهل في حرفة",
        ),
        description=BilingualText(
            en="Obtain a Canadian certificate of qualification in a skilled trade",
            ar="الحصول على شهادة مؤهل كندية في حرفة ماهرة",
        ),
        category=ScenarioCategory.OTHER,
        difficulty=Difficulty.HARD,
        timeline_months=12,
        precondition=_certificate_precondition,
        apply=_certificate_apply,
    ),
])


# =============================================================================
# AUSTRALIA POINTS ACTIONS
# =============================================================================

def _proficient_english_precondition(profile: AustraliaProfile) -> Optional[str]:
    if profile.english_level != "competent":
        return "Already at Proficient English or higher"
    return None


def _superior_english_precondition(profile: AustraliaProfile) -> Optional[str]:
    if profile.english_level == "superior":
        return "Already at Superior English"
    return None


def _flag_action_precondition(field: str, reason: str):
    def precondition(profile: AustraliaProfile) -> Optional[str]:
        return reason if getattr(profile, field) else None
    return precondition


def _set_flag(field: str):
    def apply(profile: AustraliaProfile) -> AustraliaProfile:
        return profile.model_copy(update={field: True})
    return apply


def _australian_experience_precondition(profile: AustraliaProfile) -> Optional[str]:
    if profile.australian_work_years >= AUSTRALIAN_EXPERIENCE_CEILING:
        return "Already has maximum Australian work experience points"
    return None


def _regional_nomination_precondition(profile: AustraliaProfile) -> Optional[str]:
    if profile.nomination == "regional_491":
        return "Already has regional (491) nomination"
    return None


AUSTRALIA_ACTIONS: Dict[str, ImprovementAction] = _registry([
    ImprovementAction(
        id="english_proficient",
        title=BilingualText(en="Reach Proficient English", ar="الوصول إلى مستوى الإنجليزية المتقدم"),
        description=BilingualText(
            en="Score IELTS 7 (PTE 65) in every band for 10 English points",
            ar="الحصول على IELTS 7 (PTE 65) في كل قسم للحصول على 10 نقاط",
        ),
        category=ScenarioCategory.LANGUAGE,
        difficulty=Difficulty.MEDIUM,
        timeline_months=3,
        exclusive_group="english",
        precondition=_proficient_english_precondition,
        apply=lambda profile: profile.model_copy(update={"english_level": "proficient"}),
    ),
    ImprovementAction(
        id="english_superior",
        title=BilingualText(en="Reach Superior English", ar="الوصول إلى مستوى الإنجليزية الممتاز"),
        description=BilingualText(
            en="Score IELTS 8 (PTE 79) in every band for the maximum 20 English points",
            ar="الحصول على IELTS 8 (PTE 79) في كل قسم للحصول على 20 نقطة",
        ),
        category=ScenarioCategory.LANGUAGE,
        difficulty=Difficulty.HARD,
        timeline_months=6,
        exclusive_group="english",
        precondition=_superior_english_precondition,
        apply=lambda profile: profile.model_copy(update={"english_level": "superior"}),
    ),
    ImprovementAction(
        id="credentialled_community_language",
        title=BilingualText(en="Pass a NAATI community language test", ar="اجتياز اختبار NAATI للغة المجتمعية"),
        description=BilingualText(
            en="Get accredited as a community language translator or interpreter",
            ar="الحصول على اعتماد كمترجم للغة مجتمعية",
        ),
        category=ScenarioCategory.LANGUAGE,
        difficulty=Difficulty.EASY,
        timeline_months=3,
        precondition=_flag_action_precondition(
            "credentialled_community_language", "Already has credentialled community language"
        ),
        apply=_set_flag("credentialled_community_language"),
    ),
    ImprovementAction(
        id="professional_year",
        title=BilingualText(en="Complete a Professional Year", ar="إكمال السنة المهنية"),
        description=BilingualText(
            en="Complete a 12-month Professional Year program in Australia",
            ar="إكمال برنامج السنة المهنية لمدة 12 شهراً في أستراليا",
        ),
        category=ScenarioCategory.EDUCATION,
        difficulty=Difficulty.MEDIUM,
        timeline_months=12,
        precondition=_flag_action_precondition("professional_year", "Already completed a Professional Year"),
        apply=_set_flag("professional_year"),
    ),
    ImprovementAction(
        id="regional_study",
        title=BilingualText(en="Study in regional Australia", ar="الدراسة في المناطق الإقليمية الأسترالية"),
        description=BilingualText(
            en="Complete an eligible qualification at a regional campus",
            ar="إكمال مؤهل معتمد في حرم جامعي إقليمي",
        ),
        category=ScenarioCategory.EDUCATION,
        difficulty=Difficulty.HARD,
        timeline_months=24,
        precondition=_flag_action_precondition("regional_study", "Already studied in regional Australia"),
        apply=_set_flag("regional_study"),
    ),
    ImprovementAction(
        id="specialist_education",
        title=BilingualText(en="Earn a specialist STEM qualification", ar="الحصول على مؤهل تخصصي في STEM"),
        description=BilingualText(
            en="Complete a research master's or PhD in a STEM field at an Australian institution",
            ar="إكمال ماجستير بحثي أو دكتوراه في مجال STEM في مؤسسة أسترالية",
        ),
        category=ScenarioCategory.EDUCATION,
        difficulty=Difficulty.HARD,
        timeline_months=24,
        precondition=_flag_action_precondition("specialist_education", "Already has specialist education"),
        apply=_set_flag("specialist_education"),
    ),
    ImprovementAction(
        id="gain_one_year_australian_experience",
        title=BilingualText(en="Gain 1 year Australian work experience", ar="اكتساب سنة من الخبرة العملية الأسترالية"),
        description=BilingualText(
            en="Work in your nominated occupation in Australia for 1 more year",
            ar="العمل في مهنتك المرشحة في أستراليا لسنة إضافية",
        ),
        category=ScenarioCategory.EXPERIENCE,
        difficulty=Difficulty.MEDIUM,
        timeline_months=12,
        precondition=_australian_experience_precondition,
        apply=lambda profile: profile.model_copy(
            update={"australian_work_years": profile.australian_work_years + 1}
        ),
    ),
    ImprovementAction(
        id="regional_491_nomination",
        title=BilingualText(en="Get regional (491) nomination", ar="الحصول على ترشيح إقليمي (491)"),
        description=BilingualText(
            en="Be nominated by a state or territory for the Skilled Work Regional visa (+15 points)",
            ar="الحصول على ترشيح من ولاية أو إقليم لتأشيرة العمل الماهر الإقليمية (+15 نقطة)",
        ),
        category=ScenarioCategory.OTHER,
        difficulty=Difficulty.HARD,
        timeline_months=6,
        requires_external_approval=True,
        precondition=_regional_nomination_precondition,
        apply=lambda profile: profile.model_copy(update={"nomination": "regional_491"}),
    ),
])


CATALOGS: Dict[Program, Dict[str, ImprovementAction]] = {
    Program.CANADA_CRS: CANADA_ACTIONS,
    Program.AUSTRALIA_POINTS: AUSTRALIA_ACTIONS,
}
