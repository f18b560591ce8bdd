"""
Terminal fallback analytics.

Legacy analytics stand in when a judge has no cases in the window;
Conservative analytics stand in when statistical analysis itself fails.
Neither is ever passed to the AI blender.
"""

from typing import Iterable

from ..utils.data_models import (
    MODEL_CONSERVATIVE,
    MODEL_PROFILE,
    AnalysisWindow,
    CaseAnalytics,
    Judge,
)
from ..utils.helpers import setup_logger

HOME_JURISDICTION_SHIFT = 5
LEGACY_CONFIDENCE = 65
CONSERVATIVE_CONFIDENCE = 60

logger = setup_logger(__name__)


def is_home_jurisdiction(judge: Judge, markers: Iterable[str]) -> bool:
    """Whether the judge's jurisdiction contains any home-jurisdiction marker."""
    jurisdiction = (judge.jurisdiction or "").lower()
    return bool(jurisdiction) and any(marker in jurisdiction for marker in markers)


def _uniform_confidence(value: int) -> dict:
    return {name: value for name in CaseAnalytics.confidence_fields()}


def generate_legacy_analytics(
    judge: Judge,
    window: AnalysisWindow,
    home_jurisdictions: Iterable[str] = ("ca", "california"),
) -> CaseAnalytics:
    """
    Profile-based baseline for a judge without case data.

    Home-jurisdiction judges get point estimates shifted by five points;
    confidence is never shifted.
    """
    logger.info(f"Generating legacy analytics for {judge.name} (no cases available)")

    shift = HOME_JURISDICTION_SHIFT if is_home_jurisdiction(judge, home_jurisdictions) else 0

    return CaseAnalytics(
        civil_plaintiff_favor=48 + shift,
        family_custody_mother=52 + shift,
        family_alimony_favorable=42 + shift,
        contract_enforcement_rate=68 - shift,
        criminal_sentencing_severity=50,
        criminal_plea_acceptance=75,
        bail_release_rate=65 + shift,
        appeal_reversal_rate=15,
        settlement_encouragement_rate=60,
        motion_grant_rate=45,
        **_uniform_confidence(LEGACY_CONFIDENCE),
        total_cases_analyzed=0,
        analysis_quality="profile_based",
        notable_patterns=(
            "Analysis based on judicial profile and jurisdiction patterns",
            f"No case data available within {window.lookback_years}-year window "
            f"({window.start_year}-{window.end_year})",
        ),
        data_limitations=(
            "No case data available",
            "Estimates based on regional and court type patterns",
        ),
        ai_model=MODEL_PROFILE,
    )


def generate_conservative_analytics(
    judge: Judge, case_count: int, window: AnalysisWindow
) -> CaseAnalytics:
    """Fixed defaults used when the analysis pipeline failed on loaded cases."""
    logger.warning(
        f"Generating conservative analytics for {judge.name} "
        f"({case_count} cases, analysis failed)"
    )

    return CaseAnalytics(
        civil_plaintiff_favor=50,
        family_custody_mother=50,
        family_alimony_favorable=40,
        contract_enforcement_rate=65,
        criminal_sentencing_severity=50,
        criminal_plea_acceptance=70,
        bail_release_rate=60,
        appeal_reversal_rate=15,
        settlement_encouragement_rate=55,
        motion_grant_rate=45,
        **_uniform_confidence(CONSERVATIVE_CONFIDENCE),
        total_cases_analyzed=case_count,
        analysis_quality="conservative",
        notable_patterns=("Conservative estimates due to analysis processing limitations",),
        data_limitations=(
            "Case analysis unavailable",
            "Using statistical defaults",
            f"Window analyzed: {window.start_year}-{window.end_year}",
        ),
        ai_model=MODEL_CONSERVATIVE,
    )
