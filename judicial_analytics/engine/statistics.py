"""
Statistical pattern analysis over a judge's case history.

Cases are classified by case-insensitive keyword matching over
``case_type``, ``outcome``, ``summary`` and ``status``. A case can count
toward several categories at once. Each category tracks how many cases it
saw and how many showed its "success" signal (plaintiff win, release on
bail, reversal, ...).
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, NamedTuple, Tuple

from ..utils.data_models import (
    CATEGORIES,
    METRIC_FIELDS,
    MODEL_STATISTICAL,
    AnalysisWindow,
    CaseAnalytics,
    Case,
    Judge,
    confidence_field,
    sample_field,
)
from ..utils.exceptions import EstimatorError
from ..utils.helpers import clamp, round_half_up, setup_logger

NEUTRAL_PERCENTAGE = 50
EMPTY_CONFIDENCE = 60

# (minimum sample, confidence), checked top-down
CATEGORY_CONFIDENCE_LADDER = ((50, 90), (30, 85), (20, 80), (10, 75), (5, 70))
CATEGORY_CONFIDENCE_BASE = 65
CATEGORY_CONFIDENCE_CAP = 95

OVERALL_CONFIDENCE_LADDER = ((200, 95), (150, 90), (100, 85), (75, 80), (50, 75), (25, 70))
OVERALL_CONFIDENCE_BASE = 65


class CaseText(NamedTuple):
    case_type: str
    outcome: str
    summary: str
    status: str

    @classmethod
    def of(cls, case: Case) -> "CaseText":
        return cls(
            (case.case_type or "").lower(),
            (case.outcome or "").lower(),
            (case.summary or "").lower(),
            (case.status or "").lower(),
        )


def _any(text: str, *needles: str) -> bool:
    return any(needle in text for needle in needles)


def _civil(c: CaseText) -> bool:
    return _any(c.case_type, "civil", "tort", "personal injury")


def _civil_success(c: CaseText) -> bool:
    return _any(c.outcome, "plaintiff", "awarded") or "in favor of plaintiff" in c.summary


def _custody(c: CaseText) -> bool:
    return _any(c.case_type, "custody", "family") or "child custody" in c.summary


def _custody_success(c: CaseText) -> bool:
    return "mother" in c.outcome or _any(c.summary, "custody to mother", "maternal custody")


def _alimony(c: CaseText) -> bool:
    return _any(c.case_type, "divorce", "family") or _any(c.summary, "alimony", "spousal support")


def _alimony_success(c: CaseText) -> bool:
    return _any(c.outcome, "alimony", "spousal support") or "awarded spousal" in c.summary


def _contracts(c: CaseText) -> bool:
    return _any(c.case_type, "contract", "breach") or "contract dispute" in c.summary


def _contracts_success(c: CaseText) -> bool:
    return (
        _any(c.outcome, "enforced", "breach found")
        or "contract upheld" in c.summary
        or ("dismissed" not in c.outcome and c.status == "decided")
    )


def _criminal(c: CaseText) -> bool:
    return _any(c.case_type, "criminal", "felony", "misdemeanor")


def _criminal_success(c: CaseText) -> bool:
    return _any(c.outcome, "prison", "years") or "sentenced to" in c.summary


def _plea(c: CaseText) -> bool:
    return "plea" in c.summary or "plea" in c.outcome


def _plea_success(c: CaseText) -> bool:
    return _any(c.outcome, "plea accepted", "guilty plea") or "plea approved" in c.summary


def _bail(c: CaseText) -> bool:
    return _any(
        c.summary,
        "bail",
        "pretrial release",
        "pre-trial release",
        "released on own recognizance",
    ) or _any(c.outcome, "bail", "release", "detained", "remand")


def _bail_success(c: CaseText) -> bool:
    return (
        _any(c.outcome, "bail granted", "released")
        or _any(c.summary, "release granted", "bail set")
        or ("remanded" not in c.outcome and "detained" not in c.outcome)
    )


def _reversal(c: CaseText) -> bool:
    return "appeal" in c.case_type or "appeal" in c.summary or "appeal" in c.outcome


def _reversal_success(c: CaseText) -> bool:
    return _any(c.outcome, "reversed", "overturned") or _any(
        c.summary, "judgment reversed", "decision overturned"
    )


def _settlement(c: CaseText) -> bool:
    return _any(c.case_type, "civil", "contract", "tort") and (
        "settlement" in c.summary or "settlement" in c.outcome
    )


def _settlement_success(c: CaseText) -> bool:
    return "settled" in c.outcome or _any(
        c.summary, "settlement reached", "parties settled", "settlement conference"
    )


def _motion(c: CaseText) -> bool:
    return "motion" in c.summary or "motion" in c.outcome


def _motion_success(c: CaseText) -> bool:
    return "granted" in c.outcome or _any(c.summary, "granted the motion", "motion approved")


Predicate = Callable[[CaseText], bool]

CATEGORY_RULES: Dict[str, Tuple[Predicate, Predicate]] = {
    "civil": (_civil, _civil_success),
    "custody": (_custody, _custody_success),
    "alimony": (_alimony, _alimony_success),
    "contracts": (_contracts, _contracts_success),
    "sentencing": (_criminal, _criminal_success),
    "plea": (_plea, _plea_success),
    "bail": (_bail, _bail_success),
    "reversal": (_reversal, _reversal_success),
    "settlement": (_settlement, _settlement_success),
    "motion": (_motion, _motion_success),
}


@dataclass
class CategoryTally:
    total: int = 0
    success: int = 0


@dataclass(frozen=True)
class CategoryMetric:
    percentage: int
    confidence: int
    sample: int


def category_confidence(total: int) -> int:
    """Confidence for a category observed in ``total`` cases."""
    confidence = CATEGORY_CONFIDENCE_BASE
    for minimum, value in CATEGORY_CONFIDENCE_LADDER:
        if total >= minimum:
            confidence = value
            break
    return min(CATEGORY_CONFIDENCE_CAP, confidence)


def overall_confidence(total_cases: int) -> int:
    """Confidence for the whole analysis given the number of cases."""
    for minimum, value in OVERALL_CONFIDENCE_LADDER:
        if total_cases >= minimum:
            return value
    return OVERALL_CONFIDENCE_BASE


def category_metric(tally: CategoryTally) -> CategoryMetric:
    if tally.total == 0:
        return CategoryMetric(NEUTRAL_PERCENTAGE, EMPTY_CONFIDENCE, 0)

    ratio = clamp(tally.success / tally.total, 0, 1)
    return CategoryMetric(
        percentage=round_half_up(ratio * 100),
        confidence=category_confidence(tally.total),
        sample=tally.total,
    )


def analysis_quality(total_cases: int) -> str:
    if total_cases > 150:
        return "excellent"
    if total_cases > 100:
        return "high"
    if total_cases > 50:
        return "medium"
    return "low"


def tally_cases(cases: List[Case]) -> Dict[str, CategoryTally]:
    """Count category membership and success signals across cases."""
    tallies = {category: CategoryTally() for category in CATEGORIES}
    for case in cases:
        text = CaseText.of(case)
        for category, (applies, succeeded) in CATEGORY_RULES.items():
            if applies(text):
                tallies[category].total += 1
                if succeeded(text):
                    tallies[category].success += 1
    return tallies


class StatisticalPatternAnalyzer:
    """Turns a case corpus into :class:`CaseAnalytics` with sample-size confidence."""

    def __init__(self):
        self.logger = setup_logger(self.__class__.__name__)

    def analyze(self, judge: Judge, cases: List[Case], window: AnalysisWindow) -> CaseAnalytics:
        """
        Compute statistical analytics for a judge.

        Args:
            judge: Judge under analysis
            cases: Loaded cases (text attachment is not required)
            window: Analysis window, used in the narrative

        Returns:
            CaseAnalytics tagged with the statistical estimator id

        Raises:
            EstimatorError: If the cases cannot be analyzed
        """
        self.logger.info(f"Analyzing {len(cases)} cases for {judge.name}")
        try:
            return self._analyze(cases, window)
        except (AttributeError, TypeError, ValueError, ZeroDivisionError) as e:
            raise EstimatorError(f"Statistical analysis failed: {e}", judge.id) from e

    def _analyze(self, cases: List[Case], window: AnalysisWindow) -> CaseAnalytics:
        tallies = tally_cases(cases)
        metrics = {category: category_metric(tallies[category]) for category in CATEGORIES}

        for category, metric in metrics.items():
            self.logger.debug(
                f"{category}: {tallies[category].success}/{tallies[category].total} = "
                f"{metric.percentage}% (confidence: {metric.confidence}%)"
            )

        total_cases = len(cases)
        patterns, limitations = self._narrative(tallies, total_cases, window)

        kwargs = {}
        for category, metric in metrics.items():
            kwargs[METRIC_FIELDS[category]] = metric.percentage
            kwargs[confidence_field(category)] = metric.confidence
            kwargs[sample_field(category)] = metric.sample

        return CaseAnalytics(
            **kwargs,
            overall_confidence=overall_confidence(total_cases),
            total_cases_analyzed=total_cases,
            analysis_quality=analysis_quality(total_cases),
            notable_patterns=tuple(patterns),
            data_limitations=tuple(limitations),
            ai_model=MODEL_STATISTICAL,
        )

    def _narrative(
        self, tallies: Dict[str, CategoryTally], total_cases: int, window: AnalysisWindow
    ) -> Tuple[List[str], List[str]]:
        years = window.lookback_years
        patterns: List[str] = []
        limitations: List[str] = []

        if total_cases > 200:
            patterns.append(f"Comprehensive {years}-year analysis: {total_cases} cases analyzed")
        elif total_cases > 100:
            patterns.append(f"Substantial {years}-year dataset: {total_cases} cases analyzed")
        elif total_cases > 50:
            patterns.append(f"Moderate {years}-year dataset: {total_cases} cases analyzed")
        elif total_cases < 50:
            limitations.append(f"Limited {years}-year data: only {total_cases} cases available")

        def share(category: str) -> int:
            return round_half_up(tallies[category].total / total_cases * 100)

        if tallies["civil"].total > 20:
            patterns.append(f"Civil cases: {share('civil')}% of {years}-year caseload")
        if tallies["sentencing"].total > 20:
            patterns.append(f"Criminal cases: {share('sentencing')}% of {years}-year caseload")
        if tallies["custody"].total > 10:
            patterns.append(f"Family custody cases: {share('custody')}% of caseload")

        patterns.append(f"Analysis covers cases filed from {window.label}")

        if not limitations:
            limitations.append("Analysis based on available case outcome data")

        return patterns, limitations
