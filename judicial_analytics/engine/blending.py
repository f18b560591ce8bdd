"""
AI enhancement of statistical analytics.

The blender submits a judge's text-bearing cases to an external model and
merges the model's estimate into the statistical result with a
sample-size-weighted average.
"""

import math
from dataclasses import replace
from typing import Any, Dict, List, Optional

from ..providers.base import ModelProvider
from ..utils.data_models import (
    CATEGORIES,
    METRIC_FIELDS,
    AnalysisWindow,
    AnalyticsEstimate,
    CaseAnalytics,
    Case,
    Judge,
    sample_field,
)
from ..utils.exceptions import EnhancementError
from ..utils.helpers import dedupe, round_half_up, setup_logger, to_iso, utc_now

MAX_AI_DOCUMENTS = 60
AUGMENTED_QUALITY = "augmented_ai"


def _weight(sample: Any) -> float:
    try:
        value = float(sample)
    except (TypeError, ValueError):
        return 0.0
    return max(0.0, value) if math.isfinite(value) else 0.0


def blend_value(base_value: float, base_sample: Any, ai_value: float, ai_sample: Any) -> int:
    """
    Weighted average of two estimates by their sample sizes.

    Falls back to the plain average when neither side carries weight.

    >>> blend_value(40, 10, 60, 30)
    55
    """
    base_weight = _weight(base_sample)
    ai_weight = _weight(ai_sample)
    total_weight = base_weight + ai_weight

    if not total_weight:
        return round_half_up((base_value + ai_value) / 2)

    return round_half_up((base_weight * base_value + ai_weight * ai_value) / total_weight)


def build_documents(cases: List[Case]) -> List[Dict[str, Any]]:
    """Reduce text-bearing cases to the document shape sent to providers."""
    documents = []
    for case in cases:
        if not case.text:
            continue
        documents.append(
            {
                "case_name": case.case_name or "Unknown Case",
                "case_category": case.case_type or "Unknown",
                "case_subcategory": case.case_subcategory,
                "case_outcome": case.outcome or case.status or "Unknown",
                "decision_date": case.decision_date or case.filing_date,
                "text": case.text,
            }
        )
        if len(documents) >= MAX_AI_DOCUMENTS:
            break
    return documents


def merge_estimate(
    base: CaseAnalytics,
    estimate: AnalyticsEstimate,
    document_count: int,
    window: AnalysisWindow,
) -> CaseAnalytics:
    """
    Merge a provider estimate into statistical analytics.

    Each metric the provider reported is blended by the category sample
    sizes; confidence scores are blended by the two total case counts.
    Complementary values are re-derived from the blended primaries.
    """
    updates: Dict[str, Any] = {}

    for category in CATEGORIES:
        metric = METRIC_FIELDS[category]
        if metric not in estimate.values:
            continue
        sample = sample_field(category)
        updates[metric] = blend_value(
            getattr(base, metric),
            getattr(base, sample),
            estimate.values[metric],
            estimate.sample_sizes.get(sample, estimate.total_cases_analyzed),
        )

    ai_total = estimate.total_cases_analyzed or document_count
    ai_confidences = dict(estimate.confidences, overall_confidence=estimate.overall_confidence)
    for name, ai_value in ai_confidences.items():
        updates[name] = blend_value(
            getattr(base, name), base.total_cases_analyzed, ai_value, ai_total
        )

    ai_pattern = (
        f"AI-enhanced review of {document_count} case documents within "
        f"{window.lookback_years}-year window"
    )
    ai_limitation = (
        f"AI analysis limited to {document_count} documents "
        f"({window.start_year}-{window.end_year})"
    )
    patterns = dedupe([*base.notable_patterns, *estimate.notable_patterns, ai_pattern])
    limitations = dedupe([*base.data_limitations, *estimate.data_limitations, ai_limitation])

    now = to_iso(utc_now())
    return replace(
        base,
        **updates,
        notable_patterns=tuple(patterns),
        data_limitations=tuple(limitations),
        analysis_quality=AUGMENTED_QUALITY,
        ai_model=estimate.ai_model,
        total_cases_analyzed=base.total_cases_analyzed,
        generated_at=now,
        last_updated=now,
    )


class AIEnhancementBlender:
    """
    Refines statistical analytics with an external model.

    The secondary provider is tried once when the primary fails, times out
    or answers with the fallback marker. If no provider yields a usable
    estimate the statistical analytics are returned unchanged.
    """

    def __init__(
        self,
        primary: ModelProvider,
        secondary: Optional[ModelProvider] = None,
    ):
        self.primary = primary
        self.secondary = secondary
        self.logger = setup_logger(self.__class__.__name__)

    def _call(
        self, provider: ModelProvider, judge: Judge, documents: List[Dict[str, Any]]
    ) -> Optional[AnalyticsEstimate]:
        try:
            estimate = provider.generate(judge, documents)
        except Exception as e:
            self.logger.error(f"{provider.model_id} generation failed: {str(e)}")
            return None

        if estimate.is_fallback:
            self.logger.info(f"{provider.model_id} returned the fallback marker")
            return None
        return estimate

    def _estimate(self, judge: Judge, documents: List[Dict[str, Any]]) -> AnalyticsEstimate:
        """
        Ask the primary provider, then the secondary one, for an estimate.

        Raises:
            EnhancementError: If no provider produced a usable estimate
        """
        estimate = self._call(self.primary, judge, documents)

        if estimate is None and self.secondary is not None:
            self.logger.info(f"Retrying AI estimate with {self.secondary.model_id}")
            estimate = self._call(self.secondary, judge, documents)

        if estimate is None:
            raise EnhancementError("No provider produced a usable estimate", judge.id)
        return estimate

    def enhance(
        self,
        judge: Judge,
        cases: List[Case],
        base: CaseAnalytics,
        window: AnalysisWindow,
    ) -> CaseAnalytics:
        """
        Blend a model estimate into ``base``.

        Args:
            judge: Judge under analysis
            cases: Enriched cases; only those with attached text are submitted
            base: Statistical analytics
            window: Analysis window, named in the coverage notes

        Returns:
            Blended analytics, or ``base`` itself when enhancement is not possible
        """
        documents = build_documents(cases)
        if not documents:
            self.logger.info("No analyzable case documents available for AI enhancement")
            return base

        try:
            estimate = self._estimate(judge, documents)
        except EnhancementError as e:
            self.logger.warning(f"AI enhancement unavailable, using statistical analysis: {e}")
            return base

        self.logger.info(
            f"Blending {estimate.ai_model} estimate over {len(documents)} documents"
        )
        return merge_estimate(base, estimate, len(documents), window)
