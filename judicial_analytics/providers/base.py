"""
Base class for external language-model providers.

A provider turns a judge and a batch of case documents into an
:class:`AnalyticsEstimate`. Providers never raise for model-side problems:
network failures, timeouts and unparseable replies all produce an estimate
tagged with the reserved ``"fallback"`` model id.
"""

import json
import math
import re
import time
from abc import abstractmethod
from typing import Any, Dict, List, Optional

import requests

from ..utils.base import BaseClient
from ..utils.data_models import (
    CATEGORIES,
    CONFIDENCE_CEILING,
    CONFIDENCE_FLOOR,
    MODEL_FALLBACK_MARKER,
    METRIC_FIELDS,
    AnalyticsEstimate,
    Judge,
    confidence_field,
    sample_field,
)
from ..utils.exceptions import ClientError, NetworkError, ParsingError
from ..utils.helpers import clamp, round_half_up

# Defaults applied when a provider omits one of the core metrics
CORE_METRIC_DEFAULTS = {
    "civil_plaintiff_favor": 50,
    "family_custody_mother": 50,
    "family_alimony_favorable": 40,
    "contract_enforcement_rate": 65,
    "criminal_sentencing_severity": 50,
    "criminal_plea_acceptance": 70,
}
CORE_CATEGORIES = ("civil", "custody", "alimony", "contracts", "sentencing", "plea")
DEFAULT_MODEL_CONFIDENCE = 70

ANALYTICS_PROMPT = """You are a legal analytics expert analyzing judicial patterns for transparency purposes.

Analyze the following case documents from Judge {judge_name} and provide an objective assessment of judicial patterns.

CRITICAL REQUIREMENTS:
1. Base analysis ONLY on provided case documents - no assumptions
2. Provide confidence scores (60-95%) based on data quality and quantity
3. If insufficient data exists for any category, report confidence below 70%
4. Focus on factual patterns, not personal bias accusations

JUDGE INFORMATION:
- Name: {judge_name}
- Court: {court_name}
- Years on Bench: {years_on_bench}
- Case Documents Analyzed: {document_count}

CASE DOCUMENTS TO ANALYZE:
{documents}

Provide percentage estimates (0-100) for civil plaintiff favor, custody awarded to
mothers, alimony awarded, contract enforcement, criminal sentencing severity
(0 = lenient, 100 = strict), plea acceptance, bail release, appeal reversal,
settlement encouragement and motion grants. For each category also give a
confidence score (60-95) and the number of relevant cases.

Return response as JSON:
{{
  "civil_plaintiff_favor": 52, "confidence_civil": 78, "sample_size_civil": 12,
  "family_custody_mother": 48, "confidence_custody": 82, "sample_size_custody": 15,
  "family_alimony_favorable": 35, "confidence_alimony": 71, "sample_size_alimony": 8,
  "contract_enforcement_rate": 68, "confidence_contracts": 85, "sample_size_contracts": 22,
  "criminal_sentencing_severity": 55, "confidence_sentencing": 79, "sample_size_sentencing": 18,
  "criminal_plea_acceptance": 72, "confidence_plea": 73, "sample_size_plea": 11,
  "bail_release_rate": 61, "confidence_bail": 70, "sample_size_bail": 6,
  "appeal_reversal_rate": 14, "confidence_reversal": 68, "sample_size_reversal": 5,
  "settlement_encouragement_rate": 58, "confidence_settlement": 66, "sample_size_settlement": 4,
  "motion_grant_rate": 47, "confidence_motion": 72, "sample_size_motion": 9,
  "overall_confidence": 76,
  "total_cases_analyzed": {document_count},
  "analysis_quality": "high",
  "notable_patterns": ["Consistent application of legal standards"],
  "data_limitations": ["Limited family law cases"]
}}"""


def estimate_tokens(text: str) -> int:
    """Rough token count: one token per four characters of English text."""
    if not text:
        return 0
    return math.ceil(len(text) / 4)


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item]


def normalize_estimate(
    data: Dict[str, Any], document_count: int, model_id: str
) -> AnalyticsEstimate:
    """
    Validate and normalise a provider's raw JSON reply.

    Core metrics fall back to fixed defaults and are clamped to [5, 95];
    the extended metrics are kept only when the provider reported them.
    Confidence scores are clamped to [60, 95].

    Args:
        data: Decoded JSON reply
        document_count: Number of documents sent to the provider
        model_id: Identifier of the producing model

    Returns:
        AnalyticsEstimate tagged with ``model_id``
    """
    estimate = AnalyticsEstimate(ai_model=model_id, total_cases_analyzed=document_count)

    for category in CATEGORIES:
        metric = METRIC_FIELDS[category]
        value = _number(data.get(metric))
        is_core = category in CORE_CATEGORIES

        if not value and is_core:
            value = CORE_METRIC_DEFAULTS[metric]
        if value is None:
            continue
        estimate.values[metric] = round_half_up(clamp(value, 5, 95))

        confidence = _number(data.get(confidence_field(category)))
        if confidence or is_core:
            estimate.confidences[confidence_field(category)] = round_half_up(
                clamp(confidence or DEFAULT_MODEL_CONFIDENCE, CONFIDENCE_FLOOR, CONFIDENCE_CEILING)
            )

        sample = _number(data.get(sample_field(category)))
        estimate.sample_sizes[sample_field(category)] = max(0, int(sample or 0))

    overall = _number(data.get("overall_confidence")) or DEFAULT_MODEL_CONFIDENCE
    estimate.overall_confidence = round_half_up(
        clamp(overall, CONFIDENCE_FLOOR, CONFIDENCE_CEILING)
    )
    estimate.analysis_quality = str(data.get("analysis_quality") or "medium")
    estimate.notable_patterns = _string_list(data.get("notable_patterns"))
    estimate.data_limitations = _string_list(data.get("data_limitations"))
    return estimate


def fallback_estimate(reason: str, error_message: str = "") -> AnalyticsEstimate:
    """Estimate carrying the reserved marker that means "no confident result"."""
    return AnalyticsEstimate(
        ai_model=MODEL_FALLBACK_MARKER,
        analysis_quality="fallback",
        notable_patterns=["Insufficient data for meaningful analysis"],
        data_limitations=[m for m in (f"Fallback due to: {reason}", error_message) if m],
    )


def extract_json(text: str) -> Dict[str, Any]:
    """
    Decode the JSON object in a model reply, tolerating markdown fences.

    Raises:
        ValueError: If no JSON object can be decoded
    """
    match = re.search(r"\{[\s\S]*\}", text or "")
    data = json.loads(match.group(0) if match else text)
    if not isinstance(data, dict):
        raise ValueError("Model reply is not a JSON object")
    return data


class ModelProvider(BaseClient):
    """
    Base class for language-model providers.

    Subclasses implement ``model_id`` and ``_complete``; this class prepares
    the documents, builds the prompt and normalises the reply.
    """

    max_documents = 50
    excerpt_chars = 1000

    def __init__(self, api_key: str, timeout: int = 30):
        self.api_key = api_key
        # The timeout bounds the whole call, so no retries
        super().__init__(timeout=timeout, max_retries=0)

    @property
    @abstractmethod
    def model_id(self) -> str:
        """Identifier reported in ``ai_model`` for estimates from this provider."""
        pass

    def _post_json(self, url: str, body: Dict[str, Any]) -> Any:
        """
        POST a JSON body and decode the reply within ``timeout`` seconds.

        ``requests`` only bounds the connect and each socket read, so the body
        is streamed and the deadline is checked between chunks.

        Raises:
            NetworkError: If the call fails or runs past the deadline
            ParsingError: If the reply is not valid JSON
        """
        deadline = time.monotonic() + self.timeout
        response = self._make_request(url, method="POST", json_body=body, stream=True)

        chunks = []
        try:
            for chunk in response.iter_content(chunk_size=8192):
                if time.monotonic() > deadline:
                    raise NetworkError(
                        f"No complete reply within {self.timeout}s", url=url
                    )
                chunks.append(chunk)
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"Reading reply failed: {str(e)}", url=url) from e
        finally:
            response.close()

        raw = b"".join(chunks)
        if not raw:
            return None
        try:
            return json.loads(raw.decode("utf-8"))
        except ValueError as e:
            raise ParsingError(f"Failed to parse JSON response: {str(e)}", url=url) from e

    @abstractmethod
    def _complete(self, prompt: str) -> str:
        """
        Send a prompt to the model and return the raw reply text.

        Raises:
            ClientError: If the provider cannot be reached or replies with an error
        """
        pass

    def _summaries(self, documents: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        summaries = []
        for doc in documents[: self.max_documents]:
            text = doc.get("text") or ""
            summaries.append(
                {
                    "case_name": doc.get("case_name"),
                    "decision_date": doc.get("decision_date"),
                    "category": doc.get("case_category"),
                    "subcategory": doc.get("case_subcategory"),
                    "outcome": doc.get("case_outcome"),
                    "summary": text[: self.excerpt_chars] + "...",
                }
            )
        return summaries

    def build_prompt(self, judge: Judge, summaries: List[Dict[str, Any]]) -> str:
        years = judge.years_on_bench
        return ANALYTICS_PROMPT.format(
            judge_name=judge.name,
            court_name=judge.court_name or "Unknown Court",
            years_on_bench=years if years is not None else "Unknown",
            document_count=len(summaries),
            documents=json.dumps(summaries, indent=2),
        )

    def generate(self, judge: Judge, documents: List[Dict[str, Any]]) -> AnalyticsEstimate:
        """
        Produce an analytics estimate for a judge from case documents.

        Args:
            judge: Judge under analysis
            documents: Reduced case documents, each with a non-empty ``text``

        Returns:
            AnalyticsEstimate; tagged ``"fallback"`` when no usable result was produced
        """
        summaries = self._summaries([d for d in documents if d.get("text")])
        if not summaries:
            return fallback_estimate("insufficient_data")

        prompt = self.build_prompt(judge, summaries)

        try:
            reply = self._complete(prompt)
        except ClientError as e:
            self.logger.warning(f"{self.model_id} request failed: {e}")
            return fallback_estimate("ai_error", str(e))

        try:
            data = extract_json(reply)
        except ValueError:
            self.logger.warning(f"{self.model_id} returned an unparseable reply")
            return fallback_estimate("parse_error")

        estimate = normalize_estimate(data, len(summaries), self.model_id)
        estimate.input_tokens = estimate_tokens(prompt)
        estimate.output_tokens = estimate_tokens(reply)
        return estimate
