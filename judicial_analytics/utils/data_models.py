"""
Data models for the judicial analytics engine.
"""

from dataclasses import dataclass, field, fields, replace
from datetime import date, datetime
from typing import Optional, Dict, List, Any, Tuple

from .helpers import dedupe, to_iso, utc_now, validate_date

# Behavioral categories, in reporting order. "sentencing" is the criminal category.
CATEGORIES = (
    "civil",
    "custody",
    "alimony",
    "contracts",
    "sentencing",
    "plea",
    "bail",
    "reversal",
    "settlement",
    "motion",
)

METRIC_FIELDS = {
    "civil": "civil_plaintiff_favor",
    "custody": "family_custody_mother",
    "alimony": "family_alimony_favorable",
    "contracts": "contract_enforcement_rate",
    "sentencing": "criminal_sentencing_severity",
    "plea": "criminal_plea_acceptance",
    "bail": "bail_release_rate",
    "reversal": "appeal_reversal_rate",
    "settlement": "settlement_encouragement_rate",
    "motion": "motion_grant_rate",
}

# Binary splits: the second value is always 100 - first
COMPLEMENTARY_PAIRS = {
    "civil_plaintiff_favor": "civil_defendant_favor",
    "family_custody_mother": "family_custody_father",
    "contract_enforcement_rate": "contract_dismissal_rate",
}

# Field whose presence marks analytics written in the current schema
SCHEMA_MARKER_FIELD = "confidence_civil"

CONFIDENCE_FLOOR = 60
CONFIDENCE_CEILING = 95

# Estimator identifiers
MODEL_STATISTICAL = "statistical_analysis"
MODEL_PROFILE = "profile_estimation"
MODEL_CONSERVATIVE = "conservative_fallback"
MODEL_FALLBACK_MARKER = "fallback"


def confidence_field(category: str) -> str:
    return f"confidence_{category}"


def sample_field(category: str) -> str:
    return f"sample_size_{category}"


@dataclass(frozen=True)
class Judge:
    """A judge as stored by the upstream ingestion pipeline."""

    id: str
    name: str = "Unknown Judge"
    jurisdiction: Optional[str] = None
    court_name: Optional[str] = None
    appointed_date: Optional[datetime] = None
    total_cases: int = 0

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Judge":
        appointed = None
        if row.get("appointed_date"):
            try:
                appointed = validate_date(row["appointed_date"])
            except ValueError:
                appointed = None

        return cls(
            id=str(row["id"]),
            name=row.get("name") or "Unknown Judge",
            jurisdiction=row.get("jurisdiction"),
            court_name=row.get("court_name"),
            appointed_date=appointed,
            total_cases=int(row.get("total_cases") or 0),
        )

    @property
    def years_on_bench(self) -> Optional[int]:
        if not self.appointed_date:
            return None
        return utc_now().year - self.appointed_date.year


@dataclass(frozen=True)
class Case:
    """
    One adjudicated matter.

    ``text`` holds the canonical opinion body attached during enrichment.
    """

    id: str
    judge_id: Optional[str] = None
    case_name: Optional[str] = None
    case_type: Optional[str] = None
    case_subcategory: Optional[str] = None
    outcome: Optional[str] = None
    status: Optional[str] = None
    summary: Optional[str] = None
    filing_date: Optional[str] = None
    decision_date: Optional[str] = None
    text: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Case":
        return cls(
            id=str(row.get("id") or ""),
            judge_id=row.get("judge_id"),
            case_name=row.get("case_name"),
            case_type=row.get("case_type") or row.get("case_category"),
            case_subcategory=row.get("case_subcategory")
            or row.get("case_type_subcategory"),
            outcome=row.get("outcome"),
            status=row.get("status"),
            summary=row.get("summary"),
            filing_date=row.get("filing_date"),
            decision_date=row.get("decision_date"),
            text=row.get("plain_text") or None,
        )

    def with_text(self, text: str) -> "Case":
        return replace(self, text=text)

    @property
    def analyzable(self) -> bool:
        return bool(self.text)


@dataclass(frozen=True)
class Opinion:
    """Full or partial text of a court opinion tied to a case."""

    case_id: str
    opinion_type: Optional[str] = None
    plain_text: Optional[str] = None
    opinion_text: Optional[str] = None
    html_text: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Opinion":
        return cls(
            case_id=str(row.get("case_id") or ""),
            opinion_type=row.get("opinion_type"),
            plain_text=row.get("plain_text"),
            opinion_text=row.get("opinion_text"),
            html_text=row.get("html_text"),
        )

    @property
    def is_lead(self) -> bool:
        return self.opinion_type == "lead"


@dataclass(frozen=True)
class AnalysisWindow:
    """Rolling range of filing years eligible for analysis."""

    lookback_years: int
    start_year: int
    end_year: int

    @classmethod
    def from_lookback(
        cls, lookback_years: int, now: Optional[datetime] = None
    ) -> "AnalysisWindow":
        years = max(1, int(lookback_years))
        now = now or utc_now()
        return cls(lookback_years=years, start_year=now.year - years, end_year=now.year)

    @property
    def start_date(self) -> date:
        return date(self.start_year, 1, 1)

    @property
    def label(self) -> str:
        if self.start_year == self.end_year:
            return f"{self.start_year}"
        return f"{self.start_year}-{self.end_year}"


@dataclass(frozen=True)
class CaseAnalytics:
    """
    Versioned, immutable analytics for one judge.

    Complementary values (defendant favor, father custody, contract dismissal)
    are not constructor arguments: they are always derived as ``100 - primary``.
    Use :func:`dataclasses.replace` to derive modified copies.
    """

    civil_plaintiff_favor: int = 50
    family_custody_mother: int = 50
    family_alimony_favorable: int = 50
    contract_enforcement_rate: int = 50
    criminal_sentencing_severity: int = 50
    criminal_plea_acceptance: int = 50
    bail_release_rate: int = 50
    appeal_reversal_rate: int = 50
    settlement_encouragement_rate: int = 50
    motion_grant_rate: int = 50

    confidence_civil: int = CONFIDENCE_FLOOR
    confidence_custody: int = CONFIDENCE_FLOOR
    confidence_alimony: int = CONFIDENCE_FLOOR
    confidence_contracts: int = CONFIDENCE_FLOOR
    confidence_sentencing: int = CONFIDENCE_FLOOR
    confidence_plea: int = CONFIDENCE_FLOOR
    confidence_bail: int = CONFIDENCE_FLOOR
    confidence_reversal: int = CONFIDENCE_FLOOR
    confidence_settlement: int = CONFIDENCE_FLOOR
    confidence_motion: int = CONFIDENCE_FLOOR
    overall_confidence: int = CONFIDENCE_FLOOR

    sample_size_civil: int = 0
    sample_size_custody: int = 0
    sample_size_alimony: int = 0
    sample_size_contracts: int = 0
    sample_size_sentencing: int = 0
    sample_size_plea: int = 0
    sample_size_bail: int = 0
    sample_size_reversal: int = 0
    sample_size_settlement: int = 0
    sample_size_motion: int = 0

    total_cases_analyzed: int = 0
    analysis_quality: str = "low"
    notable_patterns: Tuple[str, ...] = ()
    data_limitations: Tuple[str, ...] = ()
    ai_model: str = MODEL_STATISTICAL
    generated_at: str = field(default_factory=lambda: to_iso(utc_now()))
    last_updated: str = field(default_factory=lambda: to_iso(utc_now()))

    civil_defendant_favor: int = field(init=False, default=50)
    family_custody_father: int = field(init=False, default=50)
    contract_dismissal_rate: int = field(init=False, default=50)

    def __post_init__(self) -> None:
        for category in CATEGORIES:
            value = getattr(self, METRIC_FIELDS[category])
            if not 0 <= value <= 100:
                raise ValueError(
                    f"{METRIC_FIELDS[category]} must be within 0-100, got {value}"
                )
            if getattr(self, sample_field(category)) < 0:
                raise ValueError(f"{sample_field(category)} must be non-negative")

        for name in self.confidence_fields():
            value = getattr(self, name)
            if not CONFIDENCE_FLOOR <= value <= CONFIDENCE_CEILING:
                raise ValueError(
                    f"{name} must be within {CONFIDENCE_FLOOR}-{CONFIDENCE_CEILING}, "
                    f"got {value}"
                )

        for primary, complement in COMPLEMENTARY_PAIRS.items():
            object.__setattr__(self, complement, 100 - getattr(self, primary))

        object.__setattr__(self, "notable_patterns", tuple(dedupe(self.notable_patterns)))
        object.__setattr__(self, "data_limitations", tuple(dedupe(self.data_limitations)))

    @staticmethod
    def confidence_fields() -> List[str]:
        return [confidence_field(c) for c in CATEGORIES] + ["overall_confidence"]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CaseAnalytics":
        """Rebuild analytics from their persisted JSON shape."""
        init_names = {f.name for f in fields(cls) if f.init}
        kwargs = {k: v for k, v in data.items() if k in init_names and v is not None}
        for name in ("notable_patterns", "data_limitations"):
            if name in kwargs:
                kwargs[name] = tuple(kwargs[name])
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the analytics to their persisted JSON shape."""
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, tuple):
                value = list(value)
            result[f.name] = value
        return result

    def __str__(self) -> str:
        return (
            f"CaseAnalytics: {self.total_cases_analyzed} cases | "
            f"quality={self.analysis_quality} | model={self.ai_model} | "
            f"overall_confidence={self.overall_confidence}"
        )


@dataclass
class AnalyticsEstimate:
    """
    Normalised output of an external model provider.

    Metric, confidence and sample-size maps are keyed by the same field names
    as :class:`CaseAnalytics`; absent keys mean the provider did not report them.
    """

    ai_model: str
    values: Dict[str, int] = field(default_factory=dict)
    confidences: Dict[str, int] = field(default_factory=dict)
    sample_sizes: Dict[str, int] = field(default_factory=dict)
    overall_confidence: int = CONFIDENCE_FLOOR
    total_cases_analyzed: int = 0
    analysis_quality: str = "medium"
    notable_patterns: List[str] = field(default_factory=list)
    data_limitations: List[str] = field(default_factory=list)
    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def is_fallback(self) -> bool:
        return self.ai_model == MODEL_FALLBACK_MARKER


@dataclass
class AnalyticsCacheEntry:
    """Analytics as persisted by a cache tier, in their raw JSON form."""

    judge_id: str
    analytics: Dict[str, Any]
    created_at: Optional[str] = None

    @property
    def has_schema_marker(self) -> bool:
        return bool(self.analytics.get(SCHEMA_MARKER_FIELD))

    def to_analytics(self) -> CaseAnalytics:
        return CaseAnalytics.from_dict(self.analytics)

    def to_dict(self) -> Dict[str, Any]:
        return {"analytics": self.analytics, "created_at": self.created_at}


@dataclass
class AnalyticsResult:
    """What the orchestrator hands back to callers."""

    analytics: CaseAnalytics
    cached: bool
    source: str
    document_count: int = 0
    rate_limit_remaining: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "analytics": self.analytics.to_dict(),
            "cached": self.cached,
            "source": self.source,
            "document_count": self.document_count,
        }
        if self.rate_limit_remaining is not None:
            result["rate_limit_remaining"] = self.rate_limit_remaining
        return result
