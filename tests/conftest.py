"""
Pytest configuration and fixtures for the judicial analytics tests.
"""

import json
import pytest
from unittest.mock import Mock
import requests

from judicial_analytics.engine.cache import CacheCoordinator
from judicial_analytics.engine.corpus import CaseCorpusLoader
from judicial_analytics.engine.orchestrator import AnalyticsOrchestrator
from judicial_analytics.providers.base import ModelProvider
from judicial_analytics.stores.memory import MemoryCacheStore, MemoryStore
from judicial_analytics.utils.data_models import AnalysisWindow, Judge
from judicial_analytics.utils.helpers import utc_now


class FakeProvider(ModelProvider):
    """Provider answering every prompt with a canned reply."""

    def __init__(self, reply="", name="fake-model", error=None):
        self.reply = reply
        self.name = name
        self.error = error
        self.prompts = []
        super().__init__(api_key="test-key", timeout=5)

    @property
    def base_url(self):
        return "https://models.invalid"

    @property
    def model_id(self):
        return self.name

    def _complete(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def window():
    """Fixed five-year analysis window."""
    return AnalysisWindow(lookback_years=5, start_year=2020, end_year=2025)


@pytest.fixture
def sample_judge():
    """Judge sitting in the home jurisdiction."""
    return Judge(
        id="judge-1",
        name="Hon. Maria Alvarez",
        jurisdiction="CA",
        court_name="Superior Court of California, County of Alameda",
        total_cases=120,
    )


@pytest.fixture
def filing_date():
    """A filing date inside any lookback window."""
    return f"{utc_now().year}-01-15"


@pytest.fixture
def memory_store(filing_date):
    """Memory store seeded with one judge and a small, text-bearing docket."""
    store = MemoryStore()
    store.add_judge(
        {
            "id": "judge-1",
            "name": "Hon. Maria Alvarez",
            "jurisdiction": "CA",
            "court_name": "Superior Court of California, County of Alameda",
            "total_cases": 120,
        }
    )
    store.add_judge(
        {
            "id": "judge-2",
            "name": "Hon. Samuel Reyes",
            "jurisdiction": "CA",
            "court_name": "Superior Court of California, County of Fresno",
            "total_cases": 40,
        }
    )

    rows = [
        ("case-1", "Civil", "Judgment for plaintiff", "Decided"),
        ("case-2", "Civil", "Damages awarded", "Decided"),
        ("case-3", "Civil", "Judgment for defendant", "Decided"),
        ("case-4", "Criminal", "Sentenced to 3 years prison", "Decided"),
        ("case-5", "Criminal", "Guilty plea accepted", "Decided"),
    ]
    for case_id, case_type, outcome, status in rows:
        store.add_case(
            {
                "id": case_id,
                "judge_id": "judge-1",
                "case_name": f"People v. {case_id}",
                "case_type": case_type,
                "outcome": outcome,
                "status": status,
                "summary": f"{case_type} matter heard by the court",
                "filing_date": filing_date,
            }
        )
        store.add_opinion(
            {
                "case_id": case_id,
                "opinion_type": "lead",
                "plain_text": f"Opinion of the court in {case_id}.",
            }
        )
    return store


@pytest.fixture
def make_orchestrator():
    """Factory wiring an orchestrator over in-process stores."""

    def _build(store, cache_store=None, **kwargs):
        cache_store = cache_store or MemoryCacheStore()
        return AnalyticsOrchestrator(
            store=store,
            cache=CacheCoordinator.default(cache_store, store),
            loader=CaseCorpusLoader(store),
            **kwargs,
        )

    return _build


@pytest.fixture
def provider_reply():
    """Well-formed provider reply covering the core metrics."""
    return json.dumps(
        {
            "civil_plaintiff_favor": 80,
            "confidence_civil": 85,
            "sample_size_civil": 3,
            "family_custody_mother": 55,
            "criminal_sentencing_severity": 60,
            "confidence_sentencing": 75,
            "sample_size_sentencing": 2,
            "overall_confidence": 80,
            "analysis_quality": "medium",
            "notable_patterns": ["Consistent application of sentencing guidelines"],
            "data_limitations": ["Few family law matters"],
        }
    )


@pytest.fixture
def json_response():
    """Factory for mocked HTTP responses carrying a JSON body."""

    def _response(payload=None, status_code=200, url="https://api.invalid"):
        response = Mock(spec=requests.Response)
        response.status_code = status_code
        response.url = url
        response.content = json.dumps(payload).encode("utf-8") if payload is not None else b""
        response.json.return_value = payload
        response.iter_content.side_effect = lambda chunk_size=1: iter(
            [response.content] if response.content else []
        )
        return response

    return _response


@pytest.fixture
def fake_provider():
    """The FakeProvider class, for tests that build several providers."""
    return FakeProvider
