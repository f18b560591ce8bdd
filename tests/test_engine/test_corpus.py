"""
Tests for case corpus loading and enrichment.
"""

from datetime import date
from unittest.mock import Mock

from judicial_analytics.engine.corpus import (
    OPINION_CHUNK_SIZE,
    CaseCorpusLoader,
    extract_opinion_text,
)
from judicial_analytics.stores.base import PersistentStore
from judicial_analytics.stores.memory import MemoryStore
from judicial_analytics.utils.data_models import Case, Opinion
from judicial_analytics.utils.exceptions import UpstreamReadError


class TestExtractOpinionText:
    """Tests for extract_opinion_text function."""

    def test_plain_text_wins(self):
        """Test field precedence."""
        opinion = Opinion(case_id="c1", plain_text="plain", opinion_text="formatted", html_text="<p>html</p>")
        assert extract_opinion_text(opinion) == "plain"

    def test_html_is_stripped(self):
        """Test markup stripping for HTML-only opinions."""
        opinion = Opinion(case_id="c1", html_text="<div><p>The order is <i>affirmed</i>.</p></div>")
        text = extract_opinion_text(opinion)
        assert "affirmed" in text
        assert "<" not in text

    def test_no_text(self):
        """Test opinions without any body."""
        assert extract_opinion_text(Opinion(case_id="c1")) is None
        assert extract_opinion_text(Opinion(case_id="c1", html_text="<p></p>")) is None


class TestCaseCorpusLoader:
    """Tests for CaseCorpusLoader class."""

    def test_case_limit_floor(self):
        """Test that the case limit never drops below 200."""
        assert CaseCorpusLoader(MemoryStore(), case_limit=50).case_limit == 200

    def test_load_passes_window_start(self, window):
        """Test that cases are requested from the first day of the window."""
        store = Mock(spec=PersistentStore)
        store.list_cases.return_value = []

        CaseCorpusLoader(store).load("j-1", window)

        store.list_cases.assert_called_once_with("j-1", date(2020, 1, 1), 1000)

    def test_load_failure_yields_empty_corpus(self, window):
        """Test that a failed listing is not raised."""
        store = Mock(spec=PersistentStore)
        store.list_cases.side_effect = UpstreamReadError("timeout")

        assert CaseCorpusLoader(store).load("j-1", window) == []

    def test_lead_opinion_overrides(self):
        """Test that the lead opinion replaces earlier text."""
        store = MemoryStore()
        store.add_opinion({"case_id": "c1", "opinion_type": "concurrence", "plain_text": "Concurring  view"})
        store.add_opinion({"case_id": "c1", "opinion_type": "lead", "plain_text": "Lead\n opinion"})
        store.add_opinion({"case_id": "c2", "opinion_type": "dissent", "plain_text": "First"})
        store.add_opinion({"case_id": "c2", "opinion_type": "dissent", "plain_text": "Second"})

        cases = CaseCorpusLoader(store).enrich([Case(id="c1"), Case(id="c2"), Case(id="c3")])
        texts = {case.id: case.text for case in cases}

        assert texts == {"c1": "Lead opinion", "c2": "First", "c3": None}

    def test_duplicate_cases_are_dropped(self):
        """Test that repeated case ids are analyzed once."""
        cases = CaseCorpusLoader(MemoryStore()).enrich([Case(id="c1"), Case(id="c1"), Case(id="")])
        assert [case.id for case in cases] == ["c1"]

    def test_opinions_fetched_in_chunks(self):
        """Test chunked opinion lookups."""
        store = Mock(spec=PersistentStore)
        store.list_opinions.return_value = []
        cases = [Case(id=f"c{i}") for i in range(OPINION_CHUNK_SIZE * 2 + 5)]

        CaseCorpusLoader(store).enrich(cases)

        sizes = [len(call.args[0]) for call in store.list_opinions.call_args_list]
        assert sizes == [100, 100, 5]

    def test_failed_chunk_is_skipped(self):
        """Test that one failed chunk does not lose the others."""
        store = Mock(spec=PersistentStore)
        store.list_opinions.side_effect = [
            UpstreamReadError("timeout"),
            [Opinion(case_id="c150", plain_text="Recovered text")],
        ]
        cases = [Case(id=f"c{i}") for i in range(150)]
        cases.append(Case(id="c150"))

        enriched = CaseCorpusLoader(store).enrich(cases)

        assert len(enriched) == 151
        assert enriched[-1].text == "Recovered text"
        assert enriched[0].text is None

    def test_load_end_to_end(self, memory_store, window):
        """Test loading and enriching from the memory store."""
        cases = CaseCorpusLoader(memory_store).load("judge-1", window)

        assert len(cases) == 5
        assert all(case.analyzable for case in cases)

    def test_load_with_malformed_filing_date(self, window):
        """Test that a malformed case row does not abort loading."""
        store = MemoryStore()
        store.add_case({"id": "c1", "judge_id": "j", "filing_date": "not-a-date"})

        assert CaseCorpusLoader(store).load("j", window) == []
