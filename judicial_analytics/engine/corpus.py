"""
Case corpus loading and opinion enrichment.
"""

from typing import Dict, List, Optional

from ..stores.base import PersistentStore
from ..utils.data_models import AnalysisWindow, Case, Opinion
from ..utils.exceptions import UpstreamReadError
from ..utils.helpers import chunk_list, sanitize_text, setup_logger, strip_markup

OPINION_CHUNK_SIZE = 100


def extract_opinion_text(opinion: Opinion) -> Optional[str]:
    """
    Pick the first non-empty text body of an opinion.

    Plain text wins over formatted text; markup is stripped from the HTML body.
    """
    if opinion.plain_text and isinstance(opinion.plain_text, str):
        return opinion.plain_text

    if opinion.opinion_text and isinstance(opinion.opinion_text, str):
        return opinion.opinion_text

    if opinion.html_text and isinstance(opinion.html_text, str):
        return strip_markup(opinion.html_text) or None

    return None


class CaseCorpusLoader:
    """
    Loads a judge's cases inside the analysis window and attaches opinion text.

    Upstream failures never propagate: a failed case listing yields an empty
    corpus, and a failed opinion chunk is skipped.
    """

    def __init__(self, store: PersistentStore, case_limit: int = 1000):
        self.store = store
        self.case_limit = max(200, case_limit)
        self.logger = setup_logger(self.__class__.__name__)

    def load(self, judge_id: str, window: AnalysisWindow) -> List[Case]:
        """
        Load and enrich a judge's cases.

        Args:
            judge_id: Judge identifier
            window: Analysis window; cases filed on/after its first January count

        Returns:
            Cases newest first, with ``text`` attached where an opinion was found
        """
        try:
            cases = self.store.list_cases(judge_id, window.start_date, self.case_limit)
        except UpstreamReadError as e:
            self.logger.error(f"Error fetching cases for judge {judge_id}: {e}")
            return []

        self.logger.debug(f"Loaded {len(cases)} cases for judge {judge_id}")
        return self.enrich(cases)

    def enrich(self, cases: List[Case]) -> List[Case]:
        """
        Attach canonical opinion text to cases.

        A lead opinion replaces any text already attached; otherwise the first
        non-empty text found is kept.
        """
        by_id: Dict[str, Case] = {}
        for case in cases:
            if case.id and case.id not in by_id:
                by_id[case.id] = case

        if not by_id:
            return list(by_id.values())

        for batch in chunk_list(list(by_id), OPINION_CHUNK_SIZE):
            try:
                opinions = self.store.list_opinions(batch)
            except UpstreamReadError as e:
                self.logger.error(
                    f"Failed to fetch opinions for {len(batch)} cases: {e}"
                )
                continue

            for opinion in opinions:
                target = by_id.get(opinion.case_id)
                if target is None:
                    continue

                text = extract_opinion_text(opinion)
                if not text:
                    continue

                if not target.text or opinion.is_lead:
                    by_id[opinion.case_id] = target.with_text(sanitize_text(text))

        return list(by_id.values())
