"""
OpenAI provider, used as the secondary estimator.
"""

import json
from typing import Any, Dict, List

from .base import ModelProvider
from ..utils.data_models import Judge
from ..utils.exceptions import ParsingError


class OpenAIProvider(ModelProvider):
    """Provider calling the OpenAI chat completions endpoint with a shorter prompt."""

    model_name = "gpt-4o-mini"
    max_documents = 30
    excerpt_chars = 500

    @property
    def base_url(self) -> str:
        return "https://api.openai.com/v1"

    @property
    def model_id(self) -> str:
        return f"{self.model_name}-fallback"

    def _auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}"}

    def build_prompt(self, judge: Judge, summaries: List[Dict[str, Any]]) -> str:
        compact = [
            {
                "case_name": s["case_name"],
                "category": s["category"],
                "outcome": s["outcome"],
                "summary": s["summary"],
            }
            for s in summaries
        ]
        return (
            f"Analyze these {len(compact)} case documents for Judge {judge.name} "
            "and provide judicial pattern percentages.\n\n"
            f"Cases: {json.dumps(compact)}\n\n"
            "Return only JSON with these fields:\n"
            "- civil_plaintiff_favor (0-100)\n"
            "- family_custody_mother (0-100)\n"
            "- family_alimony_favorable (0-100)\n"
            "- contract_enforcement_rate (0-100)\n"
            "- criminal_sentencing_severity (0-100)\n"
            "- criminal_plea_acceptance (0-100)\n"
            "- overall_confidence (60-95)\n"
            "- notable_patterns (array)\n\n"
            "Base confidence on case quantity and quality."
        )

    def _complete(self, prompt: str) -> str:
        url = f"{self.base_url}/chat/completions"
        body = {
            "model": self.model_name,
            "messages": [
                {
                    "role": "system",
                    "content": "You are a legal analytics expert. Return only valid JSON.",
                },
                {"role": "user", "content": prompt},
            ],
            "temperature": 0.1,
            "max_tokens": 1000,
        }
        payload = self._post_json(url, body) or {}

        try:
            content = payload["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise ParsingError("OpenAI reply has no choices", url=url) from e

        if not content:
            raise ParsingError("OpenAI reply is empty", url=url)
        return content
