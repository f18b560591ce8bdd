"""
Google Gemini provider, the primary estimator.
"""

from typing import Dict

from .base import ModelProvider
from ..utils.exceptions import ParsingError


class GeminiProvider(ModelProvider):
    """
    Provider calling the Gemini ``generateContent`` REST endpoint.

    Example:
        >>> provider = GeminiProvider(api_key="...", timeout=30)
        >>> estimate = provider.generate(judge, documents)
    """

    model_name = "gemini-1.5-flash"
    max_documents = 50
    excerpt_chars = 1000

    @property
    def base_url(self) -> str:
        return "https://generativelanguage.googleapis.com/v1beta"

    @property
    def model_id(self) -> str:
        return self.model_name

    def _auth_headers(self) -> Dict[str, str]:
        return {"x-goog-api-key": self.api_key}

    def _complete(self, prompt: str) -> str:
        url = f"{self.base_url}/models/{self.model_name}:generateContent"
        body = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"temperature": 0.1, "maxOutputTokens": 2048},
        }
        payload = self._post_json(url, body) or {}

        try:
            parts = payload["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError) as e:
            raise ParsingError("Gemini reply has no candidates", url=url) from e

        return "".join(part.get("text", "") for part in parts)
