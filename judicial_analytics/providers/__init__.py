"""
External language-model providers for the judicial analytics engine.
"""

from .base import ModelProvider, normalize_estimate, fallback_estimate
from .gemini import GeminiProvider
from .openai import OpenAIProvider

__all__ = [
    "ModelProvider",
    "GeminiProvider",
    "OpenAIProvider",
    "normalize_estimate",
    "fallback_estimate",
]
