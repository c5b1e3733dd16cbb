"""HTTP clients for LLM providers and external collaborators."""

from .gemini import GEMINI_BASE_URL, GeminiAPIError, GeminiService
from .openai import OPENAI_BASE_URL, OpenAIAPIError, OpenAIService
from .pages import PagesClient
from .search import InspirationResult, InspirationSearchClient

__all__ = [
    "GEMINI_BASE_URL",
    "GeminiAPIError",
    "GeminiService",
    "OPENAI_BASE_URL",
    "OpenAIAPIError",
    "OpenAIService",
    "PagesClient",
    "InspirationResult",
    "InspirationSearchClient",
]
