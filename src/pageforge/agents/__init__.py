"""AI generation: provider fallback, design references, page and element generation."""

from .examples import ExamplesSearchService
from .generator import AIGeneratorService, GeneratedPageError, parse_page_html
from .models import GeneratedComponent, GeneratedPage, OptimizationSuggestion, SEOMetadata
from .multi_model import (
    AllProvidersFailedError,
    FallbackHistory,
    MultiModelService,
    build_provider,
    is_rate_limit_error,
    try_models_in_order,
)
from .prompts import PromptBuilder, SystemPrompts

__all__ = [
    "ExamplesSearchService",
    "AIGeneratorService",
    "GeneratedPageError",
    "parse_page_html",
    "GeneratedComponent",
    "GeneratedPage",
    "OptimizationSuggestion",
    "SEOMetadata",
    "AllProvidersFailedError",
    "FallbackHistory",
    "MultiModelService",
    "build_provider",
    "is_rate_limit_error",
    "try_models_in_order",
    "PromptBuilder",
    "SystemPrompts",
]
