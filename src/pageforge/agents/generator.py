"""
AI page and element generation.

Prompts go through MultiModelService (which owns provider fallback). Output is
parsed once: malformed output raises a typed error and is never retried here.
"""

from typing import Callable, Sequence

from pydantic import ValidationError as PydanticValidationError
from returns.result import Failure

from ..builder.elements import Element, ElementBase, materialize
from ..builder.tree import normalize_tree
from ..core.json import JSONParseError, extract_json, extract_json_array, strip_code_fences
from ..core.logging_config import get_logger
from ..core.validate import PageGenerationRequest, VariantSuggestionRequest, validate_generated_page
from ..markup.parser import (
    GeneratedHTMLError,
    extract_page_metadata,
    parse_html_fragment,
    parse_single_element,
)
from ..markup.serializer import element_to_html
from ..models.config import GenerationOptions
from .examples import ExamplesSearchService
from .models import GeneratedComponent, GeneratedPage, OptimizationSuggestion, SEOMetadata
from .multi_model import MultiModelService
from .prompts import PromptBuilder, SystemPrompts

logger = get_logger(__name__)

PAGE_OPTIONS = GenerationOptions(
    temperature=0.8, max_tokens=8192, system_instruction=SystemPrompts.PAGE_GENERATOR
)
LEGACY_PAGE_OPTIONS = GenerationOptions(
    temperature=0.8, max_tokens=3000, system_instruction=SystemPrompts.PAGE_GENERATOR
)
EDIT_OPTIONS = GenerationOptions(
    temperature=0.7, max_tokens=2048, system_instruction=SystemPrompts.UX_DESIGNER
)
COMPONENT_OPTIONS = GenerationOptions(
    temperature=0.7, max_tokens=1500, system_instruction=SystemPrompts.UX_DESIGNER
)
COPY_OPTIONS = GenerationOptions(
    temperature=0.9, max_tokens=1000, system_instruction=SystemPrompts.COPY_OPTIMIZER
)
ANALYSIS_OPTIONS = GenerationOptions(
    temperature=0.7, max_tokens=2000, system_instruction=SystemPrompts.COPY_OPTIMIZER
)
SEO_OPTIONS = GenerationOptions(
    temperature=0.5, max_tokens=800, system_instruction=SystemPrompts.SEO_SPECIALIST
)


class GeneratedPageError(Exception):
    """Legacy JSON page output did not have the expected structure."""

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(message)
        self.detail = detail


def parse_page_html(html: str) -> GeneratedPage:
    """
    Turn a model's HTML document into a GeneratedPage.

    Raises:
        GeneratedHTMLError: If no top-level element can be parsed
    """
    cleaned = strip_code_fences(html or "")
    elements = parse_html_fragment(cleaned)
    if not elements:
        raise GeneratedHTMLError("Failed to parse generated page HTML", html)

    title, description = extract_page_metadata(cleaned)
    return GeneratedPage(
        title=title or "Untitled page",
        description=description,
        elements=elements,
        html=cleaned,
    )


class AIGeneratorService:
    """Page, element and copy generation on top of the fallback chain."""

    def __init__(
        self,
        multi_model: MultiModelService,
        examples: ExamplesSearchService | None = None,
    ) -> None:
        self.multi_model = multi_model
        self.examples = examples or ExamplesSearchService()

    def _examples_context(self, request: PageGenerationRequest) -> str:
        return self.examples.generate_examples_context(
            request.page_type,
            design_style=request.design_style,
            industry=request.industry,
            use_external_search=request.use_external_search,
        )

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------

    def generate_page(self, request: PageGenerationRequest) -> GeneratedPage:
        """
        Generate a full page as an element tree.

        Raises:
            AllProvidersFailedError: If no model produced output
            GeneratedHTMLError: If the output holds no parseable element
        """
        prompt = PromptBuilder.page_html(request, self._examples_context(request))
        result = self.multi_model.generate_content(prompt, PAGE_OPTIONS)

        page = parse_page_html(result.content)
        logger.info(
            "page_generated",
            page_type=request.page_type,
            elements=len(page.elements),
            provider=result.provider.value,
        )
        return page.model_copy(update={"provider": result.provider.value, "model": result.model})

    def generate_page_streaming(
        self, request: PageGenerationRequest, on_chunk: Callable[[str], None]
    ) -> GeneratedPage:
        """Stream raw HTML chunks to ``on_chunk``, then parse the complete document."""
        prompt = PromptBuilder.page_html(request, self._examples_context(request))
        result = self.multi_model.generate_streaming(prompt, on_chunk, PAGE_OPTIONS)
        page = parse_page_html(result.content)
        return page.model_copy(update={"provider": result.provider.value, "model": result.model})

    def generate_page_components(self, request: PageGenerationRequest) -> GeneratedPage:
        """
        Legacy JSON mode: a page as a list of section components.

        Raises:
            GeneratedPageError: If the JSON is unreadable or lacks title/components
        """
        prompt = PromptBuilder.page_json(request, self._examples_context(request))
        result = self.multi_model.generate_content(prompt, LEGACY_PAGE_OPTIONS)

        try:
            data = extract_json(result.content)
        except JSONParseError as e:
            raise GeneratedPageError("Failed to parse generated page JSON", str(e)) from e

        checked = validate_generated_page(data)
        if isinstance(checked, Failure):
            raise GeneratedPageError("Invalid page structure from AI", checked.failure().message)

        try:
            page = GeneratedPage.model_validate(data)
        except PydanticValidationError as e:
            raise GeneratedPageError("Invalid page structure from AI", str(e)) from e
        return page.model_copy(update={"provider": result.provider.value, "model": result.model})

    # ------------------------------------------------------------------
    # Elements
    # ------------------------------------------------------------------

    def edit_element(self, element: ElementBase, instruction: str) -> ElementBase:
        """
        Rewrite one element following a natural-language instruction.

        The element is sent as HTML and the reply parsed back. A persisted
        Element keeps its id and position; its children get fresh ids.

        Raises:
            AllProvidersFailedError: If no model produced output
            GeneratedHTMLError: If the reply holds no element
        """
        prompt = PromptBuilder.edit_element(element_to_html(element), instruction)
        result = self.multi_model.generate_content(prompt, EDIT_OPTIONS)
        edited = parse_single_element(strip_code_fences(result.content))

        if not isinstance(element, Element):
            return edited

        fresh = materialize(edited, parent_id=element.parent_id)
        path = element.path or element.id
        return fresh.model_copy(
            update={
                "id": element.id,
                "order": element.order,
                "depth": element.depth,
                "path": path,
                "children": tuple(normalize_tree(fresh.children, element.id, element.depth + 1, path)),
            }
        )

    def generate_component(self, component_type: str, context: str | None = None) -> GeneratedComponent:
        result = self.multi_model.generate_content(
            PromptBuilder.component(component_type, context), COMPONENT_OPTIONS
        )
        data = extract_json(result.content)
        data.setdefault("type", component_type)
        return GeneratedComponent.model_validate(data)

    # ------------------------------------------------------------------
    # Copy and metadata
    # ------------------------------------------------------------------

    def generate_optimizations(
        self, page_content: str, goals: Sequence[str] = ()
    ) -> list[OptimizationSuggestion]:
        """Conversion suggestions; entries that do not validate are dropped."""
        result = self.multi_model.generate_content(
            PromptBuilder.optimizations(page_content, goals), ANALYSIS_OPTIONS
        )
        suggestions = []
        for item in _json_items(result.content):
            try:
                suggestions.append(OptimizationSuggestion.model_validate(item))
            except PydanticValidationError as e:
                logger.warning("suggestion_skipped", error=str(e))
        return suggestions

    def generate_headline_variants(self, original: str, context: str = "", count: int = 5) -> list[str]:
        result = self.multi_model.generate_content(
            PromptBuilder.headlines(original, context, count), COPY_OPTIONS
        )
        return _clean_variants(extract_json_array(result.content), original, count)

    def generate_seo_metadata(self, page_content: str, keywords: Sequence[str] = ()) -> SEOMetadata:
        result = self.multi_model.generate_content(PromptBuilder.seo(page_content, keywords), SEO_OPTIONS)
        return SEOMetadata.model_validate(extract_json(result.content))

    def generate_variant_suggestions(self, request: VariantSuggestionRequest) -> list[str]:
        """A/B copy variants for one text element (count already clamped to 1..5)."""
        prompt = PromptBuilder.text_variants(
            request.original_text, request.text_type, request.count, request.context
        )
        result = self.multi_model.generate_content(prompt, COPY_OPTIONS)
        return _clean_variants(extract_json_array(result.content), request.original_text, request.count)


def _clean_variants(items: list, original: str, count: int) -> list[str]:
    seen = {original.strip().lower()}
    variants = []
    for item in items:
        text = str(item).strip() if isinstance(item, (str, int, float)) else ""
        if not text or text.lower() in seen:
            continue
        seen.add(text.lower())
        variants.append(text)
    return variants[:count]


def _json_items(text: str) -> list:
    """A JSON array, or a lone object as a one-item list."""
    cleaned = strip_code_fences(text)
    brace, bracket = cleaned.find("{"), cleaned.find("[")
    if bracket != -1 and (brace == -1 or bracket < brace):
        return extract_json_array(cleaned)
    return [extract_json(cleaned)]
