"""Design references for page generation prompts."""

import random

from ..clients.search import InspirationResult, InspirationSearchClient
from ..core.logging_config import get_logger
from .catalog import (
    CURATED_EXAMPLES,
    DEFAULT_DESIGN_STYLE,
    DEFAULT_PAGE_TYPE,
    DESIGN_STYLES,
    DesignStyle,
    PageTypeExamples,
    UIExample,
)

logger = get_logger(__name__)


class ExamplesSearchService:
    """
    Curated page examples and design styles, optionally enriched by web search.

    Unknown page types fall back to ``landing`` and unknown styles to
    ``minimal``. Randomness goes through an injectable ``random.Random`` so
    prompt variety can be pinned in tests.
    """

    def __init__(
        self,
        search_client: InspirationSearchClient | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.search_client = search_client
        self._rng = rng or random.Random()

    def get_examples_for_page_type(self, page_type: str) -> PageTypeExamples:
        return CURATED_EXAMPLES.get(page_type) or CURATED_EXAMPLES[DEFAULT_PAGE_TYPE]

    def get_random_examples(self, page_type: str, count: int = 2) -> list[UIExample]:
        examples = list(self.get_examples_for_page_type(page_type).examples)
        self._rng.shuffle(examples)
        return examples[: max(count, 0)]

    def get_design_style(self, style: str) -> DesignStyle:
        return DESIGN_STYLES.get(style) or DESIGN_STYLES[DEFAULT_DESIGN_STYLE]

    def get_random_design_style(self) -> DesignStyle:
        return DESIGN_STYLES[self._rng.choice(sorted(DESIGN_STYLES))]

    def get_available_page_types(self) -> list[str]:
        return list(CURATED_EXAMPLES)

    def get_available_design_styles(self) -> list[str]:
        return list(DESIGN_STYLES)

    def search_external_examples(
        self, page_type: str, industry: str | None = None
    ) -> list[InspirationResult]:
        """Web search for examples; empty when search is not configured or fails."""
        if self.search_client is None or not self.search_client.enabled:
            logger.debug("external_search_disabled", page_type=page_type)
            return []

        if industry:
            query = f"{industry} {page_type} page design examples Tailwind"
        else:
            query = f"best Tailwind CSS {page_type} page examples HTML design"
        return self.search_client.search(query)

    def generate_examples_context(
        self,
        page_type: str,
        design_style: str | None = None,
        industry: str | None = None,
        use_external_search: bool = False,
    ) -> str:
        """
        Build the reference block appended to page generation prompts.

        Args:
            page_type: landing, pricing, about, ...
            design_style: Named style; a random one is picked when omitted
            industry: Narrows the web search query
            use_external_search: Append web search results when available

        Returns:
            Multi-section plain text
        """
        page_examples = self.get_examples_for_page_type(page_type)
        picked = self.get_random_examples(page_type, 3)
        style = self.get_design_style(design_style) if design_style else self.get_random_design_style()

        lines = [
            "REAL-WORLD DESIGN REFERENCES:",
            f"Before generating, study and adapt elements from these high-converting "
            f"{page_examples.page_type} pages:",
            "",
        ]
        for index, example in enumerate(picked, start=1):
            lines.append(f"{index}. **{example.name}** - {example.description}")
            lines.append("   Key Features:")
            lines.extend(f"   - {feature}" for feature in example.key_features)
            lines.append(f"   Design Patterns: {', '.join(example.design_patterns)}")
            lines.append(f"   Color Scheme: {example.color_scheme or 'Varies'}")
            lines.append("")

        lines.append("RECOMMENDED SECTION ORDER:")
        lines.extend(f"{i}. {section}" for i, section in enumerate(page_examples.section_order, start=1))
        lines.append("")
        lines.append("LAYOUT PATTERNS TO CONSIDER:")
        lines.extend(f"- {pattern}" for pattern in page_examples.layout_patterns)
        lines.append("")
        lines.append("CONVERSION OPTIMIZATION TIPS:")
        lines.extend(f"- {tip}" for tip in page_examples.conversion_tips)
        lines.append("")
        lines.append(f"DESIGN STYLE: {style.name.upper()}")
        lines.append(style.description)
        lines.append("")
        lines.append("Style Characteristics:")
        lines.extend(f"- {item}" for item in style.characteristics)
        lines.append("")
        lines.append(f"Color Guidelines: {style.color_guidelines}")
        lines.append(f"Typography: {style.typography_guidelines}")

        if use_external_search:
            results = self.search_external_examples(page_type, industry)
            if results:
                lines.append("")
                lines.append("ADDITIONAL INSPIRATION FROM WEB SEARCH:")
                lines.extend(
                    f'{i}. "{result.title}" - {result.snippet}'
                    for i, result in enumerate(results, start=1)
                )

        return "\n".join(lines) + "\n"
