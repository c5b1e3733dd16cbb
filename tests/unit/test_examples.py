"""Tests for design references and the examples prompt context."""

import random
from unittest.mock import MagicMock

import pytest

from pageforge.agents.catalog import CURATED_EXAMPLES, DESIGN_STYLES
from pageforge.agents.examples import ExamplesSearchService
from pageforge.clients.search import InspirationResult, InspirationSearchClient


@pytest.fixture
def search_client():
    client = MagicMock(spec=InspirationSearchClient)
    client.enabled = True
    client.search.return_value = [
        InspirationResult("Top bakery sites", "Warm colors and big photos", "https://a.test"),
    ]
    return client


@pytest.mark.unit
class TestCatalog:
    """Test curated data shape."""

    def test_page_types(self):
        assert set(CURATED_EXAMPLES) == {
            "landing",
            "pricing",
            "about",
            "contact",
            "blog",
            "product",
            "dashboard",
            "portfolio",
        }
        assert [e.name for e in CURATED_EXAMPLES["landing"].examples] == [
            "Stripe",
            "Linear",
            "Vercel",
            "Notion",
            "Airbnb",
        ]

    def test_every_page_type_has_examples_and_sections(self):
        for page_type, entry in CURATED_EXAMPLES.items():
            assert entry.page_type == page_type
            assert len(entry.examples) >= 2
            assert entry.section_order
            assert entry.conversion_tips

    def test_design_styles(self):
        assert len(DESIGN_STYLES) == 8
        assert all(style.name == key for key, style in DESIGN_STYLES.items())


@pytest.mark.unit
class TestExamplesSearchService:
    """Test lookups and fallbacks."""

    def test_unknown_page_type_falls_back_to_landing(self, examples_service):
        assert examples_service.get_examples_for_page_type("webinar").page_type == "landing"

    def test_unknown_style_falls_back_to_minimal(self, examples_service):
        assert examples_service.get_design_style("vaporwave").name == "minimal"

    def test_random_examples_bounded(self, examples_service):
        picked = examples_service.get_random_examples("pricing", 10)

        assert len(picked) == len(CURATED_EXAMPLES["pricing"].examples)
        assert examples_service.get_random_examples("pricing", -1) == []

    def test_seeded_rng_is_repeatable(self):
        first = ExamplesSearchService(rng=random.Random(3)).get_random_examples("landing", 3)
        second = ExamplesSearchService(rng=random.Random(3)).get_random_examples("landing", 3)

        assert first == second

    def test_available_lists(self, examples_service):
        assert "dashboard" in examples_service.get_available_page_types()
        assert "glassmorphism" in examples_service.get_available_design_styles()


@pytest.mark.unit
class TestExamplesContext:
    """Test the prompt reference block."""

    def test_sections_present(self, examples_service):
        context = examples_service.generate_examples_context("pricing", design_style="dark")

        for header in (
            "REAL-WORLD DESIGN REFERENCES:",
            "RECOMMENDED SECTION ORDER:",
            "LAYOUT PATTERNS TO CONSIDER:",
            "CONVERSION OPTIMIZATION TIPS:",
            "DESIGN STYLE: DARK",
            "Style Characteristics:",
            "Color Guidelines:",
            "Typography:",
        ):
            assert header in context
        assert "high-converting pricing pages" in context
        assert "ADDITIONAL INSPIRATION FROM WEB SEARCH:" not in context

    def test_three_examples_listed(self, examples_service):
        context = examples_service.generate_examples_context("landing", design_style="minimal")

        assert "3. **" in context
        assert "4. **" not in context

    def test_fallbacks_in_context(self, examples_service):
        context = examples_service.generate_examples_context("unknown", design_style="unknown")

        assert "high-converting landing pages" in context
        assert "DESIGN STYLE: MINIMAL" in context

    def test_random_style_when_omitted(self, examples_service):
        context = examples_service.generate_examples_context("landing")

        assert any(f"DESIGN STYLE: {name.upper()}" in context for name in DESIGN_STYLES)


@pytest.mark.unit
class TestExternalSearch:
    """Test optional web search enrichment."""

    def test_no_client(self, examples_service):
        assert examples_service.search_external_examples("landing") == []

    def test_disabled_client_not_called(self, search_client):
        search_client.enabled = False
        service = ExamplesSearchService(search_client=search_client)

        assert service.search_external_examples("landing") == []
        search_client.search.assert_not_called()

    def test_query_with_industry(self, search_client):
        service = ExamplesSearchService(search_client=search_client)

        service.search_external_examples("landing", industry="bakery")

        search_client.search.assert_called_once_with("bakery landing page design examples Tailwind")

    def test_query_without_industry(self, search_client):
        service = ExamplesSearchService(search_client=search_client)

        service.search_external_examples("pricing")

        search_client.search.assert_called_once_with("best Tailwind CSS pricing page examples HTML design")

    def test_results_appended_to_context(self, search_client):
        service = ExamplesSearchService(search_client=search_client, rng=random.Random(1))

        context = service.generate_examples_context("landing", industry="bakery", use_external_search=True)

        assert "ADDITIONAL INSPIRATION FROM WEB SEARCH:" in context
        assert '1. "Top bakery sites" - Warm colors and big photos' in context

    def test_search_skipped_unless_requested(self, search_client):
        service = ExamplesSearchService(search_client=search_client)

        service.generate_examples_context("landing")

        search_client.search.assert_not_called()
