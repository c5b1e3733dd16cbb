"""Tests for AIGeneratorService and page HTML parsing."""

import pytest

from pageforge.agents.generator import (
    EDIT_OPTIONS,
    PAGE_OPTIONS,
    AIGeneratorService,
    GeneratedPageError,
    parse_page_html,
)
from pageforge.agents.prompts import PromptBuilder
from pageforge.builder.elements import Element, ElementType, GeneratedElement
from pageforge.core.json import JSONParseError
from pageforge.core.validate import PageGenerationRequest, VariantSuggestionRequest
from pageforge.markup.parser import GeneratedHTMLError

PAGE_HTML = """```html
<!DOCTYPE html>
<html>
<head>
  <title>Crumb Bakery</title>
  <meta name="description" content="Fresh bread daily">
</head>
<body>
  <header style="padding: 24px;"><h1>Fresh bread</h1><a href="#order" class="btn">Order</a></header>
  <section><p>Baked every morning.</p><img src="/loaf.jpg" alt="Loaf"></section>
</body>
</html>
```"""


@pytest.fixture
def generator(mock_multi_model, examples_service):
    return AIGeneratorService(mock_multi_model, examples_service)


@pytest.fixture
def page_request():
    return PageGenerationRequest(description="A bakery landing page", industry="food")


def sent_prompt(mock_multi_model) -> str:
    return mock_multi_model.generate_content.call_args[0][0]


# ============================================================================
# Page generation
# ============================================================================

@pytest.mark.unit
class TestParsePageHtml:
    """Test HTML document to GeneratedPage."""

    def test_document(self):
        page = parse_page_html(PAGE_HTML)

        assert page.title == "Crumb Bakery"
        assert page.description == "Fresh bread daily"
        assert [e.tag_name for e in page.elements] == ["header", "section"]
        header = page.elements[0]
        assert header.styles == {"padding": "24px"}
        assert [c.type for c in header.children] == [ElementType.TEXT, ElementType.BUTTON]
        assert page.elements[1].children[1].content.src == "/loaf.jpg"

    def test_untitled_fragment(self):
        page = parse_page_html("<main><p>Hello</p></main>")

        assert page.title == "Untitled page"
        assert page.description is None

    def test_no_elements(self):
        with pytest.raises(GeneratedHTMLError, match="Failed to parse generated page HTML"):
            parse_page_html("I could not do that.")

    def test_html_not_serialized(self):
        page = parse_page_html("<main></main>")

        assert page.html == "<main></main>"
        assert "html" not in page.model_dump()


@pytest.mark.unit
class TestGeneratePage:
    """Test page generation."""

    def test_generate_page(self, generator, mock_multi_model, page_request):
        mock_multi_model.reply_with(PAGE_HTML)

        page = generator.generate_page(page_request)

        assert page.title == "Crumb Bakery"
        assert len(page.elements) == 2
        assert page.provider == "gemini"
        assert page.model == "gemini-1.5-flash"
        assert mock_multi_model.generate_content.call_args[0][1] == PAGE_OPTIONS

    def test_prompt_includes_brief_and_references(self, generator, mock_multi_model, page_request):
        mock_multi_model.reply_with(PAGE_HTML)

        generator.generate_page(page_request)

        prompt = sent_prompt(mock_multi_model)
        assert "=== CONTEXT ===" in prompt
        assert "REAL-WORLD DESIGN REFERENCES:" in prompt
        assert "- Description: A bakery landing page" in prompt
        assert "- Industry: food" in prompt

    def test_unparseable_output(self, generator, mock_multi_model, page_request):
        mock_multi_model.reply_with("Sorry, I can't help with that.")

        with pytest.raises(GeneratedHTMLError):
            generator.generate_page(page_request)

    def test_streaming(self, generator, mock_multi_model, page_request):
        mock_multi_model.reply_with(PAGE_HTML)
        chunks = []

        page = generator.generate_page_streaming(page_request, chunks.append)

        assert page.title == "Crumb Bakery"
        mock_multi_model.generate_streaming.assert_called_once()
        assert mock_multi_model.generate_streaming.call_args[0][1] == chunks.append


@pytest.mark.unit
class TestGeneratePageComponents:
    """Test legacy JSON page mode."""

    def test_valid(self, generator, mock_multi_model, page_request):
        mock_multi_model.reply_with(
            '```json\n{"title": "Bakery", "seoTitle": "Bakery | Fresh", '
            '"components": [{"type": "Hero", "props": {"headline": "Bread"}}]}\n```'
        )

        page = generator.generate_page_components(page_request)

        assert page.title == "Bakery"
        assert page.seo_title == "Bakery | Fresh"
        assert page.components[0].type == "Hero"
        assert page.components[0].props == {"headline": "Bread"}

    def test_unreadable_json(self, generator, mock_multi_model, page_request):
        mock_multi_model.reply_with("no json at all")

        with pytest.raises(GeneratedPageError, match="Failed to parse generated page JSON"):
            generator.generate_page_components(page_request)

    @pytest.mark.parametrize(
        "payload",
        ['{"components": []}', '{"title": "X", "components": "Hero"}', '{"title": "X", "components": [{}]}'],
    )
    def test_invalid_structure(self, generator, mock_multi_model, page_request, payload):
        mock_multi_model.reply_with(payload)

        with pytest.raises(GeneratedPageError, match="Invalid page structure from AI"):
            generator.generate_page_components(page_request)


# ============================================================================
# Element editing
# ============================================================================

@pytest.mark.unit
class TestEditElement:
    """Test single-element AI edits."""

    def test_sends_element_as_html(self, generator, mock_multi_model):
        mock_multi_model.reply_with('<p style="color: blue;">Hello</p>')
        element = GeneratedElement(type="text", tag_name="p", content="Hi", styles={"color": "red"})

        edited = generator.edit_element(element, "make it blue")

        prompt = sent_prompt(mock_multi_model)
        assert '<p style="color: red;">Hi</p>' in prompt
        assert "make it blue" in prompt
        assert mock_multi_model.generate_content.call_args[0][1] == EDIT_OPTIONS
        assert edited.styles == {"color": "blue"}
        assert edited.text == "Hello"

    def test_persisted_element_keeps_identity(self, generator, mock_multi_model):
        mock_multi_model.reply_with("```html\n<div><h2>Title</h2><p>Body</p></div>\n```")
        element = Element(id="el_1", parent_id="root", order=3, depth=1, path="root/el_1")

        edited = generator.edit_element(element, "add a heading")

        assert isinstance(edited, Element)
        assert (edited.id, edited.parent_id, edited.order, edited.depth, edited.path) == (
            "el_1",
            "root",
            3,
            1,
            "root/el_1",
        )
        assert [c.tag_name for c in edited.children] == ["h2", "p"]
        assert all(c.parent_id == "el_1" for c in edited.children)
        assert [c.order for c in edited.children] == [0, 1]
        assert edited.children[0].depth == 2
        assert edited.children[1].path == f"root/el_1/{edited.children[1].id}"

    def test_empty_reply(self, generator, mock_multi_model):
        mock_multi_model.reply_with("")

        with pytest.raises(GeneratedHTMLError, match="AI returned empty or invalid HTML"):
            generator.edit_element(GeneratedElement(type="text"), "x")


# ============================================================================
# Copy and metadata
# ============================================================================

@pytest.mark.unit
class TestCopyGeneration:
    """Test copy, SEO and suggestion helpers."""

    def test_variant_suggestions_cleaned(self, generator, mock_multi_model):
        mock_multi_model.reply_with(
            'Here are some:\n["Start free today", "start free today", "Get started", "", "Try it now", 42, {"x": 1}]'
        )
        request = VariantSuggestionRequest(original_text="Get started", text_type="cta", count=3)

        variants = generator.generate_variant_suggestions(request)

        assert variants == ["Start free today", "Try it now", "42"]
        prompt = sent_prompt(mock_multi_model)
        assert "call-to-action button text" in prompt
        assert "Write 3 alternative versions" in prompt

    def test_variant_suggestions_need_array(self, generator, mock_multi_model):
        mock_multi_model.reply_with("I cannot do that")
        request = VariantSuggestionRequest(original_text="Hi")

        with pytest.raises(JSONParseError):
            generator.generate_variant_suggestions(request)

    def test_headline_variants(self, generator, mock_multi_model):
        mock_multi_model.reply_with('["A", "B", "C"]')

        assert generator.generate_headline_variants("Original", "saas", count=2) == ["A", "B"]

    def test_seo_metadata(self, generator, mock_multi_model):
        mock_multi_model.reply_with('{"title": "Bakery", "description": "Bread", "keywords": ["bread"]}')

        seo = generator.generate_seo_metadata("content", ["bread"])

        assert seo.title == "Bakery"
        assert seo.keywords == ["bread"]
        assert "Target Keywords: bread" in sent_prompt(mock_multi_model)

    def test_optimizations_skip_invalid(self, generator, mock_multi_model):
        mock_multi_model.reply_with(
            '[{"type": "cta", "current": "Submit", "suggestions": ["Get my quote"], "impact": "high"},'
            ' {"type": "copy", "impact": "enormous"}]'
        )

        suggestions = generator.generate_optimizations("page text", ["signups"])

        assert len(suggestions) == 1
        assert suggestions[0].impact == "high"

    def test_optimizations_single_object(self, generator, mock_multi_model):
        mock_multi_model.reply_with('{"type": "headline", "current": "Hi", "suggestions": ["Hello"]}')

        suggestions = generator.generate_optimizations("page text")

        assert [s.type for s in suggestions] == ["headline"]

    def test_component(self, generator, mock_multi_model):
        mock_multi_model.reply_with('{"props": {"columns": 3}}')

        component = generator.generate_component("Features", "bakery")

        assert component.type == "Features"
        assert component.props == {"columns": 3}
        assert "Context: bakery" in sent_prompt(mock_multi_model)


@pytest.mark.unit
def test_structured_prompt_sections():
    prompt = PromptBuilder.build_structured("SYSTEM", "", "ASK")

    assert prompt == "SYSTEM\n\n=== REQUEST ===\nASK"
    assert "=== CONTEXT ===" in PromptBuilder.build_structured("SYSTEM", "refs", "ASK")
