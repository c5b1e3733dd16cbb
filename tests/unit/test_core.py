"""Tests for core utilities: config, ids, css, json, logging."""

import pytest
import structlog
from hypothesis import given, strategies as st

from pageforge.core import (
    LogContext,
    JSONParseError,
    Settings,
    camel_to_kebab,
    extract_json,
    extract_json_array,
    get_settings,
    kebab_to_camel,
    safe_json_dumps,
    string_to_style_object,
    strip_code_fences,
    style_object_to_string,
)
from pageforge.core.id import (
    Prefix,
    extract_prefix,
    generate_raw,
    is_valid,
    new_change_id,
    new_element_id,
    new_event_id,
)


# ============================================================================
# Config
# ============================================================================

@pytest.mark.unit
class TestSettings:
    """Test settings loading."""

    def test_defaults(self, settings):
        assert settings.gemini_model == "gemini-1.5-flash"
        assert settings.openai_model == "gpt-4-turbo-preview"
        assert settings.breaker_fail_max == 5
        assert settings.max_history_size == 50

    def test_reads_unprefixed_api_keys(self, settings):
        assert settings.gemini_api_key == "test-gemini-key"
        assert settings.openai_api_key == ""

    def test_prefixed_env_overrides(self, monkeypatch):
        monkeypatch.setenv("PAGEFORGE_PAGES_API_URL", "http://pages.test")
        monkeypatch.setenv("PAGEFORGE_ANALYTICS_BATCH_SIZE", "3")

        settings = Settings()

        assert settings.pages_api_url == "http://pages.test"
        assert settings.analytics_batch_size == 3

    def test_search_key_fallback(self, monkeypatch):
        monkeypatch.setenv("SERP_API_KEY", "")
        monkeypatch.setenv("GOOGLE_SEARCH_API_KEY", "g-key")

        assert Settings().serp_api_key == "g-key"

    def test_get_settings_cached(self):
        assert get_settings() is get_settings()

    def test_rejects_invalid_values(self, monkeypatch):
        monkeypatch.setenv("PAGEFORGE_BREAKER_FAIL_MAX", "0")

        with pytest.raises(Exception):
            Settings()


# ============================================================================
# IDs
# ============================================================================

@pytest.mark.unit
class TestIds:
    """Test prefixed ULID generation."""

    def test_prefixes(self):
        assert new_element_id().startswith(f"{Prefix.ELEMENT}_")
        assert new_change_id().startswith(f"{Prefix.CHANGE}_")
        assert new_event_id().startswith(f"{Prefix.EVENT}_")

    def test_unique(self):
        assert len({new_element_id() for _ in range(200)}) == 200

    def test_extract_prefix(self):
        assert extract_prefix(new_change_id()) == "chg"
        assert extract_prefix(generate_raw()) is None

    def test_is_valid(self):
        assert is_valid(new_element_id())
        assert is_valid(generate_raw())
        assert not is_valid("el_not-a-ulid")


# ============================================================================
# CSS
# ============================================================================

@pytest.mark.unit
class TestCss:
    """Test style conversion."""

    def test_case_conversion(self):
        assert camel_to_kebab("backgroundColor") == "background-color"
        assert camel_to_kebab("color") == "color"
        assert kebab_to_camel("border-top-left-radius") == "borderTopLeftRadius"

    def test_style_object_to_string(self):
        styles = {"color": "red", "fontSize": "12px", "margin": "", "zIndex": 2}

        assert style_object_to_string(styles) == "color: red; font-size: 12px; z-index: 2;"

    def test_empty_styles(self):
        assert style_object_to_string({}) == ""
        assert style_object_to_string(None) == ""

    def test_string_to_style_object_skips_malformed(self):
        css = "color: red; nonsense; : 1px; font-size:; background-image: url(http://x/y.png)"

        assert string_to_style_object(css) == {
            "color": "red",
            "backgroundImage": "url(http://x/y.png)",
        }

    @given(
        st.dictionaries(
            st.from_regex(r"[a-z]{1,8}([A-Z][a-z]{1,6}){0,2}", fullmatch=True),
            st.from_regex(r"[a-z0-9#]{1,10}", fullmatch=True),
            max_size=6,
        )
    )
    def test_style_round_trip(self, styles):
        assert string_to_style_object(style_object_to_string(styles)) == styles


# ============================================================================
# JSON
# ============================================================================

@pytest.mark.unit
class TestJson:
    """Test tolerant JSON extraction."""

    def test_strip_code_fences(self):
        assert strip_code_fences("```json\n{\"a\": 1}\n```") == '{"a": 1}'
        assert strip_code_fences("```html\n<p>x</p>\n```") == "<p>x</p>"
        assert strip_code_fences("Here you go:\n```\n<div></div>\n```\nEnjoy") == "<div></div>"
        assert strip_code_fences("  plain  ") == "plain"

    def test_extract_object_from_prose(self):
        assert extract_json('Sure! {"title": "Home", "n": 2} Hope that helps') == {"title": "Home", "n": 2}

    def test_extract_repairs_trailing_comma(self):
        assert extract_json('{"a": [1, 2,],}') == {"a": [1, 2]}

    def test_extract_without_repair_raises(self):
        with pytest.raises(JSONParseError):
            extract_json('{"a": 1,}', repair=False)

    def test_no_object(self):
        with pytest.raises(JSONParseError, match="No JSON object"):
            extract_json("nothing here")

    def test_extract_array(self):
        assert extract_json_array('Variants:\n```json\n["One", "Two"]\n```') == ["One", "Two"]

    def test_no_array(self):
        with pytest.raises(JSONParseError, match="No JSON array"):
            extract_json_array('{"a": 1}')

    def test_safe_json_dumps(self):
        assert safe_json_dumps({"a": 1}) == '{"a":1}'
        assert safe_json_dumps({"big": 2**70}) == '{"big": 1180591620717411303424}'
        assert safe_json_dumps({"a": 1}, indent=2) == '{\n  "a": 1\n}'


# ============================================================================
# Logging
# ============================================================================

@pytest.mark.unit
def test_log_context_binds_and_unbinds():
    with LogContext(page_id="pg_1"):
        assert structlog.contextvars.get_contextvars()["page_id"] == "pg_1"

    assert "page_id" not in structlog.contextvars.get_contextvars()
