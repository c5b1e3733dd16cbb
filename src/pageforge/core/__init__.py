"""Core utilities and infrastructure."""

from .config import Settings, get_settings
from .validate import (
    ValidationError,
    PageGenerationRequest,
    EditElementRequest,
    VariantSuggestionRequest,
    validate_tree_depth,
    validate_generated_page,
)
from .logging_config import configure_logging, get_logger, LogContext
from .json import (
    extract_json,
    extract_json_array,
    strip_code_fences,
    safe_json_dumps,
    JSONParseError,
)
from .css import style_object_to_string, string_to_style_object, camel_to_kebab, kebab_to_camel
from .id import new_element_id, new_change_id, new_event_id


def create_container(settings: Settings | None = None):
    """Create dependency injection container (lazy import to avoid circular deps)."""
    from .container import create_container as _create_container

    return _create_container(settings)


__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Validation
    "ValidationError",
    "PageGenerationRequest",
    "EditElementRequest",
    "VariantSuggestionRequest",
    "validate_tree_depth",
    "validate_generated_page",
    # Logging
    "configure_logging",
    "get_logger",
    "LogContext",
    # JSON
    "extract_json",
    "extract_json_array",
    "strip_code_fences",
    "safe_json_dumps",
    "JSONParseError",
    # CSS
    "style_object_to_string",
    "string_to_style_object",
    "camel_to_kebab",
    "kebab_to_camel",
    # IDs
    "new_element_id",
    "new_change_id",
    "new_event_id",
    # DI
    "create_container",
]
