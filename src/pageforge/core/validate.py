"""Input validation for AI-facing requests."""

from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from returns.result import Failure, Result, Success

# Validation limits
MAX_DESCRIPTION_LENGTH = 5_000
MAX_PROMPT_LENGTH = 2_000
MAX_VARIANT_TEXT_LENGTH = 1_000
MAX_TREE_DEPTH = 20
MIN_VARIANTS = 1
MAX_VARIANTS = 5
MAX_SUGGESTIONS = 10
MAX_GOALS = 10

VALID_TEXT_TYPES = ("headline", "cta", "body", "subheadline", "description")


class ValidationError(Exception):
    """Validation failed."""

    pass


@dataclass(frozen=True)
class ValidationResult:
    """Validation error with details (for Result pattern)."""

    message: str
    field: str | None = None
    value: Any | None = None


class RequestValidator(BaseModel):
    """Base validator with strict configuration."""

    model_config = ConfigDict(
        strict=True,
        validate_assignment=True,
        extra="forbid",
        frozen=True,
        populate_by_name=True,
    )


def _non_empty(value: str, label: str) -> str:
    stripped = value.strip()
    if not stripped:
        raise ValueError(f"{label} cannot be empty")
    return stripped


class PageGenerationRequest(RequestValidator):
    """Validated page generation request."""

    description: str = Field(min_length=1, max_length=MAX_DESCRIPTION_LENGTH)
    industry: str | None = None
    target_audience: str | None = Field(default=None, alias="targetAudience")
    brand_voice: str | None = Field(default=None, alias="brandVoice")
    page_type: str = Field(default="landing", alias="pageType")
    design_style: str | None = Field(default=None, alias="designStyle")
    use_external_search: bool = Field(default=False, alias="useExternalSearch")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        return _non_empty(v, "Description")


class EditElementRequest(RequestValidator):
    """Validated single-element edit request."""

    element: dict[str, Any]
    prompt: str = Field(min_length=1, max_length=MAX_PROMPT_LENGTH)

    @field_validator("prompt")
    @classmethod
    def validate_prompt(cls, v: str) -> str:
        return _non_empty(v, "Prompt")

    @field_validator("element")
    @classmethod
    def validate_element(cls, v: dict[str, Any]) -> dict[str, Any]:
        if not v:
            raise ValueError("Element cannot be empty")
        try:
            validate_tree_depth(v)
        except ValidationError as e:
            raise ValueError(str(e)) from e
        return v


class VariantSuggestionRequest(RequestValidator):
    """Validated A/B copy variant request. ``count`` is clamped, not rejected."""

    original_text: str = Field(min_length=1, max_length=MAX_VARIANT_TEXT_LENGTH, alias="originalText")
    text_type: str = Field(default="headline", alias="textType")
    count: int = 3
    context: str | None = None

    @field_validator("original_text")
    @classmethod
    def validate_original_text(cls, v: str) -> str:
        return _non_empty(v, "Original text")

    @field_validator("text_type")
    @classmethod
    def validate_text_type(cls, v: str) -> str:
        if v not in VALID_TEXT_TYPES:
            raise ValueError(f"Invalid text type. Must be one of: {', '.join(VALID_TEXT_TYPES)}")
        return v

    @field_validator("count")
    @classmethod
    def clamp_count(cls, v: int) -> int:
        return max(MIN_VARIANTS, min(MAX_VARIANTS, v))


class SuggestRequest(RequestValidator):
    """Validated copy or SEO suggestion request. Unlike variants, ``count`` is rejected out of range."""

    type: Literal["headline", "cta", "seo"]
    content: str = Field(min_length=1, max_length=MAX_DESCRIPTION_LENGTH)
    context: str = ""
    count: int = Field(default=5, ge=1, le=MAX_SUGGESTIONS)
    keywords: list[str] = Field(default_factory=list)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        return _non_empty(v, "Content")


class OptimizeRequest(RequestValidator):
    """Validated conversion optimization request."""

    content: str = Field(min_length=1, max_length=MAX_DESCRIPTION_LENGTH)
    goals: list[str] = Field(default_factory=list, max_length=MAX_GOALS)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        return _non_empty(v, "Content")

    @field_validator("goals")
    @classmethod
    def drop_blank_goals(cls, v: list[str]) -> list[str]:
        return [goal.strip() for goal in v if goal.strip()]


def validate_tree_depth(obj: Any, max_depth: int = MAX_TREE_DEPTH, current_depth: int = 0) -> None:
    """
    Validate element payload nesting depth.

    Args:
        obj: Element payload (dicts and lists)
        max_depth: Maximum allowed nesting depth
        current_depth: Current depth (internal)

    Raises:
        ValidationError: If depth exceeds limit
    """
    if current_depth > max_depth:
        raise ValidationError(f"Element nesting depth {current_depth} exceeds maximum {max_depth}")

    if isinstance(obj, dict):
        for value in obj.values():
            validate_tree_depth(value, max_depth, current_depth + 1)
    elif isinstance(obj, list):
        for item in obj:
            validate_tree_depth(item, max_depth, current_depth + 1)


def validate_generated_page(data: dict[str, Any]) -> Result[dict[str, Any], ValidationResult]:
    """
    Check the legacy JSON page shape returned by a model.

    Returns:
        Success with the payload, or Failure naming the first problem
    """
    if not data.get("title"):
        return Failure(ValidationResult("Generated page missing required 'title' field", "title"))
    components = data.get("components")
    if not isinstance(components, list):
        return Failure(
            ValidationResult("Generated page 'components' must be a list", "components", components)
        )
    return Success(data)
