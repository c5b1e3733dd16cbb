"""Typed shapes of model output."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..builder.elements import GeneratedElement


class _AIOutput(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel, extra="ignore")


class GeneratedComponent(_AIOutput):
    """Legacy section-level block (Hero, Features, ...)."""

    type: str
    props: dict[str, Any] = Field(default_factory=dict)
    content: dict[str, Any] = Field(default_factory=dict)


class GeneratedPage(_AIOutput):
    """
    A generated page: HTML mode fills ``elements``, legacy JSON mode fills
    ``components``.
    """

    title: str
    description: str | None = None
    seo_title: str | None = None
    seo_description: str | None = None
    elements: list[GeneratedElement] = Field(default_factory=list)
    components: list[GeneratedComponent] = Field(default_factory=list)
    html: str | None = Field(default=None, exclude=True)
    provider: str | None = None
    model: str | None = None


class OptimizationSuggestion(_AIOutput):
    type: str = "copy"
    current: str = ""
    suggestions: list[str] = Field(default_factory=list)
    reasoning: str = ""
    impact: Literal["high", "medium", "low"] = "medium"


class SEOMetadata(_AIOutput):
    title: str
    description: str = ""
    keywords: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
