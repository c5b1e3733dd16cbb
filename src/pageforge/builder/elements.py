"""
Element data model.

Elements are immutable values. The ``content`` payload is a tagged union keyed
by the element ``type``: each variant carries only the fields that type needs,
and the payload is coerced to the matching variant on validation.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from ..core.css import StyleValue
from ..core.id import new_element_id


class ElementType(str, Enum):
    """Visual primitive kinds."""

    TEXT = "text"
    BUTTON = "button"
    IMAGE = "image"
    CONTAINER = "container"
    INPUT = "input"
    LINK = "link"


_MODEL_CONFIG = ConfigDict(
    frozen=True,
    populate_by_name=True,
    alias_generator=to_camel,
    extra="ignore",
)


# ============================================================================
# Content variants
# ============================================================================


class TextContent(BaseModel):
    model_config = _MODEL_CONFIG

    kind: Literal["text"] = "text"
    content: str = ""


class ButtonContent(BaseModel):
    model_config = _MODEL_CONFIG

    kind: Literal["button"] = "button"
    content: str = ""
    href: str | None = None


class LinkContent(BaseModel):
    model_config = _MODEL_CONFIG

    kind: Literal["link"] = "link"
    content: str = ""
    href: str | None = None
    target: str | None = None


class ImageContent(BaseModel):
    model_config = _MODEL_CONFIG

    kind: Literal["image"] = "image"
    src: str = ""
    alt: str = ""


class InputContent(BaseModel):
    model_config = _MODEL_CONFIG

    kind: Literal["input"] = "input"
    placeholder: str | None = None
    input_type: str | None = None
    name: str | None = None
    content: str = ""  # textarea body


class ContainerContent(BaseModel):
    """Direct text of a container, if any."""

    model_config = _MODEL_CONFIG

    kind: Literal["container"] = "container"
    content: str = ""


ElementContent = Annotated[
    Union[TextContent, ButtonContent, LinkContent, ImageContent, InputContent, ContainerContent],
    Field(discriminator="kind"),
]


def _coerce_content(element_type: Any, content: Any) -> Any:
    kind = element_type.value if isinstance(element_type, ElementType) else str(element_type)
    if content is None:
        return {"kind": kind}
    if isinstance(content, str):
        return {"kind": kind, "content": content}
    if isinstance(content, BaseModel):
        if getattr(content, "kind", None) == kind:
            return content
        content = content.model_dump()
    if isinstance(content, dict):
        return {**content, "kind": kind}
    return content


# ============================================================================
# Elements
# ============================================================================


class ElementBase(BaseModel):
    """Fields shared by persisted elements and AI-generated elements."""

    model_config = _MODEL_CONFIG

    type: ElementType = ElementType.CONTAINER
    tag_name: str | None = None
    name: str | None = None
    content: ElementContent = Field(default_factory=ContainerContent)
    styles: dict[str, StyleValue] = Field(default_factory=dict)
    class_name: str | None = None
    attributes: dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _content_matches_type(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        element_type = data.get("type") or ElementType.CONTAINER.value
        data["type"] = element_type
        data["content"] = _coerce_content(element_type, data.get("content"))
        return data

    @property
    def is_container(self) -> bool:
        return self.type == ElementType.CONTAINER

    @property
    def text(self) -> str:
        """Direct text content, empty for variants without one."""
        return getattr(self.content, "content", "") or ""


class GeneratedElement(ElementBase):
    """Element produced by a model, before it has persistence ids."""

    children: tuple["GeneratedElement", ...] = ()


class Element(ElementBase):
    """Node of the page element tree.

    ``order``, ``depth`` and ``path`` are caches recomputed by every tree
    operation; ``path`` is the slash-joined id chain from the root.
    """

    id: str
    parent_id: str | None = None
    order: int = 0
    depth: int = 0
    path: str = ""
    children: tuple["Element", ...] = ()

    def to_generated(self) -> GeneratedElement:
        """Drop ids and tree caches (recursively), e.g. to reuse as a template."""
        return GeneratedElement.model_validate(self.model_dump())


GeneratedElement.model_rebuild()
Element.model_rebuild()


def materialize(generated: ElementBase, parent_id: str | None = None) -> Element:
    """Turn a template or generated element into a fresh Element subtree with new ids."""
    element_id = new_element_id()
    children = tuple(
        materialize(child, parent_id=element_id) for child in getattr(generated, "children", ())
    )
    data = generated.model_dump(include=set(ElementBase.model_fields))
    return Element.model_validate(
        {**data, "id": element_id, "parent_id": parent_id, "children": children}
    )


def element_from_dict(data: dict[str, Any]) -> Element:
    """Validate a camelCase or snake_case payload into an Element, assigning ids where missing."""
    return Element.model_validate(_with_ids(data))


def _with_ids(data: dict[str, Any]) -> dict[str, Any]:
    data = dict(data)
    if not data.get("id"):
        data["id"] = new_element_id()
    children = data.get("children")
    if children:
        data["children"] = [
            _with_ids(child) if isinstance(child, dict) else child for child in children
        ]
    return data
