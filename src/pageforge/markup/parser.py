"""HTML to element tree, via BeautifulSoup."""

from typing import Any

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from ..builder.elements import ElementType, GeneratedElement
from ..core.css import string_to_style_object
from ..core.logging_config import get_logger

logger = get_logger(__name__)

TEXT_TAGS = frozenset({"h1", "h2", "h3", "h4", "p", "span"})
INPUT_TAGS = frozenset({"input", "textarea"})
# Dropped entirely; never become elements
SKIPPED_TAGS = frozenset({"script", "style", "noscript", "template", "head", "meta", "title", "link"})

# Attributes folded into typed fields instead of ``attributes``
_ALWAYS_CONSUMED = frozenset({"style", "class"})
_CONSUMED_BY_TYPE = {
    ElementType.IMAGE: frozenset({"src", "alt"}),
    ElementType.LINK: frozenset({"href", "target"}),
    ElementType.BUTTON: frozenset({"href"}),
    ElementType.INPUT: frozenset({"placeholder", "type", "name"}),
}
_BUTTON_CLASS_HINTS = ("btn", "button")
_BUTTON_STYLE_HINTS = ("background", "backgroundColor", "padding", "borderRadius")


class GeneratedHTMLError(Exception):
    """Model output could not be turned into at least one element."""

    def __init__(self, message: str, html: str | None = None) -> None:
        super().__init__(message)
        self.html = html


def _class_name(tag: Tag) -> str | None:
    classes = tag.get("class")
    if not classes:
        return None
    if isinstance(classes, str):
        return classes
    return " ".join(classes)


def _looks_like_button(tag: Tag, styles: dict[str, str], class_name: str | None) -> bool:
    if tag.get("role") == "button":
        return True
    if class_name and any(hint in class_name.lower() for hint in _BUTTON_CLASS_HINTS):
        return True
    return any(key in styles for key in _BUTTON_STYLE_HINTS)


def infer_type(tag: Tag, styles: dict[str, str], class_name: str | None) -> ElementType:
    name = tag.name.lower()
    if name in TEXT_TAGS:
        return ElementType.TEXT
    if name == "button":
        return ElementType.BUTTON
    if name == "a":
        return ElementType.BUTTON if _looks_like_button(tag, styles, class_name) else ElementType.LINK
    if name == "img":
        return ElementType.IMAGE
    if name in INPUT_TAGS:
        return ElementType.INPUT
    return ElementType.CONTAINER


def _direct_text(tag: Tag) -> str:
    parts = [
        str(child).strip()
        for child in tag.children
        if isinstance(child, NavigableString) and not isinstance(child, Comment)
    ]
    return " ".join(part for part in parts if part)


def _content(tag: Tag, element_type: ElementType) -> dict[str, Any]:
    attr = tag.get
    if element_type == ElementType.IMAGE:
        return {"src": attr("src", ""), "alt": attr("alt", "")}
    if element_type == ElementType.INPUT:
        return {
            "placeholder": attr("placeholder"),
            "input_type": attr("type"),
            "name": attr("name"),
            "content": _direct_text(tag),
        }
    content: dict[str, Any] = {"content": _direct_text(tag)}
    if element_type in (ElementType.LINK, ElementType.BUTTON) and attr("href"):
        content["href"] = attr("href")
    if element_type == ElementType.LINK and attr("target"):
        content["target"] = attr("target")
    return content


def convert_to_element(tag: Tag) -> GeneratedElement:
    """
    Convert one parsed HTML element (and its subtree) into a GeneratedElement.

    Type is inferred from the tag name; the inline style is parsed back into a
    camelCase map; direct text nodes are joined into ``content.content``.
    Attributes that have no typed field are kept in ``attributes``.
    """
    styles = string_to_style_object(tag.get("style"))
    class_name = _class_name(tag)
    element_type = infer_type(tag, styles, class_name)

    consumed = _ALWAYS_CONSUMED | _CONSUMED_BY_TYPE.get(element_type, frozenset())
    attributes = {
        key: " ".join(value) if isinstance(value, list) else str(value)
        for key, value in tag.attrs.items()
        if key not in consumed
    }

    children = tuple(
        convert_to_element(child)
        for child in tag.children
        if isinstance(child, Tag) and child.name.lower() not in SKIPPED_TAGS
    )

    return GeneratedElement(
        type=element_type,
        tag_name=tag.name.lower(),
        content=_content(tag, element_type),
        styles=styles,
        class_name=class_name,
        attributes=attributes,
        children=children,
    )


def _top_level_tags(soup: BeautifulSoup) -> list[Tag]:
    root = soup.body or soup.find("html") or soup
    return [
        child
        for child in root.children
        if isinstance(child, Tag) and child.name.lower() not in SKIPPED_TAGS
    ]


def parse_html_fragment(html: str) -> list[GeneratedElement]:
    """Parse an HTML fragment or document into its top-level elements."""
    if not html or not html.strip():
        return []
    soup = BeautifulSoup(html, "html.parser")
    return [convert_to_element(tag) for tag in _top_level_tags(soup)]


def parse_single_element(html: str) -> GeneratedElement:
    """
    Parse HTML expected to hold one element (an edited element).

    Raises:
        GeneratedHTMLError: If no element node is found
    """
    elements = parse_html_fragment(html)
    if not elements:
        raise GeneratedHTMLError("AI returned empty or invalid HTML", html)
    if len(elements) > 1:
        logger.warning("extra_top_level_nodes_ignored", count=len(elements) - 1)
    return elements[0]


def extract_page_metadata(html: str) -> tuple[str | None, str | None]:
    """Return (title, description) from <title>/first <h1> and the meta description."""
    soup = BeautifulSoup(html, "html.parser")

    title = None
    if soup.title and soup.title.string:
        title = soup.title.string.strip()
    if not title:
        heading = soup.find("h1")
        if heading:
            title = heading.get_text(" ", strip=True) or None

    description = None
    meta = soup.find("meta", attrs={"name": "description"})
    if meta and meta.get("content"):
        description = str(meta.get("content")).strip()

    return title, description
