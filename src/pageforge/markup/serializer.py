"""Element tree to HTML."""

from html import escape

from ..builder.elements import ElementBase, ElementType
from ..core.css import style_object_to_string

VOID_TAGS = frozenset(
    {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "track", "wbr"}
)

DEFAULT_TAGS = {
    ElementType.IMAGE: "img",
    ElementType.BUTTON: "button",
    ElementType.LINK: "a",
    ElementType.INPUT: "input",
}


def default_tag(element_type: ElementType) -> str:
    return DEFAULT_TAGS.get(element_type, "div")


def _attributes(element: ElementBase, tag: str) -> list[tuple[str, str]]:
    attrs: list[tuple[str, str]] = []
    if element.class_name:
        attrs.append(("class", element.class_name))

    style = style_object_to_string(element.styles)
    if style:
        attrs.append(("style", style))

    content = element.content
    if element.type == ElementType.IMAGE:
        attrs.append(("src", content.src))
        attrs.append(("alt", content.alt))
    elif element.type in (ElementType.LINK, ElementType.BUTTON):
        href = getattr(content, "href", None)
        if href and tag == "a":
            attrs.append(("href", href))
        target = getattr(content, "target", None)
        if target and tag == "a":
            attrs.append(("target", target))
    elif element.type == ElementType.INPUT:
        if content.input_type and tag == "input":
            attrs.append(("type", content.input_type))
        if content.name:
            attrs.append(("name", content.name))
        if content.placeholder:
            attrs.append(("placeholder", content.placeholder))

    taken = {name for name, _ in attrs}
    attrs.extend((name, value) for name, value in element.attributes.items() if name not in taken)
    return attrs


def element_to_html(element: ElementBase) -> str:
    """
    Serialize an element and its subtree.

    The tag is ``tag_name`` or a default for the type. Styles become an inline
    ``style`` attribute with kebab-case properties. Void tags self-close; other
    tags wrap the escaped direct text followed by the children's HTML.
    """
    tag = (element.tag_name or default_tag(element.type)).lower()
    rendered = "".join(
        f' {name}="{escape(str(value), quote=True)}"' for name, value in _attributes(element, tag)
    )

    if tag in VOID_TAGS:
        return f"<{tag}{rendered} />"

    inner = escape(element.text, quote=False)
    inner += "".join(element_to_html(child) for child in getattr(element, "children", ()))
    return f"<{tag}{rendered}>{inner}</{tag}>"
