"""Full-page rendering of an element forest."""

from html import escape
from typing import Sequence

from ..builder.elements import ElementBase
from .serializer import element_to_html

_DOCUMENT = """<!DOCTYPE html>
<html lang="{lang}">
<head>
<meta charset="utf-8" />
<meta name="viewport" content="width=device-width, initial-scale=1" />
<title>{title}</title>
{description}</head>
<body>
{body}
</body>
</html>
"""


def render_body(elements: Sequence[ElementBase]) -> str:
    """Concatenate the HTML of each root, one per line."""
    return "\n".join(element_to_html(element) for element in elements)


def render_page(
    elements: Sequence[ElementBase],
    title: str = "Untitled page",
    description: str | None = None,
    lang: str = "en",
) -> str:
    """Render roots (in order) into a standalone HTML document."""
    meta = ""
    if description:
        meta = f'<meta name="description" content="{escape(description, quote=True)}" />\n'
    return _DOCUMENT.format(
        lang=escape(lang, quote=True),
        title=escape(title),
        description=meta,
        body=render_body(elements),
    )
