"""Conversion between element trees and HTML."""

from .parser import (
    GeneratedHTMLError,
    convert_to_element,
    extract_page_metadata,
    infer_type,
    parse_html_fragment,
    parse_single_element,
)
from .renderer import render_body, render_page
from .serializer import VOID_TAGS, default_tag, element_to_html

__all__ = [
    "GeneratedHTMLError",
    "convert_to_element",
    "extract_page_metadata",
    "infer_type",
    "parse_html_fragment",
    "parse_single_element",
    "render_body",
    "render_page",
    "VOID_TAGS",
    "default_tag",
    "element_to_html",
]
