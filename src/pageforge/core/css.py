"""Inline style conversion between camelCase style maps and CSS text."""

import re
from typing import Mapping

_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_KEBAB_SEGMENT = re.compile(r"-([a-z])")

StyleValue = str | int | float


def camel_to_kebab(name: str) -> str:
    """``backgroundColor`` -> ``background-color``."""
    return _CAMEL_BOUNDARY.sub(r"\1-\2", name).lower()


def kebab_to_camel(name: str) -> str:
    """``background-color`` -> ``backgroundColor``."""
    return _KEBAB_SEGMENT.sub(lambda m: m.group(1).upper(), name.strip().lower())


def style_object_to_string(styles: Mapping[str, StyleValue] | None) -> str:
    """
    Render a style map as an inline ``style`` attribute value.

    Empty values are skipped. Entries are rendered ``key: value;`` and joined
    with a single space, e.g. ``"color: red; font-size: 12px;"``.
    """
    if not styles:
        return ""
    parts = [
        f"{camel_to_kebab(key)}: {value};"
        for key, value in styles.items()
        if value is not None and str(value).strip() != ""
    ]
    return " ".join(parts)


def string_to_style_object(css: str | None) -> dict[str, str]:
    """Parse inline CSS text into a camelCase style map. Malformed entries are ignored."""
    styles: dict[str, str] = {}
    if not css:
        return styles

    for declaration in css.split(";"):
        if ":" not in declaration:
            continue
        prop, value = declaration.split(":", 1)
        prop, value = prop.strip(), value.strip()
        if not prop or not value:
            continue
        styles[kebab_to_camel(prop)] = value
    return styles
