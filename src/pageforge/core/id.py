"""
Prefixed ULID identifiers.

Element ids are generated client-side when nodes are created, duplicated or
dropped from the pool, so they must be unique without a round trip to the
pages API. ULIDs also sort by creation time, which keeps debugging output
readable.
"""

from typing import NewType

from ulid import ULID

ElementID = NewType("ElementID", str)
"""Element node identifier"""

ChangeID = NewType("ChangeID", str)
"""A/B element change identifier"""

EventID = NewType("EventID", str)
"""Analytics event identifier"""


class Prefix:
    """ID prefix constants."""

    ELEMENT = "el"
    CHANGE = "chg"
    EVENT = "evt"


def generate_raw() -> str:
    """Generate a bare ULID string."""
    return str(ULID())


def generate_prefixed(prefix: str) -> str:
    """Generate ULID with type prefix."""
    return f"{prefix}_{generate_raw()}"


def new_element_id() -> ElementID:
    """Generate new element ID."""
    return ElementID(generate_prefixed(Prefix.ELEMENT))


def new_change_id() -> ChangeID:
    """Generate new change ID."""
    return ChangeID(generate_prefixed(Prefix.CHANGE))


def new_event_id() -> EventID:
    """Generate new event ID."""
    return EventID(generate_prefixed(Prefix.EVENT))


def extract_prefix(id_str: str) -> str | None:
    """Return the type prefix of a prefixed ID, or None for bare ULIDs."""
    if "_" not in id_str:
        return None
    return id_str.split("_", 1)[0]


def is_valid(id_str: str) -> bool:
    """Check whether ``id_str`` is a ULID, optionally prefixed."""
    ulid_str = id_str.split("_", 1)[1] if "_" in id_str else id_str
    try:
        ULID.from_str(ulid_str)
        return True
    except ValueError:
        return False
