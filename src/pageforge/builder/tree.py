"""
Element tree operations.

Every function here is pure: it takes a forest (list of root Elements) and
returns a new one, never mutating its input. Operations never raise for ids
that are not in the tree; they degrade to appending at the root instead, and
report whether the requested placement happened where that matters.

After any structural change the whole forest is re-normalized so that
``parent_id``, ``order`` (dense per sibling group), ``depth`` and ``path``
agree with the actual shape.
"""

from collections import defaultdict
from typing import Any, Callable, Iterable, Mapping, NamedTuple, Sequence

from ..core.id import new_element_id
from ..core.logging_config import get_logger
from .elements import Element

logger = get_logger(__name__)

Forest = list[Element]

# Fields that only tree operations may change
_STRUCTURAL_FIELDS = frozenset({"id", "parent_id", "children", "order", "depth", "path"})


class InsertResult(NamedTuple):
    """Outcome of insert_into_tree. ``success`` is False when the root fallback was used."""

    success: bool
    nodes: Forest


# ============================================================================
# Build / Flatten
# ============================================================================


def build_element_tree(flat: Iterable[Element]) -> Forest:
    """
    Assemble a forest from a flat element list.

    Elements are grouped by ``parent_id`` and each sibling group is sorted by
    ``order`` (stable, so ties keep input order). An element whose parent is
    not in the list is promoted to a root. Elements on a parent cycle are not
    reachable from any root and are dropped.

    Args:
        flat: Elements as persisted; any ``children`` they carry are ignored

    Returns:
        Root elements with children attached and caches recomputed
    """
    elements = list(flat)
    known_ids = {element.id for element in elements}
    by_parent: dict[str | None, list[Element]] = defaultdict(list)

    for element in elements:
        parent_id = element.parent_id
        if parent_id is not None and parent_id not in known_ids:
            logger.warning("dangling_parent_promoted", element_id=element.id, parent_id=parent_id)
            parent_id = None
        by_parent[parent_id].append(element)

    def attach(parent_id: str | None) -> list[Element]:
        siblings = sorted(by_parent.pop(parent_id, []), key=lambda el: el.order)
        return [el.model_copy(update={"children": tuple(attach(el.id))}) for el in siblings]

    roots = attach(None)

    unreachable = [el.id for group in by_parent.values() for el in group]
    if unreachable:
        logger.warning("cyclic_elements_dropped", element_ids=unreachable)

    return normalize_tree(roots)


def flatten_elements(tree: Sequence[Element]) -> Forest:
    """
    Flatten a forest in preorder for persistence.

    ``order`` becomes the sibling index, ``depth`` the nesting level and
    ``path`` the parent path plus the element id. Children are emptied.
    """
    flat: Forest = []

    def visit(nodes: Sequence[Element], parent_id: str | None, depth: int, parent_path: str) -> None:
        for index, node in enumerate(nodes):
            path = f"{parent_path}/{node.id}" if parent_path else node.id
            flat.append(
                node.model_copy(
                    update={
                        "parent_id": parent_id,
                        "order": index,
                        "depth": depth,
                        "path": path,
                        "children": (),
                    }
                )
            )
            visit(node.children, node.id, depth + 1, path)

    visit(tree, None, 0, "")
    return flat


def normalize_tree(
    nodes: Sequence[Element], parent_id: str | None = None, depth: int = 0, parent_path: str = ""
) -> Forest:
    """Recompute parent_id, order, depth and path for every node."""
    result: Forest = []
    for index, node in enumerate(nodes):
        path = f"{parent_path}/{node.id}" if parent_path else node.id
        children = normalize_tree(node.children, node.id, depth + 1, path)
        result.append(
            node.model_copy(
                update={
                    "parent_id": parent_id,
                    "order": index,
                    "depth": depth,
                    "path": path,
                    "children": tuple(children),
                }
            )
        )
    return result


# ============================================================================
# Lookup
# ============================================================================


def find_element(nodes: Sequence[Element], element_id: str) -> Element | None:
    """Depth-first search by id."""
    for node in nodes:
        if node.id == element_id:
            return node
        found = find_element(node.children, element_id)
        if found is not None:
            return found
    return None


def find_parent(nodes: Sequence[Element], element_id: str) -> Element | None:
    """Return the parent of ``element_id``; None for roots and unknown ids."""
    for node in nodes:
        if any(child.id == element_id for child in node.children):
            return node
        found = find_parent(node.children, element_id)
        if found is not None:
            return found
    return None


def iter_elements(nodes: Sequence[Element]) -> Iterable[Element]:
    """Yield every node in preorder."""
    for node in nodes:
        yield node
        yield from iter_elements(node.children)


# ============================================================================
# Internal structural helpers (return (nodes, hit) pairs)
# ============================================================================


def _replace(nodes: Sequence[Element], index: int, node: Element) -> Forest:
    return [*nodes[:index], node, *nodes[index + 1 :]]


def _detach(nodes: Sequence[Element], element_id: str) -> tuple[Forest, Element | None]:
    for index, node in enumerate(nodes):
        if node.id == element_id:
            return [*nodes[:index], *nodes[index + 1 :]], node
        children, moved = _detach(node.children, element_id)
        if moved is not None:
            return _replace(nodes, index, node.model_copy(update={"children": tuple(children)})), moved
    return list(nodes), None


def _append_child(
    nodes: Sequence[Element], container_id: str, new_element: Element
) -> tuple[Forest, bool]:
    for index, node in enumerate(nodes):
        if node.id == container_id:
            if not node.is_container:
                return list(nodes), False
            updated = node.model_copy(update={"children": (*node.children, new_element)})
            return _replace(nodes, index, updated), True
        children, placed = _append_child(node.children, container_id, new_element)
        if placed:
            return _replace(nodes, index, node.model_copy(update={"children": tuple(children)})), True
    return list(nodes), False


def _insert_sibling(
    nodes: Sequence[Element], anchor_id: str, new_element: Element, after: bool
) -> tuple[Forest, bool]:
    for index, node in enumerate(nodes):
        if node.id == anchor_id:
            position = index + 1 if after else index
            return [*nodes[:position], new_element, *nodes[position:]], True
    for index, node in enumerate(nodes):
        children, placed = _insert_sibling(node.children, anchor_id, new_element, after)
        if placed:
            return _replace(nodes, index, node.model_copy(update={"children": tuple(children)})), True
    return list(nodes), False


def _map_element(
    nodes: Sequence[Element], element_id: str, fn: Callable[[Element], Element]
) -> tuple[Forest, bool]:
    for index, node in enumerate(nodes):
        if node.id == element_id:
            return _replace(nodes, index, fn(node)), True
        children, hit = _map_element(node.children, element_id, fn)
        if hit:
            return _replace(nodes, index, node.model_copy(update={"children": tuple(children)})), True
    return list(nodes), False


# ============================================================================
# Mutations
# ============================================================================


def insert_into_tree(
    nodes: Sequence[Element], target_id: str | None, new_element: Element
) -> InsertResult:
    """
    Place ``new_element`` relative to ``target_id``.

    1. Target is a container: append as its last child.
    2. Target exists but is not a container: insert as the next sibling.
    3. Target not found: append at the top level.

    ``target_id=None`` appends at the top level and counts as success.
    """
    if target_id is None:
        return InsertResult(True, normalize_tree([*nodes, new_element]))

    updated, placed = _append_child(nodes, target_id, new_element)
    if not placed:
        updated, placed = _insert_sibling(nodes, target_id, new_element, after=True)
    if not placed:
        logger.debug("insert_target_missing", target_id=target_id, element_id=new_element.id)
        updated = [*nodes, new_element]

    return InsertResult(placed, normalize_tree(updated))


def reorder_elements(nodes: Sequence[Element], active_id: str, over_id: str) -> Forest:
    """
    Move ``active_id`` so it sits immediately before ``over_id`` as its sibling.

    Dropping a node on itself, or an unknown ``active_id``, leaves the tree
    unchanged. If ``over_id`` is gone once the active node is detached (for
    example it was inside the moved subtree), the node becomes the last root.
    """
    if active_id == over_id:
        return list(nodes)

    remaining, moved = _detach(nodes, active_id)
    if moved is None:
        return list(nodes)

    updated, placed = _insert_sibling(remaining, over_id, moved, after=False)
    if not placed:
        updated = [*remaining, moved]
    return normalize_tree(updated)


def move_into_container(nodes: Sequence[Element], element_id: str, container_id: str) -> Forest:
    """Nest ``element_id`` as the last child of ``container_id``; root append on a miss."""
    if element_id == container_id:
        return list(nodes)

    remaining, moved = _detach(nodes, element_id)
    if moved is None:
        return list(nodes)

    updated, placed = _append_child(remaining, container_id, moved)
    if not placed:
        updated = [*remaining, moved]
    return normalize_tree(updated)


def move_after(nodes: Sequence[Element], element_id: str, anchor_id: str) -> Forest:
    """Move ``element_id`` to directly after ``anchor_id`` in the anchor's sibling group."""
    if element_id == anchor_id:
        return list(nodes)

    remaining, moved = _detach(nodes, element_id)
    if moved is None:
        return list(nodes)

    updated, placed = _insert_sibling(remaining, anchor_id, moved, after=True)
    if not placed:
        updated = [*remaining, moved]
    return normalize_tree(updated)


def move_to_root(nodes: Sequence[Element], element_id: str) -> Forest:
    """Move ``element_id`` to the end of the root list."""
    remaining, moved = _detach(nodes, element_id)
    if moved is None:
        return list(nodes)
    return normalize_tree([*remaining, moved])


def remove_element(nodes: Sequence[Element], element_id: str) -> Forest:
    """Remove a node and its subtree."""
    remaining, removed = _detach(nodes, element_id)
    if removed is None:
        return list(nodes)
    return normalize_tree(remaining)


def update_element(
    nodes: Sequence[Element], element_id: str, changes: Mapping[str, Any]
) -> Forest:
    """
    Apply field changes (snake_case names) to one node.

    Structural fields (id, parent_id, children, order, depth, path) are
    ignored; use the move operations for those. The node is re-validated so a
    ``type`` change re-shapes ``content`` accordingly.
    """
    allowed = {key: value for key, value in changes.items() if key not in _STRUCTURAL_FIELDS}

    def apply(node: Element) -> Element:
        data = node.model_dump(exclude={"children"})
        data.update(allowed)
        return Element.model_validate({**data, "children": node.children})

    updated, _ = _map_element(nodes, element_id, apply)
    return updated


def _clone_with_new_ids(node: Element) -> Element:
    return node.model_copy(
        update={
            "id": new_element_id(),
            "children": tuple(_clone_with_new_ids(child) for child in node.children),
        }
    )


def duplicate_element(nodes: Sequence[Element], element_id: str) -> tuple[Forest, str | None]:
    """
    Deep-copy a node (fresh ids for the whole subtree) directly after the original.

    Returns:
        (new forest, id of the copy) or (unchanged forest, None) on a miss
    """
    original = find_element(nodes, element_id)
    if original is None:
        return list(nodes), None

    copy = _clone_with_new_ids(original)
    updated, _ = _insert_sibling(nodes, element_id, copy, after=True)
    return normalize_tree(updated), copy.id
