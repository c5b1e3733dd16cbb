"""
Drag-and-drop resolution for the builder canvas.

A drag ends with an ``active`` item (an existing node, or a template dragged
from the element pool) over an ``over`` target (a node, the canvas root, or
nothing). ``handle_drag_end`` turns that into one tree operation.
"""

from dataclasses import dataclass, field
from typing import Sequence

from ..core.logging_config import get_logger
from .elements import Element, ElementBase, materialize
from .tree import (
    find_element,
    find_parent,
    insert_into_tree,
    move_after,
    move_into_container,
    move_to_root,
    reorder_elements,
)

logger = get_logger(__name__)

CANVAS_ROOT_ID = "canvas-root"


@dataclass(frozen=True)
class DragEndEvent:
    """End of a drag gesture.

    ``template`` is set when the dragged item comes from the element pool; in
    that case ``active_id`` is the pool item's id, not a tree node.
    """

    active_id: str
    over_id: str | None
    template: ElementBase | None = field(default=None, compare=False)

    @property
    def from_pool(self) -> bool:
        return self.template is not None


def handle_drag_end(nodes: Sequence[Element], event: DragEndEvent) -> list[Element]:
    """
    Resolve a drop into a new forest.

    - Pool template: materialize a new node (fresh ids) and insert it with
      ``insert_into_tree``; the canvas root means "append at top level".
    - Existing node onto itself: no-op.
    - Existing node onto the canvas root: move to the end of the roots.
    - Existing node onto a non-container: reorder as its sibling.
    - Existing node onto a container: nest as last child, unless the node is
      already a direct child of that container, in which case it escapes to
      become the sibling right after that container.
    """
    if event.over_id is None:
        return list(nodes)

    if event.from_pool:
        new_element = materialize(event.template)
        target_id = None if event.over_id == CANVAS_ROOT_ID else event.over_id
        result = insert_into_tree(nodes, target_id, new_element)
        logger.debug(
            "pool_item_dropped",
            element_id=new_element.id,
            target_id=target_id,
            placed=result.success,
        )
        return result.nodes

    active_id, over_id = event.active_id, event.over_id
    if active_id == over_id:
        return list(nodes)

    if over_id == CANVAS_ROOT_ID:
        return move_to_root(nodes, active_id)

    target = find_element(nodes, over_id)
    if target is None or not target.is_container:
        return reorder_elements(nodes, active_id, over_id)

    parent = find_parent(nodes, active_id)
    if parent is not None and parent.id == target.id:
        logger.debug("element_escaped_container", element_id=active_id, container_id=target.id)
        return move_after(nodes, active_id, target.id)

    return move_into_container(nodes, active_id, target.id)
