"""Element tree model, pure tree operations and editor store."""

from .dnd import CANVAS_ROOT_ID, DragEndEvent, handle_drag_end
from .elements import (
    ButtonContent,
    ContainerContent,
    Element,
    ElementBase,
    ElementType,
    GeneratedElement,
    ImageContent,
    InputContent,
    LinkContent,
    TextContent,
    element_from_dict,
    materialize,
)
from .store import BuilderState, BuilderStore
from .tree import (
    InsertResult,
    build_element_tree,
    duplicate_element,
    find_element,
    find_parent,
    flatten_elements,
    insert_into_tree,
    iter_elements,
    move_after,
    move_into_container,
    move_to_root,
    normalize_tree,
    remove_element,
    reorder_elements,
    update_element,
)

__all__ = [
    "CANVAS_ROOT_ID",
    "DragEndEvent",
    "handle_drag_end",
    "ButtonContent",
    "ContainerContent",
    "Element",
    "ElementBase",
    "ElementType",
    "GeneratedElement",
    "ImageContent",
    "InputContent",
    "LinkContent",
    "TextContent",
    "element_from_dict",
    "materialize",
    "BuilderState",
    "BuilderStore",
    "InsertResult",
    "build_element_tree",
    "duplicate_element",
    "find_element",
    "find_parent",
    "flatten_elements",
    "insert_into_tree",
    "iter_elements",
    "move_after",
    "move_into_container",
    "move_to_root",
    "normalize_tree",
    "remove_element",
    "reorder_elements",
    "update_element",
]
