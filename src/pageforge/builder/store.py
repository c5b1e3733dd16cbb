"""
Builder editor state.

``BuilderState`` is an immutable snapshot; ``BuilderStore`` owns the current
snapshot plus undo/redo stacks and applies the pure tree operations. Only
tree-changing actions are recorded in history; selection, hover and drag
tracking are not.
"""

from dataclasses import dataclass, replace
from typing import Any, Iterable, Mapping

from ..core.logging_config import get_logger
from . import tree
from .dnd import DragEndEvent, handle_drag_end
from .elements import Element, ElementBase, materialize

logger = get_logger(__name__)

DEFAULT_MAX_HISTORY = 50


@dataclass(frozen=True)
class BuilderState:
    """Snapshot of the editor."""

    elements: tuple[Element, ...] = ()
    selected_id: str | None = None
    hovered_id: str | None = None
    active_dragging_id: str | None = None
    pool: tuple[Element, ...] = ()

    @property
    def selected(self) -> Element | None:
        if self.selected_id is None:
            return None
        return tree.find_element(self.elements, self.selected_id)


class BuilderStore:
    """Holds editor state with bounded undo/redo history."""

    def __init__(self, elements: Iterable[Element] = (), max_history: int = DEFAULT_MAX_HISTORY):
        self._state = BuilderState(elements=tuple(elements))
        self._past: list[tuple[Element, ...]] = []
        self._future: list[tuple[Element, ...]] = []
        self.max_history = max_history

    @property
    def state(self) -> BuilderState:
        return self._state

    @property
    def elements(self) -> tuple[Element, ...]:
        return self._state.elements

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def _commit(self, elements: Iterable[Element], **changes: Any) -> None:
        new_elements = tuple(elements)
        if new_elements != self._state.elements:
            self._past.append(self._state.elements)
            if len(self._past) > self.max_history:
                del self._past[0]
            self._future.clear()
        self._state = replace(self._state, elements=new_elements, **changes)

    @property
    def can_undo(self) -> bool:
        return bool(self._past)

    @property
    def can_redo(self) -> bool:
        return bool(self._future)

    def undo(self) -> bool:
        if not self._past:
            return False
        self._future.append(self._state.elements)
        self._state = self._restore(self._past.pop())
        return True

    def redo(self) -> bool:
        if not self._future:
            return False
        self._past.append(self._state.elements)
        self._state = self._restore(self._future.pop())
        return True

    def _restore(self, elements: tuple[Element, ...]) -> BuilderState:
        selected_id = self._state.selected_id
        if selected_id is not None and tree.find_element(elements, selected_id) is None:
            selected_id = None
        return replace(self._state, elements=elements, selected_id=selected_id)

    # ------------------------------------------------------------------
    # Tree actions
    # ------------------------------------------------------------------

    def load(self, flat: Iterable[Element]) -> None:
        """Replace the tree from a persisted flat list and reset history."""
        self._state = BuilderState(elements=tuple(tree.build_element_tree(flat)), pool=self._state.pool)
        self._past.clear()
        self._future.clear()
        logger.info("builder_loaded", element_count=len(list(tree.iter_elements(self.elements))))

    def add_element(self, template: ElementBase, target_id: str | None = None) -> Element:
        """Materialize ``template`` and insert it at ``target_id``; returns the new node."""
        new_element = materialize(template)
        result = tree.insert_into_tree(self.elements, target_id, new_element)
        self._commit(result.nodes, selected_id=new_element.id)
        return tree.find_element(self.elements, new_element.id) or new_element

    def remove_element(self, element_id: str) -> None:
        nodes = tree.remove_element(self.elements, element_id)
        selected_id = self._state.selected_id
        if selected_id is not None and tree.find_element(nodes, selected_id) is None:
            self._commit(nodes, selected_id=None)
        else:
            self._commit(nodes)

    def update_element(self, element_id: str, changes: Mapping[str, Any]) -> None:
        self._commit(tree.update_element(self.elements, element_id, changes))

    def duplicate_element(self, element_id: str) -> str | None:
        nodes, copy_id = tree.duplicate_element(self.elements, element_id)
        if copy_id is not None:
            self._commit(nodes, selected_id=copy_id)
        return copy_id

    def drag_end(self, active_id: str, over_id: str | None) -> None:
        """Finish a drag; pool items are recognised by id."""
        template = next((item for item in self._state.pool if item.id == active_id), None)
        event = DragEndEvent(active_id=active_id, over_id=over_id, template=template)
        nodes = handle_drag_end(self.elements, event)
        self._commit(nodes, active_dragging_id=None)

    # ------------------------------------------------------------------
    # Transient UI state
    # ------------------------------------------------------------------

    def select(self, element_id: str | None) -> None:
        self._state = replace(self._state, selected_id=element_id)

    def hover(self, element_id: str | None) -> None:
        self._state = replace(self._state, hovered_id=element_id)

    def start_drag(self, element_id: str) -> None:
        self._state = replace(self._state, active_dragging_id=element_id)

    # ------------------------------------------------------------------
    # Element pool
    # ------------------------------------------------------------------

    def add_to_pool(self, template: ElementBase) -> Element:
        item = materialize(template)
        self._state = replace(self._state, pool=(*self._state.pool, item))
        return item

    def save_to_pool(self, element_id: str) -> Element | None:
        """Copy a canvas element (with its subtree) into the pool; None if not found."""
        element = tree.find_element(self.elements, element_id)
        if element is None:
            logger.warning("save_to_pool_missing", element_id=element_id)
            return None
        return self.add_to_pool(element.to_generated())

    def remove_from_pool(self, item_id: str) -> None:
        pool = tuple(item for item in self._state.pool if item.id != item_id)
        self._state = replace(self._state, pool=pool)

    def clear_pool(self) -> None:
        self._state = replace(self._state, pool=())

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def to_flat(self) -> list[Element]:
        """Flatten the current tree for the pages API."""
        return tree.flatten_elements(self.elements)
