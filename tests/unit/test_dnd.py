"""Tests for drag-and-drop resolution."""

import pytest

from pageforge.builder.dnd import CANVAS_ROOT_ID, DragEndEvent, handle_drag_end
from pageforge.builder.elements import GeneratedElement
from pageforge.builder.tree import build_element_tree, find_element, iter_elements


def ids(nodes):
    return [node.id for node in nodes]


@pytest.fixture
def forest(make_element):
    """section(b, inner(x)), d"""
    return build_element_tree(
        [
            make_element("section", order=0),
            make_element("b", parent_id="section", order=0, type="text", content="B"),
            make_element("inner", parent_id="section", order=1),
            make_element("x", parent_id="inner", order=0, type="text", content="X"),
            make_element("d", order=1, type="text", content="D"),
        ]
    )


@pytest.mark.unit
class TestExistingNodeDrops:
    """Test drops of nodes already on the canvas."""

    def test_no_target_is_noop(self, forest):
        assert handle_drag_end(forest, DragEndEvent("b", None)) == forest

    def test_drop_on_self_is_noop(self, forest):
        assert handle_drag_end(forest, DragEndEvent("section", "section")) == forest

    def test_drop_on_canvas_root_moves_to_end(self, forest):
        result = handle_drag_end(forest, DragEndEvent("x", CANVAS_ROOT_ID))

        assert ids(result) == ["section", "d", "x"]
        assert find_element(result, "inner").children == ()

    def test_drop_on_leaf_reorders_before_it(self, forest):
        result = handle_drag_end(forest, DragEndEvent("d", "b"))

        assert ids(result) == ["section"]
        assert ids(find_element(result, "section").children) == ["d", "b", "inner"]

    def test_drop_on_container_nests(self, forest):
        result = handle_drag_end(forest, DragEndEvent("d", "inner"))

        assert ids(find_element(result, "inner").children) == ["x", "d"]
        assert find_element(result, "d").depth == 2

    def test_drop_on_own_parent_escapes(self, forest):
        """A child dropped on its container leaves it, landing right after the container."""
        result = handle_drag_end(forest, DragEndEvent("x", "inner"))

        assert ids(find_element(result, "section").children) == ["b", "inner", "x"]
        assert find_element(result, "inner").children == ()
        assert find_element(result, "x").parent_id == "section"

    def test_drop_on_ancestor_that_is_not_parent_nests(self, forest):
        result = handle_drag_end(forest, DragEndEvent("x", "section"))

        assert ids(find_element(result, "section").children) == ["b", "inner", "x"]
        assert find_element(result, "x").depth == 1

    def test_drop_container_into_own_descendant_keeps_every_node(self, forest):
        result = handle_drag_end(forest, DragEndEvent("section", "inner"))

        assert sorted(ids(iter_elements(result))) == ["b", "d", "inner", "section", "x"]
        assert ids(result) == ["d", "section"]


@pytest.mark.unit
class TestPoolDrops:
    """Test dropping a template from the element pool."""

    @pytest.fixture
    def template(self):
        return GeneratedElement(
            type="container",
            children=(GeneratedElement(type="text", tag_name="p", content="Pool text"),),
        )

    def test_drop_into_container(self, forest, template):
        result = handle_drag_end(forest, DragEndEvent("pool-1", "inner", template=template))

        inner = find_element(result, "inner")
        assert len(inner.children) == 2
        created = inner.children[1]
        assert created.id != "pool-1"
        assert created.children[0].text == "Pool text"
        assert created.children[0].parent_id == created.id

    def test_drop_on_canvas_root_appends(self, forest, template):
        result = handle_drag_end(forest, DragEndEvent("pool-1", CANVAS_ROOT_ID, template=template))

        assert len(result) == 3
        assert result[-1].depth == 0

    def test_drop_on_leaf_inserts_after(self, forest, template):
        result = handle_drag_end(forest, DragEndEvent("pool-1", "b", template=template))

        children = find_element(result, "section").children
        assert children[0].id == "b"
        assert children[2].id == "inner"
        assert len(children) == 3

    def test_each_drop_gets_fresh_ids(self, forest, template):
        event = DragEndEvent("pool-1", CANVAS_ROOT_ID, template=template)

        first = handle_drag_end(forest, event)
        second = handle_drag_end(first, event)

        assert second[-1].id != second[-2].id

    def test_from_pool_flag(self, template):
        assert DragEndEvent("a", "b", template=template).from_pool is True
        assert DragEndEvent("a", "b").from_pool is False
