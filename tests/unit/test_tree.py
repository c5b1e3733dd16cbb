"""Tests for element tree operations."""

import pytest
from hypothesis import given, settings as hyp_settings, strategies as st

from pageforge.builder.elements import Element, ElementType
from pageforge.builder.tree import (
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
    remove_element,
    reorder_elements,
    update_element,
)


def ids(nodes):
    return [node.id for node in nodes]


def child_ids(nodes, element_id):
    return ids(find_element(nodes, element_id).children)


def assert_normalized(nodes, parent_id=None, depth=0, parent_path=""):
    """Caches agree with the actual shape."""
    for index, node in enumerate(nodes):
        path = f"{parent_path}/{node.id}" if parent_path else node.id
        assert node.parent_id == parent_id
        assert node.order == index
        assert node.depth == depth
        assert node.path == path
        assert_normalized(node.children, node.id, depth + 1, path)


# ============================================================================
# Build / Flatten
# ============================================================================

@pytest.mark.unit
class TestBuildElementTree:
    """Test assembling a forest from a flat list."""

    def test_three_node_scenario(self, make_element):
        """Root a with children b, c round-trips through flatten."""
        flat = [
            make_element("a", order=0),
            make_element("b", parent_id="a", order=0),
            make_element("c", parent_id="a", order=1),
        ]

        tree = build_element_tree(flat)

        assert ids(tree) == ["a"]
        assert child_ids(tree, "a") == ["b", "c"]

        flattened = flatten_elements(tree)
        assert ids(flattened) == ["a", "b", "c"]
        assert [el.depth for el in flattened] == [0, 1, 1]
        assert [el.order for el in flattened] == [0, 0, 1]
        assert [el.path for el in flattened] == ["a", "a/b", "a/c"]

    def test_siblings_sorted_by_order(self, make_element):
        flat = [
            make_element("a"),
            make_element("z", parent_id="a", order=5),
            make_element("y", parent_id="a", order=2),
            make_element("x", parent_id="a", order=9),
        ]

        tree = build_element_tree(flat)

        assert child_ids(tree, "a") == ["y", "z", "x"]
        assert [c.order for c in tree[0].children] == [0, 1, 2]

    def test_order_ties_keep_input_order(self, make_element):
        flat = [make_element("p", order=0), make_element("q", order=0), make_element("r", order=0)]

        assert ids(build_element_tree(flat)) == ["p", "q", "r"]

    def test_dangling_parent_promoted_to_root(self, make_element):
        flat = [make_element("a", order=0), make_element("orphan", parent_id="gone", order=1)]

        tree = build_element_tree(flat)

        assert ids(tree) == ["a", "orphan"]
        assert tree[1].parent_id is None
        assert tree[1].depth == 0

    def test_cycle_is_dropped_not_recursed(self, make_element):
        flat = [
            make_element("root"),
            make_element("x", parent_id="y"),
            make_element("y", parent_id="x"),
        ]

        tree = build_element_tree(flat)

        assert ids(tree) == ["root"]
        assert find_element(tree, "x") is None

    def test_incoming_children_ignored(self, make_element):
        stale_child = make_element("stale", parent_id="a")
        flat = [make_element("a").model_copy(update={"children": (stale_child,)})]

        tree = build_element_tree(flat)

        assert tree[0].children == ()

    def test_empty(self):
        assert build_element_tree([]) == []
        assert flatten_elements([]) == []

    def test_flatten_empties_children(self, sample_flat):
        flat = flatten_elements(build_element_tree(sample_flat))

        assert ids(flat) == ["a", "b", "c", "d"]
        assert all(el.children == () for el in flat)
        assert flat[1].parent_id == "a"


# Random forests: each node i picks a parent among 0..i-1 (or none), so input is acyclic.
@st.composite
def flat_forests(draw):
    size = draw(st.integers(min_value=0, max_value=25))
    elements = []
    for i in range(size):
        parent = draw(st.one_of(st.none(), st.integers(min_value=0, max_value=max(i - 1, 0))))
        parent_id = f"n{parent}" if parent is not None and i > 0 else None
        order = draw(st.integers(min_value=0, max_value=10))
        elements.append(Element(id=f"n{i}", parent_id=parent_id, order=order))
    return draw(st.permutations(elements))


@pytest.mark.unit
@hyp_settings(max_examples=75, deadline=None)
@given(flat_forests())
def test_flatten_build_round_trip_is_idempotent(flat):
    """flatten(build(flatten(build(x)))) == flatten(build(x))."""
    once = flatten_elements(build_element_tree(flat))
    twice = flatten_elements(build_element_tree(once))

    assert twice == once


@pytest.mark.unit
@hyp_settings(max_examples=75, deadline=None)
@given(flat_forests())
def test_build_keeps_every_acyclic_node(flat):
    tree = build_element_tree(flat)

    assert sorted(ids(iter_elements(tree))) == sorted(ids(flat))
    assert_normalized(tree)


# ============================================================================
# Lookup
# ============================================================================

@pytest.mark.unit
class TestLookup:
    """Test find helpers."""

    def test_find_nested(self, sample_flat):
        tree = build_element_tree(sample_flat)

        assert find_element(tree, "c").text == "C"
        assert find_element(tree, "missing") is None

    def test_find_parent(self, sample_flat):
        tree = build_element_tree(sample_flat)

        assert find_parent(tree, "b").id == "a"
        assert find_parent(tree, "a") is None
        assert find_parent(tree, "missing") is None


# ============================================================================
# Insert
# ============================================================================

@pytest.mark.unit
class TestInsertIntoTree:
    """Test the container / sibling / root fallback chain."""

    def test_container_target_appends_child(self, sample_flat, make_element):
        tree = build_element_tree(sample_flat)

        result = insert_into_tree(tree, "a", make_element("new"))

        assert result.success is True
        assert child_ids(result.nodes, "a") == ["b", "c", "new"]
        assert find_element(result.nodes, "new").order == 2
        assert find_element(result.nodes, "new").parent_id == "a"

    def test_leaf_target_inserts_next_sibling(self, sample_flat, make_element):
        tree = build_element_tree(sample_flat)

        result = insert_into_tree(tree, "b", make_element("new"))

        assert result.success is True
        assert child_ids(result.nodes, "a") == ["b", "new", "c"]
        assert [n.order for n in find_element(result.nodes, "a").children] == [0, 1, 2]

    def test_leaf_root_target(self, sample_flat, make_element):
        tree = build_element_tree(sample_flat)

        result = insert_into_tree(tree, "d", make_element("new"))

        assert ids(result.nodes) == ["a", "d", "new"]

    def test_missing_target_falls_back_to_root(self, sample_flat, make_element):
        tree = build_element_tree(sample_flat)

        result = insert_into_tree(tree, "nowhere", make_element("new"))

        assert result.success is False
        assert ids(result.nodes) == ["a", "d", "new"]
        assert result.nodes[-1].parent_id is None

    def test_none_target_appends_root(self, make_element):
        result = insert_into_tree([], None, make_element("first"))

        assert result.success is True
        assert ids(result.nodes) == ["first"]

    def test_input_not_mutated(self, sample_flat, make_element):
        tree = build_element_tree(sample_flat)
        before = flatten_elements(tree)

        insert_into_tree(tree, "a", make_element("new"))

        assert flatten_elements(tree) == before


# ============================================================================
# Reorder / Move
# ============================================================================

@pytest.mark.unit
class TestReorderElements:
    """Test moving a node before another."""

    def test_moves_before_over(self, sample_flat):
        tree = build_element_tree(sample_flat)

        result = reorder_elements(tree, "c", "b")

        assert child_ids(result, "a") == ["c", "b"]
        assert_normalized(result)

    def test_moves_across_parents(self, sample_flat):
        tree = build_element_tree(sample_flat)

        result = reorder_elements(tree, "d", "c")

        assert ids(result) == ["a"]
        assert child_ids(result, "a") == ["b", "d", "c"]
        assert find_element(result, "d").depth == 1

    def test_missing_over_appends_root(self, sample_flat):
        tree = build_element_tree(sample_flat)

        result = reorder_elements(tree, "b", "ghost")

        assert ids(result) == ["a", "d", "b"]
        assert child_ids(result, "a") == ["c"]

    def test_same_id_is_noop(self, sample_flat):
        tree = build_element_tree(sample_flat)

        assert reorder_elements(tree, "b", "b") == tree

    def test_unknown_active_is_noop(self, sample_flat):
        tree = build_element_tree(sample_flat)

        assert reorder_elements(tree, "ghost", "b") == tree

    def test_over_inside_moved_subtree_goes_to_root(self, sample_flat):
        tree = build_element_tree(sample_flat)

        result = reorder_elements(tree, "a", "b")

        assert ids(result) == ["d", "a"]
        assert child_ids(result, "a") == ["b", "c"]


@pytest.mark.unit
class TestMoves:
    """Test nesting and escaping moves."""

    def test_move_into_container(self, sample_flat):
        tree = build_element_tree(sample_flat)

        result = move_into_container(tree, "d", "a")

        assert ids(result) == ["a"]
        assert child_ids(result, "a") == ["b", "c", "d"]

    def test_move_into_non_container_falls_back_to_root(self, sample_flat):
        tree = build_element_tree(sample_flat)

        result = move_into_container(tree, "b", "d")

        assert ids(result) == ["a", "d", "b"]

    def test_move_into_own_descendant_never_cycles(self, make_element):
        flat = [make_element("outer"), make_element("inner", parent_id="outer")]
        tree = build_element_tree(flat)

        result = move_into_container(tree, "outer", "inner")

        assert ids(result) == ["outer"]
        assert child_ids(result, "outer") == ["inner"]

    def test_move_after(self, sample_flat):
        tree = build_element_tree(sample_flat)

        result = move_after(tree, "b", "a")

        assert ids(result) == ["a", "b", "d"]
        assert child_ids(result, "a") == ["c"]

    def test_move_to_root(self, sample_flat):
        tree = build_element_tree(sample_flat)

        result = move_to_root(tree, "c")

        assert ids(result) == ["a", "d", "c"]
        assert find_element(result, "c").path == "c"


# ============================================================================
# Remove / Update / Duplicate
# ============================================================================

@pytest.mark.unit
class TestEditing:
    """Test removal, field updates and duplication."""

    def test_remove_subtree(self, sample_flat):
        tree = build_element_tree(sample_flat)

        result = remove_element(tree, "a")

        assert ids(result) == ["d"]
        assert result[0].order == 0
        assert find_element(result, "b") is None

    def test_remove_renumbers_siblings(self, sample_flat):
        tree = build_element_tree(sample_flat)

        result = remove_element(tree, "b")

        assert find_element(result, "c").order == 0

    def test_remove_missing_is_noop(self, sample_flat):
        tree = build_element_tree(sample_flat)

        assert remove_element(tree, "ghost") == tree

    def test_update_fields(self, sample_flat):
        tree = build_element_tree(sample_flat)

        result = update_element(tree, "b", {"styles": {"color": "red"}, "class_name": "lead"})

        updated = find_element(result, "b")
        assert updated.styles == {"color": "red"}
        assert updated.class_name == "lead"
        assert updated.text == "B"

    def test_update_ignores_structural_fields(self, sample_flat):
        tree = build_element_tree(sample_flat)

        result = update_element(tree, "b", {"id": "hijack", "parent_id": None, "order": 7})

        updated = find_element(result, "b")
        assert updated.parent_id == "a"
        assert updated.order == 0

    def test_update_type_reshapes_content(self, sample_flat):
        tree = build_element_tree(sample_flat)

        result = update_element(tree, "b", {"type": "link"})

        updated = find_element(result, "b")
        assert updated.type == ElementType.LINK
        assert updated.content.kind == "link"
        assert updated.text == "B"

    def test_duplicate_subtree_with_new_ids(self, sample_flat):
        tree = build_element_tree(sample_flat)

        result, copy_id = duplicate_element(tree, "a")

        assert copy_id is not None and copy_id != "a"
        assert ids(result) == ["a", copy_id, "d"]
        copy = find_element(result, copy_id)
        assert len(copy.children) == 2
        assert {c.id for c in copy.children}.isdisjoint({"b", "c"})
        assert [c.text for c in copy.children] == ["B", "C"]
        assert all(c.parent_id == copy_id for c in copy.children)

    def test_duplicate_missing(self, sample_flat):
        tree = build_element_tree(sample_flat)

        result, copy_id = duplicate_element(tree, "ghost")

        assert copy_id is None
        assert result == tree
