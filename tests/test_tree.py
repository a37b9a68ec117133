"""Tests for the relation-edge family tree."""

import pytest

from family_directory.models import Member, Relation
from family_directory.tree import build_family_tree, render_tree, tree_roots


def _members(*ids):
    return [Member(id=i, name=i.upper()) for i in ids]


def _rel(member1, member2, relation_type, rel_id=None):
    return Relation(
        id=rel_id or f"{member1}-{member2}",
        member1_id=member1,
        member2_id=member2,
        relation_type=relation_type,
    )


class TestParentEdges:
    """Tests for Father/Mother/Son/Daughter edges."""

    def test_father_edge(self):
        tree = build_family_tree(_members("a", "b"), [_rel("a", "b", "Father")])
        assert [(c.id, c.relation) for c in tree["a"].children] == [("b", "Father")]
        assert [(p.id, p.relation) for p in tree["b"].parents] == [("a", "Father")]
        assert tree["a"].level == 0
        assert tree["b"].level == 1

    @pytest.mark.parametrize("relation_type", ["Father", "Mother", "Son", "Daughter"])
    def test_all_parent_types_make_member1_the_parent(self, relation_type):
        tree = build_family_tree(_members("a", "b"), [_rel("a", "b", relation_type)])
        assert tree["a"].children[0].id == "b"
        assert tree["b"].parents[0].id == "a"
        assert tree["b"].level == 1

    def test_node_fields_copied_from_member(self):
        members = [Member(id="a", name="Raman", spouse_name="Lakshmi")]
        node = build_family_tree(members, [])["a"]
        assert node.member_id == "a"
        assert node.name == "Raman"
        assert node.spouse_name == "Lakshmi"
        assert node.level == 0


class TestSiblingEdges:
    """Tests for Brother/Sister edges."""

    def test_sibling_edge_is_one_directional(self):
        tree = build_family_tree(_members("a", "b"), [_rel("a", "b", "Brother")])
        assert [s.id for s in tree["a"].siblings] == ["b"]
        assert tree["b"].siblings == []

    def test_mirrored_edge_when_inserted(self):
        relations = [_rel("a", "b", "Sister"), _rel("b", "a", "Brother")]
        tree = build_family_tree(_members("a", "b"), relations)
        assert [s.id for s in tree["a"].siblings] == ["b"]
        assert [s.id for s in tree["b"].siblings] == ["a"]

    def test_sibling_does_not_create_parent_link(self):
        tree = build_family_tree(_members("a", "b"), [_rel("a", "b", "Sister")])
        assert tree["a"].children == []
        assert tree["b"].parents == []

    def test_sibling_shares_level(self):
        relations = [_rel("p", "a", "Father"), _rel("a", "b", "Brother")]
        tree = build_family_tree(_members("p", "a", "b"), relations)
        assert tree["a"].level == 1
        assert tree["b"].level == 1


class TestTolerance:
    """Inconsistent data is skipped, never raised."""

    @pytest.mark.parametrize("relation_type", ["Uncle", "Grandma", "Grandpa", "Cousin", ""])
    def test_other_relation_types_ignored(self, relation_type):
        tree = build_family_tree(_members("a", "b"), [_rel("a", "b", relation_type)])
        assert tree["a"].children == []
        assert tree["a"].siblings == []
        assert tree["b"].parents == []

    def test_missing_member_skipped(self):
        relations = [_rel("a", "ghost", "Father"), _rel("ghost", "a", "Father")]
        tree = build_family_tree(_members("a"), relations)
        assert set(tree) == {"a"}
        assert tree["a"].children == []
        assert tree["a"].parents == []

    def test_empty_inputs(self):
        assert build_family_tree([], []) == {}

    def test_cycle_terminates(self):
        """A parent cycle reachable from a root must not recurse forever."""
        relations = [
            _rel("root", "a", "Father"),
            _rel("a", "b", "Father"),
            _rel("b", "a", "Father"),
        ]
        tree = build_family_tree(_members("root", "a", "b"), relations)
        assert tree["a"].level == 1
        assert tree["b"].level == 2

    def test_rootless_cycle_keeps_level_zero(self):
        relations = [_rel("a", "b", "Father"), _rel("b", "a", "Father")]
        tree = build_family_tree(_members("a", "b"), relations)
        assert tree_roots(tree) == []
        assert tree["a"].level == 0
        assert tree["b"].level == 0


class TestLevels:
    """Tests for level assignment."""

    def test_three_generations(self):
        relations = [_rel("a", "b", "Father"), _rel("b", "c", "Mother")]
        tree = build_family_tree(_members("a", "b", "c"), relations)
        assert [tree[i].level for i in "abc"] == [0, 1, 2]

    def test_highest_level_kept_across_roots(self):
        """A node reachable from two roots at different depths keeps the deeper level."""
        relations = [
            _rel("g", "p", "Father"),
            _rel("p", "c", "Father"),
            _rel("m", "c", "Mother"),
        ]
        tree = build_family_tree(_members("g", "p", "m", "c"), relations)
        assert tree["c"].level == 2
        assert tree["m"].level == 0

    def test_sample_data(self, members, relations):
        tree = build_family_tree(members, relations)
        assert tree["m1"].level == 0
        assert tree["m2"].level == 1
        assert tree["m3"].level == 1
        assert tree["m4"].level == 2
        assert tree["m5"].level == 0
        assert [s.id for s in tree["m2"].siblings] == ["m3"]
        assert tree["m3"].siblings == []

    def test_long_chain(self):
        """Generations deeper than the interpreter recursion limit still get levels."""
        ids = [f"p{i}" for i in range(1500)]
        relations = [_rel(a, b, "Father") for a, b in zip(ids, ids[1:])]
        tree = build_family_tree(_members(*ids), relations)
        assert tree["p1499"].level == 1499
        assert tree_roots(tree) == ["p0"]


class TestRoots:
    """Tests for tree_roots."""

    def test_roots_have_no_parents(self, members, relations):
        tree = build_family_tree(members, relations)
        assert tree_roots(tree) == ["m1", "m5"]

    def test_every_member_is_a_root_without_relations(self):
        tree = build_family_tree(_members("a", "b", "c"), [])
        assert tree_roots(tree) == ["a", "b", "c"]


class TestRenderTree:
    """Tests for the nested tree view."""

    def test_nested_structure(self, members, relations):
        rendered = render_tree(build_family_tree(members, relations))
        assert [r["member_id"] for r in rendered] == ["m1", "m5"]

        raman = rendered[0]
        assert "relation" not in raman
        assert [c["member_id"] for c in raman["children"]] == ["m2"]

        anu = raman["children"][0]
        assert anu["relation"] == "Father"
        assert anu["relation_label"] == "👨 Father"
        assert [c["member_id"] for c in anu["children"]] == ["m4"]
        assert [s["member_id"] for s in anu["siblings"]] == ["m3"]

    def test_member_rendered_once_per_root(self, members, relations):
        """m3 is reached as Anu's sibling first, so it is not repeated under Raman."""
        raman = render_tree(build_family_tree(members, relations))[0]
        ids = [c["member_id"] for c in raman["children"]]
        assert "m3" not in ids

    def test_leaf_has_no_child_keys(self, members, relations):
        rendered = render_tree(build_family_tree(members, relations))
        selvam = rendered[1]
        assert "children" not in selvam
        assert "siblings" not in selvam

    def test_long_chain_renders(self):
        ids = [f"p{i}" for i in range(1500)]
        relations = [_rel(a, b, "Mother") for a, b in zip(ids, ids[1:])]
        node = render_tree(build_family_tree(_members(*ids), relations))[0]
        depth = 0
        while "children" in node:
            node = node["children"][0]
            depth += 1
        assert depth == 1499
        assert node["member_id"] == "p1499"
