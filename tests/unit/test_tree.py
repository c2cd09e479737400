"""Unit tests for the flat-list to tree builder."""

from dataclasses import dataclass, field
from typing import List, Optional

from blog_server.schemas.permission import PermissionTreeNode
from blog_server.utils.tree import build_tree, flatten_tree, is_root_node


@dataclass
class Node:
    id: int
    parent_id: Optional[int] = None
    children: List["Node"] = field(default_factory=list)


def ids(nodes):
    return [n.id for n in nodes]


class TestBuildTree:
    def test_empty_input_returns_empty_list(self):
        assert build_tree([]) == []

    def test_none_and_zero_parent_are_roots(self):
        """Verify both None and 0 parent_id produce root nodes."""
        roots = build_tree([Node(1, None), Node(2, 0)])

        assert ids(roots) == [1, 2]

    def test_children_follow_input_order(self):
        """Verify children keep the caller's pre-sorted order."""
        nodes = [Node(1), Node(3, 1), Node(2, 1), Node(4, 3)]

        roots = build_tree(nodes)

        assert ids(roots) == [1]
        assert ids(roots[0].children) == [3, 2]
        assert ids(roots[0].children[0].children) == [4]

    def test_child_before_parent_in_input(self):
        roots = build_tree([Node(2, 1), Node(1)])

        assert ids(roots) == [1]
        assert ids(roots[0].children) == [2]

    def test_orphans_are_dropped_by_default(self):
        """Verify nodes whose parent is missing do not appear anywhere."""
        roots = build_tree([Node(1), Node(5, 99), Node(6, 5)])

        assert ids(flatten_tree(roots)) == [1]

    def test_orphans_promoted_when_requested(self):
        roots = build_tree([Node(1), Node(5, 99), Node(6, 5)], promote_orphans=True)

        assert ids(roots) == [1, 5]
        assert ids(roots[1].children) == [6]

    def test_duplicate_ids_first_occurrence_wins(self):
        first = Node(2, 1)
        second = Node(2, None)

        roots = build_tree([Node(1), first, second])

        assert ids(roots) == [1]
        assert roots[0].children == [first]
        assert ids(flatten_tree(roots)) == [1, 2]

    def test_cycle_members_are_absent(self):
        """Verify a parent cycle neither loops nor shows up in the output."""
        roots = build_tree([Node(1), Node(2, 3), Node(3, 2), Node(4, 4)])

        assert ids(flatten_tree(roots)) == [1]

    def test_every_node_reachable_once(self):
        nodes = [Node(1), Node(2, 1), Node(3, 1), Node(4, 2), Node(5), Node(6, 5)]

        flat = flatten_tree(build_tree(nodes))

        assert sorted(ids(flat)) == [1, 2, 3, 4, 5, 6]
        assert len(set(ids(flat))) == len(flat)

    def test_works_with_pydantic_tree_nodes(self):
        nodes = [
            PermissionTreeNode(id=1, perm_name="系统", perm_key="system", perm_type=1),
            PermissionTreeNode(id=2, parent_id=1, perm_name="用户", perm_key="system:user", perm_type=1),
        ]

        roots = build_tree(nodes)

        dumped = roots[0].model_dump()
        assert dumped["children"][0]["perm_key"] == "system:user"
        assert dumped["children"][0]["children"] == []


def test_is_root_node():
    assert is_root_node(None)
    assert is_root_node(0)
    assert not is_root_node(3)
