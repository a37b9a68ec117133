"""Hierarchy views built from each member's embedded children list."""

from collections.abc import Iterator

from .constants import NO_AREA_LABEL
from .models import HierarchyNode, Member


def build_forest(members: list[Member]) -> dict:
    """Build a forest from the members' ``children`` id lists.

    A member is a root iff no member lists its id as a child. Every child id
    that resolves to a known member is attached, in list order, so a member
    listed by two parents appears under both. Cyclic children lists are not
    detected here; walk the result with ``flatten_visible`` or
    ``HierarchyNode.to_dict`` which both stop on repeats.

    Returns:
        Dict with a ``roots`` list of HierarchyNode.
    """
    nodes = {m.id: HierarchyNode(member=m) for m in members}

    child_ids: set[str] = set()
    for member in members:
        child_ids.update(member.children)

    roots = []
    for member in members:
        node = nodes[member.id]
        if member.id not in child_ids:
            roots.append(node)
        for child_id in member.children:
            child_node = nodes.get(child_id)
            if child_node is not None:
                node.children_nodes.append(child_node)

    return {"roots": roots}


def area_label(member: Member) -> str:
    """Comma-joined non-empty (city, district, state), or the no-area label."""
    parts = [member.city, member.district, member.state]
    return ", ".join(p for p in parts if p) or NO_AREA_LABEL


def group_by_area(members: list[Member]) -> dict[str, dict]:
    """Partition members by area label and build a forest within each area.

    Areas keep the order in which they are first seen. Children living in a
    different area are not attached to their parent.
    """
    groups: dict[str, list[Member]] = {}
    for member in members:
        groups.setdefault(area_label(member), []).append(member)

    return {area: build_forest(area_members) for area, area_members in groups.items()}


def toggle_expanded(expanded: set[str], member_id: str) -> set[str]:
    """Return a copy of the expanded-id set with ``member_id`` flipped."""
    result = set(expanded)
    if member_id in result:
        result.discard(member_id)
    else:
        result.add(member_id)
    return result


def flatten_visible(
    roots: list[HierarchyNode], expanded: set[str]
) -> Iterator[tuple[int, HierarchyNode]]:
    """Yield (depth, node) rows in display order.

    Descends only into expanded nodes and never into a node already on the
    current path.
    """
    for root in roots:
        stack: list[tuple[HierarchyNode, int, frozenset[str]]] = [(root, 0, frozenset())]
        while stack:
            node, depth, path = stack.pop()
            yield depth, node
            if node.id not in expanded:
                continue
            inner = path | {node.id}
            for child in reversed(node.children_nodes):
                if child.id not in inner:
                    stack.append((child, depth + 1, inner))


def forest_to_dict(forest: dict) -> dict:
    """Serialize a forest for tool output."""
    return {"roots": [root.to_dict() for root in forest["roots"]]}
