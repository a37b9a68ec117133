"""Family tree construction from pairwise relation edges."""

import logging

from .constants import PARENT_RELATIONS, RELATION_LABELS, SIBLING_RELATIONS
from .models import Member, Relation, TreeLink, TreeNode

logger = logging.getLogger(__name__)


def build_family_tree(members: list[Member], relations: list[Relation]) -> dict[str, TreeNode]:
    """Build the relation-edge family tree.

    Any of Father/Mother/Son/Daughter makes member1 the parent of member2.
    Brother/Sister adds member2 to member1's siblings only; the mirror edge
    is not created. Unknown relation types and edges naming a missing member
    are skipped.

    Levels are computed depth-first from every root (member without parents).
    A node reached by several paths keeps the highest level; siblings share
    the level of the member that lists them.
    """
    tree: dict[str, TreeNode] = {}
    for member in members:
        tree[member.id] = TreeNode(
            member_id=member.id,
            name=member.name,
            spouse_name=member.spouse_name,
        )

    for relation in relations:
        source = tree.get(relation.member1_id)
        target = tree.get(relation.member2_id)
        if source is None or target is None:
            logger.debug(f"Skipping relation {relation.id}: unknown member")
            continue

        if relation.relation_type in PARENT_RELATIONS:
            source.children.append(TreeLink(id=target.member_id, relation=relation.relation_type))
            target.parents.append(TreeLink(id=source.member_id, relation=relation.relation_type))
        elif relation.relation_type in SIBLING_RELATIONS:
            source.siblings.append(TreeLink(id=target.member_id, relation=relation.relation_type))
        else:
            logger.debug(f"Ignoring relation {relation.id} of type {relation.relation_type!r}")

    for root_id in tree_roots(tree):
        assign_levels(tree, root_id)

    return tree


def assign_levels(tree: dict[str, TreeNode], root_id: str) -> None:
    """Depth-first level walk from one root, raising levels to the deepest path seen.

    Children are one level below their parent; siblings share it. Each member
    is visited at most once per root.
    """
    visited: set[str] = set()
    stack = [(root_id, 0)]
    while stack:
        member_id, level = stack.pop()
        if member_id in visited:
            continue
        visited.add(member_id)

        node = tree[member_id]
        node.level = max(node.level, level)

        # Pushed in reverse so children are walked first, in list order
        for sibling in reversed(node.siblings):
            stack.append((sibling.id, level))
        for child in reversed(node.children):
            stack.append((child.id, level + 1))


def tree_roots(tree: dict[str, TreeNode]) -> list[str]:
    """IDs of members with no parent edges, in insertion order."""
    return [member_id for member_id, node in tree.items() if not node.parents]


def render_tree(tree: dict[str, TreeNode]) -> list[dict]:
    """Nested view of the tree, one entry per root.

    Each node lists its children, then its siblings. A member is rendered at
    most once per root.
    """
    roots = []
    for root_id in tree_roots(tree):
        holder: dict[str, list[dict]] = {}
        visited: set[str] = set()
        # (member id, relation to the entry above, entry above, key on that entry)
        stack: list[tuple[str, str | None, dict, str]] = [(root_id, None, holder, "roots")]
        while stack:
            member_id, relation, parent, key = stack.pop()
            if member_id in visited:
                continue
            visited.add(member_id)

            node = tree.get(member_id)
            if node is None:
                continue

            result = {
                "member_id": node.member_id,
                "name": node.name,
                "spouse_name": node.spouse_name,
                "level": node.level,
            }
            if relation:
                result["relation"] = relation
                result["relation_label"] = RELATION_LABELS.get(relation, relation)
            parent.setdefault(key, []).append(result)

            for sibling in reversed(node.siblings):
                stack.append((sibling.id, sibling.relation, result, "siblings"))
            for child in reversed(node.children):
                stack.append((child.id, child.relation, result, "children"))

        roots.extend(holder.get("roots", []))
    return roots
