"""
Ordering policy for relation lists.

The layout infers left/right placement from list order. Non-spouse lists are
sorted by numeric id in the tree's sort direction. Spouses that belong to the
root's ancestor cone come first so the couple that continues the trunk keeps
a stable position; the rest follow by id. This is a placement heuristic, not
a crossing-free guarantee.
"""
from __future__ import annotations

from dataclasses import replace
from typing import AbstractSet, Iterable, List, Optional, Tuple

from ..models import Gender, Relation, RelationNode


def sort_direction(root_gender: Optional[Gender]) -> int:
    return -1 if root_gender == Gender.FEMALE else 1


def by_id(relations: Iterable[Relation], direction: int) -> Tuple[Relation, ...]:
    return tuple(sorted(relations, key=lambda r: r.id * direction))


def spouses_first_in_cone(relations: Iterable[Relation], ancestors: AbstractSet[int],
                          direction: int) -> Tuple[Relation, ...]:
    return tuple(sorted(relations, key=lambda r: (r.id not in ancestors, r.id * direction)))


def order_node(node: RelationNode, ancestors: AbstractSet[int], direction: int) -> RelationNode:
    return replace(
        node,
        parents=by_id(node.parents, direction),
        children=by_id(node.children, direction),
        siblings=by_id(node.siblings, direction),
        spouses=spouses_first_in_cone(node.spouses, ancestors, direction),
    )


def order_relations(nodes: Iterable[RelationNode], ancestors: AbstractSet[int], direction: int) -> List[RelationNode]:
    return [order_node(n, ancestors, direction) for n in nodes]
