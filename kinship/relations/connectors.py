from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Optional, Tuple

from ..models import Connector, LayoutResult, PositionedNode
from ..schemas import FamilyUnit
from .layered import NODE_SPAN


def _person_id(node: Optional[PositionedNode]) -> Optional[int]:
    if node is None or node.placeholder:
        return None
    try:
        return int(node.id)
    except ValueError:
        return None


def nearest_node(nodes: Tuple[PositionedNode, ...], x: float, y: float) -> Optional[PositionedNode]:
    """Node whose center is closest to (x, y) by Manhattan distance; first wins on ties."""
    best = None
    best_dist = float("inf")
    for n in nodes:
        cx = n.left + NODE_SPAN / 2
        cy = n.top + NODE_SPAN / 2
        d = abs(cx - x) + abs(cy - y)
        if d < best_dist:
            best_dist = d
            best = n
    return best


def are_partners(family_units: Iterable[FamilyUnit], a: int, b: int) -> bool:
    for unit in family_units:
        ids = unit.partner_ids()
        if len(ids) >= 2 and a in ids and b in ids:
            return True
    return False


def classify_connectors(layout: LayoutResult, family_units: Iterable[FamilyUnit]) -> LayoutResult:
    """
    Bind both ends of every connector to their nearest nodes and flag the
    horizontal, one-cell-apart segments that join two partners of one unit.
    """
    units = list(family_units)
    out = []
    for c in layout.connectors:
        src = nearest_node(layout.nodes, c.x1, c.y1)
        dst = nearest_node(layout.nodes, c.x2, c.y2)
        is_spouse = False
        a, b = _person_id(src), _person_id(dst)
        if a is not None and b is not None and c.y1 == c.y2 and abs(c.x1 - c.x2) == NODE_SPAN:
            is_spouse = are_partners(units, a, b)
        out.append(replace(
            c,
            source=src.id if src else None,
            target=dst.id if dst else None,
            is_spouse=is_spouse,
        ))
    return replace(layout, connectors=tuple(out))


def mirror_layout(layout: LayoutResult) -> LayoutResult:
    """Reflect nodes and connectors across the vertical axis of the canvas."""
    w = layout.width
    nodes = tuple(replace(n, left=w - n.left - NODE_SPAN) for n in layout.nodes)
    connectors = tuple(replace(c, x1=w - c.x1, x2=w - c.x2) for c in layout.connectors)
    return replace(layout, nodes=nodes, connectors=connectors, mirrored=not layout.mirrored)
