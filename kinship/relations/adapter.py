"""Bridge between derived relation nodes and the hierarchical layout function."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..models import Connector, Gender, LayoutResult, PositionedNode, RelationNode
from .layered import layered_layout
from .orientation import normalize_root

logger = logging.getLogger(__name__)

LayoutFunction = Callable[[List[dict], Dict[str, Any]], Dict[str, Any]]


class TreeLayoutError(Exception):
    """The layout function could not place the given relationship shape."""

    def __init__(self, message: str, root_id: str, nodes: List[dict],
                 suspects: Optional[List[str]] = None, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.root_id = root_id
        self.nodes = nodes
        self.suspects = suspects or []
        self.cause = cause

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "rootId": self.root_id,
            "suspects": list(self.suspects),
            "nodes": self.nodes,
        }


def find_suspect_couples(wire_nodes: Sequence[dict]) -> List[str]:
    """Same-gender spouse and parent pairs, the shapes the layout tends to reject."""
    by_id = {n["id"]: n for n in wire_nodes}
    found: List[str] = []
    seen_pairs = set()
    for n in wire_nodes:
        for rel in n["spouses"]:
            spouse = by_id.get(rel["id"])
            pair = tuple(sorted((n["id"], rel["id"])))
            if spouse and spouse["gender"] == n["gender"] and pair not in seen_pairs:
                seen_pairs.add(pair)
                found.append(f"same gender spouses: {pair[0]} + {pair[1]} ({n['gender']})")
        if len(n["parents"]) > 1:
            p1 = by_id.get(n["parents"][0]["id"])
            p2 = by_id.get(n["parents"][1]["id"])
            if p1 and p2 and p1["gender"] == p2["gender"]:
                found.append(f"same gender parents: {n['id']} -> {p1['id']} + {p2['id']} ({p1['gender']})")
    return found


def to_layout_input(nodes: Sequence[RelationNode]) -> List[dict]:
    return [n.to_wire() for n in nodes]


def _parse_result(raw: Dict[str, Any], root_id: str) -> LayoutResult:
    canvas = raw["canvas"]
    nodes = tuple(
        PositionedNode(
            id=str(n["id"]),
            left=n["left"],
            top=n["top"],
            has_sub_tree=bool(n.get("hasSubTree", False)),
            placeholder=bool(n.get("placeholder", False)),
        )
        for n in raw["nodes"]
    )
    connectors = tuple(Connector(*c[:4]) for c in raw.get("connectors", []))
    return LayoutResult(
        root_id=root_id,
        width=canvas["width"],
        height=canvas["height"],
        nodes=nodes,
        connectors=connectors,
    )


def compute_layout(
    nodes: Sequence[RelationNode],
    root_id: int,
    *,
    root_orientation: Optional[Gender] = None,
    layout_fn: LayoutFunction = layered_layout,
    placeholders: bool = True,
) -> LayoutResult:
    """
    Run the layout function once over the ordered nodes.

    root_orientation, when given, replaces the root's gender in the layout
    input only; suspect couples are still judged on the real genders.
    Any exception from the layout function, or a result missing the expected
    keys, is raised as TreeLayoutError with the layout input attached.
    """
    root_key = str(root_id)
    wire_nodes = to_layout_input(normalize_root(nodes, root_id, root_orientation))
    options = {"rootId": root_key, "placeholders": placeholders}

    try:
        raw = layout_fn(wire_nodes, options)
    except Exception as e:
        suspects = find_suspect_couples(to_layout_input(nodes))
        logger.warning(
            "Tree layout failed for root %s (%d nodes, %d suspect couples): %s",
            root_key, len(wire_nodes), len(suspects), e,
        )
        raise TreeLayoutError(f"tree layout failed: {e}", root_key, wire_nodes, suspects, e) from e

    try:
        return _parse_result(raw, root_key)
    except (KeyError, TypeError, IndexError) as e:
        logger.warning("Tree layout for root %s returned a malformed result: %r", root_key, e)
        raise TreeLayoutError(
            f"tree layout returned a malformed result: {e!r}", root_key, wire_nodes,
            find_suspect_couples(to_layout_input(nodes)), e,
        ) from e
