from __future__ import annotations

from collections import deque
from typing import Any, Dict, List, Sequence, Tuple

# Every node occupies a 2x2 cell of the topological grid.
NODE_SPAN = 2

# Relation lists walked from each node, with the generation offset they imply.
_WALK = (("parents", -1), ("siblings", 0), ("spouses", 0), ("children", 1))
_SINGULAR = {"parents": "parent", "siblings": "sibling", "spouses": "spouse", "children": "child"}


def _ids(node: dict, key: str) -> List[str]:
    return [rel["id"] for rel in node.get(key, [])]


def rank_generations(by_id: Dict[str, dict], root_id: str) -> Tuple[Dict[str, int], List[str]]:
    """
    Breadth-first generation ranking from the root.
    Returns (generation per id, discovery order).
    Raises ValueError when a node would sit in two generations.
    """
    gen: Dict[str, int] = {root_id: 0}
    order: List[str] = [root_id]
    q = deque([root_id])
    while q:
        nid = q.popleft()
        g = gen[nid]
        for key, delta in _WALK:
            for rid in _ids(by_id[nid], key):
                if rid not in by_id:
                    continue
                expected = g + delta
                if rid in gen:
                    if gen[rid] != expected:
                        raise ValueError(
                            f"generation conflict: node {rid} is {_SINGULAR[key]} of {nid} "
                            f"but already ranked at generation {gen[rid]}, expected {expected}"
                        )
                    continue
                gen[rid] = expected
                order.append(rid)
                q.append(rid)
    return gen, order


def build_rows(by_id: Dict[str, dict], gen: Dict[str, int], order: List[str], root_gender: str) -> Dict[int, List[str]]:
    """Fill each generation row in discovery order, keeping couples side by side."""
    rows: Dict[int, List[str]] = {}
    placed: set[str] = set()
    for nid in order:
        if nid in placed:
            continue
        cluster = [nid]
        for sid in _ids(by_id[nid], "spouses"):
            if sid in gen and sid not in placed and sid not in cluster:
                cluster.append(sid)
        # couples read left to right starting with the root's gender
        cluster.sort(key=lambda i: by_id[i]["gender"] != root_gender)
        rows.setdefault(gen[nid], []).extend(cluster)
        placed.update(cluster)
    return rows


def add_placeholders(by_id: Dict[str, dict], gen: Dict[str, int], rows: Dict[int, List[str]],
                     root_gender: str) -> Dict[str, str]:
    """
    Give every lone parent an empty partner slot.
    Returns placeholder id -> the parent it stands beside.
    """
    partner_of: Dict[str, str] = {}
    for nid in list(gen):
        parents = [p for p in _ids(by_id[nid], "parents") if p in gen]
        if len(parents) != 1:
            continue
        parent = parents[0]
        pid = f"placeholder-{parent}"
        if pid in partner_of:
            continue
        if any(s in gen for s in _ids(by_id[parent], "spouses")):
            continue
        row = rows[gen[parent]]
        idx = row.index(parent)
        if by_id[parent]["gender"] == root_gender:
            row.insert(idx + 1, pid)
        else:
            row.insert(idx, pid)
        partner_of[pid] = parent
    return partner_of


def _center(pos: Dict[str, Tuple[int, int]], nid: str) -> Tuple[int, int]:
    left, top = pos[nid]
    return left + NODE_SPAN // 2, top + NODE_SPAN // 2


def build_connectors(by_id: Dict[str, dict], gen: Dict[str, int], rows: Dict[int, List[str]],
                     pos: Dict[str, Tuple[int, int]], partner_of: Dict[str, str]) -> List[List[float]]:
    connectors: List[List[float]] = []
    placeholder_for = {parent: pid for pid, parent in partner_of.items()}

    # one couple line per partner pair sharing a row, left partner first
    for row in rows.values():
        for i, a in enumerate(row):
            for b in row[i + 1:]:
                coupled = (
                    b in _ids(by_id.get(a, {}), "spouses")
                    or partner_of.get(a) == b
                    or partner_of.get(b) == a
                )
                if coupled:
                    (ax, ay), (bx, _by) = _center(pos, a), _center(pos, b)
                    connectors.append([ax, ay, bx, ay])

    # stem, sibling bus and drops for each set of parents
    groups: Dict[Tuple[str, ...], List[str]] = {}
    for row in rows.values():
        for nid in row:
            if nid in partner_of:
                continue
            parents = [p for p in _ids(by_id[nid], "parents") if p in gen]
            if not parents:
                continue
            if len(parents) == 1 and parents[0] in placeholder_for:
                parents.append(placeholder_for[parents[0]])
            groups.setdefault(tuple(sorted(parents)), []).append(nid)

    for parents, kids in groups.items():
        centers = [_center(pos, p) for p in parents]
        mx = sum(c[0] for c in centers) / len(centers)
        py = centers[0][1]
        connectors.append([mx, py, mx, py + 1])
        xs = [_center(pos, k)[0] for k in kids] + [mx]
        if min(xs) != max(xs):
            connectors.append([min(xs), py + 1, max(xs), py + 1])
        for kid in kids:
            kx, _ky = _center(pos, kid)
            connectors.append([kx, py + 1, kx, py + 2])
    return connectors


def layered_layout(nodes: Sequence[dict], options: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deterministic generation-layered layout over the relatives-tree node shape.

    Rows follow discovery order from the root, so the order of the relation
    lists decides left/right placement. Raises ValueError on an unknown root
    or on relationship shapes that cannot be ranked into generations.
    """
    root_id = str(options["rootId"])
    by_id = {n["id"]: n for n in nodes}
    if root_id not in by_id:
        raise ValueError(f"root node {root_id} not found")
    root_gender = by_id[root_id]["gender"]

    gen, order = rank_generations(by_id, root_id)
    rows = build_rows(by_id, gen, order, root_gender)
    partner_of = add_placeholders(by_id, gen, rows, root_gender) if options.get("placeholders") else {}

    min_gen = min(rows)
    width = max(len(r) for r in rows.values()) * NODE_SPAN
    height = len(rows) * NODE_SPAN

    pos: Dict[str, Tuple[int, int]] = {}
    out_nodes: List[dict] = []
    for g in sorted(rows):
        row = rows[g]
        offset = (width - len(row) * NODE_SPAN) // 2
        top = (g - min_gen) * NODE_SPAN
        for i, nid in enumerate(row):
            left = offset + i * NODE_SPAN
            pos[nid] = (left, top)
            out_nodes.append({
                "id": nid,
                "left": left,
                "top": top,
                "hasSubTree": False,
                "placeholder": nid in partner_of,
            })

    return {
        "canvas": {"width": width, "height": height},
        "nodes": out_nodes,
        "connectors": build_connectors(by_id, gen, rows, pos, partner_of),
    }
