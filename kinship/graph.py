"""Tree view pipeline: snapshot -> ancestors -> relations -> order -> layout."""
from __future__ import annotations

import hashlib
import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Tuple

from . import config
from .models import Gender, LayoutResult, RelationNode
from .relations.adapter import LayoutFunction, TreeLayoutError, compute_layout
from .relations.ancestors import compute_ancestors
from .relations.connectors import classify_connectors, mirror_layout
from .relations.derive import derive_relations
from .relations.layered import layered_layout
from .relations.ordering import order_relations, sort_direction
from .relations.orientation import needs_mirror, orientation_for
from .schemas import TreeSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TreeView:
    root_id: Optional[int]
    ancestors: FrozenSet[int] = frozenset()
    nodes: Tuple[RelationNode, ...] = field(default_factory=tuple)
    layout: Optional[LayoutResult] = None
    error: Optional[TreeLayoutError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def snapshot_version(snapshot: TreeSnapshot) -> str:
    if snapshot.version:
        return snapshot.version
    payload = snapshot.model_dump_json(exclude={"version", "root_person_id"})
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def build_relations(snapshot: TreeSnapshot, root_id: Optional[int] = None) -> TreeView:
    """Ancestor cone and policy-ordered relation nodes, without layout."""
    root_id = snapshot.root_person_id if root_id is None else root_id
    root = snapshot.find_person(root_id)
    if root is None:
        logger.info("Root person %s not in snapshot of %d persons", root_id, len(snapshot.persons))
        return TreeView(root_id=None)

    ancestors = compute_ancestors(snapshot.family_units, root_id, snapshot.person_ids())
    nodes = derive_relations(snapshot.persons, snapshot.family_units)
    nodes = order_relations(nodes, ancestors, sort_direction(root.gender))
    return TreeView(root_id=root_id, ancestors=ancestors, nodes=tuple(nodes))


def build_tree_view(
    snapshot: TreeSnapshot,
    *,
    root_id: Optional[int] = None,
    root_orientation: Optional[str] = None,
    layout_fn: LayoutFunction = layered_layout,
    placeholders: Optional[bool] = None,
) -> TreeView:
    """
    Full pipeline for one snapshot and root.

    A layout failure does not raise: the returned view carries the
    TreeLayoutError and no layout, so callers can fall back.
    """
    view = build_relations(snapshot, root_id)
    if view.root_id is None:
        return view

    setting = config.validate_orientation(root_orientation or config.ROOT_ORIENTATION)
    orientation = orientation_for(setting)
    if placeholders is None:
        placeholders = config.LAYOUT_PLACEHOLDERS

    try:
        layout = compute_layout(
            view.nodes,
            view.root_id,
            root_orientation=orientation,
            layout_fn=layout_fn,
            placeholders=placeholders,
        )
    except TreeLayoutError as e:
        return TreeView(root_id=view.root_id, ancestors=view.ancestors, nodes=view.nodes, error=e)

    layout = classify_connectors(layout, snapshot.family_units)
    root_gender: Optional[Gender] = snapshot.find_person(view.root_id).gender
    if needs_mirror(root_gender, orientation):
        layout = mirror_layout(layout)

    logger.debug(
        "Laid out %d nodes for root %s on a %dx%d canvas",
        len(layout.nodes), view.root_id, layout.width, layout.height,
    )
    return TreeView(root_id=view.root_id, ancestors=view.ancestors, nodes=view.nodes, layout=layout)


class TreeViewCache:
    """Bounded LRU of tree views keyed by (root id, snapshot version, orientation)."""

    def __init__(self, maxsize: int = config.CACHE_SIZE):
        self.maxsize = maxsize
        self._items: OrderedDict = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def __len__(self):
        return len(self._items)

    def clear(self):
        with self._lock:
            self._items.clear()

    def get_or_build(self, snapshot: TreeSnapshot, root_id: Optional[int] = None,
                     root_orientation: Optional[str] = None, **kwargs) -> TreeView:
        root_id = snapshot.root_person_id if root_id is None else root_id
        key = (root_id, snapshot_version(snapshot), root_orientation or config.ROOT_ORIENTATION)
        with self._lock:
            if key in self._items:
                self._items.move_to_end(key)
                self.hits += 1
                return self._items[key]
            self.misses += 1

        view = build_tree_view(snapshot, root_id=root_id, root_orientation=root_orientation, **kwargs)

        with self._lock:
            self._items[key] = view
            self._items.move_to_end(key)
            while len(self._items) > self.maxsize:
                self._items.popitem(last=False)
        return view
