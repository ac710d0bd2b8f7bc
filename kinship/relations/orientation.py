from __future__ import annotations

from typing import Iterable, List, Optional

from ..models import Gender, RelationNode

# The layout sorts every couple by the root node's gender, so a male root
# puts men on the left. Spoofing the root keeps that order for every tree.
CANONICAL_ORIENTATION = Gender.MALE


def orientation_for(setting: str) -> Optional[Gender]:
    """Map the configured orientation name to the gender forced on the root."""
    return CANONICAL_ORIENTATION if setting == "canonical" else None


def normalize_root(nodes: Iterable[RelationNode], root_id: int,
                   orientation: Optional[Gender]) -> List[RelationNode]:
    """Copy of nodes with only the root's gender replaced by orientation."""
    nodes = list(nodes)
    if orientation is None:
        return nodes
    return [n.with_gender(orientation) if n.id == root_id else n for n in nodes]


def needs_mirror(root_gender: Optional[Gender], orientation: Optional[Gender]) -> bool:
    """True when the layout ran with a spoofed root and must be flipped back."""
    return orientation is not None and root_gender is not None and root_gender != orientation
