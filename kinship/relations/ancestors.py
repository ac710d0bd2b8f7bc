from __future__ import annotations

import logging
from typing import AbstractSet, FrozenSet, Iterable, List

from ..schemas import FamilyUnit

logger = logging.getLogger(__name__)


def compute_ancestors(
    family_units: Iterable[FamilyUnit],
    root_id: int,
    person_ids: AbstractSet[int],
) -> FrozenSet[int]:
    """
    Ids on the direct ancestor line of root_id, the root included.

    Level-order walk upward: every partner of every unit that lists a
    visited id as a child joins the next level. The visited set makes the
    walk terminate on cyclic records, at the cost of an incomplete cone.
    Returns an empty set when the root is not a known person.
    """
    if root_id not in person_ids:
        return frozenset()

    units = list(family_units)
    visited: set[int] = set()
    level: List[int] = [root_id]

    while level:
        next_level: List[int] = []
        for pid in level:
            if pid in visited:
                continue
            visited.add(pid)
            for unit in units:
                if pid not in unit.child_ids():
                    continue
                for partner_id in unit.partner_ids():
                    if partner_id in person_ids and partner_id not in visited:
                        next_level.append(partner_id)
        level = next_level

    logger.debug("Ancestor cone of %s has %d members", root_id, len(visited))
    return frozenset(visited)
