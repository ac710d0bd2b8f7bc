from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Sequence

from ..models import Gender, LineageType, Relation, RelationNode, RelType
from ..schemas import FamilyUnit, TreePerson

logger = logging.getLogger(__name__)


class _RelationList:
    """Ordered relation list that drops unknown ids, self links and repeats."""

    def __init__(self, owner_id: int, valid_ids: set, counts: Dict[str, int]):
        self.owner_id = owner_id
        self.valid_ids = valid_ids
        self.counts = counts
        self.items: List[Relation] = []
        self._seen: set = set()

    def add(self, person_id: int, rel_type: RelType):
        if person_id == self.owner_id:
            self.counts["self"] += 1
            return
        if person_id not in self.valid_ids:
            self.counts["dangling"] += 1
            return
        if person_id in self._seen:
            self.counts["duplicate"] += 1
            return
        self._seen.add(person_id)
        self.items.append(Relation(person_id, rel_type))

    def freeze(self):
        return tuple(self.items)


def child_rel_type(lineage_type: LineageType) -> RelType:
    return RelType.ADOPTED if lineage_type == LineageType.ADOPTED else RelType.BLOOD


def derive_node(person: TreePerson, family_units: Sequence[FamilyUnit], valid_ids: set,
                counts: Dict[str, int]) -> RelationNode:
    parents = _RelationList(person.id, valid_ids, counts)
    children = _RelationList(person.id, valid_ids, counts)
    siblings = _RelationList(person.id, valid_ids, counts)
    spouses = _RelationList(person.id, valid_ids, counts)

    for unit in family_units:
        partner_ids = unit.partner_ids()
        if person.id in partner_ids:
            for pid in partner_ids:
                spouses.add(pid, RelType.MARRIED)
            for child in unit.children:
                children.add(child.person_id, child_rel_type(child.lineage_type))

        if person.id in unit.child_ids():
            for pid in partner_ids:
                parents.add(pid, RelType.BLOOD)
            for child in unit.children:
                siblings.add(child.person_id, RelType.BLOOD)

    return RelationNode(
        id=person.id,
        gender=person.gender or Gender.MALE,
        parents=parents.freeze(),
        children=children.freeze(),
        siblings=siblings.freeze(),
        spouses=spouses.freeze(),
    )


def derive_relations(persons: Iterable[TreePerson], family_units: Iterable[FamilyUnit]) -> List[RelationNode]:
    """One RelationNode per person, in input order, relation lists unsorted."""
    persons = list(persons)
    units = list(family_units)
    valid_ids = {p.id for p in persons}
    counts = {"self": 0, "dangling": 0, "duplicate": 0}

    nodes = [derive_node(p, units, valid_ids, counts) for p in persons]

    if any(counts.values()):
        logger.debug(
            "Dropped relation references: %d self, %d dangling, %d duplicate",
            counts["self"], counts["dangling"], counts["duplicate"],
        )
    return nodes
