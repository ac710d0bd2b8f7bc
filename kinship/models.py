from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import Tuple


class Gender(enum.Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"

    @property
    def token(self) -> str:
        """Lowercase gender token used by the layout input."""
        return self.value.lower()


class LineageType(enum.Enum):
    BIOLOGICAL = "BIOLOGICAL"
    ADOPTED = "ADOPTED"
    STEP = "STEP"
    FOSTER = "FOSTER"
    GUARDIAN = "GUARDIAN"


class MarriageType(enum.Enum):
    MARRIED = "MARRIED"
    DIVORCED = "DIVORCED"
    PARTNERSHIP = "PARTNERSHIP"
    OTHER = "OTHER"


class FamilyUnitStatus(enum.Enum):
    ACTIVE = "ACTIVE"
    DISSOLVED = "DISSOLVED"


class RelType(enum.Enum):
    BLOOD = "blood"
    ADOPTED = "adopted"
    MARRIED = "married"


@dataclass(frozen=True)
class Relation:
    id: int
    type: RelType

    def to_wire(self) -> dict:
        return {"id": str(self.id), "type": self.type.value}


@dataclass(frozen=True)
class RelationNode:
    """Derived relations of one person, ready for ordering and layout."""

    id: int
    gender: Gender
    parents: Tuple[Relation, ...] = field(default_factory=tuple)
    children: Tuple[Relation, ...] = field(default_factory=tuple)
    siblings: Tuple[Relation, ...] = field(default_factory=tuple)
    spouses: Tuple[Relation, ...] = field(default_factory=tuple)

    def with_gender(self, gender: Gender) -> "RelationNode":
        return replace(self, gender=gender)

    def relations(self) -> Tuple[Relation, ...]:
        return self.parents + self.children + self.siblings + self.spouses

    def to_wire(self) -> dict:
        """Shape expected by the hierarchical layout function."""
        return {
            "id": str(self.id),
            "gender": self.gender.token,
            "parents": [r.to_wire() for r in self.parents],
            "children": [r.to_wire() for r in self.children],
            "siblings": [r.to_wire() for r in self.siblings],
            "spouses": [r.to_wire() for r in self.spouses],
        }


@dataclass(frozen=True)
class PositionedNode:
    id: str
    left: int
    top: int
    has_sub_tree: bool = False
    placeholder: bool = False


@dataclass(frozen=True)
class Connector:
    x1: float
    y1: float
    x2: float
    y2: float
    source: str | None = None
    target: str | None = None
    is_spouse: bool = False


@dataclass(frozen=True)
class LayoutResult:
    root_id: str
    width: int
    height: int
    nodes: Tuple[PositionedNode, ...]
    connectors: Tuple[Connector, ...]
    mirrored: bool = False

    def to_dict(self) -> dict:
        return {
            "rootId": self.root_id,
            "canvas": {"width": self.width, "height": self.height},
            "mirrored": self.mirrored,
            "nodes": [
                {
                    "id": n.id,
                    "left": n.left,
                    "top": n.top,
                    "hasSubTree": n.has_sub_tree,
                    "placeholder": n.placeholder,
                }
                for n in self.nodes
            ],
            "connectors": [
                {
                    "points": [c.x1, c.y1, c.x2, c.y2],
                    "source": c.source,
                    "target": c.target,
                    "isSpouseEdge": c.is_spouse,
                }
                for c in self.connectors
            ],
        }
