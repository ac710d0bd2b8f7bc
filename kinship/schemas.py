from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from .models import FamilyUnitStatus, Gender, LineageType, MarriageType


class _Wire(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TreePerson(_Wire):
    id: int
    full_name: str = ""
    first_name: Optional[str] = None
    middle_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Optional[str] = None
    gender: Optional[Gender] = None
    birth_date: Optional[str] = None
    birth_place: Optional[str] = None
    death_date: Optional[str] = None
    avatar: Optional[str] = None
    is_active: bool = True
    user_id: Optional[int] = None
    relationship_label: Optional[str] = None

    @field_validator("gender", mode="before")
    @classmethod
    def normalize_gender(cls, v):
        # backend sends upper case, dumps from the layout side use lower case
        if isinstance(v, str):
            v = v.strip().upper()
            return v or None
        return v


class PartnerRef(_Wire):
    person_id: int
    id: Optional[int] = None
    full_name: Optional[str] = None
    gender: Optional[Gender] = None
    role: Optional[str] = None


class ChildRef(_Wire):
    person_id: int
    id: Optional[int] = None
    full_name: Optional[str] = None
    gender: Optional[Gender] = None
    lineage_type: LineageType = LineageType.BIOLOGICAL
    birth_order: Optional[int] = None


class FamilyUnit(_Wire):
    id: int
    marriage_type: MarriageType = MarriageType.MARRIED
    status: FamilyUnitStatus = FamilyUnitStatus.ACTIVE
    marriage_date: Optional[str] = None
    divorce_date: Optional[str] = None
    partners: List[PartnerRef] = []
    children: List[ChildRef] = []

    @field_validator("partners")
    @classmethod
    def validate_partners(cls, v):
        if len(v) > 2:
            raise ValueError("a family unit has at most two partners")
        return v

    def partner_ids(self) -> List[int]:
        return [p.person_id for p in self.partners]

    def child_ids(self) -> List[int]:
        return [c.person_id for c in self.children]


class TreeSnapshot(_Wire):
    root_person_id: int
    persons: List[TreePerson] = []
    family_units: List[FamilyUnit] = []
    version: Optional[str] = None

    def person_ids(self) -> set:
        return {p.id for p in self.persons}

    def find_person(self, person_id: int) -> Optional[TreePerson]:
        for p in self.persons:
            if p.id == person_id:
                return p
        return None


class RelationOut(BaseModel):
    id: str
    type: str


class RelationNodeOut(BaseModel):
    id: str
    gender: str
    parents: List[RelationOut]
    children: List[RelationOut]
    siblings: List[RelationOut]
    spouses: List[RelationOut]


class RelationsOut(_Wire):
    root_id: Optional[str] = None
    ancestor_ids: List[str] = []
    nodes: List[RelationNodeOut] = []


class LayoutErrorOut(_Wire):
    message: str
    root_id: str
    suspects: List[str] = []
    nodes: List[RelationNodeOut] = []


class TreeLayoutOut(_Wire):
    root_id: Optional[str] = None
    nodes: List[RelationNodeOut] = []
    layout: Optional[dict] = None
    error: Optional[LayoutErrorOut] = None
