from __future__ import annotations
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import List, Optional, Dict, Any, Tuple


class Sex(str, Enum):
    M = "M"
    F = "F"

    def opposite(self) -> "Sex":
        return Sex.F if self is Sex.M else Sex.M


class RelationshipType(str, Enum):
    PARENT_CHILD = "parent-child"
    SIBLINGS = "siblings"
    HALF_SIBLINGS = "half-siblings"
    GRANDPARENT_GRANDCHILD = "grandparent-grandchild"
    AVUNCULAR = "avuncular"
    FIRST_COUSINS = "first-cousins"
    DOUBLE_FIRST_COUSINS = "double-first-cousins"
    FIRST_COUSINS_ONCE_REMOVED = "first-cousins-once-removed"
    GREAT_GRANDPARENT = "great-grandparent"
    SECOND_COUSINS = "second-cousins"
    THIRD_COUSINS = "third-cousins"


class DeclaredRelationshipType(str, Enum):
    """Relationships a user may declare between two arbitrary nodes."""

    SIBLINGS = "siblings"
    HALF_SIBLINGS = "half-siblings"
    SPOUSE = "spouse"
    FIRST_COUSINS = "first-cousins"
    SECOND_COUSINS = "second-cousins"
    UNRELATED = "unrelated"


class GenerationTier(str, Enum):
    PARENTS = "parents"
    GRANDPARENTS = "grandparents"
    GREAT_GRANDPARENTS = "great-grandparents"


@dataclass(frozen=True)
class Person:
    id: str
    label: str = ""
    # sex stored as the Sex enum; from_dict accepts the plain 'M'/'F' strings
    sex: Sex = Sex.M
    generation: int = 0
    mother_id: Optional[str] = None
    father_id: Optional[str] = None
    inbreeding_coefficient: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "sex": self.sex.value,
            "generation": self.generation,
            "mother_id": self.mother_id,
            "father_id": self.father_id,
            "inbreeding_coefficient": self.inbreeding_coefficient,
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "Person":
        return Person(
            id=d["id"],
            label=d.get("label", ""),
            sex=Sex(d.get("sex", "M")),
            generation=int(d.get("generation", 0)),
            mother_id=d.get("mother_id"),
            father_id=d.get("father_id"),
            inbreeding_coefficient=d.get("inbreeding_coefficient"),
        )


@dataclass(frozen=True)
class ParentChildEdge:
    parent_id: str
    child_id: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "ParentChildEdge":
        return ParentChildEdge(parent_id=d["parent_id"], child_id=d["child_id"])


@dataclass(frozen=True)
class NodeRelationship:
    person1_id: str
    person2_id: str
    type: DeclaredRelationshipType

    def to_dict(self) -> Dict[str, Any]:
        return {"person1_id": self.person1_id, "person2_id": self.person2_id, "type": self.type.value}

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "NodeRelationship":
        return NodeRelationship(
            person1_id=d["person1_id"],
            person2_id=d["person2_id"],
            type=DeclaredRelationshipType(d["type"]),
        )


@dataclass(frozen=True)
class ConsanguinityLink:
    person1_id: str
    person2_id: str
    relationship: RelationshipType

    def to_dict(self) -> Dict[str, Any]:
        return {"person1_id": self.person1_id, "person2_id": self.person2_id, "relationship": self.relationship.value}


@dataclass(frozen=True)
class FamilyGraph:
    """Read-only projection consumed by drawing code: no merge bookkeeping."""

    persons: Dict[str, Person] = field(default_factory=dict)
    edges: Tuple[ParentChildEdge, ...] = ()
    consanguinity_links: Tuple[ConsanguinityLink, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "persons": {pid: p.to_dict() for pid, p in self.persons.items()},
            "edges": [e.to_dict() for e in self.edges],
            "consanguinity_links": [link.to_dict() for link in self.consanguinity_links],
        }


@dataclass(frozen=True)
class AncestorPath:
    # route from the first target up to the ancestor and down to the second
    person_ids: Tuple[str, ...]
    common_ancestor_id: str
    steps: int

    def to_dict(self) -> Dict[str, Any]:
        return {"person_ids": list(self.person_ids), "common_ancestor_id": self.common_ancestor_id, "steps": self.steps}


@dataclass(frozen=True)
class ConsanguinityFactor:
    id: str
    generation: GenerationTier
    relationship: RelationshipType
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "generation": self.generation.value,
            "relationship": self.relationship.value,
            "description": self.description,
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "ConsanguinityFactor":
        return ConsanguinityFactor(
            id=d.get("id", ""),
            generation=GenerationTier(d.get("generation", "parents")),
            relationship=RelationshipType(d["relationship"]),
            description=d.get("description", ""),
        )


@dataclass(frozen=True)
class ConsanguinityScenario:
    id: str
    label: str
    description: str
    ancestor_relationship: RelationshipType
    ancestor_generation: GenerationTier

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "description": self.description,
            "ancestor_relationship": self.ancestor_relationship.value,
            "ancestor_generation": self.ancestor_generation.value,
        }


@dataclass(frozen=True)
class RelationshipOption:
    value: RelationshipType
    label: str
    description: str
    base_coefficient: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": self.value.value,
            "label": self.label,
            "description": self.description,
            "base_coefficient": self.base_coefficient,
        }


@dataclass(frozen=True)
class ProbabilityResult:
    coefficient_of_relationship: float
    gene_overlap_probability: float
    inbreeding_coefficient: float
    # None means "not defined for this combination", 0.0 means defined and zero
    x_linked_coefficient: Optional[float]
    y_linked_coefficient: Optional[float]
    baseline_r: float
    delta_from_baseline: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def parse_sex(value: Any) -> Sex:
    """Coerce 'M'/'F' (any case) or a Sex into a Sex; raise ValueError otherwise."""
    if isinstance(value, Sex):
        return value
    if not isinstance(value, str):
        raise ValueError(f"invalid sex: {value!r}")
    return Sex(value.strip().upper())


def parse_relationship(value: Any) -> RelationshipType:
    if isinstance(value, RelationshipType):
        return value
    return RelationshipType(value)


def parse_declared(value: Any) -> DeclaredRelationshipType:
    if isinstance(value, DeclaredRelationshipType):
        return value
    return DeclaredRelationshipType(value)


def relationship_values() -> List[str]:
    return [r.value for r in RelationshipType]
