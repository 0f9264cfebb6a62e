"""Pedigree templates for the relationship archetypes.

API:
    build_template(relationship, sex1="M", sex2="F") -> PedigreeStore
    selected_pair_ids(relationship) -> (id1, id2)

Each archetype instantiates a fixed topology with no consanguinity: the
baseline that user-declared relationships are then layered on. Ancestor sexes
follow fixed conventions ("father" nodes are always male); only the two
targets take the caller-supplied sexes.
"""
from __future__ import annotations
from dataclasses import replace
from typing import Dict, List, Optional, Tuple

from .models import (
    ConsanguinityScenario,
    GenerationTier,
    ParentChildEdge,
    Person,
    RelationshipOption,
    RelationshipType,
    Sex,
    parse_relationship,
    parse_sex,
)
from .pedigree import PedigreeStore

TARGET_PAIR: Tuple[str, str] = ("p1", "p2")


RELATIONSHIP_OPTIONS: List[RelationshipOption] = [
    RelationshipOption(RelationshipType.SIBLINGS, "Siblings", "Full siblings sharing both parents", 0.5),
    RelationshipOption(RelationshipType.HALF_SIBLINGS, "Half-Siblings", "Sharing one parent", 0.25),
    RelationshipOption(RelationshipType.FIRST_COUSINS, "1st Cousins", "Children of siblings", 0.125),
    RelationshipOption(RelationshipType.DOUBLE_FIRST_COUSINS, "Double 1st Cousins", "Both sets of parents are siblings", 0.25),
    RelationshipOption(RelationshipType.SECOND_COUSINS, "2nd Cousins", "Share great-grandparents", 0.03125),
    RelationshipOption(RelationshipType.THIRD_COUSINS, "3rd Cousins", "Share great-great-grandparents", 0.0078125),
    RelationshipOption(RelationshipType.FIRST_COUSINS_ONCE_REMOVED, "1st Cousins Once Removed", "Child of 1st cousin", 0.0625),
    RelationshipOption(RelationshipType.AVUNCULAR, "Aunt/Uncle - Niece/Nephew", "Avuncular relationship", 0.25),
    RelationshipOption(RelationshipType.GRANDPARENT_GRANDCHILD, "Grandparent - Grandchild", "Two generations apart", 0.25),
]


CONSANGUINITY_SCENARIOS: List[ConsanguinityScenario] = [
    ConsanguinityScenario("none", "None", "No ancestral consanguinity",
                          RelationshipType.SIBLINGS, GenerationTier.PARENTS),
    ConsanguinityScenario("parents-first-cousins", "Parents are 1st Cousins", "Parents share grandparents",
                          RelationshipType.FIRST_COUSINS, GenerationTier.PARENTS),
    ConsanguinityScenario("parents-second-cousins", "Parents are 2nd Cousins", "Parents share great-grandparents",
                          RelationshipType.SECOND_COUSINS, GenerationTier.PARENTS),
    ConsanguinityScenario("parents-half-siblings", "Parents are Half-Siblings", "Parents share one parent",
                          RelationshipType.HALF_SIBLINGS, GenerationTier.PARENTS),
    ConsanguinityScenario("parents-siblings", "Parents are Siblings", "Parents are full siblings",
                          RelationshipType.SIBLINGS, GenerationTier.PARENTS),
    ConsanguinityScenario("grandparents-first-cousins", "Grandparents are 1st Cousins", "One set of grandparents are cousins",
                          RelationshipType.FIRST_COUSINS, GenerationTier.GRANDPARENTS),
    ConsanguinityScenario("grandparents-siblings", "Grandparents are Siblings", "One set of grandparents are siblings",
                          RelationshipType.SIBLINGS, GenerationTier.GRANDPARENTS),
]


def relationship_option(value) -> Optional[RelationshipOption]:
    for opt in RELATIONSHIP_OPTIONS:
        if opt.value.value == getattr(value, "value", value):
            return opt
    return None


def find_scenario(scenario_id: Optional[str]) -> Optional[ConsanguinityScenario]:
    if not scenario_id:
        return None
    return next((s for s in CONSANGUINITY_SCENARIOS if s.id == scenario_id), None)


class _Builder:
    """Collects persons and edges; back-references are filled on build()."""

    def __init__(self) -> None:
        self.persons: Dict[str, Person] = {}
        self.edges: List[ParentChildEdge] = []

    def person(self, pid: str, label: str, sex: Sex, generation: int) -> None:
        self.persons[pid] = Person(id=pid, label=label, sex=sex, generation=generation)

    def edge(self, parent_id: str, child_id: str) -> None:
        self.edges.append(ParentChildEdge(parent_id, child_id))

    def build(self) -> PedigreeStore:
        persons = dict(self.persons)
        for e in self.edges:
            parent = persons[e.parent_id]
            child = persons[e.child_id]
            if parent.sex is Sex.M and child.father_id is None:
                persons[child.id] = replace(child, father_id=parent.id)
            elif parent.sex is Sex.F and child.mother_id is None:
                persons[child.id] = replace(child, mother_id=parent.id)
        return PedigreeStore(persons=persons, edges=tuple(self.edges), target_pair=TARGET_PAIR)


def _siblings(b: _Builder, sex1: Sex, sex2: Sex) -> None:
    # 2 targets, 2 parents, 4 grandparents
    b.person("p1", "Sibling A", sex1, 2)
    b.person("p2", "Sibling B", sex2, 2)
    b.person("father", "Father", Sex.M, 1)
    b.person("mother", "Mother", Sex.F, 1)
    b.person("gf1", "Grandfather 1", Sex.M, 0)
    b.person("gm1", "Grandmother 1", Sex.F, 0)
    b.person("gf2", "Grandfather 2", Sex.M, 0)
    b.person("gm2", "Grandmother 2", Sex.F, 0)
    for child in ("p1", "p2"):
        b.edge("father", child)
        b.edge("mother", child)
    b.edge("gf1", "father")
    b.edge("gm1", "father")
    b.edge("gf2", "mother")
    b.edge("gm2", "mother")


def _first_cousins(b: _Builder, sex1: Sex, sex2: Sex) -> None:
    # 2 targets, 4 parents, 6 grandparents of which 2 are shared
    b.person("p1", "Cousin A", sex1, 2)
    b.person("p2", "Cousin B", sex2, 2)
    b.person("father1", "Parent A1", Sex.M, 1)
    b.person("mother1", "Parent A2", Sex.F, 1)
    b.person("father2", "Parent B1", Sex.M, 1)
    b.person("mother2", "Parent B2", Sex.F, 1)
    b.person("gf-shared", "Shared Grandfather", Sex.M, 0)
    b.person("gm-shared", "Shared Grandmother", Sex.F, 0)
    b.person("gf-a", "Grandfather A", Sex.M, 0)
    b.person("gm-a", "Grandmother A", Sex.F, 0)
    b.person("gf-b", "Grandfather B", Sex.M, 0)
    b.person("gm-b", "Grandmother B", Sex.F, 0)
    b.edge("father1", "p1")
    b.edge("mother1", "p1")
    b.edge("father2", "p2")
    b.edge("mother2", "p2")
    for father in ("father1", "father2"):
        b.edge("gf-shared", father)
        b.edge("gm-shared", father)
    b.edge("gf-a", "mother1")
    b.edge("gm-a", "mother1")
    b.edge("gf-b", "mother2")
    b.edge("gm-b", "mother2")


def _double_first_cousins(b: _Builder, sex1: Sex, sex2: Sex) -> None:
    # two brothers married two sisters: all four grandparents shared
    b.person("p1", "Cousin A", sex1, 2)
    b.person("p2", "Cousin B", sex2, 2)
    b.person("father1", "Father A", Sex.M, 1)
    b.person("mother1", "Mother A", Sex.F, 1)
    b.person("father2", "Father B", Sex.M, 1)
    b.person("mother2", "Mother B", Sex.F, 1)
    b.person("gf1", "Grandfather 1", Sex.M, 0)
    b.person("gm1", "Grandmother 1", Sex.F, 0)
    b.person("gf2", "Grandfather 2", Sex.M, 0)
    b.person("gm2", "Grandmother 2", Sex.F, 0)
    b.edge("father1", "p1")
    b.edge("mother1", "p1")
    b.edge("father2", "p2")
    b.edge("mother2", "p2")
    for father in ("father1", "father2"):
        b.edge("gf1", father)
        b.edge("gm1", father)
    for mother in ("mother1", "mother2"):
        b.edge("gf2", mother)
        b.edge("gm2", mother)


def _avuncular(b: _Builder, sex1: Sex, sex2: Sex) -> None:
    # p1 is the uncle/aunt; p1's sibling is p2's parent
    other = sex1.opposite()
    b.person("p1", "Uncle/Aunt", sex1, 1)
    b.person("p2", "Nephew/Niece", sex2, 2)
    b.person("sibling", "Parent", other, 1)
    b.person("spouse", "Spouse", other, 1)
    b.person("gf", "Grandfather", Sex.M, 0)
    b.person("gm", "Grandmother", Sex.F, 0)
    b.person("gf-spouse", "Grandfather (in-law)", Sex.M, 0)
    b.person("gm-spouse", "Grandmother (in-law)", Sex.F, 0)
    b.edge("sibling", "p2")
    b.edge("spouse", "p2")
    b.edge("gf", "p1")
    b.edge("gm", "p1")
    b.edge("gf", "sibling")
    b.edge("gm", "sibling")
    b.edge("gf-spouse", "spouse")
    b.edge("gm-spouse", "spouse")


def _second_cousins(b: _Builder, sex1: Sex, sex2: Sex) -> None:
    b.person("p1", "Cousin A", sex1, 3)
    b.person("p2", "Cousin B", sex2, 3)
    b.person("parent1", "Parent A", Sex.M, 2)
    b.person("parent2", "Parent B", Sex.M, 2)
    b.person("gp1", "Grandparent A", Sex.M, 1)
    b.person("gp2", "Grandparent B", Sex.M, 1)
    b.person("ggp-shared", "Shared Great-GP", Sex.M, 0)
    b.edge("parent1", "p1")
    b.edge("parent2", "p2")
    b.edge("gp1", "parent1")
    b.edge("gp2", "parent2")
    b.edge("ggp-shared", "gp1")
    b.edge("ggp-shared", "gp2")


def _default(b: _Builder, sex1: Sex, sex2: Sex) -> None:
    b.person("p1", "Person A", sex1, 2)
    b.person("p2", "Person B", sex2, 2)
    b.person("father", "Father", Sex.M, 1)
    b.person("mother", "Mother", Sex.F, 1)
    for child in ("p1", "p2"):
        b.edge("father", child)
        b.edge("mother", child)


_TOPOLOGIES = {
    RelationshipType.SIBLINGS: _siblings,
    RelationshipType.HALF_SIBLINGS: _siblings,
    RelationshipType.FIRST_COUSINS: _first_cousins,
    RelationshipType.DOUBLE_FIRST_COUSINS: _double_first_cousins,
    RelationshipType.AVUNCULAR: _avuncular,
    RelationshipType.SECOND_COUSINS: _second_cousins,
}


def build_template(relationship, sex1="M", sex2="F") -> PedigreeStore:
    """Build the baseline pedigree for `relationship`.

    Unknown or unmodeled relationship values fall back to the plain
    two-parent sibling skeleton.
    """
    try:
        rel = parse_relationship(relationship)
    except ValueError:
        rel = None
    builder = _Builder()
    _TOPOLOGIES.get(rel, _default)(builder, parse_sex(sex1), parse_sex(sex2))
    return builder.build()


def selected_pair_ids(relationship) -> Tuple[str, str]:
    # every topology above names its targets p1/p2
    return TARGET_PAIR
