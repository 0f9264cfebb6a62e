"""Application state for one user: the single owner of a pedigree.

A Session bundles the chosen base relationship, the two target sexes, the
current pedigree and the consanguinity factors. Commands return a new
Session; nothing is edited in place, so callers can keep old values for undo
or comparison.

Two results are available:
    result()           path flow over the (possibly edited) pedigree
    template_result()  scalar flow from the base relationship and the factors
"""
from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Tuple

from .consanguinity import (
    FactorSequence,
    base_coefficient,
    calculate_from_pedigree,
    calculate_probabilities,
    compound_consanguinity_factor,
    gene_overlap_probability,
    new_factor,
)
from .editor import add_relationship, get_relationship_options
from .models import (
    AncestorPath,
    ConsanguinityFactor,
    FamilyGraph,
    GenerationTier,
    ProbabilityResult,
    RelationshipType,
    Sex,
    parse_relationship,
    parse_sex,
)
from .paths import find_paths
from .pedigree import PedigreeStore
from .pedigree_templates import build_template
from .sex_linked import x_linked_coefficient, y_linked_coefficient


@dataclass(frozen=True)
class Session:
    base_relationship: RelationshipType
    person1_sex: Sex
    person2_sex: Sex
    pedigree: PedigreeStore
    factors: Tuple[ConsanguinityFactor, ...] = ()

    @classmethod
    def start(cls, relationship="first-cousins", sex1="M", sex2="F") -> "Session":
        rel = parse_relationship(relationship)
        s1, s2 = parse_sex(sex1), parse_sex(sex2)
        return cls(base_relationship=rel, person1_sex=s1, person2_sex=s2, pedigree=build_template(rel, s1, s2))

    # --- commands ----------------------------------------------------------------
    def change_relationship(self, relationship) -> "Session":
        rel = parse_relationship(relationship)
        return replace(self, base_relationship=rel, pedigree=build_template(rel, self.person1_sex, self.person2_sex))

    def reset(self) -> "Session":
        """Drop all declarations and merges; keep relationship, sexes and factors."""
        return replace(self, pedigree=build_template(self.base_relationship, self.person1_sex, self.person2_sex))

    def set_target_sex(self, index: int, sex) -> "Session":
        if index not in (0, 1):
            raise ValueError("target index must be 0 or 1")
        s = parse_sex(sex)
        pedigree = self.pedigree.with_sex(self.pedigree.target_pair[index], s)
        if index == 0:
            return replace(self, person1_sex=s, pedigree=pedigree)
        return replace(self, person2_sex=s, pedigree=pedigree)

    def toggle_sex(self, person_id: str) -> "Session":
        canonical = self.pedigree.resolve(person_id)
        pedigree = self.pedigree.toggle_sex(canonical)
        person = pedigree.get_person(canonical)
        if person is None:
            return self
        new = replace(self, pedigree=pedigree)
        a, b = (pedigree.resolve(pid) for pid in pedigree.target_pair)
        if canonical == a:
            new = replace(new, person1_sex=person.sex)
        elif canonical == b:
            new = replace(new, person2_sex=person.sex)
        return new

    def declare(self, id_a: str, id_b: str, rel_type) -> "Session":
        return replace(self, pedigree=add_relationship(self.pedigree, id_a, id_b, rel_type))

    def add_factor(self, sequence: FactorSequence, generation=GenerationTier.PARENTS, relationship=RelationshipType.FIRST_COUSINS) -> "Session":
        return replace(self, factors=self.factors + (new_factor(sequence, generation, relationship),))

    def remove_factor(self, factor_id: str) -> "Session":
        return replace(self, factors=tuple(f for f in self.factors if f.id != factor_id))

    # --- queries -----------------------------------------------------------------
    def targets(self):
        a, b = self.pedigree.target_pair
        return self.pedigree.get_person(a), self.pedigree.get_person(b)

    def labels(self) -> Dict[str, str]:
        a, b = self.pedigree.target_pair
        return {
            "person1": self.pedigree.label_of(a, "Person A"),
            "person2": self.pedigree.label_of(b, "Person B"),
        }

    def graph(self) -> FamilyGraph:
        return self.pedigree.to_visible_graph()

    def options(self, id_a: str, id_b: str) -> List[dict]:
        return get_relationship_options(self.pedigree, id_a, id_b)

    def paths(self) -> List[AncestorPath]:
        a, b = self.pedigree.target_pair
        return find_paths(a, b, self.pedigree)

    def result(self) -> ProbabilityResult:
        coeffs = calculate_from_pedigree(self.pedigree)
        base_r = base_coefficient(self.base_relationship)
        p1, p2 = self.targets()
        x_linked: Optional[float] = None
        y_linked: Optional[float] = None
        if p1 is not None and p2 is not None:
            x_linked = x_linked_coefficient(p1, p2, self.base_relationship)
            y_linked = y_linked_coefficient(p1, p2, self.base_relationship)
        r = coeffs.coefficient_of_relationship
        return ProbabilityResult(
            coefficient_of_relationship=r,
            gene_overlap_probability=gene_overlap_probability(r),
            inbreeding_coefficient=coeffs.inbreeding_coefficient,
            x_linked_coefficient=x_linked,
            y_linked_coefficient=y_linked,
            baseline_r=base_r,
            delta_from_baseline=r - base_r,
        )

    def consanguinity_factor(self) -> float:
        return compound_consanguinity_factor(self.factors)

    def template_result(self, consanguinity_factor: Optional[float] = None) -> Optional[ProbabilityResult]:
        """Scalar-flow result; None if a target person is missing."""
        p1, p2 = self.targets()
        if p1 is None or p2 is None:
            return None
        c = self.consanguinity_factor() if consanguinity_factor is None else consanguinity_factor
        return calculate_probabilities(p1, p2, self.base_relationship, c)
