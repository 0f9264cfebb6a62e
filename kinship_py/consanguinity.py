"""Consanguinity / coefficient-of-relationship utilities.

Two flows compute a ProbabilityResult and they are deliberately kept apart:

- the path flow sums over the AncestorPaths found in a concrete pedigree,
  using the classic formula

    r = sum_paths (1/2)^steps * (1 + F_anc)
    F = sum_paths (1/2)^(steps+1) * (1 + F_anc)

  where F_anc is the known inbreeding coefficient of the common ancestor
  (0 when unknown);

- the scalar flow starts from the literature coefficient of a named
  archetype and scales it by a consanguinity factor describing how related
  the ancestors are:

    adjusted_r = base_r * (1 + c)
    F = adjusted_r / 2

For one ancestral relationship c is the F that relationship would itself
produce (base_r / 2). Several independent ancestral relationships at
different tiers are added up, each scaled by its tier multiplier. The sum is
a small-perturbation approximation and is what this module treats as
authoritative.

API:
    coefficient_of_relationship(paths, ancestor_inbreeding=None)
    inbreeding_coefficient(paths, ancestor_inbreeding=None)
    calculate_probabilities(person1, person2, relationship, consanguinity_factor=0.0)
    calculate_from_pedigree(store)
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Union

from .models import (
    AncestorPath,
    ConsanguinityFactor,
    ConsanguinityScenario,
    GenerationTier,
    Person,
    ProbabilityResult,
    RelationshipType,
    parse_relationship,
)
from .paths import find_paths
from .pedigree import PedigreeStore
from .sex_linked import x_linked_coefficient, y_linked_coefficient


BASE_COEFFICIENTS: Dict[RelationshipType, float] = {
    RelationshipType.PARENT_CHILD: 0.5,
    RelationshipType.SIBLINGS: 0.5,
    RelationshipType.HALF_SIBLINGS: 0.25,
    RelationshipType.GRANDPARENT_GRANDCHILD: 0.25,
    RelationshipType.AVUNCULAR: 0.25,
    RelationshipType.FIRST_COUSINS: 0.125,
    RelationshipType.DOUBLE_FIRST_COUSINS: 0.25,
    RelationshipType.FIRST_COUSINS_ONCE_REMOVED: 0.0625,
    RelationshipType.GREAT_GRANDPARENT: 0.125,
    RelationshipType.SECOND_COUSINS: 0.03125,
    RelationshipType.THIRD_COUSINS: 0.0078125,
}

# ancestral consanguinity further up the tree weighs less
GENERATION_MULTIPLIERS: Dict[GenerationTier, float] = {
    GenerationTier.PARENTS: 1.0,
    GenerationTier.GRANDPARENTS: 0.5,
    GenerationTier.GREAT_GRANDPARENTS: 0.25,
}

GENERATION_LABELS: Dict[GenerationTier, str] = {
    GenerationTier.PARENTS: "Parents",
    GenerationTier.GRANDPARENTS: "Grandparents",
    GenerationTier.GREAT_GRANDPARENTS: "Great-Grandparents",
}

# relationships selectable as an ancestral consanguinity factor
FACTOR_RELATIONSHIP_LABELS: Dict[RelationshipType, str] = {
    RelationshipType.SIBLINGS: "Siblings",
    RelationshipType.HALF_SIBLINGS: "Half-Siblings",
    RelationshipType.FIRST_COUSINS: "1st Cousins",
    RelationshipType.SECOND_COUSINS: "2nd Cousins",
    RelationshipType.THIRD_COUSINS: "3rd Cousins",
    RelationshipType.DOUBLE_FIRST_COUSINS: "Double 1st Cousins",
    RelationshipType.AVUNCULAR: "Aunt/Uncle-Niece/Nephew",
}


def base_coefficient(relationship) -> float:
    try:
        return BASE_COEFFICIENTS[parse_relationship(relationship)]
    except ValueError:
        return 0.0


# --- path flow -------------------------------------------------------------------

def coefficient_of_relationship(paths: Iterable[AncestorPath], ancestor_inbreeding: Optional[Mapping[str, float]] = None) -> float:
    inbreeding = ancestor_inbreeding or {}
    r = 0.0
    for path in paths:
        f_anc = inbreeding.get(path.common_ancestor_id) or 0.0
        r += (0.5 ** path.steps) * (1.0 + f_anc)
    return r


def inbreeding_coefficient(paths: Iterable[AncestorPath], ancestor_inbreeding: Optional[Mapping[str, float]] = None) -> float:
    """Inbreeding coefficient of a hypothetical offspring of the two targets."""
    inbreeding = ancestor_inbreeding or {}
    f = 0.0
    for path in paths:
        f_anc = inbreeding.get(path.common_ancestor_id) or 0.0
        f += (0.5 ** (path.steps + 1)) * (1.0 + f_anc)
    return f


def gene_overlap_probability(r: float) -> float:
    # expected proportion of genes shared; same number as r by definition
    return r


@dataclass(frozen=True)
class PedigreeCoefficients:
    coefficient_of_relationship: float
    inbreeding_coefficient: float
    paths: List[AncestorPath]


def known_inbreeding(store: PedigreeStore) -> Dict[str, float]:
    """Known inbreeding coefficients of the store's persons, keyed by resolved id."""
    out: Dict[str, float] = {}
    for pid, person in store.persons.items():
        if person.inbreeding_coefficient is not None:
            out[store.resolve(pid)] = person.inbreeding_coefficient
    return out


def calculate_from_pedigree(store: PedigreeStore) -> PedigreeCoefficients:
    """Path-count r and F for the store's target pair.

    r is capped at 1.0; F is the uncapped path sum, i.e. half the
    uncapped r.
    """
    a_id, b_id = store.target_pair
    paths = find_paths(a_id, b_id, store)
    inbreeding = known_inbreeding(store)
    r = min(coefficient_of_relationship(paths, inbreeding), 1.0)
    f = inbreeding_coefficient(paths, inbreeding)
    return PedigreeCoefficients(coefficient_of_relationship=r, inbreeding_coefficient=f, paths=paths)


# --- scalar flow -----------------------------------------------------------------

def consanguinity_factor(ancestor_relationship) -> float:
    """Factor for one ancestral relationship: the F it would itself produce."""
    if ancestor_relationship is None:
        return 0.0
    return base_coefficient(ancestor_relationship) / 2


def factor_contribution(generation: Union[GenerationTier, str], relationship) -> float:
    try:
        multiplier = GENERATION_MULTIPLIERS[GenerationTier(generation)]
    except ValueError:
        multiplier = 1.0
    return consanguinity_factor(relationship) * multiplier


def compound_consanguinity_factor(factors: Iterable[ConsanguinityFactor]) -> float:
    total = 0.0
    for factor in factors:
        total += factor_contribution(factor.generation, factor.relationship)
    return total


def scenario_consanguinity_factor(scenario: Optional[ConsanguinityScenario]) -> float:
    if scenario is None or scenario.id == "none":
        return 0.0
    return factor_contribution(scenario.ancestor_generation, scenario.ancestor_relationship)


def calculate_probabilities(person1: Person, person2: Person, relationship, consanguinity_factor: float = 0.0) -> ProbabilityResult:
    base_r = base_coefficient(relationship)
    adjusted_r = base_r * (1.0 + consanguinity_factor)
    return ProbabilityResult(
        coefficient_of_relationship=adjusted_r,
        gene_overlap_probability=gene_overlap_probability(adjusted_r),
        inbreeding_coefficient=adjusted_r / 2,
        x_linked_coefficient=x_linked_coefficient(person1, person2, relationship),
        y_linked_coefficient=y_linked_coefficient(person1, person2, relationship),
        baseline_r=base_r,
        delta_from_baseline=adjusted_r - base_r,
    )


# --- factor bookkeeping ----------------------------------------------------------

class FactorSequence:
    """Hands out factor ids ("factor-1", "factor-2", ...) for one owner.

    Each session keeps its own sequence, so ids never depend on what other
    sessions in the same process did.
    """

    def __init__(self, prefix: str = "factor", start: int = 0) -> None:
        self.prefix = prefix
        self._last = start

    def next_id(self) -> str:
        self._last += 1
        return f"{self.prefix}-{self._last}"


def describe_factor(generation: Union[GenerationTier, str], relationship) -> str:
    gen = GenerationTier(generation)
    rel = parse_relationship(relationship)
    rel_label = FACTOR_RELATIONSHIP_LABELS.get(rel, rel.value)
    return f"{GENERATION_LABELS[gen]} are {rel_label}"


def new_factor(sequence: FactorSequence, generation=GenerationTier.PARENTS, relationship=RelationshipType.FIRST_COUSINS) -> ConsanguinityFactor:
    gen = GenerationTier(generation)
    rel = parse_relationship(relationship)
    return ConsanguinityFactor(id=sequence.next_id(), generation=gen, relationship=rel, description=describe_factor(gen, rel))
