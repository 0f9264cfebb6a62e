"""Relationship editor: user-declared kinship between two arbitrary nodes.

Every declaration is appended to the store's log, in order, and never
replaced. Only `siblings` and `half-siblings` change the structure, by merging
parent nodes:

- siblings: B's father is merged into A's father and B's mother into A's
  mother (each side independently, when both exist and differ);
- half-siblings: only the fathers are merged. This is a product choice, a
  half-sibling declaration defaults to the paternal line; it is not a claim
  about genetics, and callers wanting a shared mother must declare siblings.

Merging never rewrites edges. The loser id simply maps to the keeper in the
store's merge map.
"""
from __future__ import annotations
from typing import Dict, List, Optional
import logging

from .models import DeclaredRelationshipType, FamilyGraph, NodeRelationship, Sex, parse_declared
from .pedigree import PedigreeStore


RELATIONSHIP_LABELS: Dict[DeclaredRelationshipType, str] = {
    DeclaredRelationshipType.UNRELATED: "Unrelated",
    DeclaredRelationshipType.SIBLINGS: "Siblings (same parents)",
    DeclaredRelationshipType.HALF_SIBLINGS: "Half-Siblings (one shared parent)",
    DeclaredRelationshipType.FIRST_COUSINS: "1st Cousins",
    DeclaredRelationshipType.SECOND_COUSINS: "2nd Cousins",
}

_SAME_GENERATION = [
    DeclaredRelationshipType.UNRELATED,
    DeclaredRelationshipType.SIBLINGS,
    DeclaredRelationshipType.HALF_SIBLINGS,
    DeclaredRelationshipType.FIRST_COUSINS,
    DeclaredRelationshipType.SECOND_COUSINS,
]


def _parent_by_sex(store: PedigreeStore, pid: str, sex: Sex) -> Optional[str]:
    for parent in store.parents_of(pid):
        person = store.get_person(parent)
        if person is not None and person.sex is sex:
            return parent
    return None


def _merge_parent(store: PedigreeStore, id_a: str, id_b: str, sex: Sex) -> PedigreeStore:
    keeper = _parent_by_sex(store, id_a, sex)
    loser = _parent_by_sex(store, id_b, sex)
    if keeper is None or loser is None or keeper == loser:
        return store
    return store.with_merge(loser, keeper)


def add_relationship(store: PedigreeStore, id_a: str, id_b: str, rel_type) -> PedigreeStore:
    """Declare (id_a, id_b, rel_type) and return the updated store."""
    kind = parse_declared(rel_type)
    new = store.with_relationship(NodeRelationship(person1_id=id_a, person2_id=id_b, type=kind))
    logging.info("declared %s between %s and %s", kind.value, id_a, id_b)

    if kind is DeclaredRelationshipType.SIBLINGS:
        new = _merge_parent(new, id_a, id_b, Sex.M)
        new = _merge_parent(new, id_a, id_b, Sex.F)
    elif kind is DeclaredRelationshipType.HALF_SIBLINGS:
        new = _merge_parent(new, id_a, id_b, Sex.M)
    return new


def get_relationship_options(store: PedigreeStore, id_a: str, id_b: str) -> List[dict]:
    """Declarations allowed for a pair, as [{"value": ..., "label": ...}].

    Cross-generation declarations are not modeled, so only "unrelated" is
    offered there. Unknown persons get no options.
    """
    p1 = store.get_person(id_a)
    p2 = store.get_person(id_b)
    if p1 is None or p2 is None:
        return []
    kinds = _SAME_GENERATION if p1.generation == p2.generation else [DeclaredRelationshipType.UNRELATED]
    return [{"value": k.value, "label": RELATIONSHIP_LABELS[k]} for k in kinds]


def to_visible_graph(store: PedigreeStore) -> FamilyGraph:
    return store.to_visible_graph()
