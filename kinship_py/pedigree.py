"""Pedigree store: persons, parent-child edges and the node-merge map.

A `PedigreeStore` is a value. Every edit (sex flip, merge, declared
relationship) returns a new store and leaves the original untouched, so the
application state owner can keep the previous value around (undo, reset) and
nothing aliases a mutable graph.

Merged-away persons are never deleted: they stay in `persons` and the edges
that reference them are kept verbatim. Consumers must go through `resolve()`
(or `to_visible_graph()`) before using an id taken from an edge.
"""
from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple
import logging

from .models import (
    ConsanguinityLink,
    DeclaredRelationshipType,
    FamilyGraph,
    NodeRelationship,
    ParentChildEdge,
    Person,
    RelationshipType,
    Sex,
)


# declared type -> relationship drawn on the consanguinity link
_LINK_RELATIONSHIPS: Dict[DeclaredRelationshipType, RelationshipType] = {
    DeclaredRelationshipType.FIRST_COUSINS: RelationshipType.FIRST_COUSINS,
    DeclaredRelationshipType.SECOND_COUSINS: RelationshipType.SECOND_COUSINS,
    DeclaredRelationshipType.HALF_SIBLINGS: RelationshipType.HALF_SIBLINGS,
}

_NO_LINK = (DeclaredRelationshipType.UNRELATED, DeclaredRelationshipType.SPOUSE)


@dataclass(frozen=True)
class PedigreeStore:
    persons: Dict[str, Person] = field(default_factory=dict)
    edges: Tuple[ParentChildEdge, ...] = ()
    merges: Dict[str, str] = field(default_factory=dict)
    defined_relationships: Tuple[NodeRelationship, ...] = ()
    target_pair: Tuple[str, str] = ("p1", "p2")

    # --- lookups -------------------------------------------------------------
    def resolve(self, pid: str) -> str:
        """Follow the merge chain from pid to its canonical id.

        Returns pid unchanged when it has no mapping. A malformed (cyclic) map
        stops at the last id before the chain would repeat.
        """
        seen = {pid}
        current = pid
        while current in self.merges:
            nxt = self.merges[current]
            if nxt in seen:
                logging.warning("merge cycle detected while resolving %s (at %s)", pid, current)
                break
            seen.add(nxt)
            current = nxt
        return current

    def get_person(self, pid: str) -> Optional[Person]:
        return self.persons.get(pid)

    def label_of(self, pid: str, fallback: str) -> str:
        p = self.persons.get(pid)
        return p.label if p is not None and p.label else fallback

    def parents_of(self, pid: str) -> List[str]:
        """Return the resolved parent ids of pid, in edge order, without duplicates."""
        target = self.resolve(pid)
        parents: List[str] = []
        for edge in self.edges:
            if self.resolve(edge.child_id) != target:
                continue
            parent = self.resolve(edge.parent_id)
            if parent not in parents:
                parents.append(parent)
        return parents

    # --- immutable updates -----------------------------------------------------
    def with_person(self, person: Person) -> "PedigreeStore":
        persons = dict(self.persons)
        persons[person.id] = person
        return replace(self, persons=persons)

    def with_sex(self, pid: str, sex: Sex) -> "PedigreeStore":
        person = self.persons.get(pid)
        if person is None:
            return self
        return self.with_person(replace(person, sex=Sex(sex)))

    def toggle_sex(self, pid: str) -> "PedigreeStore":
        """Flip the sex of the node pid stands for (merged ids are resolved)."""
        canonical = self.resolve(pid)
        person = self.persons.get(canonical)
        if person is None:
            return self
        return self.with_sex(canonical, person.sex.opposite())

    def with_merge(self, loser: str, keeper: str) -> "PedigreeStore":
        """Record that `loser` is the same individual as `keeper`.

        Both ids are resolved first; a merge between ids that already resolve
        to the same node is a no-op, which keeps the map acyclic.
        """
        loser_c = self.resolve(loser)
        keeper_c = self.resolve(keeper)
        if loser_c == keeper_c:
            logging.debug("merge %s -> %s skipped: already the same node", loser, keeper)
            return self
        merges = dict(self.merges)
        merges[loser_c] = keeper_c
        logging.debug("merged %s into %s", loser_c, keeper_c)
        return replace(self, merges=merges)

    def with_relationship(self, rel: NodeRelationship) -> "PedigreeStore":
        return replace(self, defined_relationships=self.defined_relationships + (rel,))

    # --- projection ------------------------------------------------------------
    def to_visible_graph(self) -> FamilyGraph:
        persons = {pid: p for pid, p in self.persons.items() if pid not in self.merges}

        edges: List[ParentChildEdge] = []
        seen = set()
        for edge in self.edges:
            resolved = ParentChildEdge(self.resolve(edge.parent_id), self.resolve(edge.child_id))
            key = (resolved.parent_id, resolved.child_id)
            if key in seen:
                continue
            seen.add(key)
            edges.append(resolved)

        links: List[ConsanguinityLink] = []
        for rel in self.defined_relationships:
            if rel.type in _NO_LINK:
                continue
            links.append(
                ConsanguinityLink(
                    person1_id=self.resolve(rel.person1_id),
                    person2_id=self.resolve(rel.person2_id),
                    relationship=_LINK_RELATIONSHIPS.get(rel.type, RelationshipType.SIBLINGS),
                )
            )

        return FamilyGraph(persons=persons, edges=tuple(edges), consanguinity_links=tuple(links))

    def to_dict(self) -> Dict:
        return {
            "persons": {pid: p.to_dict() for pid, p in self.persons.items()},
            "edges": [e.to_dict() for e in self.edges],
            "merges": dict(self.merges),
            "defined_relationships": [r.to_dict() for r in self.defined_relationships],
            "target_pair": list(self.target_pair),
        }


def to_visible_graph(store: PedigreeStore) -> FamilyGraph:
    return store.to_visible_graph()
