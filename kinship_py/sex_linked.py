"""X- and Y-linked sharing coefficients.

Fathers pass their single X only to daughters, never to sons; mothers pass
one of their two X copies to any child. The Y chromosome goes father to son
only, so all males of a patrilineal line share the same Y.

The X table is keyed by (RelationshipType, (Sex, Sex)) and is checked at
import: every relationship must carry all four sex pairs. A `None` result is
therefore only possible for values outside the modeled enums.
"""
from __future__ import annotations
from itertools import product
from typing import Dict, Optional, Tuple

from .models import Person, RelationshipType, Sex

M, F = Sex.M, Sex.F

SexPair = Tuple[Sex, Sex]


def _uniform(value: float) -> Dict[SexPair, float]:
    return {pair: value for pair in product(Sex, repeat=2)}


X_LINKED_TABLE: Dict[RelationshipType, Dict[SexPair, float]] = {
    RelationshipType.PARENT_CHILD: {
        (M, M): 0.0,  # father-son: no X transmitted
        (M, F): 1.0,  # father-daughter: father's only X
        (F, M): 0.5,
        (F, F): 0.5,
    },
    # brothers and sisters share the mother's X with probability 1/2
    RelationshipType.SIBLINGS: _uniform(0.5),
    # maternal half-siblings
    RelationshipType.HALF_SIBLINGS: _uniform(0.5),
    RelationshipType.GRANDPARENT_GRANDCHILD: {
        (M, M): 0.0,
        (M, F): 0.0,  # paternal grandfather to granddaughter
        (F, M): 0.25,
        (F, F): 0.25,
    },
    RelationshipType.AVUNCULAR: _uniform(0.25),
    RelationshipType.FIRST_COUSINS: _uniform(0.125),
    RelationshipType.DOUBLE_FIRST_COUSINS: _uniform(0.25),
    RelationshipType.FIRST_COUSINS_ONCE_REMOVED: _uniform(0.0625),
    RelationshipType.GREAT_GRANDPARENT: {
        (M, M): 0.0,
        (M, F): 0.0,
        (F, M): 0.125,
        (F, F): 0.125,
    },
    RelationshipType.SECOND_COUSINS: _uniform(0.03125),
    RelationshipType.THIRD_COUSINS: _uniform(0.0078125),
}

# connecting lineage assumed to be entirely father-to-son
PATRILINEAL = frozenset({
    RelationshipType.PARENT_CHILD,
    RelationshipType.SIBLINGS,
    RelationshipType.GRANDPARENT_GRANDCHILD,
    RelationshipType.AVUNCULAR,
    RelationshipType.FIRST_COUSINS,
})


def validate_x_table(table: Dict[RelationshipType, Dict[SexPair, float]]) -> None:
    """Raise ValueError if `table` misses a relationship or a sex pair."""
    pairs = set(product(Sex, repeat=2))
    missing_rel = [r.value for r in RelationshipType if r not in table]
    if missing_rel:
        raise ValueError(f"X-linked table misses relationships: {missing_rel}")
    for rel, row in table.items():
        if set(row) != pairs:
            raise ValueError(f"X-linked table row {rel.value} must cover exactly {sorted(pairs)}")
        for pair, value in row.items():
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"X-linked coefficient out of range for {rel.value} {pair}: {value}")


validate_x_table(X_LINKED_TABLE)


def _relationship_or_none(relationship) -> Optional[RelationshipType]:
    try:
        return RelationshipType(getattr(relationship, "value", relationship))
    except ValueError:
        return None


def _sex_or_none(person) -> Optional[Sex]:
    try:
        return Sex(getattr(person, "sex", None))
    except ValueError:
        return None


def x_linked_coefficient(person1: Person, person2: Person, relationship) -> Optional[float]:
    """Return the X-linked coefficient, or None when the combination is not modeled."""
    rel = _relationship_or_none(relationship)
    s1 = _sex_or_none(person1)
    s2 = _sex_or_none(person2)
    if rel is None or s1 is None or s2 is None:
        return None
    return X_LINKED_TABLE[rel].get((s1, s2))


def y_linked_coefficient(person1: Person, person2: Person, relationship) -> Optional[float]:
    """Return 1.0 for male pairs on a patrilineal archetype, else 0.0.

    Half-siblings are assumed maternal and therefore get 0.
    """
    if _sex_or_none(person1) is not Sex.M or _sex_or_none(person2) is not Sex.M:
        return 0.0
    if _relationship_or_none(relationship) in PATRILINEAL:
        return 1.0
    return 0.0
