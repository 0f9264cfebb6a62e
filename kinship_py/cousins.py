"""Cousin / kinship label helpers.

APIs:
    cousin_label(l1, l2) -> (label, degree, removed)
    archetype_for(l1, l2) -> Optional[RelationshipType]

Inputs l1 and l2 are generation distances from each person to a common
ancestor, as found in AncestorPath routes. For example:
    - siblings: l1=1, l2=1
    - first cousins: l1=2, l2=2
    - aunt/niece: l1=1, l2=2 (first is aunt/uncle relative to second)
"""
from typing import Optional, Tuple

from .models import RelationshipType


def _ordinal(n: int) -> str:
    if 10 <= (n % 100) <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def cousin_label(l1: int, l2: int) -> Tuple[str, Optional[int], Optional[int]]:
    """Return (label, degree, removed) for distances l1, l2 to the ancestor.

    degree and removed are only meaningful for the sibling/cousin family
    (both distances at least 1).
    """
    if l1 < 0 or l2 < 0:
        raise ValueError("l1 and l2 must be non-negative integers")

    if l1 == 0 and l2 == 0:
        return "self", None, None

    if l1 == 0 or l2 == 0:
        far = max(l1, l2)
        names = {1: ("parent", "child"), 2: ("grandparent", "grandchild"), 3: ("great-grandparent", "great-grandchild")}
        if far in names:
            up, down = names[far]
            return (up if l1 == 0 else down), None, None
        if l1 == 0:
            return f"ancestor (gen {l2})", None, None
        return f"descendant (gen {l1})", None, None

    degree = min(l1, l2) - 1
    removed = abs(l1 - l2)

    if degree == 0:
        if removed == 0:
            return "sibling", 0, 0
        if l1 < l2:
            return "aunt/uncle", 0, removed
        return "niece/nephew", 0, removed

    ord_deg = _ordinal(degree)
    if removed == 0:
        label = f"{ord_deg} cousin"
    elif removed == 1:
        label = f"{ord_deg} cousin once removed"
    else:
        label = f"{ord_deg} cousin {removed} times removed"
    return label, degree, removed


_ARCHETYPES = {
    (0, 1): RelationshipType.PARENT_CHILD,
    (0, 2): RelationshipType.GRANDPARENT_GRANDCHILD,
    (0, 3): RelationshipType.GREAT_GRANDPARENT,
    (1, 1): RelationshipType.SIBLINGS,
    (1, 2): RelationshipType.AVUNCULAR,
    (2, 2): RelationshipType.FIRST_COUSINS,
    (2, 3): RelationshipType.FIRST_COUSINS_ONCE_REMOVED,
    (3, 3): RelationshipType.SECOND_COUSINS,
    (4, 4): RelationshipType.THIRD_COUSINS,
}


def archetype_for(l1: int, l2: int) -> Optional[RelationshipType]:
    """Modeled archetype for the distance pair, order-insensitive, or None."""
    if l1 < 0 or l2 < 0:
        raise ValueError("l1 and l2 must be non-negative integers")
    return _ARCHETYPES.get((min(l1, l2), max(l1, l2)))
