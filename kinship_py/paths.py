"""Common-ancestor path discovery.

API:
    ancestor_depths(store, pid) -> {ancestor_id: depth}
    find_paths(a_id, b_id, store) -> List[AncestorPath]

Upward traversal follows resolved parent edges with an explicit worklist, a
distance map and a predecessor map, all local to one traversal. For every
reachable ancestor only the shortest generational distance is kept; if a
shorter route to an already-seen ancestor turns up later, the recorded depth
is replaced and that ancestor is expanded again so its own ancestors get the
improved depth too.

One AncestorPath is emitted per common ancestor, with
steps = depth_from_a + depth_from_b. Distinct routes to the same ancestor
(e.g. through two different children of that ancestor on the same side) are
not enumerated separately, so topologies with several connecting routes
through one ancestor are under-counted. That is the model, not a bug to fix
here.
"""
from __future__ import annotations
from typing import Dict, List, Tuple
import logging

from .models import AncestorPath
from .pedigree import PedigreeStore


def _walk_up(store: PedigreeStore, start: str) -> Tuple[Dict[str, int], Dict[str, str]]:
    """Return (depths, predecessor) for all ancestors of `start`.

    `start` must already be resolved. The start node itself is not included.
    """
    depths: Dict[str, int] = {}
    prev: Dict[str, str] = {}
    # node -> depth at which its parents were last expanded
    expanded: Dict[str, int] = {}

    stack: List[Tuple[str, int]] = [(start, 0)]
    while stack:
        node, depth = stack.pop()
        done = expanded.get(node)
        if done is not None and done <= depth:
            continue
        expanded[node] = depth
        pending: List[Tuple[str, int]] = []
        for parent in store.parents_of(node):
            if parent == start:
                logging.warning("pedigree cycle: %s is its own ancestor", start)
                continue
            known = depths.get(parent)
            if known is None or depth + 1 < known:
                depths[parent] = depth + 1
                prev[parent] = node
            pending.append((parent, depth + 1))
        # reversed so the first parent is walked first
        stack.extend(reversed(pending))

    # discovery order; a later shorter route keeps the first position
    return depths, prev


def ancestor_depths(store: PedigreeStore, pid: str) -> Dict[str, int]:
    if pid not in store.persons:
        return {}
    depths, _ = _walk_up(store, store.resolve(pid))
    return depths


def _chain(prev: Dict[str, str], start: str, ancestor: str) -> List[str]:
    """Return [ancestor, ..., start] following predecessor links."""
    out = [ancestor]
    node = ancestor
    # bounded by the number of recorded predecessors
    for _ in range(len(prev) + 1):
        if node == start:
            break
        node = prev[node]
        out.append(node)
    return out


def find_paths(a_id: str, b_id: str, store: PedigreeStore) -> List[AncestorPath]:
    """Enumerate one path per common ancestor of a_id and b_id.

    Paths come in the order a_id's traversal discovered their ancestors.

    Returns an empty list if either id is not a person of the store.
    """
    if a_id not in store.persons or b_id not in store.persons:
        logging.debug("find_paths: unknown target (%s, %s)", a_id, b_id)
        return []

    a = store.resolve(a_id)
    b = store.resolve(b_id)
    depths_a, prev_a = _walk_up(store, a)
    depths_b, prev_b = _walk_up(store, b)

    paths: List[AncestorPath] = []
    for anc, da in depths_a.items():
        db = depths_b.get(anc)
        if db is None:
            continue
        up = list(reversed(_chain(prev_a, a, anc)))
        down = _chain(prev_b, b, anc)
        paths.append(AncestorPath(person_ids=tuple(up + down[1:]), common_ancestor_id=anc, steps=da + db))
    return paths


def path_depths(path: AncestorPath) -> Tuple[int, int]:
    """Return (depth_from_a, depth_from_b) of a path found by find_paths."""
    up = path.person_ids.index(path.common_ancestor_id)
    return up, len(path.person_ids) - 1 - up
