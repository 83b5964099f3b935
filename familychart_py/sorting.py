"""Ordering of a person's children by the spouse they were had with.

Children are grouped by their "other parent" (the entry of the child's
parents list that is not the parent being laid out). Groups follow the
parent's declared spouse order, so children of a first marriage come before
children of a remarriage. Other parents that are not declared spouses come
next, in order of first appearance, and children with no second parent on
record form the last group (or the first one with `single_parent_first`).

The other-parent map is computed once per call; the sort key is then a dict
lookup, so sorting m children costs O(m log m) regardless of store size.
"""
from __future__ import annotations
from typing import Any, Callable, Dict, List, Optional, Sequence

from .models import Person


def other_parent_id(child: Person, parent_id: str) -> Optional[str]:
    for pid in child.rels.parents[:2]:
        if pid and pid != parent_id:
            return pid
    return None


def sort_children_with_spouses(
    children: Sequence[Person],
    parent: Person,
    store: Any = None,
    key: Optional[Callable[[Person], Any]] = None,
    single_parent_first: bool = False,
) -> List[Person]:
    """Return a new list of `children` grouped by other parent.

    When `store` is given, an other parent missing from it counts as no
    second parent. `key`, when given, orders children inside each group.
    Input order breaks remaining ties.
    """
    spouse_pos: Dict[str, int] = {sid: i for i, sid in enumerate(parent.rels.spouses)}
    n_spouses = len(spouse_pos)

    # one pass: child id -> group rank
    undeclared: Dict[str, int] = {}
    rank: Dict[int, int] = {}
    for child in children:
        op = other_parent_id(child, parent.id)
        if op is not None and store is not None and op not in store:
            op = None
        if op is None:
            r = -1 if single_parent_first else 1 << 30
        elif op in spouse_pos:
            r = spouse_pos[op]
        else:
            r = n_spouses + undeclared.setdefault(op, len(undeclared))
        rank[id(child)] = r

    if key is None:
        return sorted(children, key=lambda c: rank[id(c)])
    return sorted(children, key=lambda c: (rank[id(c)], key(c)))
