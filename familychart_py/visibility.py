"""Check whether a node's relatives are all on screen.

Renderers call this once per visible node per interaction frame, so
`displayed_ids` must be a set: each relative costs one membership test.
"""
from __future__ import annotations
from typing import AbstractSet, Any, Set

from .models import Person, Tree


def displayed_ids(tree: Tree) -> Set[str]:
    return {n.id for n in tree.nodes}


def is_all_relative_displayed(node: Any, displayed: AbstractSet[str]) -> bool:
    """True iff every non-empty parent, spouse and child id of `node` is displayed.

    `node` may be a `TreeNode` or a `Person`.
    """
    person: Person = node.data if not isinstance(node, Person) else node
    return all(pid in displayed for pid in person.rels.all_ids() if pid)
