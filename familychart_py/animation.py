"""Entry/exit animation delays for rendered tree nodes.

Ancestry nodes animate first, level by level going up; the progeny side
waits for the whole ancestry side and then unfolds level by level going
down, with spouses one step after the person they are paired with.
"""
from __future__ import annotations

from .models import Tree, TreeNode

LEVEL_FRACTION = 0.4


def calculate_delay(tree: Tree, node: TreeNode, transition_time: float) -> float:
    """Return the delay in milliseconds before `node` starts animating.

    `tree.max_ancestry_depth` is computed once when the tree is built, so this
    is O(1) per node.
    """
    if transition_time < 0:
        raise ValueError("transition_time must be non-negative")
    level = transition_time * LEVEL_FRACTION
    delay = node.depth * level
    if (node.depth != 0 or node.spouse is not None) and not node.is_ancestry:
        delay += tree.max_ancestry_depth * level
        if node.spouse is not None:
            delay += level
        delay += node.depth * level
    return delay
