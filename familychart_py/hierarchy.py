"""Tree calculation around a main person.

This module turns the flat person store into the list of nodes a renderer
draws. The walk is a breadth-first traversal in two directions from the main
person:

- ancestry: parents, grandparents, ... (`is_ancestry=True`, depth counts up)
- progeny: children, grandchildren, ... (`is_ancestry=False`, depth counts down)

The main person sits at depth 0 on the progeny side. Spouses of progeny
nodes (including the main person) and additional spouses of ancestors are
attached at the depth of the person they are paired with; they are leaves
and are never expanded. Of an ancestor's spouses only the co-parent found
through a child's parents list continues the upward walk.

Each person gets a tid the first time it is visited and is never inserted
or expanded again, so converging lines (cousin marriages) and cyclic data
terminate without a depth cap.

API:
    calculate_tree(store, main_id, ancestry_depth=None, progeny_depth=None,
                   show_siblings_of_main=False, sort_key=None) -> Tree

The store is only read. Any later mutation of the store invalidates the
returned tree; call `calculate_tree` again.
"""
from __future__ import annotations
from collections import deque
from typing import Any, Callable, Dict, List, Optional
import logging

from .errors import NotFound
from .models import Person, Tree, TreeNode
from .sorting import sort_children_with_spouses
from .store import Store
from .visibility import displayed_ids, is_all_relative_displayed


class _Walk:
    """Per-call traversal state: the node list and the tid of each visited id."""

    def __init__(self, store: Store) -> None:
        self.store = store
        self.nodes: List[TreeNode] = []
        self.tids: Dict[str, int] = {}

    def seen(self, pid: str) -> bool:
        return pid in self.tids

    def resolve(self, pid: str, owner: Person, rel: str) -> Optional[Person]:
        p = self.store.get_datum(pid)
        if p is None:
            logging.debug("calculate_tree: %s lists missing %s id %s; skipped", owner.id, rel, pid)
        return p

    def visit(self, person: Person, **kwargs: Any) -> TreeNode:
        tid = len(self.tids) + 1
        node = TreeNode(data=person, tid=tid, **kwargs)
        self.tids[person.id] = tid
        self.nodes.append(node)
        return node

    def attach_spouses(self, line: List[TreeNode], is_ancestry: bool) -> None:
        for node in line:
            for sid in node.data.rels.spouses:
                if not sid or self.seen(sid):
                    continue
                sp = self.resolve(sid, node.data, "spouses")
                if sp is None:
                    continue
                snode = self.visit(sp, depth=node.depth, is_ancestry=is_ancestry, spouse=node)
                node.spouses.append(snode)


def calculate_tree(
    store: Any,
    main_id: str,
    ancestry_depth: Optional[int] = None,
    progeny_depth: Optional[int] = None,
    show_siblings_of_main: bool = False,
    sort_key: Optional[Callable[[Person], Any]] = None,
) -> Tree:
    """Compute the tree anchored at `main_id`.

    `store` is a `Store` or a list of person records. `ancestry_depth` and
    `progeny_depth` optionally cap how many generations are walked in each
    direction. `sort_key` orders children within each other-parent group.

    Raises ValueError when `main_id` is empty and NotFound when it is not in
    the store.
    """
    if not main_id:
        raise ValueError("main_id is required")
    if not hasattr(store, "get_datum"):
        store = Store(store)
    main = store.get_datum(main_id)
    if main is None:
        raise NotFound(main_id)

    walk = _Walk(store)
    main_node = walk.visit(main, depth=0, is_ancestry=False, main=True)

    # ancestry: BFS over the first two parents of each node
    ancestry_line: List[TreeNode] = []
    q = deque([main_node])
    while q:
        node = q.popleft()
        if ancestry_depth is not None and node.depth >= ancestry_depth:
            continue
        for pid in node.data.rels.parents[:2]:
            if not pid or walk.seen(pid):
                continue
            parent = walk.resolve(pid, node.data, "parents")
            if parent is None:
                continue
            pnode = walk.visit(parent, depth=node.depth + 1, is_ancestry=True, parent=node)
            ancestry_line.append(pnode)
            q.append(pnode)
    walk.attach_spouses(ancestry_line, is_ancestry=True)

    # progeny: BFS over children, grouped by the spouse they were had with
    progeny_line: List[TreeNode] = [main_node]
    q = deque([main_node])
    while q:
        node = q.popleft()
        if progeny_depth is not None and node.depth >= progeny_depth:
            continue
        kids = []
        for cid in node.data.rels.children:
            if not cid or walk.seen(cid):
                continue
            child = walk.resolve(cid, node.data, "children")
            if child is not None:
                kids.append(child)
        for child in sort_children_with_spouses(kids, node.data, store, key=sort_key):
            if walk.seen(child.id):
                # listed twice in the same children list
                continue
            cnode = walk.visit(child, depth=node.depth + 1, is_ancestry=False, parent=node)
            progeny_line.append(cnode)
            q.append(cnode)
    walk.attach_spouses(progeny_line, is_ancestry=False)

    if show_siblings_of_main:
        _add_siblings(walk, main_node, sort_key)

    _setup_children_and_parents(walk.nodes)
    tree = Tree(
        main_node=main_node,
        nodes=walk.nodes,
        max_ancestry_depth=max((n.depth for n in walk.nodes if n.is_ancestry), default=0),
    )
    shown = displayed_ids(tree)
    for n in tree.nodes:
        n.all_rels_displayed = is_all_relative_displayed(n, shown)

    logging.debug(
        "calculate_tree: main=%s nodes=%d max_ancestry_depth=%d",
        main_id, len(tree.nodes), tree.max_ancestry_depth,
    )
    return tree


def _add_siblings(walk: _Walk, main_node: TreeNode, sort_key: Optional[Callable[[Person], Any]]) -> None:
    # siblings (full and half) share at least one parent with the main person
    for pnode in [n for n in walk.nodes if n.is_ancestry and n.parent is main_node]:
        kids = []
        for cid in pnode.data.rels.children:
            if not cid or walk.seen(cid):
                continue
            child = walk.resolve(cid, pnode.data, "children")
            if child is not None:
                kids.append(child)
        for sib in sort_children_with_spouses(kids, pnode.data, walk.store, key=sort_key):
            if not walk.seen(sib.id):
                walk.visit(sib, depth=0, is_ancestry=False, sibling=True)


def _setup_children_and_parents(nodes: List[TreeNode]) -> None:
    # single pass over `parent` links; a node reached upward is its walk
    # parent's parent, a node reached downward is its walk parent's child
    for n in nodes:
        if n.parent is None:
            continue
        if n.is_ancestry:
            n.parent.parents.append(n)
        else:
            n.parent.children.append(n)
