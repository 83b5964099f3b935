from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple


REL_KEYS = ("parents", "spouses", "children")
# reciprocal list on the other endpoint of a link
RECIPROCAL = {"parents": "children", "children": "parents", "spouses": "spouses"}
GENDERS = ("M", "F")


@dataclass
class Rels:
    parents: List[str] = field(default_factory=list)
    spouses: List[str] = field(default_factory=list)
    children: List[str] = field(default_factory=list)

    def get(self, rel: str) -> List[str]:
        return getattr(self, rel)

    def all_ids(self) -> List[str]:
        return [*self.parents, *self.spouses, *self.children]

    def to_dict(self, keys: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        """All three lists, or only `keys` plus any list that is not empty."""
        if keys is None:
            return {"parents": list(self.parents), "spouses": list(self.spouses), "children": list(self.children)}
        keys = set(keys)
        return {k: list(self.get(k)) for k in REL_KEYS if k in keys or self.get(k)}

    @staticmethod
    def from_dict(d: Any) -> "Rels":
        if not isinstance(d, dict):
            return Rels()
        return Rels(
            parents=_id_list(d.get("parents")),
            spouses=_id_list(d.get("spouses")),
            children=_id_list(d.get("children")),
        )


def _id_list(value: Any) -> List[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [v for v in value if isinstance(v, str) and v]


@dataclass
class Person:
    id: str
    data: Dict[str, Any] = field(default_factory=dict)
    rels: Rels = field(default_factory=Rels)
    # original rels.father / rels.mother values when loaded from the legacy shape
    legacy: Optional[Dict[str, Any]] = None
    # unknown top-level keys of the source record, kept for export
    extra: Dict[str, Any] = field(default_factory=dict)
    # rels keys present in the source record; None writes all three on export
    rel_keys: Optional[Tuple[str, ...]] = None

    @property
    def gender(self) -> Optional[str]:
        return self.data.get("gender")

    @property
    def is_legacy(self) -> bool:
        return self.legacy is not None

    def to_dict(self, all_rels: bool = False) -> Dict[str, Any]:
        """Record dict; `rels` keys follow the source record unless `all_rels`."""
        rels = self.rels.to_dict(None if all_rels else self.rel_keys)
        d: Dict[str, Any] = {"id": self.id, "data": dict(self.data), "rels": rels}
        d.update(self.extra)
        return d

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "Person":
        """Build a current-shape person. Legacy records go through `normalize`."""
        extra = {k: v for k, v in d.items() if k not in ("id", "data", "rels")}
        data = d.get("data")
        rels = d.get("rels")
        return Person(
            id=d.get("id"),
            data=dict(data) if isinstance(data, dict) else {},
            rels=Rels.from_dict(rels),
            extra=extra,
            rel_keys=tuple(k for k in REL_KEYS if k in rels) if isinstance(rels, dict) else (),
        )


@dataclass(eq=False)
class TreeNode:
    """A person placed in one computed tree.

    Nodes are created by `hierarchy.calculate_tree` and belong to that call only.
    Equality is identity so nodes can be used as dict keys.
    """

    data: Person
    depth: int = 0
    is_ancestry: bool = False
    main: bool = False
    tid: int = 0
    spouse: Optional["TreeNode"] = None
    parent: Optional["TreeNode"] = None
    sibling: bool = False
    parents: List["TreeNode"] = field(default_factory=list)
    children: List["TreeNode"] = field(default_factory=list)
    spouses: List["TreeNode"] = field(default_factory=list)
    all_rels_displayed: bool = False

    @property
    def id(self) -> str:
        return self.data.id

    def __repr__(self) -> str:
        side = "ancestry" if self.is_ancestry else "progeny"
        return f"TreeNode({self.id!r}, depth={self.depth}, {side}, tid={self.tid})"


@dataclass
class Tree:
    main_node: TreeNode
    nodes: List[TreeNode]
    max_ancestry_depth: int = 0
    _by_id: Dict[str, TreeNode] = field(default_factory=dict, repr=False)

    @property
    def main_id(self) -> str:
        return self.main_node.id

    def get_node(self, pid: str) -> Optional[TreeNode]:
        if not self._by_id:
            self._by_id = {n.id: n for n in self.nodes}
        return self._by_id.get(pid)

    def ids(self) -> List[str]:
        return [n.id for n in self.nodes]

    def __len__(self) -> int:
        return len(self.nodes)


@dataclass
class Finding:
    kind: str
    ids: List[str]
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "ids": list(self.ids), "message": self.message}
