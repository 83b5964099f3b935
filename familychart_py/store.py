"""In-memory relational store for person records.

The store owns the person collection and keeps an id -> Person dict as its
single authoritative index. The dict preserves insertion order, so it doubles
as the ordered person array; lookups are O(1) and every mutation updates the
index in place (no rebuild by scanning).

All relationship mutations funnel through `link` / `unlink`, which update
both endpoints together (parents <-> children, spouses <-> spouses). Loaded
data is never repaired: asymmetric or dangling references found in a dataset
stay as they are and are reported by `validate`.
"""
from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set
import copy
import logging

from .errors import NotFound
from .fs import json_load, json_save
from .models import Finding, Person, Rels, REL_KEYS, RECIPROCAL
from .normalize import normalize_to_current, dataset_shape, export_dataset
from . import validation


class Store:
    def __init__(self, data: Optional[Iterable[Any]] = None) -> None:
        self._index: Dict[str, Person] = {}
        self._load_findings: List[Finding] = []
        # id -> ids of persons whose rels may list it (superset; checked on removal)
        self._referrers: Dict[str, Set[str]] = {}
        persons = normalize_to_current(data or [])
        for p in persons:
            if p.id in self._index:
                self._load_findings.append(
                    Finding("duplicate_id", [p.id], f"Duplicate id {p.id}: later record ignored")
                )
                continue
            self._index[p.id] = p
            for other in p.rels.all_ids():
                self._ref(p.id, other)
        self.shape = dataset_shape(self._index.values())
        logging.debug("store loaded %d person(s), shape=%s", len(self._index), self.shape)

    @classmethod
    def from_file(cls, path: Path) -> "Store":
        data = json_load(Path(path), default=[])
        if isinstance(data, dict):
            # accept {"data": [...]} wrappers as written by some exporters
            data = data.get("data", [])
        return cls(data)

    def save(self, path: Path) -> None:
        json_save(Path(path), self.export())

    # Lookup
    def get_datum(self, pid: str) -> Optional[Person]:
        return self._index.get(pid)

    def require(self, pid: str) -> Person:
        p = self._index.get(pid)
        if p is None:
            raise NotFound(pid)
        return p

    @property
    def data(self) -> List[Person]:
        return list(self._index.values())

    def ids(self) -> List[str]:
        return list(self._index.keys())

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, pid: object) -> bool:
        return pid in self._index

    def __iter__(self):
        return iter(self._index.values())

    # Links
    def link(self, a_id: str, rel: str, b_id: str) -> None:
        """Record `b_id` in `a_id`'s `rel` list and the reciprocal on `b_id`."""
        if rel not in RECIPROCAL:
            raise ValueError(f"Unknown relation {rel!r}; expected one of {REL_KEYS}")
        if a_id == b_id:
            raise ValueError(f"Cannot link {a_id} to itself")
        a = self.require(a_id)
        b = self.require(b_id)
        a_list = a.rels.get(rel)
        if b_id not in a_list:
            a_list.append(b_id)
        b_list = b.rels.get(RECIPROCAL[rel])
        if a_id not in b_list:
            b_list.append(a_id)
        self._ref(a_id, b_id)
        self._ref(b_id, a_id)

    def unlink(self, a_id: str, rel: str, b_id: str) -> None:
        if rel not in RECIPROCAL:
            raise ValueError(f"Unknown relation {rel!r}; expected one of {REL_KEYS}")
        a = self.require(a_id)
        b = self.require(b_id)
        _discard(a.rels.get(rel), b_id)
        _discard(b.rels.get(RECIPROCAL[rel]), a_id)

    def link_spouses(self, a_id: str, b_id: str) -> None:
        self.link(a_id, "spouses", b_id)

    def link_child(self, child_id: str, *parent_ids: str) -> None:
        for pid in parent_ids:
            self.link(child_id, "parents", pid)

    # Mutations
    def add_datum(self, person: Any) -> Person:
        """Insert a person and add reciprocal links on relatives already in the store."""
        persons = normalize_to_current([person])
        if not persons:
            raise ValueError("Person id is required")
        p = persons[0]
        if p.id in self._index:
            raise ValueError(f"Person {p.id} already exists")
        wanted = p.rels
        p.rels = Rels()
        self._index[p.id] = p
        for rel in REL_KEYS:
            for other in wanted.get(rel):
                if other in self._index and other != p.id:
                    self.link(p.id, rel, other)
                else:
                    # dangling reference kept as given; validate() reports it
                    p.rels.get(rel).append(other)
                    self._ref(p.id, other)
        if p.is_legacy:
            self.shape = "legacy"
        return p

    def update_datum(self, person: Person) -> Person:
        """Replace a person's data and reconcile its relationship lists by diff."""
        current = self.require(person.id)
        current.data = dict(person.data)
        current.extra = dict(person.extra)
        for rel in REL_KEYS:
            old = list(current.rels.get(rel))
            new = list(person.rels.get(rel))
            for other in old:
                if other not in new:
                    if other in self._index:
                        self.unlink(current.id, rel, other)
                    else:
                        _discard(current.rels.get(rel), other)
            for other in new:
                if other in old:
                    continue
                if other in self._index and other != current.id:
                    self.link(current.id, rel, other)
                else:
                    current.rels.get(rel).append(other)
                    self._ref(current.id, other)
            # keep the caller's declared order (spouse order drives child grouping)
            order = {pid: i for i, pid in enumerate(new)}
            current.rels.get(rel).sort(key=lambda pid: order.get(pid, len(order)))
        return current

    def remove_datum(self, pid: str) -> bool:
        p = self._index.get(pid)
        if p is None:
            return False
        # incoming references, including one-sided ones from loaded data
        for other in self._referrers.pop(pid, set()) | set(p.rels.all_ids()):
            o = self._index.get(other)
            if o is None or other == pid:
                continue
            for rel in REL_KEYS:
                _discard(o.rels.get(rel), pid)
        del self._index[pid]
        logging.debug("store: removed %s", pid)
        return True

    # Export / integrity
    def export(self) -> List[Dict[str, Any]]:
        return export_dataset(self._index.values())

    def snapshot(self) -> "Store":
        """Deep copy, for callers that keep mutating while a tree is in use."""
        s = Store()
        s._index = copy.deepcopy(self._index)
        s._load_findings = list(self._load_findings)
        s._referrers = {k: set(v) for k, v in self._referrers.items()}
        s.shape = self.shape
        return s

    def validate(self) -> List[Finding]:
        return list(self._load_findings) + validation.validate(self.data)

    def _ref(self, owner: str, target: str) -> None:
        self._referrers.setdefault(target, set()).add(owner)


def _discard(lst: List[str], pid: str) -> None:
    while pid in lst:
        lst.remove(pid)
