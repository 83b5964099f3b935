"""Integrity checks for person datasets.

Checks:
- duplicate ids
- relationship ids that point at no person (dangling)
- gender values outside {M, F}
- links not listed back by the other side (asymmetric)
- more than two parents (only the first two are traversed)
- a person listing itself as a relative
- cycles in parent -> child relationships

Each problem is returned as a `Finding`; nothing here raises for data issues.
"""
from __future__ import annotations
from typing import Any, Dict, Iterable, List

import networkx as nx

from .models import Finding, Person, GENDERS, REL_KEYS, RECIPROCAL
from .normalize import normalize_record


def _as_persons(dataset: Iterable[Any]) -> List[Person]:
    persons = []
    for record in dataset or []:
        if isinstance(record, (dict, Person)):
            persons.append(normalize_record(record))
    return persons


def validate(dataset: Any) -> List[Finding]:
    """Return integrity findings for a store, a list of persons or raw records."""
    if hasattr(dataset, "get_datum") and hasattr(dataset, "validate"):
        return dataset.validate()

    persons = _as_persons(dataset)
    findings: List[Finding] = []

    index: Dict[str, Person] = {}
    for p in persons:
        if not isinstance(p.id, str) or not p.id:
            findings.append(Finding("missing_id", [], "Record without an id"))
            continue
        if p.id in index:
            findings.append(Finding("duplicate_id", [p.id], f"Duplicate id {p.id}"))
            continue
        index[p.id] = p

    for p in index.values():
        gender = p.data.get("gender")
        if gender not in GENDERS:
            findings.append(
                Finding("invalid_gender", [p.id], f"Person {p.id} has invalid gender {gender!r}")
            )
        if len(p.rels.parents) > 2:
            findings.append(
                Finding(
                    "too_many_parents",
                    [p.id, *p.rels.parents],
                    f"Person {p.id} lists {len(p.rels.parents)} parents; only the first two are used",
                )
            )
        for rel in REL_KEYS:
            for other in p.rels.get(rel):
                if other == p.id:
                    findings.append(
                        Finding("self_reference", [p.id], f"Person {p.id} lists itself in {rel}")
                    )
                    continue
                o = index.get(other)
                if o is None:
                    findings.append(
                        Finding("dangling_id", [p.id, other], f"Person {p.id} references missing {rel} id {other}")
                    )
                    continue
                back = RECIPROCAL[rel]
                if p.id not in o.rels.get(back):
                    findings.append(
                        Finding(
                            "asymmetric_relationship",
                            [p.id, other],
                            f"Person {p.id} lists {other} in {rel} but {other} does not list {p.id} in {back}",
                        )
                    )

    findings.extend(_ancestry_cycles(index))
    return findings


def _ancestry_cycles(index: Dict[str, Person]) -> List[Finding]:
    # parent -> child edges from both sides of each link, so one-sided
    # declarations still take part in cycle detection
    G = nx.DiGraph()
    for p in index.values():
        for parent in p.rels.parents:
            if parent in index and parent != p.id:
                G.add_edge(parent, p.id)
        for child in p.rels.children:
            if child in index and child != p.id:
                G.add_edge(p.id, child)

    findings = []
    for component in nx.strongly_connected_components(G):
        if len(component) < 2:
            continue
        ids = sorted(component)
        findings.append(
            Finding("cyclic_ancestry", ids, f"Cycle in parent/child relationships: {ids}")
        )
    return findings
