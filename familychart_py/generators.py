"""Synthetic family datasets for tests and benchmarks.

Every generator returns a list of current-shape person records (dicts) whose
links are bidirectionally consistent. Ids are ``person-1``, ``person-2``, ...
in creation order, restarting at 1 for each call.

Shapes:
- deep: one couple per generation, a single line of descent
- wide: a few couples per generation, many children each
- complex: a pool of people with couples, children and remarriages
- balanced: a full binary ancestry tree above one root person
- flat: many unrelated two-parent, three-child families
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional, Tuple
import itertools
import math

Record = Dict[str, Any]

BENCHMARK_SIZES = {
    "tiny": 10,
    "small": 50,
    "medium": 200,
    "large": 500,
    "xlarge": 1000,
    "xxlarge": 2000,
}


class _Builder:
    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self.data: List[Record] = []

    def person(self, gender: str, name: Optional[str] = None) -> Record:
        pid = f"person-{next(self._ids)}"
        rec = {
            "id": pid,
            "data": {"gender": gender, "first name": name or f"Person {pid}"},
            "rels": {"parents": [], "spouses": [], "children": []},
        }
        self.data.append(rec)
        return rec

    @staticmethod
    def spouses(a: Record, b: Record) -> None:
        if b["id"] not in a["rels"]["spouses"]:
            a["rels"]["spouses"].append(b["id"])
        if a["id"] not in b["rels"]["spouses"]:
            b["rels"]["spouses"].append(a["id"])

    @staticmethod
    def child(child: Record, *parents: Record) -> None:
        for p in parents:
            if child["id"] not in p["rels"]["children"]:
                p["rels"]["children"].append(child["id"])
            if p["id"] not in child["rels"]["parents"]:
                child["rels"]["parents"].append(p["id"])


def generate_deep_tree(generations: int = 10) -> List[Record]:
    b = _Builder()
    male = b.person("M", "Patriarch")
    female = b.person("F", "Matriarch")
    b.spouses(male, female)

    for gen in range(1, generations):
        child = b.person("M" if gen % 2 == 0 else "F", f"Gen{gen}")
        b.child(child, male, female)
        if gen < generations - 1:
            spouse = b.person("F" if gen % 2 == 0 else "M", f"Spouse-Gen{gen}")
            b.spouses(child, spouse)
            male, female = (child, spouse) if gen % 2 == 0 else (spouse, child)
    return b.data


def generate_wide_tree(generations: int = 3, children_per_couple: int = 5, couples_per_generation: int = 4) -> List[Record]:
    b = _Builder()
    couples: List[Tuple[Record, Record]] = []
    for c in range(couples_per_generation):
        male = b.person("M", f"Founder-M-{c}")
        female = b.person("F", f"Founder-F-{c}")
        b.spouses(male, female)
        couples.append((male, female))

    for gen in range(1, generations):
        next_couples: List[Tuple[Record, Record]] = []
        for father, mother in couples:
            for i in range(children_per_couple):
                gender = "M" if i % 2 == 0 else "F"
                child = b.person(gender, f"Gen{gen}-Child{i}")
                b.child(child, father, mother)
                if gen < generations - 1 and i < couples_per_generation:
                    spouse = b.person("F" if gender == "M" else "M", f"Gen{gen}-Spouse{i}")
                    b.spouses(child, spouse)
                    next_couples.append((child, spouse) if gender == "M" else (spouse, child))
        couples = next_couples[:couples_per_generation]
    return b.data


def generate_complex_tree(size: int = 100) -> List[Record]:
    """Couples, shared children and a handful of second marriages."""
    b = _Builder()
    for i in range(size):
        b.person("M" if i % 2 == 0 else "F", f"Person-{i}")
    older = b.data[: size // 2]
    younger = b.data[size // 2:]

    n_couples = len(older) // 2
    child_count = min(3, len(younger) // n_couples) if n_couples else 0
    for i in range(0, len(older) - 1, 2):
        p1, p2 = older[i], older[i + 1]
        if p1["data"]["gender"] == p2["data"]["gender"]:
            continue
        b.spouses(p1, p2)
        for c in range(child_count):
            idx = (i // 2) * child_count + c
            if idx < len(younger):
                b.child(younger[idx], p1, p2)

    for i in range(math.ceil(min(5, len(older) / 4))):
        idx = i * 4
        if idx + 3 < len(older):
            person, new_spouse = older[idx], older[idx + 3]
            if person["data"]["gender"] != new_spouse["data"]["gender"]:
                b.spouses(person, new_spouse)
    return b.data


def generate_balanced_tree(depth: int = 5) -> List[Record]:
    """Root person plus `depth` full generations of ancestors (2**(depth+1) - 1 people)."""
    b = _Builder()
    root = b.person("M", "Root")
    stack = [(root, 0)]
    while stack:
        person, level = stack.pop()
        if level >= depth:
            continue
        father = b.person("M", f"Father-D{level}")
        mother = b.person("F", f"Mother-D{level}")
        b.spouses(father, mother)
        b.child(person, father, mother)
        # mother pushed first so the father's line is generated first
        stack.append((mother, level + 1))
        stack.append((father, level + 1))
    return b.data


def generate_large_flat(count: int = 1000) -> List[Record]:
    b = _Builder()
    for f in range(count // 5):
        father = b.person("M", f"Family{f}-Father")
        mother = b.person("F", f"Family{f}-Mother")
        b.spouses(father, mother)
        for c in range(3):
            child = b.person("M" if c % 2 == 0 else "F", f"Family{f}-Child{c}")
            b.child(child, father, mother)
    return b.data


def generate_tree_by_size(target_size: int) -> List[Record]:
    if target_size <= 20:
        return generate_deep_tree(math.ceil(target_size / 2))
    if target_size <= 100:
        return generate_wide_tree(4, 5, 3)
    if target_size <= 500:
        return generate_complex_tree(target_size)
    return generate_large_flat(target_size)


GENERATORS = {
    "deep": generate_deep_tree,
    "wide": generate_wide_tree,
    "complex": generate_complex_tree,
    "balanced": generate_balanced_tree,
    "flat": generate_large_flat,
}
