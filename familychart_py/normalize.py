"""Legacy relationship-shape normalization.

Older datasets store a person's parents as two singular fields,
``rels.father`` and ``rels.mother``. The current shape uses an ordered
``rels.parents`` list. Loading converts legacy records to the current shape
and keeps the original father/mother values on the person so `export_person`
can write the record back in the shape it came in.

API:
    is_legacy_record(record) -> bool
    normalize_record(record) -> Person
    normalize_to_current(dataset) -> List[Person]
    dataset_shape(persons) -> "current" | "legacy"
    export_person(person) -> dict
    export_dataset(persons) -> List[dict]

Normalization never fails: legacy fields that are not non-empty strings are
treated as absent.
"""
from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional
import logging

from .models import Person, Rels

LEGACY_KEYS = ("father", "mother")


def is_legacy_record(record: Dict[str, Any]) -> bool:
    rels = record.get("rels")
    if not isinstance(rels, dict):
        return False
    return "parents" not in rels and any(k in rels for k in LEGACY_KEYS)


def _valid_id(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def normalize_record(record: Any) -> Person:
    if isinstance(record, Person):
        return record
    person = Person.from_dict(record)
    if not is_legacy_record(record):
        return person
    rels = record["rels"]
    legacy = {k: rels[k] for k in LEGACY_KEYS if k in rels}
    parents = [pid for pid in (_valid_id(legacy.get("father")), _valid_id(legacy.get("mother"))) if pid]
    person.rels = Rels(parents=parents, spouses=person.rels.spouses, children=person.rels.children)
    person.legacy = legacy
    return person


def normalize_to_current(dataset: Iterable[Any]) -> List[Person]:
    """Return persons in the current shape. Records without an id are skipped."""
    persons: List[Person] = []
    n_legacy = 0
    for record in dataset or []:
        if not isinstance(record, (dict, Person)):
            logging.debug("normalize: skipping non-record entry %r", record)
            continue
        p = normalize_record(record)
        if not isinstance(p.id, str) or not p.id:
            logging.debug("normalize: skipping record without id")
            continue
        if p.is_legacy:
            n_legacy += 1
        persons.append(p)
    if n_legacy:
        logging.info("normalize: converted %d legacy record(s) to the parents shape", n_legacy)
    return persons


def dataset_shape(persons: Iterable[Person]) -> str:
    return "legacy" if any(p.is_legacy for p in persons) else "current"


def _legacy_rels(person: Person) -> Dict[str, Any]:
    legacy = person.legacy or {}
    parsed = [pid for pid in (_valid_id(legacy.get("father")), _valid_id(legacy.get("mother"))) if pid]
    if parsed == list(person.rels.parents):
        # unchanged since load: reproduce the original values verbatim
        out: Dict[str, Any] = dict(legacy)
    else:
        # parents were edited; keep recorded roles, fill the rest in list order
        out = {}
        roles = {legacy.get(k): k for k in LEGACY_KEYS if _valid_id(legacy.get(k))}
        for pid in person.rels.parents[:2]:
            role = roles.get(pid)
            if role is None or role in out:
                role = "father" if "father" not in out else "mother"
            out[role] = pid
    rest = person.rels.to_dict(person.rel_keys)
    rest.pop("parents", None)
    out.update(rest)
    return out


def export_person(person: Person) -> Dict[str, Any]:
    d = person.to_dict()
    if person.is_legacy:
        d["rels"] = _legacy_rels(person)
    return d


def export_dataset(persons: Iterable[Person]) -> List[Dict[str, Any]]:
    return [export_person(p) for p in persons]
