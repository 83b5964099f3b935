import sys
from pathlib import Path

import pytest

# Ensure repo root is on sys.path so tests can import the package directly
root = Path(__file__).resolve().parent.parent
if str(root) not in sys.path:
    sys.path.insert(0, str(root))


def _record(pid, gender, parents=(), spouses=(), children=(), **data):
    return {
        "id": pid,
        "data": {"gender": gender, "first name": pid, **data},
        "rels": {"parents": list(parents), "spouses": list(spouses), "children": list(children)},
    }


@pytest.fixture
def make_record():
    return _record


@pytest.fixture
def family_records():
    """A-spouse-B with child C; C-spouse-D with child E."""
    return [
        _record("A", "M", spouses=["B"], children=["C"]),
        _record("B", "F", spouses=["A"], children=["C"]),
        _record("C", "M", parents=["A", "B"], spouses=["D"], children=["E"]),
        _record("D", "F", spouses=["C"], children=["E"]),
        _record("E", "F", parents=["C", "D"]),
    ]


@pytest.fixture
def remarriage_records():
    """P married S1 then S2; children from both marriages plus one with no second parent."""
    return [
        _record("P", "M", spouses=["S1", "S2"], children=["k2a", "k1a", "solo", "k2b", "k1b"]),
        _record("S1", "F", spouses=["P"], children=["k1a", "k1b"]),
        _record("S2", "F", spouses=["P"], children=["k2a", "k2b"]),
        _record("k1a", "M", parents=["P", "S1"]),
        _record("k1b", "F", parents=["S1", "P"]),
        _record("k2a", "M", parents=["P", "S2"]),
        _record("k2b", "F", parents=["P", "S2"]),
        _record("solo", "M", parents=["P"]),
    ]
