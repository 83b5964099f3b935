import pytest

from familychart_py.generators import (
    BENCHMARK_SIZES,
    GENERATORS,
    generate_balanced_tree,
    generate_complex_tree,
    generate_deep_tree,
    generate_large_flat,
    generate_tree_by_size,
    generate_wide_tree,
)
from familychart_py.validation import validate


@pytest.mark.parametrize("kind", sorted(GENERATORS))
def test_generated_data_is_consistent(kind):
    data = GENERATORS[kind]()
    assert data
    assert validate(data) == []
    ids = [r["id"] for r in data]
    assert len(ids) == len(set(ids))
    assert ids[0] == "person-1"


def test_ids_restart_per_call():
    assert generate_deep_tree(3)[0]["id"] == "person-1"
    assert generate_deep_tree(3)[0]["id"] == "person-1"


def test_deep_tree_counts():
    # two founders, then one child per generation and a spouse for all but the last
    assert len(generate_deep_tree(10)) == 2 + 9 + 8


def test_wide_tree_children_per_couple():
    data = generate_wide_tree(2, 5, 4)
    assert len(data) == 8 + 4 * 5
    founders = [r for r in data if r["data"]["first name"].startswith("Founder-M")]
    assert all(len(f["rels"]["children"]) == 5 for f in founders)


def test_balanced_tree_size():
    assert len(generate_balanced_tree(0)) == 1
    assert len(generate_balanced_tree(5)) == 63


def test_large_flat_size():
    data = generate_large_flat(1000)
    assert len(data) == 1000
    assert sum(1 for r in data if not r["rels"]["parents"]) == 400


def test_complex_tree_has_remarriages():
    data = generate_complex_tree(100)
    assert len(data) == 100
    assert any(len(r["rels"]["spouses"]) > 1 for r in data)


@pytest.mark.parametrize("name", sorted(BENCHMARK_SIZES))
def test_tree_by_size(name):
    data = generate_tree_by_size(BENCHMARK_SIZES[name])
    assert data
    assert validate(data) == []
