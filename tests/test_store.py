import random

import pytest

from familychart_py.errors import NotFound
from familychart_py.models import Person, Rels
from familychart_py.store import Store


def test_get_datum(family_records):
    st = Store(family_records)
    assert st.get_datum("C").data["first name"] == "C"
    assert st.get_datum("nope") is None
    assert len(st) == 5
    assert "A" in st
    assert st.ids() == ["A", "B", "C", "D", "E"]


def test_duplicate_ids_keep_first_and_are_reported(make_record):
    st = Store([make_record("1", "M"), make_record("1", "F")])
    assert len(st) == 1
    assert st.get_datum("1").gender == "M"
    kinds = [f.kind for f in st.validate()]
    assert "duplicate_id" in kinds


def test_add_datum_links_back_existing_relatives(family_records, make_record):
    st = Store(family_records)
    st.add_datum(make_record("F", "M", parents=["C", "D"], spouses=["ghost"]))
    assert "F" in st.get_datum("C").rels.children
    assert "F" in st.get_datum("D").rels.children
    # dangling id kept, not invented on the other side
    assert st.get_datum("F").rels.spouses == ["ghost"]
    assert st.get_datum("ghost") is None


def test_add_datum_rejects_existing_or_missing_id(family_records):
    st = Store(family_records)
    with pytest.raises(ValueError):
        st.add_datum({"id": "A", "data": {"gender": "M"}, "rels": {}})
    with pytest.raises(ValueError):
        st.add_datum({"data": {"gender": "M"}})


def test_add_legacy_record_marks_shape(family_records):
    st = Store(family_records)
    assert st.shape == "current"
    st.add_datum({"id": "G", "data": {"gender": "M"}, "rels": {"father": "E", "spouses": [], "children": []}})
    assert st.shape == "legacy"
    assert st.get_datum("G").rels.parents == ["E"]
    assert "G" in st.get_datum("E").rels.children


def test_remove_datum_unlinks_everywhere(family_records):
    st = Store(family_records)
    assert st.remove_datum("C")
    assert st.get_datum("C") is None
    assert "C" not in st.get_datum("A").rels.children
    assert "C" not in st.get_datum("B").rels.children
    assert "C" not in st.get_datum("D").rels.spouses
    assert "C" not in st.get_datum("E").rels.parents
    assert not st.remove_datum("C")


def test_update_datum_reconciles_links(family_records):
    st = Store(family_records)
    d = st.get_datum("D")
    updated = Person(id="D", data={"gender": "F", "first name": "Dana"}, rels=Rels(spouses=[], children=["E", "A"]))
    st.update_datum(updated)
    assert st.get_datum("D").data["first name"] == "Dana"
    assert st.get_datum("D") is d
    assert "D" not in st.get_datum("C").rels.spouses
    assert "D" in st.get_datum("A").rels.parents
    assert st.get_datum("D").rels.children == ["E", "A"]


def test_update_datum_keeps_declared_spouse_order(remarriage_records):
    st = Store(remarriage_records)
    p = st.get_datum("P")
    st.update_datum(Person(id="P", data=p.data, rels=Rels(spouses=["S2", "S1"], children=list(p.rels.children))))
    assert st.get_datum("P").rels.spouses == ["S2", "S1"]


def test_update_unknown_raises():
    st = Store()
    with pytest.raises(NotFound):
        st.update_datum(Person(id="x"))


def test_link_and_unlink_update_both_sides(make_record):
    st = Store([make_record("a", "M"), make_record("b", "F"), make_record("c", "M")])
    st.link_spouses("a", "b")
    st.link_child("c", "a", "b")
    st.link("a", "spouses", "b")  # idempotent
    assert st.get_datum("a").rels.spouses == ["b"]
    assert st.get_datum("b").rels.spouses == ["a"]
    assert st.get_datum("c").rels.parents == ["a", "b"]
    assert st.get_datum("b").rels.children == ["c"]
    st.unlink("a", "children", "c")
    assert st.get_datum("c").rels.parents == ["b"]
    assert st.get_datum("a").rels.children == []
    with pytest.raises(ValueError):
        st.link("a", "cousins", "b")
    with pytest.raises(ValueError):
        st.link("a", "spouses", "a")
    with pytest.raises(NotFound):
        st.link("a", "spouses", "zz")


def test_index_integrity_after_random_mutations(make_record):
    rng = random.Random(7)
    st = Store()
    alive = set()
    for i in range(300):
        op = rng.random()
        if op < 0.6 or not alive:
            pid = f"p{i}"
            rels = [x for x in rng.sample(sorted(alive), min(2, len(alive)))]
            st.add_datum(make_record(pid, rng.choice("MF"), spouses=rels))
            alive.add(pid)
        elif op < 0.8:
            pid = rng.choice(sorted(alive))
            assert st.remove_datum(pid)
            alive.discard(pid)
        else:
            pid = rng.choice(sorted(alive))
            p = st.get_datum(pid)
            st.update_datum(Person(id=pid, data={"gender": "F"}, rels=Rels(spouses=p.rels.spouses[:1])))
        for q in alive:
            assert st.get_datum(q).id == q
    assert set(st.ids()) == alive
    assert [f for f in st.validate() if f.kind in ("dangling_id", "asymmetric_relationship")] == []


def test_export_and_file_round_trip(tmp_path, family_records):
    st = Store(family_records)
    path = tmp_path / "out" / "tree.json"
    st.save(path)
    again = Store.from_file(path)
    assert again.export() == family_records


def test_from_file_accepts_wrapper_and_missing_file(tmp_path, family_records):
    import json

    p = tmp_path / "wrapped.json"
    p.write_text(json.dumps({"data": family_records}))
    assert len(Store.from_file(p)) == 5
    assert len(Store.from_file(tmp_path / "none.json")) == 0


def test_snapshot_is_independent(family_records):
    st = Store(family_records)
    snap = st.snapshot()
    st.remove_datum("E")
    assert snap.get_datum("E") is not None
    assert "E" in snap.get_datum("C").rels.children


def test_malformed_rels_do_not_break_loading(make_record):
    st = Store([{"id": "a", "data": {"gender": "M"}, "rels": ["b"]}, make_record("b", "F")])
    assert len(st) == 2
    assert st.get_datum("a").rels.all_ids() == []
    assert st.validate() == []


def test_remove_clears_one_sided_references(make_record):
    st = Store([
        make_record("a", "M", spouses=["b"], children=["c"]),
        make_record("b", "F"),
        make_record("c", "M"),
    ])
    assert st.remove_datum("b")
    assert st.get_datum("a").rels.spouses == []
    assert st.remove_datum("c")
    assert st.get_datum("a").rels.children == []


def test_remove_clears_reference_to_person_added_later(make_record):
    st = Store([make_record("a", "M", spouses=["late"])])
    st.add_datum(make_record("late", "F"))
    assert st.get_datum("a").rels.spouses == ["late"]
    st.remove_datum("late")
    assert st.get_datum("a").rels.spouses == []


def test_minimal_records_save_unchanged(tmp_path):
    recs = [
        {"id": "c", "data": {"gender": "M"}, "rels": {"father": "f"}},
        {"id": "f", "data": {"gender": "M"}, "rels": {"children": ["c"]}},
    ]
    path = tmp_path / "min.json"
    Store(recs).save(path)
    assert Store.from_file(path).export() == recs
