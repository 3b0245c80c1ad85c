import itertools
import pytest
from roster_cache.models import Record, SignedUrlEntry
from roster_cache.ordering import find_heads, move, reconstruct, relink


def chain(*ids):
    return relink([Record(id=i) for i in ids])


def ids(records):
    return [r.id for r in records]


def test_reconstruct_any_input_order():
    a = Record(id="A", next_id="B")
    b = Record(id="B", prev_id="A", next_id="C")
    c = Record(id="C", prev_id="B")
    for perm in itertools.permutations([a, b, c]):
        assert ids(reconstruct(list(perm))) == ["A", "B", "C"]


def test_reconstruct_empty():
    assert reconstruct([]) == []


def test_reconstruct_single():
    assert ids(reconstruct([Record(id="solo")])) == ["solo"]


def test_dangling_next_returns_partial(caplog):
    caplog.set_level("WARNING")
    assert ids(reconstruct([Record(id="A", next_id="missing")])) == ["A"]
    assert "dangling" in caplog.text


def test_no_head_returns_empty():
    a = Record(id="A", prev_id="B", next_id="B")
    b = Record(id="B", prev_id="A", next_id="A")
    assert reconstruct([a, b]) == []


def test_cycle_after_head_stops():
    a = Record(id="A", next_id="B")
    b = Record(id="B", prev_id="A", next_id="C")
    c = Record(id="C", prev_id="B", next_id="B")
    assert ids(reconstruct([c, b, a])) == ["A", "B", "C"]


def test_self_loop_stops():
    assert ids(reconstruct([Record(id="A", next_id="A")])) == ["A"]


def test_multiple_heads_follow_first_found(caplog):
    caplog.set_level("WARNING")
    records = [
        Record(id="X"),
        Record(id="A", next_id="B"),
        Record(id="B", prev_id="A"),
    ]
    assert ids(reconstruct(records)) == ["X"]
    assert ids(reconstruct(records[1:] + records[:1])) == ["A", "B"]
    assert "2 heads" in caplog.text


def test_duplicate_ids_first_wins():
    first = Record(id="B", prev_id="A", extra={"v": 1})
    second = Record(id="B", prev_id="A", extra={"v": 2})
    out = reconstruct([Record(id="A", next_id="B"), first, second])
    assert out[1].extra == {"v": 1}


def test_reconstruct_is_deterministic():
    records = chain("a", "b", "c", "d")[::-1] + [Record(id="stray", prev_id="nowhere")]
    assert reconstruct(records) == reconstruct(list(records))


def test_find_heads():
    records = [Record(id="A"), Record(id="B", prev_id="A"), Record(id="C")]
    assert ids(find_heads(records)) == ["A", "C"]


def test_relink_sets_pointers():
    out = relink([Record(id="c", prev_id="x", next_id="y"), Record(id="a"), Record(id="b")])
    assert [(r.prev_id, r.id, r.next_id) for r in out] == [
        (None, "c", "a"),
        ("c", "a", "b"),
        ("a", "b", None),
    ]


def test_relink_does_not_mutate_input():
    entry = SignedUrlEntry(url="https://a", expires_at=1)
    original = [
        Record(id="a", next_id="z", images=["a/1.png"], signed_urls={"a/1.png": entry}, extra={"name": "A"}),
        Record(id="b"),
    ]
    out = relink(original)
    assert original[0].next_id == "z"
    assert original[1].prev_id is None

    out[0].extra["name"] = "changed"
    out[0].images.append("a/2.png")
    out[0].signed_urls.clear()
    assert original[0].extra == {"name": "A"}
    assert original[0].images == ["a/1.png"]
    assert original[0].signed_urls == {"a/1.png": entry}


def test_relink_edges():
    assert relink([]) == []
    (only,) = relink([Record(id="a", prev_id="p", next_id="n")])
    assert only.prev_id is None and only.next_id is None


@pytest.mark.parametrize("seq", [[], ["a"], ["a", "b"], ["e", "d", "c", "b", "a"], list("qwertyuiop")])
def test_relink_reconstruct_inverse(seq):
    records = [Record(id=i, prev_id="junk", next_id="junk") for i in seq]
    assert ids(reconstruct(relink(records))) == seq


def test_move():
    assert move(["a", "b", "c", "d"], 0, 2) == ["b", "c", "a", "d"]
    assert move(["a", "b", "c", "d"], 3, 0) == ["d", "a", "b", "c"]
    assert move(["a", "b"], 1, 1) == ["a", "b"]
    with pytest.raises(IndexError):
        move(["a"], 3, 0)
