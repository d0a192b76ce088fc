import random

import pytest

from nutkv.ds.zset import GetByScoreRangeOptions, SortedSet


@pytest.fixture
def ss():
    s = SortedSet()
    s.put("key1", 1, b"a")
    s.put("key2", 10, b"b")
    s.put("key3", 99.9, b"c")
    s.put("key4", 100, b"d")
    s.put("key5", 100, b"b1")
    return s


def test_put_and_update(ss):
    assert ss.size() == 5
    ss.put("key5", 100, b"b2")
    assert ss.get_by_key("key5").value == b"b2"
    assert ss.size() == 5
    ss.put("key5", 91, b"b2")
    assert ss.get_by_key("key5").score() == 91
    assert ss.size() == 5
    assert [n.key() for n in ss] == ["key1", "key2", "key5", "key3", "key4"]


def test_get_by_key(ss):
    assert ss.get_by_key("key1").value == b"a"
    assert ss.get_by_key("missing") is None


def test_get_by_rank(ss):
    assert ss.get_by_rank(1, False).value == b"a"
    assert ss.get_by_rank(4, False).value == b"d"
    assert ss.get_by_rank(5, False).value == b"b1"
    assert ss.size() == 5
    assert ss.get_by_rank(5, True).value == b"b1"
    assert ss.size() == 4
    assert ss.get_by_rank(-1, False).key() == "key4"
    assert ss.get_by_rank(-3, False).key() == "key2"


@pytest.mark.parametrize(
    "start,end,want",
    [
        (1, 2, ["key1", "key2"]),
        (-1, -2, ["key5", "key4"]),
        (-2, -1, ["key4", "key5"]),
        (-1, 1, ["key5", "key4", "key3", "key2", "key1"]),
        (1, -1, ["key1", "key2", "key3", "key4", "key5"]),
    ],
)
def test_get_by_rank_range(ss, start, end, want):
    assert [n.key() for n in ss.get_by_rank_range(start, end, False)] == want


def test_get_by_rank_range_remove(ss):
    removed = ss.get_by_rank_range(2, 3, True)
    assert [n.key() for n in removed] == ["key2", "key3"]
    assert ss.size() == 3
    assert [n.key() for n in ss] == ["key1", "key4", "key5"]
    assert sorted(ss.by_key) == ["key1", "key4", "key5"]
    assert ss.find_rank("key5") == 3


def test_find_rank():
    s = SortedSet()
    s.put("key0", 0, b"a0")
    assert s.find_rank("key1") == 0


def test_find_rank_data(ss):
    assert ss.find_rank("key1") == 1
    assert ss.find_rank("key4") == 4
    assert ss.find_rank("key5") == 5


def test_find_rev_rank():
    s = SortedSet()
    assert s.find_rev_rank("key1") == 0
    s.put("key0", 0, b"a0")
    assert s.find_rev_rank("key1") == 0


def test_find_rev_rank_data(ss):
    assert ss.find_rev_rank("key1") == 5
    assert ss.find_rev_rank("key2") == 4
    assert ss.find_rev_rank("key3") == 3
    assert ss.find_rev_rank("key5") == 1


@pytest.mark.parametrize(
    "start,end,options,want",
    [
        (90, 100, None, ["key5", "key4", "key3"]),
        (90, 100, GetByScoreRangeOptions(exclude_end=True), ["key3"]),
        (10, 100, GetByScoreRangeOptions(exclude_start=True), ["key5", "key4", "key3"]),
        (
            10,
            100,
            GetByScoreRangeOptions(exclude_start=True, exclude_end=True),
            ["key3"],
        ),
        (10, 100, GetByScoreRangeOptions(limit=3), ["key2", "key3", "key4"]),
        (100, 99.999, None, ["key4", "key5"]),
        (100, 99.9, GetByScoreRangeOptions(exclude_end=True), ["key5", "key4"]),
        (100, 99.9, GetByScoreRangeOptions(exclude_start=True), ["key3"]),
    ],
)
def test_get_by_score_range(ss, start, end, options, want):
    got = [n.key() for n in ss.get_by_score_range(start, end, options)]
    assert sorted(got) == sorted(want)


def test_get_by_score_range_order(ss):
    assert [n.key() for n in ss.get_by_score_range(1, 100)] == [
        "key1",
        "key2",
        "key3",
        "key4",
        "key5",
    ]
    assert [n.key() for n in ss.get_by_score_range(100, 1)] == [
        "key5",
        "key4",
        "key3",
        "key2",
        "key1",
    ]


def test_get_by_score_range_below_all_reverse(ss):
    assert ss.get_by_score_range(0, -5) == []


def test_peek_max(ss):
    n = ss.peek_max()
    assert n.key() == "key5"
    assert n.score() == 100


def test_peek_min(ss):
    assert ss.peek_min().key() == "key1"


def test_pop_min(ss):
    assert ss.pop_min().key() == "key1"
    assert set(ss.by_key) == {"key2", "key3", "key4", "key5"}
    assert ss.size() == 4


def test_pop_max(ss):
    assert ss.pop_max().key() == "key5"
    assert set(ss.by_key) == {"key1", "key2", "key3", "key4"}
    assert ss.peek_max().key() == "key4"


def test_remove(ss):
    removed = ss.remove("key1")
    assert removed.key() == "key1"
    assert set(ss.by_key) == {"key2", "key3", "key4", "key5"}
    assert ss.remove("key1") is None


def test_size(ss):
    assert ss.size() == 5
    assert len(ss) == 5


def test_empty_set():
    s = SortedSet()
    assert s.peek_min() is None
    assert s.peek_max() is None
    assert s.pop_min() is None
    assert s.pop_max() is None
    assert s.get_by_rank(1) is None
    assert s.get_by_rank_range(1, -1) == []
    assert s.get_by_score_range(0, 100) == []


def test_ranks_stay_consistent_under_many_operations():
    rng = random.Random(7)
    s = SortedSet()
    scores = {}
    for step in range(400):
        key = f"k{rng.randrange(60)}"
        if rng.random() < 0.3:
            s.remove(key)
            scores.pop(key, None)
        else:
            score = rng.randrange(20)
            s.put(key, score, str(step).encode())
            scores[key] = score
    expected = sorted(scores, key=lambda k: (scores[k], k))
    assert [n.key() for n in s] == expected
    assert s.size() == len(expected)
    for rank, key in enumerate(expected, start=1):
        assert s.find_rank(key) == rank
        assert s.get_by_rank(rank).key() == key
        assert s.find_rev_rank(key) == len(expected) - rank + 1
    backward = []
    node = s.peek_max()
    while node is not None:
        backward.append(node.key())
        node = node.backward
    assert backward == list(reversed(expected))