"""
游标测试
"""

import pytest

from pwt.collection.collection import Collection


@pytest.fixture
def col():
    return Collection({"a": 1, "b": 2, "c": 3})


def test_walk(col):
    cur = col.cursor()
    assert cur.key() == "a"
    assert cur.current() == 1
    assert cur.next() == 2
    assert cur.key() == "b"
    assert cur.next() == 3
    assert cur.next() is None
    assert not cur.valid()
    assert cur.key() is None


def test_reset(col):
    cur = col.cursor()
    cur.next()
    cur.next()
    assert cur.reset() == 1
    assert cur.key() == "a"


def test_independent_cursors(col):
    first = col.cursor()
    second = col.cursor()
    first.next()
    assert first.current() == 2
    assert second.current() == 1


def test_iteration_is_restartable(col):
    cur = col.cursor()
    assert list(cur) == [("a", 1), ("b", 2), ("c", 3)]
    assert list(cur) == []
    cur.reset()
    assert list(cur) == [("a", 1), ("b", 2), ("c", 3)]


def test_skips_removed_keys(col):
    cur = col.cursor()
    col.remove("b")
    assert cur.next() == 3


def test_empty():
    cur = Collection().cursor()
    assert cur.current() is None
    assert cur.next() is None
    assert cur.reset() is None


def test_reading_does_not_touch_collection(col):
    col.cursor().next()
    assert col.first() == 1
    assert col.get_keys() == ["a", "b", "c"]
