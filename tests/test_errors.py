"""
异常体系测试
"""

import pytest

from pwt.collection.errors import (
    AmbiguousResultError,
    CollectionError,
    EmptyCollectionError,
    MissingAccessorError,
    SortOptionError,
)


def test_cause_chaining():
    original = KeyError("x")
    error = CollectionError("wrapped", cause=original)
    assert error.cause is original
    assert error.__cause__ is original


def test_ambiguous_result_message():
    error = AmbiguousResultError(3, "status", "active")
    assert str(error) == (
        "Too many elements returned (3), needed only one for 'status' = 'active'"
    )
    assert (error.count, error.name, error.value) == (3, "status", "active")


def test_ambiguous_result_object_value():
    class Status:
        pass

    error = AmbiguousResultError(2, "status", Status())
    assert "'status' = 'Status'" in str(error)


def test_missing_accessor():
    error = MissingAccessorError({"a": 1}, "b")
    assert error.element == {"a": 1}
    assert error.name == "b"
    assert "dict" in str(error)


@pytest.mark.parametrize(
    "error, builtin",
    [
        (AmbiguousResultError(2, "a", 1), LookupError),
        (MissingAccessorError(object(), "a"), AttributeError),
        (EmptyCollectionError("empty"), IndexError),
        (SortOptionError("bad"), ValueError),
    ],
)
def test_builtin_compatibility(error, builtin):
    assert isinstance(error, CollectionError)
    assert isinstance(error, builtin)
