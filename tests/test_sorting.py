"""
排序选项测试

覆盖选项解析(字符串/常量/映射/模型)/比较方式(flag)/复合比较.
"""

from functools import cmp_to_key

import pytest

from pwt.collection.collection import Collection
from pwt.collection.errors import SortOptionError
from pwt.collection.sorting import (
    SORT_ASC,
    SORT_DESC,
    SortOption,
    compare_values,
    parse_fields,
)


class TestSortOptionParse:
    """测试选项解析"""

    @pytest.mark.parametrize(
        "option, direction",
        [
            ("asc", "asc"),
            ("DESC", "desc"),
            (" Desc ", "desc"),
            (SORT_ASC, "asc"),
            (SORT_DESC, "desc"),
            (None, "asc"),
            ({"direction": "desc"}, "desc"),
        ],
    )
    def test_direction(self, option, direction):
        assert SortOption.parse(option).direction == direction

    def test_model_passthrough(self):
        option = SortOption(direction="desc", flag="natural")
        assert SortOption.parse(option) is option

    def test_flag_case_insensitive(self):
        assert SortOption.parse({"flag": "NUMERIC"}).flag == "numeric"

    @pytest.mark.parametrize(
        "option",
        ["sideways", 7, True, {"flag": "random"}, {"unknown": 1}],
    )
    def test_invalid(self, option):
        with pytest.raises(SortOptionError) as info:
            SortOption.parse(option)
        assert info.value.cause is not None

    def test_parse_fields_keeps_order(self):
        options = parse_fields({"b": "desc", "a": "asc"})
        assert list(options) == ["b", "a"]
        assert options["b"].descending
        assert not options["a"].descending


class TestSortKeys:
    """测试比较方式"""

    def _sorted(self, values, option):
        keys = [option.sort_key(v) for v in values]
        order = sorted(
            range(len(values)),
            key=cmp_to_key(lambda i, j: option.compare(keys[i], keys[j])),
        )
        return [values[i] for i in order]

    def test_regular(self):
        option = SortOption.parse("asc")
        assert self._sorted([3, 1, 2], option) == [1, 2, 3]

    def test_regular_mixed_types(self):
        option = SortOption.parse("asc")
        assert self._sorted([2, None, 1], option) == [None, 1, 2]

    def test_numeric(self):
        option = SortOption.parse({"flag": "numeric"})
        assert self._sorted(["10", "9", 2.5], option) == [2.5, "9", "10"]

    def test_numeric_large_integers(self):
        option = SortOption.parse({"flag": "numeric"})
        values = [10**400, 1, "2.5", 2**53 + 1, 2**53]
        assert self._sorted(values, option) == [1, "2.5", 2**53, 2**53 + 1, 10**400]

    def test_numeric_sort_by_large_integers(self):
        col = Collection([{"n": 10**400}, {"n": 1}])
        result = col.sort_by({"n": {"flag": "numeric"}})
        assert result.get_values() == [{"n": 1}, {"n": 10**400}]

    def test_string(self):
        option = SortOption.parse({"flag": "string"})
        assert self._sorted([10, 9, 100], option) == [10, 100, 9]

    def test_string_case_insensitive(self):
        option = SortOption.parse({"flag": "string", "case_sensitive": False})
        assert self._sorted(["b", "A", "c"], option) == ["A", "b", "c"]

    def test_natural(self):
        option = SortOption.parse({"flag": "natural"})
        values = ["img12", "img10", "img2", "img1"]
        assert self._sorted(values, option) == ["img1", "img2", "img10", "img12"]

    def test_descending(self):
        option = SortOption.parse("desc")
        assert self._sorted([1, 3, 2], option) == [3, 2, 1]


def test_compare_values():
    assert compare_values(1, 2) == -1
    assert compare_values(2, 1) == 1
    assert compare_values("a", "a") == 0
    assert compare_values(1, None) == 1
    assert compare_values(None, 1) == -1
