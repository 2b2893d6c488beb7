"""
Collection 模块

提供一个有序/可变的键值容器, 同时具备数组和映射的语义:
键可以是显式的字符串/整数, 也可以是按追加顺序自动分配的整数下标.
在此之上提供一组查询/变换/就地修改操作.

主要组件:
- Collection: 核心容器类, 兼容 MutableMapping 协议.

键的规则:
- 插入顺序即遍历顺序; 对已存在的键赋值会原位替换, 不会移动到末尾.
- `add` 总是使用"下一个未使用的整数下标": 自上次重置以来出现过的
  最大非负整数键 + 1, 被删除的下标不会被复用.
- bool 不视为整数键; 整数值的 float 键(如 1.0)按整数键存储.

比较模式:
- 宽松(loose): contains / remove_element / diff / find / find_different;
- 严格(strict): contains_instance / remove_instance / index_of / get_distinct.
详见 pwt.collection.equality.

返回值约定:
- set/add/clear/diff/sort/sort_by_key/sort_associative/reset_index/from_dict
  就地修改并返回自身, 支持链式调用;
- 其余变换操作返回新集合, 不修改自身.

示例:
    >>> users = Collection([{"name": "bob", "age": 3}, {"name": "amy", "age": 1}])
    >>> users.add({"name": "cid", "age": 2}).count()
    3
    >>> users.sort_by({"age": "asc"}).call("get", "name").get_values()
    ['amy', 'cid', 'bob']
    >>> users.find_one("name", "amy")
    {'name': 'amy', 'age': 1}
"""

from __future__ import annotations

import random
from collections.abc import ItemsView, KeysView, Mapping, MutableMapping, ValuesView
from functools import cmp_to_key
from itertools import chain
from typing import (
    Any,
    Callable,
    Generic,
    Hashable,
    Iterable,
    Iterator,
    NamedTuple,
    TypeVar,
)

from pwt.collection.accessor import Accessor, invoke
from pwt.collection.cursor import CollectionCursor
from pwt.collection.equality import loose_equals, strict_equals
from pwt.collection.errors import AmbiguousResultError, EmptyCollectionError
from pwt.collection.expression import Expression
from pwt.collection.log import get_logger_adapter
from pwt.collection.render import to_table
from pwt.collection.sorting import compare_values, composite_key, parse_fields

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

logger = get_logger_adapter(__name__)


def _is_index(key: Any) -> bool:
    return isinstance(key, int) and not isinstance(key, bool)


class _SortRow(NamedTuple):
    key: Any
    value: Any
    values: list[Any]


class Collection(MutableMapping[K, V], Generic[K, V]):
    """
    有序键值容器.

    内部结构:
    - self._elements: {键: 值}, 依赖 dict 的插入顺序;
    - self._next_index: 下一次 `add` 使用的整数下标.

    集合不是线程安全的, 需要跨线程共享时由调用方加锁.
    """

    def __init__(self, elements: Mapping[K, V] | Iterable[V] | None = None) -> None:
        """
        初始化集合.

        Args:
            elements: 可选的初始内容. 映射保留其键; 其他可迭代对象按顺序
                分配 0..n-1 下标.
        """
        self._elements: dict[K, V] = {}
        self._next_index = 0
        if elements is not None:
            self._load(elements)

    # ===========================================================================
    # MutableMapping 协议

    def __getitem__(self, key: K) -> V:
        return self._elements[key]

    def __setitem__(self, key: K, value: V) -> None:
        self.set(key, value)

    def __delitem__(self, key: K) -> None:
        del self._elements[key]

    def __iter__(self) -> Iterator[K]:
        return iter(self._elements)

    def __reversed__(self) -> Iterator[K]:
        return reversed(self._elements)

    def __len__(self) -> int:
        return len(self._elements)

    def __contains__(self, key: Any) -> bool:
        try:
            return key in self._elements
        except TypeError:
            return False

    def __repr__(self) -> str:
        inner = ", ".join(f"{k!r}: {v!r}" for k, v in self._elements.items())
        return f"{self.__class__.__name__}({{{inner}}})"

    def __rich__(self) -> Any:
        return to_table(self)

    def __copy__(self) -> Collection[K, V]:
        return self.copy()

    def keys(self) -> KeysView[K]:
        return self._elements.keys()

    def values(self) -> ValuesView[V]:
        return self._elements.values()

    def items(self) -> ItemsView[K, V]:
        """按当前顺序返回 (键, 值) 视图, 可重复遍历."""
        return self._elements.items()

    def copy(self) -> Collection[K, V]:
        """浅拷贝, 保留键和下一个追加下标."""
        result = self._new()
        result._elements = dict(self._elements)
        result._next_index = self._next_index
        return result

    # ===========================================================================
    # 存取

    def get(self, key: K, default: Any = None) -> V | None:
        """
        获取指定键的值.

        Returns:
            V | None: 对应的值, 键不存在时返回 default(默认 None).
        """
        try:
            return self._elements.get(key, default)
        except TypeError:
            return default

    def set(self, key: K, value: V) -> Collection[K, V]:
        """
        设置指定键的值, 已存在时原位替换, 否则追加到末尾.
        整数值的 float 键(如 0.0)按整数下标存储.

        Returns:
            Collection[K, V]: 自身.
        """
        if isinstance(key, float) and key.is_integer():
            key = int(key)  # type: ignore[assignment]
        self._elements[key] = value
        if _is_index(key) and key >= self._next_index:
            self._next_index = key + 1  # type: ignore[operator]
        return self

    def add(self, *values: V) -> Collection[K, V]:
        """
        按参数顺序依次追加元素, 每个元素使用下一个未使用的整数下标.

        Returns:
            Collection[K, V]: 自身.
        """
        for value in values:
            self._elements[self._next_index] = value  # type: ignore[index]
            self._next_index += 1
        return self

    def remove(self, key: K) -> V | None:
        """
        删除指定键.

        Returns:
            V | None: 被删除的值, 键不存在时返回 None.
        """
        if key not in self:
            return None
        return self._elements.pop(key)

    def remove_element(self, value: Any) -> bool:
        """
        删除第一个与 value 宽松相等的元素.

        Returns:
            bool: 找到并删除返回 True, 否则 False.
        """
        for key, element in self._elements.items():
            if loose_equals(element, value):
                del self._elements[key]
                return True
        return False

    def remove_instance(self, value: Any) -> bool:
        """
        删除第一个与 value 严格相等(同一实例)的元素.

        Returns:
            bool: 找到并删除返回 True, 否则 False.
        """
        for key, element in self._elements.items():
            if strict_equals(element, value):
                del self._elements[key]
                return True
        return False

    def remove_find(self, name: str, value: Any) -> Collection[K, V]:
        """
        删除所有字段或方法返回值等于 value 的元素.

        Returns:
            Collection[K, V]: 被删除元素组成的新集合, 保留原键.
        """
        found = self.find(name, value)
        for key in found.keys():
            del self._elements[key]
        return found

    def clear(self) -> Collection[K, V]:
        """
        清空集合, 并重置追加下标.

        Returns:
            Collection[K, V]: 自身.
        """
        self._elements = {}
        self._next_index = 0
        return self

    def contains_key(self, key: Any) -> bool:
        return key in self

    def contains(self, value: Any) -> bool:
        """是否包含与 value 宽松相等的元素, O(n)."""
        return any(loose_equals(element, value) for element in self._elements.values())

    def contains_instance(self, value: Any) -> bool:
        """是否包含与 value 严格相等的元素, O(n)."""
        return any(strict_equals(element, value) for element in self._elements.values())

    def index_of(self, value: Any) -> K | None:
        """
        查找第一个与 value 严格相等的元素的键.

        Returns:
            K | None: 对应的键, 未找到时返回 None.
        """
        for key, element in self._elements.items():
            if strict_equals(element, value):
                return key
        return None

    def first(self) -> V | None:
        """当前顺序下的第一个值, 空集合返回 None."""
        return next(iter(self._elements.values()), None)

    def last(self) -> V | None:
        """当前顺序下的最后一个值, 空集合返回 None."""
        return next(reversed(self._elements.values()), None)

    def random(self) -> V:
        """
        随机返回一个值.

        Raises:
            EmptyCollectionError: 集合为空.
        """
        if not self._elements:
            raise EmptyCollectionError("Cannot pick a random element from empty collection")
        return self._elements[random.choice(list(self._elements))]

    def cursor(self) -> CollectionCursor[K, V]:
        """创建一个独立的游标, 指向第一个元素."""
        return CollectionCursor(self)

    def get_keys(self) -> list[K]:
        return list(self._elements)

    def get_values(self) -> list[V]:
        return list(self._elements.values())

    def reset_index(self) -> Collection[K, V]:
        """
        按当前顺序将所有键重新编号为 0..n-1, 原有键(包括字符串键)被丢弃.

        Returns:
            Collection[K, V]: 自身.
        """
        values = list(self._elements.values())
        self._elements = dict(enumerate(values))  # type: ignore[arg-type]
        self._next_index = len(values)
        return self

    def is_empty(self) -> bool:
        return not self._elements

    def count(self) -> int:
        return len(self._elements)

    def to_dict(self) -> dict[K, V]:
        """返回普通 dict 形式的副本."""
        return dict(self._elements)

    def from_dict(self, elements: Mapping[K, V] | Iterable[V] | None = None) -> Collection[K, V]:
        """
        用给定内容替换当前集合的全部元素.

        Returns:
            Collection[K, V]: 自身.
        """
        self.clear()
        if elements is not None:
            self._load(elements)
        return self

    # ===========================================================================
    # 函数式操作(返回新集合, 不修改自身)

    def exists(self, predicate: Callable[[K, V], Any]) -> bool:
        """是否存在使 predicate(key, value) 为真的元素."""
        for key, element in self._elements.items():
            if predicate(key, element):
                return True
        return False

    def for_all(self, predicate: Callable[[K, V], Any]) -> bool:
        """是否所有元素都使 predicate(key, value) 为真, 空集合为 True."""
        for key, element in self._elements.items():
            if not predicate(key, element):
                return False
        return True

    def apply(self, func: Callable[[V], Any]) -> Collection[K, Any]:
        """对每个值应用 func, 保留键."""
        return self._new({key: func(element) for key, element in self._elements.items()})

    def call(self, method: str, *args: Any) -> Collection[K, Any]:
        """
        调用每个元素的 method 方法, 以返回值组成新集合, 保留键.

        Raises:
            MissingAccessorError: 某个元素没有该方法.
        """
        return self._new(
            {key: invoke(element, method, args) for key, element in self._elements.items()}
        )

    def filter(self, predicate: Callable[[V, K], Any]) -> Collection[K, V]:
        """保留使 predicate(value, key) 为真的元素, 保留键和顺序."""
        return self._new(
            {key: element for key, element in self._elements.items() if predicate(element, key)}
        )

    def match(self, expression: str | Expression) -> Collection[K, V]:
        """
        保留满足 rule_engine 表达式的元素, 保留键和顺序.

        Args:
            expression: 表达式字符串或已编译的 Expression,
                例如 "age > 3 and status == 'active'".

        Raises:
            ExpressionError: 表达式无效或计算失败.
        """
        if not isinstance(expression, Expression):
            expression = Expression(expression)
        return self.filter(lambda element, key: expression.match(element))

    def find(self, name: str, value: Any, args: Iterable[Any] = ()) -> Collection[K, V]:
        """
        保留字段或方法返回值与 value 宽松相等的元素, 保留键.

        Args:
            name: 字段或方法名.
            value: 比较值.
            args: 调用方法时的参数.

        Raises:
            MissingAccessorError: 某个元素没有该字段或方法.
        """
        accessor = Accessor(name, args)
        return self.filter(lambda element, key: loose_equals(accessor(element), value))

    def find_different(
        self, name: str, value: Any, args: Iterable[Any] = ()
    ) -> Collection[K, V]:
        """`find` 的补集: 保留返回值与 value 不相等的元素."""
        accessor = Accessor(name, args)
        return self.filter(lambda element, key: not loose_equals(accessor(element), value))

    def find_one(self, name: str, value: Any, args: Iterable[Any] = ()) -> V | None:
        """
        查找唯一一个字段或方法返回值等于 value 的元素.

        Returns:
            V | None: 唯一命中的元素, 未命中返回 None.

        Raises:
            AmbiguousResultError: 命中多于一个元素.
        """
        found = self.find(name, value, args)
        if found.count() > 1:
            logger.debugf(
                "find_one matched {matched} elements for {field!r} = {expected!r}",
                matched=found.count(),
                field=name,
                expected=value,
            )
            raise AmbiguousResultError(found.count(), name, value)
        return found.first()

    def get_distinct(self, name: str, return_value: bool = True) -> Collection[int, Any]:
        """
        按字段或方法返回值去重(严格相等), 保留首次出现顺序, 键重新编号.

        Args:
            name: 字段或方法名.
            return_value: True 返回去重后的值; False 返回每个值首次出现的原元素.
        """
        accessor = Accessor(name)
        seen: list[Any] = []
        result = self._new()
        for element in self._elements.values():
            value = accessor(element)
            if any(strict_equals(value, other) for other in seen):
                continue
            seen.append(value)
            result.add(value if return_value else element)
        return result

    def get_min(self, name: str) -> tuple[Any, V | None]:
        """
        返回 (最小值, 对应元素); None 值不参与比较, 全为 None 时返回最后一个元素;
        并列时保留先出现的元素; 空集合返回 (None, None).
        """
        return self._get_min_max(name, minimum=True)

    def get_max(self, name: str) -> tuple[Any, V | None]:
        """
        返回 (最大值, 对应元素), 规则同 get_min.
        """
        return self._get_min_max(name, minimum=False)

    def diff(self, other: Mapping[Any, V]) -> Collection[K, V]:
        """
        与 other 对齐(宽松相等): 先删除自身中 other 不包含的元素,
        再追加 other 中自身不包含的元素.

        Returns:
            Collection[K, V]: 自身.
        """
        others = list(other.values())
        removed = 0
        for element in list(self._elements.values()):
            if not any(loose_equals(element, o) for o in others):
                removed += self.remove_element(element)
        added = 0
        for element in others:
            if not self.contains(element):
                self.add(element)
                added += 1
        logger.debugf("diff removed {removed}, added {added}", removed=removed, added=added)
        return self

    def partition(
        self, predicate: Callable[[V, K], Any]
    ) -> tuple[Collection[K, V], Collection[K, V]]:
        """
        按 predicate(value, key) 拆分为 (满足, 不满足) 两个集合, 保留键.
        """
        matches: dict[K, V] = {}
        no_matches: dict[K, V] = {}
        for key, element in self._elements.items():
            if predicate(element, key):
                matches[key] = element
            else:
                no_matches[key] = element
        return self._new(matches), self._new(no_matches)

    def partitions(self, predicate: Callable[[V, K], Hashable]) -> dict[Any, Collection[int, V]]:
        """
        按 predicate(value, key) 的返回值分组.

        Returns:
            dict: {分组值: 集合}, 分组按首次出现顺序排列, 组内键重新编号.
        """
        groups: dict[Any, Collection[int, V]] = {}
        for key, element in self._elements.items():
            group = predicate(element, key)
            if group not in groups:
                groups[group] = self._new()
            groups[group].add(element)
        return groups

    def slice(self, offset: int, length: int | None = None) -> Collection[K, V]:
        """
        截取从 offset 开始的 length 个元素, 保留键, 不修改自身.

        Args:
            offset: 起始位置, 负数表示从末尾倒数.
            length: 元素个数; None 表示到末尾; 负数表示在距末尾该数目处停止.
        """
        items = list(self._elements.items())
        start, _, _ = slice(offset, None).indices(len(items))
        if length is None:
            stop = len(items)
        elif length >= 0:
            stop = start + length
        else:
            stop = length
        return self._new(dict(items[start:stop]))

    def merge(self, other: Mapping[Any, V]) -> Collection[Any, V]:
        """
        依次拼接自身和 other 的元素, 返回新集合.

        整数键按追加语义重新编号, 字符串键保留, 冲突时后者覆盖前者.
        """
        return self._renumber(chain(self._elements.items(), other.items()))

    def reverse(self, preserve_keys: bool = False) -> Collection[Any, V]:
        """
        返回顺序反转的新集合.

        Args:
            preserve_keys: 为 False 时整数键按新顺序重新编号; 字符串键始终保留.
        """
        items = reversed(list(self._elements.items()))
        if preserve_keys:
            return self._new(dict(items))
        return self._renumber(items)

    def shuffle(self) -> Collection[int, V]:
        """返回值随机排列的新集合, 键为 0..n-1."""
        values = list(self._elements.values())
        random.shuffle(values)
        return self._new(values)

    # ===========================================================================
    # 排序

    def sort(self, cmp: Callable[[V, V], int]) -> Collection[int, V]:
        """
        按值稳定排序(就地), 键重新编号为 0..n-1.

        Returns:
            Collection: 自身.
        """
        values = sorted(self._elements.values(), key=cmp_to_key(cmp))
        self._elements = dict(enumerate(values))  # type: ignore[arg-type]
        self._next_index = len(values)
        return self  # type: ignore[return-value]

    def sort_by_key(self, cmp: Callable[[K, K], int]) -> Collection[K, V]:
        """按键稳定排序(就地), 保留键值关联."""
        key = cmp_to_key(cmp)
        self._elements = dict(sorted(self._elements.items(), key=lambda item: key(item[0])))
        return self

    def sort_associative(self, cmp: Callable[[V, V], int]) -> Collection[K, V]:
        """按值稳定排序(就地), 保留键值关联."""
        key = cmp_to_key(cmp)
        self._elements = dict(sorted(self._elements.items(), key=lambda item: key(item[1])))
        return self

    def sort_by(self, fields: Mapping[str, Any]) -> Collection[Any, V]:
        """
        多字段稳定排序, 返回新集合.

        第一个字段为主序, 后续字段依次用于打破并列. 每个字段的比较值在排序前
        逐字段提取一次并保存为快照, 排序过程中不再访问元素.

        Args:
            fields: {字段或方法名: 选项}, 选项格式见 pwt.collection.sorting.

        Returns:
            Collection: 新集合, 整数键重新编号, 字符串键保留.

        Raises:
            SortOptionError: 选项无效.
            MissingAccessorError: 某个元素没有该字段或方法.
        """
        options = parse_fields(fields)
        if not self._elements:
            return self.copy()

        rows = [_SortRow(key, element, []) for key, element in self._elements.items()]
        for name, option in options.items():
            accessor = Accessor(name)
            for row in rows:
                row.values.append(option.sort_key(accessor(row.value)))
        logger.debugf(
            "sort_by snapshot {fields} over {size} elements",
            fields=list(options),
            size=len(rows),
        )

        rows.sort(key=composite_key(list(options.values())))
        return self._renumber((row.key, row.value) for row in rows)

    def swap_index(self, index: K, new_index: K) -> bool:
        """
        交换两个键上的值, 键的位置不变.

        Returns:
            bool: 任一键不存在时不做修改并返回 False.
        """
        if index not in self or new_index not in self:
            logger.debugf(
                "swap_index rejected {index!r} <-> {new_index!r}",
                index=index,
                new_index=new_index,
            )
            return False
        elements = self._elements
        elements[index], elements[new_index] = elements[new_index], elements[index]
        return True

    def move_up(self, index: int) -> bool:
        """与下标 index + 1 的元素交换."""
        return self.swap_index(index, index + 1)  # type: ignore[arg-type]

    def move_down(self, index: int) -> bool:
        """与下标 index - 1 的元素交换."""
        return self.swap_index(index, index - 1)  # type: ignore[arg-type]

    # ===========================================================================

    def _new(self, elements: Mapping[Any, Any] | Iterable[Any] | None = None) -> Any:
        return type(self)(elements)

    def _load(self, elements: Mapping[K, V] | Iterable[V]) -> None:
        if isinstance(elements, Mapping):
            for key, value in elements.items():
                self.set(key, value)
        else:
            self.add(*elements)

    def _renumber(self, items: Iterable[tuple[Any, Any]]) -> Any:
        """整数键按追加语义重新编号, 其他键原样保留(后写覆盖)."""
        result = self._new()
        for key, value in items:
            if _is_index(key):
                result.add(value)
            else:
                result.set(key, value)
        return result

    def _get_min_max(self, name: str, minimum: bool) -> tuple[Any, V | None]:
        accessor = Accessor(name)
        result_value: Any = None
        result_element: V | None = None
        for element in self._elements.values():
            value = accessor(element)
            # None 不参与比较; 当前结果为 None 时直接取新值
            if result_value is not None:
                if value is None:
                    continue
                order = compare_values(value, result_value)
                if (minimum and order >= 0) or (not minimum and order <= 0):
                    continue
            result_value = value
            result_element = element
        return result_value, result_element
