"""
元素字段/方法访问器.

Collection 中按名称取值的操作(find/call/sort_by/get_min/get_distinct 等)
都通过这里解析名称, 元素可以是任意形态:

- 映射(dict 等): 按键取值;
- 对象: 若其类型上该名称是方法(可调用且不是 property), 以 args 调用;
  否则按属性读取.

"是否为方法"的判定按 (元素类型, 名称) 缓存, 同一个 Accessor 实例内
还会再缓存一次, 避免在一次遍历中重复反射.

示例:
    >>> get_age = Accessor("age")
    >>> get_age({"age": 3})
    3
    >>> get_age(Person(age=5))
    5
"""

from __future__ import annotations

from collections.abc import Mapping
from functools import lru_cache
from typing import Any, Iterable

from pwt.collection.errors import MissingAccessorError

_MISSING = object()


@lru_cache(maxsize=1024)
def is_method(cls: type, name: str) -> bool:
    """
    判断 `name` 在类型 `cls` 上是否为方法.

    property/描述符字段以及实例属性均视为字段.
    """
    attr = getattr(cls, name, _MISSING)
    if attr is _MISSING or isinstance(attr, property):
        return False
    return callable(attr)


class Accessor:
    """
    按名称访问元素字段或方法的可调用对象.

    Attributes:
        name (str): 字段或方法名.
        args (tuple[Any, ...]): 调用方法时传入的位置参数, 字段访问时忽略.
    """

    __slots__ = ("name", "args", "_kinds")

    def __init__(self, name: str, args: Iterable[Any] = ()) -> None:
        self.name = name
        self.args = tuple(args)
        self._kinds: dict[type, bool] = {}

    def __call__(self, element: Any) -> Any:
        if isinstance(element, Mapping):
            try:
                return element[self.name]
            except KeyError as ex:
                raise MissingAccessorError(element, self.name, cause=ex)

        cls = type(element)
        method = self._kinds.get(cls)
        if method is None:
            method = self._kinds[cls] = is_method(cls, self.name)

        try:
            attr = getattr(element, self.name)
        except AttributeError as ex:
            raise MissingAccessorError(element, self.name, cause=ex)
        return attr(*self.args) if method else attr

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r}, args={self.args!r})"


def resolve(element: Any, name: str, args: Iterable[Any] = ()) -> Any:
    """
    解析单个元素上的字段或方法值.

    Raises:
        MissingAccessorError: 元素上不存在该名称.
    """
    return Accessor(name, args)(element)


def invoke(element: Any, name: str, args: Iterable[Any] = ()) -> Any:
    """
    调用元素上的方法, 要求该名称必须可调用.

    Raises:
        MissingAccessorError: 元素上不存在该名称或其不可调用.
    """
    method = getattr(element, name, _MISSING)
    if method is _MISSING or not callable(method):
        raise MissingAccessorError(element, name)
    return method(*args)
