"""
定义 Collection 使用的异常体系, 支持错误链追踪.

异常层级结构如下:
    - CollectionError: 所有异常的统一基类, 支持嵌套链式追踪.
        - AmbiguousResultError: 唯一性查询命中多个元素.
        - MissingAccessorError: 元素缺少指定的字段或方法.
        - EmptyCollectionError: 在空集合上执行需要元素的操作.
        - SortOptionError: 多字段排序选项无效.
        - ExpressionError: 过滤表达式无法解析或计算.

说明:
    - 查找类操作(get/remove/contains_key 等)从不抛出异常, 以 None/False 表示缺失;
    - 只有调用方必须处理的情况才会抛出以上异常.
"""

from __future__ import annotations

from typing import Any


class CollectionError(Exception):
    """
    所有 Collection 异常的基类,具备错误链追踪能力.

    参数:
    - `*args`: 异常消息内容;
    - `cause`: 可选的原始异常,用于记录异常链(自动赋值给 `__cause__`).
    """

    def __init__(self, *args: Any, cause: Exception | None = None) -> None:
        super().__init__(*args)
        self.cause: Exception | None = cause
        self.__cause__ = cause


class AmbiguousResultError(CollectionError, LookupError):
    """
    唯一性查询(`find_one`)命中了多于一个元素.

    属性:
    - `count`: 命中的元素数量;
    - `name`: 查询使用的字段或方法名;
    - `value`: 查询使用的比较值.
    """

    def __init__(self, count: int, name: str, value: Any) -> None:
        shown = type(value).__name__ if _is_object(value) else value
        super().__init__(
            f"Too many elements returned ({count}), "
            f"needed only one for '{name}' = '{shown}'"
        )
        self.count = count
        self.name = name
        self.value = value


class MissingAccessorError(CollectionError, AttributeError):
    """
    元素上不存在指定名称的字段或方法.

    属性:
    - `element`: 出错的元素;
    - `name`: 请求的字段或方法名.
    """

    def __init__(
        self, element: Any, name: str, *, cause: Exception | None = None
    ) -> None:
        super().__init__(
            f"{type(element).__name__} object has no accessor '{name}'",
            cause=cause,
        )
        self.element = element
        self.name = name


class EmptyCollectionError(CollectionError, IndexError):
    """
    在空集合上执行必须返回元素的操作(如 `random`).
    """


class SortOptionError(CollectionError, ValueError):
    """
    `sort_by` 的字段选项无法解析.

    通常由 pydantic 的 ValidationError 引起, 原始异常保存在 `cause` 中.
    """


class ExpressionError(CollectionError):
    """
    过滤表达式错误.

    包装 rule_engine 抛出的解析或计算异常, 原始异常保存在 `original` 中.
    """

    def __init__(self, original: Exception) -> None:
        super().__init__(repr(original), cause=original)
        self.original = original


def _is_object(value: Any) -> bool:
    return not isinstance(value, (str, bytes, int, float, complex, bool, type(None)))
