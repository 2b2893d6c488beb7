"""
元素过滤表达式, 当前基于 rule_engine 实现.

表达式中的名称先按映射键解析, 再按对象属性解析, 因此同一个表达式
可以同时作用于 dict 元素和普通对象元素.

示例:
    >>> Expression("age > 3 and status == 'active'").match({"age": 5, "status": "active"})
    True
"""

from __future__ import annotations

from typing import Any

import rule_engine

from pwt.collection.errors import ExpressionError


class Expression:
    """
    表达式封装类.
    - evaluate: 返回表达式计算结果, 可选 default 兜底
    - match: 返回布尔判定结果, 可选 default 兜底
    """

    def __init__(self, expr: str) -> None:
        self.expr = expr
        try:
            self._rule = rule_engine.Rule(
                self.expr,
                rule_engine.Context(resolver=self._resolver),
            )
        except rule_engine.EngineError as ex:
            raise ExpressionError(ex)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.expr!r})"

    def evaluate(self, data: Any, *, default: Any = ...) -> Any:
        """
        计算表达式的值.

        Args:
            data: 被计算的元素.
            default: 计算失败时返回的默认值; 未传则抛异常.

        Returns:
            Any: 表达式结果.

        Raises:
            ExpressionError: 计算失败且未传 default.
        """
        try:
            return self._rule.evaluate(data)
        except rule_engine.EngineError as ex:
            if default is ...:
                raise ExpressionError(ex)
            return default

    def match(self, data: Any, *, default: Any = ...) -> bool:
        """
        判断表达式是否匹配(布尔结果).

        Args:
            data: 被判定的元素.
            default: 计算失败时返回的默认值; 未传则抛异常.
        """
        return bool(self.evaluate(data, default=default))

    def _resolver(self, data: Any, name: str) -> Any:
        try:
            return rule_engine.resolve_item(data, name)
        except Exception:
            return rule_engine.resolve_attribute(data, name)
