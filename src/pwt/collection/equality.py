"""
元素比较模式.

- loose_equals: 宽松相等, 比较值/结构, 不要求是同一个实例.
- strict_equals: 严格相等, 对象比较身份; 不可变标量比较类型和值.

示例:
    >>> loose_equals("1", 1)
    True
    >>> strict_equals("1", 1)
    False
    >>> a = Point(1, 2)
    >>> loose_equals(a, Point(1, 2)), strict_equals(a, Point(1, 2))
    (True, False)
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

SCALAR_TYPES = (type(None), bool, int, float, complex, str, bytes)


def strict_equals(a: Any, b: Any) -> bool:
    """
    严格相等.

    对象必须是同一个实例. 相等的标量在 Python 中不保证是同一个对象,
    因此标量按"类型完全相同且值相等"判定.
    """
    if a is b:
        return True
    if isinstance(a, SCALAR_TYPES) and type(a) is type(b):
        return a == b
    return False


def loose_equals(a: Any, b: Any) -> bool:
    """
    宽松相等.

    规则(依次尝试):
    1. 数字字符串与数字按数值比较(bool 除外);
    2. 映射按键集合及对应值宽松比较;
    3. 非字符串序列按长度及对应元素宽松比较;
    4. `a == b`;
    5. 同类且未自定义 `__eq__` 的对象按属性宽松比较.
    """
    if a is b:
        return True

    numeric = _numeric_pair(a, b)
    if numeric is not None:
        return numeric[0] == numeric[1]

    if isinstance(a, Mapping) and isinstance(b, Mapping):
        if a.keys() != b.keys():
            return False
        return all(loose_equals(a[k], b[k]) for k in a)

    if _is_sequence(a) and _is_sequence(b):
        if len(a) != len(b):
            return False
        return all(loose_equals(x, y) for x, y in zip(a, b))

    try:
        if a == b:
            return True
    except Exception:
        return False

    if type(a) is type(b) and type(a).__eq__ is object.__eq__:
        return loose_equals(_attributes(a), _attributes(b))
    return False


def _numeric_pair(a: Any, b: Any) -> tuple[int | float, int | float] | None:
    """
    数字与数字字符串配对, 返回可直接比较的两个数值.

    整数与整数字符串按 int 比较, 避免大整数转 float 丢失精度;
    含下划线的字符串不视为数字字符串.
    """
    if isinstance(a, bool) or isinstance(b, bool):
        return None
    if isinstance(a, str) and isinstance(b, (int, float)):
        a, b = b, a
    if not (isinstance(a, (int, float)) and isinstance(b, str)):
        return None

    text = b.strip()
    if "_" in text:
        return None
    if isinstance(a, int):
        try:
            return a, int(text)
        except ValueError:
            pass
    try:
        return float(a), float(text)
    except (OverflowError, ValueError):
        return None


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _attributes(value: Any) -> dict[str, Any]:
    """收集 __dict__ 与 __slots__ 中的属性."""
    result = dict(getattr(value, "__dict__", {}))
    for cls in type(value).__mro__:
        slots = getattr(cls, "__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for slot in slots:
            if slot.startswith("__"):
                continue
            if slot not in result and hasattr(value, slot):
                result[slot] = getattr(value, slot)
    return result
