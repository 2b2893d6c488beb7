"""
排序选项与比较函数.

`Collection.sort_by` 接收 {字段名: 选项} 映射, 每个选项可以是:
- 方向字符串: "asc" / "desc"(大小写不敏感);
- 方向常量: SORT_ASC / SORT_DESC;
- 映射或 SortOption 实例: {"direction": "desc", "flag": "natural", "case_sensitive": False}.

选项通过 pydantic 验证, 失败时抛出 SortOptionError.

比较规则(flag):
- regular: 原值比较, None 最小, 类型不可比较时按 (类型名, str(值)) 比较;
- numeric: 按数值比较, 数字原样参与比较(大整数不转 float), 字符串转 float, 无法转换的值视为 0;
- string: 按 str 比较;
- natural: 自然顺序, "img12" 排在 "img10" 之后, "img2" 之前的是 "img1".
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from functools import cmp_to_key
from typing import Annotated, Any, Callable, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, ValidationError
from pydantic_core import PydanticCustomError

from pwt.collection.errors import SortOptionError

SORT_DESC = 3
SORT_ASC = 4

DIRECTION_TYPE = Literal["asc", "desc"]
FLAG_TYPE = Literal["regular", "numeric", "string", "natural"]

_DIRECTION_CONSTANTS = {SORT_ASC: "asc", SORT_DESC: "desc"}
_NATURAL_CHUNK = re.compile(r"(\d+)")


def convert(func: Callable[[Any], Any], description: str | None = None) -> BeforeValidator:
    """
    构造一个在 Pydantic 验证前执行的值转换器, None 值跳过转换.
    """

    def validator(data: Any) -> Any:
        if data is None:
            return data
        try:
            return func(data)
        except Exception as ex:
            raise PydanticCustomError(
                "Convert failed",
                "{reason}",
                {"reason": description or str(ex)},
            )

    return BeforeValidator(validator)


def _direction(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return _DIRECTION_CONSTANTS.get(value, value)
    if isinstance(value, str):
        return value.strip().lower()
    return value


class SortOption(BaseModel):
    """
    单个排序字段的选项.

    Attributes:
        direction: 排序方向, asc 升序, desc 降序.
        flag: 比较方式.
        case_sensitive: 是否区分大小写, 仅对 string/natural 生效.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    direction: Annotated[DIRECTION_TYPE, convert(_direction)] = "asc"
    flag: Annotated[FLAG_TYPE, convert(lambda v: v.strip().lower())] = "regular"
    case_sensitive: bool = True

    @property
    def descending(self) -> bool:
        return self.direction == "desc"

    @classmethod
    def parse(cls, option: Any) -> SortOption:
        """
        将任意支持的选项形式解析为 SortOption.

        Raises:
            SortOptionError: 选项无效.
        """
        if isinstance(option, SortOption):
            return option
        try:
            if option is None:
                return cls()
            if isinstance(option, Mapping):
                return cls.model_validate(dict(option))
            return cls.model_validate({"direction": option})
        except ValidationError as ex:
            raise SortOptionError(f"Invalid sort option: {option!r}", cause=ex)

    def sort_key(self, value: Any) -> Any:
        """
        按 flag 将原值转换为参与比较的快照值.
        """
        if self.flag == "numeric":
            return _to_number(value)
        if self.flag == "string":
            text = "" if value is None else str(value)
            return text if self.case_sensitive else text.casefold()
        if self.flag == "natural":
            text = "" if value is None else str(value)
            if not self.case_sensitive:
                text = text.casefold()
            return _natural_key(text)
        return value

    def compare(self, a: Any, b: Any) -> int:
        """比较两个 sort_key 快照值, 降序时取反."""
        result = compare_values(a, b)
        return -result if self.descending else result


def parse_fields(fields: Mapping[str, Any]) -> dict[str, SortOption]:
    return {name: SortOption.parse(option) for name, option in fields.items()}


def compare_values(a: Any, b: Any) -> int:
    """
    三路比较, 返回 -1 / 0 / 1.

    None 排在所有值之前; 其他类型不可比较时按 (类型名, str(值)) 排序, 保证全序.
    """
    if a is None or b is None:
        return (a is not None) - (b is not None)
    try:
        if a == b:
            return 0
        return -1 if a < b else 1
    except TypeError:
        left = (type(a).__name__, str(a))
        right = (type(b).__name__, str(b))
        if left == right:
            return 0
        return -1 if left < right else 1


def composite_key(options: list[SortOption]) -> Callable[[Any], Any]:
    """
    构造多字段比较的 key 函数.

    被排序的每一项须提供 `.values`(按字段顺序的快照值列表),
    依次比较各字段, 遇到第一个非 0 结果即返回.
    """

    def compare(left: Any, right: Any) -> int:
        for option, a, b in zip(options, left.values, right.values):
            result = option.compare(a, b)
            if result:
                return result
        return 0

    return cmp_to_key(compare)


def _to_number(value: Any) -> int | float:
    # int 与 float 可直接比较, 大整数不转 float
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    try:
        return float(str(value).strip())
    except (OverflowError, TypeError, ValueError):
        return 0.0


def _natural_key(text: str) -> tuple[tuple[int, Any], ...]:
    return tuple(
        (0, int(chunk)) if chunk.isdigit() else (1, chunk)
        for chunk in _NATURAL_CHUNK.split(text)
        if chunk
    )
