"""
使用 rich 在终端中展示 Collection.

`Collection.__rich__` 调用这里的 `to_table`, 因此可以直接:

    >>> from rich.console import Console
    >>> Console().print(Collection({"a": 1, "b": 2}))
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.pretty import Pretty
from rich.table import Table
from rich.text import Text

if TYPE_CHECKING:
    from pwt.collection.collection import Collection

MAX_ROWS_DEFAULT = 50


def to_table(
    collection: Collection[Any, Any],
    title: str | None = None,
    max_rows: int | None = MAX_ROWS_DEFAULT,
) -> Table:
    """
    将集合渲染为两列(键/值)表格.

    Args:
        collection: 要渲染的集合.
        title: 表格标题, 默认为 "Collection (N)".
        max_rows: 最多显示的行数, None 表示不限制; 超出部分以一行省略提示代替.

    Returns:
        Table: rich 表格对象.
    """
    count = len(collection)
    table = Table(
        title=title if title is not None else f"{type(collection).__name__} ({count})",
        show_lines=False,
    )
    table.add_column("key", style="cyan", no_wrap=True)
    table.add_column("value")

    for index, (key, value) in enumerate(collection.items()):
        if max_rows is not None and index >= max_rows:
            table.add_row(Text("…", style="dim"), Text(f"{count - index} more", style="dim"))
            break
        table.add_row(Text(repr(key)), Pretty(value))
    return table
