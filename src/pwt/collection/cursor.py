"""
Collection 的游标.

游标为每次遍历单独创建, 不在集合上保存任何遍历状态; 同一个集合可以
同时存在多个互不影响的游标. 游标创建时对键序列做快照, 之后集合被修改
时, 已删除的键会被跳过, 新增的键不会出现.

示例:
    >>> cur = Collection(["a", "b"]).cursor()
    >>> cur.current(), cur.key()
    ('a', 0)
    >>> cur.next()
    'b'
    >>> cur.next() is None
    True
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Generic, Hashable, Iterator, TypeVar

if TYPE_CHECKING:
    from pwt.collection.collection import Collection

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class CollectionCursor(Generic[K, V]):
    """
    可重置的非持有型游标.

    Attributes:
        position (int): 当前位置, 等于键快照长度时表示越界.
    """

    def __init__(self, collection: Collection[K, V]) -> None:
        self._collection = collection
        self._keys: list[K] = collection.get_keys()
        self.position = 0
        self._skip_removed()

    def __iter__(self) -> Iterator[tuple[K, V]]:
        while self.valid():
            key = self._keys[self.position]
            yield key, self._collection[key]
            self.next()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(position={self.position}, size={len(self._keys)})"

    def valid(self) -> bool:
        """当前位置是否指向一个元素."""
        return self.position < len(self._keys)

    def key(self) -> K | None:
        """当前位置的键, 越界时返回 None."""
        if not self.valid():
            return None
        return self._keys[self.position]

    def current(self) -> V | None:
        """当前位置的值, 越界时返回 None."""
        if not self.valid():
            return None
        return self._collection.get(self._keys[self.position])

    def next(self) -> V | None:
        """前进一步并返回新位置的值, 越界时返回 None."""
        if self.valid():
            self.position += 1
            self._skip_removed()
        return self.current()

    def reset(self) -> V | None:
        """回到第一个元素并返回其值, 集合为空时返回 None."""
        self._keys = self._collection.get_keys()
        self.position = 0
        self._skip_removed()
        return self.current()

    def _skip_removed(self) -> None:
        while self.valid() and not self._collection.contains_key(
            self._keys[self.position]
        ):
            self.position += 1
