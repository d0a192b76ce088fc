"""A keyed collection of byte-string lists with optional expiry."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Iterable, Iterator

from ..errors import NutsError

MIN_INT = -(2**63)
MAX_INT = 2**63 - 1


class ListNotFoundError(NutsError):
    """The list does not exist, has expired, or is empty."""

    def __init__(self, message: str = "the list not found") -> None:
        super().__init__(message)


class IndexOutOfRangeError(NutsError, IndexError):
    """An index given to lset lies outside the list."""

    def __init__(self, message: str = "index out of range") -> None:
        super().__init__(message)


class CountError(NutsError):
    """The count is larger than the list."""

    def __init__(self, message: str = "err count") -> None:
        super().__init__(message)


class MinIntError(NutsError):
    """The count is the smallest integer and cannot be negated."""

    def __init__(self, message: str = "err MinInt") -> None:
        super().__init__(message)


@dataclass
class List:
    """Lists of byte strings stored by key, each with an optional TTL."""

    items: dict[str, list[bytes]] = field(default_factory=dict)
    ttl: dict[str, int] = field(default_factory=dict)
    timestamp: dict[str, int] = field(default_factory=dict)

    def rpop(self, key: str) -> bytes:
        """Remove and return the last element of the list at ``key``."""
        item = self.rpeek(key)
        self.items[key].pop()
        return item

    def rpeek(self, key: str) -> bytes:
        """Return the last element of the list at ``key``."""
        if self.size(key) == 0:
            raise ListNotFoundError()
        return self.items[key][-1]

    def rpush(self, key: str, *values: bytes) -> int:
        """Append ``values`` to the tail of the list and return its new size."""
        if self.is_expire(key):
            raise ListNotFoundError()
        self.items.setdefault(key, []).extend(values)
        return len(self.items[key])

    def lpush(self, key: str, *values: bytes) -> int:
        """Insert ``values`` at the head, last one first, and return the new size."""
        if self.is_expire(key):
            raise ListNotFoundError()
        self.items[key] = list(reversed(values)) + self.items.get(key, [])
        return len(self.items[key])

    def lpop(self, key: str) -> bytes:
        """Remove and return the first element of the list at ``key``."""
        item = self.lpeek(key)
        del self.items[key][0]
        return item

    def lpeek(self, key: str) -> bytes:
        """Return the first element of the list at ``key``."""
        if self.size(key) == 0:
            raise ListNotFoundError()
        return self.items[key][0]

    def size(self, key: str) -> int:
        """Number of elements in the list at ``key``."""
        if self.is_expire(key) or key not in self.items:
            raise ListNotFoundError()
        return len(self.items[key])

    def lrange(self, key: str, start: int, end: int) -> list[bytes]:
        """Elements from ``start`` to ``end`` inclusive; negative indexes count from the tail."""
        size = self.size(key)
        if size == 0:
            return []
        if start >= 0 and end < 0:
            end += size
        if start < 0 and end > 0:
            start += size
        if start < 0 and end < 0:
            start += size
            end += size
        if end >= size:
            end = size - 1
        if start > end or start < 0:
            raise ValueError("start or end error")
        return self.items[key][start : end + 1]

    def lrem(self, key: str, count: int, value: bytes) -> int:
        """Remove up to ``count`` elements equal to ``value``.

        A positive count removes from head to tail, a negative one from tail
        to head, and zero removes every match. Returns how many were removed.
        """
        if self.is_expire(key) or key not in self.items:
            raise ListNotFoundError()
        needed = self.lrem_num(key, count, value)
        if needed == 0:
            return 0
        if count == 0:
            count = needed

        current = self.items[key]
        ordered = current if count > 0 else list(reversed(current))
        limit = abs(count)
        removed = 0
        kept: list[bytes] = []
        for v in ordered:
            if removed < limit and v == value:
                removed += 1
            else:
                kept.append(v)
        if count < 0:
            kept.reverse()
        self.items[key] = kept
        return removed

    def lrem_num(self, key: str, count: int, value: bytes) -> int:
        """How many elements lrem would remove for ``count`` and ``value``."""
        if self.is_expire(key) or key not in self.items:
            raise ListNotFoundError()
        if count > len(self.items[key]):
            raise CountError()
        if count < 0:
            if count == MIN_INT:
                raise MinIntError()
            count = -count
        removed = 0
        for v in self.items[key]:
            if count > 0 and removed == count:
                break
            if v == value:
                removed += 1
        return removed

    def lset(self, key: str, index: int, value: bytes) -> None:
        """Replace the element at ``index``."""
        if self.is_expire(key) or key not in self.items:
            raise ListNotFoundError()
        if not 0 <= index < len(self.items[key]):
            raise IndexOutOfRangeError()
        self.items[key][index] = value

    def ltrim(self, key: str, start: int, end: int) -> None:
        """Keep only the elements from ``start`` to ``end`` inclusive."""
        if self.is_expire(key) or key not in self.items:
            raise ListNotFoundError()
        self.items[key] = list(self.lrange(key, start, end))

    @staticmethod
    def _valid_indexes(indexes: Iterable[int], length: int) -> Iterator[int]:
        previous = -1
        for index in indexes:
            if index < 0 or index == previous:
                continue
            if index >= length:
                break
            yield index
            previous = index

    def lrem_by_index(self, key: str, indexes: Iterable[int]) -> int:
        """Remove the elements at the given ascending ``indexes``; return how many."""
        if self.is_expire(key) or key not in self.items:
            raise ListNotFoundError()
        current = self.items[key]
        chosen = set(self._valid_indexes(indexes, len(current)))
        if not chosen:
            return 0
        self.items[key] = [v for i, v in enumerate(current) if i not in chosen]
        return len(chosen)

    def lrem_by_index_pre_check(self, key: str, indexes: Iterable[int]) -> int:
        """Count how many of ``indexes`` lrem_by_index would remove."""
        if self.is_expire(key) or key not in self.items:
            raise ListNotFoundError()
        return sum(1 for _ in self._valid_indexes(indexes, len(self.items[key])))

    def is_expire(self, key: str) -> bool:
        """True if the list at ``key`` has expired; an expired list is dropped."""
        if key not in self.ttl:
            return False
        ttl = self.ttl[key]
        now = int(time.time())
        if ttl == 0 or ttl + self.timestamp.get(key, 0) > now:
            return False
        self.items.pop(key, None)
        self.ttl.pop(key, None)
        self.timestamp.pop(key, None)
        return True

    def is_empty(self, key: str) -> bool:
        """True if the list at ``key`` exists and holds no elements."""
        return self.size(key) == 0

    def get_list_ttl(self, key: str) -> int:
        """Seconds the list at ``key`` has left to live, or 0 if it never expires."""
        if self.is_expire(key):
            raise ListNotFoundError()
        ttl = self.ttl.get(key, 0)
        stamp = self.timestamp.get(key, 0)
        if ttl == 0 or stamp == 0:
            return 0
        return stamp + ttl - int(time.time())