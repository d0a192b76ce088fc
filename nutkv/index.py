"""In-memory index of list buckets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from .ds.list import List


@dataclass
class Index:
    """Holds one List structure per bucket."""

    lists: dict[str, List] = field(default_factory=dict)

    def get_list(self, bucket: str) -> List:
        """Return the list structure for ``bucket``, creating it if absent."""
        return self.lists.setdefault(bucket, List())

    def delete_list(self, bucket: str) -> None:
        """Forget the list structure for ``bucket``."""
        self.lists.pop(bucket, None)

    def add_list(self, bucket: str) -> None:
        """Give ``bucket`` a fresh, empty list structure."""
        self.lists[bucket] = List()

    def range_list(self, f: Callable[[List], None]) -> None:
        """Call ``f`` with every list structure."""
        for lst in list(self.lists.values()):
            f(lst)

    def handle_list_bucket(self, f: Callable[[str], None]) -> None:
        """Call ``f`` with every bucket name; the first error stops the walk."""
        for bucket in list(self.lists):
            f(bucket)