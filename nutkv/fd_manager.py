"""An LRU cache of open file handles."""

from __future__ import annotations

import errno
import math
import os
import threading
from dataclasses import dataclass, field
from typing import BinaryIO

DEFAULT_MAX_FILE_NUMS = 256


@dataclass(eq=False)
class FdInfo:
    """A cached file handle with its use count and list links."""

    fd: BinaryIO | None = None
    path: str = ""
    using: int = 0
    next: FdInfo | None = field(default=None, repr=False)
    prev: FdInfo | None = field(default=None, repr=False)


class DoubleLinkedList:
    """Doubly linked list of FdInfo nodes with sentinel head and tail."""

    def __init__(self) -> None:
        self.head = FdInfo()
        self.tail = FdInfo()
        self.head.next = self.tail
        self.tail.prev = self.head

    def add_node(self, node: FdInfo) -> None:
        """Insert ``node`` at the front."""
        first = self.head.next
        first.prev = node
        node.next = first
        self.head.next = node
        node.prev = self.head

    def remove_node(self, node: FdInfo) -> None:
        """Unlink ``node`` from the list."""
        node.prev.next = node.next
        node.next.prev = node.prev
        node.prev = None
        node.next = None

    def move_node_to_front(self, node: FdInfo) -> None:
        """Move ``node`` to the front."""
        self.remove_node(node)
        self.add_node(node)

    def _from_head(self):
        node = self.head.next
        while node is not self.tail:
            yield node
            node = node.next

    def _from_tail(self):
        node = self.tail.prev
        while node is not self.head:
            yield node
            node = node.prev

    def paths_from_head(self) -> list[str]:
        """Paths of the nodes from front to back."""
        return [node.path for node in self._from_head()]

    def paths_from_tail(self) -> list[str]:
        """Paths of the nodes from back to front."""
        return [node.path for node in self._from_tail()]


def _open_rw(path: str) -> BinaryIO:
    fd = os.open(path, os.O_CREAT | os.O_RDWR, 0o644)
    return os.fdopen(fd, "r+b")


class FdManager:
    """Keeps open files in an LRU cache and closes idle ones when it fills."""

    def __init__(self, max_fd_nums: int = 0, clean_threshold: float = 0.0) -> None:
        self._lock = threading.RLock()
        self.cache: dict[str, FdInfo] = {}
        self.fd_list = DoubleLinkedList()
        self.size = 0
        self.max_fd_nums = DEFAULT_MAX_FILE_NUMS
        self.clean_threshold_nums = math.floor(0.5 * self.max_fd_nums)
        if max_fd_nums > 0:
            self.max_fd_nums = max_fd_nums
        if 0.0 < clean_threshold < 1.0:
            self.clean_threshold_nums = math.floor(clean_threshold * self.max_fd_nums)

    def __enter__(self) -> FdManager:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _add_to_cache(self, fd: BinaryIO, path: str) -> None:
        info = FdInfo(fd=fd, path=path, using=1)
        self.fd_list.add_node(info)
        self.size += 1
        self.cache[path] = info

    def get_fd(self, path: str) -> BinaryIO:
        """Return an open read-write handle for ``path``, creating the file if needed."""
        with self._lock:
            clean_path = os.path.normpath(path)
            info = self.cache.get(clean_path)
            if info is not None:
                info.using += 1
                self.fd_list.move_node_to_front(info)
                return info.fd

            try:
                fd = _open_rw(clean_path)
            except OSError as exc:
                if exc.errno != errno.EMFILE:
                    raise
                try:
                    self.clean_useless_fd()
                except OSError:
                    raise exc from None
                fd = _open_rw(clean_path)
                self._add_to_cache(fd, clean_path)
                return fd

            if self.size >= self.clean_threshold_nums:
                try:
                    self.clean_useless_fd()
                except OSError:
                    pass
            if self.size >= self.max_fd_nums:
                return fd
            self._add_to_cache(fd, clean_path)
            return fd

    def reduce_using(self, path: str) -> None:
        """Give a handle back to the cache."""
        with self._lock:
            clean_path = os.path.normpath(path)
            info = self.cache.get(clean_path)
            if info is None:
                raise KeyError(f"{clean_path} is not in the fd cache")
            info.using -= 1

    def close(self) -> None:
        """Close every cached handle and empty the cache."""
        with self._lock:
            node = self.fd_list.tail.prev
            while node is not self.fd_list.head:
                node.fd.close()
                del self.cache[node.path]
                self.size -= 1
                node = node.prev
            self.fd_list.head.next = self.fd_list.tail
            self.fd_list.tail.prev = self.fd_list.head

    def clean_useless_fd(self) -> None:
        """Close up to the clean threshold of unused handles, least recent first."""
        with self._lock:
            remaining = self.clean_threshold_nums
            node = self.fd_list.tail.prev
            while node is not None and node is not self.fd_list.head and remaining > 0:
                previous = node.prev
                if node.using == 0:
                    self.fd_list.remove_node(node)
                    node.fd.close()
                    self.size -= 1
                    del self.cache[node.path]
                    remaining -= 1
                node = previous

    def close_by_path(self, path: str) -> None:
        """Close and forget the cached handle for ``path``, if any."""
        with self._lock:
            clean_path = os.path.normpath(path)
            info = self.cache.pop(clean_path, None)
            if info is None:
                return
            self.fd_list.remove_node(info)
            self.size -= 1
            info.fd.close()