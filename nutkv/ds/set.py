"""A keyed collection of unordered byte-string sets."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..errors import NutsError


class SetKeyNotFoundError(NutsError, KeyError):
    """No set is stored at the key."""

    def __init__(self, message: str = "key not found") -> None:
        super().__init__(message)

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class SetKeyNotExistError(NutsError, KeyError):
    """A set that an operation needs does not exist."""

    def __init__(self, message: str = "key not exist") -> None:
        super().__init__(message)

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class ItemEmptyError(NutsError, ValueError):
    """No item, or a missing item, was given."""

    def __init__(self, message: str = "item empty") -> None:
        super().__init__(message)


@dataclass
class Set:
    """Sets of byte strings stored by key."""

    sets: dict[str, set[bytes]] = field(default_factory=dict)

    def _both(self, key1: str, key2: str) -> tuple[set[bytes], set[bytes]]:
        if key1 not in self.sets:
            raise SetKeyNotExistError("set1 is not exists")
        if key2 not in self.sets:
            raise SetKeyNotExistError("set2 is not exists")
        return self.sets[key1], self.sets[key2]

    def sadd(self, key: str, *items: bytes) -> None:
        """Add ``items`` to the set at ``key``, creating the set if needed."""
        self.sets.setdefault(key, set()).update(bytes(item) for item in items)

    def srem(self, key: str, *items: bytes | None) -> None:
        """Remove ``items`` from the set at ``key``."""
        if key not in self.sets:
            raise SetKeyNotFoundError()
        if not items or items[0] is None:
            raise ItemEmptyError()
        members = self.sets[key]
        for item in items:
            if item is not None:
                members.discard(bytes(item))

    def shas_key(self, key: str) -> bool:
        """True if a set is stored at ``key``."""
        return key in self.sets

    def spop(self, key: str) -> bytes | None:
        """Remove and return an arbitrary member, or None if there is none."""
        members = self.sets.get(key)
        if not members:
            return None
        return members.pop()

    def scard(self, key: str) -> int:
        """Number of members in the set at ``key``; 0 if there is no set."""
        return len(self.sets.get(key, ()))

    def sdiff(self, key1: str, key2: str) -> list[bytes]:
        """Members of the first set that are not in the second."""
        first, second = self._both(key1, key2)
        return [item for item in first if item not in second]

    def sinter(self, key1: str, key2: str) -> list[bytes]:
        """Members common to both sets."""
        first, second = self._both(key1, key2)
        return [item for item in first if item in second]

    def sis_member(self, key: str, item: bytes) -> bool:
        """True if ``item`` is a member of the set at ``key``."""
        return bytes(item) in self.sets.get(key, ())

    def sare_members(self, key: str, *items: bytes) -> bool:
        """True if every one of ``items`` is a member of the set at ``key``."""
        if key not in self.sets:
            raise SetKeyNotExistError()
        members = self.sets[key]
        return all(bytes(item) in members for item in items)

    def smembers(self, key: str) -> list[bytes]:
        """All members of the set at ``key``."""
        if key not in self.sets:
            raise SetKeyNotExistError("set not exists")
        return list(self.sets[key])

    def smove(self, key1: str, key2: str, item: bytes) -> bool:
        """Move ``item`` from the set at ``key1`` to the set at ``key2``."""
        if key1 not in self.sets:
            raise SetKeyNotExistError("key1 is not exists")
        if key2 not in self.sets:
            raise SetKeyNotExistError("key2 is not exists")
        item = bytes(item)
        self.sets[key2].add(item)
        self.sets[key1].discard(item)
        return True

    def sunion(self, key1: str, key2: str) -> list[bytes]:
        """Members of either set, each once."""
        first, second = self._both(key1, key2)
        return list(first) + [item for item in second if item not in first]