"""Per-key locks for serializing writes to one order at a time."""

from __future__ import annotations

import threading
from typing import Hashable


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.users = 0  # holders plus waiters


class KeyedLocks:
    """One lock per key, kept only while someone holds or waits on it."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._entries: dict[Hashable, _Entry] = {}

    def acquire(self, key: Hashable, timeout: float = -1) -> bool:
        """Lock *key*, waiting at most *timeout* seconds (-1 waits forever)."""
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = _Entry()
            entry.users += 1

        if entry.lock.acquire(timeout=timeout):
            return True
        with self._guard:
            self._drop(key, entry)
        return False

    def release(self, key: Hashable) -> None:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                raise RuntimeError(f"Release of unlocked key {key!r}")
            entry.lock.release()
            self._drop(key, entry)

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)

    def _drop(self, key: Hashable, entry: _Entry) -> None:
        entry.users -= 1
        if entry.users == 0:
            del self._entries[key]
