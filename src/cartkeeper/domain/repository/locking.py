"""Per-key locks shared by the repositories.

Each repository owns one registry, so mutations of a single aggregate
(one owner's cart, one product's counters, one order) serialize while
different aggregates never contend.  The in-memory registry only covers
threads of one process; durable adapters pass a registry that also
excludes other processes.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager


class KeyedLocks:

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.RLock] = {}

    def lock_for(self, key: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self.lock_for(key):
            yield


class LockingRepository:
    """Mixin giving a repository a ``locked(key)`` context manager.

    Subclasses must call ``super().__init__()``.
    """

    def __init__(self, key_locks: KeyedLocks | None = None) -> None:
        self._key_locks = key_locks if key_locks is not None else KeyedLocks()

    def locked(self, key: str):
        """Hold the lock for *key* for the duration of a ``with`` block."""
        return self._key_locks.hold(key)
