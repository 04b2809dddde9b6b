"""Advisory lock files that extend the repository locks across processes.

Several ``cartkeeper`` invocations may share one data directory.  Each
key lock pairs the in-process ``RLock`` with a ``filelock.FileLock`` on
``<data_dir>/locks/<namespace>-<key>.lock``; the thread lock is taken
first so the lock file is only ever contended by other processes.
"""

from __future__ import annotations

import re
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock

from cartkeeper.domain.repository.locking import KeyedLocks

_UNSAFE = re.compile(r"[^A-Za-z0-9_.-]")


def lock_path_for(target: Path) -> Path:
    """The lock file guarding *target*, kept beside it."""
    return target.with_name(target.name + ".lock")


class FileKeyedLocks(KeyedLocks):

    def __init__(self, lock_dir: Path, namespace: str) -> None:
        super().__init__()
        self._lock_dir = lock_dir
        self._namespace = namespace
        self._file_guard = threading.Lock()
        self._file_locks: dict[str, FileLock] = {}

    def file_lock_for(self, key: str) -> FileLock:
        with self._file_guard:
            lock = self._file_locks.get(key)
            if lock is None:
                self._lock_dir.mkdir(parents=True, exist_ok=True)
                # Distinct keys may share a sanitized name; that only over-serializes.
                name = f"{self._namespace}-{_UNSAFE.sub('_', key)}.lock"
                lock = FileLock(str(self._lock_dir / name))
                self._file_locks[key] = lock
            return lock

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self.lock_for(key), self.file_lock_for(key):
            yield
