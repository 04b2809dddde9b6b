"""A JSON list stored in one file, shared by the JSON repositories.

Every read-modify-write cycle runs under one lock per file so that two
writers updating *different* records in the same file never lose each
other's changes.  The lock is an ``RLock`` for threads plus a lock file
for other processes sharing the data directory.  Writes go to a sibling
temp file and are swapped in with ``os.replace`` so a crash never leaves
a half-written file.
"""

from __future__ import annotations

import json
import os
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock

from cartkeeper.infrastructure.persistence.file_locks import lock_path_for


class JsonFile:

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.RLock()
        self._process_lock = FileLock(str(lock_path_for(file_path)))
        self._ensure_file()

    @property
    def path(self) -> Path:
        return self._file_path

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        with self._lock, self._process_lock:
            yield

    def load(self) -> list[dict]:
        with self._exclusive():
            return json.loads(self._file_path.read_text(encoding="utf-8"))

    def persist(self, records: list[dict]) -> None:
        with self._exclusive():
            tmp = self._file_path.with_suffix(self._file_path.suffix + ".tmp")
            tmp.write_text(json.dumps(records, indent=2) + "\n", encoding="utf-8")
            os.replace(tmp, self._file_path)

    @contextmanager
    def editing(self) -> Iterator[list[dict]]:
        """Load the records, let the caller mutate the list, then persist it.

        Nothing is written if the ``with`` block raises.
        """
        with self._exclusive():
            records = self.load()
            yield records
            self.persist(records)

    def upsert(self, record: dict, key: str) -> None:
        with self.editing() as records:
            for i, raw in enumerate(records):
                if raw[key] == record[key]:
                    records[i] = record
                    break
            else:
                records.append(record)

    def remove_where(self, predicate: Callable[[dict], bool]) -> None:
        with self.editing() as records:
            records[:] = [raw for raw in records if not predicate(raw)]

    def _ensure_file(self) -> None:
        with self._exclusive():
            if not self._file_path.exists():
                self._file_path.write_text("[]", encoding="utf-8")
