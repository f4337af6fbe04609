"""A JSON file holding one collection of documents.

Every repository read-modify-write cycle runs under a lock shared by all
instances pointing at the same file, which is what makes ``add`` and the
membership primitives atomic within a process.
"""

from __future__ import annotations

import json
import threading
from contextlib import contextmanager
from decimal import Decimal
from pathlib import Path
from typing import Iterator

_LOCKS: dict[Path, threading.RLock] = {}
_LOCKS_GUARD = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    with _LOCKS_GUARD:
        return _LOCKS.setdefault(path, threading.RLock())


def decimal_to_raw(value: Decimal) -> int | float:
    """Store amounts as JSON numbers: integral values as ints."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def decimal_from_raw(raw: int | float | str) -> Decimal:
    # Older documents hold amounts as strings.
    return Decimal(str(raw))


class JsonCollection:

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path.resolve()
        self._lock = _lock_for(self._file_path)
        self._ensure_file()

    @contextmanager
    def locked(self) -> Iterator[None]:
        with self._lock:
            yield

    def load(self) -> list[dict]:
        with self._lock:
            return json.loads(self._file_path.read_text(encoding="utf-8"))

    def persist(self, records: list[dict]) -> None:
        with self._lock:
            tmp = self._file_path.with_suffix(self._file_path.suffix + ".tmp")
            tmp.write_text(json.dumps(records, indent=2) + "\n", encoding="utf-8")
            tmp.replace(self._file_path)

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
