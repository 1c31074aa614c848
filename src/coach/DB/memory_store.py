# coach/DB/memory_store.py
from __future__ import annotations
import copy
from typing import Dict, Iterable, List, Optional

from .api import Row
from ..dates import now_iso
from ..records import new_remote_id


class MemoryRemoteStore:
    """In-memory stand-in for the hosted table (tests and ephemeral runs)."""
    def __init__(self, rows: Optional[Iterable[Row]] = None) -> None:
        self._rows: Dict[str, Row] = {}
        for r in rows or ():
            self.insert(r)

    # R
    def select_all(self, user_id: str) -> List[Row]:
        mine = [dict(r) for r in self._rows.values() if r.get("user_id") == user_id]
        # stable: same timestamp keeps insertion order
        mine.sort(key=lambda r: r["created_at"], reverse=True)
        return mine

    # C
    def insert(self, row: Row) -> Row:
        stored = dict(row)
        stored.setdefault("id", new_remote_id())
        stored.setdefault("created_at", stored.get("date") or now_iso())
        self._rows[str(stored["id"])] = stored
        return dict(stored)

    # D
    def delete(self, record_id: str, user_id: str) -> None:
        row = self._rows.get(str(record_id))
        if row is not None and row.get("user_id") == user_id:
            del self._rows[str(record_id)]

    def count(self) -> int:
        return len(self._rows)

    def close(self) -> None:
        self._rows.clear()


class MemoryLocalStore:
    """In-memory local list; keeps copies so callers cannot mutate stored state."""
    def __init__(self, items: Optional[Iterable[Row]] = None) -> None:
        self._items: List[Row] = [dict(i) for i in items or ()]

    def read_all(self) -> List[Row]:
        return copy.deepcopy(self._items)

    def write_all(self, items: Iterable[Row]) -> None:
        self._items = [dict(i) for i in items]

    def close(self) -> None:
        self._items = []
