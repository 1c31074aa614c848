# coach/DB/api.py
from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional, Protocol

from ..config import LOCAL_KEY
from ..errors import StoreConfigError

Row = Dict[str, Any]


class RemoteRecordStore(Protocol):
    """Per-user collection keyed by hyphenated ids; reads come back newest first."""
    # Read
    def select_all(self, user_id: str) -> List[Row]: ...
    # Create
    def insert(self, row: Row) -> Row: ...
    # Delete
    def delete(self, record_id: str, user_id: str) -> None: ...
    # lifecycle
    def close(self) -> None: ...


class LocalRecordStore(Protocol):
    """One ordered list, read and overwritten as a whole."""
    def read_all(self) -> List[Row]: ...
    def write_all(self, items: Iterable[Row]) -> None: ...
    def close(self) -> None: ...


def make_remote_store(dsn: str) -> RemoteRecordStore:
    """
    Factory:
      - sqlite:///path -> SQLiteRemoteStore (file created on first use)
      - memory://      -> MemoryRemoteStore
    """
    if dsn.startswith("sqlite:///"):
        from .sqlite_store import SQLiteRemoteStore
        return SQLiteRemoteStore(dsn.removeprefix("sqlite:///"))

    if dsn.startswith("memory://"):
        from .memory_store import MemoryRemoteStore
        return MemoryRemoteStore()

    raise StoreConfigError(f"Unsupported remote store DSN: {dsn}")


def make_local_store(dsn: str, *, key: Optional[str] = None) -> LocalRecordStore:
    """
    Factory:
      - json:///path -> JsonFileLocalStore (list serialized under `key`)
      - memory://    -> MemoryLocalStore
    """
    key = key or LOCAL_KEY
    if dsn.startswith("json:///"):
        from .json_store import JsonFileLocalStore
        return JsonFileLocalStore(dsn.removeprefix("json:///"), key=key)

    if dsn.startswith("memory://"):
        from .memory_store import MemoryLocalStore
        return MemoryLocalStore()

    raise StoreConfigError(f"Unsupported local store DSN: {dsn}")
