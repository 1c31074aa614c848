# coach/DB/sqlite_store.py
from __future__ import annotations
import logging
import os
import sqlite3
from typing import List

from .api import Row
from ..config import REMOTE_TABLE
from ..dates import now_iso
from ..errors import RemoteStoreError
from ..records import new_remote_id

log = logging.getLogger(__name__)

_COLUMNS = ("id", "user_id", "date", "created_at", "original_text",
            "grammar_version", "professional_version", "casual_version")

_SCHEMA = f"""
CREATE TABLE IF NOT EXISTS {REMOTE_TABLE} (
  id TEXT PRIMARY KEY,
  user_id TEXT NOT NULL,
  date TEXT,
  created_at TEXT NOT NULL,
  original_text TEXT NOT NULL,
  grammar_version TEXT,
  professional_version TEXT,
  casual_version TEXT
);
CREATE INDEX IF NOT EXISTS {REMOTE_TABLE}_user_created ON {REMOTE_TABLE}(user_id, created_at);
"""


class SQLiteRemoteStore:
    """SQLite-backed history table with the same row shape as the hosted one."""
    def __init__(self, db_path: str) -> None:
        self.db_path = os.path.abspath(db_path)
        os.makedirs(os.path.dirname(self.db_path) or ".", exist_ok=True)
        try:
            self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self.conn.row_factory = sqlite3.Row
            self.conn.executescript(_SCHEMA)
        except sqlite3.Error as e:
            raise RemoteStoreError(f"cannot open {self.db_path}: {e}") from e

    # ---- Read ----
    def select_all(self, user_id: str) -> List[Row]:
        try:
            cur = self.conn.execute(
                f"SELECT {', '.join(_COLUMNS)} FROM {REMOTE_TABLE} "
                "WHERE user_id=? ORDER BY created_at DESC, rowid DESC",
                (user_id,),
            )
            return [{k: r[k] for k in _COLUMNS if r[k] is not None} for r in cur.fetchall()]
        except sqlite3.Error as e:
            raise RemoteStoreError(f"select failed: {e}") from e

    # ---- Create ----
    def insert(self, row: Row) -> Row:
        stored = dict(row)
        stored.setdefault("id", new_remote_id())
        stored.setdefault("created_at", stored.get("date") or now_iso())
        if not stored.get("user_id"):
            raise RemoteStoreError("insert without user_id")
        try:
            self.conn.execute(
                f"INSERT INTO {REMOTE_TABLE}({', '.join(_COLUMNS)}) VALUES ({', '.join('?' * len(_COLUMNS))})",
                tuple(stored.get(c) for c in _COLUMNS),
            )
            self.conn.commit()
        except sqlite3.Error as e:
            raise RemoteStoreError(f"insert failed: {e}") from e
        log.debug("inserted %s for user %s", stored["id"], stored["user_id"])
        return {k: v for k, v in stored.items() if v is not None}

    # ---- Delete ----
    def delete(self, record_id: str, user_id: str) -> None:
        try:
            self.conn.execute(
                f"DELETE FROM {REMOTE_TABLE} WHERE id=? AND user_id=?", (str(record_id), user_id)
            )
            self.conn.commit()
        except sqlite3.Error as e:
            raise RemoteStoreError(f"delete failed: {e}") from e

    def count(self) -> int:
        return int(self.conn.execute(f"SELECT COUNT(*) FROM {REMOTE_TABLE}").fetchone()[0])

    # ---- lifecycle ----
    def close(self) -> None:
        self.conn.close()
