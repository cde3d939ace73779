"""
Artifact Store
==============

Durable key/value storage for SniperAI:
1. Model weight artifacts, keyed ``sniper-ai-<task>-model``
2. Training logs as JSON arrays, keyed ``sniper-ai-<task>-training``

Backed by a single SQLite table so that a weight update and its training-log
entry can be committed together.
"""

import sqlite3
import threading
import time
from typing import Dict, List, Optional, Union

from loguru import logger

from components.sniper_ai.errors import PersistenceError

Value = Union[bytes, str]


class ArtifactStore:
    """SQLite-backed key/value store for model weights and training logs"""

    def __init__(self, db_path: str = "sniper_ai.db"):
        self.db_path = db_path
        self._lock = threading.RLock()
        self.conn: Optional[sqlite3.Connection] = None
        self._init_database()

    def _init_database(self):
        try:
            self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
            if self.db_path != ":memory:":
                self.conn.execute("PRAGMA journal_mode=WAL")
                self.conn.execute("PRAGMA synchronous=NORMAL")

            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS artifacts (
                    key TEXT PRIMARY KEY,
                    value BLOB NOT NULL,
                    updated_at INTEGER NOT NULL
                )
            """)
            self.conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"cannot open artifact store at {self.db_path}: {e}") from e

        logger.info(f"🗃️ ArtifactStore initialized at {self.db_path}")

    def _connection(self) -> sqlite3.Connection:
        if self.conn is None:
            raise PersistenceError("artifact store is closed")
        return self.conn

    def get(self, key: str) -> Optional[Value]:
        with self._lock:
            try:
                row = self._connection().execute(
                    "SELECT value FROM artifacts WHERE key = ?", (key,)
                ).fetchone()
            except sqlite3.Error as e:
                raise PersistenceError(f"read of {key} failed: {e}") from e
        return row[0] if row else None

    def get_text(self, key: str) -> Optional[str]:
        value = self.get(key)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def put(self, key: str, value: Value) -> None:
        self.put_many({key: value})

    def put_many(self, items: Dict[str, Value]) -> None:
        """Write all items in one transaction; none are written on failure"""
        now = int(time.time())
        with self._lock:
            conn = self._connection()
            try:
                with conn:
                    conn.executemany(
                        "INSERT OR REPLACE INTO artifacts (key, value, updated_at) VALUES (?, ?, ?)",
                        [(key, value, now) for key, value in items.items()],
                    )
            except sqlite3.Error as e:
                raise PersistenceError(f"write of {', '.join(items)} failed: {e}") from e
        logger.debug(f"💾 Persisted {len(items)} artifact(s): {', '.join(items)}")

    def delete(self, *keys: str) -> int:
        with self._lock:
            conn = self._connection()
            try:
                with conn:
                    cursor = conn.executemany("DELETE FROM artifacts WHERE key = ?", [(k,) for k in keys])
            except sqlite3.Error as e:
                raise PersistenceError(f"delete of {', '.join(keys)} failed: {e}") from e
        return cursor.rowcount

    def keys(self, prefix: str = "") -> List[str]:
        with self._lock:
            try:
                rows = self._connection().execute(
                    "SELECT key FROM artifacts WHERE key LIKE ? ORDER BY key", (f"{prefix}%",)
                ).fetchall()
            except sqlite3.Error as e:
                raise PersistenceError(f"key listing failed: {e}") from e
        return [row[0] for row in rows]

    def close(self):
        with self._lock:
            if self.conn is not None:
                self.conn.close()
                self.conn = None
                logger.info(f"🗃️ ArtifactStore closed ({self.db_path})")
