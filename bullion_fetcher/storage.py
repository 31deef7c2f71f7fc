"""Key-value string stores backing the price cache."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path

from bullion_fetcher.config import get_db_path


class KeyValueStore:
    """Opaque string store with get/set semantics."""

    def get(self, key: str) -> str | None:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    """Dict-backed store, lives as long as the process."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class SqliteStore(KeyValueStore):
    """SQLite persistence: one row per key in ``kv_store``."""

    def __init__(self, path: Path | str | None = None):
        self.path = Path(path) if path is not None else get_db_path()
        self._initialized = False

    @contextmanager
    def get_connection(self):
        """Context manager for SQLite connection."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        try:
            if not self._initialized:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS kv_store (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL
                    )
                """)
                self._initialized = True
            yield conn
            conn.commit()
        finally:
            conn.close()

    def get(self, key: str) -> str | None:
        with self.get_connection() as conn:
            row = conn.execute(
                "SELECT value FROM kv_store WHERE key = ?", (key,)
            ).fetchone()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        with self.get_connection() as conn:
            conn.execute(
                """
                INSERT INTO kv_store (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (key, value),
            )
