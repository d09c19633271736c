from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Mapping, Optional

from bizledger.domain.errors import PersistenceError


class SqliteKeyValueStore:
    """Persistent string key/value store; each key holds one JSON document."""

    def __init__(self, db_path: Path | str):
        self.db_path = str(db_path)

    def _conn(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    def init_db(self) -> None:
        self.run_migrations()

    def run_migrations(self) -> None:
        conn = self._conn()
        try:
            cur = conn.cursor()
            cur.execute("BEGIN")
            cur.execute("CREATE TABLE IF NOT EXISTS schema_migrations (version INTEGER PRIMARY KEY, applied_at TEXT NOT NULL)")
            cur.execute("SELECT COALESCE(MAX(version), 0) FROM schema_migrations")
            current_version = int(cur.fetchone()[0])

            migrations = [
                (1, self._migration_v1_base),
            ]

            for version, migration in migrations:
                if version <= current_version:
                    continue
                migration(cur)
                cur.execute(
                    "INSERT INTO schema_migrations (version, applied_at) VALUES (?, datetime('now'))",
                    (version,),
                )
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise PersistenceError("Database migration failed.") from exc
        finally:
            conn.close()

    def _migration_v1_base(self, cur: sqlite3.Cursor) -> None:
        cur.execute(
            """
        CREATE TABLE IF NOT EXISTS kv_entries (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
        """
        )

    def get(self, key: str) -> Optional[str]:
        conn = self._conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT value FROM kv_entries WHERE key = ?", (key,))
            row = cur.fetchone()
            return str(row[0]) if row else None
        except sqlite3.Error as exc:
            raise PersistenceError(f"Could not read '{key}' from storage.") from exc
        finally:
            conn.close()

    def set(self, key: str, value: str) -> None:
        self.set_many({key: value})

    def set_many(self, entries: Mapping[str, str]) -> None:
        """Write every entry in one transaction; nothing is written if any fails."""
        conn = self._conn()
        try:
            cur = conn.cursor()
            cur.execute("BEGIN")
            for key, value in entries.items():
                cur.execute(
                    """
                    INSERT INTO kv_entries (key, value, updated_at) VALUES (?, ?, datetime('now'))
                    ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at
                    """,
                    (key, value),
                )
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise PersistenceError(f"Could not write {', '.join(entries)} to storage.") from exc
        finally:
            conn.close()

    def replace_all(self, entries: Mapping[str, str]) -> None:
        """Make the store hold exactly these entries, in one transaction."""
        conn = self._conn()
        try:
            cur = conn.cursor()
            cur.execute("BEGIN")
            cur.execute("DELETE FROM kv_entries")
            cur.executemany(
                "INSERT INTO kv_entries (key, value, updated_at) VALUES (?, ?, datetime('now'))",
                list(entries.items()),
            )
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise PersistenceError("Could not replace storage contents.") from exc
        finally:
            conn.close()

    def delete(self, key: str) -> None:
        conn = self._conn()
        try:
            conn.execute("DELETE FROM kv_entries WHERE key = ?", (key,))
            conn.commit()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Could not delete '{key}' from storage.") from exc
        finally:
            conn.close()

    def keys(self) -> list[str]:
        conn = self._conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT key FROM kv_entries ORDER BY key")
            return [str(r[0]) for r in cur.fetchall()]
        except sqlite3.Error as exc:
            raise PersistenceError("Could not list storage keys.") from exc
        finally:
            conn.close()

    def integrity_check(self) -> str:
        conn = self._conn()
        cur = conn.cursor()
        cur.execute("PRAGMA integrity_check")
        row = cur.fetchone()
        conn.close()
        return str(row[0]) if row else "unknown"
