#!/usr/bin/env python3
"""
SQLite Durable Store

The authoritative cache tier. One SQLite file per node, replicated from the
primary to every replica by LiteFS; only the primary ever writes it.

Layout:
    cache(key TEXT PRIMARY KEY, metadata TEXT, value TEXT)
    metadata and value are JSON text.

Bootstrap:
    The connection is opened lazily on first use and reused for the process
    lifetime. Schema creation runs on the primary only (checked with the
    synchronous instance read, since nothing can be awaited here). If creating
    the table fails the file is deleted and creation is retried once: cache
    contents can always be recomputed, a corrupt file cannot be repaired.

Reads never fail on bad data: a row that does not parse is a cache miss.
"""

import sqlite3
from pathlib import Path
from typing import Any

import orjson
from pydantic import ValidationError

from litecache.core.config.constants import CACHE_TABLE_NAME, Stage
from litecache.core.exceptions import CacheStorageError, ConfigurationError
from litecache.core.interfaces.cache import InstanceResolver
from litecache.core.logging.logger import get_logger, log_stage
from litecache.core.models import CacheEntry

logger = get_logger(__name__)

_CREATE_TABLE = f"""
    CREATE TABLE IF NOT EXISTS {CACHE_TABLE_NAME} (
        key TEXT PRIMARY KEY,
        metadata TEXT,
        value TEXT
    )
"""


def _is_missing_table(error: sqlite3.Error) -> bool:
    return isinstance(error, sqlite3.OperationalError) and "no such table" in str(error)


class SQLiteCacheStore:
    """
    Durable key/value store on SQLite.

    Storage calls are synchronous and in-process; the async signatures keep
    the interface uniform with the forwarding path.
    """

    name = "SQLite cache"

    def __init__(self, db_path: str | Path | None, instances: InstanceResolver):
        self._db_path = Path(db_path) if db_path else None
        self._instances = instances
        self._conn: sqlite3.Connection | None = None

    @property
    def db_path(self) -> Path | None:
        return self._db_path

    # -------------------------------------------------------------------------
    # Connection lifecycle
    # -------------------------------------------------------------------------

    def _create_database(self, try_again: bool = True) -> sqlite3.Connection:
        if self._db_path is None:
            raise ConfigurationError("CACHE_DATABASE_PATH environment variable is required")

        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self._db_path), check_same_thread=False, isolation_level=None)

        if not self._instances.get_instance_info_sync().current_is_primary:
            return conn

        try:
            conn.execute(_CREATE_TABLE)
        except sqlite3.DatabaseError as e:
            conn.close()
            self._db_path.unlink(missing_ok=True)
            if try_again:
                log_stage(
                    logger,
                    Stage.STORAGE,
                    f'Error creating cache database, deleting the file at "{self._db_path}" and trying again...',
                    level="error",
                    error=str(e),
                )
                return self._create_database(try_again=False)
            raise CacheStorageError.from_exception(
                e, "Could not create cache database", path=str(self._db_path)
            ) from e

        log_stage(logger, Stage.STORAGE, "Cache database ready", path=str(self._db_path))
        return conn

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = self._create_database()
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _execute(self, sql: str, params: tuple = (), missing_ok: bool = False) -> sqlite3.Cursor | None:
        """
        Run one statement on the shared connection.

        With missing_ok, a missing cache table (a replica whose copy has not
        been replicated yet) returns None instead of raising.
        """
        try:
            return self._connection().execute(sql, params)
        except sqlite3.DatabaseError as e:
            if missing_ok and _is_missing_table(e):
                return None
            raise CacheStorageError.from_exception(
                e, "Cache database error", path=str(self._db_path)
            ) from e

    # -------------------------------------------------------------------------
    # Key/value operations
    # -------------------------------------------------------------------------

    async def get(self, key: str) -> CacheEntry | None:
        """Return the entry for `key`; None when absent or malformed."""
        cursor = self._execute(
            f"SELECT value, metadata FROM {CACHE_TABLE_NAME} WHERE key = ?", (key,), missing_ok=True
        )
        row = cursor.fetchone() if cursor is not None else None
        if row is None:
            return None

        value_text, metadata_text = row
        if not isinstance(value_text, str) or not isinstance(metadata_text, str):
            return None

        try:
            entry = CacheEntry.model_validate(
                {"metadata": orjson.loads(metadata_text), "value": orjson.loads(value_text)}
            )
        except (orjson.JSONDecodeError, ValidationError) as e:
            log_stage(
                logger,
                Stage.SQLITE_LOOKUP,
                "Malformed cache row treated as miss",
                level="warning",
                cache_key=key,
                error=str(e),
            )
            return None

        if entry.value is None:
            return None
        return entry

    async def set(self, key: str, entry: CacheEntry) -> None:
        self._execute(
            f"INSERT OR REPLACE INTO {CACHE_TABLE_NAME} (key, value, metadata) VALUES (?, ?, ?)",
            (
                key,
                orjson.dumps(entry.value).decode("utf-8"),
                orjson.dumps(entry.metadata.model_dump(by_alias=True)).decode("utf-8"),
            ),
        )

    async def delete(self, key: str) -> None:
        self._execute(f"DELETE FROM {CACHE_TABLE_NAME} WHERE key = ?", (key,))

    async def list_keys(self, limit: int) -> list[str]:
        cursor = self._execute(
            f"SELECT key FROM {CACHE_TABLE_NAME} ORDER BY key LIMIT ?", (max(limit, 0),), missing_ok=True
        )
        return [row[0] for row in cursor.fetchall()] if cursor is not None else []

    async def search_keys(self, query: str, limit: int) -> list[str]:
        """Case-sensitive substring match (instr, so % and _ are literal)."""
        cursor = self._execute(
            f"SELECT key FROM {CACHE_TABLE_NAME} WHERE instr(key, ?) > 0 ORDER BY key LIMIT ?",
            (query, max(limit, 0)),
            missing_ok=True,
        )
        return [row[0] for row in cursor.fetchall()] if cursor is not None else []

    # -------------------------------------------------------------------------
    # Monitoring
    # -------------------------------------------------------------------------

    async def health_check(self) -> dict[str, Any]:
        try:
            cursor = self._execute(f"SELECT COUNT(*) FROM {CACHE_TABLE_NAME}", missing_ok=True)
        except (CacheStorageError, ConfigurationError) as e:
            return {"status": "error", "path": str(self._db_path), "error": e.message}
        if cursor is None:
            return {"status": "degraded", "path": str(self._db_path), "error": "cache table missing"}
        (count,) = cursor.fetchone()
        return {"status": "healthy", "path": str(self._db_path), "entries": count}
