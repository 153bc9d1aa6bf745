"""
SQLite-backed state backend.
Selectors are compiled into parameterized json_extract equality predicates,
so filtering happens inside SQLite rather than in Python.
"""

import re
import sqlite3
from typing import Dict, List, Optional, Tuple

from .backend import IStateBackend, IStateQueryIterator, KV, selector_fields
from .db import connect, get_db, init_db
from .errors import BackendError, KeyExistsError, SelectorError

_FIELD_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Rows whose value is not valid JSON get a NULL doc and never match
_SELECT_DOCUMENTS = '''
    SELECT key, value FROM (
        SELECT key, value,
               CASE WHEN json_valid(CAST(value AS TEXT)) THEN CAST(value AS TEXT) END AS doc
        FROM state
    )
    WHERE doc IS NOT NULL
'''


def compile_selector(selector: Dict) -> Tuple[str, List[str]]:
    """Translate an equality selector into SQL and its parameters."""
    fields = selector_fields(selector)

    sql = _SELECT_DOCUMENTS
    params = []
    for field, value in fields.items():
        if not _FIELD_NAME.match(field):
            raise SelectorError(f"Unsupported selector field: {field!r}")
        path = f'$."{field}"'
        sql += " AND json_type(doc, ?) = 'text' AND json_extract(doc, ?) = ?"
        params.extend([path, path, value])

    sql += " ORDER BY key"
    return sql, params


class SQLiteQueryIterator(IStateQueryIterator):
    """Cursor-backed result iterator. Owns its connection until closed."""

    def __init__(self, conn: sqlite3.Connection, cursor: sqlite3.Cursor):
        self._conn = conn
        self._cursor = cursor
        self._pending = None
        self._error = None
        self.closed = False

    def _prefetch(self):
        if self._pending is not None or self._error is not None or self.closed:
            return
        try:
            self._pending = self._cursor.fetchone()
        except sqlite3.Error as e:
            self._error = e

    def has_next(self) -> bool:
        self._prefetch()
        # A pending fetch error is surfaced by next()
        return self._pending is not None or self._error is not None

    def next(self) -> KV:
        if self.closed:
            raise BackendError("Query iterator is closed")

        self._prefetch()
        if self._error is not None:
            raise BackendError(f"Failed to read query result: {self._error}") from self._error
        if self._pending is None:
            raise BackendError("Query iterator is exhausted")

        key, value = self._pending
        self._pending = None
        return KV(key=key, value=bytes(value))

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        try:
            self._cursor.close()
        finally:
            self._conn.close()


class SQLiteStateBackend(IStateBackend):
    """State backend persisted in a single SQLite table."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        try:
            init_db(db_path)
        except sqlite3.Error as e:
            raise BackendError(f"Failed to initialize state database: {e}") from e

    def get(self, key: str) -> Optional[bytes]:
        try:
            with get_db(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT value FROM state WHERE key = ?", (key,))
                row = cursor.fetchone()
        except (sqlite3.Error, UnicodeEncodeError) as e:
            raise BackendError(str(e)) from e

        return bytes(row[0]) if row else None

    def put(self, key: str, value: bytes) -> None:
        if not key:
            raise BackendError("key must not be empty")
        try:
            with get_db(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute(
                    "INSERT INTO state (key, value) VALUES (?, ?)",
                    (key, sqlite3.Binary(value))
                )
                conn.commit()
        except sqlite3.IntegrityError as e:
            raise KeyExistsError(key) from e
        except (sqlite3.Error, UnicodeEncodeError) as e:
            raise BackendError(str(e)) from e

    def query_by_selector(self, selector: Dict) -> IStateQueryIterator:
        sql, params = compile_selector(selector)

        conn = connect(self.db_path)
        try:
            cursor = conn.cursor()
            cursor.execute(sql, params)
        except (sqlite3.Error, UnicodeEncodeError) as e:
            conn.close()
            raise BackendError(f"Failed to execute selector query: {e}") from e

        return SQLiteQueryIterator(conn, cursor)
