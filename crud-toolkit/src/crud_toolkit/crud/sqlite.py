"""
SQLite store.

One table per record kind (named by 'Record.table_name') with two TEXT columns,
'id' being the primary key. Every call opens its own connection and closes it
before returning, so an instance holds no resources between calls. Locking is
left to SQLite's defaults.

Reads never create the database: a missing file or a missing table reads as an
empty store, and 'update' / 'delete' against it do nothing. The table is created
by the first 'create'.
"""

import os
import re
import sqlite3
from collections.abc import Iterator
from contextlib import closing, contextmanager
from pathlib import Path
from uuid import UUID

from loguru import logger

from crud_toolkit.crud.base import BackendError, Crud, T, UnknownCrudError

SQL_CREATE_TABLE = """
    CREATE TABLE IF NOT EXISTS {table} (
        id TEXT PRIMARY KEY,
        fullname TEXT
    );
"""
SQL_TABLE_EXISTS = "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?"
SQL_INSERT = "INSERT INTO {table} (id, fullname) VALUES (?, ?)"
SQL_SELECT_ALL = "SELECT id, fullname FROM {table} ORDER BY rowid"
SQL_UPDATE_BY_ID = "UPDATE {table} SET fullname = ? WHERE id = ?"
SQL_DELETE_BY_ID = "DELETE FROM {table} WHERE id = ?"

DEFAULT_TIMEOUT_SECONDS = 5.0

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class SqliteStore(Crud[T]):
    """
    Single-table SQLite store holding one record kind.

    Rows come back in insertion (rowid) order, the same order 'CsvStore' returns.

    Attributes:
        path: The database file. Its parent directory must already exist.
        record_type: The 'Record' subclass rows are turned into.
        table: Table name, taken from 'record_type.table_name'.
        timeout: Seconds to wait for a lock held by another connection.
    """

    def __init__(
        self,
        path: str | os.PathLike[str],
        record_type: type[T],
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        super().__init__(record_type)
        if not _IDENTIFIER_RE.match(record_type.table_name):
            raise ValueError(f"Invalid table name {record_type.table_name!r}")
        self.path = Path(path)
        self.table = record_type.table_name
        self.timeout = timeout

    def create(self, item: T) -> None:
        logger.debug(f"Creating {self.record_type.__name__} id='{item.id}' in '{self.path}'")
        with self._connect() as conn:
            conn.execute(SQL_CREATE_TABLE.format(table=self.table))
            conn.execute(SQL_INSERT.format(table=self.table), (str(item.id), item.fullname))

    def read_all(self) -> list[T]:
        logger.debug(f"Reading all {self.record_type.__name__} records from '{self.path}'")
        if not self.path.exists():
            return []
        with self._connect() as conn:
            if not self._table_exists(conn):
                logger.debug(f"No table '{self.table}' in '{self.path}'")
                return []
            rows = conn.execute(SQL_SELECT_ALL.format(table=self.table)).fetchall()
        return [self._from_row(raw_id, fullname) for raw_id, fullname in rows]

    def update(self, item: T) -> None:
        logger.debug(f"Updating {self.record_type.__name__} id='{item.id}' in '{self.path}'")
        self._execute_if_table(SQL_UPDATE_BY_ID, (item.fullname, str(item.id)))

    def delete(self, item: T) -> None:
        logger.debug(f"Deleting {self.record_type.__name__} id='{item.id}' from '{self.path}'")
        self._execute_if_table(SQL_DELETE_BY_ID, (str(item.id),))

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection inside a transaction; commit on success, roll back on error."""
        try:
            with closing(sqlite3.connect(self.path, timeout=self.timeout)) as conn:
                with conn:
                    yield conn
        except sqlite3.Error as exc:
            raise BackendError(f"SQLite operation on '{self.path}' failed: {exc}") from exc
        except UnicodeError as exc:
            # sqlite3 stores TEXT as UTF-8; a lone surrogate cannot be encoded
            raise UnknownCrudError(f"SQLite operation on '{self.path}' failed: {exc}") from exc

    def _table_exists(self, conn: sqlite3.Connection) -> bool:
        return conn.execute(SQL_TABLE_EXISTS, (self.table,)).fetchone() is not None

    def _execute_if_table(self, sql: str, params: tuple[str, ...]) -> None:
        if not self.path.exists():
            logger.debug(f"'{self.path}' does not exist, nothing to change")
            return
        with self._connect() as conn:
            if not self._table_exists(conn):
                logger.debug(f"No table '{self.table}' in '{self.path}', nothing to change")
                return
            cursor = conn.execute(sql.format(table=self.table), params)
        if cursor.rowcount == 0:
            logger.debug(f"No {self.record_type.__name__} with id='{params[-1]}' in '{self.path}'")

    def _from_row(self, raw_id: object, fullname: object) -> T:
        try:
            return self.record_type(id=UUID(str(raw_id)), fullname=fullname)
        except ValueError as exc:
            raise BackendError(f"Corrupt row in '{self.table}' of '{self.path}': id={raw_id!r}") from exc
