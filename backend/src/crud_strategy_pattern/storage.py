"""
Store selection and shared access.

'build_store' is the single place that knows the concrete backends; everything
else works with the 'Crud' interface. 'SharedStore' pairs the one store instance
the server owns with the lock that serialises request handlers, so at most one
store operation runs at a time.
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Generic

from loguru import logger

from crud_toolkit.crud import CsvStore, SqliteStore
from crud_toolkit.crud.base import Crud, T

from crud_strategy_pattern.settings import StorageBackend


def build_store(backend: StorageBackend, path: Path, record_type: type[T]) -> Crud[T]:
    """Instantiate the store for the requested backend.

    Args:
        backend:     'csv' or 'sqlite'.
        path:        Data file of the store.
        record_type: Record kind the store holds.
    """
    match backend:
        case StorageBackend.CSV:
            logger.info(f"Storage backend: CSV ({path})")
            return CsvStore(path, record_type)
        case StorageBackend.SQLITE:
            logger.info(f"Storage backend: SQLite ({path})")
            return SqliteStore(path, record_type)
        case _:
            raise ValueError(f"Unsupported backend {backend!r}. Choose 'csv' or 'sqlite'.")


class SharedStore(Generic[T]):
    """
    A store instance together with the lock guarding it.

    Handlers run on FastAPI's worker threads; each one holds the lock for the
    whole of its store access via 'acquire'.
    """

    def __init__(self, store: Crud[T]) -> None:
        self._store = store
        self._lock = threading.Lock()

    @contextmanager
    def acquire(self) -> Iterator[Crud[T]]:
        with self._lock:
            yield self._store
