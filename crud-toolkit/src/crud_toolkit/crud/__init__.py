from crud_toolkit.crud.base import (
    BackendError,
    Crud,
    CrudError,
    RecordNotFoundError,
    StorageIOError,
    UnknownCrudError,
)
from crud_toolkit.crud.csv import CsvStore
from crud_toolkit.crud.sqlite import SqliteStore

__all__ = [
    "BackendError",
    "Crud",
    "CrudError",
    "CsvStore",
    "RecordNotFoundError",
    "SqliteStore",
    "StorageIOError",
    "UnknownCrudError",
]
