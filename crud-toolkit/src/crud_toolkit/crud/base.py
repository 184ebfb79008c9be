"""
Record store abstractions and error taxonomy.

'Crud' is the strategy interface every storage backend implements. It is
generic over the record type, so a single backend class serves every record
kind, and the HTTP layer holds a 'Crud[Account]' without knowing which backend
sits behind it. Backends are chosen once at start-up; swapping one for another
changes no call site.

Failures are reported as 'CrudError' subclasses with the underlying exception
chained as '__cause__':

    RecordNotFoundError  reserved; the contract has no point read
    StorageIOError       file-system failure (permissions, missing directory)
    BackendError         embedded database failure or a row that breaks the schema
    UnknownCrudError     anything else, e.g. a data file that is not valid UTF-8

Two leniencies are part of the contract: 'read_all' on storage that does not
exist yet returns an empty list, and 'update' / 'delete' of an unknown id
succeed without doing anything.

Concrete implementations: 'CsvStore', 'SqliteStore'.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from crud_toolkit.data_models.record import Record

T = TypeVar("T", bound=Record)


class CrudError(Exception):
    """Base class for every failure raised by a record store."""


class RecordNotFoundError(CrudError):
    """The requested record does not exist."""


class StorageIOError(CrudError):
    """The backing file could not be read or written."""


class BackendError(CrudError):
    """The embedded database rejected an operation or returned a corrupt row."""


class UnknownCrudError(CrudError):
    """A failure that fits no other category."""


class Crud(ABC, Generic[T]):
    """
    Abstract base class for record stores.

    Every method blocks until its I/O is done and the change is durable.
    Stores do no locking of their own: callers sharing one instance between
    threads must serialise access to it.

    Attributes:
        record_type: The 'Record' subclass this store reads and writes.
    """

    def __init__(self, record_type: type[T]) -> None:
        self.record_type = record_type

    @abstractmethod
    def create(self, item: T) -> None:
        """Persist a new record. Uniqueness of 'item.id' is not checked by the contract."""
        pass

    @abstractmethod
    def read_all(self) -> list[T]:
        """Return every stored record, or an empty list if the storage does not exist yet."""
        pass

    @abstractmethod
    def update(self, item: T) -> None:
        """Replace the 'fullname' of the record whose id is 'item.id'. Unknown ids are a no-op."""
        pass

    @abstractmethod
    def delete(self, item: T) -> None:
        """Remove the record whose id is 'item.id'. Unknown ids are a no-op."""
        pass
