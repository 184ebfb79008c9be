"""
User data model.

Structurally identical to 'Account'; kept as a separate record kind so each has
its own table (or file) and the two can never be mixed up in one store.
"""

from typing import ClassVar

from crud_toolkit.data_models.record import Record


class User(Record):
    """A person using the application."""

    table_name: ClassVar[str] = "users"
