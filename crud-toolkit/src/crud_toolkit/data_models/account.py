"""
Account data model.

Accounts are the record kind served over HTTP by the demo server.
"""

from typing import ClassVar

from crud_toolkit.data_models.record import Record


class Account(Record):
    """An account, identified by 'id' and labelled with 'fullname'."""

    table_name: ClassVar[str] = "accounts"
