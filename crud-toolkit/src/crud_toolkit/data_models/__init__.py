from crud_toolkit.data_models.account import Account
from crud_toolkit.data_models.record import Fullname, Record
from crud_toolkit.data_models.user import User

__all__ = [
    "Account",
    "Fullname",
    "Record",
    "User",
]
