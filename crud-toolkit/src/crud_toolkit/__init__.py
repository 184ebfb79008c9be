"""
Pluggable record stores.

Records ('User', 'Account') are persisted through the 'Crud' interface, which
has two interchangeable implementations:

    from crud_toolkit.crud import CsvStore, SqliteStore
    from crud_toolkit.data_models import Account

    store = CsvStore("accounts.csv", Account)     # or SqliteStore("accounts.sqlite", Account)
    store.create(Account(fullname="Ada Lovelace"))
    accounts = store.read_all()
"""
