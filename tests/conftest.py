import sys
from uuid import UUID

import pytest
from loguru import logger

from crud_toolkit.crud import CsvStore, SqliteStore
from crud_toolkit.data_models import Account

ID_1 = UUID("67e55044-10b1-426f-9247-bb680e5fe0c8")
ID_2 = UUID("67e55044-10b1-426f-9247-bb680e5fe0c9")


@pytest.fixture(autouse=True)
def _reset_loguru():
    # CLI tests install sinks on streams that close when the runner returns
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture()
def csv_path(tmp_path):
    return tmp_path / "accounts.csv"


@pytest.fixture()
def sqlite_path(tmp_path):
    return tmp_path / "accounts.sqlite"


@pytest.fixture(params=["csv", "sqlite"])
def store(request, tmp_path):
    """An empty account store, once per backend."""
    if request.param == "csv":
        return CsvStore(tmp_path / "accounts.csv", Account)
    return SqliteStore(tmp_path / "accounts.sqlite", Account)
