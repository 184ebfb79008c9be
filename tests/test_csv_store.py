import os

import pytest
from pydantic import ValidationError

from crud_toolkit.crud import CsvStore, StorageIOError, UnknownCrudError
from crud_toolkit.data_models import Account, User

from conftest import ID_1, ID_2

TWO_ACCOUNTS = (
    "67e55044-10b1-426f-9247-bb680e5fe0c8,Test Account 1\n"
    "67e55044-10b1-426f-9247-bb680e5fe0c9,Test Account 2"
)


def test_create_creates_file_when_not_exist(csv_path):
    store = CsvStore(csv_path, Account)
    store.create(Account(id=ID_1, fullname="Test Account"))
    assert csv_path.read_text(encoding="utf-8") == "67e55044-10b1-426f-9247-bb680e5fe0c8,Test Account\n"


def test_create_appends_without_clobbering(csv_path):
    csv_path.write_text("67e55044-10b1-426f-9247-bb680e5fe0c8,Test Account 1\n", encoding="utf-8")
    CsvStore(csv_path, Account).create(Account(id=ID_2, fullname="Test Account 2"))
    assert csv_path.read_text(encoding="utf-8") == TWO_ACCOUNTS + "\n"


def test_create_after_missing_final_newline_starts_new_line(csv_path):
    csv_path.write_text("67e55044-10b1-426f-9247-bb680e5fe0c8,Test Account 1", encoding="utf-8")
    CsvStore(csv_path, Account).create(Account(id=ID_2, fullname="Test Account 2"))
    assert csv_path.read_text(encoding="utf-8").splitlines() == TWO_ACCOUNTS.split("\n")


def test_read_all_returns_empty_and_does_not_create_file(csv_path):
    store = CsvStore(csv_path, Account)
    assert store.read_all() == []
    assert not csv_path.exists()


def test_read_all_returns_one_of_one(csv_path):
    csv_path.write_text("67e55044-10b1-426f-9247-bb680e5fe0c8,Test Account\n", encoding="utf-8")
    accounts = CsvStore(csv_path, Account).read_all()
    assert accounts == [Account(id=ID_1, fullname="Test Account")]


def test_read_all_keeps_insertion_order(csv_path):
    csv_path.write_text(TWO_ACCOUNTS, encoding="utf-8")
    accounts = CsvStore(csv_path, Account).read_all()
    assert [a.fullname for a in accounts] == ["Test Account 1", "Test Account 2"]


def test_read_all_skips_malformed_and_blank_lines(csv_path):
    csv_path.write_text(
        "67e55044-10b1-426f-9247-bb680e5fe0c8,Test Account 1\n"
        "just a name\n"
        "\n"
        "not-a-uuid,Someone\n"
        "67e55044-10b1-426f-9247-bb680e5fe0c9,Test Account 2\n",
        encoding="utf-8",
    )
    accounts = CsvStore(csv_path, Account).read_all()
    assert [a.id for a in accounts] == [ID_1, ID_2]


def test_read_all_handles_crlf_files(csv_path):
    csv_path.write_bytes(TWO_ACCOUNTS.replace("\n", "\r\n").encode("utf-8") + b"\r\n")
    accounts = CsvStore(csv_path, Account).read_all()
    assert [a.fullname for a in accounts] == ["Test Account 1", "Test Account 2"]


def test_update_one_of_one(csv_path):
    csv_path.write_text("67e55044-10b1-426f-9247-bb680e5fe0c8,Test Account\n", encoding="utf-8")
    CsvStore(csv_path, Account).update(Account(id=ID_1, fullname="Modified Account"))
    assert csv_path.read_text(encoding="utf-8") == "67e55044-10b1-426f-9247-bb680e5fe0c8,Modified Account\n"


def test_update_one_of_two(csv_path):
    csv_path.write_text(TWO_ACCOUNTS, encoding="utf-8")
    CsvStore(csv_path, Account).update(Account(id=ID_1, fullname="Modified Account 1"))
    lines = csv_path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "67e55044-10b1-426f-9247-bb680e5fe0c8,Modified Account 1"
    assert lines[1] == "67e55044-10b1-426f-9247-bb680e5fe0c9,Test Account 2"


def test_delete_one_of_one(csv_path):
    csv_path.write_text("67e55044-10b1-426f-9247-bb680e5fe0c8,Test Account\n", encoding="utf-8")
    CsvStore(csv_path, Account).delete(Account(id=ID_1, fullname="Test Account"))
    assert csv_path.read_text(encoding="utf-8") == ""


def test_delete_one_of_two(csv_path):
    csv_path.write_text(TWO_ACCOUNTS, encoding="utf-8")
    store = CsvStore(csv_path, Account)
    store.delete(Account(id=ID_1, fullname="ignored"))
    assert store.read_all() == [Account(id=ID_2, fullname="Test Account 2")]
    assert csv_path.read_text(encoding="utf-8") == "67e55044-10b1-426f-9247-bb680e5fe0c9,Test Account 2\n"


def test_update_and_delete_unknown_id_leave_file_untouched(csv_path):
    csv_path.write_text(TWO_ACCOUNTS, encoding="utf-8")
    before = csv_path.read_bytes()
    store = CsvStore(csv_path, Account)
    unknown = Account(fullname="Nobody")
    store.update(unknown)
    store.delete(unknown)
    assert csv_path.read_bytes() == before


def test_update_and_delete_on_missing_file_do_not_create_it(csv_path):
    store = CsvStore(csv_path, Account)
    store.update(Account(id=ID_1, fullname="X"))
    store.delete(Account(id=ID_1, fullname="X"))
    assert not csv_path.exists()


def test_match_is_on_id_field_not_substring(csv_path):
    # The second record's name contains the first record's id
    csv_path.write_text(
        "67e55044-10b1-426f-9247-bb680e5fe0c8,Test Account 1\n"
        "67e55044-10b1-426f-9247-bb680e5fe0c9,alias of 67e55044-10b1-426f-9247-bb680e5fe0c8\n",
        encoding="utf-8",
    )
    store = CsvStore(csv_path, Account)
    store.delete(Account(id=ID_1, fullname=""))
    assert store.read_all() == [Account(id=ID_2, fullname="alias of 67e55044-10b1-426f-9247-bb680e5fe0c8")]


def test_rewrite_preserves_malformed_lines(csv_path):
    csv_path.write_text(
        "67e55044-10b1-426f-9247-bb680e5fe0c8,Test Account 1\n"
        "legacy line without id\n",
        encoding="utf-8",
    )
    CsvStore(csv_path, Account).update(Account(id=ID_1, fullname="Modified"))
    assert csv_path.read_text(encoding="utf-8").splitlines() == [
        "67e55044-10b1-426f-9247-bb680e5fe0c8,Modified",
        "legacy line without id",
    ]


def test_rewrite_leaves_no_temp_file(csv_path):
    csv_path.write_text(TWO_ACCOUNTS, encoding="utf-8")
    store = CsvStore(csv_path, Account)
    store.update(Account(id=ID_2, fullname="Modified Account 2"))
    assert not store.tmp_path.exists()
    assert store.tmp_path.name == "accounts.csv.tmp"


def test_rewrite_overwrites_stale_temp_file(csv_path):
    csv_path.write_text(TWO_ACCOUNTS, encoding="utf-8")
    store = CsvStore(csv_path, Account)
    store.tmp_path.write_text("left over from a crash\n", encoding="utf-8")
    store.delete(Account(id=ID_2, fullname=""))
    assert store.read_all() == [Account(id=ID_1, fullname="Test Account 1")]
    assert not store.tmp_path.exists()


def test_update_rewrites_every_duplicate_line(csv_path):
    csv_path.write_text(
        "67e55044-10b1-426f-9247-bb680e5fe0c8,First\n"
        "67e55044-10b1-426f-9247-bb680e5fe0c8,Duplicate\n",
        encoding="utf-8",
    )
    store = CsvStore(csv_path, Account)
    store.update(Account(id=ID_1, fullname="Same"))
    assert [a.fullname for a in store.read_all()] == ["Same", "Same"]


def test_store_is_generic_over_record_kind(tmp_path):
    store = CsvStore(tmp_path / "users.csv", User)
    user = User(fullname="Grace Hopper")
    store.create(user)
    (read,) = store.read_all()
    assert isinstance(read, User)
    assert read == user


def test_missing_parent_directory_raises_storage_io_error(tmp_path):
    store = CsvStore(tmp_path / "missing" / "accounts.csv", Account)
    with pytest.raises(StorageIOError) as exc:
        store.create(Account(fullname="Nobody"))
    assert isinstance(exc.value.__cause__, OSError)


def test_directory_path_raises_storage_io_error(tmp_path):
    with pytest.raises(StorageIOError):
        CsvStore(tmp_path, Account).read_all()


def test_invalid_utf8_raises_unknown_error(csv_path):
    csv_path.write_bytes(b"67e55044-10b1-426f-9247-bb680e5fe0c8,\xff\xfe\n")
    with pytest.raises(UnknownCrudError):
        CsvStore(csv_path, Account).read_all()


def test_line_break_cannot_be_smuggled_into_the_file(csv_path):
    store = CsvStore(csv_path, Account)
    account = Account(id=ID_1, fullname="Mallory")
    with pytest.raises(ValidationError):
        account.fullname = f"Mallory\n{ID_2},Injected"
    store.create(account)

    forged = Account.model_construct(id=ID_2, fullname=f"Mallory\n{ID_1},Injected")
    with pytest.raises(ValueError):
        store.create(forged)
    with pytest.raises(ValueError):
        store.update(forged)
    assert store.read_all() == [Account(id=ID_1, fullname="Mallory")]


def test_unencodable_name_raises_unknown_error_and_creates_nothing(csv_path):
    with pytest.raises(UnknownCrudError):
        CsvStore(csv_path, Account).create(Account(fullname="bad \ud800"))
    assert not csv_path.exists()


def test_unencodable_name_on_update_leaves_file_untouched(csv_path):
    csv_path.write_text(TWO_ACCOUNTS, encoding="utf-8")
    before = csv_path.read_bytes()
    store = CsvStore(csv_path, Account)
    with pytest.raises(UnknownCrudError):
        store.update(Account(id=ID_1, fullname="bad \ud800"))
    assert csv_path.read_bytes() == before
    assert not store.tmp_path.exists()


@pytest.mark.skipif(os.geteuid() == 0, reason="root bypasses file permissions")
def test_read_only_file_is_not_rewritten(csv_path):
    csv_path.write_text(TWO_ACCOUNTS, encoding="utf-8")
    csv_path.chmod(0o444)
    store = CsvStore(csv_path, Account)
    with pytest.raises(StorageIOError):
        store.delete(Account(id=ID_1, fullname=""))
    assert csv_path.read_text(encoding="utf-8") == TWO_ACCOUNTS
    assert not store.tmp_path.exists()


def test_rewrite_through_symlink_updates_the_target(tmp_path):
    target = tmp_path / "data" / "accounts.csv"
    target.parent.mkdir()
    target.write_text(TWO_ACCOUNTS, encoding="utf-8")
    link = tmp_path / "accounts.csv"
    link.symlink_to(target)

    store = CsvStore(link, Account)
    store.update(Account(id=ID_1, fullname="Modified Account 1"))

    assert link.is_symlink()
    assert target.read_text(encoding="utf-8").splitlines()[0] == "67e55044-10b1-426f-9247-bb680e5fe0c8,Modified Account 1"
    assert not (tmp_path / "accounts.csv.tmp").exists()
    assert not store.tmp_path.exists()
