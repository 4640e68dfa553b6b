from datetime import date, timedelta
from unittest.mock import MagicMock

import pytest

from libraryms.book import Book
from libraryms.library_archive import LibraryArchive
from libraryms.persistence.archive_file_service import ArchiveFileService
from libraryms.persistence.errors import (
    CorruptStorageError,
    StorageError,
    StorageNotFoundError,
    StorageWriteError,
)
from libraryms.persistence.file_service import FileService
from libraryms.user import User


class SpecialArchive(LibraryArchive):
    pass


@pytest.fixture
def archive_file_service(archive_path, file_service):
    return ArchiveFileService(archive_path, file_service)


def test_load_returns_archive_written_by_file_service(archive_file_service, file_service, archive_path):
    file_service.write_to_file(archive_path, LibraryArchive())

    loaded = archive_file_service.load_archive()

    assert loaded is not None
    assert isinstance(loaded, LibraryArchive)


def test_save_then_load_on_same_instance(archive_file_service):
    archive_file_service.save_archive(LibraryArchive())

    loaded = archive_file_service.load_archive()

    assert type(loaded) is LibraryArchive


def test_save_writes_archive_readable_by_file_service(archive_file_service, file_service, archive_path):
    archive_file_service.save_archive(LibraryArchive())

    assert isinstance(file_service.read_from_file(archive_path), LibraryArchive)


def test_load_with_wrong_object_type_fails(archive_file_service, file_service, archive_path):
    file_service.write_to_file(archive_path, "not a LibraryArchive")

    with pytest.raises(CorruptStorageError, match="found str"):
        archive_file_service.load_archive()


@pytest.mark.parametrize("value", [["A", "B", "C"], {"books": []}, 7, None, User("A", "B", "a@unisa.it", "1")])
def test_load_rejects_any_non_archive(archive_file_service, file_service, archive_path, value):
    file_service.write_to_file(archive_path, value)

    with pytest.raises(StorageError):
        archive_file_service.load_archive()


def test_load_rejects_archive_subclass(archive_file_service, file_service, archive_path):
    file_service.write_to_file(archive_path, SpecialArchive())

    with pytest.raises(CorruptStorageError):
        archive_file_service.load_archive()


def test_load_missing_file_propagates_not_found(archive_file_service):
    with pytest.raises(StorageNotFoundError):
        archive_file_service.load_archive()


def test_load_corrupt_file_propagates(archive_file_service, archive_path):
    with open(archive_path, "wb") as f:
        f.write(b"\x00\x01\x02")

    with pytest.raises(CorruptStorageError):
        archive_file_service.load_archive()


def test_save_propagates_write_failure(tmp_path, file_service):
    service = ArchiveFileService(str(tmp_path / "nope" / "archive.dat"), file_service)

    with pytest.raises(StorageWriteError):
        service.save_archive(LibraryArchive())


def test_round_trip_preserves_archive_content(archive_file_service):
    archive = LibraryArchive()
    book = Book("Clean Code", ["Robert C. Martin"], 2008, "9780132350884", 3)
    user = User("Mario", "Rossi", "m.rossi@studenti.unisa.it", "0612700001")
    archive.add_book(book)
    archive.add_user(user)
    loan = archive.register_loan(user, book, date.today() + timedelta(days=14))
    book.decrement_available_copies()
    user.add_loan(loan)

    archive_file_service.save_archive(archive)
    loaded = archive_file_service.load_archive()

    assert loaded is not archive
    assert [b.isbn for b in loaded.books] == ["9780132350884"]
    assert loaded.books[0].authors == ["Robert C. Martin"]
    assert loaded.books[0].available_copies == 2
    assert [u.code for u in loaded.users] == ["0612700001"]
    restored = loaded.find_loan_by_id(loan.loan_id)
    assert restored is not None and restored.is_active()
    assert restored.due_date == loan.due_date
    # Shared references survive the round trip
    assert restored.book is loaded.books[0]
    assert restored.user is loaded.users[0]
    assert loaded.users[0].active_loans == [restored]
    assert loaded.generate_loan_id() == 2


def test_overwrite_keeps_only_last_archive(archive_file_service):
    first = LibraryArchive()
    first.add_book(Book("Old", ["A"], 2000, "1234567890", 1))
    archive_file_service.save_archive(first)
    archive_file_service.save_archive(LibraryArchive())

    assert archive_file_service.load_archive().books == []


def test_archive_path_is_fixed(archive_file_service, archive_path):
    assert archive_file_service.archive_file_path == archive_path
    with pytest.raises(AttributeError):
        archive_file_service.archive_file_path = "elsewhere.dat"


def test_delegates_to_file_service_with_fixed_path():
    fake = MagicMock(spec=FileService)
    fake.read_from_file.return_value = LibraryArchive()
    service = ArchiveFileService("library-archive.dat", fake)

    archive = service.load_archive()
    service.save_archive(archive)

    fake.read_from_file.assert_called_once_with("library-archive.dat")
    fake.write_to_file.assert_called_once_with("library-archive.dat", archive)


def test_returns_loaded_value_unchanged():
    archive = LibraryArchive()
    fake = MagicMock(spec=FileService)
    fake.read_from_file.return_value = archive

    assert ArchiveFileService("a.dat", fake).load_archive() is archive
