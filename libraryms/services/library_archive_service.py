import logging
from datetime import date
from typing import Any, Dict, List, Optional

from libraryms.book import Book
from libraryms.library_archive import LibraryArchive
from libraryms.loan import Loan
from libraryms.persistence.archive_file_service import ArchiveFileService
from libraryms.persistence.errors import StorageNotFoundError
from libraryms.user import User

logger = logging.getLogger(__name__)


class LibraryArchiveService:
    """Keeps the current library archive in memory and persists it on request."""

    def __init__(self, archive_file_service: ArchiveFileService,
                 library_archive: Optional[LibraryArchive] = None) -> None:
        if archive_file_service is None:
            raise ValueError("archive_file_service cannot be None")
        self.archive_file_service = archive_file_service
        self._library_archive = library_archive

    def _ensure_archive_initialized(self) -> None:
        if self._library_archive is None:
            self._library_archive = LibraryArchive()

    def get_library_archive(self) -> LibraryArchive:
        self._ensure_archive_initialized()
        return self._library_archive

    # ------------------------- Persistence ------------------------- #
    def load_archive(self) -> LibraryArchive:
        """Load the archive from disk, starting empty when no file exists yet.

        Only a missing file is recovered; corrupt content and other storage
        errors are raised to the caller.
        """
        try:
            self._library_archive = self.archive_file_service.load_archive()
        except StorageNotFoundError:
            logger.info(
                f"No archive at {self.archive_file_service.archive_file_path}, starting with an empty one"
            )
            self._library_archive = LibraryArchive()
        return self._library_archive

    def save_archive(self, archive: LibraryArchive) -> None:
        if archive is None:
            raise ValueError("archive cannot be None")
        self._library_archive = archive
        self.archive_file_service.save_archive(archive)

    # ------------------------- Queries ------------------------- #
    def get_all_books(self) -> List[Book]:
        return self.get_library_archive().books

    def get_all_users(self) -> List[User]:
        return self.get_library_archive().users

    def get_all_loans(self) -> List[Loan]:
        return self.get_library_archive().loans

    def get_statistics(self) -> Dict[str, Any]:
        """Get library statistics."""
        archive = self.get_library_archive()
        books = archive.books
        active = archive.get_active_loans()
        today = date.today()
        return {
            "total_books": len(books),
            "total_copies": sum(b.total_copies for b in books),
            "available_copies": sum(b.available_copies for b in books),
            "total_users": len(archive.users),
            "active_loans": len(active),
            "returned_loans": len(archive.get_returned_loans()),
            "late_loans": sum(1 for l in active if l.due_date is not None and l.due_date < today),
        }
