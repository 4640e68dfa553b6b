import logging
from typing import Optional

from libraryms.config import settings
from libraryms.persistence.archive_file_service import ArchiveFileService
from libraryms.persistence.file_service import FileService
from libraryms.services.book_service import BookService
from libraryms.services.library_archive_service import LibraryArchiveService
from libraryms.services.loan_service import LoanService
from libraryms.services.user_service import UserService

logger = logging.getLogger(__name__)


class ServiceLocator:
    """Shared service instances, all working on the same in-memory archive."""

    _archive_service: Optional[LibraryArchiveService] = None
    _book_service: Optional[BookService] = None
    _user_service: Optional[UserService] = None
    _loan_service: Optional[LoanService] = None

    @classmethod
    def configure(cls, archive_file: Optional[str] = None) -> LibraryArchiveService:
        """Wire the services around ``archive_file`` and load the archive.

        Falls back to the configured archive file. Storage errors other than
        a missing file propagate and leave the locator unconfigured.
        """
        path = archive_file or settings.archive_file
        archive_service = LibraryArchiveService(ArchiveFileService(path, FileService()))
        archive_service.load_archive()

        cls._archive_service = archive_service
        cls._book_service = BookService(archive_service)
        cls._user_service = UserService(archive_service)
        cls._loan_service = LoanService(archive_service)
        logger.info(f"Services configured with archive {path}")
        return archive_service

    @classmethod
    def reset(cls) -> None:
        cls._archive_service = None
        cls._book_service = None
        cls._user_service = None
        cls._loan_service = None

    @classmethod
    def is_configured(cls) -> bool:
        return cls._archive_service is not None

    @classmethod
    def _ensure_configured(cls) -> None:
        if cls._archive_service is None:
            cls.configure()

    @classmethod
    def get_archive_service(cls) -> LibraryArchiveService:
        cls._ensure_configured()
        return cls._archive_service

    @classmethod
    def get_book_service(cls) -> BookService:
        cls._ensure_configured()
        return cls._book_service

    @classmethod
    def get_user_service(cls) -> UserService:
        cls._ensure_configured()
        return cls._user_service

    @classmethod
    def get_loan_service(cls) -> LoanService:
        cls._ensure_configured()
        return cls._loan_service
