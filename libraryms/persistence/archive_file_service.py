import logging
import os
from typing import Union

from libraryms.library_archive import LibraryArchive
from libraryms.persistence.errors import CorruptStorageError
from libraryms.persistence.file_service import FileService

logger = logging.getLogger(__name__)


class ArchiveFileService:
    """Loads and saves the library archive stored at one fixed file.

    Delegates the I/O to a FileService and checks that what comes back is a
    LibraryArchive. Failures from the underlying store propagate unchanged;
    a missing file is not turned into an empty archive here.
    """

    def __init__(self, archive_file_path: Union[str, os.PathLike], file_service: FileService) -> None:
        self._archive_file_path = os.fspath(archive_file_path)
        self._file_service = file_service

    @property
    def archive_file_path(self) -> str:
        return self._archive_file_path

    def load_archive(self) -> LibraryArchive:
        """Read the archive file and return its LibraryArchive.

        Raises StorageNotFoundError when the file is absent and
        CorruptStorageError when it holds anything but a LibraryArchive.
        """
        data = self._file_service.read_from_file(self._archive_file_path)
        if type(data) is not LibraryArchive:
            logger.warning(
                f"Archive file {self._archive_file_path} holds {type(data).__name__}, not LibraryArchive"
            )
            raise CorruptStorageError(
                f"Invalid archive file content: expected LibraryArchive, found {type(data).__name__}",
                self._archive_file_path,
            )
        logger.debug(f"Archive loaded from {self._archive_file_path}")
        return data

    def save_archive(self, archive: LibraryArchive) -> None:
        self._file_service.write_to_file(self._archive_file_path, archive)
        logger.debug(f"Archive saved to {self._archive_file_path}")
