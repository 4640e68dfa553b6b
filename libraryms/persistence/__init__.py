"""LibraryMS - Persistence Package

This package contains the file-backed storage layer:
- Generic object store (file_service.py)
- Library archive store (archive_file_service.py)
- Storage error taxonomy (errors.py)
"""

from libraryms.persistence.errors import (
    CorruptStorageError,
    StorageError,
    StorageNotFoundError,
    StorageWriteError,
)
from libraryms.persistence.file_service import FileService
from libraryms.persistence.archive_file_service import ArchiveFileService

__all__ = [
    "ArchiveFileService",
    "CorruptStorageError",
    "FileService",
    "StorageError",
    "StorageNotFoundError",
    "StorageWriteError",
]
