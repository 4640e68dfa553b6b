import os
import pytest

from libraryms.config import settings
from libraryms.persistence.archive_file_service import ArchiveFileService
from libraryms.persistence.file_service import FileService
from libraryms.services.library_archive_service import LibraryArchiveService
from libraryms.services.service_locator import ServiceLocator
from libraryms.ui_helpers import OUTPUT_MODE_ENV

@pytest.fixture
def archive_path(tmp_path, request):
    # Every test gets its own archive file
    return str(tmp_path / f"archive_{request.node.name}.dat")

@pytest.fixture
def file_service():
    return FileService()

@pytest.fixture
def archive_service(archive_path, file_service):
    service = LibraryArchiveService(ArchiveFileService(archive_path, file_service))
    service.load_archive()
    return service

@pytest.fixture
def locator(archive_path, monkeypatch):
    # Point the shared services at the per-test archive and plain output
    monkeypatch.setattr(settings, "archive_file", archive_path)
    monkeypatch.setenv(OUTPUT_MODE_ENV, "plain")
    ServiceLocator.reset()
    yield ServiceLocator
    ServiceLocator.reset()
    if os.path.exists(archive_path):
        os.remove(archive_path)
