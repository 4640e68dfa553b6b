from __future__ import annotations

import os


class StorageError(OSError):
    """I/O failure raised by the storage layer.

    Every storage failure is one of these, so callers can catch a single
    category. Subclasses only narrow the cause; the message carries the detail.
    """

    def __init__(self, message: str, path: str | os.PathLike | None = None) -> None:
        super().__init__(message)
        self.path = os.fspath(path) if path is not None else None


class StorageNotFoundError(StorageError, FileNotFoundError):
    """The file to read does not exist."""


class CorruptStorageError(StorageError):
    """The file exists but does not hold a value of the expected kind."""


class StorageWriteError(StorageError):
    """The value could not be serialized or fully written."""
