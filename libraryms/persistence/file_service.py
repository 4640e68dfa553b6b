import logging
import os
import pickle
import shutil
import tempfile
from typing import Any, Union

from libraryms.persistence.errors import (
    CorruptStorageError,
    StorageError,
    StorageNotFoundError,
    StorageWriteError,
)

logger = logging.getLogger(__name__)

PathType = Union[str, os.PathLike]

# Everything pickle.load can raise for content it cannot rebuild
_UNPICKLE_ERRORS = (
    pickle.UnpicklingError,
    EOFError,
    AttributeError,
    ImportError,
    IndexError,
    KeyError,
    OverflowError,
    TypeError,
    ValueError,
)


class FileService:
    """Writes whole values to files and reads them back.

    The store knows nothing about the values it handles: each call serializes
    or deserializes exactly one object with pickle, so the runtime type of
    what was written is restored on read. No file handle outlives a call.
    """

    def write_to_file(self, path: PathType, value: Any) -> None:
        """Replace the content of ``path`` with the serialized ``value``.

        The value is pickled in memory first, written to a temporary file next
        to the target and moved into place, so readers never find the old
        content mixed with the new one.
        """
        target = os.fspath(path)
        try:
            payload = pickle.dumps(value, protocol=pickle.HIGHEST_PROTOCOL)
        except (pickle.PicklingError, TypeError, AttributeError) as exc:
            raise StorageWriteError(
                f"Cannot serialize value of type {type(value).__name__}: {exc}", target
            ) from exc

        directory = os.path.dirname(os.path.abspath(target))
        tmp_path = None
        try:
            with tempfile.NamedTemporaryFile(
                "wb", dir=directory, prefix=".tmp-", suffix=".part", delete=False
            ) as tmp:
                tmp_path = tmp.name
                tmp.write(payload)
                tmp.flush()
                os.fsync(tmp.fileno())
            # Temporary files are created 0600, keep the mode of the file being replaced
            if os.path.exists(target):
                shutil.copymode(target, tmp_path)
            os.replace(tmp_path, target)
        except OSError as exc:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise StorageWriteError(f"Cannot write file {target}: {exc}", target) from exc

        logger.debug(f"Wrote {len(payload)} bytes to {target}")

    def read_from_file(self, path: PathType) -> Any:
        """Deserialize and return the single value stored in ``path``."""
        target = os.fspath(path)
        try:
            with open(target, "rb") as f:
                try:
                    value = pickle.load(f)
                except _UNPICKLE_ERRORS as exc:
                    logger.warning(f"Unreadable content in {target}: {exc!r}")
                    raise CorruptStorageError(
                        f"File {target} is corrupt or unreadable: {exc}", target
                    ) from exc
        except FileNotFoundError as exc:
            raise StorageNotFoundError(f"File not found: {target}", target) from exc
        except StorageError:
            raise
        except OSError as exc:
            raise StorageError(f"Cannot read file {target}: {exc}", target) from exc

        logger.debug(f"Read {type(value).__name__} from {target}")
        return value
