"""Key-value storage for scorepad snapshots.

Each logical key is stored as an opaque UTF-8 text blob under an app-scoped
namespace. The file-backed store keeps one file per key and writes it atomically
with owner-only permissions (0o600) inside an owner-only directory (0o700).
"""

import contextlib
import os
import re
import tempfile
from pathlib import Path
from typing import Protocol

import structlog

logger = structlog.get_logger()

# Owner-only directory permissions for snapshot storage.
_STORE_DIR_MODE = 0o700

# Owner-only file permissions for snapshot files.
_STORE_FILE_MODE = 0o600

_VALID_KEY = re.compile(r"^[A-Za-z0-9_-]+$")


def _validate_key(key: str) -> None:
    if not _VALID_KEY.match(key):
        raise ValueError(f"Invalid storage key {key!r}: only letters, digits, '_' and '-' are allowed")


class KeyValueStore(Protocol):
    """Protocol for persisting namespaced text blobs."""

    namespace: str

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryKeyValueStore:
    """Dict-backed store for tests and ephemeral sessions."""

    def __init__(self, namespace: str = "flip7") -> None:
        _validate_key(namespace)
        self.namespace = namespace
        self._data: dict[str, str] = {}

    def _full_key(self, key: str) -> str:
        _validate_key(key)
        return f"{self.namespace}_{key}"

    def get(self, key: str) -> str | None:
        return self._data.get(self._full_key(key))

    def set(self, key: str, value: str) -> None:
        self._data[self._full_key(key)] = value

    def delete(self, key: str) -> None:
        self._data.pop(self._full_key(key), None)


class LocalKeyValueStore:
    """Writes each key to ``<namespace>_<key>.json`` under a local directory.

    Files are created with owner-only read/write (0o600) inside an
    owner-only directory (0o700). All failures surface as OSError.
    """

    def __init__(self, directory: str | Path, namespace: str = "flip7") -> None:
        _validate_key(namespace)
        self.namespace = namespace
        self._directory = Path(directory).resolve()

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        """Resolve the file for a key, rejecting anything outside the store directory."""
        _validate_key(key)
        target = (self._directory / f"{self.namespace}_{key}.json").resolve()
        if not target.is_relative_to(self._directory):
            raise ValueError(f"Path traversal rejected: '{key}' resolves outside store directory")
        return target

    def get(self, key: str) -> str | None:
        target = self.path_for(key)
        try:
            return target.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set(self, key: str, value: str) -> None:
        """Atomically replace the blob stored under key.

        Creates the directory lazily on first write. Writes via
        temp-file-then-rename so readers never see a partial file.
        """
        target = self.path_for(key)

        self._directory.mkdir(mode=_STORE_DIR_MODE, parents=True, exist_ok=True)
        self._directory.chmod(_STORE_DIR_MODE)

        fd, tmp_path = tempfile.mkstemp(dir=str(self._directory), suffix=".tmp", prefix=f".{key}_")
        fd_owned = True
        try:
            with os.fdopen(fd, "wb") as f:
                fd_owned = False  # os.fdopen took ownership; it will close fd
                f.write(value.encode("utf-8"))
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, _STORE_FILE_MODE)  # noqa: PTH101
            Path(tmp_path).replace(target)
        except BaseException:
            if fd_owned:
                with contextlib.suppress(OSError):
                    os.close(fd)
            with contextlib.suppress(OSError):
                Path(tmp_path).unlink()
            raise
        logger.debug("stored snapshot", key=key, path=str(target))

    def delete(self, key: str) -> None:
        target = self.path_for(key)
        target.unlink(missing_ok=True)
