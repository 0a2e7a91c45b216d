"""Device-local key-value storage for game state and statistics.

Values are strings, mirroring browser local storage. The file-backed store
keeps every key in one JSON object on disk, created lazily on first write
and never torn down, so state survives across sessions. Writes go through a
temp file and an atomic rename with owner-only permissions (0o600).
"""

import contextlib
import json
import os
import tempfile
from pathlib import Path
from typing import Protocol

import structlog

logger = structlog.get_logger()

# Owner-only file permissions for the state file.
_STATE_FILE_MODE = 0o600


class KeyValueStore(Protocol):
    """Protocol for string key-value persistence."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryKeyValueStore:
    """In-process store, used for tests and ephemeral sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileKeyValueStore:
    """Stores all keys in a single JSON object file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).resolve()

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.warning("unreadable state file, starting empty", path=str(self._path))
            return {}
        if not isinstance(data, dict):
            logger.warning("state file is not a JSON object, starting empty", path=str(self._path))
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: dict[str, str]) -> None:
        """Write the whole mapping atomically via temp-file-then-rename."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=str(self._path.parent), suffix=".tmp", prefix=".state_")
        fd_owned = True
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                fd_owned = False  # os.fdopen took ownership; it will close fd
                json.dump(data, f)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, _STATE_FILE_MODE)  # noqa: PTH101
            Path(tmp_path).replace(self._path)
        except BaseException:
            if fd_owned:
                with contextlib.suppress(OSError):
                    os.close(fd)
            with contextlib.suppress(OSError):
                Path(tmp_path).unlink()
            raise

    def get(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def delete(self, key: str) -> None:
        data = self._read_all()
        if data.pop(key, None) is not None:
            self._write_all(data)
