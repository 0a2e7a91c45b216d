"""Local storage for uploaded episode stills.

Stills are public: they are served as static files under the configured
URL prefix. Uploaded names are replaced by a random hex token so stored
paths reveal nothing about the episode. Files are written atomically with
owner-read/world-read permissions (0o644) inside a 0o755 directory.
"""

import contextlib
import os
import secrets
import tempfile
from pathlib import Path

import structlog
from pydantic import BaseModel

logger = structlog.get_logger()

MAX_STILL_BYTES = 5 * 1024 * 1024

ALLOWED_STILL_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}

_STILL_DIR_MODE = 0o755
_STILL_FILE_MODE = 0o644

# Random bytes in an obfuscated file name (hex-encoded to twice the length).
_NAME_TOKEN_BYTES = 16


class StillRejectedError(ValueError):
    """The upload is not an acceptable still. The message is safe to return to clients."""


class StoredStill(BaseModel, frozen=True):
    path: str
    url: str


def _extension(filename: str | None, default: str) -> str:
    if filename and "." in filename:
        ext = filename.rsplit(".", 1)[1].lower()
        if ext.isalnum():
            return ext
    return default


class LocalStillStorage:
    """Writes still images under stills_dir and maps them to public URLs."""

    def __init__(self, stills_dir: str | Path, url_prefix: str, max_bytes: int = MAX_STILL_BYTES) -> None:
        self._stills_dir = Path(stills_dir).resolve()
        self._url_prefix = url_prefix.rstrip("/")
        self._max_bytes = max_bytes

    @property
    def stills_dir(self) -> Path:
        return self._stills_dir

    def validate(self, content_type: str | None, size: int) -> str:
        """Return the default file extension for content_type.

        Raises StillRejectedError for a disallowed type or an oversized file.
        """
        if content_type is None or content_type not in ALLOWED_STILL_TYPES:
            raise StillRejectedError("Invalid file type. Allowed: JPEG, PNG, WebP, GIF")
        if size > self._max_bytes:
            limit_mb = self._max_bytes / (1024 * 1024)
            raise StillRejectedError(f"File too large. Maximum size: {limit_mb:g}MB")
        return ALLOWED_STILL_TYPES[content_type]

    def save_still(self, content: bytes, *, content_type: str | None, filename: str | None = None) -> StoredStill:
        """Validate and store a still under a random name.

        Raises:
            StillRejectedError: If the type or size is not allowed

        """
        default_ext = self.validate(content_type, len(content))
        name = f"{secrets.token_hex(_NAME_TOKEN_BYTES)}.{_extension(filename, default_ext)}"
        target = self._stills_dir / name

        self._stills_dir.mkdir(mode=_STILL_DIR_MODE, parents=True, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(dir=str(self._stills_dir), suffix=".tmp", prefix=".still_")
        fd_owned = True
        try:
            with os.fdopen(fd, "wb") as f:
                fd_owned = False
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, _STILL_FILE_MODE)  # noqa: PTH101
            Path(tmp_path).replace(target)
        except BaseException:
            if fd_owned:
                with contextlib.suppress(OSError):
                    os.close(fd)
            with contextlib.suppress(OSError):
                Path(tmp_path).unlink()
            raise
        logger.info("saved still", path=name, size=len(content))
        return StoredStill(path=f"stills/{name}", url=f"{self._url_prefix}/{name}")
