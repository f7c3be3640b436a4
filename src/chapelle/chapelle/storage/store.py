from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import Optional, Protocol

from ..core.exceptions import StorageError

logger = logging.getLogger(__name__)


class ObjectStore(Protocol):
    """Binary object storage for member photos."""

    def put(self, path: str, data: bytes, content_type: Optional[str] = None) -> str:
        raise NotImplementedError

    def get(self, location: str) -> bytes:
        raise NotImplementedError

    def download_url(self, location: str) -> str:
        raise NotImplementedError

    def owns(self, reference: str) -> bool:
        raise NotImplementedError

    def location_for(self, reference: str) -> str:
        raise NotImplementedError

    def delete(self, location: str) -> bool:
        raise NotImplementedError


class LocalObjectStore(ObjectStore):
    """Stores objects as files under ``root``; served by the /photos route."""

    def __init__(self, root: str | Path, *, url_prefix: str = "/photos"):
        self._root = Path(root).resolve()
        self._url_prefix = "/" + url_prefix.strip("/")

    @property
    def root(self) -> Path:
        return self._root

    def _file_for(self, location: str) -> Path:
        rel = PurePosixPath(location.lstrip("/"))
        if not rel.parts or ".." in rel.parts:
            raise StorageError(f"Invalid object location: {location!r}")
        return self._root.joinpath(*rel.parts)

    def put(self, path: str, data: bytes, content_type: Optional[str] = None) -> str:
        target = self._file_for(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            raise StorageError(f"Could not store {path!r}: {e}") from e
        logger.debug("Stored %s (%d bytes, %s)", path, len(data), content_type or "?")
        return str(PurePosixPath(path.lstrip("/")))

    def get(self, location: str) -> bytes:
        try:
            return self._file_for(location).read_bytes()
        except OSError as e:
            raise StorageError(f"Could not read {location!r}: {e}") from e

    def download_url(self, location: str) -> str:
        return f"{self._url_prefix}/{location.lstrip('/')}"

    def owns(self, reference: str) -> bool:
        return bool(reference) and reference.startswith(self._url_prefix + "/")

    def location_for(self, reference: str) -> str:
        if not self.owns(reference):
            raise StorageError(f"Not a stored object: {reference!r}")
        return reference[len(self._url_prefix) + 1 :]

    def delete(self, location: str) -> bool:
        """Best effort: failures are logged and reported as False."""

        try:
            self._file_for(location).unlink()
            return True
        except (OSError, StorageError) as e:
            logger.warning("Could not delete object %s: %s", location, e)
            return False
