from __future__ import annotations

import logging
from typing import Optional

import requests

from ..core.exceptions import StorageError
from ..storage.store import ObjectStore

logger = logging.getLogger(__name__)


class PhotoLoader:
    """Fetch the raw bytes behind a member photo reference.

    References owned by the object store are read directly from it; absolute
    http(s) URLs are downloaded. Anything else is an error for the caller to
    handle (the report falls back to initials).
    """

    def __init__(self, store: ObjectStore, *, timeout: float = 10.0, session: Optional[requests.Session] = None):
        self._store = store
        self._timeout = float(timeout)
        self._session = session or requests.Session()

    def load(self, reference: str) -> bytes:
        if not reference:
            raise StorageError("Empty photo reference")

        if self._store.owns(reference):
            return self._store.get(self._store.location_for(reference))

        if reference.startswith(("http://", "https://")):
            resp = self._session.get(reference, timeout=self._timeout)
            resp.raise_for_status()
            return resp.content

        raise StorageError(f"Unsupported photo reference: {reference!r}")
