from __future__ import annotations

import pytest

from src.chapelle.chapelle.core.exceptions import StorageError
from src.chapelle.chapelle.storage.store import LocalObjectStore


def test_put_get_and_download_url(tmp_path):
    store = LocalObjectStore(tmp_path, url_prefix="photos/")

    location = store.put("fideles/1_awa.png", b"img", "image/png")
    url = store.download_url(location)

    assert location == "fideles/1_awa.png"
    assert url == "/photos/fideles/1_awa.png"
    assert (tmp_path / "fideles" / "1_awa.png").read_bytes() == b"img"
    assert store.owns(url)
    assert store.location_for(url) == location
    assert store.get(location) == b"img"


def test_foreign_references_are_not_owned(tmp_path):
    store = LocalObjectStore(tmp_path)

    assert not store.owns("https://example.org/photos/a.png")
    assert not store.owns("")
    with pytest.raises(StorageError):
        store.location_for("https://example.org/a.png")


def test_paths_cannot_escape_the_root(tmp_path):
    store = LocalObjectStore(tmp_path / "root")

    with pytest.raises(StorageError):
        store.put("../outside.png", b"x")
    with pytest.raises(StorageError):
        store.get("fideles/../../etc/passwd")


def test_reading_a_missing_object_fails(tmp_path):
    with pytest.raises(StorageError):
        LocalObjectStore(tmp_path).get("fideles/missing.png")


def test_delete_is_best_effort(tmp_path):
    store = LocalObjectStore(tmp_path)
    location = store.put("fideles/1_awa.png", b"img")

    assert store.delete(location) is True
    assert store.delete(location) is False
    assert store.delete("../escape") is False
