"""Local filesystem object storage."""

import pytest

from src.adapters.local_storage import LocalObjectStorage
from src.core.ports.storage import KeyExistsError, KeyNotFoundError, StorageError


@pytest.fixture
def storage(tmp_path):
    return LocalObjectStorage(tmp_path, "https://folio.example/")


class TestLocalObjectStorage:
    def test_put_and_get(self, storage):
        stored = storage.put_object("project-images", "a/1.png", b"img", "image/png")
        assert stored.size_bytes == 3

        data, meta = storage.get_object("project-images", "a/1.png")
        assert data == b"img"
        assert meta.content_type == "image/png"

    def test_keys_are_write_once(self, storage):
        storage.put_object("b", "k.png", b"1", "image/png")
        with pytest.raises(KeyExistsError):
            storage.put_object("b", "k.png", b"2", "image/png")

    def test_missing_key(self, storage):
        with pytest.raises(KeyNotFoundError):
            storage.get_object("b", "nope.png")

    def test_path_traversal_rejected(self, storage):
        with pytest.raises(StorageError):
            storage.put_object("b", "../../escape.png", b"x", "image/png")

    def test_metadata_sidecar_not_addressable(self, storage):
        storage.put_object("b", "k.png", b"img", "image/png")

        with pytest.raises(StorageError):
            storage.get_object("b", "k.png.meta.json")
        with pytest.raises(StorageError):
            storage.put_object("b", "other.meta.json", b"{}", "application/json")

    def test_public_url(self, storage):
        assert storage.get_public_url("b", "k.png") == "https://folio.example/storage/b/k.png"
