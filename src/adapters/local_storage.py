"""
Local Filesystem Object Storage.

Implements ObjectStoragePort on the local filesystem for development and
single-server deployments. Objects live at {base_path}/{bucket}/{key} with
a sidecar {key}.meta.json holding the content type; the API serves them
publicly under /storage/{bucket}/{key}.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from src.core.ports.storage import (
    KeyExistsError,
    KeyNotFoundError,
    StorageError,
    StoredObject,
)

logger = logging.getLogger(__name__)

META_SUFFIX = ".meta.json"


class LocalObjectStorage:
    def __init__(self, base_path: str | Path, public_base_url: str) -> None:
        self.base_path = Path(base_path).resolve()
        self.public_base_url = public_base_url.rstrip("/")
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _object_path(self, bucket: str, key: str) -> Path:
        # Sidecars are internal; never addressable as objects
        if key.lower().endswith(META_SUFFIX):
            raise StorageError(f"Reserved key: {bucket}/{key}")
        target = (self.base_path / bucket / key).resolve()
        bucket_root = (self.base_path / bucket).resolve()
        if bucket_root != self.base_path / bucket or not target.is_relative_to(bucket_root):
            raise StorageError(f"Path traversal attempt detected: {bucket}/{key}")
        return target

    @staticmethod
    def _meta_path(data_path: Path) -> Path:
        return data_path.with_name(data_path.name + META_SUFFIX)

    def put_object(
        self, bucket: str, key: str, data: bytes, content_type: str
    ) -> StoredObject:
        target = self._object_path(bucket, key)
        if target.exists():
            raise KeyExistsError(f"{bucket}/{key}")

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
            self._meta_path(target).write_text(json.dumps({"content_type": content_type}))
        except OSError as e:
            logger.error("Failed to write %s/%s: %s", bucket, key, e)
            raise StorageError(f"Failed to store {bucket}/{key}: {e}") from e

        return StoredObject(
            bucket=bucket, key=key, size_bytes=len(data), content_type=content_type
        )

    def get_object(self, bucket: str, key: str) -> tuple[bytes, StoredObject]:
        target = self._object_path(bucket, key)
        if not target.is_file():
            raise KeyNotFoundError(f"{bucket}/{key}")

        content_type = "application/octet-stream"
        meta_path = self._meta_path(target)
        if meta_path.exists():
            content_type = json.loads(meta_path.read_text()).get("content_type", content_type)

        data = target.read_bytes()
        return data, StoredObject(
            bucket=bucket, key=key, size_bytes=len(data), content_type=content_type
        )

    def get_public_url(self, bucket: str, key: str) -> str:
        return f"{self.public_base_url}/storage/{bucket}/{key}"
