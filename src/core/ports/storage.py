"""
Object Storage Interface.

Binary uploads under a named bucket, each object retrievable by a public URL.
Implementations: local filesystem (now), S3-compatible (future).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass
class StoredObject:
    """Metadata for a stored object."""

    bucket: str
    key: str
    size_bytes: int
    content_type: str


class ObjectStoragePort(Protocol):
    def put_object(
        self, bucket: str, key: str, data: bytes, content_type: str
    ) -> StoredObject:
        """
        Store bytes under bucket/key.

        Raises:
            KeyExistsError: If the key is already taken
            StorageError: On any other failure (quota, I/O)
        """
        ...

    def get_object(self, bucket: str, key: str) -> tuple[bytes, StoredObject]:
        """
        Retrieve bytes by bucket/key.

        Raises:
            KeyNotFoundError: If the key doesn't exist
        """
        ...

    def get_public_url(self, bucket: str, key: str) -> str:
        """Public retrieval URL for an object."""
        ...


class StorageError(Exception):
    """Base class for storage errors."""


class KeyExistsError(StorageError):
    """Raised when attempting to write to an existing key."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Key already exists: {key}")


class KeyNotFoundError(StorageError):
    """Raised when key doesn't exist."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Key not found: {key}")
