"""
Upload relay models.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UploadRequest:
    bucket: str
    filename: str
    data: bytes
    content_type: str


@dataclass(frozen=True)
class UploadResult:
    """A stored upload and the public URL to attach to an entity field."""

    bucket: str
    key: str
    url: str
    size_bytes: int
    content_type: str

    def to_dict(self) -> dict[str, str | int]:
        return {
            "bucket": self.bucket,
            "key": self.key,
            "url": self.url,
            "sizeBytes": self.size_bytes,
            "contentType": self.content_type,
        }
