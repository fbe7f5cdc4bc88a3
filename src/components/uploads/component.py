"""
UploadRelay - owner-only file upload returning a public URL.

Objects are keyed `<account_id>/<epoch_ms>.<ext>` so uploads never collide
across owners or over time. Every failure surfaces as UploadError; a URL is
returned only after the object was stored.
"""

from __future__ import annotations

import logging
import mimetypes
from pathlib import PurePosixPath

from src.components.bootstrap import require_owner
from src.core.ports.storage import KeyExistsError, StorageError
from src.domain.entities import Session
from src.domain.errors import UploadError
from src.rules.models import UploadRules

from .models import UploadRequest, UploadResult
from .ports import ObjectStoragePort, TimePort

logger = logging.getLogger(__name__)


def _extension(filename: str, content_type: str) -> str:
    suffix = PurePosixPath(filename or "").suffix.lower().lstrip(".")
    if suffix and suffix.isalnum():
        return suffix
    guessed = mimetypes.guess_extension(content_type or "") or ""
    return guessed.lstrip(".") or "bin"


class UploadRelay:
    def __init__(self, storage: ObjectStoragePort, time: TimePort, rules: UploadRules) -> None:
        self._storage = storage
        self._time = time
        self._rules = rules

    def _validate(self, request: UploadRequest) -> None:
        if request.bucket not in self._rules.allowed_buckets:
            raise UploadError(f"Unknown bucket: {request.bucket}", code="invalid_bucket")
        if request.content_type not in self._rules.allowlist_mime_types:
            raise UploadError(
                f"File type not allowed: {request.content_type}", code="invalid_type"
            )
        if not request.data:
            raise UploadError("File is empty", code="empty_file")
        if len(request.data) > self._rules.max_upload_bytes:
            raise UploadError(
                f"File exceeds {self._rules.max_upload_bytes} bytes", code="too_large"
            )

    def make_key(self, session: Session, filename: str, content_type: str) -> str:
        epoch_ms = int(self._time.now_utc().timestamp() * 1000)
        return f"{session.account_id}/{epoch_ms}.{_extension(filename, content_type)}"

    def upload(self, session: Session | None, request: UploadRequest) -> UploadResult:
        """Store the file and return its public URL.

        Raises:
            AuthorizationError: No owner session.
            UploadError: Rejected (bucket, type, size) or storage failed.
        """
        owner = require_owner(session)
        self._validate(request)

        key = self.make_key(owner, request.filename, request.content_type)
        try:
            stored = self._storage.put_object(
                request.bucket, key, request.data, request.content_type
            )
            url = self._storage.get_public_url(request.bucket, key)
        except KeyExistsError as e:
            logger.warning("Upload key collision on %s/%s", request.bucket, key)
            raise UploadError(
                "Upload collided with an existing file; retry", code="conflict"
            ) from e
        except StorageError as e:
            logger.error("Upload to %s failed: %s", request.bucket, e)
            raise UploadError(f"Upload failed: {e}", code="storage_failed") from e

        logger.info("Uploaded %s/%s (%d bytes)", request.bucket, key, stored.size_bytes)
        return UploadResult(
            bucket=request.bucket,
            key=key,
            url=url,
            size_bytes=stored.size_bytes,
            content_type=stored.content_type,
        )
