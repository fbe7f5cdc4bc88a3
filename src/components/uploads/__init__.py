"""Owner-only upload of images to object storage."""

from .component import UploadRelay
from .models import UploadRequest, UploadResult
from .ports import ObjectStoragePort

__all__ = ["UploadRelay", "UploadRequest", "UploadResult", "ObjectStoragePort"]
