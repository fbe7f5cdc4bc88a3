from fastapi import APIRouter, Depends, HTTPException, Response

from src.adapters.local_storage import LocalObjectStorage
from src.api.deps import get_object_storage
from src.core.ports.storage import StorageError

router = APIRouter()


@router.get("/{bucket}/{key:path}")
def get_stored_object(
    bucket: str,
    key: str,
    storage: LocalObjectStorage = Depends(get_object_storage),
) -> Response:
    """Public retrieval of uploaded objects."""
    try:
        data, meta = storage.get_object(bucket, key)
    except StorageError:
        raise HTTPException(status_code=404, detail="Object not found") from None
    return Response(
        content=data,
        media_type=meta.content_type,
        headers={"Cache-Control": "public, max-age=31536000, immutable"},
    )
