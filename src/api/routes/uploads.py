import asyncio
from typing import Any

from fastapi import APIRouter, Depends, File, UploadFile, status

from src.api.deps import CurrentSession, get_upload_relay
from src.components.uploads import UploadRelay, UploadRequest

router = APIRouter()


@router.post("/{bucket}", status_code=status.HTTP_201_CREATED)
async def upload_file(
    bucket: str,
    session: CurrentSession,
    file: UploadFile = File(...),
    relay: UploadRelay = Depends(get_upload_relay),
) -> dict[str, Any]:
    """Store an image and return the public URL to save on an entity field."""
    data = await file.read()
    request = UploadRequest(
        bucket=bucket,
        filename=file.filename or "",
        data=data,
        content_type=file.content_type or "application/octet-stream",
    )
    # Storage writes are blocking file I/O
    result = await asyncio.to_thread(relay.upload, session, request)
    return result.to_dict()
