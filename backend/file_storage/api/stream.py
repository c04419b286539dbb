"""Stream (GET with token): serves objects behind presigned URLs minted by the local/memory backends."""
import asyncio
import mimetypes
import posixpath

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response

from file_storage.api.responses import DEFAULT_CONTENT_TYPE, content_disposition
from file_storage.core.deps import get_storage_backend
from file_storage.core.security import verify_preview_token
from file_storage.services.storage import StorageBackend

router = APIRouter(prefix="/v1/files", tags=["files-stream"])


@router.get("/stream")
async def stream_object(
    token: str,
    storage: StorageBackend = Depends(get_storage_backend),
):
    verified = verify_preview_token(token)
    if verified is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid or expired token")
    bucket_name, object_key = verified
    # ObjectNotFoundError propagates to the 404 handler
    content = await asyncio.to_thread(storage.download_file, bucket_name, object_key)
    file_name = posixpath.basename(object_key)
    media_type, _ = mimetypes.guess_type(file_name)
    return Response(
        content=content,
        media_type=media_type or DEFAULT_CONTENT_TYPE,
        headers={
            "Cache-Control": "private, no-store",
            "Content-Disposition": content_disposition(file_name, "inline"),
        },
    )
