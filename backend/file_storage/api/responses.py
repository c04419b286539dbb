"""Helpers shared by the file routers: bucket fallback, upload content type, download response."""
import mimetypes
from urllib.parse import quote

from fastapi import UploadFile
from fastapi.responses import Response

from file_storage.core.config import get_settings
from file_storage.services.orchestrator import DownloadedFile

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def resolve_bucket(bucket_name: str | None) -> str | None:
    """Request bucket, or DEFAULT_BUCKET_NAME when the request leaves it blank."""
    if bucket_name and bucket_name.strip():
        return bucket_name
    return get_settings().default_bucket_name


def upload_content_type(file: UploadFile) -> str:
    if file.content_type and file.content_type.strip():
        return file.content_type
    guessed, _ = mimetypes.guess_type(file.filename or "")
    return guessed or DEFAULT_CONTENT_TYPE


def content_disposition(file_name: str, disposition: str = "attachment") -> str:
    """RFC 5987 form; the plain filename carries the same percent-encoded value for old clients."""
    encoded = quote(file_name, safe="")
    return f"{disposition}; filename=\"{encoded}\"; filename*=UTF-8''{encoded}"


def file_download_response(downloaded: DownloadedFile) -> Response:
    return Response(
        content=downloaded.content,
        media_type=downloaded.content_type or DEFAULT_CONTENT_TYPE,
        headers={
            "Content-Disposition": content_disposition(downloaded.file_name),
            "Cache-Control": "private, no-store",
        },
    )
