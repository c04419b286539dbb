"""URL-mode file operations: files addressed by their derived file URL (/<bucket>/<yyyy/MM/dd/id>/<name>)."""
import json

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile

from file_storage.api.responses import file_download_response, resolve_bucket, upload_content_type
from file_storage.api.schemas import ApiResponse, FileInfoResponse, PreviewUrlResponse, UploadResponse
from file_storage.core.deps import get_orchestrator
from file_storage.domain.file_resource import AddressingMode
from file_storage.services.orchestrator import FileStorageOrchestrator

router = APIRouter(prefix="/v1/files", tags=["files-url"])

MODE = AddressingMode.URL


async def _body_file_url(request: Request) -> str:
    """Plain-text body, or a JSON string body."""
    raw = (await request.body()).decode("utf-8", errors="replace").strip()
    if len(raw) >= 2 and raw[0] == raw[-1] == '"':
        try:
            value = json.loads(raw)
        except ValueError:
            return raw
        if isinstance(value, str):
            return value
    return raw


@router.post("/upload-by-url", response_model=ApiResponse[UploadResponse], response_model_by_alias=True)
async def upload_by_url(
    file: UploadFile = File(...),
    bucket_name: str | None = Form(None, alias="bucketName"),
    public_key: str | None = Form(None, alias="publicKey"),
    need_preview: bool = Form(False, alias="needPreview"),
    orchestrator: FileStorageOrchestrator = Depends(get_orchestrator),
):
    data = await file.read()
    result = await orchestrator.upload(
        data,
        file.filename,
        upload_content_type(file),
        resolve_bucket(bucket_name),
        mode=MODE,
        encryption_key=public_key,
        want_preview=need_preview,
    )
    return ApiResponse[UploadResponse](message="File uploaded", data=UploadResponse.from_result(result))


@router.get("/download-by-url")
async def download_by_url(
    file_url: str = Query(..., alias="fileUrl"),
    public_key: str | None = Query(None, alias="publicKey"),
    orchestrator: FileStorageOrchestrator = Depends(get_orchestrator),
):
    downloaded = await orchestrator.download(MODE, file_url, public_key)
    return file_download_response(downloaded)


@router.get("/query-by-url", response_model=ApiResponse[FileInfoResponse], response_model_by_alias=True)
async def query_by_url(
    file_url: str = Query(..., alias="fileUrl"),
    orchestrator: FileStorageOrchestrator = Depends(get_orchestrator),
):
    info = await orchestrator.query(MODE, file_url)
    return ApiResponse[FileInfoResponse](data=FileInfoResponse.from_info(info))


@router.delete("/delete-by-url", response_model=ApiResponse, response_model_by_alias=True)
async def delete_by_url(
    file_url: str = Query(..., alias="fileUrl"),
    orchestrator: FileStorageOrchestrator = Depends(get_orchestrator),
):
    await orchestrator.delete(MODE, file_url)
    return ApiResponse(message="File deleted")


@router.post("/preview-url", response_model=ApiResponse[PreviewUrlResponse], response_model_by_alias=True)
async def preview_url(
    request: Request,
    expiry_minutes: int = Query(60, alias="expiryMinutes"),
    public_key: str | None = Query(None, alias="publicKey"),
    orchestrator: FileStorageOrchestrator = Depends(get_orchestrator),
):
    file_url = await _body_file_url(request)
    url = await orchestrator.preview_url(MODE, file_url, expiry_minutes, public_key)
    return ApiResponse[PreviewUrlResponse](
        message="Preview URL generated",
        data=PreviewUrlResponse(preview_url=url, expiry_minutes=expiry_minutes),
    )
