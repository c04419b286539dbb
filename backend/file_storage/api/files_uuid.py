"""UUID-mode file operations: files addressed by their generated identifier."""
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from file_storage.api.responses import file_download_response, resolve_bucket, upload_content_type
from file_storage.api.schemas import ApiResponse, FileInfoResponse, PreviewUrlResponse, UploadResponse
from file_storage.core.deps import get_orchestrator
from file_storage.domain.file_resource import AddressingMode
from file_storage.services.orchestrator import FileStorageOrchestrator

router = APIRouter(prefix="/v1/files/uuid", tags=["files-uuid"])

MODE = AddressingMode.UUID


@router.post("/upload", response_model=ApiResponse[UploadResponse], response_model_by_alias=True)
async def upload(
    file: UploadFile = File(...),
    bucket_name: str | None = Form(None, alias="bucketName"),
    private_key: str | None = Form(None, alias="privateKey"),
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
        encryption_key=private_key,
        want_preview=need_preview,
    )
    return ApiResponse[UploadResponse](message="File uploaded", data=UploadResponse.from_result(result))


@router.get("/download")
async def download(
    file_uuid: str = Query(..., alias="fileUuid"),
    private_key: str | None = Query(None, alias="privateKey"),
    orchestrator: FileStorageOrchestrator = Depends(get_orchestrator),
):
    downloaded = await orchestrator.download(MODE, file_uuid, private_key)
    return file_download_response(downloaded)


@router.get("/query", response_model=ApiResponse[FileInfoResponse], response_model_by_alias=True)
async def query(
    file_uuid: str = Query(..., alias="fileUuid"),
    orchestrator: FileStorageOrchestrator = Depends(get_orchestrator),
):
    info = await orchestrator.query(MODE, file_uuid)
    return ApiResponse[FileInfoResponse](data=FileInfoResponse.from_info(info))


@router.delete("/delete", response_model=ApiResponse, response_model_by_alias=True)
async def delete(
    file_uuid: str = Query(..., alias="fileUuid"),
    orchestrator: FileStorageOrchestrator = Depends(get_orchestrator),
):
    await orchestrator.delete(MODE, file_uuid)
    return ApiResponse(message="File deleted")


@router.get("/preview-url", response_model=ApiResponse[PreviewUrlResponse], response_model_by_alias=True)
async def preview_url(
    file_uuid: str = Query(..., alias="fileUuid"),
    expiry_minutes: int = Query(60, alias="expiryMinutes"),
    orchestrator: FileStorageOrchestrator = Depends(get_orchestrator),
):
    url = await orchestrator.preview_url(MODE, file_uuid, expiry_minutes)
    return ApiResponse[PreviewUrlResponse](
        message="Preview URL generated",
        data=PreviewUrlResponse(preview_url=url, expiry_minutes=expiry_minutes),
    )
