"""Pydantic response schemas. JSON field names are camelCase."""
from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from file_storage.services.orchestrator import FileInfo, UploadResult

T = TypeVar("T")


def _config_camel(**kwargs):
    return ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid", **kwargs)


class ApiResponse(BaseModel, Generic[T]):
    model_config = _config_camel()
    success: bool = True
    message: str | None = None
    data: T | None = None


class ErrorResponse(BaseModel):
    model_config = _config_camel()
    success: bool = False
    code: str
    message: str


# ----- Files -----
class UploadResponse(BaseModel):
    model_config = _config_camel()
    uuid: str
    # Identifier (UUID mode) or file URL (URL mode); a presigned URL when a preview was requested
    access_path: str
    file_name: str
    file_size: int
    content_type: str
    encrypted: bool

    @classmethod
    def from_result(cls, result: UploadResult) -> "UploadResponse":
        return cls(
            uuid=result.identifier,
            access_path=result.access_path,
            file_name=result.file_name,
            file_size=result.file_size,
            content_type=result.content_type,
            encrypted=result.is_encrypted,
        )


class FileInfoResponse(BaseModel):
    model_config = _config_camel()
    uuid: str
    access_path: str
    file_url: str
    file_name: str
    file_size: int
    file_type: str
    bucket_name: str
    directory: str
    is_encrypted: bool
    encryption_algorithm: str | None
    created_time: datetime
    updated_time: datetime

    @classmethod
    def from_info(cls, info: FileInfo) -> "FileInfoResponse":
        return cls(
            uuid=info.identifier,
            access_path=info.access_path,
            file_url=info.file_url,
            file_name=info.file_name,
            file_size=info.file_size,
            file_type=info.content_type,
            bucket_name=info.bucket_name,
            directory=info.directory,
            is_encrypted=info.is_encrypted,
            encryption_algorithm=info.encryption_algorithm,
            created_time=info.created_time,
            updated_time=info.updated_time,
        )


class PreviewUrlResponse(BaseModel):
    model_config = _config_camel()
    preview_url: str
    expiry_minutes: int
