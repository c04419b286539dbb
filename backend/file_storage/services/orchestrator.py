"""Upload/download/query/delete/preview workflows over encryption, object store and metadata store.

Consistency contract: the object store and the metadata store do not share a
transaction. Upload writes the object first and then saves metadata; delete
removes the object first and then the metadata. A failure between the two
steps leaves the stores out of step (an object with no record after a failed
upload, a record with no object after a failed delete). Nothing here
compensates; the failure is logged at ERROR with the bucket and key so the
leftover can be found, and the error is re-raised.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime

from file_storage.core.metrics import record_file_operation, record_presigned_url_mint
from file_storage.domain.errors import CryptoError, InvalidKeyError, InvalidStateError, NotFoundError, ValidationError
from file_storage.domain.file_resource import AddressingMode, FileResource
from file_storage.domain.identifier import Identifier
from file_storage.services.encryption import EncryptionProvider
from file_storage.services.storage.base import StorageBackend, require_valid_bucket
from file_storage.repositories.base import MetadataRepository

logger = logging.getLogger(__name__)

DEFAULT_PREVIEW_TTL_SECONDS = 3600
DEFAULT_MAX_PREVIEW_EXPIRY_MINUTES = 7 * 24 * 60


@dataclass(frozen=True)
class UploadResult:
    identifier: str
    # UUID mode: the identifier; URL mode: the file URL. Replaced by a presigned URL when a preview was asked for.
    access_path: str
    file_name: str
    file_size: int
    content_type: str
    is_encrypted: bool


@dataclass(frozen=True)
class FileInfo:
    identifier: str
    access_path: str
    file_name: str
    file_size: int
    content_type: str
    bucket_name: str
    directory: str
    file_url: str
    is_encrypted: bool
    encryption_algorithm: str | None
    created_time: datetime
    updated_time: datetime


@dataclass(frozen=True)
class DownloadedFile:
    content: bytes
    file_name: str
    content_type: str


class FileStorageOrchestrator:
    """Stateless between calls; one instance may serve many requests."""

    def __init__(
        self,
        storage: StorageBackend,
        repository: MetadataRepository,
        encryption: EncryptionProvider,
        *,
        preview_ttl_seconds: int = DEFAULT_PREVIEW_TTL_SECONDS,
        max_preview_expiry_minutes: int = DEFAULT_MAX_PREVIEW_EXPIRY_MINUTES,
        identifier_factory: Callable[[], Identifier] = Identifier.generate,
    ) -> None:
        self._storage = storage
        self._repository = repository
        self._encryption = encryption
        self._preview_ttl_seconds = preview_ttl_seconds
        self._max_preview_expiry_minutes = max_preview_expiry_minutes
        self._identifier_factory = identifier_factory

    @contextmanager
    def _observe(self, operation: str, mode: AddressingMode) -> Iterator[None]:
        try:
            yield
        except Exception:
            record_file_operation(operation, mode.value, success=False)
            raise
        record_file_operation(operation, mode.value, success=True)

    async def _store_call(self, fn, *args):
        # Object store clients block; keep them off the event loop.
        return await asyncio.to_thread(fn, *args)

    # ----- upload -----

    async def upload(
        self,
        data: bytes,
        file_name: str | None,
        content_type: str | None,
        bucket_name: str | None,
        *,
        mode: AddressingMode,
        encryption_key: str | None = None,
        want_preview: bool = False,
    ) -> UploadResult:
        with self._observe("upload", mode):
            if not data:
                raise ValidationError("File must not be empty")
            if bucket_name is None or not bucket_name.strip():
                raise ValidationError("Bucket name must not be blank")
            if file_name is None or not file_name.strip():
                raise ValidationError("File name must not be blank")
            bucket = require_valid_bucket(bucket_name)

            encrypted = bool(encryption_key and encryption_key.strip())
            if encrypted and not self._encryption.validate_key(encryption_key):
                raise InvalidKeyError("Encryption key format is invalid")

            resource = FileResource.create(
                file_name,
                content_type,
                len(data),
                bucket,
                mode.source_type,
                encrypted,
                identifier=self._identifier_factory(),
            )
            resource.validate_for_upload()

            payload = self._encryption.encrypt(data, encryption_key) if encrypted else data

            await self._store_call(self._storage.create_bucket_if_not_exists, bucket)
            await self._store_call(
                self._storage.upload_file,
                bucket,
                resource.object_key,
                payload,
                len(payload),
                resource.metadata.file_type,
            )
            try:
                saved = await self._repository.save(resource)
            except Exception:
                logger.error(
                    "metadata save failed after object write; orphaned object bucket=%s key=%s identifier=%s",
                    bucket,
                    resource.object_key,
                    resource.identifier,
                )
                raise

            logger.info(
                "uploaded file identifier=%s name=%s mode=%s encrypted=%s",
                saved.identifier,
                saved.metadata.file_name,
                mode.value,
                encrypted,
            )

            access_path = saved.identifier.value if mode is AddressingMode.UUID else saved.file_url
            # No presigned URL for encrypted uploads in either mode, URL mode included:
            # the link would serve IV + ciphertext, not the file.
            if want_preview and not encrypted:
                access_path = await self._presign(saved, self._preview_ttl_seconds)

            return UploadResult(
                identifier=saved.identifier.value,
                access_path=access_path,
                file_name=saved.metadata.file_name,
                file_size=saved.metadata.file_size,
                content_type=saved.metadata.file_type,
                is_encrypted=saved.is_encrypted,
            )

    # ----- lookups -----

    async def _resolve(self, mode: AddressingMode, key: str | None) -> FileResource:
        if key is None or not key.strip():
            raise ValidationError(
                "File identifier must not be blank" if mode is AddressingMode.UUID else "File URL must not be blank"
            )
        key = key.strip()
        if mode is AddressingMode.UUID:
            resource = await self._repository.find_by_identifier(Identifier.parse(key))
        else:
            resource = await self._repository.find_by_file_url(key)
        if resource is None:
            raise NotFoundError(f"File not found: {key}")
        resource.validate_for_access()
        return resource

    async def _presign(self, resource: FileResource, expire_seconds: int) -> str:
        url = await self._store_call(
            self._storage.generate_presigned_url,
            resource.bucket_name,
            resource.object_key,
            expire_seconds,
        )
        record_presigned_url_mint()
        return url

    # ----- download -----

    async def download(self, mode: AddressingMode, key: str | None, decryption_key: str | None = None) -> DownloadedFile:
        with self._observe("download", mode):
            resource = await self._resolve(mode, key)
            if resource.is_encrypted:
                if decryption_key is None or not decryption_key.strip():
                    raise CryptoError("File is encrypted; a decryption key is required")
                if not self._encryption.validate_key(decryption_key):
                    raise InvalidKeyError("Decryption key format is invalid")
            content = await self._store_call(self._storage.download_file, resource.bucket_name, resource.object_key)
            if resource.is_encrypted:
                content = self._encryption.decrypt(content, decryption_key)
            logger.info("downloaded file identifier=%s bytes=%d", resource.identifier, len(content))
            return DownloadedFile(content, resource.metadata.file_name, resource.metadata.file_type)

    # ----- query -----

    async def query(self, mode: AddressingMode, key: str | None) -> FileInfo:
        with self._observe("query", mode):
            resource = await self._resolve(mode, key)
            meta = resource.metadata
            logger.info("queried file identifier=%s mode=%s", resource.identifier, mode.value)
            location = resource.storage_location
            return FileInfo(
                identifier=resource.identifier.value,
                access_path=resource.identifier.value if mode is AddressingMode.UUID else location.file_url,
                file_name=meta.file_name,
                file_size=meta.file_size,
                content_type=meta.file_type,
                bucket_name=location.bucket_name,
                directory=location.directory,
                file_url=location.file_url,
                is_encrypted=resource.encryption.is_encrypted,
                encryption_algorithm=resource.encryption.algorithm,
                created_time=meta.created_time,
                updated_time=meta.updated_time,
            )

    # ----- delete -----

    async def delete(self, mode: AddressingMode, key: str | None) -> None:
        with self._observe("delete", mode):
            resource = await self._resolve(mode, key)
            await self._store_call(self._storage.delete_file, resource.bucket_name, resource.object_key)
            try:
                if mode is AddressingMode.UUID:
                    removed = await self._repository.delete_by_identifier(resource.identifier)
                else:
                    removed = await self._repository.delete_by_file_url(resource.file_url)
            except Exception:
                logger.error(
                    "metadata delete failed after object delete; record without object identifier=%s bucket=%s key=%s",
                    resource.identifier,
                    resource.bucket_name,
                    resource.object_key,
                )
                raise
            if not removed:
                logger.warning("metadata record already gone identifier=%s", resource.identifier)
            logger.info("deleted file identifier=%s mode=%s", resource.identifier, mode.value)

    # ----- preview -----

    async def preview_url(
        self,
        mode: AddressingMode,
        key: str | None,
        expiry_minutes: int = 60,
        decryption_key: str | None = None,
    ) -> str:
        """Presigned GET URL valid for expiry_minutes.

        decryption_key is accepted for URL-mode callers, but a presigned URL
        serves stored bytes as-is, so encrypted files are always refused.
        """
        with self._observe("preview", mode):
            if expiry_minutes is None or expiry_minutes <= 0 or expiry_minutes > self._max_preview_expiry_minutes:
                raise ValidationError(
                    f"expiryMinutes must be between 1 and {self._max_preview_expiry_minutes}"
                )
            resource = await self._resolve(mode, key)
            if resource.is_encrypted:
                raise InvalidStateError("Encrypted files cannot be previewed; use the download endpoint")
            url = await self._presign(resource, expiry_minutes * 60)
            logger.info("minted preview url identifier=%s expiry_minutes=%d", resource.identifier, expiry_minutes)
            return url
