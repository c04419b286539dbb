"""SQLAlchemy-backed metadata repository over the `files` table."""
import logging

from sqlalchemy import delete, exists, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from file_storage.db.models import FileRecord
from file_storage.domain.encryption_envelope import EncryptionEnvelope
from file_storage.domain.errors import ConflictError, FileStorageError, StorageFaultError
from file_storage.domain.file_resource import FileResource
from file_storage.domain.identifier import Identifier
from file_storage.domain.location import StorageLocation
from file_storage.domain.metadata import Metadata
from file_storage.repositories.base import MetadataRepository

logger = logging.getLogger(__name__)


def to_record(resource: FileResource, record: FileRecord | None = None) -> FileRecord:
    record = record or FileRecord()
    record.attachment_uuid = resource.identifier.value
    record.directory = resource.storage_location.directory
    record.file_url = resource.storage_location.file_url
    record.file_type = resource.metadata.file_type
    record.file_name = resource.metadata.file_name
    record.file_size = resource.metadata.file_size
    record.bucket_name = resource.storage_location.bucket_name
    record.source_type = resource.source_type
    record.is_encrypted = resource.encryption.is_encrypted
    record.encryption_algorithm = resource.encryption.algorithm
    record.created_time = resource.metadata.created_time
    record.updated_time = resource.metadata.updated_time
    return record


def to_domain(record: FileRecord) -> FileResource:
    """Rebuild without re-checking business rules; a row that cannot form value objects is a store fault."""
    try:
        return FileResource.rebuild(
            id=record.id,
            identifier=Identifier.parse(record.attachment_uuid),
            metadata=Metadata(
                record.file_name,
                record.file_type,
                record.file_size,
                record.created_time,
                record.updated_time,
            ),
            storage_location=StorageLocation.of(record.bucket_name, record.directory, record.file_url),
            encryption=EncryptionEnvelope.of(record.is_encrypted, record.encryption_algorithm),
            source_type=record.source_type,
        )
    except FileStorageError as e:
        raise StorageFaultError(f"Stored file record {record.id} is invalid: {e.message}", cause=e) from e


class SqlAlchemyMetadataRepository(MetadataRepository):
    """Each write commits on its own so the transaction spans only the metadata call."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _commit_or_raise(self, what: str) -> None:
        try:
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            raise ConflictError(f"{what}: identifier or file URL already exists") from e
        except SQLAlchemyError as e:
            await self._session.rollback()
            raise StorageFaultError(f"{what}: metadata store error", cause=e) from e

    async def save(self, resource: FileResource) -> FileResource:
        try:
            if resource.id is None:
                record = to_record(resource)
                self._session.add(record)
            else:
                existing = await self._session.get(FileRecord, resource.id)
                if existing is None:
                    raise StorageFaultError(f"File record {resource.id} vanished before update")
                record = to_record(resource, existing)
            await self._session.flush()
            record_id = record.id
        except IntegrityError as e:
            await self._session.rollback()
            raise ConflictError(f"Failed to save file {resource.identifier}: identifier or file URL already exists") from e
        except SQLAlchemyError as e:
            await self._session.rollback()
            raise StorageFaultError(f"Failed to save file {resource.identifier}", cause=e) from e
        await self._commit_or_raise(f"Failed to save file {resource.identifier}")
        return resource.with_id(record_id)

    async def _find_one(self, stmt) -> FileResource | None:
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            raise StorageFaultError("Metadata lookup failed", cause=e) from e
        row = result.scalar_one_or_none()
        return to_domain(row) if row else None

    async def find_by_identifier(self, identifier: Identifier) -> FileResource | None:
        return await self._find_one(select(FileRecord).where(FileRecord.attachment_uuid == identifier.value))

    async def find_by_file_url(self, file_url: str) -> FileResource | None:
        return await self._find_one(select(FileRecord).where(FileRecord.file_url == file_url))

    async def _delete(self, stmt, what: str) -> bool:
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            await self._session.rollback()
            raise StorageFaultError(f"{what}: metadata store error", cause=e) from e
        await self._commit_or_raise(what)
        return (result.rowcount or 0) > 0

    async def delete_by_identifier(self, identifier: Identifier) -> bool:
        return await self._delete(
            delete(FileRecord).where(FileRecord.attachment_uuid == identifier.value),
            f"Failed to delete file {identifier}",
        )

    async def delete_by_file_url(self, file_url: str) -> bool:
        return await self._delete(
            delete(FileRecord).where(FileRecord.file_url == file_url),
            f"Failed to delete file {file_url}",
        )

    async def _exists(self, condition) -> bool:
        try:
            result = await self._session.execute(select(exists().where(condition)))
        except SQLAlchemyError as e:
            raise StorageFaultError("Metadata lookup failed", cause=e) from e
        return bool(result.scalar())

    async def exists_by_identifier(self, identifier: Identifier) -> bool:
        return await self._exists(FileRecord.attachment_uuid == identifier.value)

    async def exists_by_file_url(self, file_url: str) -> bool:
        return await self._exists(FileRecord.file_url == file_url)
