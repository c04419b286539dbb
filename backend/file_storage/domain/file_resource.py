"""FileResource aggregate: identifier, metadata, location and envelope as one unit."""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from file_storage.domain.encryption_envelope import EncryptionEnvelope
from file_storage.domain.errors import InvalidStateError, ValidationError
from file_storage.domain.identifier import Identifier
from file_storage.domain.location import StorageLocation
from file_storage.domain.metadata import Metadata


class AddressingMode(str, Enum):
    """How a caller names a file: by identifier (UUID mode) or by derived path (URL mode)."""

    UUID = "uuid"
    URL = "url"

    @property
    def source_type(self) -> str:
        return "UUID_UPLOAD" if self is AddressingMode.UUID else "URL_UPLOAD"


@dataclass(frozen=True)
class FileResource:
    """Aggregate root.

    identifier and storage_location are derived together in `create()` and
    never change. The envelope is fixed at creation; there is no re-encryption.
    `id` is None until the metadata store has saved the record.
    """

    identifier: Identifier
    metadata: Metadata
    storage_location: StorageLocation
    encryption: EncryptionEnvelope
    source_type: str | None = None
    id: int | None = None

    @classmethod
    def create(
        cls,
        file_name: str,
        file_type: str,
        file_size: int,
        bucket_name: str,
        source_type: str,
        encrypted: bool,
        identifier: Identifier | None = None,
    ) -> FileResource:
        identifier = identifier or Identifier.generate()
        metadata = Metadata(file_name, file_type, file_size)
        location = StorageLocation.generate_from_uuid(bucket_name, identifier, file_name)
        envelope = EncryptionEnvelope.encrypted() if encrypted else EncryptionEnvelope.unencrypted()
        return cls(identifier, metadata, location, envelope, source_type)

    @classmethod
    def rebuild(
        cls,
        id: int | None,
        identifier: Identifier,
        metadata: Metadata,
        storage_location: StorageLocation,
        encryption: EncryptionEnvelope,
        source_type: str | None,
    ) -> FileResource:
        """From a stored record. Business rules (extension allow-list) are not re-checked."""
        return cls(identifier, metadata, storage_location, encryption, source_type, id)

    def validate_for_upload(self) -> None:
        if not self.metadata.is_allowed_extension():
            raise ValidationError(f"Unsupported file format: {self.metadata.file_extension or '(none)'}")

    def validate_for_access(self) -> None:
        if self.identifier is None:
            raise InvalidStateError("File identifier is missing")
        if self.storage_location is None:
            raise InvalidStateError("File storage location is missing")

    @property
    def is_encrypted(self) -> bool:
        return self.encryption.is_encrypted

    @property
    def object_key(self) -> str:
        return self.storage_location.object_key(self.metadata.file_name)

    @property
    def file_url(self) -> str:
        return self.storage_location.file_url

    @property
    def bucket_name(self) -> str:
        return self.storage_location.bucket_name

    def update_metadata(self) -> FileResource:
        return replace(self, metadata=self.metadata.update_time())

    def with_id(self, id: int) -> FileResource:
        return replace(self, id=id)
