"""Storage backend interface: put/get/delete/exists, bucket creation, presigned GET.

Implementations: local (dev disk), memory (tests), S3 (AWS or MinIO).
Every call is blocking and single-attempt. Transport/provider failures raise
StorageFaultError; a missing object raises ObjectNotFoundError.
"""
from abc import ABC, abstractmethod

from file_storage.domain.bucket_names import validate_bucket_name
from file_storage.domain.errors import NotFoundError, ValidationError


class ObjectNotFoundError(NotFoundError):
    """The object store has no object at bucket/key."""

    def __init__(self, bucket: str, key: str) -> None:
        super().__init__(f"Object not found: {bucket}/{key}")
        self.bucket = bucket
        self.key = key


def require_valid_bucket(bucket_name: str) -> str:
    """Return the normalized bucket name or raise ValidationError."""
    result = validate_bucket_name(bucket_name)
    if not result.valid:
        raise ValidationError(f"Bucket name does not meet S3 naming rules: {result.message}")
    return result.normalized_name


class StorageBackend(ABC):
    """Abstract object store."""

    @abstractmethod
    def upload_file(self, bucket_name: str, object_key: str, data: bytes, size: int, content_type: str) -> None:
        """Write data at bucket/object_key, creating the bucket if needed."""
        ...

    @abstractmethod
    def download_file(self, bucket_name: str, object_key: str) -> bytes:
        ...

    @abstractmethod
    def delete_file(self, bucket_name: str, object_key: str) -> None:
        ...

    @abstractmethod
    def file_exists(self, bucket_name: str, object_key: str) -> bool:
        ...

    @abstractmethod
    def create_bucket_if_not_exists(self, bucket_name: str) -> None:
        """Validate the name (ValidationError) then create it if absent. Idempotent."""
        ...

    @abstractmethod
    def generate_presigned_url(self, bucket_name: str, object_key: str, expire_seconds: int) -> str:
        """Time-limited URL allowing unauthenticated GET of one object."""
        ...
