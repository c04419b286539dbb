"""Storage backend factory: local (dev disk), memory, or S3. S3 backend is loaded only when STORAGE_BACKEND=s3 (no boto3 in local)."""
from file_storage.core.config import get_settings
from file_storage.services.storage.base import ObjectNotFoundError, StorageBackend
from file_storage.services.storage.local import LocalStorage
from file_storage.services.storage.memory import InMemoryStorage

_memory_storage: InMemoryStorage | None = None


def get_storage() -> StorageBackend:
    """Return the configured storage backend. Avoids importing boto3 when backend is local."""
    global _memory_storage
    settings = get_settings()
    if settings.storage_backend == "s3":
        from file_storage.services.storage.s3 import S3Storage
        return S3Storage()
    if settings.storage_backend == "memory":
        # One instance per process so objects survive between requests.
        if _memory_storage is None:
            _memory_storage = InMemoryStorage()
        return _memory_storage
    return LocalStorage()


__all__ = ["InMemoryStorage", "LocalStorage", "ObjectNotFoundError", "StorageBackend", "get_storage"]
