"""FastAPI dependencies: DB, storage, encryption, orchestrator, metrics guard."""
from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from file_storage.core.config import get_settings
from file_storage.db import get_db
from file_storage.repositories import MetadataRepository, SqlAlchemyMetadataRepository
from file_storage.services.encryption import AesCbcEncryptionProvider, EncryptionProvider
from file_storage.services.orchestrator import FileStorageOrchestrator
from file_storage.services.storage import StorageBackend, get_storage

_encryption_provider = AesCbcEncryptionProvider()


def get_storage_backend() -> StorageBackend:
    return get_storage()


def get_encryption_provider() -> EncryptionProvider:
    return _encryption_provider


def get_repository(db: AsyncSession = Depends(get_db)) -> MetadataRepository:
    return SqlAlchemyMetadataRepository(db)


def get_orchestrator(
    storage: StorageBackend = Depends(get_storage_backend),
    repository: MetadataRepository = Depends(get_repository),
    encryption: EncryptionProvider = Depends(get_encryption_provider),
) -> FileStorageOrchestrator:
    """One orchestrator per request, bound to that request's DB session. Tests override this."""
    s = get_settings()
    return FileStorageOrchestrator(
        storage,
        repository,
        encryption,
        preview_ttl_seconds=s.upload_preview_ttl_seconds,
        max_preview_expiry_minutes=s.max_preview_expiry_minutes,
    )


def require_metrics_access(
    x_metrics_secret: str | None = Header(None, alias="X-Metrics-Secret"),
) -> None:
    """Allow /metrics if METRICS_SECRET is unset (local) or the X-Metrics-Secret header matches."""
    s = get_settings()
    if s.metrics_secret and x_metrics_secret != s.metrics_secret:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing X-Metrics-Secret",
        )
