"""
Seed script for local dev: creates the files table and uploads two sample
files (one plain, one encrypted) into DEFAULT_BUCKET_NAME or "dev-files".
Run from backend/: python scripts/seed_dev.py
"""
import asyncio
import base64
import os

# Add parent to path so file_storage is importable
import sys
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from file_storage.core.config import get_settings
from file_storage.db import async_session_factory, init_db
from file_storage.domain.file_resource import AddressingMode
from file_storage.repositories import SqlAlchemyMetadataRepository
from file_storage.services.encryption import AesCbcEncryptionProvider
from file_storage.services.orchestrator import FileStorageOrchestrator
from file_storage.services.storage import get_storage

settings = get_settings()
BUCKET = settings.default_bucket_name or "dev-files"


async def seed():
    await init_db()
    key = base64.b64encode(os.urandom(32)).decode()
    async with async_session_factory() as db:
        orchestrator = FileStorageOrchestrator(
            get_storage(),
            SqlAlchemyMetadataRepository(db),
            AesCbcEncryptionProvider(),
        )
        plain = await orchestrator.upload(
            b"Sample contract text.\n",
            "sample.txt",
            "text/plain",
            BUCKET,
            mode=AddressingMode.UUID,
        )
        encrypted = await orchestrator.upload(
            b"Confidential sample.\n",
            "confidential.txt",
            "text/plain",
            BUCKET,
            mode=AddressingMode.URL,
            encryption_key=key,
        )
    print(f"plain:     uuid={plain.identifier}")
    print(f"encrypted: fileUrl={encrypted.access_path}")
    print(f"key (keep it, it is not stored): {key}")


if __name__ == "__main__":
    asyncio.run(seed())
