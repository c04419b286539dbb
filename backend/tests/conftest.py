"""Pytest fixtures: in-memory stores, orchestrator, test client."""
import base64
from datetime import datetime, timezone
import random

import pytest
from httpx import ASGITransport, AsyncClient

from file_storage.core.deps import get_orchestrator, get_storage_backend
from file_storage.domain.identifier import Identifier
from file_storage.main import app
from file_storage.repositories import InMemoryMetadataRepository
from file_storage.services.encryption import AesCbcEncryptionProvider
from file_storage.services.orchestrator import FileStorageOrchestrator
from file_storage.services.storage import InMemoryStorage

# base64 of 32 bytes 0x00..0x1f
TEST_KEY = base64.b64encode(bytes(range(32))).decode()
OTHER_KEY = base64.b64encode(bytes(range(32, 64))).decode()
PDF_BYTES = b"%PDF-1.4 abc"  # 12 bytes


def fixed_clock(year=2024, month=9, day=21, hour=14, minute=30, second=22):
    moment = datetime(year, month, day, hour, minute, second, tzinfo=timezone.utc)
    return lambda: moment


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def repository():
    return InMemoryMetadataRepository()


@pytest.fixture
def encryption():
    return AesCbcEncryptionProvider()


@pytest.fixture
def orchestrator(storage, repository, encryption):
    rng = random.Random(1234)
    return FileStorageOrchestrator(
        storage,
        repository,
        encryption,
        preview_ttl_seconds=3600,
        max_preview_expiry_minutes=7 * 24 * 60,
        identifier_factory=lambda: Identifier.generate(rng=rng),
    )


@pytest.fixture
async def client(orchestrator, storage):
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_storage_backend] = lambda: storage
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()
