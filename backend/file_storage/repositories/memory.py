"""In-memory metadata repository: one record table with two unique indexes, like the SQL schema."""
import asyncio
from dataclasses import replace

from file_storage.domain.errors import ConflictError
from file_storage.domain.file_resource import FileResource
from file_storage.domain.identifier import Identifier
from file_storage.repositories.base import MetadataRepository


class InMemoryMetadataRepository(MetadataRepository):
    def __init__(self) -> None:
        self._records: dict[int, FileResource] = {}
        self._by_identifier: dict[str, int] = {}
        self._by_file_url: dict[str, int] = {}
        self._next_id = 1
        self._lock = asyncio.Lock()

    async def save(self, resource: FileResource) -> FileResource:
        async with self._lock:
            ident = resource.identifier.value
            url = resource.storage_location.file_url
            owner = self._by_identifier.get(ident)
            if owner is not None and owner != resource.id:
                raise ConflictError(f"Identifier already exists: {ident}")
            owner = self._by_file_url.get(url)
            if owner is not None and owner != resource.id:
                raise ConflictError(f"File URL already exists: {url}")
            if resource.id is None:
                record_id = self._next_id
                self._next_id += 1
            else:
                record_id = resource.id
                previous = self._records.get(record_id)
                if previous is not None:
                    self._unindex(previous)
            saved = replace(resource, id=record_id)
            self._records[record_id] = saved
            self._by_identifier[ident] = record_id
            self._by_file_url[url] = record_id
            return saved

    def _unindex(self, resource: FileResource) -> None:
        self._by_identifier.pop(resource.identifier.value, None)
        self._by_file_url.pop(resource.storage_location.file_url, None)

    async def find_by_identifier(self, identifier: Identifier) -> FileResource | None:
        record_id = self._by_identifier.get(identifier.value)
        return self._records.get(record_id) if record_id is not None else None

    async def find_by_file_url(self, file_url: str) -> FileResource | None:
        record_id = self._by_file_url.get(file_url)
        return self._records.get(record_id) if record_id is not None else None

    async def _delete(self, record_id: int | None) -> bool:
        async with self._lock:
            if record_id is None or record_id not in self._records:
                return False
            self._unindex(self._records.pop(record_id))
            return True

    async def delete_by_identifier(self, identifier: Identifier) -> bool:
        return await self._delete(self._by_identifier.get(identifier.value))

    async def delete_by_file_url(self, file_url: str) -> bool:
        return await self._delete(self._by_file_url.get(file_url))

    async def exists_by_identifier(self, identifier: Identifier) -> bool:
        return identifier.value in self._by_identifier

    async def exists_by_file_url(self, file_url: str) -> bool:
        return file_url in self._by_file_url

    def __len__(self) -> int:
        return len(self._records)
