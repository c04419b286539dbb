"""Metadata repository port: one record per file, reachable by identifier or by file URL."""
from abc import ABC, abstractmethod

from file_storage.domain.file_resource import FileResource
from file_storage.domain.identifier import Identifier


class MetadataRepository(ABC):
    """Both keys (identifier, file_url) are unique across all records.

    The identifier generator does not guarantee uniqueness, so implementations
    must reject a second record with either key (ConflictError). save() and the
    delete methods each form their own transaction.
    """

    @abstractmethod
    async def save(self, resource: FileResource) -> FileResource:
        """Insert, or update when resource.id is set. Returns the resource with its id."""
        ...

    @abstractmethod
    async def find_by_identifier(self, identifier: Identifier) -> FileResource | None:
        ...

    @abstractmethod
    async def find_by_file_url(self, file_url: str) -> FileResource | None:
        ...

    @abstractmethod
    async def delete_by_identifier(self, identifier: Identifier) -> bool:
        """True if a record was removed."""
        ...

    @abstractmethod
    async def delete_by_file_url(self, file_url: str) -> bool:
        ...

    @abstractmethod
    async def exists_by_identifier(self, identifier: Identifier) -> bool:
        ...

    @abstractmethod
    async def exists_by_file_url(self, file_url: str) -> bool:
        ...
