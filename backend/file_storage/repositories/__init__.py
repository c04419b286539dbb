from .base import MetadataRepository
from .memory import InMemoryMetadataRepository
from .sql import SqlAlchemyMetadataRepository

__all__ = ["InMemoryMetadataRepository", "MetadataRepository", "SqlAlchemyMetadataRepository"]
