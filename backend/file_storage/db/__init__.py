from .models import Base, FileRecord
from .session import get_db, async_session_factory, engine, init_db, ping_db

__all__ = [
    "Base",
    "FileRecord",
    "get_db",
    "async_session_factory",
    "engine",
    "init_db",
    "ping_db",
]
