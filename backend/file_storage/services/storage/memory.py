"""In-process object store for tests and storage_backend=memory. Not shared across processes."""
import threading
from urllib.parse import quote

from file_storage.services.storage.base import ObjectNotFoundError, StorageBackend, require_valid_bucket


class InMemoryStorage(StorageBackend):
    """bucket -> key -> (bytes, content_type). Guarded by a lock since calls arrive from worker threads."""

    def __init__(self) -> None:
        self._buckets: dict[str, dict[str, tuple[bytes, str]]] = {}
        self._lock = threading.Lock()

    def upload_file(self, bucket_name: str, object_key: str, data: bytes, size: int, content_type: str) -> None:
        self.create_bucket_if_not_exists(bucket_name)
        with self._lock:
            self._buckets[bucket_name][object_key] = (bytes(data), content_type)

    def download_file(self, bucket_name: str, object_key: str) -> bytes:
        with self._lock:
            entry = self._buckets.get(bucket_name, {}).get(object_key)
        if entry is None:
            raise ObjectNotFoundError(bucket_name, object_key)
        return entry[0]

    def delete_file(self, bucket_name: str, object_key: str) -> None:
        with self._lock:
            self._buckets.get(bucket_name, {}).pop(object_key, None)

    def file_exists(self, bucket_name: str, object_key: str) -> bool:
        with self._lock:
            return object_key in self._buckets.get(bucket_name, {})

    def create_bucket_if_not_exists(self, bucket_name: str) -> None:
        name = require_valid_bucket(bucket_name)
        with self._lock:
            self._buckets.setdefault(name, {})

    def generate_presigned_url(self, bucket_name: str, object_key: str, expire_seconds: int) -> str:
        return f"memory://{bucket_name}/{quote(object_key)}?expires={expire_seconds}"

    def bucket_exists(self, bucket_name: str) -> bool:
        with self._lock:
            return bucket_name in self._buckets

    def object_count(self, bucket_name: str | None = None) -> int:
        with self._lock:
            if bucket_name is not None:
                return len(self._buckets.get(bucket_name, {}))
            return sum(len(objects) for objects in self._buckets.values())
