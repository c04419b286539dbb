"""Local (dev disk) storage: one directory per bucket under dev_assets_dir; presigned URLs are HMAC-token stream URLs."""
import logging
from pathlib import Path
from urllib.parse import urlencode

from file_storage.core.config import get_settings
from file_storage.core.security import create_preview_token
from file_storage.domain.errors import StorageFaultError, ValidationError
from file_storage.services.storage.base import ObjectNotFoundError, StorageBackend, require_valid_bucket

logger = logging.getLogger(__name__)


class LocalStorage(StorageBackend):
    """Dev disk storage. Objects live at <root>/<bucket>/<object_key>."""

    def __init__(self, root: str | Path | None = None, base_url: str | None = None) -> None:
        settings = get_settings()
        self._root = Path(root if root is not None else settings.dev_assets_dir)
        self._base_url = (base_url or settings.public_base_url).rstrip("/")

    def _bucket_dir(self, bucket_name: str) -> Path:
        return self._root / bucket_name

    def _object_path(self, bucket_name: str, object_key: str) -> Path:
        bucket_dir = self._bucket_dir(bucket_name).resolve()
        # Keys map 1:1 onto paths; dot segments would let two keys share one file.
        segments = object_key.split("/")
        if "\\" in object_key or any(s in ("", ".", "..") for s in segments):
            raise ValidationError(f"Invalid object key: {object_key}")
        path = (bucket_dir / object_key).resolve()
        if bucket_dir not in path.parents:
            raise ValidationError(f"Invalid object key: {object_key}")
        return path

    def upload_file(self, bucket_name: str, object_key: str, data: bytes, size: int, content_type: str) -> None:
        self.create_bucket_if_not_exists(bucket_name)
        path = self._object_path(bucket_name, object_key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise StorageFaultError("Failed to write object", bucket=bucket_name, key=object_key, cause=e) from e
        logger.info("stored object bucket=%s key=%s bytes=%d", bucket_name, object_key, size)

    def download_file(self, bucket_name: str, object_key: str) -> bytes:
        path = self._object_path(bucket_name, object_key)
        if not path.is_file():
            raise ObjectNotFoundError(bucket_name, object_key)
        try:
            return path.read_bytes()
        except OSError as e:
            raise StorageFaultError("Failed to read object", bucket=bucket_name, key=object_key, cause=e) from e

    def delete_file(self, bucket_name: str, object_key: str) -> None:
        path = self._object_path(bucket_name, object_key)
        try:
            # S3 DeleteObject succeeds for missing keys; mirror that.
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageFaultError("Failed to delete object", bucket=bucket_name, key=object_key, cause=e) from e
        logger.info("deleted object bucket=%s key=%s", bucket_name, object_key)

    def file_exists(self, bucket_name: str, object_key: str) -> bool:
        return self._object_path(bucket_name, object_key).is_file()

    def create_bucket_if_not_exists(self, bucket_name: str) -> None:
        name = require_valid_bucket(bucket_name)
        bucket_dir = self._bucket_dir(name)
        if bucket_dir.is_dir():
            return
        try:
            bucket_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageFaultError("Failed to create bucket", bucket=name, cause=e) from e
        logger.info("created bucket %s", name)

    def generate_presigned_url(self, bucket_name: str, object_key: str, expire_seconds: int) -> str:
        self._object_path(bucket_name, object_key)
        token = create_preview_token(bucket_name, object_key, expire_seconds)
        return f"{self._base_url}/api/v1/files/stream?{urlencode({'token': token})}"
