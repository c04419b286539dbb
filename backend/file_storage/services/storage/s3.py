"""S3 storage backend (AWS or MinIO via endpoint_url). Imported only when STORAGE_BACKEND=s3 (avoids boto3 in local mode)."""
from __future__ import annotations

import logging

from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from file_storage.core.config import get_settings
from file_storage.domain.errors import StorageFaultError
from file_storage.services.storage.base import ObjectNotFoundError, StorageBackend, require_valid_bucket

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = ("404", "NoSuchKey", "NotFound")
_NO_BUCKET_CODES = ("404", "NoSuchBucket", "NotFound")


def _get_client():
    import boto3

    settings = get_settings()
    return boto3.client(
        "s3",
        endpoint_url=settings.s3_endpoint_url,
        aws_access_key_id=settings.s3_access_key,
        aws_secret_access_key=settings.s3_secret_key,
        region_name=settings.aws_region,
        # Single attempt: callers own retry policy.
        config=Config(signature_version="s3v4", retries={"total_max_attempts": 1, "mode": "standard"}),
    )


def _error_code(e: Exception) -> str | None:
    resp = getattr(e, "response", None)
    return resp.get("Error", {}).get("Code") if isinstance(resp, dict) else None


class S3Storage(StorageBackend):
    """S3 backend: put/get/delete/head via boto3; presigned GET via generate_presigned_url."""

    def __init__(self, client=None) -> None:
        self._client = client if client is not None else _get_client()
        self._region = get_settings().aws_region

    def upload_file(self, bucket_name: str, object_key: str, data: bytes, size: int, content_type: str) -> None:
        self.create_bucket_if_not_exists(bucket_name)
        try:
            self._client.put_object(
                Bucket=bucket_name,
                Key=object_key,
                Body=data,
                ContentLength=size,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("put_object failed bucket=%s key=%s code=%s", bucket_name, object_key, _error_code(e))
            raise StorageFaultError("Failed to upload object", bucket=bucket_name, key=object_key, cause=e) from e
        logger.info("stored object bucket=%s key=%s bytes=%d", bucket_name, object_key, size)

    def download_file(self, bucket_name: str, object_key: str) -> bytes:
        try:
            resp = self._client.get_object(Bucket=bucket_name, Key=object_key)
            return resp["Body"].read()
        except ClientError as e:
            if _error_code(e) in _NOT_FOUND_CODES:
                raise ObjectNotFoundError(bucket_name, object_key) from e
            raise StorageFaultError("Failed to download object", bucket=bucket_name, key=object_key, cause=e) from e
        except BotoCoreError as e:
            raise StorageFaultError("Failed to download object", bucket=bucket_name, key=object_key, cause=e) from e

    def delete_file(self, bucket_name: str, object_key: str) -> None:
        try:
            self._client.delete_object(Bucket=bucket_name, Key=object_key)
        except (ClientError, BotoCoreError) as e:
            raise StorageFaultError("Failed to delete object", bucket=bucket_name, key=object_key, cause=e) from e
        logger.info("deleted object bucket=%s key=%s", bucket_name, object_key)

    def file_exists(self, bucket_name: str, object_key: str) -> bool:
        try:
            self._client.head_object(Bucket=bucket_name, Key=object_key)
            return True
        except ClientError as e:
            if _error_code(e) in _NOT_FOUND_CODES:
                return False
            raise StorageFaultError("Failed to check object", bucket=bucket_name, key=object_key, cause=e) from e
        except BotoCoreError as e:
            raise StorageFaultError("Failed to check object", bucket=bucket_name, key=object_key, cause=e) from e

    def create_bucket_if_not_exists(self, bucket_name: str) -> None:
        name = require_valid_bucket(bucket_name)
        try:
            self._client.head_bucket(Bucket=name)
            return
        except ClientError as e:
            if _error_code(e) not in _NO_BUCKET_CODES:
                raise StorageFaultError("Failed to access bucket", bucket=name, cause=e) from e
        except BotoCoreError as e:
            raise StorageFaultError("Failed to access bucket", bucket=name, cause=e) from e
        kwargs = {"Bucket": name}
        if self._region and self._region != "us-east-1":
            kwargs["CreateBucketConfiguration"] = {"LocationConstraint": self._region}
        try:
            self._client.create_bucket(**kwargs)
        except ClientError as e:
            # Lost a race with another creator; the bucket is there, which is all we need.
            if _error_code(e) in ("BucketAlreadyOwnedByYou",):
                return
            raise StorageFaultError("Failed to create bucket", bucket=name, cause=e) from e
        except BotoCoreError as e:
            raise StorageFaultError("Failed to create bucket", bucket=name, cause=e) from e
        logger.info("created bucket %s", name)

    def generate_presigned_url(self, bucket_name: str, object_key: str, expire_seconds: int) -> str:
        try:
            return self._client.generate_presigned_url(
                "get_object",
                Params={"Bucket": bucket_name, "Key": object_key},
                ExpiresIn=expire_seconds,
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageFaultError("Failed to generate presigned URL", bucket=bucket_name, key=object_key, cause=e) from e
