"""Error taxonomy for file storage operations.

Validation and not-found conditions are surfaced to the caller as-is; nothing
in the core retries. StorageFaultError carries bucket/key context so a caller
(or an operator reading logs) can locate the object involved.
"""
from __future__ import annotations


class FileStorageError(Exception):
    """Base class. `code` is the stable error code returned over the API."""

    code = "FS000"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(FileStorageError):
    """Bad input: bucket name, identifier, file size/name/type, missing field."""

    code = "FS004"


class InvalidFormatError(ValidationError):
    """Identifier does not match `<14 digits>-<8 lowercase alnum>`."""

    code = "FS002"


class NotFoundError(FileStorageError):
    code = "FS001"


class CryptoError(FileStorageError):
    """Bad key, corrupt ciphertext, or missing key for encrypted content."""

    code = "FS006"


class InvalidKeyError(CryptoError):
    code = "FS005"


class InvalidStateError(FileStorageError):
    """Operation not allowed for the resource as stored (e.g. preview of encrypted file)."""

    code = "FS007"


class ConflictError(FileStorageError):
    """Identifier or file URL already taken (metadata store unique constraint)."""

    code = "FS008"


class StorageFaultError(FileStorageError):
    """Object store or metadata store failed. Never retried here."""

    code = "FS009"

    def __init__(
        self,
        message: str,
        *,
        bucket: str | None = None,
        key: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.bucket = bucket
        self.key = key
        self.cause = cause

    def __str__(self) -> str:
        parts = [self.message]
        if self.bucket:
            parts.append(f"bucket={self.bucket}")
        if self.key:
            parts.append(f"key={self.key}")
        return " ".join(parts)
