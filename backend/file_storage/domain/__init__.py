from .bucket_names import BucketNameResult, validate_bucket_name
from .encryption_envelope import DEFAULT_ALGORITHM, EncryptionEnvelope
from .errors import (
    ConflictError,
    CryptoError,
    FileStorageError,
    InvalidFormatError,
    InvalidKeyError,
    InvalidStateError,
    NotFoundError,
    StorageFaultError,
    ValidationError,
)
from .file_resource import AddressingMode, FileResource
from .identifier import Identifier
from .location import StorageLocation
from .metadata import ALLOWED_EXTENSIONS, MAX_FILE_SIZE, Metadata

__all__ = [
    "ALLOWED_EXTENSIONS",
    "DEFAULT_ALGORITHM",
    "MAX_FILE_SIZE",
    "AddressingMode",
    "BucketNameResult",
    "ConflictError",
    "CryptoError",
    "EncryptionEnvelope",
    "FileResource",
    "FileStorageError",
    "Identifier",
    "InvalidFormatError",
    "InvalidKeyError",
    "InvalidStateError",
    "Metadata",
    "NotFoundError",
    "StorageFaultError",
    "StorageLocation",
    "ValidationError",
    "validate_bucket_name",
]
