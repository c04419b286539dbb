"""Where a file lives: bucket, date-partitioned directory, and its public path."""
from __future__ import annotations

from dataclasses import dataclass

from file_storage.domain.bucket_names import validate_bucket_name
from file_storage.domain.errors import ValidationError
from file_storage.domain.identifier import Identifier

DATE_PATH_FORMAT = "%Y/%m/%d"


@dataclass(frozen=True)
class StorageLocation:
    """bucket_name + directory + file_url.

    directory is `<yyyy/MM/dd>/<identifier>` where the date comes from the
    identifier's embedded timestamp, not from the clock at upload time.
    file_url is `/<bucket>/<directory>/<fileName>`. The bucket name is checked
    on every construction path.
    """

    bucket_name: str
    directory: str
    file_url: str

    def __post_init__(self) -> None:
        result = validate_bucket_name(self.bucket_name)
        if not result.valid:
            raise ValidationError(f"Invalid bucket name: {result.message}")

    @classmethod
    def generate_from_uuid(cls, bucket_name: str, identifier: Identifier, file_name: str) -> StorageLocation:
        date_path = identifier.timestamp.strftime(DATE_PATH_FORMAT)
        directory = f"{date_path}/{identifier.value}"
        return cls(bucket_name, directory, f"/{bucket_name}/{directory}/{file_name}")

    @classmethod
    def of(cls, bucket_name: str, directory: str, file_url: str) -> StorageLocation:
        """Rebuild from stored values without recomputing anything."""
        return cls(bucket_name, directory, file_url)

    @property
    def full_path(self) -> str:
        return f"{self.bucket_name}/{self.directory}"

    def object_key(self, file_name: str) -> str:
        """Key inside the bucket; file_url minus the leading `/<bucket>/`."""
        return f"{self.directory}/{file_name}"
