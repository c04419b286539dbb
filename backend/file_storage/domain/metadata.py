"""Descriptive file attributes."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from file_storage.domain.errors import ValidationError

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MiB
MAX_FILE_NAME_LENGTH = 240
MAX_FILE_TYPE_LENGTH = 240
ALLOWED_EXTENSIONS = frozenset({"pdf", "doc", "docx", "txt", "jpg", "jpeg", "png"})


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Metadata:
    """Name, MIME type, size and timestamps of a stored file.

    Construction validates name/type/size only. The extension allow-list is a
    separate query (`is_allowed_extension`) so records written before a rule
    change can still be rebuilt.
    """

    file_name: str
    file_type: str
    file_size: int
    created_time: datetime = field(default_factory=_now)
    updated_time: datetime | None = None

    def __post_init__(self) -> None:
        if not self.file_name or not self.file_name.strip():
            raise ValidationError("File name must not be blank")
        if len(self.file_name) > MAX_FILE_NAME_LENGTH:
            raise ValidationError(f"File name must not exceed {MAX_FILE_NAME_LENGTH} characters")
        # The name is the last segment of the object key.
        if "/" in self.file_name or "\\" in self.file_name or self.file_name.strip() in (".", ".."):
            raise ValidationError("File name must not contain path separators")
        # bool is an int subclass; reject it explicitly.
        if self.file_size is None or isinstance(self.file_size, bool) or self.file_size <= 0:
            raise ValidationError("File size must be greater than 0")
        if self.file_size > MAX_FILE_SIZE:
            raise ValidationError("File size must not exceed 10MB")
        if not self.file_type or not self.file_type.strip():
            raise ValidationError("File type must not be blank")
        if len(self.file_type) > MAX_FILE_TYPE_LENGTH:
            raise ValidationError(f"File type must not exceed {MAX_FILE_TYPE_LENGTH} characters")
        if self.created_time is None:
            object.__setattr__(self, "created_time", _now())
        if self.updated_time is None:
            object.__setattr__(self, "updated_time", self.created_time)

    @property
    def file_extension(self) -> str:
        """Lowercased text after the last '.', or '' when there is none."""
        dot = self.file_name.rfind(".")
        if dot == -1 or dot == len(self.file_name) - 1:
            return ""
        return self.file_name[dot + 1:].lower()

    def is_allowed_extension(self) -> bool:
        return self.file_extension in ALLOWED_EXTENSIONS

    def update_time(self) -> Metadata:
        return replace(self, updated_time=_now())
