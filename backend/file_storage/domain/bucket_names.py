"""S3 bucket naming rules.

Checks run in a fixed order and the first failure decides the message, so
callers (and tests) can rely on the reported reason.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

MIN_LENGTH = 3
MAX_LENGTH = 63

_BUCKET_NAME_PATTERN = re.compile(r"^[a-z0-9][a-z0-9-]*[a-z0-9]$")
_IP_ADDRESS_PATTERN = re.compile(r"^\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}$")
_RESERVED_PREFIXES = ("xn--",)
_RESERVED_SUFFIXES = ("-s3alias", "--ol-s3")

MSG_BLANK = "Bucket name must not be blank"
MSG_UPPERCASE = "Bucket name may only contain lowercase letters, digits and hyphens"
MSG_CONSECUTIVE_HYPHENS = "Bucket name must not contain consecutive hyphens"
MSG_CHARSET = (
    "Bucket name may only contain lowercase letters, digits and hyphens, "
    "and must start and end with a letter or digit"
)
MSG_IP_ADDRESS = "Bucket name must not be formatted as an IP address"
MSG_RESERVED_PREFIX = "Bucket name must not start with 'xn--'"
MSG_RESERVED_SUFFIX = "Bucket name must not end with '-s3alias' or '--ol-s3'"
MSG_OK = "Bucket name is valid"


@dataclass(frozen=True)
class BucketNameResult:
    valid: bool
    message: str
    normalized_name: str | None = None


def _error(message: str) -> BucketNameResult:
    return BucketNameResult(valid=False, message=message)


def validate_bucket_name(bucket_name: str | None) -> BucketNameResult:
    """Validate against S3 naming rules. normalized_name is set only when valid."""
    if bucket_name is None or not bucket_name.strip():
        return _error(MSG_BLANK)
    name = bucket_name.strip()
    if len(name) < MIN_LENGTH or len(name) > MAX_LENGTH:
        return _error(
            f"Bucket name must be between {MIN_LENGTH} and {MAX_LENGTH} characters, got {len(name)}"
        )
    if name != name.lower():
        return _error(MSG_UPPERCASE)
    if "--" in name:
        return _error(MSG_CONSECUTIVE_HYPHENS)
    if not _BUCKET_NAME_PATTERN.match(name):
        return _error(MSG_CHARSET)
    if _IP_ADDRESS_PATTERN.match(name):
        return _error(MSG_IP_ADDRESS)
    if name.startswith(_RESERVED_PREFIXES):
        return _error(MSG_RESERVED_PREFIX)
    if name.endswith(_RESERVED_SUFFIXES):
        return _error(MSG_RESERVED_SUFFIX)
    return BucketNameResult(valid=True, message=MSG_OK, normalized_name=name.lower())
