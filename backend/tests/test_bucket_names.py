"""S3 bucket naming rules: ordered checks, first failure wins."""
import pytest

from file_storage.domain.bucket_names import (
    MSG_BLANK,
    MSG_CHARSET,
    MSG_CONSECUTIVE_HYPHENS,
    MSG_OK,
    MSG_RESERVED_SUFFIX,
    MSG_UPPERCASE,
    validate_bucket_name,
)
from file_storage.domain.errors import ValidationError
from file_storage.services.storage.base import require_valid_bucket


@pytest.mark.parametrize("name", ["abc", "contracts", "my-bucket-01", "a" * 63, "123", "a-b"])
def test_valid_names(name):
    result = validate_bucket_name(name)
    assert result.valid
    assert result.message == MSG_OK
    assert result.normalized_name == name


def test_surrounding_whitespace_is_trimmed():
    result = validate_bucket_name("  contracts  ")
    assert result.valid
    assert result.normalized_name == "contracts"


@pytest.mark.parametrize(
    "name,message",
    [
        (None, MSG_BLANK),
        ("", MSG_BLANK),
        ("   ", MSG_BLANK),
        ("ab", "between 3 and 63 characters, got 2"),
        ("a" * 64, "between 3 and 63 characters, got 64"),
        ("MyBucket", MSG_UPPERCASE),
        ("my--bucket", MSG_CONSECUTIVE_HYPHENS),
        ("-bucket", MSG_CHARSET),
        ("bucket-", MSG_CHARSET),
        ("my_bucket", MSG_CHARSET),
        ("my.bucket", MSG_CHARSET),
        ("192.168.1.1", MSG_CHARSET),
        ("xn--bucket", MSG_CONSECUTIVE_HYPHENS),
        ("bucket--ol-s3", MSG_CONSECUTIVE_HYPHENS),
        ("bucket-s3alias", MSG_RESERVED_SUFFIX),
    ],
)
def test_invalid_names_report_first_failing_rule(name, message):
    result = validate_bucket_name(name)
    assert not result.valid
    assert message in result.message
    assert result.normalized_name is None


def test_length_checked_before_case():
    assert "between 3 and 63" in validate_bucket_name("AB").message


def test_require_valid_bucket_raises_validation_error():
    assert require_valid_bucket(" contracts ") == "contracts"
    with pytest.raises(ValidationError, match="S3 naming rules"):
        require_valid_bucket("Bad_Name")
