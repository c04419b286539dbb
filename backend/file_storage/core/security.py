"""HMAC-signed preview tokens for the local storage backend (stand-in for S3 presigned URLs)."""
import base64
import binascii
import hashlib
import hmac
import time

from file_storage.core.config import get_settings


def _b64(value: str) -> str:
    return base64.urlsafe_b64encode(value.encode()).decode().rstrip("=")


def _unb64(value: str) -> str:
    padded = value + "=" * (-len(value) % 4)
    return base64.urlsafe_b64decode(padded.encode()).decode()


def _sign(message: str) -> str:
    return hmac.new(
        get_settings().secret_key.encode(),
        message.encode(),
        hashlib.sha256,
    ).hexdigest()


def create_preview_token(bucket_name: str, object_key: str, expire_seconds: int) -> str:
    """Token binding bucket, key and an absolute expiry: <b64 bucket>.<b64 key>.<expiry>.<sig>."""
    expiry_ts = int(time.time()) + expire_seconds
    message = f"{_b64(bucket_name)}.{_b64(object_key)}.{expiry_ts}"
    return f"{message}.{_sign(message)}"


def verify_preview_token(token: str) -> tuple[str, str] | None:
    """Return (bucket_name, object_key) if the token is authentic and unexpired; else None."""
    try:
        parts = token.split(".")
        if len(parts) != 4:
            return None
        b_bucket, b_key, expiry, sig = parts
        message = f"{b_bucket}.{b_key}.{expiry}"
        if not hmac.compare_digest(sig, _sign(message)):
            return None
        if time.time() > int(expiry):
            return None
        return _unb64(b_bucket), _unb64(b_key)
    except (ValueError, TypeError, binascii.Error, UnicodeDecodeError):
        return None
