"""Redact sensitive data from structured logs. Never log encryption keys, tokens, or secrets."""
import re
from typing import Any

# Keys (case-insensitive substring match) that must be redacted in dicts
REDACT_KEYS = frozenset({
    "password", "token", "secret", "authorization", "cookie",
    "api_key", "private_key", "public_key", "encryption_key", "decryption_key",
    "privatekey", "publickey",
})


def _redact_key(key: str) -> bool:
    k = key.lower()
    return any(r in k for r in REDACT_KEYS)


def redact_for_log(obj: Any) -> Any:
    """Return a copy of obj safe for logging: sensitive keys replaced with '[REDACTED]'."""
    if obj is None:
        return None
    if isinstance(obj, dict):
        return {
            k: "[REDACTED]" if _redact_key(str(k)) else redact_for_log(v)
            for k, v in obj.items()
        }
    if isinstance(obj, (list, tuple)):
        return type(obj)(redact_for_log(x) for x in obj)
    if isinstance(obj, str) and _looks_like_secret(obj):
        return "[REDACTED]"
    return obj


_B64_KEY = re.compile(r"^[A-Za-z0-9+/]{43}=$")


def _looks_like_secret(s: str) -> bool:
    """Heuristic: a bare 256-bit base64 key, a bearer token, or a signed preview token."""
    if _B64_KEY.match(s):
        return True  # 32 raw bytes, base64 encoded
    if s.lower().startswith("bearer "):
        return True
    return False


_QUERY_SECRET = re.compile(r"(?i)\b(token|privatekey|publickey|x-amz-signature|x-amz-credential)=[^&\s]+")


def redact_query(query: str) -> str:
    """Mask key/token/signature values in a URL query string."""
    return _QUERY_SECRET.sub(lambda m: f"{m.group(1)}=[REDACTED]", query)
