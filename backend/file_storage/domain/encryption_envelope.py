"""Per-file encryption flag and algorithm tag."""
from __future__ import annotations

from dataclasses import dataclass

DEFAULT_ALGORITHM = "AES-256-CBC"


@dataclass(frozen=True)
class EncryptionEnvelope:
    is_encrypted: bool = False
    algorithm: str | None = None

    def __post_init__(self) -> None:
        encrypted = bool(self.is_encrypted)
        object.__setattr__(self, "is_encrypted", encrypted)
        if not encrypted:
            object.__setattr__(self, "algorithm", None)
        elif not self.algorithm or not self.algorithm.strip():
            object.__setattr__(self, "algorithm", DEFAULT_ALGORITHM)

    @classmethod
    def unencrypted(cls) -> EncryptionEnvelope:
        return cls(False, None)

    @classmethod
    def encrypted(cls) -> EncryptionEnvelope:
        return cls(True, DEFAULT_ALGORITHM)

    @classmethod
    def of(cls, is_encrypted: bool | None, algorithm: str | None) -> EncryptionEnvelope:
        """From stored columns; a NULL flag reads as unencrypted."""
        return cls(bool(is_encrypted), algorithm)

    def is_supported_algorithm(self) -> bool:
        return self.algorithm == DEFAULT_ALGORITHM

    @property
    def algorithm_short_name(self) -> str | None:
        """'AES-256-CBC' -> 'aes256cbc'."""
        if not self.is_encrypted or not self.algorithm:
            return None
        return self.algorithm.replace("-", "").lower()
