"""Symmetric encryption of stored file bodies.

Envelope layout: 16-byte IV || AES-256-CBC ciphertext (PKCS#7 padding).
There is no authentication tag, so tampering is not detected beyond what
padding checks happen to catch.
"""
from __future__ import annotations

import base64
import binascii
import logging
import os
from abc import ABC, abstractmethod
from collections.abc import Callable

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from file_storage.domain.encryption_envelope import DEFAULT_ALGORITHM
from file_storage.domain.errors import CryptoError, InvalidKeyError, ValidationError

logger = logging.getLogger(__name__)

KEY_LENGTH = 32  # 256 bits
IV_LENGTH = 16  # AES block size
_BLOCK_BITS = algorithms.AES.block_size


class EncryptionProvider(ABC):
    """Encrypt/decrypt whole payloads with a caller-supplied base64 key."""

    @property
    @abstractmethod
    def algorithm_name(self) -> str:
        ...

    @abstractmethod
    def encrypt(self, data: bytes, key: str) -> bytes:
        """Raise InvalidKeyError if key does not decode to 32 bytes."""
        ...

    @abstractmethod
    def decrypt(self, encrypted_data: bytes, key: str) -> bytes:
        """Raise ValidationError if shorter than one IV, CryptoError if it does not decrypt."""
        ...

    @abstractmethod
    def validate_key(self, key: str | None) -> bool:
        ...


def _decode_key(key: str | None) -> bytes | None:
    if key is None or not key.strip():
        return None
    try:
        raw = base64.b64decode(key.strip(), validate=True)
    except (binascii.Error, ValueError):
        return None
    return raw if len(raw) == KEY_LENGTH else None


class AesCbcEncryptionProvider(EncryptionProvider):
    """AES-256-CBC with a fresh random IV per call.

    `iv_source` exists so tests can pin the IV; production uses os.urandom.
    """

    def __init__(self, iv_source: Callable[[int], bytes] = os.urandom) -> None:
        self._iv_source = iv_source

    @property
    def algorithm_name(self) -> str:
        return DEFAULT_ALGORITHM

    def validate_key(self, key: str | None) -> bool:
        return _decode_key(key) is not None

    def _require_key(self, key: str | None) -> bytes:
        raw = _decode_key(key)
        if raw is None:
            raise InvalidKeyError("Encryption key must be base64 encoding of exactly 32 bytes")
        return raw

    def encrypt(self, data: bytes, key: str) -> bytes:
        raw_key = self._require_key(key)
        iv = self._iv_source(IV_LENGTH)
        if len(iv) != IV_LENGTH:
            raise CryptoError(f"IV must be {IV_LENGTH} bytes")
        padder = padding.PKCS7(_BLOCK_BITS).padder()
        padded = padder.update(data) + padder.finalize()
        encryptor = Cipher(algorithms.AES(raw_key), modes.CBC(iv)).encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()
        logger.debug("encrypted payload: plain=%d bytes, stored=%d bytes", len(data), IV_LENGTH + len(ciphertext))
        return iv + ciphertext

    def decrypt(self, encrypted_data: bytes, key: str) -> bytes:
        raw_key = self._require_key(key)
        if encrypted_data is None or len(encrypted_data) < IV_LENGTH:
            raise ValidationError("Encrypted data is too short to contain an IV")
        iv, ciphertext = encrypted_data[:IV_LENGTH], encrypted_data[IV_LENGTH:]
        if not ciphertext or len(ciphertext) % IV_LENGTH:
            raise CryptoError("Encrypted data is corrupt: ciphertext is not a whole number of blocks")
        decryptor = Cipher(algorithms.AES(raw_key), modes.CBC(iv)).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()
        unpadder = padding.PKCS7(_BLOCK_BITS).unpadder()
        try:
            plain = unpadder.update(padded) + unpadder.finalize()
        except ValueError as e:
            # Wrong key and corrupted ciphertext look the same here.
            raise CryptoError("Decryption failed: wrong key or corrupt data") from e
        logger.debug("decrypted payload: stored=%d bytes, plain=%d bytes", len(encrypted_data), len(plain))
        return plain
