"""AES-256-CBC provider: envelope layout, key validation, failure modes."""
import base64

import pytest
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from file_storage.domain.errors import CryptoError, InvalidKeyError, ValidationError
from file_storage.services.encryption import IV_LENGTH, AesCbcEncryptionProvider

from conftest import OTHER_KEY, TEST_KEY


def test_roundtrip_and_layout():
    provider = AesCbcEncryptionProvider()
    data = b"hello world"
    stored = provider.encrypt(data, TEST_KEY)
    # IV + one padded block
    assert len(stored) == IV_LENGTH + 16
    assert provider.decrypt(stored, TEST_KEY) == data


def test_block_aligned_input_gets_full_padding_block():
    provider = AesCbcEncryptionProvider()
    stored = provider.encrypt(b"x" * 16, TEST_KEY)
    assert len(stored) == IV_LENGTH + 32


def test_fresh_iv_per_call():
    provider = AesCbcEncryptionProvider()
    assert provider.encrypt(b"same", TEST_KEY) != provider.encrypt(b"same", TEST_KEY)


def test_fixed_iv_is_deterministic_and_prefixed():
    iv = bytes(16)
    provider = AesCbcEncryptionProvider(iv_source=lambda n: iv)
    a = provider.encrypt(b"payload", TEST_KEY)
    b = provider.encrypt(b"payload", TEST_KEY)
    assert a == b
    assert a[:IV_LENGTH] == iv


def test_matches_nist_cbc_aes256_vector():
    # NIST SP 800-38A, F.2.5 CBC-AES256.Encrypt
    key = bytes.fromhex("603deb1015ca71be2b73aef0857d77811f352c073b6108d72d9810a30914dff4")
    iv = bytes.fromhex("000102030405060708090a0b0c0d0e0f")
    plaintext = bytes.fromhex(
        "6bc1bee22e409f96e93d7e117393172a"
        "ae2d8a571e03ac9c9eb76fac45af8e51"
        "30c81c46a35ce411e5fbc1191a0a52ef"
        "f69f2445df4f9b17ad2b417be66c3710"
    )
    expected = (
        "f58c4c04d6e5f1ba779eabfb5f7bfbd6"
        "9cfc4e967edb808d679f777bc6702c7d"
        "39f23369a9d9bacfa530e26304231461"
        "b2eb05e2c39be9fcda6c19078c6a9d1b"
    )
    provider = AesCbcEncryptionProvider(iv_source=lambda n: iv)
    stored = provider.encrypt(plaintext, base64.b64encode(key).decode())

    assert stored[:IV_LENGTH] == iv
    assert stored[IV_LENGTH:IV_LENGTH + 64].hex() == expected
    # Block-aligned input gets one full PKCS#7 block (16 x 0x10), chained off the last ciphertext block.
    assert len(stored) == IV_LENGTH + 64 + 16
    ecb = Cipher(algorithms.AES(key), modes.ECB()).decryptor()
    last_plain = ecb.update(stored[-16:]) + ecb.finalize()
    chained = bytes(a ^ b for a, b in zip(last_plain, stored[-32:-16]))
    assert chained == b"\x10" * 16


def test_algorithm_name():
    assert AesCbcEncryptionProvider().algorithm_name == "AES-256-CBC"


@pytest.mark.parametrize(
    "key,valid",
    [
        (TEST_KEY, True),
        (None, False),
        ("", False),
        ("not base64!!", False),
        (base64.b64encode(bytes(16)).decode(), False),
        (base64.b64encode(bytes(33)).decode(), False),
    ],
)
def test_validate_key(key, valid):
    assert AesCbcEncryptionProvider().validate_key(key) is valid


def test_encrypt_with_bad_key_raises():
    with pytest.raises(InvalidKeyError):
        AesCbcEncryptionProvider().encrypt(b"x", "short")


def test_decrypt_too_short_raises_validation_error():
    with pytest.raises(ValidationError, match="too short"):
        AesCbcEncryptionProvider().decrypt(b"\x00" * 15, TEST_KEY)


def test_decrypt_iv_only_raises_crypto_error():
    with pytest.raises(CryptoError, match="corrupt"):
        AesCbcEncryptionProvider().decrypt(b"\x00" * 16, TEST_KEY)


def test_decrypt_partial_block_raises_crypto_error():
    with pytest.raises(CryptoError):
        AesCbcEncryptionProvider().decrypt(b"\x00" * 20, TEST_KEY)


def test_wrong_key_never_returns_plaintext():
    provider = AesCbcEncryptionProvider(iv_source=lambda n: bytes(range(16)))
    data = b"confidential contract text"
    stored = provider.encrypt(data, TEST_KEY)
    try:
        result = provider.decrypt(stored, OTHER_KEY)
    except CryptoError:
        return
    # Padding can pass by chance; the bytes still must not match.
    assert result != data
