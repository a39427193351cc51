import os

from cryptography.exceptions import InvalidTag, UnsupportedAlgorithm
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from typing import Tuple

from authenta.utils.dataModels import FILE_KEY_BYTES, IV_BYTES
from authenta.utils.errors import CorruptOrWrongKey, CryptoUnavailable


def random_bytes(n: int) -> bytes:
    try:
        return os.urandom(n)
    except NotImplementedError as e:
        raise CryptoUnavailable("No secure random source available") from e


def generate_key() -> bytes:
    return random_bytes(FILE_KEY_BYTES)


def _cipher(key: bytes) -> AESGCM:
    try:
        return AESGCM(key)
    except UnsupportedAlgorithm as e:
        raise CryptoUnavailable("AES-GCM is not supported by the crypto backend") from e


def aead_encrypt(key: bytes, plaintext: bytes, nonce: bytes | None = None, aad: bytes | None = None) -> Tuple[bytes, bytes]:
    if nonce is None:
        nonce = random_bytes(IV_BYTES)
    ct = _cipher(key).encrypt(nonce, plaintext, aad)
    return nonce, ct


def aead_decrypt(key: bytes, nonce: bytes, ct: bytes, aad: bytes | None = None) -> bytes:
    if len(key) != FILE_KEY_BYTES or len(nonce) != IV_BYTES:
        raise CorruptOrWrongKey("Malformed key or IV")
    try:
        return _cipher(key).decrypt(nonce, ct, aad)
    except InvalidTag as e:
        raise CorruptOrWrongKey("Decryption failed: wrong key or corrupted data") from e
