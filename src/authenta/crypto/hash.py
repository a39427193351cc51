import hmac

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from authenta.utils.dataModels import FILE_KEY_BYTES, PBKDF2_ITERATIONS


def sha256_bytes(data: bytes) -> bytes:
    digest = hashes.Hash(hashes.SHA256())
    digest.update(data)
    return digest.finalize()


def digest(data: bytes | str) -> str:
    """Content fingerprint: lowercase hex SHA-256. Text is hashed as UTF-8."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return sha256_bytes(data).hex()


def hash_password(password: str) -> str:
    """Password verifier stored in a password gate. Same digest, different purpose."""
    return digest(password)


def constant_time_equal(a: str, b: str) -> bool:
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


def verify_fingerprint(data: bytes | str, expected: str) -> bool:
    return constant_time_equal(digest(data), expected.strip().lower())


def derive_text_key(password: str, salt: bytes) -> bytes:
    """Key = PBKDF2-HMAC-SHA256(password, salt, 100k) -> 32 bytes"""
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=FILE_KEY_BYTES,
        salt=salt,
        iterations=PBKDF2_ITERATIONS,
    )
    return kdf.derive(password.encode("utf-8"))
