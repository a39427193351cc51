"""One-shot file encryption.

Every call draws a fresh AES-256 key and a fresh 96-bit IV. The key is handed
back to the caller as hex for one-time display and is never persisted; only
the IV and the plaintext fingerprint travel with the artifact metadata.
"""
import logging

from authenta.crypto.aead import aead_decrypt, aead_encrypt, generate_key
from authenta.crypto.hash import digest
from authenta.utils.dataModels import EncryptedFileResult, SourceFile
from authenta.utils.errors import CorruptOrWrongKey
from authenta.utils.helper import rel_time_iso

logger = logging.getLogger(__name__)


def encrypt_file(source: SourceFile) -> EncryptedFileResult:
    plaintext = source.data

    fingerprint = digest(plaintext)
    file_key = generate_key()
    iv, ct = aead_encrypt(file_key, plaintext)

    logger.debug("Encrypted %s (%d bytes)", source.name, len(plaintext))
    return EncryptedFileResult(
        ciphertext=ct,
        key=file_key.hex(),
        iv=iv.hex(),
        fingerprint=fingerprint,
        file_name=source.name,
        original_size=len(plaintext),
        timestamp=rel_time_iso(),
    )


def decrypt_file(ciphertext: bytes, key_hex: str, iv_hex: str) -> bytes:
    try:
        key = bytes.fromhex(key_hex.strip())
        iv = bytes.fromhex(iv_hex.strip())
    except ValueError as e:
        raise CorruptOrWrongKey("Key and IV must be hex encoded") from e
    return aead_decrypt(key, iv, ciphertext)
