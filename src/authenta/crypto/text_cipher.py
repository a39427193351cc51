"""Password-based encryption for short secrets.

Payload layout, as one hex string:

    salt       : 16 bytes -> 32 hex chars
    iv         : 12 bytes -> 24 hex chars
    ciphertext : remaining hex (AES-256-GCM, tag included)

The key is PBKDF2-HMAC-SHA256(master password, salt). Nothing else is needed
to decrypt later, and the master password itself is never stored.
"""
from authenta.crypto.aead import aead_decrypt, aead_encrypt, random_bytes
from authenta.crypto.hash import derive_text_key
from authenta.utils.dataModels import IV_BYTES, IV_HEX_LEN, SALT_BYTES, SALT_HEX_LEN
from authenta.utils.errors import CorruptOrWrongKey

DECRYPT_ERROR = "Incorrect password or corrupted data"


def encrypt_text(plaintext: str, master_password: str) -> str:
    salt = random_bytes(SALT_BYTES)
    iv = random_bytes(IV_BYTES)
    key = derive_text_key(master_password, salt)
    _, ct = aead_encrypt(key, plaintext.encode("utf-8"), nonce=iv)
    return salt.hex() + iv.hex() + ct.hex()


def decrypt_text(payload: str, master_password: str) -> str:
    try:
        salt = bytes.fromhex(payload[:SALT_HEX_LEN])
        iv = bytes.fromhex(payload[SALT_HEX_LEN:SALT_HEX_LEN + IV_HEX_LEN])
        ct = bytes.fromhex(payload[SALT_HEX_LEN + IV_HEX_LEN:])
        if len(salt) != SALT_BYTES or len(iv) != IV_BYTES or not ct:
            raise ValueError("truncated payload")
        key = derive_text_key(master_password, salt)
        return aead_decrypt(key, iv, ct).decode("utf-8")
    except (CorruptOrWrongKey, ValueError, TypeError):
        raise CorruptOrWrongKey(DECRYPT_ERROR) from None
