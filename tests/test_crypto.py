import re

import pytest
from hypothesis import given, settings, strategies as st

from authenta.crypto.aead import aead_decrypt, aead_encrypt, generate_key
from authenta.crypto.file_cipher import decrypt_file, encrypt_file
from authenta.crypto.hash import digest, hash_password, verify_fingerprint
from authenta.crypto.text_cipher import DECRYPT_ERROR, decrypt_text, encrypt_text
from authenta.utils.dataModels import SourceFile
from authenta.utils.errors import CorruptOrWrongKey

HEX64 = re.compile(r"^[0-9a-f]{64}$")


# digest

def test_digest_known_vectors():
    assert digest(b"") == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
    assert digest(b"abc") == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"


def test_digest_text_is_utf8():
    assert digest("héllo") == digest("héllo".encode("utf-8"))


@given(st.binary(max_size=2048))
def test_digest_is_stable_lowercase_hex(data):
    first = digest(data)
    assert first == digest(data)
    assert HEX64.match(first)


@given(st.binary(min_size=1, max_size=256), st.data())
def test_digest_changes_on_single_bit_flip(data, picker):
    index = picker.draw(st.integers(min_value=0, max_value=len(data) - 1))
    bit = picker.draw(st.integers(min_value=0, max_value=7))
    flipped = bytearray(data)
    flipped[index] ^= 1 << bit
    assert digest(bytes(flipped)) != digest(data)


def test_hash_password_matches_digest():
    assert hash_password("abc123") == digest(b"abc123")


def test_verify_fingerprint_tolerates_case_and_whitespace():
    fp = digest(b"payload")
    assert verify_fingerprint(b"payload", f"  {fp.upper()}\n")
    assert not verify_fingerprint(b"payload!", fp)
    assert not verify_fingerprint(b"payload", "ü" * 64)


# aead

def test_aead_rejects_malformed_key_and_nonce():
    key = generate_key()
    nonce, ct = aead_encrypt(key, b"data")
    with pytest.raises(CorruptOrWrongKey):
        aead_decrypt(key[:16], nonce, ct)
    with pytest.raises(CorruptOrWrongKey):
        aead_decrypt(key, nonce[:8], ct)


# file cipher

@settings(max_examples=30)
@given(st.binary(max_size=4096))
def test_file_roundtrip(data):
    result = encrypt_file(SourceFile(name="f.bin", data=data))
    assert decrypt_file(result.ciphertext, result.key, result.iv) == data
    assert result.fingerprint == digest(data)
    assert result.original_size == len(data)


def test_fresh_key_and_iv_per_encryption():
    source = SourceFile(name="ten.bin", data=b"0123456789")
    first = encrypt_file(source)
    second = encrypt_file(source)
    assert first.key != second.key
    assert first.iv != second.iv
    assert first.fingerprint == second.fingerprint
    assert len(first.key) == 64 and len(first.iv) == 24


def test_ciphertext_carries_tag():
    result = encrypt_file(SourceFile(name="a", data=b"abcdef"))
    assert len(result.ciphertext) == 6 + 16


def test_tampered_ciphertext_fails_closed():
    result = encrypt_file(SourceFile(name="a", data=b"top secret formula"))
    tampered = bytearray(result.ciphertext)
    tampered[0] ^= 0x01
    with pytest.raises(CorruptOrWrongKey):
        decrypt_file(bytes(tampered), result.key, result.iv)


def test_wrong_key_fails_closed():
    result = encrypt_file(SourceFile(name="a", data=b"top secret formula"))
    other = encrypt_file(SourceFile(name="b", data=b"x"))
    with pytest.raises(CorruptOrWrongKey):
        decrypt_file(result.ciphertext, other.key, result.iv)


def test_non_hex_key_is_rejected():
    result = encrypt_file(SourceFile(name="a", data=b"abc"))
    with pytest.raises(CorruptOrWrongKey):
        decrypt_file(result.ciphertext, "not-hex", result.iv)


# text cipher

def test_text_payload_layout():
    payload = encrypt_text("secret", "pw1")
    assert re.fullmatch(r"[0-9a-f]+", payload)
    assert len(payload) == 32 + 24 + 2 * (len("secret") + 16)


def test_text_roundtrip_and_repeated_decrypt():
    payload = encrypt_text("p@ss wörd", "master")
    assert decrypt_text(payload, "master") == "p@ss wörd"
    assert decrypt_text(payload, "master") == "p@ss wörd"


@settings(max_examples=5, deadline=None)
@given(st.text(max_size=64), st.text(min_size=1, max_size=32))
def test_text_roundtrip_property(text, password):
    assert decrypt_text(encrypt_text(text, password), password) == text


def test_same_text_encrypts_differently():
    assert encrypt_text("secret", "pw") != encrypt_text("secret", "pw")


def test_wrong_password_fails_generically():
    payload = encrypt_text("secret", "pw1")
    with pytest.raises(CorruptOrWrongKey) as exc:
        decrypt_text(payload, "pw2")
    assert str(exc.value) == DECRYPT_ERROR


@pytest.mark.parametrize("payload", [
    "",
    "zz" * 40,
    "00" * 28,
    "ab" * 16 + "cd" * 12 + "ef" * 4,
])
def test_malformed_payloads_fail_with_same_message(payload):
    with pytest.raises(CorruptOrWrongKey) as exc:
        decrypt_text(payload, "pw")
    assert str(exc.value) == DECRYPT_ERROR


def test_tampered_text_payload_fails():
    payload = encrypt_text("secret", "pw")
    last = "0" if payload[-1] != "0" else "1"
    with pytest.raises(CorruptOrWrongKey):
        decrypt_text(payload[:-1] + last, "pw")
