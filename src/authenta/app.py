#!/usr/bin/env python3
"""
Authenta – client-side encrypted, fingerprinted and versioned IP vault

Every file is encrypted before it leaves the machine. The document store only
ever sees ciphertext, the IV and the plaintext fingerprint; the per-file key is
printed once and never stored.

Artifact record (collection "inventions"):
    fileUrl   : data:application/octet-stream;base64,<AES-256-GCM ciphertext>
    hash      : SHA-256 of the plaintext (the "fingerprint")
    iv        : 12-byte GCM nonce as 24 hex chars
    accessHash: gate value, SHA-256(password) or the fingerprint itself
    gateKind  : "password" | "self_hash" (absent for open records)
    versions  : archived heads, append-only

Uploads are dual-copy: a Private Master gated by the owner's password (when
one is given) and a Shared Copy gated by its own fingerprint, so anyone
holding the fingerprint can open it.

Password store payload (collection "vault_items"):
    salt(16) || iv(12) || ciphertext, hex encoded
    key = PBKDF2-HMAC-SHA256(session master password, salt, 100k iterations)

Commands:
  hash / verify          Fingerprint text or files, check a fingerprint
  encrypt / decrypt      Local one-shot file encryption
  upload <paths...>      Encrypt and store files as dual-copy artifacts
  ls                     List the owner's artifacts
  open <id>              Unlock with password or fingerprint, optionally extract
  history / promote / revert
                         Version history: archive-then-overwrite, never delete
  rm <id>                Delete an artifact
  export-hash <id>       Write a fingerprint report
  passwords add|ls|reveal|rm
                         Credential vault under a session master password
  doctor                 Diagnostic write to the document store

Security choices:
  - AEAD: AES-256-GCM via cryptography.hazmat
  - Fingerprints and password gates: SHA-256
  - Password store KDF: PBKDF2-HMAC-SHA256, 100,000 iterations
"""
from __future__ import annotations

import logging
import sys

from authenta.ui.cli import build_parser
from authenta.utils.config import get_settings
from authenta.utils.errors import VaultError


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(
        level=get_settings().LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        args.func(args)
    except (VaultError, ValueError) as e:
        print(f"[!] {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
