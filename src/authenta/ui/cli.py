import argparse

from authenta.utils.core import cmd_decrypt, cmd_encrypt, cmd_hash, cmd_ls, cmd_open, cmd_rm, cmd_upload, cmd_verify
from authenta.utils.maintain import (
    cmd_doctor, cmd_export_hash, cmd_history, cmd_promote, cmd_pw_add, cmd_pw_ls, cmd_pw_reveal, cmd_pw_rm,
    cmd_revert,
)


def _store_args(p: argparse.ArgumentParser, user: bool = True) -> None:
    p.add_argument("--store", help="Path to the JSON document store (default: AUTHENTA_STORE_PATH)")
    if user:
        p.add_argument("--user", required=True, help="Owner uid from the identity provider")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Authenta: encrypted, fingerprinted, versioned IP vault")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_hash = sub.add_parser("hash", help="SHA-256 fingerprint of a file or text")
    p_hash.add_argument("path", nargs="?", help="File to fingerprint")
    p_hash.add_argument("--text", help="Fingerprint this text instead of a file")
    p_hash.set_defaults(func=cmd_hash)

    p_ver = sub.add_parser("verify", help="Check a file or text against a fingerprint")
    p_ver.add_argument("hash", help="Expected SHA-256 hex digest")
    p_ver.add_argument("path", nargs="?", help="File to check")
    p_ver.add_argument("--text", help="Check this text instead of a file")
    p_ver.set_defaults(func=cmd_verify)

    p_enc = sub.add_parser("encrypt", help="Encrypt a file locally with a fresh key")
    p_enc.add_argument("path", help="Plaintext file")
    p_enc.add_argument("--out", help="Ciphertext output path (default: <path>.enc)")
    p_enc.set_defaults(func=cmd_encrypt)

    p_dec = sub.add_parser("decrypt", help="Decrypt a locally encrypted file")
    p_dec.add_argument("path", help="Ciphertext file")
    p_dec.add_argument("out", help="Plaintext output path")
    p_dec.add_argument("--key", required=True, help="Hex key shown at encryption time")
    p_dec.add_argument("--iv", required=True, help="Hex IV")
    p_dec.set_defaults(func=cmd_decrypt)

    p_up = sub.add_parser("upload", help="Encrypt and store files as dual-copy artifacts")
    _store_args(p_up)
    p_up.add_argument("paths", nargs="+", help="Files to upload")
    p_up.add_argument("--title", required=True)
    p_up.add_argument("--description", default="")
    p_up.add_argument("--license")
    p_up.add_argument("--password", help="Owner password for a Private Master copy")
    p_up.set_defaults(func=cmd_upload)

    p_ls = sub.add_parser("ls", help="List the owner's artifacts")
    _store_args(p_ls)
    p_ls.set_defaults(func=cmd_ls)

    p_open = sub.add_parser("open", help="Unlock an artifact and optionally extract it")
    _store_args(p_open)
    p_open.add_argument("id", help="Artifact id")
    p_open.add_argument("--credential", help="Password or fingerprint for gated artifacts")
    p_open.add_argument("--key", help="Hex file key; extracts the head when given")
    p_open.add_argument("--out", help="Output path (default: original file name)")
    p_open.set_defaults(func=cmd_open)

    p_hist = sub.add_parser("history", help="Show an artifact's version history")
    _store_args(p_hist)
    p_hist.add_argument("id", help="Artifact id")
    p_hist.set_defaults(func=cmd_history)

    p_pro = sub.add_parser("promote", help="Upload a new version and archive the current head")
    _store_args(p_pro)
    p_pro.add_argument("id", help="Artifact id")
    p_pro.add_argument("path", help="New file")
    p_pro.set_defaults(func=cmd_promote)

    p_rev = sub.add_parser("revert", help="Restore an archived version as head")
    _store_args(p_rev)
    p_rev.add_argument("id", help="Artifact id")
    p_rev.add_argument("version", type=int, help="Version number from 'history'")
    p_rev.set_defaults(func=cmd_revert)

    p_rm = sub.add_parser("rm", help="Delete an artifact")
    _store_args(p_rm)
    p_rm.add_argument("id", help="Artifact id")
    p_rm.set_defaults(func=cmd_rm)

    p_exp = sub.add_parser("export-hash", help="Write a fingerprint report for an artifact")
    _store_args(p_exp)
    p_exp.add_argument("id", help="Artifact id")
    p_exp.add_argument("--out-dir", default=".")
    p_exp.set_defaults(func=cmd_export_hash)

    p_doc = sub.add_parser("doctor", help="Diagnostic write to the document store")
    _store_args(p_doc, user=False)
    p_doc.set_defaults(func=cmd_doctor)

    p_pw = sub.add_parser("passwords", help="Credential vault")
    pw_sub = p_pw.add_subparsers(dest="pw_cmd", required=True)

    p_pw_add = pw_sub.add_parser("add", help="Store a password for an artifact")
    _store_args(p_pw_add)
    p_pw_add.add_argument("id", help="Artifact id")
    p_pw_add.add_argument("--password", required=True, help="Password to store")
    p_pw_add.add_argument("--master", required=True, help="Session master password")
    p_pw_add.set_defaults(func=cmd_pw_add)

    p_pw_ls = pw_sub.add_parser("ls", help="List stored passwords")
    _store_args(p_pw_ls)
    p_pw_ls.add_argument("--master", required=True)
    p_pw_ls.set_defaults(func=cmd_pw_ls)

    p_pw_rev = pw_sub.add_parser("reveal", help="Decrypt a stored password")
    _store_args(p_pw_rev)
    p_pw_rev.add_argument("item", help="Vault item id")
    p_pw_rev.add_argument("--master", required=True)
    p_pw_rev.set_defaults(func=cmd_pw_reveal)

    p_pw_rm = pw_sub.add_parser("rm", help="Remove a stored password")
    _store_args(p_pw_rm)
    p_pw_rm.add_argument("item", help="Vault item id")
    p_pw_rm.add_argument("--master", required=True)
    p_pw_rm.set_defaults(func=cmd_pw_rm)

    return p
