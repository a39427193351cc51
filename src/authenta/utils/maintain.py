import argparse
import asyncio
import sys

from pathlib import Path

from authenta.storage.repository import ArtifactRepository, VaultItemRepository
from authenta.storage.store import check_connection
from authenta.utils.config import get_settings
from authenta.utils.core import identity_of, open_store
from authenta.utils.dataModels import Artifact, SourceFile
from authenta.utils.helper import rel_time_iso
from authenta.vault.credentials import CredentialVault
from authenta.vault.session import VaultSession
from authenta.vault.versions import promote_new_version, revert_to_version


def fingerprint_report(artifact: Artifact) -> str:
    return (
        f"Filename: {artifact.file_name}\n"
        f"SHA-256 Fingerprint: {artifact.hash}\n"
        f"Generated by {get_settings().PROJECT_NAME}\n"
        f"Date: {rel_time_iso()}"
    )


def cmd_history(args: argparse.Namespace) -> None:
    repo = ArtifactRepository(open_store(args))
    artifact = asyncio.run(repo.get_artifact(args.id))
    print(f"head\t{artifact.file_name}\t{artifact.hash}")
    for v in reversed(artifact.versions):
        print(f"{v.version_number}\t{v.file_name}\t{v.hash}\t{v.created_at}")


def cmd_promote(args: argparse.Namespace) -> None:
    src = Path(args.path)
    if not src.is_file():
        print(f"[!] Not a file: {src}")
        sys.exit(1)
    repo = ArtifactRepository(open_store(args))
    artifact, encrypted = asyncio.run(promote_new_version(repo, args.id, SourceFile.from_path(src)))
    print(f"[+] {artifact.file_name} is now the head of id={artifact.id} ({len(artifact.versions)} archived)")
    print(f"key\t{encrypted.key}")
    print(f"sha256\t{encrypted.fingerprint}")


def cmd_revert(args: argparse.Namespace) -> None:
    repo = ArtifactRepository(open_store(args))
    artifact = asyncio.run(revert_to_version(repo, args.id, args.version))
    print(f"[+] Restored {artifact.file_name} as head of id={artifact.id} ({len(artifact.versions)} archived)")


def cmd_export_hash(args: argparse.Namespace) -> None:
    repo = ArtifactRepository(open_store(args))
    artifact = asyncio.run(repo.get_artifact(args.id))
    out = Path(args.out_dir) / f"{artifact.file_name}.hash.txt"
    out.write_text(fingerprint_report(artifact), encoding="utf-8")
    print(f"[+] Fingerprint written to {out}")


def cmd_doctor(args: argparse.Namespace) -> None:
    ok, message = asyncio.run(check_connection(open_store(args)))
    print(("[+] " if ok else "[!] ") + message)
    if not ok:
        sys.exit(1)


def _credential_vault(args: argparse.Namespace, session: VaultSession) -> CredentialVault:
    store = open_store(args)
    session.unlock_vault(args.master)
    return CredentialVault(VaultItemRepository(store), ArtifactRepository(store), session)


def cmd_pw_add(args: argparse.Namespace) -> None:
    with VaultSession(identity_of(args)) as session:
        vault = _credential_vault(args, session)
        item = asyncio.run(vault.add_entry(args.id, args.password))
    print(f"[+] Password stored as vault item {item.id}")


def cmd_pw_ls(args: argparse.Namespace) -> None:
    with VaultSession(identity_of(args)) as session:
        vault = _credential_vault(args, session)
        items = asyncio.run(vault.list_entries())
    if not items:
        print("(empty)")
        return
    for item in items:
        print(f"{item.id}\t{item.file_name}\t{item.file_hash}")


def cmd_pw_reveal(args: argparse.Namespace) -> None:
    with VaultSession(identity_of(args)) as session:
        vault = _credential_vault(args, session)

        async def reveal() -> str:
            return await vault.reveal(await vault.items.get_item(args.item))

        print(asyncio.run(reveal()))


def cmd_pw_rm(args: argparse.Namespace) -> None:
    with VaultSession(identity_of(args)) as session:
        vault = _credential_vault(args, session)
        asyncio.run(vault.delete_entry(args.item))
    print(f"[+] Removed vault item {args.item}")
