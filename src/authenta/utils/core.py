import argparse
import asyncio
import sys

from pathlib import Path

from authenta.crypto.file_cipher import decrypt_file, encrypt_file
from authenta.crypto.hash import digest, verify_fingerprint
from authenta.storage.repository import ArtifactRepository
from authenta.storage.vault import JsonFileDocumentStore
from authenta.utils.config import get_settings
from authenta.utils.dataModels import Identity, SourceFile, UploadMetadata, UploadStatus
from authenta.vault.access import open_artifact, resolve_unlock
from authenta.vault.session import VaultSession
from authenta.vault.upload import UploadOrchestrator, UploadQueue


def open_store(args: argparse.Namespace) -> JsonFileDocumentStore:
    return JsonFileDocumentStore(args.store or get_settings().STORE_PATH)


def identity_of(args: argparse.Namespace) -> Identity:
    return Identity(uid=args.user, email=getattr(args, "email", None))


def _input_data(args: argparse.Namespace) -> bytes | str:
    if args.text is not None:
        return args.text
    if not args.path or not Path(args.path).is_file():
        print("[!] Give a file path or --text")
        sys.exit(1)
    return Path(args.path).read_bytes()


def cmd_hash(args: argparse.Namespace) -> None:
    data = _input_data(args)
    print(digest(data))


def cmd_verify(args: argparse.Namespace) -> None:
    data = _input_data(args)
    if verify_fingerprint(data, args.hash):
        print("[+] Match: content is unchanged")
    else:
        print("[!] Mismatch: content differs from the fingerprint")
        sys.exit(1)


def cmd_encrypt(args: argparse.Namespace) -> None:
    src = Path(args.path)
    if not src.is_file():
        print(f"[!] Not a file: {src}")
        sys.exit(1)
    result = encrypt_file(SourceFile.from_path(src))
    out = Path(args.out) if args.out else src.with_name(src.name + ".enc")
    out.write_bytes(result.ciphertext)
    print(f"[+] Encrypted {src.name} -> {out}")
    print(f"key\t{result.key}")
    print(f"iv\t{result.iv}")
    print(f"sha256\t{result.fingerprint}")


def cmd_decrypt(args: argparse.Namespace) -> None:
    plaintext = decrypt_file(Path(args.path).read_bytes(), args.key, args.iv)
    Path(args.out).write_bytes(plaintext)
    print(f"[+] Decrypted {args.path} -> {args.out}")


def cmd_upload(args: argparse.Namespace) -> None:
    paths = [Path(p) for p in args.paths]
    missing = [p for p in paths if not p.is_file()]
    if missing:
        print(f"[!] Not a file: {missing[0]}")
        sys.exit(1)

    repo = ArtifactRepository(open_store(args))
    queue = UploadQueue(SourceFile.from_path(p) for p in paths)
    orchestrator = UploadOrchestrator(repo, identity_of(args))
    metadata = UploadMetadata(title=args.title, description=args.description, license=args.license)
    asyncio.run(orchestrator.process_batch(queue, metadata, owner_password=args.password))

    failed = False
    for item in queue:
        if item.status is UploadStatus.SUCCESS:
            print(f"[+] {item.file.name}\tids={','.join(item.artifact_ids)}")
            print(f"    key\t{item.result_key}")
            print(f"    sha256\t{item.result_hash}")
        else:
            failed = True
            print(f"[!] {item.file.name}\t{item.error_msg}")
    if failed:
        sys.exit(1)


def cmd_ls(args: argparse.Namespace) -> None:
    repo = ArtifactRepository(open_store(args))
    artifacts = asyncio.run(repo.list_for_owner(args.user))
    if not artifacts:
        print("(empty)")
        return
    for a in artifacts:
        gate = a.gate_kind.value if a.gate_kind else ("legacy" if a.access_hash else "open")
        print(f"{a.id}\t{a.title}\t{a.file_name}\t{a.file_size} bytes\t{gate}\t{len(a.versions)} versions")


def cmd_open(args: argparse.Namespace) -> None:
    repo = ArtifactRepository(open_store(args))
    artifact = asyncio.run(repo.get_artifact(args.id))

    with VaultSession(identity_of(args)) as session:
        resolve_unlock(session, artifact, args.credential)
        print(f"[+] Unlocked {artifact.title}")
        print(f"sha256\t{artifact.hash}")
        print(f"iv\t{artifact.iv}")
        if not args.key:
            return
        plaintext = open_artifact(session, artifact, args.key)

    out = Path(args.out) if args.out else Path(artifact.file_name)
    out.write_bytes(plaintext)
    print(f"[+] Extracted {artifact.file_name} -> {out}")
    if verify_fingerprint(plaintext, artifact.hash):
        print("[+] Fingerprint verified")
    else:
        print("[!] Fingerprint mismatch")


def cmd_rm(args: argparse.Namespace) -> None:
    repo = ArtifactRepository(open_store(args))
    asyncio.run(repo.get_artifact(args.id))
    asyncio.run(repo.delete_artifact(args.id))
    print(f"[+] Removed id={args.id}")
