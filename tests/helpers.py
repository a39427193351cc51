import asyncio

from authenta.crypto.file_cipher import encrypt_file
from authenta.storage.repository import ArtifactRepository
from authenta.utils.dataModels import Identity, SourceFile
from authenta.vault.access import Gate


def make_source(name: str = "design.txt", data: bytes = b"rotor blade, revision A") -> SourceFile:
    return SourceFile(name=name, data=data, mime_type="text/plain")


def store_artifact(repo: ArtifactRepository, owner: Identity, source: SourceFile, gate: Gate | None = None, **kw):
    """Encrypt and persist one artifact. Returns (artifact, encryption result)."""
    encrypted = encrypt_file(source)

    async def run():
        doc_id = await repo.create_artifact(
            owner, encrypted, title=kw.pop("title", "Rotor"), file_type=source.mime_type, gate=gate, **kw
        )
        return await repo.get_artifact(doc_id)

    return asyncio.run(run()), encrypted
