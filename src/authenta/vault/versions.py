import asyncio
import logging

from typing import Any, Dict, Tuple

from authenta.crypto.file_cipher import encrypt_file
from authenta.storage.blobs import encode_data_uri
from authenta.storage.repository import ArtifactRepository
from authenta.utils.dataModels import Artifact, EncryptedFileResult, GateKind, SourceFile, Version
from authenta.utils.errors import NotFound
from authenta.utils.helper import now_millis, rel_time_iso

logger = logging.getLogger(__name__)


def next_version_number(artifact: Artifact) -> int:
    """Time-based id, strictly above every version already archived."""
    latest = max((v.version_number for v in artifact.versions), default=0)
    return max(now_millis(), latest + 1)


def archive_head(artifact: Artifact) -> Version:
    return artifact.head_as_version(next_version_number(artifact), rel_time_iso())


def _head_fields(artifact: Artifact, *, file_name: str, file_url: str, fingerprint: str, iv: str,
                file_size: int | None, file_type: str | None) -> Dict[str, Any]:
    fields: Dict[str, Any] = {"fileName": file_name, "fileUrl": file_url, "hash": fingerprint, "iv": iv}
    if file_size is not None:
        fields["fileSize"] = file_size
    if file_type is not None:
        fields["fileType"] = file_type
    # a self-hash gate always tracks the current head
    if artifact.gate_kind is GateKind.SELF_HASH:
        fields["accessHash"] = fingerprint
    return fields


async def promote_new_version(
    repository: ArtifactRepository,
    artifact_id: str,
    source: SourceFile,
) -> Tuple[Artifact, EncryptedFileResult]:
    """Encrypt ``source``, archive the current head and make ``source`` the head.

    Returns the updated artifact and the encryption result; its key is the only
    copy and must be shown to the user.
    """
    artifact = await repository.get_artifact(artifact_id)
    encrypted = await asyncio.to_thread(encrypt_file, source)

    archived = archive_head(artifact)
    head = _head_fields(
        artifact,
        file_name=source.name,
        file_url=encode_data_uri(encrypted.ciphertext),
        fingerprint=encrypted.fingerprint,
        iv=encrypted.iv,
        file_size=encrypted.original_size,
        file_type=source.mime_type,
    )

    updated = await repository.replace_head(artifact_id, head, archived)
    logger.info("Artifact %s: promoted %s, archived version %d", artifact_id, source.name, archived.version_number)
    return updated, encrypted


async def revert_to_version(repository: ArtifactRepository, artifact_id: str, version_number: int) -> Artifact:
    """Archive the current head and restore an archived version as head.

    The restored entry stays in the history, so both states remain recoverable.
    """
    artifact = await repository.get_artifact(artifact_id)
    target = artifact.find_version(version_number)
    if target is None:
        raise NotFound(f"Artifact {artifact_id} has no version {version_number}")

    archived = archive_head(artifact)
    head = _head_fields(
        artifact,
        file_name=target.file_name,
        file_url=target.file_url,
        fingerprint=target.hash,
        iv=target.iv,
        file_size=target.file_size,
        file_type=target.file_type,
    )

    updated = await repository.replace_head(artifact_id, head, archived)
    logger.info("Artifact %s: restored version %d, archived version %d", artifact_id, version_number, archived.version_number)
    return updated
