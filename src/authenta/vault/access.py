"""Per-artifact access gates.

A gate is fixed when the artifact is written and is one of:

- no gate: the artifact opens without a prompt;
- password gate: SHA-256 of an owner-chosen password;
- self-hash gate: the artifact's own fingerprint, so anyone who learned the
  fingerprint out of band can open it.

Records written before gates were tagged carry an ``accessHash`` without a
``gateKind``; for those both interpretations are tried.
"""
import logging

from dataclasses import dataclass

from authenta.crypto.file_cipher import decrypt_file
from authenta.crypto.hash import constant_time_equal, hash_password
from authenta.storage.blobs import decode_data_uri
from authenta.utils.dataModels import Artifact, GateKind
from authenta.utils.errors import ArtifactLocked, AuthenticationFailed
from authenta.vault.session import VaultSession

logger = logging.getLogger(__name__)

REJECTED = "Incorrect credentials"


@dataclass(frozen=True)
class Gate:
    kind: GateKind | None
    value: str

    @staticmethod
    def for_password(password: str) -> "Gate":
        return Gate(GateKind.PASSWORD, hash_password(password))

    @staticmethod
    def for_fingerprint(fingerprint: str) -> "Gate":
        return Gate(GateKind.SELF_HASH, fingerprint.lower())

    @staticmethod
    def of(artifact: Artifact) -> "Gate | None":
        if not artifact.access_hash:
            return None
        return Gate(artifact.gate_kind, artifact.access_hash)

    def accepts(self, credential: str) -> bool:
        by_password = constant_time_equal(hash_password(credential), self.value)
        by_hash = constant_time_equal(credential.strip().lower(), self.value.lower())
        if self.kind is GateKind.PASSWORD:
            return by_password
        if self.kind is GateKind.SELF_HASH:
            return by_hash
        return by_password or by_hash


def resolve_unlock(session: VaultSession, artifact: Artifact, credential: str | None = None) -> bool:
    """LOCKED -> UNLOCKED for this session, or AuthenticationFailed."""
    if session.is_unlocked(artifact.id):
        return True

    gate = Gate.of(artifact)
    if gate is not None:
        if credential is None or not gate.accepts(credential):
            logger.info("Unlock rejected for artifact %s", artifact.id)
            raise AuthenticationFailed(REJECTED)

    session.mark_unlocked(artifact.id)
    logger.info("Artifact %s unlocked", artifact.id)
    return True


def relock(session: VaultSession, artifact_id: str) -> None:
    session.forget_unlocked(artifact_id)


def open_artifact(session: VaultSession, artifact: Artifact, key_hex: str) -> bytes:
    """Decrypt the head payload of an artifact unlocked in this session."""
    if not session.is_unlocked(artifact.id):
        raise ArtifactLocked(f"Artifact {artifact.id} is locked")
    _, ciphertext = decode_data_uri(artifact.file_url)
    return decrypt_file(ciphertext, key_hex, artifact.iv)
