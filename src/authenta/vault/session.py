import logging

from typing import Dict, Optional, Set

from authenta.utils.config import get_settings
from authenta.utils.dataModels import Identity
from authenta.utils.errors import VaultLocked

logger = logging.getLogger(__name__)


class VaultSession:
    """Everything a signed-in user has unlocked during one session.

    Holds the set of unlocked artifact ids, decrypted credential-vault secrets
    and the session master password. None of it is ever persisted: closing the
    session (or dropping the object) returns every artifact to LOCKED.
    """

    def __init__(self, identity: Identity):
        self.identity = identity
        self._unlocked: Set[str] = set()
        self._revealed: Dict[str, str] = {}
        self._master_password: Optional[str] = None

    def __enter__(self) -> "VaultSession":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # artifacts

    def is_unlocked(self, artifact_id: str) -> bool:
        return artifact_id in self._unlocked

    def mark_unlocked(self, artifact_id: str) -> None:
        self._unlocked.add(artifact_id)

    def forget_unlocked(self, artifact_id: str) -> None:
        self._unlocked.discard(artifact_id)

    # credential vault

    @property
    def vault_unlocked(self) -> bool:
        return self._master_password is not None

    def unlock_vault(self, master_password: str) -> None:
        minimum = get_settings().MIN_MASTER_PASSWORD_LENGTH
        if len(master_password) < minimum:
            raise ValueError(f"Master password must be at least {minimum} characters")
        self._master_password = master_password
        logger.info("Credential vault unlocked for %s", self.identity.uid)

    def lock_vault(self) -> None:
        self._master_password = None
        self._revealed.clear()
        logger.info("Credential vault locked for %s", self.identity.uid)

    @property
    def master_password(self) -> str:
        if self._master_password is None:
            raise VaultLocked("Unlock the credential vault with a master password first")
        return self._master_password

    def remember_secret(self, item_id: str, secret: str) -> None:
        self._revealed[item_id] = secret

    def forget_secret(self, item_id: str) -> None:
        self._revealed.pop(item_id, None)

    def revealed_secret(self, item_id: str) -> Optional[str]:
        return self._revealed.get(item_id)

    def close(self) -> None:
        self.lock_vault()
        self._unlocked.clear()
