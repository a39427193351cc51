"""Password store: per-artifact passwords encrypted under the session master password."""
import asyncio
import logging

from typing import List

from authenta.crypto.text_cipher import decrypt_text, encrypt_text
from authenta.storage.repository import ArtifactRepository, VaultItemRepository
from authenta.utils.dataModels import VaultItem
from authenta.utils.helper import rel_time_iso
from authenta.vault.session import VaultSession

logger = logging.getLogger(__name__)


class CredentialVault:
    def __init__(self, items: VaultItemRepository, artifacts: ArtifactRepository, session: VaultSession):
        self.items = items
        self.artifacts = artifacts
        self.session = session

    async def add_entry(self, artifact_id: str, password: str) -> VaultItem:
        master = self.session.master_password
        artifact = await self.artifacts.get_artifact(artifact_id)
        payload = await asyncio.to_thread(encrypt_text, password, master)

        item = VaultItem(
            id="",
            user_id=self.session.identity.uid,
            file_id=artifact.id,
            file_name=artifact.file_name,
            file_hash=artifact.hash,
            encrypted_password=payload,
            created_at=rel_time_iso(),
        )
        saved = await self.items.add_item(item)
        logger.info("Stored password for artifact %s as vault item %s", artifact_id, saved.id)
        return saved

    async def list_entries(self) -> List[VaultItem]:
        return await self.items.list_for_owner(self.session.identity.uid)

    async def reveal(self, item: VaultItem) -> str:
        cached = self.session.revealed_secret(item.id)
        if cached is not None:
            return cached
        secret = await asyncio.to_thread(decrypt_text, item.encrypted_password, self.session.master_password)
        self.session.remember_secret(item.id, secret)
        return secret

    def hide(self, item_id: str) -> None:
        self.session.forget_secret(item_id)

    async def delete_entry(self, item_id: str) -> None:
        await self.items.delete_item(item_id)
        self.session.forget_secret(item_id)
        logger.info("Removed vault item %s", item_id)
