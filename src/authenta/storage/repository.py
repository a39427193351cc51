"""Typed read/write boundary over the document store.

Documents coming back from the store are validated into ``Artifact`` and
``VaultItem`` records here; nothing past this module handles raw dicts.
"""
import logging

from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from authenta.storage.blobs import encode_data_uri
from authenta.storage.store import DocumentStore
from authenta.utils.config import get_settings
from authenta.utils.dataModels import Artifact, EncryptedFileResult, Identity, VaultItem, Version
from authenta.utils.errors import InvalidRecord, NotFound
from authenta.utils.helper import rel_time_iso

if TYPE_CHECKING:
    from authenta.vault.access import Gate

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]


def _newest_first(records: List[Any]) -> List[Any]:
    return sorted(records, key=lambda r: r.created_at or "", reverse=True)


class ArtifactRepository:
    def __init__(self, store: DocumentStore, collection: str | None = None):
        self.store = store
        self.collection = collection or get_settings().INVENTIONS_COLLECTION

    @staticmethod
    def parse(doc: Dict[str, Any]) -> Artifact:
        try:
            return Artifact.model_validate(doc)
        except ValidationError as e:
            raise InvalidRecord(f"Artifact {doc.get('id')!r} does not match the expected shape: {e}") from e

    async def create_artifact(
        self,
        owner: Identity,
        encrypted: EncryptedFileResult,
        *,
        title: str,
        description: str = "",
        license: str | None = None,
        file_type: str | None = None,
        gate: Optional["Gate"] = None,
        on_progress: ProgressCallback | None = None,
    ) -> str:
        """Persist one artifact. ``on_progress`` receives acknowledged percentages (10, 50, 100)."""
        if on_progress:
            on_progress(10)
        payload = encode_data_uri(encrypted.ciphertext)
        if on_progress:
            on_progress(50)

        now = rel_time_iso()
        record = Artifact(
            id="",
            user_id=owner.uid,
            title=title,
            description=description,
            file_name=encrypted.file_name,
            file_size=encrypted.original_size,
            file_type=file_type,
            file_url=payload,
            hash=encrypted.fingerprint,
            iv=encrypted.iv,
            license=license,
            access_hash=gate.value if gate else None,
            gate_kind=gate.kind if gate else None,
            created_at=now,
            updated_at=now,
        )
        doc_id = await self.store.create(self.collection, record.to_document())
        if on_progress:
            on_progress(100)
        logger.info("Saved artifact %s (%s)", doc_id, title)
        return doc_id

    async def get_artifact(self, artifact_id: str) -> Artifact:
        doc = await self.store.get(self.collection, artifact_id)
        if doc is None:
            raise NotFound(f"Artifact {artifact_id} not found")
        return self.parse(doc)

    async def list_for_owner(self, user_id: str) -> List[Artifact]:
        docs = await self.store.query(self.collection, "userId", user_id)
        return _newest_first([self.parse(d) for d in docs])

    async def list_public(self) -> List[Artifact]:
        docs = await self.store.query(self.collection, "isPublic", True)
        return _newest_first([self.parse(d) for d in docs])

    async def delete_artifact(self, artifact_id: str) -> None:
        await self.store.delete(self.collection, artifact_id)
        logger.info("Deleted artifact %s", artifact_id)

    async def replace_head(self, artifact_id: str, head: Dict[str, Any], archived: Version) -> Artifact:
        """Archive-then-overwrite as a single store update."""
        fields = dict(head, updatedAt=rel_time_iso())
        await self.store.update(
            self.collection,
            artifact_id,
            fields,
            array_union={"versions": [archived.to_document()]},
        )
        return await self.get_artifact(artifact_id)


class VaultItemRepository:
    def __init__(self, store: DocumentStore, collection: str | None = None):
        self.store = store
        self.collection = collection or get_settings().VAULT_ITEMS_COLLECTION

    @staticmethod
    def parse(doc: Dict[str, Any]) -> VaultItem:
        try:
            return VaultItem.model_validate(doc)
        except ValidationError as e:
            raise InvalidRecord(f"Vault item {doc.get('id')!r} does not match the expected shape: {e}") from e

    async def add_item(self, item: VaultItem) -> VaultItem:
        doc_id = await self.store.create(self.collection, item.to_document())
        return item.model_copy(update={"id": doc_id})

    async def get_item(self, item_id: str) -> VaultItem:
        doc = await self.store.get(self.collection, item_id)
        if doc is None:
            raise NotFound(f"Vault item {item_id} not found")
        return self.parse(doc)

    async def list_for_owner(self, user_id: str) -> List[VaultItem]:
        docs = await self.store.query(self.collection, "userId", user_id)
        return _newest_first([self.parse(d) for d in docs])

    async def delete_item(self, item_id: str) -> None:
        await self.store.delete(self.collection, item_id)
