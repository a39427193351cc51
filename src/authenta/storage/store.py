"""Document store boundary.

The vault core only needs a small slice of a document database: create,
fetch, query by one field, atomic single-document updates (with an
append-to-array primitive used for version archival) and delete. Writes go
through the store's rules and its per-document size ceiling, which surface as
``PersistenceDenied`` and ``PayloadTooLarge``.
"""
import abc
import copy
import json
import logging

from typing import Any, Callable, Dict, List, Optional

from authenta.utils.config import get_settings
from authenta.utils.errors import NotFound, PayloadTooLarge, PersistenceDenied, PersistenceError
from authenta.utils.helper import new_document_id, rel_time_iso

logger = logging.getLogger(__name__)

WriteRule = Callable[[str, Dict[str, Any]], bool]
Document = Dict[str, Any]


def document_size(data: Document) -> int:
    return len(json.dumps(data, separators=(",", ":"), ensure_ascii=False).encode("utf-8"))


class DocumentStore(abc.ABC):
    def __init__(self, max_document_bytes: int | None = None, write_rule: WriteRule | None = None):
        self.max_document_bytes = max_document_bytes or get_settings().MAX_DOCUMENT_BYTES
        self.write_rule = write_rule

    def check_write(self, collection: str, data: Document) -> None:
        if self.write_rule is not None and not self.write_rule(collection, data):
            raise PersistenceDenied(f"Write to '{collection}' rejected by store rules")
        size = document_size(data)
        if size > self.max_document_bytes:
            raise PayloadTooLarge(f"Document is {size} bytes, the store accepts at most {self.max_document_bytes}")

    @abc.abstractmethod
    async def create(self, collection: str, data: Document) -> str:
        """Insert a new document and return its id."""

    @abc.abstractmethod
    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        """Fetch one document (with its ``id``) or None."""

    @abc.abstractmethod
    async def query(self, collection: str, field: str, value: Any) -> List[Document]:
        """All documents whose ``field`` equals ``value``."""

    @abc.abstractmethod
    async def update(
        self,
        collection: str,
        doc_id: str,
        fields: Document,
        array_union: Dict[str, List[Any]] | None = None,
    ) -> None:
        """Set ``fields`` and append ``array_union`` values in one atomic write."""

    @abc.abstractmethod
    async def delete(self, collection: str, doc_id: str) -> None:
        """Remove a document. Missing documents are ignored."""


class MemoryDocumentStore(DocumentStore):
    """In-process store. No operation suspends while mutating, so every write is atomic."""

    def __init__(self, max_document_bytes: int | None = None, write_rule: WriteRule | None = None):
        super().__init__(max_document_bytes, write_rule)
        self._collections: Dict[str, Dict[str, Document]] = {}

    def _commit(self) -> None:
        pass

    def _write(self, collection: str, doc_id: str, doc: Document | None) -> None:
        """Apply one change and commit it; on a failed commit the change is undone."""
        bucket = self._bucket(collection)
        previous = bucket.get(doc_id)
        if doc is None:
            bucket.pop(doc_id, None)
        else:
            bucket[doc_id] = doc
        try:
            self._commit()
        except PersistenceError:
            if previous is None:
                bucket.pop(doc_id, None)
            else:
                bucket[doc_id] = previous
            raise

    def _bucket(self, collection: str) -> Dict[str, Document]:
        return self._collections.setdefault(collection, {})

    async def create(self, collection: str, data: Document) -> str:
        data = copy.deepcopy(data)
        self.check_write(collection, data)
        doc_id = new_document_id()
        self._write(collection, doc_id, data)
        logger.debug("Created %s/%s", collection, doc_id)
        return doc_id

    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        doc = self._bucket(collection).get(doc_id)
        if doc is None:
            return None
        return {**copy.deepcopy(doc), "id": doc_id}

    async def query(self, collection: str, field: str, value: Any) -> List[Document]:
        return [
            {**copy.deepcopy(doc), "id": doc_id}
            for doc_id, doc in self._bucket(collection).items()
            if doc.get(field) == value
        ]

    async def update(
        self,
        collection: str,
        doc_id: str,
        fields: Document,
        array_union: Dict[str, List[Any]] | None = None,
    ) -> None:
        bucket = self._bucket(collection)
        if doc_id not in bucket:
            raise NotFound(f"No document {collection}/{doc_id}")

        merged = copy.deepcopy(bucket[doc_id])
        merged.update(copy.deepcopy(fields))
        for key, values in (array_union or {}).items():
            current = list(merged.get(key) or [])
            for value in values:
                if value not in current:
                    current.append(copy.deepcopy(value))
            merged[key] = current

        self.check_write(collection, merged)
        self._write(collection, doc_id, merged)
        logger.debug("Updated %s/%s", collection, doc_id)

    async def delete(self, collection: str, doc_id: str) -> None:
        if doc_id in self._bucket(collection):
            self._write(collection, doc_id, None)
            logger.debug("Deleted %s/%s", collection, doc_id)


async def check_connection(store: DocumentStore, probe: Document | None = None) -> tuple[bool, str]:
    """Diagnostic write: tells whether the store accepts writes at all."""
    try:
        doc_id = await store.create("_connection_test", probe or {"test": "connection_check", "timestamp": rel_time_iso()})
    except PersistenceDenied as e:
        logger.error("Diagnostic write failed: %s", e)
        return False, f"PERMISSION DENIED: {e}"
    await store.delete("_connection_test", doc_id)
    logger.info("Diagnostic write successful")
    return True, "Connection verified: write access granted"
