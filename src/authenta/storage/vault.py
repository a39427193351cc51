import json
import os

from pathlib import Path
from typing import Any, Dict

from authenta.storage.store import MemoryDocumentStore, WriteRule
from authenta.utils.errors import InvalidRecord, PersistenceError

STORE_MAGIC = "AUTHENTA1"
STORE_VERSION = 1


def save_store(path: Path, collections: Dict[str, Dict[str, Any]]) -> None:
    body = {"magic": STORE_MAGIC, "version": STORE_VERSION, "collections": collections}
    tmp = path.with_suffix(".tmp")
    with tmp.open("w", encoding="utf-8") as f:
        json.dump(body, f, ensure_ascii=False, separators=(",", ":"))
    os.replace(tmp, path)


def load_store(path: Path) -> Dict[str, Dict[str, Any]]:
    if not path.exists():
        return {}
    try:
        body = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InvalidRecord(f"{path} is not a valid store file") from e
    if not isinstance(body, dict) or body.get("magic") != STORE_MAGIC:
        raise InvalidRecord("Invalid store magic")
    if body.get("version") != STORE_VERSION:
        raise InvalidRecord("Unsupported store version")
    return body.get("collections", {})


class JsonFileDocumentStore(MemoryDocumentStore):
    """Memory store persisted to one JSON file, rewritten atomically on every write."""

    def __init__(self, path: Path | str, max_document_bytes: int | None = None, write_rule: WriteRule | None = None):
        super().__init__(max_document_bytes, write_rule)
        self.path = Path(path)
        self._collections = load_store(self.path)

    def _commit(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            save_store(self.path, self._collections)
        except OSError as e:
            raise PersistenceError(f"Could not write {self.path}: {e}") from e
