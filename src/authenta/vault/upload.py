"""Dual-copy batch uploads.

Each source file becomes up to two artifacts sharing one ciphertext:

- Private Master: gated by the owner's password (only when one is given);
- Shared Copy: gated by the file's own fingerprint. Without an owner password
  this is the only copy and is titled Integrity Master instead.

Files are processed strictly one after another, and the two writes for one
file are sequential too. A failing file is marked ``error`` and the batch moves
on. Copies a failed file already wrote are deleted again, and files already
marked ``success`` are skipped, so a batch can be re-run to retry only what
failed without duplicating anything.
"""
import asyncio
import logging
import time

from typing import Callable, Iterable, Iterator, List

from authenta.crypto.file_cipher import encrypt_file
from authenta.storage.repository import ArtifactRepository
from authenta.utils.dataModels import Identity, SourceFile, UploadMetadata, UploadQueueItem, UploadStatus
from authenta.utils.errors import PayloadTooLarge, PersistenceDenied, VaultError
from authenta.utils.helper import new_queue_id
from authenta.vault.access import Gate
from authenta.vault.progress import TransferRateEstimator, band

logger = logging.getLogger(__name__)

PRIVATE_BAND = (20, 40)
SHARED_BAND = (60, 40)


def categorize_error(exc: BaseException) -> str:
    if isinstance(exc, PersistenceDenied):
        if exc.code == "storage/unauthorized":
            return "Storage Unauthorized"
        return "Permission Denied (Rules)"
    if isinstance(exc, PayloadTooLarge):
        return "File Too Large for Document Store"
    return "Upload Failed"


class UploadQueue:
    def __init__(self, sources: Iterable[SourceFile] = ()):
        self.items: List[UploadQueueItem] = []
        self.add(sources)

    def __iter__(self) -> Iterator[UploadQueueItem]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def add(self, sources: Iterable[SourceFile]) -> List[UploadQueueItem]:
        added = [UploadQueueItem(id=new_queue_id(), file=src) for src in sources]
        self.items.extend(added)
        return added

    def remove(self, item_id: str) -> None:
        self.items = [i for i in self.items if i.id != item_id]

    def pending(self) -> List[UploadQueueItem]:
        return [i for i in self.items if i.status is not UploadStatus.SUCCESS]

    def clear(self) -> None:
        self.items = []


class UploadOrchestrator:
    def __init__(
        self,
        repository: ArtifactRepository,
        owner: Identity,
        clock: Callable[[], float] = time.monotonic,
        on_update: Callable[[UploadQueueItem], None] | None = None,
    ):
        self.repository = repository
        self.owner = owner
        self.clock = clock
        self.on_update = on_update

    def _set(self, item: UploadQueueItem, **changes) -> None:
        for name, value in changes.items():
            setattr(item, name, value)
        if self.on_update:
            self.on_update(item)

    def _reporter(self, item: UploadQueueItem, estimator: TransferRateEstimator, span: tuple):
        start, width = span

        def report(percent: float) -> None:
            speed, eta = estimator.sample(percent)
            self._set(item, progress=band(start, width, percent), speed=speed, eta=eta)

        return report

    async def _rollback(self, item: UploadQueueItem) -> None:
        """Delete copies written by a failed attempt so a retry cannot duplicate them."""
        kept = []
        for artifact_id in item.artifact_ids:
            try:
                await self.repository.delete_artifact(artifact_id)
            except VaultError:
                logger.exception("Could not roll back artifact %s of %s", artifact_id, item.file.name)
                kept.append(artifact_id)
        item.artifact_ids = kept

    async def process_batch(
        self,
        items: Iterable[UploadQueueItem],
        metadata: UploadMetadata,
        owner_password: str | None = None,
    ) -> List[UploadQueueItem]:
        items = list(items)
        password_gate = Gate.for_password(owner_password) if owner_password else None
        multi = len(items) > 1

        for item in items:
            if item.status is UploadStatus.SUCCESS:
                continue
            await self._process_item(item, metadata, password_gate, multi)

        done = sum(1 for i in items if i.status is UploadStatus.SUCCESS)
        logger.info("Batch finished: %d/%d files uploaded", done, len(items))
        return items

    async def _process_item(
        self,
        item: UploadQueueItem,
        metadata: UploadMetadata,
        password_gate: Gate | None,
        multi: bool,
    ) -> None:
        source = item.file
        estimator = TransferRateEstimator(source.size, self.clock)
        await self._rollback(item)
        if item.artifact_ids:
            self._set(item, status=UploadStatus.ERROR, progress=0, error_msg="Upload Failed")
            return
        base_title = f"{metadata.title} - {source.name}" if multi else metadata.title

        try:
            self._set(item, status=UploadStatus.ENCRYPTING, progress=10, error_msg=None)
            encrypted = await asyncio.to_thread(encrypt_file, source)

            self._set(item, status=UploadStatus.UPLOADING, progress=20)

            if password_gate is not None:
                private_id = await self.repository.create_artifact(
                    self.owner,
                    encrypted,
                    title=f"{base_title} (Private Master)",
                    description=metadata.description,
                    license=metadata.license,
                    file_type=source.mime_type,
                    gate=password_gate,
                    on_progress=self._reporter(item, estimator, PRIVATE_BAND),
                )
                item.artifact_ids.append(private_id)

            if password_gate is not None:
                title = f"{base_title} (Shared Copy)"
                description = f"{metadata.description} [Hash Locked]"
            else:
                title = f"{base_title} (Integrity Master)"
                description = metadata.description
            shared_id = await self.repository.create_artifact(
                self.owner,
                encrypted,
                title=title,
                description=description,
                license=metadata.license,
                file_type=source.mime_type,
                gate=Gate.for_fingerprint(encrypted.fingerprint),
                on_progress=self._reporter(item, estimator, SHARED_BAND),
            )
            item.artifact_ids.append(shared_id)

        except Exception as e:
            logger.exception("Error uploading %s", source.name)
            await self._rollback(item)
            self._set(item, status=UploadStatus.ERROR, progress=0, error_msg=categorize_error(e))
            return

        self._set(
            item,
            status=UploadStatus.SUCCESS,
            progress=100,
            result_key=encrypted.key,
            result_hash=encrypted.fingerprint,
        )
        logger.info("Uploaded %s", source.name)
