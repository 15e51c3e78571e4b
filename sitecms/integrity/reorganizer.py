"""Move media objects out of legacy storage folders into canonical ones."""

from collections.abc import Iterator, Mapping
from types import MappingProxyType

from sitecms.core.exceptions import StorageError
from sitecms.core.logging import get_logger
from sitecms.core.metrics import STORAGE_MOVES
from sitecms.database.client import ContentStoreClient
from sitecms.models.reports import ChangeLogEntry, FolderCount, ReorganizationReport
from sitecms.storage.base import ObjectStoreClient

from .saga import SagaStep, run_saga, with_async_retry

logger = get_logger(__name__)

CANONICAL_FOLDERS = (
    "logos",
    "product-categories",
    "products",
    "projects",
    "project-categories",
    "content",
)


class FolderMapping(Mapping[str, str]):
    """Read-only map of legacy folder name to canonical folder name."""

    def __init__(
        self,
        mapping: Mapping[str, str],
        canonical: tuple[str, ...] = CANONICAL_FOLDERS,
    ) -> None:
        unknown = sorted(set(mapping.values()) - set(canonical))
        if unknown:
            raise ValueError(f"Not canonical folders: {', '.join(unknown)}")
        self._mapping = MappingProxyType(dict(mapping))

    def __getitem__(self, legacy: str) -> str:
        return self._mapping[legacy]

    def __iter__(self) -> Iterator[str]:
        return iter(self._mapping)

    def __len__(self) -> int:
        return len(self._mapping)

    def canonical_folders(self) -> list[str]:
        """Distinct target folders, in mapping order."""
        return list(dict.fromkeys(self._mapping.values()))


DEFAULT_FOLDER_MAPPING = FolderMapping(
    {
        "project-photos": "projects",
        "client-logos": "logos",
        "approval-logos": "logos",
        "category-images": "product-categories",
        "uploads": "content",
        "projects": "projects",
        "approvals": "logos",
        "product-images": "products",
        "homepage": "content",
        "Client Logos": "logos",
        "Yahska Images": "content",
        "specifications": "content",
    }
)


class StorageReorganizer:
    """Relocates objects folder by folder and repoints stored references.

    Each object is handled by a two-step saga: move the object, then
    rewrite every reference to its old public URL. The rewrite runs even
    when the move fails, and a failed rewrite is retried rather than the
    move being undone. There is no global rollback.
    """

    def __init__(
        self,
        store: ContentStoreClient,
        object_store: ObjectStoreClient,
        mapping: FolderMapping = DEFAULT_FOLDER_MAPPING,
        rewrite_retries: int = 3,
        retry_base_delay: float = 0.1,
    ) -> None:
        self.store = store
        self.object_store = object_store
        self.mapping = mapping
        self.rewrite_retries = rewrite_retries
        self.retry_base_delay = retry_base_delay

    async def reorganize(self) -> ReorganizationReport:
        logger.info("reorganization_started", folders=len(self.mapping))
        report = ReorganizationReport()

        for legacy, canonical in self.mapping.items():
            await self._reorganize_folder(report, legacy, canonical)

        report.new_folder_structure = [
            FolderCount(
                folder=folder,
                count=sum(1 for c in report.change_log if c.new_folder == folder),
            )
            for folder in self.mapping.canonical_folders()
        ]
        logger.info(
            "reorganization_completed",
            folders_processed=report.folders_processed,
            files_moved=report.files_moved,
            updated=report.updated,
            errors=report.errors,
            skipped=report.skipped,
            unreferenced=report.unreferenced,
            folders_deleted=report.folders_deleted,
        )
        return report

    async def _reorganize_folder(
        self, report: ReorganizationReport, legacy: str, canonical: str
    ) -> None:
        try:
            entries = await self.object_store.list_folder(legacy)
        except StorageError as e:
            logger.error("folder_list_failed", folder=legacy, error=str(e))
            report.errors += 1
            return

        files = [entry for entry in entries if not entry.is_folder]
        if not files:
            logger.debug("folder_empty", folder=legacy)
            return

        report.folders_processed += 1
        logger.info(
            "folder_processing", folder=legacy, target=canonical, files=len(files)
        )

        for entry in files:
            report.processed += 1
            if canonical == legacy:
                report.skipped += 1
                continue
            await self._relocate(report, legacy, canonical, entry.name)

        if canonical == legacy:
            return
        try:
            await self.object_store.delete([legacy])
        except StorageError as e:
            logger.warning("folder_delete_failed", folder=legacy, error=str(e))
            return
        report.folders_deleted += 1
        logger.info("folder_deleted", folder=legacy)

    async def _relocate(
        self, report: ReorganizationReport, legacy: str, canonical: str, name: str
    ) -> None:
        old_path = f"{legacy}/{name}"
        new_path = f"{canonical}/{name}"
        new_url = self.object_store.public_url(new_path)

        async def rewrite() -> int:
            return await self.store.rewrite_media_references(
                old_path, new_url, name, self.object_store.path_from_url
            )

        retried_rewrite = with_async_retry(
            max_retries=self.rewrite_retries, base_delay=self.retry_base_delay
        )(rewrite)

        outcome = await run_saga(
            [
                SagaStep("move", lambda: self.object_store.move(old_path, new_path)),
                SagaStep("rewrite", rewrite, compensation=retried_rewrite),
            ],
            old_path=old_path,
            new_path=new_path,
        )

        moved = outcome["move"].ok
        STORAGE_MOVES.labels(outcome="ok" if moved else "failed").inc()
        if moved:
            report.files_moved += 1
        else:
            report.errors += 1

        rewrite_outcome = outcome["rewrite"]
        records_updated = 0
        if not rewrite_outcome.ok:
            report.errors += 1
        elif rewrite_outcome.result:
            records_updated = rewrite_outcome.result
            report.updated += 1
        else:
            # Nothing referenced the object under any spelling
            report.unreferenced += 1
            logger.warning(
                "object_unreferenced", old_path=old_path, new_path=new_path
            )

        report.change_log.append(
            ChangeLogEntry(
                old_path=old_path,
                new_path=new_path,
                old_folder=legacy,
                new_folder=canonical,
                file_name=name,
                storage_moved=moved,
                records_updated=records_updated,
            )
        )
        logger.info(
            "object_relocated",
            old_path=old_path,
            new_path=new_path,
            storage_moved=moved,
            records_updated=records_updated,
        )
