"""Two-phase scan and repair of broken media references.

A pass first collects a ``ScanReport`` by walking every class of stored
reference and probing its target. Repair then works from that report
object alone, so nothing found by an earlier pass, or fixed out of band
since, can be touched.
"""

from collections.abc import Awaitable, Callable

from sitecms.core.exceptions import FatalStoreFailure
from sitecms.core.logging import get_logger
from sitecms.core.metrics import REFERENCE_PROBES, REFERENCE_REPAIRS
from sitecms.database.client import ContentStoreClient
from sitecms.models.content import (
    IMAGE_CONTENT_KEYS,
    RECORD_IMAGE_FIELDS,
    RecordImageField,
)
from sitecms.models.reports import (
    BrokenContentReference,
    BrokenMediaFile,
    BrokenRecordImage,
    CleanupReport,
    CleanupSummary,
    FailedSection,
    RepairedItem,
    ScanReport,
)

from .probe import ProbeResult, ReferenceProbe, looks_like_url

logger = get_logger(__name__)

SECTION_MEDIA = "media_files"
SECTION_CONTENT = "site_content"


class IntegrityScanner:
    """Finds and optionally repairs references to missing media."""

    def __init__(
        self,
        store: ContentStoreClient,
        probe: ReferenceProbe,
        record_fields: tuple[RecordImageField, ...] = RECORD_IMAGE_FIELDS,
    ) -> None:
        self.store = store
        self.probe = probe
        self.record_fields = record_fields

    async def scan(self, dry_run: bool = True) -> CleanupReport:
        """Run one complete pass: collect, then repair unless ``dry_run``."""
        logger.info("image_cleanup_started", dry_run=dry_run)
        report = await self.collect(dry_run=dry_run)
        if dry_run:
            cleanup = CleanupReport(**report.model_dump())
        else:
            cleanup = await self.repair(report)
        cleanup.summary = CleanupSummary(
            total_broken_items=report.total_broken_items,
            validated_files=report.validated_files,
            cleaned_references=cleanup.cleaned_references,
        )
        logger.info(
            "image_cleanup_completed",
            dry_run=dry_run,
            total_broken_items=report.total_broken_items,
            validated_files=report.validated_files,
            cleaned_references=cleanup.cleaned_references,
            failed_sections=len(report.failed_sections),
        )
        return cleanup

    async def collect(self, dry_run: bool = True) -> ScanReport:
        """Probe every stored reference and return what is broken."""
        report = ScanReport(dry_run=dry_run)
        await self._section(
            report, SECTION_MEDIA, lambda: self._scan_media_files(report)
        )
        await self._section(
            report, SECTION_CONTENT, lambda: self._scan_content(report)
        )
        for field in self.record_fields:
            await self._section(
                report,
                f"{field.table}.{field.field}",
                lambda field=field: self._scan_records(report, field),
            )
        return report

    async def _section(
        self, report: ScanReport, name: str, work: Callable[[], Awaitable[None]]
    ) -> None:
        """Run one section; a store failure marks only that section failed."""
        try:
            await work()
        except Exception as e:
            error = FatalStoreFailure("content store", f"scan of {name}", e)
            logger.error("scan_section_failed", section=name, error=str(error))
            report.failed_sections.append(
                FailedSection(section=name, error=str(error))
            )

    @staticmethod
    def _count(section: str, result: ProbeResult) -> None:
        REFERENCE_PROBES.labels(
            section=section, outcome="ok" if result.ok else "broken"
        ).inc()

    async def _scan_media_files(self, report: ScanReport) -> None:
        files = await self.store.list_media_files()
        logger.info("media_files_found", count=len(files))
        results = await self.probe.map(
            files, lambda f: self.probe.probe_object(f.file_path)
        )
        for media, result in zip(files, results):
            self._count(SECTION_MEDIA, result)
            if result.ok:
                report.validated_files += 1
                continue
            logger.info("broken_media_file", id=media.id, path=media.file_path)
            report.broken_media_files.append(
                BrokenMediaFile(
                    id=media.id,
                    filename=media.filename,
                    path=media.file_path,
                    error=result.error or "File not found",
                )
            )

    async def _scan_content(self, report: ScanReport) -> None:
        items = [
            item
            for item in await self.store.list_image_content(
                sorted(IMAGE_CONTENT_KEYS)
            )
            if looks_like_url(item.content_value)
        ]
        results = await self.probe.map(
            items, lambda i: self.probe.probe_url(i.content_value)
        )
        for item, result in zip(items, results):
            self._count(SECTION_CONTENT, result)
            if result.ok:
                continue
            logger.info(
                "broken_content_reference",
                id=item.id,
                page=item.page,
                section=item.section,
                content_key=item.content_key,
            )
            report.broken_content_references.append(
                BrokenContentReference(
                    id=item.id,
                    page=item.page,
                    section=item.section,
                    content_key=item.content_key,
                    content_value=item.content_value,
                    error=result.error or "Unreachable",
                )
            )

    async def _scan_records(
        self, report: ScanReport, field: RecordImageField
    ) -> None:
        section = f"{field.table}.{field.field}"
        records = [
            ref for ref in await self.store.list_record_images(field) if ref.url
        ]
        results = await self.probe.map(
            records, lambda r: self.probe.probe_url(r.url)
        )
        broken = (
            report.broken_product_images
            if field.report_group == "product"
            else report.broken_category_images
        )
        for record, result in zip(records, results):
            self._count(section, result)
            if result.ok:
                continue
            logger.info("broken_record_image", table=field.table, id=record.id)
            broken.append(
                BrokenRecordImage(
                    id=record.id,
                    table=field.table,
                    field=field.field,
                    name=record.name,
                    url=record.url,
                    error=result.error or "Unreachable",
                )
            )

    def _field_for(self, item: BrokenRecordImage) -> RecordImageField:
        for field in self.record_fields:
            if field.table == item.table and field.field == item.field:
                return field
        raise KeyError(f"{item.table}.{item.field}")

    async def repair(self, report: ScanReport) -> CleanupReport:
        """Repair the broken items listed in ``report`` and nothing else.

        Each repair is independent; a failing one is logged and listed in
        ``repair_errors`` of the returned report.

        Raises:
            ValueError: If ``report`` came from a dry run
        """
        if report.dry_run:
            raise ValueError("Refusing to repair from a dry-run report")
        logger.info("image_cleanup_repairing", total=report.total_broken_items)
        cleanup = CleanupReport(**report.model_dump())

        for media in report.broken_media_files:
            await self._repair_one(
                cleanup,
                RepairedItem(kind="media_file", id=str(media.id), table="media_files"),
                lambda media_id=media.id: self.store.delete_media_file(media_id),
            )
        for item in report.broken_content_references:
            await self._repair_one(
                cleanup,
                RepairedItem(kind="content", id=str(item.id), table="site_content"),
                lambda item_id=item.id: self.store.clear_content_value(item_id),
            )
        for record in [*report.broken_product_images, *report.broken_category_images]:
            await self._repair_one(
                cleanup,
                RepairedItem(kind="record", id=record.id, table=record.table),
                lambda record=record: self.store.clear_record_image(
                    self._field_for(record), record.id
                ),
            )
        return cleanup

    async def _repair_one(
        self,
        cleanup: CleanupReport,
        target: RepairedItem,
        work: Callable[[], Awaitable[bool]],
    ) -> None:
        try:
            changed = await work()
        except Exception as e:
            REFERENCE_REPAIRS.labels(section=target.table, outcome="failed").inc()
            logger.error(
                "repair_failed", table=target.table, id=target.id, error=str(e)
            )
            cleanup.repair_errors.append(
                f"Failed to repair {target.table} {target.id}: {e}"
            )
            return
        if not changed:
            # Already gone; nothing was repaired by this pass
            REFERENCE_REPAIRS.labels(section=target.table, outcome="missing").inc()
            logger.info("repair_target_missing", table=target.table, id=target.id)
            return
        REFERENCE_REPAIRS.labels(section=target.table, outcome="ok").inc()
        cleanup.repaired.append(target)
        cleanup.cleaned_references += 1
