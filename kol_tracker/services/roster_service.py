"""Roster service: the in-memory roster snapshot and every change to it.

One instance is built at startup around the configured ``DataSource`` and
stored on ``app.state.roster_service``. Every mutation follows the same
shape:

1. Await the data source call.
2. Fold the record it returns (the authoritative copy) into the snapshot
   through the aggregation functions, which recompute derived metrics.

If step 1 raises, the snapshot is left exactly as it was and the exception
propagates to the caller. There are no retries, timeouts or locks: with
overlapping mutations the last fold wins.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from kol_tracker.models.db.enums import MutationKind
from kol_tracker.models.schemas.documents import DocumentCreate
from kol_tracker.models.schemas.imports import ColumnMapping, ImportResult, ImportRowError
from kol_tracker.models.schemas.kols import KOLCreate, KOLFilters, KOLRead, KOLUpdate, PlatformLinkCreate
from kol_tracker.models.schemas.posts import PostCreate, PostUpdate
from kol_tracker.models.snapshots import CPMEntry, Document, EntityMetrics, KOLSnapshot, Post, RosterMetrics
from kol_tracker.utils import get_logger, log_business_event

from .data_sources import DataSource, DataSourceError
from .metrics_aggregation import (
    Roster,
    apply_document_mutation,
    apply_entity_delete,
    apply_entity_upsert,
    apply_platform_replace,
    apply_post_mutation,
    compute_entity_metrics,
    compute_roster_metrics,
    cpm_by_entity,
    with_metrics,
)
from .roster_filters import filter_roster
from .roster_import import FIRST_DATA_ROW, check_row_limit, validate_row

logger = get_logger(__name__)


class RosterService:
    """Owns the current roster snapshot (a tuple of ``KOLSnapshot``)."""

    def __init__(self, data_source: DataSource):
        self._data_source = data_source
        self._roster: Roster = ()
        self._loaded = False

    # ------------------------------------------------------------------ state

    @property
    def data_source(self) -> DataSource:
        return self._data_source

    @property
    def is_demo(self) -> bool:
        return self._data_source.is_demo

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def roster(self) -> Roster:
        return self._roster

    async def load(self) -> Roster:
        """Fetch the whole roster once and recompute every KOL's metrics."""
        records = await self._data_source.fetch_roster()
        self._roster = tuple(with_metrics(record) for record in records)
        self._loaded = True
        logger.info(
            "Roster loaded",
            kol_count=len(self._roster),
            data_source=type(self._data_source).__name__,
            is_demo=self.is_demo
        )
        return self._roster

    # ------------------------------------------------------------------ reads

    def get_kol(self, kol_id: int) -> Optional[KOLSnapshot]:
        for kol in self._roster:
            if kol.id == kol_id:
                return kol
        return None

    def get_post(self, kol_id: int, post_id: int) -> Optional[Post]:
        kol = self.get_kol(kol_id)
        if kol is None:
            return None
        return next((p for p in kol.posts if p.id == post_id), None)

    def get_document(self, kol_id: int, document_id: int) -> Optional[Document]:
        kol = self.get_kol(kol_id)
        if kol is None:
            return None
        return next((d for d in kol.documents if d.id == document_id), None)

    def kol_metrics(self, kol_id: int) -> Optional[EntityMetrics]:
        kol = self.get_kol(kol_id)
        return compute_entity_metrics(kol) if kol is not None else None

    def roster_metrics(self, top_n: Optional[int] = None) -> RosterMetrics:
        return compute_roster_metrics(self._roster, top_n=top_n)

    def cpm_by_kol(self) -> list[CPMEntry]:
        return cpm_by_entity(self._roster)

    def list_kols(self, filters: Optional[KOLFilters] = None) -> list[KOLSnapshot]:
        return filter_roster(self._roster, filters)

    # -------------------------------------------------------------- mutations

    async def add_kol(self, data: KOLCreate) -> KOLSnapshot:
        created = await self._data_source.create_kol(data)
        self._roster = apply_entity_upsert(self._roster, created)
        log_business_event(
            event_type="kol_created",
            details={"kol_id": created.id, "platform_count": len(created.platforms)}
        )
        return self.get_kol(created.id) or with_metrics(created)

    async def update_kol(self, kol_id: int, data: KOLUpdate) -> KOLSnapshot:
        updated = await self._data_source.update_kol(kol_id, data)
        self._roster = apply_entity_upsert(self._roster, updated)
        log_business_event(
            event_type="kol_updated",
            details={"kol_id": kol_id, "platforms_replaced": data.platforms is not None}
        )
        return self.get_kol(kol_id) or with_metrics(updated)

    async def delete_kol(self, kol_id: int) -> None:
        await self._data_source.delete_kol(kol_id)
        self._roster = apply_entity_delete(self._roster, kol_id)
        log_business_event(event_type="kol_deleted", details={"kol_id": kol_id})

    async def replace_platforms(self, kol_id: int, links: Sequence[PlatformLinkCreate]) -> Optional[KOLSnapshot]:
        new_links = await self._data_source.replace_platforms(kol_id, links)
        self._roster = apply_platform_replace(self._roster, kol_id, new_links)
        log_business_event(
            event_type="platforms_replaced",
            details={"kol_id": kol_id, "platform_count": len(new_links)}
        )
        return self.get_kol(kol_id)

    async def add_post(self, kol_id: int, data: PostCreate) -> Post:
        post = await self._data_source.create_post(kol_id, data)
        self._roster = apply_post_mutation(self._roster, kol_id, MutationKind.ADD, post)
        log_business_event(event_type="post_created", details={"kol_id": kol_id, "post_id": post.id})
        return post

    async def update_post(self, kol_id: int, post_id: int, data: PostUpdate) -> Post:
        post = await self._data_source.update_post(post_id, data)
        self._roster = apply_post_mutation(self._roster, kol_id, MutationKind.UPDATE, post)
        log_business_event(event_type="post_updated", details={"kol_id": kol_id, "post_id": post_id})
        return post

    async def delete_post(self, kol_id: int, post_id: int) -> None:
        await self._data_source.delete_post(post_id)
        self._roster = apply_post_mutation(self._roster, kol_id, MutationKind.DELETE, post_id)
        log_business_event(event_type="post_deleted", details={"kol_id": kol_id, "post_id": post_id})

    async def add_documents(self, kol_id: int, docs: Sequence[DocumentCreate]) -> list[Document]:
        created = await self._data_source.create_documents(kol_id, docs)
        for document in created:
            self._roster = apply_document_mutation(self._roster, kol_id, MutationKind.ADD, document)
        log_business_event(
            event_type="documents_added",
            details={"kol_id": kol_id, "document_ids": [d.id for d in created]}
        )
        return created

    async def delete_document(self, kol_id: int, document_id: int) -> None:
        await self._data_source.delete_document(document_id)
        self._roster = apply_document_mutation(self._roster, kol_id, MutationKind.DELETE, document_id)
        log_business_event(
            event_type="document_deleted",
            details={"kol_id": kol_id, "document_id": document_id}
        )

    # ----------------------------------------------------------------- import

    async def import_rows(
        self,
        rows: Sequence[Mapping[str, Any]],
        mapping: Optional[ColumnMapping] = None,
        first_row_number: int = FIRST_DATA_ROW,
    ) -> ImportResult:
        """Validate spreadsheet rows and add every valid one as a new KOL.

        Each row goes through ``add_kol``, the same path as manual entry.
        A data source error on one row is reported against that row and the
        rest of the batch continues; other exceptions propagate.
        """
        check_row_limit(list(rows))
        errors: list[ImportRowError] = []
        warnings: list[ImportRowError] = []
        imported: list[KOLSnapshot] = []
        failed = 0

        for offset, row in enumerate(rows):
            result = validate_row(row, mapping, first_row_number + offset)
            warnings.extend(ImportRowError(row=result.row_number, message=w) for w in result.warnings)

            if not result.valid or result.data is None:
                failed += 1
                errors.extend(ImportRowError(row=result.row_number, message=e) for e in result.errors)
                continue

            try:
                imported.append(await self.add_kol(result.data))
            except DataSourceError as e:
                failed += 1
                errors.append(ImportRowError(row=result.row_number, message=str(e)))
                logger.warning("Import row rejected by data source", row=result.row_number, error=str(e))

        log_business_event(
            event_type="roster_imported",
            details={"imported_count": len(imported), "failed_count": failed, "row_count": len(rows)}
        )

        return ImportResult(
            success=failed == 0,
            imported_count=len(imported),
            failed_count=failed,
            errors=errors,
            warnings=warnings,
            kols=[KOLRead.model_validate(kol) for kol in imported],
        )


__all__ = ["RosterService"]
