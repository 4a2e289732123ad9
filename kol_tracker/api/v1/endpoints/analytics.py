"""
Analytics endpoints: roster totals, platform budget, top performers, CPM chart.

All figures come from the metrics aggregation module over the current roster
snapshot; nothing here touches the database.
"""
from __future__ import annotations
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query, Request
from kol_tracker.api.deps import get_roster_service, get_kol_or_404
from kol_tracker.models.schemas.metrics import RosterMetricsRead, CPMEntryRead, EntityMetricsRead
from kol_tracker.models.snapshots import KOLSnapshot
from kol_tracker.services.roster_service import RosterService
from kol_tracker.utils import get_logger, log_performance
import time

router = APIRouter()
logger = get_logger(__name__)

@router.get("/roster", response_model=RosterMetricsRead, summary="Roster-wide metrics")
async def get_roster_metrics(
    request: Request,
    top_n: Optional[int] = Query(None, ge=0, le=100, description="Number of top performers (default from config)"),
    roster: RosterService = Depends(get_roster_service)
) -> RosterMetricsRead:
    """Total spend, impressions, blended CPM, budget by platform and top performers."""
    start = time.time()
    request_id = request.headers.get("X-Request-ID", "unknown")

    try:
        metrics = roster.roster_metrics(top_n=top_n)
    except Exception as e:
        logger.error(
            "Roster metrics failed",
            error=str(e),
            request_id=request_id,
            exc_info=True
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error while computing roster metrics"
        )

    duration_ms = (time.time() - start) * 1000
    log_performance(
        operation="roster_metrics",
        duration_ms=duration_ms,
        additional_data={"total_kols": metrics.total_kols, "request_id": request_id}
    )
    return RosterMetricsRead.model_validate(metrics)

@router.get("/cpm-by-kol", response_model=List[CPMEntryRead], summary="CPM per KOL")
async def get_cpm_by_kol(
    roster: RosterService = Depends(get_roster_service)
) -> List[CPMEntryRead]:
    """KOLs with a non-zero CPM, cheapest first."""
    return [CPMEntryRead.model_validate(entry) for entry in roster.cpm_by_kol()]

@router.get("/kols/{kol_id}", response_model=EntityMetricsRead, summary="Metrics for one KOL")
async def get_kol_metrics(
    kol: KOLSnapshot = Depends(get_kol_or_404),
    roster: RosterService = Depends(get_roster_service)
) -> EntityMetricsRead:
    return EntityMetricsRead.model_validate(roster.kol_metrics(kol.id))
