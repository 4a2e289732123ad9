"""
Roster import endpoints.

Rows arrive either as JSON (already parsed by the client) or as a raw CSV
body. Each valid row is added through the same path as a manual KOL entry.
"""
from fastapi import APIRouter, Depends, HTTPException, status, Request
import time
from kol_tracker.api.deps import get_roster_service
from kol_tracker.models.schemas.imports import ImportRequest, ImportResult
from kol_tracker.services.roster_import import parse_csv
from kol_tracker.services.roster_service import RosterService
from kol_tracker.utils import get_logger, log_performance

router = APIRouter()
logger = get_logger(__name__)

async def _run_import(request: Request, roster: RosterService, rows, mapping, source: str) -> ImportResult:
    start_time = time.time()
    request_id = request.headers.get("X-Request-ID", "unknown")

    logger.info(
        "Roster import started",
        source=source,
        row_count=len(rows),
        request_id=request_id
    )

    try:
        result = await roster.import_rows(rows, mapping)

        duration_ms = (time.time() - start_time) * 1000
        log_performance(
            operation="import_rows",
            duration_ms=duration_ms,
            additional_data={
                "source": source,
                "imported_count": result.imported_count,
                "failed_count": result.failed_count
            }
        )

        logger.info(
            "Roster import completed",
            imported_count=result.imported_count,
            failed_count=result.failed_count,
            request_id=request_id
        )
        return result

    except ValueError as e:
        logger.warning("Roster import rejected", error=str(e), request_id=request_id)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(
            "Roster import failed with unexpected error",
            error=str(e),
            request_id=request_id,
            exc_info=True
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error during import, please retry"
        )

@router.post(
    "/rows",
    response_model=ImportResult,
    summary="Import parsed spreadsheet rows",
    description="Each row maps header -> cell; 'mapping' says which header feeds which field"
)
async def import_rows(
    payload: ImportRequest,
    request: Request,
    roster: RosterService = Depends(get_roster_service)
) -> ImportResult:
    return await _run_import(request, roster, payload.rows, payload.mapping, source="rows")

@router.post(
    "/csv",
    response_model=ImportResult,
    summary="Import a CSV export",
    description="Raw text/csv body with a header row; the default column mapping is used"
)
async def import_csv(
    request: Request,
    roster: RosterService = Depends(get_roster_service)
) -> ImportResult:
    body = await request.body()
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="CSV body must be UTF-8 encoded"
        )

    rows = parse_csv(text)
    if not rows:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="CSV contains no data rows"
        )
    return await _run_import(request, roster, rows, None, source="csv")
