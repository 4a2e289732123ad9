"""
KOL roster endpoints with comprehensive logging.

Reads are served from the in-memory roster snapshot; writes go through the
roster service so derived metrics are recomputed on every change.
"""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status, Request
import time
from kol_tracker.api.deps import get_roster_service, get_kol_or_404, get_kol_filters, get_pagination_params
from kol_tracker.models.schemas.kols import KOLCreate, KOLUpdate, KOLRead, KOLFilters, PlatformLinkCreate
from kol_tracker.models.snapshots import KOLSnapshot
from kol_tracker.services.data_sources import RecordNotFoundError
from kol_tracker.services.roster_service import RosterService
from kol_tracker.utils import get_logger, log_performance

router = APIRouter()
logger = get_logger(__name__)

@router.get(
    "/",
    response_model=List[KOLRead],
    summary="List KOLs",
    description="List the roster with per-KOL metrics, optionally filtered"
)
async def list_kols(
    request: Request,
    filters: KOLFilters = Depends(get_kol_filters),
    pagination: dict = Depends(get_pagination_params),
    roster: RosterService = Depends(get_roster_service)
) -> List[KOLRead]:
    """List KOLs, newest first, with filtering and pagination."""
    start_time = time.time()
    request_id = request.headers.get("X-Request-ID", "unknown")

    logger.info(
        "KOL list requested",
        filters=filters.model_dump(exclude_none=True),
        limit=pagination["limit"],
        offset=pagination["offset"],
        request_id=request_id
    )

    try:
        kols = roster.list_kols(filters)
        page = kols[pagination["offset"]:pagination["offset"] + pagination["limit"]]

        duration_ms = (time.time() - start_time) * 1000
        log_performance(
            operation="list_kols",
            duration_ms=duration_ms,
            additional_data={
                "kols_matched": len(kols),
                "kols_returned": len(page)
            }
        )

        return [KOLRead.model_validate(kol) for kol in page]

    except Exception as e:
        logger.error(
            "KOL list failed",
            error=str(e),
            request_id=request_id,
            exc_info=True
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error while listing KOLs"
        )

@router.post(
    "/",
    response_model=KOLRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add KOL",
    description="Create a KOL with its platform links and document metadata"
)
async def create_kol(
    kol_data: KOLCreate,
    request: Request,
    roster: RosterService = Depends(get_roster_service)
) -> KOLRead:
    """Create a new KOL; it is placed at the top of the roster."""
    start_time = time.time()
    request_id = request.headers.get("X-Request-ID", "unknown")

    logger.info(
        "KOL creation started",
        kol_name=kol_data.name,
        platform_count=len(kol_data.platforms),
        document_count=len(kol_data.documents),
        request_id=request_id
    )

    try:
        kol = await roster.add_kol(kol_data)

        duration_ms = (time.time() - start_time) * 1000
        log_performance(
            operation="create_kol",
            duration_ms=duration_ms,
            additional_data={"kol_id": kol.id}
        )

        logger.info(
            "KOL created successfully",
            kol_id=kol.id,
            kol_name=kol.name,
            duration_ms=duration_ms,
            request_id=request_id
        )

        return KOLRead.model_validate(kol)

    except Exception as e:
        logger.error(
            "KOL creation failed with unexpected error",
            kol_name=kol_data.name,
            error=str(e),
            request_id=request_id,
            exc_info=True
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error during KOL creation, please retry"
        )

@router.get(
    "/{kol_id}",
    response_model=KOLRead,
    summary="Get KOL details"
)
async def get_kol(
    kol: KOLSnapshot = Depends(get_kol_or_404)
) -> KOLRead:
    """Get one KOL with platforms, posts, documents and metrics."""
    return KOLRead.model_validate(kol)

@router.put(
    "/{kol_id}",
    response_model=KOLRead,
    summary="Update KOL",
    description="Partial profile update; a 'platforms' list replaces every existing link"
)
async def update_kol(
    kol_id: int,
    kol_data: KOLUpdate,
    request: Request,
    kol: KOLSnapshot = Depends(get_kol_or_404),
    roster: RosterService = Depends(get_roster_service)
) -> KOLRead:
    """Update a KOL's profile fields and optionally its platform set."""
    start_time = time.time()
    request_id = request.headers.get("X-Request-ID", "unknown")

    logger.info(
        "KOL update started",
        kol_id=kol_id,
        fields=sorted(kol_data.profile_fields()),
        replaces_platforms=kol_data.platforms is not None,
        request_id=request_id
    )

    try:
        updated = await roster.update_kol(kol_id, kol_data)

        duration_ms = (time.time() - start_time) * 1000
        log_performance(
            operation="update_kol",
            duration_ms=duration_ms,
            additional_data={"kol_id": kol_id}
        )

        logger.info(
            "KOL updated successfully",
            kol_id=kol_id,
            previous_status=kol.status,
            status=updated.status,
            request_id=request_id
        )

        return KOLRead.model_validate(updated)

    except RecordNotFoundError as e:
        logger.warning("KOL update failed: not in store", kol_id=kol_id, request_id=request_id)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.error(
            "KOL update failed with unexpected error",
            kol_id=kol_id,
            error=str(e),
            request_id=request_id,
            exc_info=True
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error during KOL update, please retry"
        )

@router.delete(
    "/{kol_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete KOL",
    description="Delete a KOL together with its platforms, posts, documents and invoices"
)
async def delete_kol(
    kol_id: int,
    request: Request,
    kol: KOLSnapshot = Depends(get_kol_or_404),
    roster: RosterService = Depends(get_roster_service)
):
    """Delete a KOL."""
    start_time = time.time()
    request_id = request.headers.get("X-Request-ID", "unknown")

    logger.info(
        "KOL deletion started",
        kol_id=kol_id,
        kol_name=kol.name,
        request_id=request_id
    )

    try:
        await roster.delete_kol(kol_id)

        duration_ms = (time.time() - start_time) * 1000
        log_performance(
            operation="delete_kol",
            duration_ms=duration_ms,
            additional_data={"kol_id": kol_id}
        )

        logger.info(
            "KOL deleted successfully",
            kol_id=kol_id,
            kol_name=kol.name,
            request_id=request_id
        )

    except RecordNotFoundError as e:
        logger.warning("KOL deletion failed: not in store", kol_id=kol_id, request_id=request_id)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.error(
            "KOL deletion failed with unexpected error",
            kol_id=kol_id,
            error=str(e),
            request_id=request_id,
            exc_info=True
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error during KOL deletion, please retry"
        )

@router.put(
    "/{kol_id}/platforms",
    response_model=KOLRead,
    summary="Replace platform links",
    description="Discard every platform link of the KOL and install the given set"
)
async def replace_platforms(
    kol_id: int,
    links: List[PlatformLinkCreate],
    request: Request,
    kol: KOLSnapshot = Depends(get_kol_or_404),
    roster: RosterService = Depends(get_roster_service)
) -> KOLRead:
    """Replace a KOL's platform links wholesale."""
    start_time = time.time()
    request_id = request.headers.get("X-Request-ID", "unknown")

    logger.info(
        "Platform replacement started",
        kol_id=kol_id,
        previous_count=len(kol.platforms),
        new_count=len(links),
        request_id=request_id
    )

    try:
        updated = await roster.replace_platforms(kol_id, links)
        if updated is None:
            # Deleted concurrently between the lookup and the fold
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"KOL with id {kol_id} not found"
            )

        duration_ms = (time.time() - start_time) * 1000
        log_performance(
            operation="replace_platforms",
            duration_ms=duration_ms,
            additional_data={"kol_id": kol_id, "platform_count": len(links)}
        )

        return KOLRead.model_validate(updated)

    except HTTPException:
        raise
    except RecordNotFoundError as e:
        logger.warning("Platform replacement failed: KOL not in store", kol_id=kol_id, request_id=request_id)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.error(
            "Platform replacement failed with unexpected error",
            kol_id=kol_id,
            error=str(e),
            request_id=request_id,
            exc_info=True
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error while replacing platforms, please retry"
        )
