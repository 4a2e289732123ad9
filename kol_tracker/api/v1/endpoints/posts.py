"""
Content post endpoints, nested under a KOL.

Every change refolds the owning KOL's metrics (impressions, cost, CPM).
"""
from fastapi import APIRouter, Depends, HTTPException, status, Request
import time
from kol_tracker.api.deps import get_roster_service, get_kol_or_404
from kol_tracker.models.schemas.posts import PostCreate, PostUpdate, PostRead
from kol_tracker.models.snapshots import KOLSnapshot
from kol_tracker.services.data_sources import RecordNotFoundError
from kol_tracker.services.roster_service import RosterService
from kol_tracker.utils import get_logger, log_performance

router = APIRouter()
logger = get_logger(__name__)

def _require_post(roster: RosterService, kol: KOLSnapshot, post_id: int, request_id: str) -> None:
    if roster.get_post(kol.id, post_id) is None:
        logger.warning(
            "Post not found for KOL",
            kol_id=kol.id,
            post_id=post_id,
            request_id=request_id
        )
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Post with id {post_id} not found for KOL {kol.id}"
        )

@router.post(
    "/",
    response_model=PostRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add post",
    description="Record a content post with its reach and cost"
)
async def create_post(
    kol_id: int,
    post_data: PostCreate,
    request: Request,
    kol: KOLSnapshot = Depends(get_kol_or_404),
    roster: RosterService = Depends(get_roster_service)
) -> PostRead:
    """Add a post to a KOL."""
    start_time = time.time()
    request_id = request.headers.get("X-Request-ID", "unknown")

    logger.info(
        "Post creation started",
        kol_id=kol_id,
        platform=post_data.platform,
        impressions=post_data.impressions,
        cost=post_data.cost,
        request_id=request_id
    )

    try:
        post = await roster.add_post(kol_id, post_data)

        duration_ms = (time.time() - start_time) * 1000
        log_performance(
            operation="create_post",
            duration_ms=duration_ms,
            additional_data={"kol_id": kol_id, "post_id": post.id}
        )

        logger.info(
            "Post created successfully",
            kol_id=kol_id,
            post_id=post.id,
            request_id=request_id
        )

        return PostRead.model_validate(post)

    except RecordNotFoundError as e:
        logger.warning("Post creation failed: KOL not in store", kol_id=kol_id, request_id=request_id)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.error(
            "Post creation failed with unexpected error",
            kol_id=kol_id,
            error=str(e),
            request_id=request_id,
            exc_info=True
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error during post creation, please retry"
        )

@router.put(
    "/{post_id}",
    response_model=PostRead,
    summary="Update post"
)
async def update_post(
    kol_id: int,
    post_id: int,
    post_data: PostUpdate,
    request: Request,
    kol: KOLSnapshot = Depends(get_kol_or_404),
    roster: RosterService = Depends(get_roster_service)
) -> PostRead:
    """Update a post; only fields sent are written."""
    start_time = time.time()
    request_id = request.headers.get("X-Request-ID", "unknown")

    logger.info(
        "Post update started",
        kol_id=kol_id,
        post_id=post_id,
        fields=sorted(post_data.model_dump(exclude_unset=True)),
        request_id=request_id
    )

    try:
        _require_post(roster, kol, post_id, request_id)
        post = await roster.update_post(kol_id, post_id, post_data)

        duration_ms = (time.time() - start_time) * 1000
        log_performance(
            operation="update_post",
            duration_ms=duration_ms,
            additional_data={"kol_id": kol_id, "post_id": post_id}
        )

        return PostRead.model_validate(post)

    except HTTPException:
        raise
    except RecordNotFoundError as e:
        logger.warning("Post update failed: not in store", post_id=post_id, request_id=request_id)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.error(
            "Post update failed with unexpected error",
            kol_id=kol_id,
            post_id=post_id,
            error=str(e),
            request_id=request_id,
            exc_info=True
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error during post update, please retry"
        )

@router.delete(
    "/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete post"
)
async def delete_post(
    kol_id: int,
    post_id: int,
    request: Request,
    kol: KOLSnapshot = Depends(get_kol_or_404),
    roster: RosterService = Depends(get_roster_service)
):
    """Delete a post."""
    start_time = time.time()
    request_id = request.headers.get("X-Request-ID", "unknown")

    logger.info(
        "Post deletion started",
        kol_id=kol_id,
        post_id=post_id,
        request_id=request_id
    )

    try:
        _require_post(roster, kol, post_id, request_id)
        await roster.delete_post(kol_id, post_id)

        duration_ms = (time.time() - start_time) * 1000
        log_performance(
            operation="delete_post",
            duration_ms=duration_ms,
            additional_data={"kol_id": kol_id, "post_id": post_id}
        )

    except HTTPException:
        raise
    except RecordNotFoundError as e:
        logger.warning("Post deletion failed: not in store", post_id=post_id, request_id=request_id)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.error(
            "Post deletion failed with unexpected error",
            kol_id=kol_id,
            post_id=post_id,
            error=str(e),
            request_id=request_id,
            exc_info=True
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error during post deletion, please retry"
        )
