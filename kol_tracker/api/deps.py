"""
Dependencies for database sessions, the roster service and common validations.
"""
from typing import Generator, Optional, List
from fastapi import Depends, HTTPException, status, Query, Request
from sqlalchemy.orm import Session
from kol_tracker.database import SessionLocal
from kol_tracker.models.db.enums import KOLStatus, SocialPlatform
from kol_tracker.models.schemas.kols import KOLFilters
from kol_tracker.models.snapshots import KOLSnapshot
from kol_tracker.services.roster_service import RosterService
from kol_tracker.utils import get_logger

logger = get_logger(__name__)

def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.
    Ensures proper session lifecycle management with automatic cleanup.
    
    Yields:
        Session: SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error("Database session error", error=str(e), exc_info=True)
        db.rollback()
        raise
    finally:
        db.close()

def get_roster_service(request: Request) -> RosterService:
    """
    The roster service built during application startup.
    
    Raises:
        HTTPException: 503 if startup has not installed one
    """
    service = getattr(request.app.state, "roster_service", None)
    if service is None:
        logger.error("Roster service requested before startup completed")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Roster is not loaded yet, please retry shortly"
        )
    return service

def get_kol_or_404(
    kol_id: int,
    roster: RosterService = Depends(get_roster_service)
) -> KOLSnapshot:
    """
    Validate that a KOL exists in the current roster snapshot.
    Mutations are rejected here, before the data source is called.
    
    Raises:
        HTTPException: If the KOL is not in the roster
    """
    kol = roster.get_kol(kol_id)
    if kol is None:
        logger.warning("KOL validation failed", kol_id=kol_id)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"KOL with id {kol_id} not found"
        )
    return kol

def get_kol_filters(
    search: Optional[str] = Query(None, description="Matches name, email or telegram handle"),
    status_filter: Optional[List[KOLStatus]] = Query(None, alias="status"),
    platform: Optional[List[SocialPlatform]] = Query(None, description="KOL has a link on any of these"),
    min_followers: Optional[int] = Query(None, ge=0),
    max_followers: Optional[int] = Query(None, ge=0),
    min_cpm: Optional[float] = Query(None, ge=0),
    max_cpm: Optional[float] = Query(None, ge=0)
) -> KOLFilters:
    """Collect roster filter query parameters into a ``KOLFilters``."""
    return KOLFilters(
        search=search,
        status=status_filter,
        platforms=platform,
        min_followers=min_followers,
        max_followers=max_followers,
        min_cpm=min_cpm,
        max_cpm=max_cpm,
    )

def get_pagination_params(
    limit: int = 100,
    offset: int = 0
) -> dict:
    """
    Validate and return pagination parameters.
    
    Args:
        limit: Maximum number of items to return (1-1000)
        offset: Number of items to skip (>= 0)
        
    Raises:
        HTTPException: If parameters are invalid
    """
    if limit < 1 or limit > 1000:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Limit must be between 1 and 1000"
        )
    
    if offset < 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Offset must be >= 0"
        )
    
    return {"limit": limit, "offset": offset}
