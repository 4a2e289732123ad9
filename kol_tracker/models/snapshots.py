"""Immutable in-memory roster records.

The roster is held as tuples of frozen dataclasses. Every change produces a
new object via ``dataclasses.replace``; nothing here is mutated in place, so
a snapshot can be shared between readers without locking.

Numeric fields are intentionally not validated: records may arrive from a
store or an import with missing/negative values and the aggregation layer
normalizes them.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from .db.enums import KOLStatus, SocialPlatform, DocumentType


@dataclass(frozen=True)
class PlatformLink:
    id: int
    kol_id: int
    platform: SocialPlatform
    profile_url: str = ""
    follower_count: int = 0
    username: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class Post:
    id: int
    kol_id: int
    platform: SocialPlatform
    url: str
    posted_date: Optional[date] = None
    impressions: int = 0
    title: Optional[str] = None
    engagement: Optional[int] = None
    clicks: Optional[int] = None
    cost: Optional[float] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class Document:
    id: int
    kol_id: int
    name: str
    type: DocumentType = DocumentType.OTHER
    size: int = 0
    url: Optional[str] = None
    file_path: Optional[str] = None
    notes: Optional[str] = None
    uploaded_at: Optional[datetime] = None


@dataclass(frozen=True)
class EntityMetrics:
    """Derived per-KOL figures. Never persisted."""
    total_followers: int | float = 0
    total_impressions: int | float = 0
    total_cost: float = 0.0
    num_posts: int = 0
    average_cpm: float = 0.0


@dataclass(frozen=True)
class KOLSnapshot:
    id: int
    name: str
    status: KOLStatus = KOLStatus.REACHED
    email: Optional[str] = None
    telegram_handle: Optional[str] = None
    notes: Optional[str] = None
    kyc_completed: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    platforms: tuple[PlatformLink, ...] = ()
    posts: tuple[Post, ...] = ()
    documents: tuple[Document, ...] = ()
    metrics: EntityMetrics = field(default_factory=EntityMetrics)

    # Flattened metric accessors so API schemas can read them by attribute.
    @property
    def total_followers(self) -> int | float:
        return self.metrics.total_followers

    @property
    def total_impressions(self) -> int | float:
        return self.metrics.total_impressions

    @property
    def total_cost(self) -> float:
        return self.metrics.total_cost

    @property
    def num_posts(self) -> int:
        return self.metrics.num_posts

    @property
    def average_cpm(self) -> float:
        return self.metrics.average_cpm


@dataclass(frozen=True)
class PlatformBudget:
    platform: SocialPlatform
    amount: float


@dataclass(frozen=True)
class TopPerformer:
    kol_id: int
    name: str
    average_cpm: float
    total_cost: float
    total_impressions: int | float


@dataclass(frozen=True)
class CPMEntry:
    kol_id: int
    name: str
    average_cpm: float


@dataclass(frozen=True)
class RosterMetrics:
    total_kols: int = 0
    total_spend: float = 0.0
    total_impressions: int | float = 0
    total_posts: int = 0
    average_cpm: float = 0.0
    total_followers_reach: int | float = 0
    budget_by_platform: tuple[PlatformBudget, ...] = ()
    top_performers: tuple[TopPerformer, ...] = ()


__all__ = [
    "PlatformLink",
    "Post",
    "Document",
    "EntityMetrics",
    "KOLSnapshot",
    "PlatformBudget",
    "TopPerformer",
    "CPMEntry",
    "RosterMetrics",
]
