"""Roster list filtering (search box, status chips, platform chips, ranges).

Filters read the per-KOL metrics carried on each snapshot, so they must be
applied to a roster that has been through the aggregation layer.
"""
from __future__ import annotations

from typing import Iterable, Optional

from kol_tracker.models.schemas.kols import KOLFilters
from kol_tracker.models.snapshots import KOLSnapshot


def _matches_search(entity: KOLSnapshot, needle: str) -> bool:
    haystacks = (entity.name, entity.email, entity.telegram_handle)
    return any(needle in h.lower() for h in haystacks if h)


def _in_range(value: float, low: Optional[float], high: Optional[float]) -> bool:
    if low is not None and value < low:
        return False
    if high is not None and value > high:
        return False
    return True


def matches_filters(entity: KOLSnapshot, filters: KOLFilters) -> bool:
    """True when ``entity`` passes every filter that is set."""
    if filters.search:
        needle = filters.search.strip().lower()
        if needle and not _matches_search(entity, needle):
            return False

    if filters.status and entity.status not in filters.status:
        return False

    if filters.platforms:
        linked = {link.platform for link in entity.platforms}
        if not linked.intersection(filters.platforms):
            return False

    if not _in_range(entity.total_followers, filters.min_followers, filters.max_followers):
        return False

    return _in_range(entity.average_cpm, filters.min_cpm, filters.max_cpm)


def filter_roster(entities: Iterable[KOLSnapshot], filters: Optional[KOLFilters]) -> list[KOLSnapshot]:
    """Entities passing ``filters``, in roster order. ``None`` keeps everything."""
    if filters is None:
        return list(entities)
    return [entity for entity in entities if matches_filters(entity, filters)]


__all__ = ["filter_roster", "matches_filters"]
