"""Roster metrics aggregation.

The only place derived figures are computed. Every consumer (roster list,
analytics, detail view) reads from here so pages cannot drift apart.

Rules:
* Per-KOL metrics are recomputed from the full post/platform lists on every
  mutation; nothing is patched incrementally.
* CPM is always blended: total cost over total impressions, times 1000.
  It is never the mean of per-post CPMs.
* Platform budget is an estimate: each KOL's spend is split across its
  platform links in proportion to follower count. Posts carry a platform,
  but their cost is not bucketed by it.
* Malformed numbers (None, NaN, negative, non-numeric) count as 0. These
  functions have no authority to reject data, so they never raise on it.
* Inputs are never mutated; every ``apply_*`` returns a new roster tuple and
  hands back untouched entities as the same objects.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Optional, Sequence

from kol_tracker.config import METRICS_SETTINGS
from kol_tracker.models.db.enums import MutationKind, SocialPlatform
from kol_tracker.models.snapshots import (
    CPMEntry,
    Document,
    EntityMetrics,
    KOLSnapshot,
    PlatformBudget,
    PlatformLink,
    Post,
    RosterMetrics,
    TopPerformer,
)
from kol_tracker.utils.metrics import blended_cpm, non_negative

Roster = tuple[KOLSnapshot, ...]


# ------------------------------ Computation ------------------------------- #

def _children(entity: object, name: str) -> Sequence:
    return getattr(entity, name, None) or ()


def compute_entity_metrics(entity: KOLSnapshot) -> EntityMetrics:
    """Derive followers, impressions, cost, post count and blended CPM for one KOL."""
    platforms = _children(entity, "platforms")
    posts = _children(entity, "posts")

    total_followers = sum(non_negative(getattr(p, "follower_count", 0)) for p in platforms)
    total_impressions = sum(non_negative(getattr(p, "impressions", 0)) for p in posts)
    total_cost = float(sum(non_negative(getattr(p, "cost", None)) for p in posts))

    return EntityMetrics(
        total_followers=total_followers,
        total_impressions=total_impressions,
        total_cost=total_cost,
        num_posts=len(posts),
        average_cpm=blended_cpm(total_cost, total_impressions),
    )


def with_metrics(entity: KOLSnapshot) -> KOLSnapshot:
    """Copy of ``entity`` with its ``metrics`` recomputed from its children."""
    return replace(entity, metrics=compute_entity_metrics(entity))


def _allocate_budget(
    buckets: dict[SocialPlatform, float],
    platforms: Sequence[PlatformLink],
    metrics: EntityMetrics,
) -> None:
    if metrics.total_followers <= 0 or metrics.total_cost <= 0:
        return
    for link in platforms:
        share = non_negative(link.follower_count) / metrics.total_followers
        buckets[link.platform] = buckets.get(link.platform, 0.0) + metrics.total_cost * share


def compute_roster_metrics(entities: Iterable[KOLSnapshot], *, top_n: Optional[int] = None) -> RosterMetrics:
    """Roster-wide totals, platform budget allocation and top performers.

    ``top_performers`` keeps KOLs with spend and a non-zero CPM, ascending by
    CPM (lower is better). Ties keep roster order; there is no secondary key.
    """
    limit = METRICS_SETTINGS["top_performers_limit"] if top_n is None else top_n
    limit = max(int(limit), 0)

    total_kols = 0
    total_spend = 0.0
    total_impressions: int | float = 0
    total_posts = 0
    total_followers: int | float = 0
    buckets: dict[SocialPlatform, float] = {}
    candidates: list[TopPerformer] = []

    for entity in entities:
        metrics = compute_entity_metrics(entity)
        total_kols += 1
        total_spend += metrics.total_cost
        total_impressions += metrics.total_impressions
        total_posts += metrics.num_posts
        total_followers += metrics.total_followers

        _allocate_budget(buckets, _children(entity, "platforms"), metrics)

        if metrics.average_cpm > 0 and metrics.total_cost > 0:
            candidates.append(
                TopPerformer(
                    kol_id=entity.id,
                    name=entity.name,
                    average_cpm=metrics.average_cpm,
                    total_cost=metrics.total_cost,
                    total_impressions=metrics.total_impressions,
                )
            )

    # sorted() is stable: equal CPMs stay in roster order
    top_performers = tuple(sorted(candidates, key=lambda t: t.average_cpm)[:limit])

    return RosterMetrics(
        total_kols=total_kols,
        total_spend=total_spend,
        total_impressions=total_impressions,
        total_posts=total_posts,
        average_cpm=blended_cpm(total_spend, total_impressions),
        total_followers_reach=total_followers,
        budget_by_platform=tuple(PlatformBudget(platform=p, amount=a) for p, a in buckets.items()),
        top_performers=top_performers,
    )


def cpm_by_entity(entities: Iterable[KOLSnapshot]) -> list[CPMEntry]:
    """CPM chart series: KOLs with CPM 0 are left out, the rest ascending."""
    entries = []
    for entity in entities:
        cpm = compute_entity_metrics(entity).average_cpm
        if cpm == 0:
            continue
        entries.append(CPMEntry(kol_id=entity.id, name=entity.name, average_cpm=cpm))
    return sorted(entries, key=lambda e: e.average_cpm)


# ------------------------------- Mutations -------------------------------- #

def _index_of(entities: Sequence[KOLSnapshot], entity_id: int) -> Optional[int]:
    for i, entity in enumerate(entities):
        if entity.id == entity_id:
            return i
    return None


def _swap(entities: Sequence[KOLSnapshot], index: int, entity: KOLSnapshot) -> Roster:
    return tuple(entities[:index]) + (entity,) + tuple(entities[index + 1:])


def apply_post_mutation(
    entities: Sequence[KOLSnapshot],
    entity_id: int,
    mutation: MutationKind | str,
    post: Post | int,
) -> Roster:
    """Fold an added/updated/deleted post into the roster.

    ``post`` is the authoritative record returned by the store (for delete a
    bare post id is accepted too). The target KOL's metrics are recomputed
    from the resulting post list. An unknown KOL id, or an unknown post id
    for update/delete, leaves the roster unchanged.
    """
    kind = MutationKind(mutation)
    index = _index_of(entities, entity_id)
    if index is None:
        return tuple(entities)

    entity = entities[index]
    post_id = post if isinstance(post, int) else post.id

    if kind is MutationKind.ADD:
        posts = tuple(entity.posts) + (post,)
    else:
        if not any(p.id == post_id for p in entity.posts):
            return tuple(entities)
        if kind is MutationKind.UPDATE:
            posts = tuple(post if p.id == post_id else p for p in entity.posts)
        else:
            posts = tuple(p for p in entity.posts if p.id != post_id)

    return _swap(entities, index, with_metrics(replace(entity, posts=posts)))


def apply_platform_replace(
    entities: Sequence[KOLSnapshot],
    entity_id: int,
    new_platform_links: Iterable[PlatformLink],
) -> Roster:
    """Discard every existing platform link of the KOL and install the new set.

    No merge or diff: old links are dropped even when a new one targets the
    same platform.
    """
    index = _index_of(entities, entity_id)
    if index is None:
        return tuple(entities)

    entity = replace(entities[index], platforms=tuple(new_platform_links))
    return _swap(entities, index, with_metrics(entity))


def apply_document_mutation(
    entities: Sequence[KOLSnapshot],
    entity_id: int,
    mutation: MutationKind | str,
    document: Document | int,
) -> Roster:
    """Add or remove a document. Metrics are carried over untouched."""
    kind = MutationKind(mutation)
    if kind is MutationKind.UPDATE:
        raise ValueError("Documents support only add and delete mutations")

    index = _index_of(entities, entity_id)
    if index is None:
        return tuple(entities)

    entity = entities[index]
    if kind is MutationKind.ADD:
        documents = tuple(entity.documents) + (document,)
    else:
        document_id = document if isinstance(document, int) else document.id
        documents = tuple(d for d in entity.documents if d.id != document_id)

    return _swap(entities, index, replace(entity, documents=documents))


def apply_entity_upsert(entities: Sequence[KOLSnapshot], entity: KOLSnapshot) -> Roster:
    """Insert a new KOL at the front, or replace the one with the same id in place."""
    fresh = with_metrics(entity)
    index = _index_of(entities, entity.id)
    if index is None:
        return (fresh,) + tuple(entities)
    return _swap(entities, index, fresh)


def apply_entity_delete(entities: Sequence[KOLSnapshot], entity_id: int) -> Roster:
    """Drop a KOL (and with it all of its children) from the roster."""
    if _index_of(entities, entity_id) is None:
        return tuple(entities)
    return tuple(e for e in entities if e.id != entity_id)


__all__ = [
    "Roster",
    "compute_entity_metrics",
    "compute_roster_metrics",
    "cpm_by_entity",
    "with_metrics",
    "apply_post_mutation",
    "apply_platform_replace",
    "apply_document_mutation",
    "apply_entity_upsert",
    "apply_entity_delete",
]
