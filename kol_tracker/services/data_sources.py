"""Roster data sources.

A ``DataSource`` is picked once at startup and handed to the roster service:

* ``StaticDataSource``: in-process store seeded with the demo roster. Ids come
  from counters, nothing survives a restart.
* ``RemoteDataSource``: SQLAlchemy-backed store. Each call is its own unit of
  work on a fresh session from the injected factory.

Both return snapshot records (``KOLSnapshot``, ``Post``...) that are treated
as authoritative by the caller. Derived metrics are never computed here.

Failure semantics:
* A missing row raises ``RecordNotFoundError``.
* Anything raised by the backing store propagates unchanged.
* ``RemoteDataSource.create_kol`` commits profile, platforms and documents
  separately. It is not atomic: if a child insert fails the profile row stays
  behind without children and the error is re-raised. No compensation.
"""
from __future__ import annotations

import itertools
from operator import attrgetter
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Any, Callable, Iterable, Optional, Sequence

from sqlalchemy.orm import Session, selectinload

from kol_tracker.config import DATA_SOURCE_MODE, STATIC_SEED_DEMO
from kol_tracker.database import SessionLocal
from kol_tracker.models.db import KOLProfile, KOLPlatform, ContentPost, KOLDocument
from kol_tracker.models.schemas.documents import DocumentCreate
from kol_tracker.models.schemas.kols import KOLCreate, KOLUpdate, PlatformLinkCreate
from kol_tracker.models.schemas.posts import PostCreate, PostUpdate
from kol_tracker.models.snapshots import Document, KOLSnapshot, PlatformLink, Post
from kol_tracker.utils import get_logger, utc_now

logger = get_logger(__name__)


class DataSourceError(Exception):
    """Base error for data source failures."""


class RecordNotFoundError(DataSourceError):
    def __init__(self, resource: str, record_id: int):
        self.resource = resource
        self.record_id = record_id
        super().__init__(f"{resource} {record_id} not found")


class DataSource(ABC):
    """Persistence capability behind the roster service."""

    @property
    @abstractmethod
    def is_demo(self) -> bool:
        """True when changes will not survive a restart."""

    @abstractmethod
    async def fetch_roster(self) -> list[KOLSnapshot]:
        """Every KOL with platforms, posts and documents, newest first."""

    @abstractmethod
    async def create_kol(self, data: KOLCreate) -> KOLSnapshot: ...

    @abstractmethod
    async def update_kol(self, kol_id: int, data: KOLUpdate) -> KOLSnapshot: ...

    @abstractmethod
    async def delete_kol(self, kol_id: int) -> None: ...

    @abstractmethod
    async def replace_platforms(self, kol_id: int, links: Sequence[PlatformLinkCreate]) -> list[PlatformLink]: ...

    @abstractmethod
    async def create_post(self, kol_id: int, data: PostCreate) -> Post: ...

    @abstractmethod
    async def update_post(self, post_id: int, data: PostUpdate) -> Post: ...

    @abstractmethod
    async def delete_post(self, post_id: int) -> None: ...

    @abstractmethod
    async def create_documents(self, kol_id: int, docs: Sequence[DocumentCreate]) -> list[Document]: ...

    @abstractmethod
    async def delete_document(self, document_id: int) -> None: ...


# ------------------------------ Static source ------------------------------ #

class StaticDataSource(DataSource):
    """In-memory store for demo mode.

    Seed entries are ``KOLCreate``-shaped dicts with an optional ``posts``
    list; they are inserted through the same helpers the async API uses.
    """

    def __init__(self, seed: Optional[Iterable[dict[str, Any]]] = None):
        self._kols: dict[int, KOLSnapshot] = {}
        self._ids = {name: itertools.count(1) for name in ("kol", "platform", "post", "document")}
        # Reversed so the first seed entry ends up newest (top of the roster)
        for entry in reversed(list(seed or ())):
            payload = dict(entry)
            posts = payload.pop("posts", ())
            kol = self._insert_kol(KOLCreate.model_validate(payload))
            for post in posts:
                self._insert_post(kol.id, PostCreate.model_validate(post))

    @property
    def is_demo(self) -> bool:
        return True

    def _next_id(self, name: str) -> int:
        return next(self._ids[name])

    def _get(self, kol_id: int) -> KOLSnapshot:
        kol = self._kols.get(kol_id)
        if kol is None:
            raise RecordNotFoundError("kol", kol_id)
        return kol

    def _find_child(self, attr: str, child_id: int) -> Optional[KOLSnapshot]:
        for kol in self._kols.values():
            if any(child.id == child_id for child in getattr(kol, attr)):
                return kol
        return None

    def _build_links(self, kol_id: int, links: Iterable[PlatformLinkCreate]) -> tuple[PlatformLink, ...]:
        now = utc_now()
        return tuple(
            PlatformLink(
                id=self._next_id("platform"),
                kol_id=kol_id,
                platform=link.platform,
                profile_url=link.profile_url,
                follower_count=link.follower_count,
                username=link.username,
                created_at=now,
                updated_at=now,
            )
            for link in links
        )

    def _build_documents(self, kol_id: int, docs: Iterable[DocumentCreate]) -> tuple[Document, ...]:
        now = utc_now()
        return tuple(
            Document(
                id=self._next_id("document"),
                kol_id=kol_id,
                name=doc.name,
                type=doc.resolved_type(),
                size=doc.size,
                url=doc.url,
                file_path=doc.file_path,
                notes=doc.notes,
                uploaded_at=now,
            )
            for doc in docs
        )

    def _insert_kol(self, data: KOLCreate) -> KOLSnapshot:
        kol_id = self._next_id("kol")
        now = utc_now()
        kol = KOLSnapshot(
            id=kol_id,
            name=data.name,
            status=data.status,
            email=data.email,
            telegram_handle=data.telegram_handle,
            notes=data.notes,
            kyc_completed=data.kyc_completed,
            created_at=now,
            updated_at=now,
            platforms=self._build_links(kol_id, data.platforms),
            documents=self._build_documents(kol_id, data.documents),
        )
        self._kols[kol_id] = kol
        return kol

    def _insert_post(self, kol_id: int, data: PostCreate) -> Post:
        kol = self._get(kol_id)
        now = utc_now()
        post = Post(id=self._next_id("post"), kol_id=kol_id, created_at=now, updated_at=now, **data.model_dump())
        self._kols[kol_id] = replace(kol, posts=kol.posts + (post,))
        return post

    async def fetch_roster(self) -> list[KOLSnapshot]:
        return [self._kols[kol_id] for kol_id in sorted(self._kols, reverse=True)]

    async def create_kol(self, data: KOLCreate) -> KOLSnapshot:
        return self._insert_kol(data)

    async def update_kol(self, kol_id: int, data: KOLUpdate) -> KOLSnapshot:
        kol = replace(self._get(kol_id), **data.profile_fields(), updated_at=utc_now())
        if data.platforms is not None:
            kol = replace(kol, platforms=self._build_links(kol_id, data.platforms))
        self._kols[kol_id] = kol
        return kol

    async def delete_kol(self, kol_id: int) -> None:
        self._get(kol_id)
        del self._kols[kol_id]

    async def replace_platforms(self, kol_id: int, links: Sequence[PlatformLinkCreate]) -> list[PlatformLink]:
        kol = self._get(kol_id)
        new_links = self._build_links(kol_id, links)
        self._kols[kol_id] = replace(kol, platforms=new_links, updated_at=utc_now())
        return list(new_links)

    async def create_post(self, kol_id: int, data: PostCreate) -> Post:
        return self._insert_post(kol_id, data)

    async def update_post(self, post_id: int, data: PostUpdate) -> Post:
        kol = self._find_child("posts", post_id)
        if kol is None:
            raise RecordNotFoundError("post", post_id)
        current = next(p for p in kol.posts if p.id == post_id)
        updated = replace(current, **data.model_dump(exclude_unset=True), updated_at=utc_now())
        self._kols[kol.id] = replace(kol, posts=tuple(updated if p.id == post_id else p for p in kol.posts))
        return updated

    async def delete_post(self, post_id: int) -> None:
        kol = self._find_child("posts", post_id)
        if kol is None:
            raise RecordNotFoundError("post", post_id)
        self._kols[kol.id] = replace(kol, posts=tuple(p for p in kol.posts if p.id != post_id))

    async def create_documents(self, kol_id: int, docs: Sequence[DocumentCreate]) -> list[Document]:
        kol = self._get(kol_id)
        new_docs = self._build_documents(kol_id, docs)
        self._kols[kol_id] = replace(kol, documents=kol.documents + new_docs)
        return list(new_docs)

    async def delete_document(self, document_id: int) -> None:
        kol = self._find_child("documents", document_id)
        if kol is None:
            raise RecordNotFoundError("document", document_id)
        self._kols[kol.id] = replace(kol, documents=tuple(d for d in kol.documents if d.id != document_id))


# ------------------------------ Remote source ------------------------------ #

def platform_to_link(row: KOLPlatform) -> PlatformLink:
    return PlatformLink(
        id=row.id,
        kol_id=row.kol_id,
        platform=row.platform,
        profile_url=row.profile_url or "",
        follower_count=row.follower_count,
        username=row.username,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def post_to_snapshot(row: ContentPost) -> Post:
    return Post(
        id=row.id,
        kol_id=row.kol_id,
        platform=row.platform,
        url=row.url,
        title=row.title,
        posted_date=row.posted_date,
        impressions=row.impressions,
        engagement=row.engagement,
        clicks=row.clicks,
        cost=row.cost,
        notes=row.notes,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def document_to_snapshot(row: KOLDocument) -> Document:
    return Document(
        id=row.id,
        kol_id=row.kol_id,
        name=row.name,
        type=row.type,
        size=row.file_size,
        url=row.file_url,
        file_path=row.file_path,
        notes=row.notes,
        uploaded_at=row.created_at,
    )


def kol_to_snapshot(row: KOLProfile) -> KOLSnapshot:
    """Convert a profile with loaded children. Children are ordered by id."""
    return KOLSnapshot(
        id=row.id,
        name=row.name,
        status=row.status,
        email=row.email,
        telegram_handle=row.telegram_handle,
        notes=row.notes,
        kyc_completed=bool(row.kyc_completed),
        created_at=row.created_at,
        updated_at=row.updated_at,
        platforms=tuple(platform_to_link(p) for p in sorted(row.platforms, key=attrgetter("id"))),
        posts=tuple(post_to_snapshot(p) for p in sorted(row.posts, key=attrgetter("id"))),
        documents=tuple(document_to_snapshot(d) for d in sorted(row.documents, key=attrgetter("id"))),
    )


def _document_row(kol_id: int, doc: DocumentCreate) -> KOLDocument:
    return KOLDocument(
        kol_id=kol_id,
        name=doc.name,
        type=doc.resolved_type(),
        file_size=doc.size,
        file_url=doc.url,
        file_path=doc.file_path,
        notes=doc.notes,
    )


def _platform_rows(kol_id: int, links: Iterable[PlatformLinkCreate]) -> list[KOLPlatform]:
    return [KOLPlatform(kol_id=kol_id, **link.model_dump()) for link in links]


class RemoteDataSource(DataSource):
    """SQLAlchemy-backed store. ``session_factory`` is usually a ``sessionmaker``."""

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    @property
    def is_demo(self) -> bool:
        return False

    def _roster_query(self, session: Session):
        # One batch: profiles, then one IN query per child table
        return session.query(KOLProfile).options(
            selectinload(KOLProfile.platforms),
            selectinload(KOLProfile.posts),
            selectinload(KOLProfile.documents),
        )

    def _load_snapshot(self, session: Session, kol_id: int) -> KOLSnapshot:
        row = self._roster_query(session).filter(KOLProfile.id == kol_id).first()
        if row is None:
            raise RecordNotFoundError("kol", kol_id)
        return kol_to_snapshot(row)

    def _require_kol(self, session: Session, kol_id: int) -> KOLProfile:
        profile = session.get(KOLProfile, kol_id)
        if profile is None:
            raise RecordNotFoundError("kol", kol_id)
        return profile

    async def fetch_roster(self) -> list[KOLSnapshot]:
        with self._session_factory() as session:
            rows = self._roster_query(session).order_by(
                KOLProfile.created_at.desc(), KOLProfile.id.desc()
            ).all()
            return [kol_to_snapshot(row) for row in rows]

    async def create_kol(self, data: KOLCreate) -> KOLSnapshot:
        with self._session_factory() as session:
            profile = KOLProfile(**data.model_dump(exclude={"platforms", "documents"}))
            session.add(profile)
            session.commit()
            kol_id = profile.id

            try:
                if data.platforms:
                    session.add_all(_platform_rows(kol_id, data.platforms))
                    session.commit()
                if data.documents:
                    session.add_all([_document_row(kol_id, doc) for doc in data.documents])
                    session.commit()
            except Exception as e:
                session.rollback()
                logger.error(
                    "KOL children insert failed; profile left without children",
                    kol_id=kol_id,
                    error=str(e),
                    exc_info=True
                )
                raise

            return self._load_snapshot(session, kol_id)

    async def update_kol(self, kol_id: int, data: KOLUpdate) -> KOLSnapshot:
        with self._session_factory() as session:
            profile = self._require_kol(session, kol_id)
            for field, value in data.profile_fields().items():
                setattr(profile, field, value)
            if data.platforms is not None:
                # Wholesale replacement: delete every link, then insert the new set
                session.query(KOLPlatform).filter(KOLPlatform.kol_id == kol_id).delete()
                session.add_all(_platform_rows(kol_id, data.platforms))
            session.commit()
            return self._load_snapshot(session, kol_id)

    async def delete_kol(self, kol_id: int) -> None:
        with self._session_factory() as session:
            profile = self._require_kol(session, kol_id)
            session.delete(profile)
            session.commit()

    async def replace_platforms(self, kol_id: int, links: Sequence[PlatformLinkCreate]) -> list[PlatformLink]:
        with self._session_factory() as session:
            self._require_kol(session, kol_id)
            session.query(KOLPlatform).filter(KOLPlatform.kol_id == kol_id).delete()
            rows = _platform_rows(kol_id, links)
            session.add_all(rows)
            session.commit()
            return [platform_to_link(row) for row in rows]

    async def create_post(self, kol_id: int, data: PostCreate) -> Post:
        with self._session_factory() as session:
            self._require_kol(session, kol_id)
            row = ContentPost(kol_id=kol_id, **data.model_dump())
            session.add(row)
            session.commit()
            session.refresh(row)
            return post_to_snapshot(row)

    async def update_post(self, post_id: int, data: PostUpdate) -> Post:
        with self._session_factory() as session:
            row = session.get(ContentPost, post_id)
            if row is None:
                raise RecordNotFoundError("post", post_id)
            for field, value in data.model_dump(exclude_unset=True).items():
                setattr(row, field, value)
            session.commit()
            session.refresh(row)
            return post_to_snapshot(row)

    async def delete_post(self, post_id: int) -> None:
        with self._session_factory() as session:
            row = session.get(ContentPost, post_id)
            if row is None:
                raise RecordNotFoundError("post", post_id)
            session.delete(row)
            session.commit()

    async def create_documents(self, kol_id: int, docs: Sequence[DocumentCreate]) -> list[Document]:
        with self._session_factory() as session:
            self._require_kol(session, kol_id)
            rows = [_document_row(kol_id, doc) for doc in docs]
            session.add_all(rows)
            session.commit()
            return [document_to_snapshot(row) for row in rows]

    async def delete_document(self, document_id: int) -> None:
        with self._session_factory() as session:
            row = session.get(KOLDocument, document_id)
            if row is None:
                raise RecordNotFoundError("document", document_id)
            session.delete(row)
            session.commit()


def create_data_source(
    mode: Optional[str] = None,
    session_factory: Optional[Callable[[], Session]] = None,
) -> DataSource:
    """Build the data source for ``mode`` (defaults to ``DATA_SOURCE_MODE``)."""
    mode = (mode or DATA_SOURCE_MODE).strip().lower()
    if mode == "static":
        from .demo_roster import DEMO_ROSTER

        logger.warning("Running in demo mode; roster changes will not persist across restarts")
        return StaticDataSource(DEMO_ROSTER if STATIC_SEED_DEMO else None)
    if mode == "remote":
        return RemoteDataSource(session_factory or SessionLocal)
    raise ValueError(f"Unknown data source mode: {mode!r} (expected 'static' or 'remote')")


__all__ = [
    "DataSourceError",
    "RecordNotFoundError",
    "DataSource",
    "StaticDataSource",
    "RemoteDataSource",
    "create_data_source",
    "kol_to_snapshot",
    "post_to_snapshot",
    "platform_to_link",
    "document_to_snapshot",
]
