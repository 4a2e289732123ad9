import asyncio
import os
import secrets
import sys
from datetime import date
from pathlib import Path
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Ensure project root on sys.path so 'kol_tracker' resolves without an install
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from kol_tracker.main import app  # type: ignore
from kol_tracker.database import Base  # type: ignore
from kol_tracker.api import deps  # type: ignore
"""Pytest fixtures and factories.

Important: SQLAlchemy relationship configuration requires all model modules to be imported
before Base.metadata.create_all(), otherwise back_populates targets might not exist yet.
"""
from kol_tracker.models.db import KOLProfile, KOLPlatform, ContentPost, KOLDocument, Invoice  # noqa: F401
from kol_tracker.models.db.enums import SocialPlatform, DocumentType
from kol_tracker.models.schemas.kols import KOLCreate
from kol_tracker.models.schemas.posts import PostCreate
from kol_tracker.models.snapshots import Document, KOLSnapshot, PlatformLink, Post
from kol_tracker.services.data_sources import RemoteDataSource
from kol_tracker.services.roster_service import RosterService

SQLALCHEMY_TEST_URL = "sqlite+pysqlite:///./test_kol_tracker.db"
engine = create_engine(
    SQLALCHEMY_TEST_URL,
    connect_args={"check_same_thread": False},
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Health checks open sessions directly; point them at the test database too
import kol_tracker.main as _main_mod  # noqa: E402
_main_mod.SessionLocal = TestingSessionLocal  # type: ignore

@pytest.fixture(scope="session", autouse=True)
def create_test_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    try:
        os.remove("test_kol_tracker.db")
    except OSError:
        pass

@pytest.fixture(autouse=True)
def _clean_tables(create_test_db):
    """Every test starts from empty tables (children first)."""
    yield
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())

@pytest.fixture()
def db_session():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()

# Override dependency
def _override_get_db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()

app.dependency_overrides[deps.get_db] = _override_get_db

@pytest.fixture()
def roster_service():
    """A RosterService over the test database, installed on app.state.

    The production app builds this in lifespan. Tests bypass lifespan so we replicate here.
    """
    service = RosterService(RemoteDataSource(TestingSessionLocal))
    asyncio.run(service.load())
    app.state.roster_service = service
    yield service
    app.state.roster_service = None

@pytest.fixture()
def client(roster_service):
    return TestClient(app)

# ---------- Data factory helpers ----------

@pytest.fixture()
def kol_factory(roster_service):
    """Create a KOL through the roster service (the same path as the API)."""
    def _create(name: str | None = None, platforms: list[dict] | None = None, **fields) -> KOLSnapshot:
        payload = {
            "name": name or f"KOL {secrets.token_hex(2)}",
            "platforms": platforms if platforms is not None else [
                {"platform": "youtube", "profile_url": "https://youtube.com/@test", "follower_count": 80000},
            ],
            **fields,
        }
        return asyncio.run(roster_service.add_kol(KOLCreate.model_validate(payload)))
    return _create

@pytest.fixture()
def post_factory(roster_service):
    def _create(kol_id: int, impressions: int = 10000, cost: float | None = 100.0, **fields) -> Post:
        payload = {
            "platform": "youtube",
            "url": f"https://youtube.com/watch?v={secrets.token_hex(4)}",
            "posted_date": date(2025, 10, 1),
            "impressions": impressions,
            "cost": cost,
            **fields,
        }
        return asyncio.run(roster_service.add_post(kol_id, PostCreate.model_validate(payload)))
    return _create

# ---------- Snapshot builders (pure, no database) ----------

@pytest.fixture()
def make_link():
    counter = iter(range(1, 10_000))
    def _make(platform: SocialPlatform | str = SocialPlatform.YOUTUBE, follower_count=0, kol_id: int = 1) -> PlatformLink:
        return PlatformLink(
            id=next(counter),
            kol_id=kol_id,
            platform=SocialPlatform(platform),
            follower_count=follower_count,
        )
    return _make

@pytest.fixture()
def make_post():
    counter = iter(range(1, 10_000))
    def _make(impressions=0, cost=None, kol_id: int = 1, post_id: int | None = None, **fields) -> Post:
        return Post(
            id=post_id if post_id is not None else next(counter),
            kol_id=kol_id,
            platform=fields.pop("platform", SocialPlatform.YOUTUBE),
            url=fields.pop("url", "https://youtube.com/watch?v=x"),
            impressions=impressions,
            cost=cost,
            **fields,
        )
    return _make

@pytest.fixture()
def make_document():
    counter = iter(range(1, 10_000))
    def _make(name: str = "contract.pdf", kol_id: int = 1, doc_type: DocumentType = DocumentType.CONTRACT) -> Document:
        return Document(id=next(counter), kol_id=kol_id, name=name, type=doc_type)
    return _make

@pytest.fixture()
def make_kol():
    def _make(kol_id: int, name: str | None = None, platforms=(), posts=(), documents=(), **fields) -> KOLSnapshot:
        return KOLSnapshot(
            id=kol_id,
            name=name or f"KOL {kol_id}",
            platforms=tuple(platforms),
            posts=tuple(posts),
            documents=tuple(documents),
            **fields,
        )
    return _make
