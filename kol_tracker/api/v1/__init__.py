"""
API v1 router initialization and setup.
"""
from fastapi import APIRouter
from .endpoints import kols, posts, documents, analytics, imports, invoices

api_router = APIRouter()

api_router.include_router(
    kols.router,
    prefix="/kols",
    tags=["kols"]
)

api_router.include_router(
    posts.router,
    prefix="/kols/{kol_id}/posts",
    tags=["posts"]
)

api_router.include_router(
    documents.router,
    prefix="/kols/{kol_id}/documents",
    tags=["documents"]
)

api_router.include_router(
    analytics.router,
    prefix="/analytics",
    tags=["analytics"]
)

api_router.include_router(
    imports.router,
    prefix="/imports",
    tags=["imports"]
)

api_router.include_router(
    invoices.router,
    prefix="/invoices",
    tags=["invoices"]
)
