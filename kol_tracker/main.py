"""
FastAPI application main module.
Middleware, error handling, roster service startup and health checks.
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import time
import uuid
import os
from contextlib import asynccontextmanager
from sqlalchemy import text
from kol_tracker.api.v1 import api_router
from kol_tracker.utils import setup_logging, get_logger
from kol_tracker.database import engine, Base, SessionLocal
from kol_tracker.services.data_sources import create_data_source
from kol_tracker.services.roster_service import RosterService
import kol_tracker.models.db  # noqa: F401  (register tables on Base.metadata)

# Setup logging before creating the app
setup_logging(
    log_level=os.getenv("LOG_LEVEL", "INFO"),
    log_file=os.getenv("LOG_FILE", "logs/app.log"),
    enable_console=True
)

logger = get_logger(__name__)

SERVICE_NAME = "kol-tracker"
SERVICE_VERSION = "1.0.0"


async def build_roster_service(mode: str | None = None) -> RosterService:
    """Create the configured data source, wrap it in a RosterService and load the roster."""
    service = RosterService(create_data_source(mode, session_factory=SessionLocal))
    await service.load()
    return service


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    logger.info("Application startup initiated")

    try:
        logger.info("Creating database tables")
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully")

        # Tests may install their own service before startup
        if getattr(app.state, "roster_service", None) is None:
            app.state.roster_service = await build_roster_service()
        logger.info(
            "Roster service ready",
            kol_count=len(app.state.roster_service.roster),
            is_demo=app.state.roster_service.is_demo
        )

        logger.info("Application startup completed successfully")
        yield
    except Exception as e:  # pragma: no cover
        logger.error("Application startup failed", error=str(e), exc_info=True)
        raise
    finally:
        logger.info("Application shutdown completed")

app = FastAPI(
    title="KOL Tracker",
    description="""
    Influencer (KOL) roster tracking backend.

    ## Features
    * **Roster management** - KOLs, platform links, content posts and documents
    * **Derived metrics** - Followers, impressions, spend and blended CPM per KOL
    * **Roster analytics** - Budget by platform and top performers by CPM
    * **Spreadsheet import** - Row or CSV import with an explicit column mapping
    * **Budget tracker** - Invoices with paid / pending / overdue totals

    ## Data source
    `DATA_SOURCE_MODE=remote` persists through SQLAlchemy (`DATABASE_URL`).
    `DATA_SOURCE_MODE=static` serves a demo roster; changes are lost on restart.
    """,
    version=SERVICE_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/api/v1/openapi.json",
    lifespan=lifespan,
)

# CORS middleware - configure appropriately for production
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=1000)

# Request ID and request/response logging middleware
@app.middleware("http")
async def add_request_context_and_logging(request: Request, call_next):
    """
    Add request ID, timing, and request/response logging.
    """
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id
    request.state.start_time = time.time()

    logger.info(
        "Request started",
        method=request.method,
        url=str(request.url),
        user_agent=request.headers.get("User-Agent"),
        remote_addr=request.client.host if request.client else "unknown",
        request_id=request_id
    )

    response = await call_next(request)

    process_time = time.time() - request.state.start_time

    response.headers["X-Request-ID"] = request_id
    response.headers["X-Process-Time"] = str(round(process_time * 1000, 2))
    response.headers["X-Content-Type-Options"] = "nosniff"

    logger.info(
        "Request completed",
        method=request.method,
        url=str(request.url),
        status_code=response.status_code,
        process_time_ms=round(process_time * 1000, 2),
        request_id=request_id
    )

    return response

# Custom exception handlers
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors."""
    # ctx may carry exception objects that are not JSON serializable
    errors = [{k: v for k, v in err.items() if k != "ctx"} for err in exc.errors()]
    request_id = getattr(request.state, "request_id", "unknown")

    logger.warning(
        "Request validation failed",
        errors=errors,
        request_id=request_id,
        url=str(request.url),
        method=request.method
    )

    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "message": "Request validation failed",
            "details": errors,
            "request_id": request_id
        }
    )

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions."""
    request_id = getattr(request.state, "request_id", "unknown")

    logger.warning(
        "HTTP exception",
        status_code=exc.status_code,
        detail=exc.detail,
        request_id=request_id,
        url=str(request.url),
        method=request.method
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "message": exc.detail,
            "request_id": request_id
        }
    )

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    request_id = getattr(request.state, "request_id", "unknown")

    logger.error(
        "Unhandled exception",
        error=str(exc),
        error_type=type(exc).__name__,
        request_id=request_id,
        url=str(request.url),
        method=request.method,
        exc_info=True
    )

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": "Internal server error",
            "request_id": request_id
        }
    )

# Health check endpoints
@app.get("/health", tags=["health"], summary="Basic health check")
async def health_check():
    """Basic health check endpoint for load balancers."""
    service = getattr(app.state, "roster_service", None)
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "timestamp": time.time(),
        "demo_mode": service.is_demo if service is not None else None,
    }

@app.get("/health/detailed", tags=["health"], summary="Detailed health check")
async def detailed_health_check():
    """Detailed health check with database and roster status."""
    health_status = {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "timestamp": time.time(),
        "checks": {}
    }

    # Database check
    try:
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
        finally:
            db.close()
        health_status["checks"]["database"] = "healthy"
    except Exception as e:
        health_status["checks"]["database"] = f"unhealthy: {str(e)}"
        health_status["status"] = "degraded"

    # Roster snapshot
    service = getattr(app.state, "roster_service", None)
    if service is None or not service.loaded:
        health_status["checks"]["roster"] = "not loaded"
        health_status["status"] = "degraded"
    else:
        health_status["checks"]["roster"] = {
            "kol_count": len(service.roster),
            "data_source": type(service.data_source).__name__,
            "demo_mode": service.is_demo,
        }

    return health_status

# API Documentation root
@app.get("/", tags=["root"])
async def root():
    """API root endpoint with basic information."""
    return {
        "message": "KOL Tracker API",
        "version": SERVICE_VERSION,
        "documentation": "/docs",
        "health_check": "/health",
        "api_base": "/api/v1"
    }

# Include API router with version prefix
app.include_router(api_router, prefix="/api/v1")

# Development server configuration
if __name__ == "__main__":
    import uvicorn

    logger.info("Starting development server")

    uvicorn.run(
        "kol_tracker.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=True,
        reload_dirs=["kol_tracker"],
        log_level="info",
        access_log=True
    )
