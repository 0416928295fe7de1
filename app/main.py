# app/main.py
from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI, Request

from app.core.config import get_settings
from app.core.errors import register_exception_handlers
from app.core.storage_utils import get_storage
from app.database import create_db_and_tables

# Import models so SQLModel metadata is populated before create_all()
from app.models import user as _user_models  # noqa: F401
from app.models import club as _club_models  # noqa: F401
from app.models import event as _event_models  # noqa: F401
from app.models import booking as _booking_models  # noqa: F401


# Routers
from app.routers.auth import router as auth_router
from app.routers.clubs import router as clubs_router
from app.routers.events import router as events_router
from app.routers.bookings import router as bookings_router
from app.routers.scanner import router as scanner_router
from app.routers.upload import router as upload_router

settings = get_settings()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Verify DB connectivity and create tables.
      - Check the storage bucket (failure is logged, not fatal).
      - Warn when running with the fallback JWT secret.
    """
    logger.info("🔄 Startup: Connecting to database...")
    try:
        create_db_and_tables()
        logger.info("✅ Startup: DB connection OK, tables verified.")
    except Exception as e:
        logger.error(f"❌ Startup: DB connection FAILED: {e}")
        raise

    logger.info(f"🔗 Startup: Checking storage bucket '{settings.STORAGE_BUCKET}'...")
    if get_storage().check_bucket():
        logger.info("✅ Startup: storage bucket reachable.")
    else:
        logger.warning("⚠️ Startup: storage bucket unreachable; uploads will fail.")

    if settings.uses_default_jwt_secret:
        logger.warning("⚠️ Startup: JWT_SECRET is not set, using the insecure fallback.")
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
)

register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info(f"📥 {request.method} {request.url.path}")
    return await call_next(request)


app.include_router(auth_router, prefix=settings.API_PREFIX)
app.include_router(clubs_router, prefix=settings.API_PREFIX)
app.include_router(events_router, prefix=settings.API_PREFIX)
app.include_router(bookings_router, prefix=settings.API_PREFIX)
app.include_router(scanner_router, prefix=settings.API_PREFIX)
app.include_router(upload_router, prefix=settings.API_PREFIX)


@app.get("/")
def root():
    """Service banner."""
    return {"status": "ok", "service": "afterhour-backend"}


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}
