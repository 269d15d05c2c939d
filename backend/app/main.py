import asyncio
import logging
import os
import pathlib
import secrets
from contextlib import asynccontextmanager
from urllib.parse import urlparse

from alembic import command as alembic_command
from alembic.config import Config as AlembicConfig
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.rate_limit import limiter
from app.routers import allocations, auth, cards, catalog
from app.services import session_events
from app.services.catalog_loader import load_catalog, reload_if_changed

logger = logging.getLogger(__name__)


def _get_alembic_config() -> AlembicConfig:
    """Build an AlembicConfig pointing at our alembic/ directory."""
    ini_path = pathlib.Path(__file__).resolve().parent.parent / "alembic.ini"
    cfg = AlembicConfig(str(ini_path))
    cfg.set_main_option("script_location", str(ini_path.parent / "alembic"))
    return cfg


def _run_alembic_migrations() -> None:
    alembic_command.upgrade(_get_alembic_config(), "head")


def _ensure_secret_key() -> None:
    """Replace the insecure default SECRET_KEY with a persisted random one."""
    if not settings.secret_key.startswith("change-this"):
        return
    secret_file = pathlib.Path(settings.secret_key_file)
    if secret_file.exists():
        settings.secret_key = secret_file.read_text().strip()
        logger.info("Loaded SECRET_KEY from %s", secret_file)
        return
    settings.secret_key = secrets.token_urlsafe(32)
    try:
        secret_file.parent.mkdir(parents=True, exist_ok=True)
        secret_file.write_text(settings.secret_key)
        os.chmod(secret_file, 0o600)
        logger.info("Generated new SECRET_KEY and saved to %s", secret_file)
    except OSError:
        logger.warning("Could not persist SECRET_KEY to %s; tokens will not survive restarts", secret_file)


async def _catalog_reload_loop(interval: int) -> None:
    """Background task that reloads the card catalog when its file changes."""
    while True:
        await asyncio.sleep(interval)
        try:
            reload_if_changed()
        except Exception:
            logger.exception("Error during catalog hot-reload")


@asynccontextmanager
async def lifespan(app: FastAPI):
    _ensure_secret_key()
    _run_alembic_migrations()
    load_catalog()
    unsubscribe = session_events.subscribe(session_events.log_session_event)

    reload_task = None
    if settings.catalog_reload_interval > 0:
        reload_task = asyncio.create_task(_catalog_reload_loop(settings.catalog_reload_interval))
        logger.info("Catalog hot-reload enabled (interval=%ds)", settings.catalog_reload_interval)

    yield

    unsubscribe()
    if reload_task:
        reload_task.cancel()
        try:
            await reload_task
        except asyncio.CancelledError:
            pass


app = FastAPI(title="cardsplit API", version="1.0.0", lifespan=lifespan)
app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(status_code=429, content={"detail": "Too many requests. Please try again later."})


def _cors_kwargs() -> dict:
    """Origins for CORSMiddleware from the comma-separated ALLOWED_ORIGINS."""
    raw = settings.allowed_origins.strip()
    if raw in ("", "*"):
        # Credentials need a concrete origin, so echo the caller's back
        return {"allow_origin_regex": ".*"}
    origins = []
    for candidate in filter(None, (o.strip() for o in raw.split(","))):
        parsed = urlparse(candidate)
        if not (parsed.scheme and parsed.netloc):
            logger.warning("Ignoring ALLOWED_ORIGINS entry without scheme and host: %s", candidate)
            continue
        origins.append(candidate)
    return {"allow_origins": origins}


app.add_middleware(
    CORSMiddleware,
    **_cors_kwargs(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(auth.router)
app.include_router(cards.router)
app.include_router(catalog.router)
app.include_router(allocations.router)


SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
}


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers.update(SECURITY_HEADERS)
    return response


@app.get("/api/health")
def health(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Health check failed")
        return JSONResponse(status_code=503, content={"status": "error", "detail": "Database unreachable"})
    return {"status": "ok"}
