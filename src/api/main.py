import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.adapters.sqlite.migrator import SQLiteMigrator
from src.api.deps import (
    get_auth_service,
    get_live_sync,
    get_rules,
    get_session_context,
    get_settings,
)
from src.api.errors import register_error_handlers
from src.components.bootstrap import BootstrapInput, run_bootstrap

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()
    settings.warn_if_insecure()

    # Load rules and prepare the database on startup (fail-fast)
    try:
        rules = get_rules()
        applied = SQLiteMigrator(settings.db_path).run_migrations()
    except Exception:
        logger.critical("Startup failed", exc_info=True)
        raise
    logger.info(
        "Rules loaded from %s; %d migration(s) applied", settings.rules_path, len(applied)
    )

    result = run_bootstrap(
        BootstrapInput(
            bootstrap_email=settings.bootstrap_email,
            bootstrap_password=settings.bootstrap_password,
        ),
        get_auth_service(),
        rules.owner,
    )
    if result.created:
        logger.info("Owner account bootstrapped from environment")
    elif not result.success:
        for error in result.errors:
            logger.error("Bootstrap: %s", error.message)
    else:
        logger.info("Bootstrap skipped: %s", result.skipped_reason)

    session_context = get_session_context()
    session_context.attach()
    live_sync = get_live_sync()
    await live_sync.start()

    yield

    await live_sync.stop()
    session_context.detach()


app = FastAPI(
    title="Folio Sync API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

register_error_handlers(app)

# --- Routers ---
from src.api.routes import admin, auth, owner, public, storage, uploads  # noqa: E402

app.include_router(owner.router, prefix="/api/owner", tags=["Owner"])
app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(public.router, prefix="/api/public", tags=["Public"])
app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])
app.include_router(uploads.router, prefix="/api/admin/uploads", tags=["Uploads"])
app.include_router(storage.router, prefix="/storage", tags=["Storage"])


# CORS (Allow Frontend)
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "service": "api"}
