import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from tableside.core.config import (
    ADMIN_EMAIL,
    ADMIN_FULL_NAME,
    ADMIN_PASSWORD,
    ADMIN_USERNAME,
    CORS_ORIGINS,
    DATABASE_URL,
    RESET_ADMIN_PASSWORD,
    SEED_DEFAULT_MENU,
    UPLOADS_DIR,
    UPLOADS_URL_PREFIX,
)
from tableside.core.database import Base, SessionLocal, engine
from tableside.core.errors import register_exception_handlers
from tableside.core.logging_setup import configure_logging
from tableside.core.startup_checks import (
    apply_migrations,
    ensure_migrations_applied,
    validate_database_environment,
    validate_session_secret,
)
from tableside.middleware.admin_session import AdminSessionMiddleware
from tableside.middleware.observability import ObservabilityMiddleware
import tableside.models  # registers tables before create_all
import tableside.services.event_handlers  # subscribes order event handlers

from tableside.services.admin_bootstrap import ensure_admin_users_table, find_admin, upsert_admin_user
from tableside.services.menu import seed_default_menu
from tableside.routers.auth import router as auth_router
from tableside.routers.client_config import router as client_config_router
from tableside.routers.menu import router as menu_router
from tableside.routers.orders import router as orders_router

configure_logging()

logger = logging.getLogger(__name__)
BOOTSTRAP_PREFIX = "[ADMIN_BOOTSTRAP]"
REPO_ROOT = Path(__file__).resolve().parents[1]
ALEMBIC_CONFIG_PATH = Path(os.getenv("ALEMBIC_CONFIG", str(REPO_ROOT / "alembic.ini")))


@asynccontextmanager
async def lifespan(_: FastAPI):
    _startup_tasks()
    yield


app = FastAPI(
    title="Tableside Ordering API",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(ObservabilityMiddleware)
app.add_middleware(AdminSessionMiddleware)
register_exception_handlers(app)

Path(UPLOADS_DIR).mkdir(parents=True, exist_ok=True)
app.mount(UPLOADS_URL_PREFIX, StaticFiles(directory=str(UPLOADS_DIR)), name="uploads")


def _bootstrap_initial_admin() -> None:
    if not ADMIN_PASSWORD:
        logger.warning("%s skipped: configure ADMIN_PASSWORD.", BOOTSTRAP_PREFIX)
        return

    db = SessionLocal()
    try:
        existing = find_admin(db, ADMIN_USERNAME)
        if existing and not RESET_ADMIN_PASSWORD:
            logger.info("%s exists id=%s username=%s", BOOTSTRAP_PREFIX, existing.id, existing.username)
            return

        admin, created = upsert_admin_user(
            db,
            username=ADMIN_USERNAME,
            email=ADMIN_EMAIL,
            full_name=ADMIN_FULL_NAME,
            password=ADMIN_PASSWORD,
        )
        action = "created" if created else "password reset"
        logger.info("%s %s id=%s username=%s", BOOTSTRAP_PREFIX, action, admin.id, admin.username)
    except Exception:
        logger.exception("%s ERROR bootstrap failed", BOOTSTRAP_PREFIX)
        raise
    finally:
        db.close()


def _seed_menu() -> None:
    if not SEED_DEFAULT_MENU:
        return
    db = SessionLocal()
    try:
        seed_default_menu(db)
    finally:
        db.close()


def _startup_tasks() -> None:
    try:
        validate_database_environment()
        validate_session_secret()
        if DATABASE_URL.startswith("sqlite"):
            Base.metadata.create_all(bind=engine)
        else:
            apply_migrations(alembic_config_path=ALEMBIC_CONFIG_PATH)
            ensure_migrations_applied(engine=engine, alembic_config_path=ALEMBIC_CONFIG_PATH)
        ensure_admin_users_table(engine)
        _bootstrap_initial_admin()
        _seed_menu()
    except Exception:
        logger.exception("%s ERROR startup failed", BOOTSTRAP_PREFIX)
        raise


app.include_router(auth_router)
app.include_router(menu_router)
app.include_router(orders_router)
app.include_router(client_config_router)


@app.get("/")
def root():
    return {"status": "ok"}


@app.get("/health")
def health():
    return {"status": "healthy"}
