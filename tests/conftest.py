import os
import tempfile

os.environ["ENV"] = "test"
os.environ.setdefault("SESSION_SECRET", "test-session-secret")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("UPLOADS_DIR", tempfile.mkdtemp(prefix="tableside-uploads-"))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import tableside.models  # noqa: E402,F401
from tableside.core.config import UPLOADS_DIR  # noqa: E402
from tableside.core.database import Base, get_db  # noqa: E402
from tableside.services.admin_bootstrap import upsert_admin_user  # noqa: E402
from tableside.services.uploads import ImageStore, get_image_store  # noqa: E402

ADMIN_PASSWORD = "admin123"

PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
    b"\x08\x06\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\x9cc\xf8\x0f"
    b"\x00\x00\x01\x01\x00\x05\x18\xd8N\x00\x00\x00\x00IEND\xaeB`\x82"
)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def image_store():
    return ImageStore(directory=UPLOADS_DIR)


@pytest.fixture
def app(monkeypatch, session_factory, image_store):
    from tableside import main

    monkeypatch.setattr(main, "_startup_tasks", lambda: None)

    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    main.app.dependency_overrides[get_db] = _get_db
    main.app.dependency_overrides[get_image_store] = lambda: image_store
    yield main.app
    main.app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_user(db_session):
    admin, _ = upsert_admin_user(
        db_session,
        username="admin",
        email="admin@restaurant.com",
        full_name="Administrator",
        password=ADMIN_PASSWORD,
    )
    return admin


@pytest.fixture
def admin_client(client, admin_user):
    response = client.post("/api/auth/login", json={"username": "admin", "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return client


@pytest.fixture
def png_bytes():
    return PNG_BYTES
