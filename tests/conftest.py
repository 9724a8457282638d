import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("SERPAPI_KEY", "test-serpapi-key")

from dataclasses import dataclass  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from jobtrack.database import Base, get_db  # noqa: E402
from jobtrack.dependencies import get_current_admin, get_current_user  # noqa: E402
from jobtrack.main import app  # noqa: E402


@dataclass
class StubUser:
    id: str = "user-1"
    email: str = "user@example.com"
    name: str | None = "Test User"
    is_admin: bool = False
    is_active: bool = True
    password_hash: str = "hashed-password"
    email_notifications: bool = True
    auto_archive_old_apps: bool = False
    show_archived_apps: bool = False


@pytest.fixture
def stub_user() -> StubUser:
    return StubUser()


@pytest.fixture
def admin_user() -> StubUser:
    return StubUser(id="admin-1", email="admin@example.com", is_admin=True)


@pytest.fixture
def client(stub_user: StubUser):
    def _db_override():
        yield object()

    app.dependency_overrides[get_db] = _db_override
    app.dependency_overrides[get_current_user] = lambda: stub_user
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_client(admin_user: StubUser):
    def _db_override():
        yield object()

    app.dependency_overrides[get_db] = _db_override
    app.dependency_overrides[get_current_user] = lambda: admin_user
    app.dependency_overrides[get_current_admin] = lambda: admin_user
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def db_session():
    """Real in-memory SQLite session with foreign keys enforced."""
    import jobtrack.models  # noqa: F401

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_fks(dbapi_conn, _record):
        dbapi_conn.execute("PRAGMA foreign_keys=ON")

    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine, autoflush=False, autocommit=False)()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def make_user(db_session):
    from jobtrack.models.user import User

    def _make(user_id: str = "u1", email: str | None = None, is_admin: bool = False):
        user = User(
            id=user_id,
            email=email or f"{user_id}@example.com",
            password_hash="x",
            is_admin=is_admin,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make
