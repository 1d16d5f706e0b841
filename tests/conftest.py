"""
Shared fixtures: in-memory SQLite (one shared connection), the FastAPI app
with get_db overridden, seeded companies and an admin.
"""
import os
import tempfile

# must be set before industrin modules read them
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENABLE_CREATE_ALL", "0")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="industrin-uploads-"))
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from industrin.core.auth import get_db
from industrin.core.rbac import Principal, Role
from industrin.core.security import create_access_token, get_password_hash
from industrin.db.session import (
    enable_sqlite_foreign_keys,
    json_dumps,
    register_sqlite_functions,
)
from industrin.main import app
from industrin.models import Base
from industrin.models.admin_user import AdminUser
from industrin.models.company import Company
from industrin.services import uploads
from tests.fixtures.directory_fixtures import ADMIN_PASSWORD, ADMIN_USERNAME, SAMPLE_COMPANIES

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
    json_serializer=json_dumps,
)
event.listen(engine, "connect", enable_sqlite_foreign_keys)
event.listen(engine, "connect", register_sqlite_functions)
TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    target = tmp_path / "uploads"
    monkeypatch.setattr(uploads, "UPLOAD_DIR", str(target))
    return target


@pytest.fixture
def companies(db):
    """slug -> Company"""
    rows = {}
    for data in SAMPLE_COMPANIES:
        c = Company(**data)
        db.add(c)
        rows[data["slug"]] = c
    db.commit()
    for c in rows.values():
        db.refresh(c)
    return rows


@pytest.fixture
def admin_user(db):
    admin = AdminUser(
        username=ADMIN_USERNAME,
        hashed_password=get_password_hash(ADMIN_PASSWORD),
        role="super_admin",
        is_super_admin=True,
        is_active=True,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin


@pytest.fixture
def admin_principal(admin_user):
    return Principal(
        role=Role.ADMIN,
        subject=admin_user.id,
        display_name=admin_user.username,
        is_super_admin=True,
        source="session",
    )


@pytest.fixture
def admin_headers(admin_user):
    token = create_access_token({"sub": admin_user.id, "role": Role.ADMIN.value})
    return {"Authorization": f"Bearer {token}"}

