"""
Pytest configuration and fixtures for backend tests.
"""

import os
import sys
import tempfile
from datetime import datetime
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Set test environment variables before importing config
os.environ["ENVIRONMENT"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["CORS_ORIGINS"] = '["http://localhost:3000"]'
os.environ["ADMIN_EMAIL"] = "admin@example.com"
os.environ["ADMIN_PASSWORD"] = "TestAdmin123!"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="citicare-uploads-")
os.environ["LOG_DIR"] = tempfile.mkdtemp(prefix="citicare-logs-")

from authentication.auth import create_user_token, get_password_hash  # noqa: E402
from models.config import settings  # noqa: E402
from repositories.database import Base, get_db  # noqa: E402
import repositories.db_models as db_models  # noqa: E402

# Smallest valid PNG: 1x1 transparent pixel
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6300010000050001"
    "0d0a2db40000000049454e44ae426082"
)

TEST_PASSWORD = "password123"

# Test database engine (in-memory SQLite)
TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# bcrypt is slow; hash the shared test password once
_TEST_PASSWORD_HASH = get_password_hash(TEST_PASSWORD)


def _detect_mime(content: bytes, mime: bool = False) -> str:
    if content.startswith(b"\x89PNG"):
        return "image/png"
    if content.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    return "text/plain"


@pytest.fixture
def fake_magic():
    """Replace python-magic with a signature sniffer so tests need no libmagic."""
    magic_module = MagicMock()
    magic_module.from_buffer.side_effect = _detect_mime
    with patch.dict("sys.modules", {"magic": magic_module}):
        yield magic_module


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    """Give every test its own upload directory."""
    directory = tmp_path / "uploads"
    directory.mkdir()
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(directory))
    return directory


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh in-memory database session for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with overridden database dependency."""
    from main import app
    from helpers.rate_limiter import limiter

    # Reset rate limiter storage before each test to prevent rate limit errors
    limiter.reset()

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_user(
    db,
    email: str,
    full_name: str,
    role: db_models.UserRole = db_models.UserRole.CITIZEN,
    department: db_models.Department | None = None,
) -> db_models.User:
    user = db_models.User(
        email=email,
        full_name=full_name,
        hashed_password=_TEST_PASSWORD_HASH,
        role=role,
        department_id=department.id if department else None,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_header(user: db_models.User) -> dict:
    return {"Authorization": f"Bearer {create_user_token(user)}"}


@pytest.fixture
def headers_for():
    """Bearer headers for a user: `headers_for(officer)`."""
    return auth_header


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES


@pytest.fixture
def user_factory(db_session):
    """Create extra users: `user_factory("x@example.com", "X", role=...)`."""

    def _make(email, full_name, role=db_models.UserRole.CITIZEN, department=None):
        return make_user(db_session, email, full_name, role, department)

    return _make


@pytest.fixture
def public_works(db_session) -> db_models.Department:
    department = db_models.Department(
        name="Public Works", code="PWD", description="Roads, water, sewage"
    )
    db_session.add(department)
    db_session.commit()
    db_session.refresh(department)
    return department


@pytest.fixture
def environment_dept(db_session) -> db_models.Department:
    department = db_models.Department(
        name="Environment", code="ENV", description="Garbage, parks"
    )
    db_session.add(department)
    db_session.commit()
    db_session.refresh(department)
    return department


@pytest.fixture
def citizen(db_session) -> db_models.User:
    return make_user(db_session, "citizen@example.com", "Asha Citizen")


@pytest.fixture
def other_citizen(db_session) -> db_models.User:
    return make_user(db_session, "neighbour@example.com", "Ravi Neighbour")


@pytest.fixture
def admin_user(db_session) -> db_models.User:
    return make_user(
        db_session, "boss@example.com", "City Admin", role=db_models.UserRole.ADMIN
    )


@pytest.fixture
def officer(db_session, public_works) -> db_models.User:
    return make_user(
        db_session,
        "officer@example.com",
        "Field Officer",
        role=db_models.UserRole.OFFICER,
        department=public_works,
    )


@pytest.fixture
def department_head(db_session, public_works) -> db_models.User:
    return make_user(
        db_session,
        "head@example.com",
        "Works Head",
        role=db_models.UserRole.DEPARTMENT_HEAD,
        department=public_works,
    )


@pytest.fixture
def env_officer(db_session, environment_dept) -> db_models.User:
    return make_user(
        db_session,
        "env.officer@example.com",
        "Parks Officer",
        role=db_models.UserRole.OFFICER,
        department=environment_dept,
    )


@pytest.fixture
def taxonomy(db_session):
    """Two zones, each with a ward, each ward with an area."""
    central = db_models.Zone(name="Central Zone", code="CZ")
    west = db_models.Zone(name="West Zone", code="WZ")
    db_session.add_all([central, west])
    db_session.flush()

    nanpura = db_models.Ward(name="Nanpura", code="W01", zone_id=central.id)
    adajan = db_models.Ward(name="Adajan", code="W08", zone_id=west.id)
    db_session.add_all([nanpura, adajan])
    db_session.flush()

    ring_road = db_models.Area(name="Ring Road", code="A02", ward_id=nanpura.id)
    hazira_road = db_models.Area(name="Hazira Road", code="A13", ward_id=adajan.id)
    db_session.add_all([ring_road, hazira_road])
    db_session.commit()

    return {
        "central": central,
        "west": west,
        "nanpura": nanpura,
        "adajan": adajan,
        "ring_road": ring_road,
        "hazira_road": hazira_road,
    }


@pytest.fixture
def make_complaint(db_session):
    """Factory inserting complaints directly, bypassing numbering and uploads."""
    counter = {"n": 0}

    def _make(
        reporter: db_models.User | None,
        department: db_models.Department | None = None,
        **fields,
    ) -> db_models.Complaint:
        counter["n"] += 1
        defaults = {
            "complaint_number": f"CMP-2026-{90000 + counter['n']:05d}",
            "title": f"Pothole {counter['n']}",
            "description": "Deep pothole near the bus stop",
            "category": "roads",
            "user_id": reporter.id if reporter else None,
            "department_id": department.id if department else None,
        }
        defaults.update(fields)
        complaint = db_models.Complaint(**defaults)
        db_session.add(complaint)
        db_session.commit()
        db_session.refresh(complaint)
        return complaint

    return _make


@pytest.fixture
def accepted_complaint(make_complaint, citizen, public_works):
    """A complaint routed to Public Works that the department has accepted."""
    return make_complaint(
        citizen,
        public_works,
        acceptance=db_models.AcceptanceDecision.ACCEPTED,
        accepted_at=datetime(2026, 1, 5, 10, 0),
    )
