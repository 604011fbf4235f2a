"""Pytest fixtures for LexVault tests.

Provides reusable test fixtures for:
- Database session on a fresh in-memory SQLite database
- Test users with different system roles (ADMIN, MEMBER)
- A document owned by a MEMBER
- Authenticated test clients with JWT tokens

Usage:
    def test_owner_can_archive(owner_client, document):
        response = owner_client.post(f"/api/v1/documents/{document.id}/archive")
        assert response.status_code == 200
"""

import os

# Set environment variables BEFORE any imports to ensure they take effect
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-key-256-bits-minimum-length-required-for-security")
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from lexvault.auth.jwt import create_access_token
from lexvault.auth.principal import Principal
from lexvault.database import get_db as database_get_db
from lexvault.models import Base, Document, DocumentType, FileStatus, SharingStatus, User


# One shared in-memory database per engine
test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


# pysqlite defers BEGIN until the first DML statement, which breaks
# SAVEPOINT. Emit BEGIN ourselves (SQLAlchemy's documented recipe).
@event.listens_for(test_engine, "connect")
def _disable_pysqlite_transactions(dbapi_connection, connection_record):
    dbapi_connection.isolation_level = None


@event.listens_for(test_engine, "begin")
def _emit_begin(conn):
    conn.exec_driver_sql("BEGIN")


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test.

    Creates all tables before the test and drops them after.
    Each test gets a clean database state.
    """
    Base.metadata.create_all(bind=test_engine)

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


def _create_user(db_session: Session, email: str, name: str, role: str, status: str = "ACTIVE") -> User:
    user = User(email=email, name=name, role=role, status=status)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture(scope="function")
def admin_user(db_session: Session) -> User:
    """Create a system ADMIN user."""
    return _create_user(db_session, "admin@lexvault-legal.com", "Admin User", "ADMIN")


@pytest.fixture(scope="function")
def owner_user(db_session: Session) -> User:
    """Create the MEMBER who owns the test document."""
    return _create_user(db_session, "owner@lexvault-legal.com", "Olivia Owner", "MEMBER")


@pytest.fixture(scope="function")
def member_user(db_session: Session) -> User:
    """Create a MEMBER with no access to the test document."""
    return _create_user(db_session, "member@lexvault-legal.com", "Max Member", "MEMBER")


@pytest.fixture(scope="function")
def other_user(db_session: Session) -> User:
    """Create a second MEMBER, used as assignee or grant target."""
    return _create_user(db_session, "other@lexvault-legal.com", "Uma User", "MEMBER")


@pytest.fixture(scope="function")
def disabled_user(db_session: Session) -> User:
    """Create a DISABLED MEMBER."""
    return _create_user(db_session, "disabled@lexvault-legal.com", "Dana Disabled", "MEMBER", status="DISABLED")


@pytest.fixture(scope="function")
def document(db_session: Session, owner_user: User) -> Document:
    """Create an ACTIVE document owned by owner_user."""
    doc = Document(
        name="Engagement letter.docx",
        type=DocumentType.DOCX,
        owner_id=owner_user.id,
        size_bytes=2048,
        file_status=FileStatus.ACTIVE,
        sharing_status=SharingStatus.NONE,
    )
    db_session.add(doc)
    db_session.commit()
    db_session.refresh(doc)
    return doc


def principal_for(user: User) -> Principal:
    """Build the Principal a request authenticated as ``user`` would carry."""
    return Principal.from_user(user)


@pytest.fixture(scope="function")
def owner(owner_user: User) -> Principal:
    return principal_for(owner_user)


@pytest.fixture(scope="function")
def admin(admin_user: User) -> Principal:
    return principal_for(admin_user)


@pytest.fixture(scope="function")
def member(member_user: User) -> Principal:
    return principal_for(member_user)


@pytest.fixture(scope="function")
def other(other_user: User) -> Principal:
    return principal_for(other_user)


def _client_for(db_session: Session, user: User = None) -> TestClient:
    from lexvault.main import create_app

    app = create_app()

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[database_get_db] = override_get_db

    client = TestClient(app)
    if user is not None:
        token = create_access_token(user_id=user.id, role=user.role, email=user.email)
        client.headers = {"Authorization": f"Bearer {token}"}
    return client


@pytest.fixture(scope="function")
def client(db_session: Session):
    """Create an unauthenticated test client."""
    yield _client_for(db_session)
    _clear_overrides()


@pytest.fixture(scope="function")
def admin_client(db_session: Session, admin_user: User):
    """Create a test client authenticated as the system admin."""
    yield _client_for(db_session, admin_user)
    _clear_overrides()


@pytest.fixture(scope="function")
def owner_client(db_session: Session, owner_user: User):
    """Create a test client authenticated as the document owner."""
    yield _client_for(db_session, owner_user)
    _clear_overrides()


@pytest.fixture(scope="function")
def member_client(db_session: Session, member_user: User):
    """Create a test client authenticated as a member without access."""
    yield _client_for(db_session, member_user)
    _clear_overrides()


@pytest.fixture(scope="function")
def other_client(db_session: Session, other_user: User):
    """Create a test client authenticated as other_user."""
    yield _client_for(db_session, other_user)
    _clear_overrides()


def _clear_overrides():
    from lexvault.main import create_app

    app = create_app()
    app.dependency_overrides.clear()
