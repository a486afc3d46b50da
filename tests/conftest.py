"""
Shared test configuration and fixtures
"""
import pytest
import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

# Set test environment before importing app
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["LOG_FILE"] = os.devnull
os.environ["SKIP_SCHEDULER"] = "true"  # Skip scheduler during tests
os.environ.pop("ADMIN_EMAIL", None)
os.environ.pop("ADMIN_PASSWORD", None)

from main import app
from db.base import Base

# Import all models to register them with Base
from db.models.site import Site  # noqa: F401
from db.models.settings import Settings  # noqa: F401

# Create test database engine; StaticPool keeps one in-memory database
# shared by the TestClient's worker threads
TEST_DATABASE_URL = "sqlite://"
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


def override_get_db():
    """Override database dependency for tests"""
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="function")
def test_db():
    """Create a fresh database for each test"""
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def session(test_db):
    sess = TestSessionLocal()
    yield sess
    sess.close()


@pytest.fixture
def session_factory(test_db):
    return TestSessionLocal


@pytest.fixture
def file_session_factory(tmp_path):
    """
    Session factory backed by a SQLite file, for code that opens sessions
    from several threads at once.
    """
    engine = create_engine(
        f"sqlite:///{tmp_path / 'monitor.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    engine.dispose()


@pytest.fixture
def client(test_db):
    """Create a test client with overridden database"""
    from api.dependencies import get_db
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
