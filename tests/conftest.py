import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shaker.db.base import Base
from shaker.db.session import build_engine, build_session_factory
from shaker.models.user import User  # noqa: F401  registers the users table
from shaker.services.registry import UserRegistry

# In-memory SQLite — isolated, nothing touches disk
_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
_TestingSession = sessionmaker(bind=_engine, autocommit=False, autoflush=False)


@pytest.fixture(autouse=True)
def reset_db():
    """Drop and recreate all tables before every test for a clean slate."""
    Base.metadata.drop_all(bind=_engine)
    Base.metadata.create_all(bind=_engine)
    yield
    Base.metadata.drop_all(bind=_engine)


@pytest.fixture
def db(reset_db):
    session = _TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def registry(db):
    return UserRegistry(db)


@pytest.fixture
def file_db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'shaker.db'}"


@pytest.fixture
def file_engine(file_db_url):
    """File-backed SQLite with the schema applied, for tests that need real connections."""
    engine = build_engine(file_db_url, timeout=30.0, echo=False)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def file_session_factory(file_engine):
    return build_session_factory(file_engine)
