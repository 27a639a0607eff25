from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from shaker.core.config import settings


def build_engine(url: str, *, timeout: float = settings.DB_TIMEOUT, echo: bool = settings.DB_ECHO) -> Engine:
    connect_args = {}
    if url.startswith("sqlite"):
        # Sessions are handed across threads; SQLite serialises writers via its busy timeout
        connect_args = {"check_same_thread": False, "timeout": timeout}
    return create_engine(url, connect_args=connect_args, echo=echo, pool_pre_ping=True)


def build_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(bind=bind, autocommit=False, autoflush=False)


engine = build_engine(settings.DATABASE_URL)
SessionLocal = build_session_factory(engine)


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
