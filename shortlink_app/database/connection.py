"""
Database engine and session setup.
"""

from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


def create_db_engine(database_url: str) -> Engine:
    """
    Create database engine for the given URL.

    For file-backed SQLite the parent directory is created first and the
    same-thread check is disabled (FastAPI runs sync dependencies in a
    thread pool).
    """
    url = make_url(database_url)

    if url.get_backend_name() == "sqlite":
        if url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
        )

    return create_engine(database_url, pool_pre_ping=True)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine) -> None:
    """Create tables for all registered models"""
    # Import models so they are registered with Base
    from shortlink_app.models import URLMapping  # noqa: F401

    Base.metadata.create_all(bind=engine)
