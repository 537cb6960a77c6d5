"""
Test configuration and fixtures for the URL shortener.
Each test gets its own SQLite file, so tests are isolated.
"""

import pytest
from fastapi.testclient import TestClient

from shortlink_app.app_factory import create_app
from shortlink_app.config import Settings
from shortlink_app.database.connection import create_db_engine, create_session_factory, init_db
from shortlink_app.services.url_service import ShortenerService
from shortlink_app.storage.strategies import InMemoryMappingStore, SQLAlchemyMappingStore

BASE_URL = "http://sho.rt"


@pytest.fixture(scope="function")
def settings(tmp_path):
    """Settings pointing at a throwaway database, ignoring any .env file"""
    return Settings(
        _env_file=None,
        environment="test",
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        base_url=BASE_URL,
        store_backend="sql",
        cache_backend="null",
    )


@pytest.fixture(scope="function")
def db_session(settings):
    """
    Create a fresh database session for each test.
    """
    engine = create_db_engine(settings.database_url)
    init_db(engine)
    db = create_session_factory(engine)()

    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture(scope="function")
def sql_store(db_session):
    return SQLAlchemyMappingStore(db_session)


@pytest.fixture(scope="function")
def memory_store():
    return InMemoryMappingStore()


@pytest.fixture(scope="function")
def service(memory_store):
    return ShortenerService(store=memory_store)


@pytest.fixture(scope="function")
def client(settings):
    """
    Test client for an app built from the test settings.
    """
    app = create_app(settings)

    with TestClient(app) as test_client:
        yield test_client
