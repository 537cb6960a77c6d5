"""
FastAPI dependencies for dependency injection.

Long-lived objects (settings, session factory, cache, memory store) are
built once in app_factory.create_app and kept on app.state; these functions hand
them to routes and build the per-request pieces (session, store, service).
"""

from typing import Iterator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from shortlink_app.cache.strategies import CacheStrategy
from shortlink_app.config import Settings
from shortlink_app.services.url_service import ShortenerService
from shortlink_app.storage.factory import MappingStoreBackend, MappingStoreFactory
from shortlink_app.storage.strategies import MappingStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Iterator[Session]:
    """Database session for one request, closed afterwards"""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_cache(request: Request) -> CacheStrategy:
    return request.app.state.cache


def get_mapping_store(request: Request, db: Session = Depends(get_db)) -> MappingStore:
    backend: MappingStoreBackend = request.app.state.store_backend
    if backend == MappingStoreBackend.MEMORY:
        return request.app.state.memory_store
    return MappingStoreFactory.create(backend, db=db)


def get_url_service(
    request: Request,
    store: MappingStore = Depends(get_mapping_store),
    cache: CacheStrategy = Depends(get_cache),
    settings: Settings = Depends(get_settings),
) -> ShortenerService:
    """
    Get ShortenerService with all dependencies injected.

    Controllers depend on the service only; the service depends on the
    store, cache and generator.
    """
    return ShortenerService(
        store=store,
        generator=request.app.state.short_code_strategy,
        cache=cache,
        code_length=settings.short_code_length,
        max_retries=settings.max_retries,
        cache_ttl=settings.cache_ttl,
    )
