"""
Application factory: builds a configured FastAPI app.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from shortlink_app.api import redirect, urls
from shortlink_app.cache.factory import CacheBackend, CacheFactory
from shortlink_app.config import Settings, get_settings
from shortlink_app.core.logging_config import configure_logging
from shortlink_app.database.connection import create_db_engine, create_session_factory, init_db
from shortlink_app.exceptions import ErrorKind, ShortenerError
from shortlink_app.services.short_code_strategies import SecureRandomShortCodeStrategy
from shortlink_app.storage.factory import MappingStoreBackend, MappingStoreFactory

STATUS_BY_KIND = {
    ErrorKind.INVALID_URL: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.STORAGE: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.GENERATION: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.EXHAUSTED_RETRIES: status.HTTP_503_SERVICE_UNAVAILABLE,
}

# Messages for server-side failures; details only go to the log
PUBLIC_MESSAGES = {
    ErrorKind.STORAGE: "Internal storage error",
    ErrorKind.GENERATION: "Failed to generate short code",
    ErrorKind.EXHAUSTED_RETRIES: "Could not allocate a unique short code, try again later",
}


async def shortener_error_handler(request: Request, exc: ShortenerError) -> JSONResponse:
    status_code = STATUS_BY_KIND.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    if status_code >= 500:
        logger.opt(exception=exc.cause or exc).error(
            f"{request.method} {request.url.path} failed: {exc.message}"
        )
    else:
        logger.info(f"{request.method} {request.url.path} -> {status_code}: {exc.message}")

    message = PUBLIC_MESSAGES.get(exc.kind, exc.message)
    return JSONResponse(status_code=status_code, content={"error": message})


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    missing = [str(err["loc"][-1]) for err in exc.errors() if err.get("type") == "missing"]
    if missing:
        message = f"Missing '{missing[0]}' in request body"
    else:
        message = "Invalid request body"
    logger.info(f"{request.method} {request.url.path} -> 400: {message}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    Settings are read once here; the engine, session factory, cache, code
    generator and (for the memory backend) the store are created from them
    and kept on app.state for the dependencies in shortlink_app.dependencies.
    """
    settings = settings or get_settings()
    configure_logging(settings.environment, settings.log_level)

    engine = create_db_engine(settings.database_url)
    init_db(engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"{settings.app_name} {settings.app_version} started ({settings.environment})")
        yield
        engine.dispose()
        logger.info("Database connection closed")

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="A URL shortener service built with FastAPI",
        debug=settings.debug,
        lifespan=lifespan,
    )

    store_backend = MappingStoreBackend(settings.store_backend)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.cache = CacheFactory.create(CacheBackend(settings.cache_backend), settings.redis_url)
    app.state.short_code_strategy = SecureRandomShortCodeStrategy()
    app.state.store_backend = store_backend
    app.state.memory_store = (
        MappingStoreFactory.create(store_backend) if store_backend == MappingStoreBackend.MEMORY else None
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_origin_regex=settings.cors_allowed_origin_regex,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.add_exception_handler(ShortenerError, shortener_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    @app.get("/")
    def read_root():
        """Root endpoint with API information"""
        return {
            "message": (
                f"{settings.app_name} API. Use POST /shorten, PUT /update/{{code}}, "
                "DELETE /delete/{code}, or GET /{code}"
            ),
            "version": settings.app_version,
        }

    @app.get("/health")
    def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "environment": settings.environment}

    ######## Include routers
    app.include_router(urls.router)
    # Catch-all "/{short_code}" goes last
    app.include_router(redirect.router)

    return app
