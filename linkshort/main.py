from contextlib import asynccontextmanager
from typing import Optional
import logging
import time

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import redis
import redis.exceptions

from linkshort.core.config import Settings
from linkshort.core.exceptions import ShortenerError
from linkshort.core.logging_config import configure_logging
from linkshort.api import shortener
from linkshort.db import database
from linkshort.db.memory import InMemoryMappingStore
from linkshort.db.models import Base
from linkshort.db.repository import MappingStore, SQLMappingStore
from linkshort.services.cache import LRUCache
from linkshort.services.codegen import CodeGenerator, build_code_generator
from linkshort.services.RedisURLCache import RedisURLCache
from linkshort.services.resolver import RedirectResolver
from linkshort.services.shortener import URLService

logger = logging.getLogger("linkshort")


def build_store(settings: Settings) -> MappingStore:
    if settings.STORE_BACKEND == "memory":
        logger.info("Using in-memory mapping store")
        return InMemoryMappingStore()

    engine = database.build_engine(settings.DATABASE_URL, timeout=settings.REQUEST_TIMEOUT_SECONDS)
    if database.verify_database_connection(engine):
        Base.metadata.create_all(bind=engine)
        logger.info("Database models initialized/checked.")
    return SQLMappingStore(database.build_session_factory(engine), engine=engine)


def build_redis_client(settings: Settings):
    if not settings.REDIS_URL:
        return None
    client = redis.Redis.from_url(
        settings.REDIS_URL,
        socket_connect_timeout=2,
        socket_timeout=settings.REQUEST_TIMEOUT_SECONDS,
        socket_keepalive=True,
        retry_on_timeout=True,
    )
    try:
        client.ping()
        logger.info("Redis connection verified")
    except redis.exceptions.ConnectionError as e:
        logger.warning(f"Redis connection failed: {e}. Service will run with degraded performance.")
    return client


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[MappingStore] = None,
    generator: Optional[CodeGenerator] = None,
    redis_client=None,
) -> FastAPI:
    if settings is None:
        from linkshort.core.config import settings

    configure_logging(settings.LOG_LEVEL)
    logger.info(f"Application '{settings.PROJECT_NAME}' starting up.")

    if store is None:
        store = build_store(settings)
    if redis_client is None:
        redis_client = build_redis_client(settings)
    if generator is None:
        start = store.count() if settings.CODE_STRATEGY == "counter" else 0
        generator = build_code_generator(
            settings.CODE_STRATEGY,
            settings.SHORT_CODE_LENGTH,
            start=start,
            redis_client=redis_client,
        )

    cache = LRUCache(settings.CACHE_SIZE)
    redis_cache = RedisURLCache(redis_client, ttl=settings.CACHE_TTL) if redis_client is not None else None

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        logger.info("Shutting down gracefully...")
        store.close()
        if redis_client is not None:
            try:
                redis_client.close()
            except redis.exceptions.RedisError:
                logger.debug("Error closing Redis client")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="URL shortening backend: create short links and resolve them to redirects",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.url_service = URLService(
        store,
        generator,
        settings.BASE_URL,
        max_attempts=settings.MAX_CREATE_ATTEMPTS,
        cache=cache,
        timeout=settings.REQUEST_TIMEOUT_SECONDS,
        deduplicate=settings.DEDUPLICATE_URLS,
        max_url_length=settings.MAX_URL_LENGTH,
    )
    app.state.resolver = RedirectResolver(
        store,
        cache=cache,
        redis_cache=redis_cache,
        timeout=settings.REQUEST_TIMEOUT_SECONDS,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"{request.method} {request.url.path} - Status: {response.status_code} - Duration: {duration_ms:.2f}ms"
        )
        return response

    # registered before the router so "/health" is not taken for a short code
    @app.get("/health", tags=["health"])
    def health_check():
        return {"status": "healthy", "service": "url-shortener"}

    app.include_router(shortener.router, prefix="")

    @app.exception_handler(ShortenerError)
    async def shortener_exception_handler(request: Request, exc: ShortenerError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        else:
            logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Malformed request body for {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Request body must be JSON of the form {\"url\": \"<long_url>\"}"},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("linkshort.main:app", host="0.0.0.0", port=8080, log_level="info")
