from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from app.api.v1.cache.router import router as cache_router
from app.api.v1.comments.router import router as comments_router
from app.api.v1.forums.router import router as forums_router
from app.api.v1.notifications.router import router as notifications_router
from app.api.v1.payments.router import router as payments_router
from app.api.v1.posts.router import router as posts_router
from app.api.v1.topics.router import router as topics_router
from app.core.cache import CacheLayer
from app.core.config import settings
from app.core.logging_config import configure_logging
from app.realtime.notifications import NotificationHub

log = structlog.get_logger()

TRANSIENT_STORE_ERRORS = (OperationalError, InterfaceError, PoolTimeoutError)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.cache.start_sweeper()
    log.info("app.starting", cache_ttl=settings.cache_default_ttl)
    yield
    await app.state.cache.stop_sweeper()
    app.state.cache.flush_all()
    log.info("app.stopped")


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    log.warning("store.constraint_violation", path=request.url.path, error=str(exc.orig))
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": "Constraint violation"})


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    # Connectivity and timeout failures are transient; the caller may retry
    transient = isinstance(exc, TRANSIENT_STORE_ERRORS) or getattr(exc, "connection_invalidated", False)
    log.error("store.error", path=request.url.path, transient=transient, exc_info=exc)
    if transient:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Service temporarily unavailable"},
        )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal Server Error"},
    )


def create_app() -> FastAPI:
    configure_logging(settings.log_level, settings.log_format)

    app = FastAPI(title="Forum & Payments Backend", lifespan=lifespan)

    # One cache and one notification hub per process, shared by every service
    app.state.cache = CacheLayer(
        default_ttl=settings.cache_default_ttl,
        check_period=settings.cache_check_period,
        max_size=settings.cache_max_size,
    )
    app.state.notifications = NotificationHub()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)

    # Routers
    app.include_router(forums_router)
    app.include_router(topics_router)
    app.include_router(posts_router)
    app.include_router(comments_router)
    app.include_router(payments_router)
    app.include_router(cache_router)
    app.include_router(notifications_router)

    @app.get("/health", tags=["system"])
    async def health_check():
        return {"success": True, "message": "Server is running"}

    return app


app = create_app()
