"""FastAPI application entry point."""
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from api.routers import bookmarks, health, tags
from core.config import get_settings
from core.logging_config import configure_logging
from core.rate_limit import RateLimiter, RateLimitExceededError
from db.session import Database

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Build the shared handles on startup and release them on shutdown."""
    app_settings = get_settings()
    configure_logging(app_settings.log_level)

    # The one connection pool every request session draws from
    database = Database.from_settings(app_settings)
    app.state.database = database
    app.state.rate_limiter = await RateLimiter.from_settings(app_settings)
    logger.info("Application started")

    yield

    await app.state.rate_limiter.close()
    await database.dispose()
    logger.info("Application stopped")


app_settings = get_settings()

app = FastAPI(
    title="Bookmarks API",
    description="Store, look up and count tagged URL bookmarks.",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(RateLimitExceededError)
async def rate_limit_exception_handler(
    _request: Request, exc: RateLimitExceededError,
) -> JSONResponse:
    """Answer 429 with the client's quota and when to come back."""
    return JSONResponse(
        status_code=429,
        content={"detail": "Rate limit exceeded. Please try again later."},
        headers={"Retry-After": str(exc.quota.retry_after()), **exc.quota.headers()},
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(
    request: Request, exc: SQLAlchemyError,
) -> JSONResponse:
    """Log store failures and answer 500 without leaking driver details."""
    logger.exception(
        "database_error",
        exc_info=exc,
        extra={"method": request.method, "path": request.url.path},
    )
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.add_middleware(
    CORSMiddleware,
    allow_origins=app_settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(bookmarks.router)
app.include_router(tags.router)
