"""
FastAPI Application Entry Point

This module initializes the FastAPI application and configures:
- API routes
- Middleware (logging, security headers, CORS)
- Rate limiting
- Default account bootstrap on startup

Route order matters: the catch-all redirect route /{short_code} is
included last so it never shadows /health, /docs or /api/*.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from shortener import __version__
from shortener.api import auth, endpoints
from shortener.core.logging_config import setup_logging
from shortener.core.rate_limit import limiter
from shortener.core.setting import settings
from shortener.db.session import async_session_maker
from shortener.middleware.headers import add_security_headers_middleware
from shortener.middleware.logging import add_logging_middleware
from shortener.services.user_service import UserService

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


async def bootstrap_default_user() -> None:
    """Provision the default account so anonymous creation works from the first request."""
    try:
        async with async_session_maker() as session:
            user = await UserService(session).get_or_create_default_user()
            logger.info(f"Default user ready: id={user.id}")
    except Exception as e:
        # Tables may not exist yet (migrations pending); retried lazily per request
        logger.warning(f"Could not provision default user on startup: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    await bootstrap_default_user()
    yield


app = FastAPI(
    title="URL Shortener Service",
    description="Short links with click counts, expiration and API-key authentication",
    version=__version__,
    docs_url="/docs",  # Swagger UI documentation
    redoc_url="/redoc",  # ReDoc documentation
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

add_security_headers_middleware(app)
add_logging_middleware(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint: service name, version and docs location."""
    return {
        "message": "URL Shortener Service",
        "version": __version__,
        "docs": "/docs"
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy"}


app.include_router(auth.router, tags=["Auth"])
app.include_router(endpoints.router, tags=["URL"])
app.include_router(endpoints.redirect_router, tags=["Redirect"])
