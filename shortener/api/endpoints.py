"""
FastAPI Endpoints for URL Shortener Service

This module defines the short URL endpoints with minimal logic.
Endpoints only handle:
- Request validation (Pydantic models)
- Rate limiting
- Error handling and HTTP responses
- Delegating to service layer

Status codes:
- 400: invalid URL, custom code or expiration
- 404: unknown short code
- 409: custom code already taken
- 410: short code expired
- 503: code generation exhausted (retryable)
"""

import logging

from fastapi import APIRouter, Request, Depends, HTTPException, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from shortener.api.dependencies import Caller, get_caller, get_code_generator
from shortener.api.schemas import ResolveResponse, ShortenRequest, ShortenResponse, StatsResponse
from shortener.core.exceptions import (
    CodeTakenError,
    DatabaseError,
    GenerationExhaustedError,
    InvalidExpirationError,
    InvalidShortCodeError,
    InvalidURLError,
    ShortCodeExpiredError,
    ShortCodeNotFoundError,
)
from shortener.core.rate_limit import limiter, RATE_LIMITS
from shortener.core.setting import settings
from shortener.core.validators import sanitize_short_code
from shortener.db.session import get_session
from shortener.services.code_generator import ShortCodeGenerator
from shortener.services.redirect_service import RedirectService
from shortener.services.stats_service import StatsService
from shortener.services.url_service import URLShorteningService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/url")

# Catch-all /{short_code}; must be included after every other route
redirect_router = APIRouter()


def build_short_url(short_code: str) -> str:
    return f"{settings.BASE_URL.rstrip('/')}/{short_code}"


def _checked_code(short_code: str) -> str:
    sanitized_code = sanitize_short_code(short_code)
    if not sanitized_code:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid short code format: '{short_code}'. Short codes must contain only letters, digits, '-' or '_'."
        )
    return sanitized_code


@router.post(
    "/shorten",
    response_model=ShortenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a short URL",
    description="Takes a long URL and returns a shortened version with a unique code"
)
@limiter.limit(RATE_LIMITS["shorten"])
async def create_short_url(
    request: Request,  # Required for rate limiting (slowapi expects parameter named 'request')
    body: ShortenRequest,
    caller: Caller = Depends(get_caller),
    code_generator: ShortCodeGenerator = Depends(get_code_generator),
    session: AsyncSession = Depends(get_session)
) -> ShortenResponse:
    """
    Create a new short URL from a long URL.

    Anonymous callers are attributed to the default account and always
    get the default expiration.
    """
    try:
        url_service = URLShorteningService(session, code_generator=code_generator)

        mapping = await url_service.create_short_url(
            body.original_url,
            owner=caller.user,
            authenticated=caller.authenticated,
            custom_code=body.custom_code,
            expires_in=body.expires_in,
        )

        return ShortenResponse(
            short_code=mapping.short_code,
            original_url=mapping.original_url,
            short_url=build_short_url(mapping.short_code),
            expires_at=mapping.expires_at,
        )

    except (InvalidURLError, InvalidShortCodeError, InvalidExpirationError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except CodeTakenError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )
    except GenerationExhaustedError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e)
        )
    except DatabaseError as e:
        logger.error(f"Failed to create short URL: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create short URL"
        )


@router.get(
    "/{short_code}",
    response_model=ResolveResponse,
    summary="Resolve a short code",
    description="Returns the original URL and metadata for a short code and counts the click"
)
@limiter.limit(RATE_LIMITS["redirect"])
async def resolve_short_url(
    short_code: str,
    request: Request,
    session: AsyncSession = Depends(get_session)
) -> ResolveResponse:
    """
    Resolve a short code to its mapping without redirecting.

    Raises:
        HTTPException 400: If short code format is invalid
        HTTPException 404: If short code not found
        HTTPException 410: If short code expired
    """
    short_code = _checked_code(short_code)

    try:
        mapping = await RedirectService(session).resolve(short_code)
    except ShortCodeNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ShortCodeExpiredError as e:
        raise HTTPException(status_code=status.HTTP_410_GONE, detail=str(e))

    return ResolveResponse(
        original_url=mapping.original_url,
        short_code=mapping.short_code,
        short_url=build_short_url(mapping.short_code),
        clicks=mapping.clicks,
        expires_at=mapping.expires_at,
    )


@router.get(
    "/{short_code}/stats",
    response_model=StatsResponse,
    summary="Get URL statistics",
    description="Returns statistics for a short URL without counting a click"
)
@limiter.limit(RATE_LIMITS["stats"])
async def get_url_stats(
    short_code: str,
    request: Request,  # Required for rate limiting
    session: AsyncSession = Depends(get_session)
) -> StatsResponse:
    """
    Get statistics for a short URL, expired or not.

    Raises:
        HTTPException 400: If short code format is invalid
        HTTPException 404: If short code not found
    """
    short_code = _checked_code(short_code)

    stats = await StatsService(session).get_stats(short_code)

    if not stats:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Short code '{short_code}' not found"
        )

    return StatsResponse(**stats)


@redirect_router.get(
    "/{short_code}",
    status_code=status.HTTP_302_FOUND,
    summary="Redirect to original URL",
    description="Takes a short code and redirects to the original long URL"
)
@limiter.limit(RATE_LIMITS["redirect"])
async def redirect_to_url(
    short_code: str,
    request: Request,
    session: AsyncSession = Depends(get_session)
) -> RedirectResponse:
    """
    Redirect to the original URL for a given short code.

    Raises:
        HTTPException 400: If short code format is invalid
        HTTPException 404: If short code not found
        HTTPException 410: If short code expired
        HTTPException 429: If rate limit exceeded
    """
    short_code = _checked_code(short_code)

    try:
        mapping = await RedirectService(session).resolve(short_code)
    except ShortCodeNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ShortCodeExpiredError:
        raise HTTPException(status_code=status.HTTP_410_GONE, detail="This URL has expired")

    return RedirectResponse(
        url=mapping.original_url,
        status_code=status.HTTP_302_FOUND
    )
