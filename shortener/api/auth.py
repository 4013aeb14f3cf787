"""
Authentication Endpoints

Register and login return both credential styles the service accepts:
a bearer token and the account's API key.
"""

from fastapi import APIRouter, Request, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from shortener.api.schemas import AuthResponse, CredentialsRequest, DefaultKeyResponse
from shortener.core.exceptions import AuthenticationError, UserAlreadyExistsError
from shortener.core.rate_limit import limiter, RATE_LIMITS
from shortener.core.security import create_access_token
from shortener.core.setting import settings
from shortener.db.session import get_session
from shortener.services.user_service import UserService

router = APIRouter(prefix="/api/auth")


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description="Creates a new user account and returns a bearer token and API key"
)
@limiter.limit(RATE_LIMITS["auth"])
async def register(
    request: Request,
    body: CredentialsRequest,
    session: AsyncSession = Depends(get_session)
) -> AuthResponse:
    try:
        user = await UserService(session).register(body.email, body.password)
    except UserAlreadyExistsError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return AuthResponse(token=create_access_token(user.id), api_key=user.api_key)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login user",
    description="Authenticates a user and returns a bearer token and API key"
)
@limiter.limit(RATE_LIMITS["auth"])
async def login(
    request: Request,
    body: CredentialsRequest,
    session: AsyncSession = Depends(get_session)
) -> AuthResponse:
    try:
        user = await UserService(session).authenticate(body.email, body.password)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )

    return AuthResponse(token=create_access_token(user.id), api_key=user.api_key)


@router.get(
    "/default-key",
    response_model=DefaultKeyResponse,
    summary="Get the default user's API key",
    description="Development helper; not available in production",
    include_in_schema=not settings.is_production,
)
async def get_default_key(session: AsyncSession = Depends(get_session)) -> DefaultKeyResponse:
    if settings.is_production:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Route not found")

    default_user = await UserService(session).get_or_create_default_user()
    return DefaultKeyResponse(api_key=default_user.api_key)
