"""
Request Dependencies

Resolves who is calling. Credentials are optional on creation routes:
- Authorization: Bearer <token>  -> that account, authenticated
- X-API-Key: <key>               -> that account, authenticated
- nothing                        -> the default account, anonymous

Credentials that are present but wrong are rejected with 401 rather than
silently downgraded to anonymous.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from shortener.core.exceptions import AuthenticationError
from shortener.core.security import decode_access_token
from shortener.core.setting import settings
from shortener.db.models import User
from shortener.db.session import get_session
from shortener.services.code_generator import ShortCodeGenerator
from shortener.services.user_service import UserService

bearer_scheme = HTTPBearer(auto_error=False)
api_key_scheme = APIKeyHeader(name="X-API-Key", auto_error=False)

_code_generator = ShortCodeGenerator(length=settings.SHORT_CODE_LENGTH)


@dataclass(frozen=True)
class Caller:
    """Owner identity plus whether it was proven by credentials."""
    user: User
    authenticated: bool


def _unauthorized(detail: str = "Not authorized to access this route") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_caller(
    bearer: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    api_key: Optional[str] = Depends(api_key_scheme),
    session: AsyncSession = Depends(get_session),
) -> Caller:
    """
    FastAPI dependency returning the caller for owner attribution.

    The default account's own API key is accepted but still counts as
    anonymous, so it cannot be used to pick custom expirations.
    """
    user_service = UserService(session)
    user = None

    if bearer is not None:
        try:
            user_id = decode_access_token(bearer.credentials)
        except AuthenticationError:
            raise _unauthorized()
        user = await user_service.get_by_id(user_id)
        if user is None:
            raise _unauthorized()
    elif api_key:
        user = await user_service.get_by_api_key(api_key)
        if user is None:
            raise _unauthorized("Invalid API key")

    if user is None:
        user = await user_service.get_or_create_default_user()
        return Caller(user=user, authenticated=False)

    return Caller(user=user, authenticated=not user.is_default)


def get_code_generator() -> ShortCodeGenerator:
    """FastAPI dependency returning the process-wide short code generator."""
    return _code_generator
