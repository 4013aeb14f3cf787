"""
Credential Helpers

Password hashing, access token signing and API key generation.

Design Decisions:
- bcrypt for password hashing (salted, adaptive cost)
- python-jose for signed access tokens (HS256 by default)
- API keys come from the secrets module; short codes do not need that
  strength, API keys do
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import JWTError, jwt

from shortener.core.exceptions import AuthenticationError
from shortener.core.setting import settings

API_KEY_BYTES = 32

# bcrypt only looks at the first 72 bytes (and newer releases reject longer input)
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Return a salted bcrypt hash of the password."""
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plaintext password against a stored bcrypt hash."""
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def generate_api_key() -> str:
    """Generate a new random API key (64 hex characters)."""
    return secrets.token_hex(API_KEY_BYTES)


def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign an access token for the given account.

    Args:
        user_id: Account id, stored in the 'sub' claim
        expires_delta: Token lifetime (defaults to ACCESS_TOKEN_EXPIRE_MINUTES)

    Returns:
        Encoded JWT string
    """
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = {"sub": str(user_id), "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> int:
    """
    Verify a token and return the account id it was issued for.

    Raises:
        AuthenticationError: If the token is malformed, expired or tampered with
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise AuthenticationError()

    subject = payload.get("sub")
    try:
        return int(subject)
    except (TypeError, ValueError):
        raise AuthenticationError()
