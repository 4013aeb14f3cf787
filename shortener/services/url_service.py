"""
URL Shortening Service

This service handles the core business logic for creating short URLs:
- Normalizing and validating the target URL
- Claiming a caller-supplied custom code, or generating one
- Retrying generated codes that collide, up to a fixed number of attempts
- Computing the expiry from the caller's access tier

Design Decisions:
- A taken custom code is always an error, even when it already points at
  the same URL; callers get predictable behavior
- A collision on a generated code is expected and handled by the loop in
  _insert_generated, never surfaced unless every attempt collides
- Anonymous callers (default owner) always get the default lifetime
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from shortener.core.exceptions import (
    CodeTakenError,
    GenerationExhaustedError,
    InvalidShortCodeError,
    InvalidURLError,
)
from shortener.core.setting import settings
from shortener.core.validators import is_valid_url, normalize_url, validate_custom_code
from shortener.db.models import UrlMapping, User, utcnow
from shortener.services.code_generator import ShortCodeGenerator
from shortener.services.expiration import compute_expires_at
from shortener.services.mapping_store import MappingStore

logger = logging.getLogger(__name__)


class URLShorteningService:
    """
    Core business logic for URL shortening.

    Handles URL validation, code selection and expiry policy; persistence
    is delegated to MappingStore. Separated from API layer for testability.
    """

    def __init__(
        self,
        session: AsyncSession,
        code_generator: Optional[ShortCodeGenerator] = None,
        max_attempts: Optional[int] = None,
        default_expiration_days: Optional[int] = None,
    ):
        """
        Initialize the URL shortening service.

        Args:
            session: Database session
            code_generator: Source of random codes (defaults to configured length)
            max_attempts: Generate-and-insert attempts before giving up
            default_expiration_days: Lifetime when none is requested
        """
        self.session = session
        self.store = MappingStore(session)
        self.code_generator = code_generator or ShortCodeGenerator(length=settings.SHORT_CODE_LENGTH)
        if max_attempts is None:
            max_attempts = settings.SHORT_CODE_MAX_ATTEMPTS
        if default_expiration_days is None:
            default_expiration_days = settings.DEFAULT_EXPIRATION_DAYS
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if default_expiration_days < 1:
            raise ValueError("default_expiration_days must be at least 1")
        self.max_attempts = max_attempts
        self.default_expiration_days = default_expiration_days

    async def create_short_url(
        self,
        original_url: str,
        owner: User,
        authenticated: bool = False,
        custom_code: Optional[str] = None,
        expires_in: Optional[str] = None,
    ) -> UrlMapping:
        """
        Create a new mapping for original_url.

        Args:
            original_url: The long URL; "https://" is assumed when no scheme is given
            owner: Account the mapping is attributed to
            authenticated: Whether the caller proved an identity; decides
                whether expires_in is honored
            custom_code: Exact code to claim instead of generating one
            expires_in: Lifetime token such as "7d", "2w", "1m", "1y"

        Returns:
            The persisted UrlMapping

        Raises:
            InvalidURLError: If the normalized URL is not an absolute http/https URL
            InvalidShortCodeError: If custom_code has an unusable format
            InvalidExpirationError: If expires_in cannot be parsed
            CodeTakenError: If custom_code already exists
            GenerationExhaustedError: If every generated code collided
        """
        # A rollback after a code collision expires every object in the
        # session, the owner included; only the plain id is used from here on
        owner_id = owner.id

        url = normalize_url(original_url)
        if not is_valid_url(url):
            raise InvalidURLError(
                original_url,
                reason="Invalid URL format. URL must use http:// or https:// and have a valid domain"
            )

        code = None
        if custom_code:
            code = validate_custom_code(custom_code)
            if code is None:
                raise InvalidShortCodeError(
                    custom_code,
                    reason="Custom codes must be 3-32 characters of letters, digits, '-' or '_'"
                )

        created_at = utcnow()
        expires_at = compute_expires_at(
            created_at,
            expires_in,
            authenticated=authenticated,
            default_days=self.default_expiration_days,
        )

        if code is not None:
            result = await self.store.insert(code, url, owner_id, expires_at, created_at)
            if not result.inserted:
                raise CodeTakenError(code)
            mapping = result.mapping
        else:
            mapping = await self._insert_generated(url, owner_id, expires_at, created_at)

        logger.info(f"Created short code {mapping.short_code} for owner {owner_id}")
        return mapping

    async def _insert_generated(self, url, owner_id, expires_at, created_at) -> UrlMapping:
        for attempt in range(1, self.max_attempts + 1):
            code = self.code_generator.generate()
            result = await self.store.insert(code, url, owner_id, expires_at, created_at)
            if result.inserted:
                return result.mapping
            logger.warning(
                f"Generated short code collision on attempt {attempt}/{self.max_attempts}: {code}"
            )

        logger.error(f"Short code generation exhausted after {self.max_attempts} attempts")
        raise GenerationExhaustedError(self.max_attempts)
