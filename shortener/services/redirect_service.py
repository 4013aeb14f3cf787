"""
Redirect Service

Resolves a short code to its live mapping and counts the click.

A mapping is Live up to and including expires_at and Expired once the
clock passes it; there is no stored state field. Expired mappings are
refused without touching their click counter.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from shortener.core.exceptions import ShortCodeExpiredError, ShortCodeNotFoundError
from shortener.db.models import UrlMapping, utcnow
from shortener.services.mapping_store import MappingStore

logger = logging.getLogger(__name__)


class RedirectService:
    """
    Service for handling URL redirections.

    Used by both the HTML redirect route and the JSON resolve route.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize the redirect service with a database session.

        Args:
            session: Async database session for database operations
        """
        self.session = session
        self.store = MappingStore(session)

    async def resolve(self, short_code: str) -> UrlMapping:
        """
        Look up a live mapping and record one click.

        Returns:
            The mapping, with clicks reflecting this resolution

        Raises:
            ShortCodeNotFoundError: Unknown code
            ShortCodeExpiredError: Known code past its expiry
        """
        mapping = await self.store.find_by_code(short_code)
        if mapping is None:
            raise ShortCodeNotFoundError(short_code)

        if mapping.is_expired(utcnow()):
            logger.info(f"Refused expired short code {short_code}")
            raise ShortCodeExpiredError(short_code, mapping.expires_at)

        clicks = await self.store.increment_clicks(short_code)
        # Reflect the database value without marking the row dirty
        set_committed_value(mapping, "clicks", clicks)
        return mapping

