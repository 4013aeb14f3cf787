"""
Statistics Service

This service handles retrieving statistics for short URLs.
Unlike resolution, reading statistics never counts as a click and works
for expired mappings too.
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from shortener.db.models import utcnow
from shortener.services.mapping_store import MappingStore


class StatsService:
    """Service for retrieving URL statistics."""

    def __init__(self, session: AsyncSession):
        """
        Initialize the stats service with a database session.

        Args:
            session: Async database session for database operations
        """
        self.session = session
        self.store = MappingStore(session)

    async def get_stats(self, short_code: str) -> Optional[dict]:
        """
        Get statistics for a short URL.

        Returns:
            Dictionary with statistics:
            - original_url: The original long URL
            - short_code: The short code
            - clicks: Total number of successful resolutions
            - created_at: When the URL was created
            - expires_at: When the URL stops redirecting
            - expired: Whether that moment has passed

        Returns None if short code not found.
        """
        mapping = await self.store.find_by_code(short_code)

        if not mapping:
            return None

        return {
            "original_url": mapping.original_url,
            "short_code": mapping.short_code,
            "clicks": mapping.clicks,
            "created_at": mapping.created_at,
            "expires_at": mapping.expires_at,
            "expired": mapping.is_expired(utcnow()),
        }
