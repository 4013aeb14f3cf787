"""
Mapping Store

Persistence for short code -> URL mappings.

Design Decisions:
- Uniqueness is enforced by the unique index on short_code; a violation
  comes back as InsertStatus.ALREADY_EXISTS instead of an exception so the
  creation service can retry with a plain loop
- Click increments are one UPDATE ... RETURNING statement, so two
  concurrent redirects for the same code can never lose an update
- Each write commits its own transaction; no lock is held between calls
"""

import enum
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from shortener.core.exceptions import (
    DatabaseError,
    InvalidExpirationError,
    InvalidURLError,
    ShortCodeNotFoundError,
)
from shortener.core.validators import is_valid_url
from shortener.db.models import UrlMapping, utcnow

logger = logging.getLogger(__name__)


class InsertStatus(enum.Enum):
    INSERTED = "inserted"
    ALREADY_EXISTS = "already_exists"


@dataclass(frozen=True)
class InsertResult:
    """Outcome of MappingStore.insert; `mapping` is set only when inserted."""
    status: InsertStatus
    short_code: str
    mapping: Optional[UrlMapping] = None

    @property
    def inserted(self) -> bool:
        return self.status is InsertStatus.INSERTED


class MappingStore:
    """
    Data access for UrlMapping rows.

    Every method is a single bounded round trip (or two inside one
    transaction); timeouts come from the engine's driver configuration.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert(
        self,
        short_code: str,
        original_url: str,
        owner_id: int,
        expires_at: datetime,
        created_at: Optional[datetime] = None,
    ) -> InsertResult:
        """
        Persist a new mapping.

        Args:
            short_code: Code to claim
            original_url: Already-normalized absolute http/https URL
            owner_id: Account the mapping belongs to
            expires_at: Must be strictly later than created_at
            created_at: Defaults to now

        Returns:
            InsertResult tagged INSERTED or ALREADY_EXISTS

        Raises:
            InvalidURLError: If original_url is not an absolute http/https URL
            InvalidExpirationError: If expires_at is not after created_at
            DatabaseError: For integrity failures other than a taken code
        """
        created_at = created_at or utcnow()

        if not is_valid_url(original_url):
            raise InvalidURLError(original_url)
        if expires_at <= created_at:
            raise InvalidExpirationError(
                expires_at.isoformat(),
                reason="Expiration date must be in the future"
            )

        mapping = UrlMapping(
            short_code=short_code,
            original_url=original_url,
            owner_id=owner_id,
            clicks=0,
            created_at=created_at,
            expires_at=expires_at,
        )

        self.session.add(mapping)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            if await self.find_by_code(short_code) is not None:
                return InsertResult(InsertStatus.ALREADY_EXISTS, short_code)
            raise DatabaseError(
                "Failed to store mapping: database constraint violation",
                original_error=e
            )

        await self.session.refresh(mapping)
        logger.debug(f"Stored mapping {short_code} -> {original_url}")
        return InsertResult(InsertStatus.INSERTED, short_code, mapping)

    async def find_by_code(self, short_code: str) -> Optional[UrlMapping]:
        """
        Look up a mapping by short code, expired or not.

        Returns:
            UrlMapping if found, None otherwise
        """
        statement = select(UrlMapping).where(UrlMapping.short_code == short_code)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def increment_clicks(self, short_code: str) -> int:
        """
        Atomically add one click and return the new total.

        The database evaluates clicks + 1 under its own row lock, so
        concurrent callers are all counted.

        Raises:
            ShortCodeNotFoundError: If no mapping has this code
        """
        statement = (
            update(UrlMapping)
            .where(UrlMapping.short_code == short_code)
            .values(clicks=UrlMapping.clicks + 1)
            .returning(UrlMapping.clicks)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(statement)
        clicks = result.scalar_one_or_none()

        if clicks is None:
            await self.session.rollback()
            raise ShortCodeNotFoundError(short_code)

        await self.session.commit()
        return clicks
