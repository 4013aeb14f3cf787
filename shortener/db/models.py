"""
Database Models for URL Shortener Service

This module defines the SQLModel database schemas for:
- User: Accounts that own mappings (including the default/anonymous account)
- UrlMapping: Stores the mapping between short codes and original URLs

Design Decisions:
- Unique index on short_code; the database, not the application, is the
  final arbiter of code uniqueness
- clicks denormalized on the mapping row so a redirect is one UPDATE
- Expired rows are kept (never redirected); cleanup is an external job
- Timestamps are stored as naive UTC
"""

from datetime import datetime, timezone
from typing import Optional

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (SQLite drops tzinfo on the way back)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(SQLModel, table=True):
    """
    Account table.

    Fields:
    - id: Auto-incrementing primary key
    - email: Unique login name
    - password_hash: bcrypt hash (never the plaintext)
    - api_key: Per-account key accepted in the X-API-Key header
    - is_default: Marks the system-provisioned anonymous account
    - created_at: Registration time
    """
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(
        sa_column=Column(String(255), nullable=False, unique=True, index=True)
    )
    password_hash: str = Field(sa_column=Column(String(255), nullable=False))
    api_key: Optional[str] = Field(
        default=None,
        sa_column=Column(String(64), nullable=True, unique=True, index=True)
    )
    is_default: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, default=False)
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )


class UrlMapping(SQLModel, table=True):
    """
    Main table storing URL shortening mappings.

    Fields:
    - id: Auto-incrementing primary key
    - short_code: Unique code (generated base62 or caller-supplied)
    - original_url: The normalized long URL
    - owner_id: Account that created the mapping
    - clicks: Successful resolutions, only ever incremented
    - created_at: Creation time
    - expires_at: After this instant the mapping no longer redirects

    Indexes:
    - short_code: Unique index for fast lookups (most critical path)
    - owner_id: For per-account listings
    - expires_at: For retention/compaction jobs
    """
    __tablename__ = "url_mappings"

    id: Optional[int] = Field(default=None, primary_key=True)
    short_code: str = Field(
        sa_column=Column(String(32), nullable=False, unique=True, index=True)
    )
    original_url: str = Field(sa_column=Column(Text, nullable=False))
    owner_id: int = Field(
        sa_column=Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    )
    clicks: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    expires_at: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """A mapping still resolves at expires_at and is dead once the clock passes it."""
        expires_at = self.expires_at
        if expires_at.tzinfo is not None:
            # PostgreSQL hands back aware timestamps
            expires_at = expires_at.astimezone(timezone.utc).replace(tzinfo=None)
        return (now or utcnow()) > expires_at
