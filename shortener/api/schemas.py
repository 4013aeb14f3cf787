"""
API Request and Response Schemas

This module defines all Pydantic models for API requests and responses.
Separated from endpoints to keep concerns separated and enable reuse.

JSON bodies use camelCase keys (originalUrl, shortCode, ...); Python code
uses the snake_case field names.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ShortenRequest(CamelModel):
    """Request model for URL shortening endpoint."""
    original_url: str = Field(
        ...,
        min_length=1,
        max_length=2048,
        description="The long URL to shorten; https:// is assumed when no scheme is given"
    )
    custom_code: Optional[str] = Field(
        default=None,
        max_length=32,
        description="Optional custom short code"
    )
    expires_in: Optional[str] = Field(
        default=None,
        max_length=16,
        description="Optional lifetime such as '1d', '1w', '1m', '1y' (authenticated callers only)"
    )


class ShortenResponse(CamelModel):
    """Response model for URL shortening endpoint."""
    short_code: str = Field(..., description="The short code")
    original_url: str = Field(..., description="The normalized original URL")
    short_url: str = Field(..., description="The complete short URL")
    expires_at: datetime = Field(..., description="When the short URL stops redirecting (UTC)")


class ResolveResponse(CamelModel):
    """Response model for resolving a short code without redirecting."""
    original_url: str
    short_code: str
    short_url: str
    clicks: int
    expires_at: datetime


class StatsResponse(CamelModel):
    """Response model for statistics endpoint."""
    original_url: str
    short_code: str
    clicks: int
    created_at: datetime
    expires_at: datetime
    expired: bool


class CredentialsRequest(CamelModel):
    """Request model for register and login."""
    email: str = Field(
        ...,
        min_length=3,
        max_length=255,
        pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$",
        description="Account email address"
    )
    password: str = Field(..., min_length=6, max_length=72, description="Account password")


class AuthResponse(CamelModel):
    """Response model for register and login."""
    success: bool = True
    token: str = Field(..., description="Bearer token for the Authorization header")
    api_key: str = Field(..., description="API key for the X-API-Key header")


class DefaultKeyResponse(CamelModel):
    """API key of the default account (non-production only)."""
    api_key: str
