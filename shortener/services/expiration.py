"""
Expiration Policy

Turns an `expiresIn` token such as "7d" or "1y" into an absolute expiry.
Units follow an approximate calendar: a month is 30 days and a year is
365 days.
"""

import re
from datetime import datetime, timedelta
from typing import Optional

from shortener.core.exceptions import InvalidExpirationError

UNIT_DAYS = {
    "d": 1,
    "w": 7,
    "m": 30,
    "y": 365,
}

_EXPIRES_IN_RE = re.compile(r"^\s*(\d+)\s*([dwmy])\s*$", re.IGNORECASE)

# Keeps datetime arithmetic far away from OverflowError
MAX_EXPIRATION_DAYS = 100 * 365


def parse_expires_in(expires_in: str) -> timedelta:
    """
    Parse a duration token.

    Example:
        parse_expires_in("2w") -> timedelta(days=14)

    Raises:
        InvalidExpirationError: If the token is malformed or not positive
    """
    match = _EXPIRES_IN_RE.match(expires_in or "")
    if not match:
        raise InvalidExpirationError(
            expires_in,
            reason="Expiration must look like '<number><d|w|m|y>', e.g. '7d'"
        )

    value, unit = int(match.group(1)), match.group(2).lower()
    days = value * UNIT_DAYS[unit]
    if days <= 0:
        raise InvalidExpirationError(expires_in, reason="Expiration must be in the future")
    if days > MAX_EXPIRATION_DAYS:
        raise InvalidExpirationError(expires_in, reason="Expiration is too far in the future")

    return timedelta(days=days)


def compute_expires_at(
    created_at: datetime,
    expires_in: Optional[str],
    authenticated: bool,
    default_days: int = 30,
) -> datetime:
    """
    Decide when a new mapping expires.

    Only authenticated callers may choose a lifetime; anonymous mappings
    always get the default, whatever they asked for.
    """
    if expires_in and authenticated:
        return created_at + parse_expires_in(expires_in)
    return created_at + timedelta(days=default_days)
