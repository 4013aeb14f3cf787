"""
Input Validators and Sanitizers

This module provides validation and sanitization functions for user inputs.
These functions help prevent security issues and ensure data integrity.

Security Considerations:
- Input validation prevents injection attacks
- Sanitization prevents XSS and other attacks
- Length limits prevent DoS attacks
"""

import re
from typing import Optional
from urllib.parse import urlparse

MAX_URL_LENGTH = 2048

MIN_CUSTOM_CODE_LENGTH = 3
MAX_SHORT_CODE_LENGTH = 32

# Paths served by the application itself; a short code must never shadow them
RESERVED_SHORT_CODES = frozenset({
    "api", "docs", "redoc", "health", "openapi.json", "static", "favicon.ico",
})

_SHORT_CODE_RE = re.compile(r'^[0-9a-zA-Z_-]+$')
_SCHEME_RE = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.-]*://')

ALLOWED_SCHEMES = {'http', 'https'}


def sanitize_short_code(short_code: str) -> Optional[str]:
    """
    Sanitize and validate short code format.

    Short codes may only contain URL-path-safe characters: [0-9a-zA-Z_-].
    Generated codes are base62; custom codes may also use '-' and '_'.

    Args:
        short_code: The short code to sanitize

    Returns:
        Sanitized short code if valid, None otherwise
    """
    if not short_code or not isinstance(short_code, str):
        return None

    short_code = short_code.strip()

    if len(short_code) > MAX_SHORT_CODE_LENGTH:
        return None

    if not _SHORT_CODE_RE.match(short_code):
        return None

    return short_code


def validate_custom_code(custom_code: str) -> Optional[str]:
    """
    Validate a caller-chosen short code.

    Stricter than sanitize_short_code: enforces a minimum length and
    rejects words that collide with application routes.
    """
    code = sanitize_short_code(custom_code)
    if code is None or len(code) < MIN_CUSTOM_CODE_LENGTH:
        return None
    if code.lower() in RESERVED_SHORT_CODES:
        return None
    return code


def validate_url_length(url: str, max_length: int = MAX_URL_LENGTH) -> bool:
    """
    Validate URL length to prevent DoS attacks.

    Args:
        url: The URL to validate
        max_length: Maximum allowed length (default: 2048 per RFC 7230)

    Returns:
        True if URL length is valid, False otherwise
    """
    return bool(url) and len(url) <= max_length


def normalize_url(url: str) -> str:
    """
    Trim the URL and prepend https:// when it carries no scheme.

    Example:
        normalize_url("example.com/page") -> "https://example.com/page"
        normalize_url("http://example.com") -> "http://example.com"
    """
    url = (url or "").strip()
    if url and not _SCHEME_RE.match(url):
        url = f"https://{url}"
    return url


def is_valid_url(url: str) -> bool:
    """
    Validate URL format and security.

    The URL must be an absolute http/https URL whose host has the
    host.tld shape. The scheme whitelist keeps out javascript:, data:,
    file: and other dangerous schemes; the same words later in the path or
    query ("/wiki/File:Example.jpg") are ordinary text.

    Args:
        url: The URL string to validate

    Returns:
        True if valid and safe, False otherwise
    """
    if not url or not isinstance(url, str):
        return False

    if not validate_url_length(url):
        return False

    try:
        result = urlparse(url)

        if not result.scheme or not result.netloc:
            return False

        if result.scheme.lower() not in ALLOWED_SCHEMES:
            return False

        host = result.hostname or ""
        labels = host.split('.')
        if len(labels) < 2 or not all(labels):
            return False

        # Accessing .port raises ValueError for junk like "host.com:abc"
        if result.port == 0:
            return False

        return True
    except ValueError:
        return False
