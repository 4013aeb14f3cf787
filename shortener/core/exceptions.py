"""
Custom Exceptions

This module defines custom exceptions for better error handling
and more specific error messages.

Every failure here is recoverable at the request boundary: endpoints
translate them into HTTP responses, nothing is allowed to crash the process.
"""


class URLShortenerException(Exception):
    """Base exception for URL shortener service."""
    pass


class InvalidURLError(URLShortenerException):
    """Raised when URL validation fails."""

    def __init__(self, url: str, reason: str = "Invalid URL format"):
        self.url = url
        self.reason = reason
        super().__init__(f"{reason}: {url}")


class InvalidShortCodeError(URLShortenerException):
    """Raised when a caller-supplied short code has an unusable format."""

    def __init__(self, short_code: str, reason: str = "Invalid short code format"):
        self.short_code = short_code
        self.reason = reason
        super().__init__(f"{reason}: '{short_code}'")


class InvalidExpirationError(URLShortenerException):
    """Raised when an expiration token cannot be parsed or is not in the future."""

    def __init__(self, value, reason: str = "Invalid expiration"):
        self.value = value
        self.reason = reason
        super().__init__(f"{reason}: {value}")


class DuplicateCodeError(URLShortenerException):
    """Raised when a short code already exists in the store."""

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"Short code '{short_code}' already exists")


class CodeTakenError(DuplicateCodeError):
    """Raised when a caller-supplied custom code is already in use."""
    pass


class GenerationExhaustedError(URLShortenerException):
    """Raised when every generated code collided with an existing one."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Could not generate a unique short code after {attempts} attempts")


class ShortCodeNotFoundError(URLShortenerException):
    """Raised when a short code is not found in the database."""

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"Short code '{short_code}' not found")


class ShortCodeExpiredError(URLShortenerException):
    """Raised when a short code exists but its mapping is past its expiry."""

    def __init__(self, short_code: str, expires_at=None):
        self.short_code = short_code
        self.expires_at = expires_at
        super().__init__(f"Short code '{short_code}' has expired")


class DatabaseError(URLShortenerException):
    """Raised when database operations fail."""

    def __init__(self, message: str, original_error: Exception = None):
        self.original_error = original_error
        super().__init__(f"Database error: {message}")


class AuthenticationError(URLShortenerException):
    """Raised when credentials (password, token or API key) are rejected."""

    def __init__(self, reason: str = "Not authorized to access this route"):
        self.reason = reason
        super().__init__(reason)


class UserAlreadyExistsError(URLShortenerException):
    """Raised when registering an email that already has an account."""

    def __init__(self, email: str):
        self.email = email
        super().__init__("User already exists")
