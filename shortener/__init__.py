"""URL shortener service: short codes, redirects, click counts and expiry."""

__version__ = "1.0.0"
