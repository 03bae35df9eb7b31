"""
Custom Exceptions

This module defines custom exceptions for better error handling
and more specific error messages.

Two groups matter to callers:
- Expected conditions the service layer recovers from or maps to a
  response (UniqueViolationError, ShortCodeNotFoundError, InvalidURLError,
  BlockedURLError)
- Failures that end the current operation (UniqueShortCodeTimeoutError,
  DatabaseError)
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


class BlockedURLError(URLShortenerException):
    """Raised when a URL is blocked, either by its hostname or by moderation."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"URL is blocked: {url}")


class ShortCodeNotFoundError(URLShortenerException):
    """Raised when a short code is not found in the database."""

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"Short code '{short_code}' not found")


class UniqueViolationError(URLShortenerException):
    """
    Raised by the storage gateway when an insert collides with an existing key.

    This is the only storage failure the shortening loop retries.
    """

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Key '{key}' already exists")


class UniqueShortCodeTimeoutError(URLShortenerException):
    """Raised when no unique short code could be generated within the attempt budget."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(
            f"Failed to generate a unique short code after {attempts} attempts"
        )


class DatabaseError(URLShortenerException):
    """Raised when database operations fail."""

    def __init__(self, message: str, original_error: Exception = None):
        self.original_error = original_error
        super().__init__(f"Database error: {message}")
