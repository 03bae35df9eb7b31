"""
Input Validators and Sanitizers

This module provides validation and sanitization functions for user inputs.
These functions help prevent security issues and ensure data integrity.

Security Considerations:
- Input validation prevents injection attacks
- Length limits prevent DoS attacks
"""

from typing import Optional
from urllib.parse import urlparse

from shortener.core.types import ShortCode

MAX_SHORT_CODE_LENGTH = 64
MAX_URL_LENGTH = 2048


def sanitize_short_code(short_code: str, characters: str) -> Optional[ShortCode]:
    """
    Sanitize and validate short code format.

    Short codes may only contain characters of the configured alphabet.
    This prevents injection attacks and ensures consistency.

    Args:
        short_code: The short code to sanitize
        characters: The configured short code alphabet

    Returns:
        Sanitized short code if valid, None otherwise
    """
    if not short_code or not isinstance(short_code, str):
        return None

    short_code = short_code.strip()

    if not short_code or len(short_code) > MAX_SHORT_CODE_LENGTH:
        return None

    allowed = set(characters)
    if any(char not in allowed for char in short_code):
        return None

    return ShortCode(short_code)


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


def is_valid_url(url: str) -> bool:
    """
    Validate URL format and security.

    Checks that URL uses http/https, has valid domain, and doesn't contain
    malicious patterns. Prevents javascript:, file:, and other dangerous schemes.

    Args:
        url: The URL string to validate

    Returns:
        True if valid and safe, False otherwise
    """
    if not isinstance(url, str) or not validate_url_length(url):
        return False

    try:
        result = urlparse(url)
    except ValueError:
        return False

    if not result.scheme or not result.netloc:
        return False

    if result.scheme.lower() not in {'http', 'https'}:
        return False

    domain = result.hostname or ''
    if domain != 'localhost' and '.' not in domain:
        return False

    malicious_patterns = ['javascript:', 'data:', 'file:', 'vbscript:']
    url_lower = url.lower()
    if any(pattern in url_lower for pattern in malicious_patterns):
        return False

    return True


def extract_hostname(url: str) -> str:
    """Return the lowercase hostname of a URL, or an empty string if it has none."""
    try:
        return urlparse(url).hostname or ''
    except ValueError:
        return ''
