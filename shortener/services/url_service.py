"""
URL Shortening Service

This service handles the core business logic for URL shortening:
- Generating random short codes and storing them under their base64 key
- Retrying on short code collisions, up to a fixed number of attempts
- Resolving short codes back to long URLs
- Validating URLs and rejecting blocked hostnames before shortening

Design Decisions:
- Random codes instead of a counter: codes are not guessable in sequence
- No existence pre-check: the insert itself detects collisions, so there is
  no window between checking a code and claiming it
- Bounded retries: a code space that is too small (short length, tiny
  alphabet) turns into an explicit UniqueShortCodeTimeoutError instead of
  an endless loop
"""

import logging
from dataclasses import dataclass
from typing import Optional

from shortener.core.exceptions import BlockedURLError, InvalidURLError, UniqueShortCodeTimeoutError, UniqueViolationError
from shortener.core.types import ShortCode, encode_short_code
from shortener.core.validators import extract_hostname, is_valid_url
from shortener.db.gateway import StorageGateway
from shortener.services.blocklist_cache import BlockedHostnameCache
from shortener.services.short_code_generator import ShortCodeGenerator

logger = logging.getLogger(__name__)

# Retries after the first attempt; at most MAX + 1 codes are tried
MAX_SHORT_CODE_GENERATION_ATTEMPTS = 10


@dataclass(frozen=True)
class RetrievedUrl:
    """A resolved short code."""
    long_url: str
    blocked: bool


@dataclass(frozen=True)
class ShortenedUrlData:
    """Result of shortening a URL."""
    short_code: ShortCode
    original_url: str


class URLShorteningService:
    """
    Core business logic for URL shortening.

    Handles URL validation, code generation and storage. Separated from the
    API layer for testability and maintainability.
    """

    def __init__(
        self,
        gateway: StorageGateway,
        generator: ShortCodeGenerator,
        blocklist: Optional[BlockedHostnameCache] = None,
    ):
        """
        Initialize the URL shortening service.

        Args:
            gateway: Storage gateway
            generator: Short code generator
            blocklist: Blocked hostname cache (checked by create_short_url)
        """
        self.gateway = gateway
        self.generator = generator
        self.blocklist = blocklist

    async def shorten_url(self, long_url: str) -> ShortCode:
        """
        Store a long URL under a new, unique short code.

        Args:
            long_url: The URL to shorten (not validated here)

        Returns:
            The short code

        Raises:
            UniqueShortCodeTimeoutError: If every attempt collided with an existing code
        """
        for attempt in range(1, MAX_SHORT_CODE_GENERATION_ATTEMPTS + 2):
            short_code = self.generator.generate()

            try:
                await self.gateway.create_shortened_url(encode_short_code(short_code), long_url)
            except UniqueViolationError:
                logger.debug(f"Short code collision on attempt {attempt}, retrying")
                continue

            return short_code

        logger.error(
            f"Could not generate a unique short code after "
            f"{MAX_SHORT_CODE_GENERATION_ATTEMPTS + 1} attempts"
        )
        raise UniqueShortCodeTimeoutError(MAX_SHORT_CODE_GENERATION_ATTEMPTS)

    async def create_short_url(self, original_url: str) -> ShortenedUrlData:
        """
        Validate a URL and shorten it.

        Unlike shorten_url, this is meant for untrusted input. Every call
        creates a new short code, even for a URL that was shortened before.

        Raises:
            InvalidURLError: If URL format is invalid
            BlockedURLError: If the URL's hostname is blocked
            UniqueShortCodeTimeoutError: If no unique code could be generated
        """
        if not is_valid_url(original_url):
            raise InvalidURLError(
                original_url,
                reason="Invalid URL format. URL must use http:// or https:// and have a valid domain"
            )

        if self.blocklist is not None and await self.blocklist.is_hostname_blocked(extract_hostname(original_url)):
            raise BlockedURLError(original_url)

        short_code = await self.shorten_url(original_url)
        return ShortenedUrlData(short_code=short_code, original_url=original_url)

    async def retrieve_url(self, short_code: ShortCode) -> Optional[RetrievedUrl]:
        """
        Retrieve the long URL for a given short code.

        Does not consult the blocklist; callers decide what to do with
        blocked URLs.

        Returns:
            RetrievedUrl if found, None otherwise
        """
        shortened_url = await self.gateway.find_shortened_url(encode_short_code(short_code))

        if not shortened_url:
            return None

        return RetrievedUrl(long_url=shortened_url.url, blocked=shortened_url.blocked)
