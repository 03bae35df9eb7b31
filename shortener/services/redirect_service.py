"""
Redirect Service

This service handles URL redirection logic.

Design Decisions:
- Resolution and blocklist checks are kept apart: the URL service only
  reads, this service decides whether a redirect may happen
- A URL is refused if moderation flagged it or if its hostname is on the
  blocklist, including hostnames blocked after the URL was shortened
"""

from typing import Optional

from shortener.core.exceptions import BlockedURLError
from shortener.core.types import ShortCode
from shortener.core.validators import extract_hostname
from shortener.services.blocklist_cache import BlockedHostnameCache
from shortener.services.url_service import URLShorteningService


class RedirectService:
    """Service for handling URL redirections."""

    def __init__(self, url_service: URLShorteningService, blocklist: BlockedHostnameCache):
        self.url_service = url_service
        self.blocklist = blocklist

    async def get_redirect_url(self, short_code: ShortCode) -> Optional[str]:
        """
        Get the original URL for redirection.

        Returns:
            The long URL, or None if the short code does not exist

        Raises:
            BlockedURLError: If the URL is blocked
        """
        retrieved = await self.url_service.retrieve_url(short_code)
        if not retrieved:
            return None

        if retrieved.blocked or await self.blocklist.is_hostname_blocked(
            extract_hostname(retrieved.long_url)
        ):
            raise BlockedURLError(retrieved.long_url)

        return retrieved.long_url
