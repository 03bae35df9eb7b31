"""
Statistics Service

This service handles retrieving statistics for short URLs.

Design Decisions:
- Per-URL statistics are the visit timestamps themselves, read together
  with the URL in one transaction
- Service-wide totals come from the approximate counters, which may drift
  slightly from the real row counts
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from shortener.core.types import ShortCode, encode_short_code
from shortener.db.gateway import StorageGateway


@dataclass(frozen=True)
class UrlStats:
    """Usage statistics of one short URL."""
    url: str
    visits: list[datetime]


class StatsService:
    """Service for retrieving URL statistics."""

    def __init__(self, gateway: StorageGateway):
        self.gateway = gateway

    async def stats_for_url(self, short_code: ShortCode) -> Optional[UrlStats]:
        """
        Get statistics for a short URL.

        Returns:
            UrlStats with visit timestamps in ascending order, or None if the
            short code does not exist (visits without a URL are ignored)
        """
        url, visits = await self.gateway.find_url_with_visits(encode_short_code(short_code))

        if url is None:
            return None

        return UrlStats(url=url, visits=visits)

    async def approximate_counts(self) -> dict[str, int]:
        """Service-wide counters, keyed by ApproximateCountKind value."""
        return await self.gateway.get_approximate_counts()
