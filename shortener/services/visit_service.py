"""
Visit Tracking Service

Records one Visit row per redirect and bumps the VISITS approximate count in
the same transaction.

Design Decisions:
- The foreign key on visits decides whether the short code exists; there is
  no separate lookup before the insert
- Unknown codes raise ShortCodeNotFoundError and are not retried
"""

from shortener.core.types import ShortCode, encode_short_code
from shortener.db.gateway import StorageGateway


class VisitService:
    """Service for recording visits to short URLs."""

    def __init__(self, gateway: StorageGateway):
        self.gateway = gateway

    async def track_url_visit(self, short_code: ShortCode) -> None:
        """
        Track a visit to a short URL.

        Raises:
            ShortCodeNotFoundError: If the short code does not exist
        """
        await self.gateway.create_visit(encode_short_code(short_code))
