"""
Storage Gateway

Every database access of the service goes through this class. Each public
method opens its own session and runs as one transaction, so a record and
the approximate counter that counts it are committed together or not at all.

Error contract:
- A key collision on insert raises UniqueViolationError (retryable)
- A visit for an unknown key raises ShortCodeNotFoundError
- Every other database error propagates unchanged
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shortener.core.exceptions import DatabaseError, ShortCodeNotFoundError, UniqueViolationError
from shortener.core.types import EncodedKey, decode_encoded_key
from shortener.db.interface import DatabaseAdapter
from shortener.db.models import (
    ApproximateCount,
    ApproximateCountKind,
    BlockedHostname,
    ShortenedUrl,
    Visit,
)

logger = logging.getLogger(__name__)


class StorageGateway:
    """Transactional access to shortened URLs, visits, counters and the blocklist."""

    def __init__(self, session_maker: async_sessionmaker, adapter: DatabaseAdapter):
        """
        Args:
            session_maker: Factory for async sessions bound to the engine
            adapter: Database adapter used to classify integrity errors
        """
        self.session_maker = session_maker
        self.adapter = adapter

    async def create_shortened_url(self, key: EncodedKey, url: str) -> ShortenedUrl:
        """
        Insert a shortened URL and count it, in one transaction.

        Raises:
            UniqueViolationError: If a shortened URL with this key already exists
        """
        try:
            async with self.session_maker() as session:
                async with session.begin():
                    shortened_url = ShortenedUrl(short_base64=key, url=url)
                    session.add(shortened_url)
                    await session.flush()
                    await self._increment_count(session, ApproximateCountKind.SHORTENED_URLS)
        except IntegrityError as e:
            if self.adapter.is_unique_violation(e):
                raise UniqueViolationError(key) from e
            raise

        return shortened_url

    async def find_shortened_url(self, key: EncodedKey) -> Optional[ShortenedUrl]:
        async with self.session_maker() as session:
            statement = select(ShortenedUrl).where(ShortenedUrl.short_base64 == key)
            result = await session.execute(statement)
            return result.scalar_one_or_none()

    async def create_visit(self, key: EncodedKey) -> Visit:
        """
        Record a visit and count it, in one transaction.

        Raises:
            ShortCodeNotFoundError: If no shortened URL exists for the key
        """
        try:
            async with self.session_maker() as session:
                async with session.begin():
                    visit = Visit(shortened_url_id=key)
                    session.add(visit)
                    await session.flush()
                    await self._increment_count(session, ApproximateCountKind.VISITS)
        except IntegrityError as e:
            if self.adapter.is_foreign_key_violation(e):
                raise ShortCodeNotFoundError(decode_encoded_key(key)) from e
            raise

        return visit

    async def find_url_with_visits(self, key: EncodedKey) -> tuple[Optional[str], list[datetime]]:
        """
        Read a shortened URL and its visit timestamps in one transaction.

        Returns:
            (long URL or None if the key is unknown, timestamps in ascending order)
        """
        async with self.session_maker() as session:
            async with session.begin():
                visits_statement = (
                    select(Visit.timestamp)
                    .where(Visit.shortened_url_id == key)
                    .order_by(Visit.timestamp.asc())
                )
                visits = (await session.execute(visits_statement)).scalars().all()

                url_statement = select(ShortenedUrl.url).where(ShortenedUrl.short_base64 == key)
                url = (await session.execute(url_statement)).scalar_one_or_none()

        return url, list(visits)

    async def list_blocked_hostnames(self) -> list[str]:
        async with self.session_maker() as session:
            result = await session.execute(select(BlockedHostname.hostname))
            return list(result.scalars().all())

    async def add_blocked_hostname(self, hostname: str) -> None:
        """Persist a blocked hostname. Adding one that already exists is a no-op."""
        try:
            async with self.session_maker() as session:
                async with session.begin():
                    session.add(BlockedHostname(hostname=hostname))
        except IntegrityError as e:
            if not self.adapter.is_unique_violation(e):
                raise

    async def ensure_approximate_counts(self) -> None:
        """
        Create a zero row for every counter kind that does not have one yet.

        Safe to run from several instances starting at once: a row created
        by another instance between the read and the insert is accepted.
        """
        existing = await self.get_approximate_counts()
        for kind in ApproximateCountKind:
            if kind.value not in existing:
                await self._create_approximate_count(kind)

    async def _create_approximate_count(self, kind: ApproximateCountKind) -> None:
        try:
            async with self.session_maker() as session:
                async with session.begin():
                    session.add(ApproximateCount(kind=kind.value, count=0))
        except IntegrityError as e:
            if not self.adapter.is_unique_violation(e):
                raise
            logger.debug(f"Approximate count {kind.value} was initialized concurrently")
            return

        logger.info(f"Initialized approximate count {kind.value}")

    async def get_approximate_counts(self) -> dict[str, int]:
        async with self.session_maker() as session:
            result = await session.execute(select(ApproximateCount.kind, ApproximateCount.count))
            return {kind: count for kind, count in result.all()}

    async def _increment_count(self, session: AsyncSession, kind: ApproximateCountKind) -> None:
        # Only called inside the transaction of the row being counted
        statement = (
            update(ApproximateCount)
            .where(ApproximateCount.kind == kind.value)
            .values(count=ApproximateCount.count + 1)
        )
        result = await session.execute(statement)
        if result.rowcount == 0:
            raise DatabaseError(f"approximate count '{kind.value}' is not initialized")
