"""
Blocked Hostname Cache

Holds the set of blocked hostnames in memory. The set starts with the
configured BLOCKED_HOSTNAMES and is topped up from the blocked_hostnames
table whenever it is older than the TTL.

Design:
- One instance per application, created at startup and stored on app.state
- Entries are stored lowercase and only ever added; a hostname removed
  from the table stays blocked until the process restarts
- The load timestamp is set after every row of a reload has been added, so
  concurrent checks never see a half-loaded set marked as fresh
- Two stale checks at the same time may both reload; the reloads are
  additive, so the only cost is an extra query
"""

import logging
import re
import time
from typing import Callable, Iterable

from shortener.db.gateway import StorageGateway

logger = logging.getLogger(__name__)

# Everything up to and including the last two labels: a.b.example.com -> example.com
DOMAIN_NAME_PATTERN = re.compile(r"(?:.+\.)?(.+\..+)$", re.IGNORECASE)


def registrable_domain(hostname: str) -> str:
    """
    Strip subdomains, keeping the rightmost two labels.

    Multi-part public suffixes are not recognised: 'a.example.co.uk' becomes
    'co.uk'. Hostnames without a dot are returned unchanged.
    """
    return DOMAIN_NAME_PATTERN.sub(r"\1", hostname, count=1)


class BlockedHostnameCache:
    """In-memory blocklist with time-based reloads from the database."""

    def __init__(
        self,
        gateway: StorageGateway,
        seed_hostnames: Iterable[str] = (),
        ttl: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            gateway: Storage gateway used to read the blocked_hostnames table
            seed_hostnames: Statically configured hostnames, never removed
            ttl: Seconds a load stays fresh
            clock: Monotonic time source, in seconds
        """
        self.gateway = gateway
        self.ttl = ttl
        self.clock = clock

        self._blocked_hostnames: set[str] = {hostname.lower() for hostname in seed_hostnames}
        self._loaded_at = float("-inf")

    @property
    def hostnames(self) -> frozenset[str]:
        return frozenset(self._blocked_hostnames)

    def is_fresh(self) -> bool:
        return self.clock() - self._loaded_at < self.ttl

    async def refresh(self, force: bool = False) -> None:
        """
        Load blocked hostnames from the database if the cache is stale.

        Args:
            force: Reload even if the cache is still fresh
        """
        if not force and self.is_fresh():
            return

        initial_size = len(self._blocked_hostnames)

        logger.debug("Loading blocked hostnames from database")
        hostnames = await self.gateway.list_blocked_hostnames()

        self._blocked_hostnames.update(hostname.lower() for hostname in hostnames)
        new_size = len(self._blocked_hostnames)

        logger.info(f"Loaded {len(hostnames)} blocked hostnames from database")
        logger.info(f"Blocked hostnames cache size: {new_size} (added {new_size - initial_size})")

        self._loaded_at = self.clock()

    async def is_hostname_blocked(self, hostname: str) -> bool:
        """
        Check a hostname against the blocklist, reloading it first if stale.

        A hostname is blocked if it is listed itself, or if its registrable
        domain is listed (blocking example.com also blocks sub.example.com).
        Hostnames compare case-insensitively.
        """
        await self.refresh()

        hostname = hostname.lower()
        return (
            hostname in self._blocked_hostnames
            or registrable_domain(hostname) in self._blocked_hostnames
        )
