"""
Database Models for URL Shortener Service

This module defines the SQLModel database schemas for:
- ShortenedUrl: Maps an encoded short code to its long URL
- Visit: One row per tracked visit, for per-URL statistics
- ApproximateCount: Service-wide counters (shortened URLs, visits)
- BlockedHostname: Persistent part of the hostname blocklist

Design Decisions:
- The primary key of ShortenedUrl is the base64 encoded short code, so the
  database's primary key constraint is what guarantees code uniqueness
- Visit references ShortenedUrl with a foreign key; tracking a visit for an
  unknown code fails in the database instead of leaving an orphan row
- Counters are approximate: they are incremented in the same transaction as
  the row they count, but are never recomputed from the tables
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, false
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ApproximateCountKind(str, Enum):
    """Counters kept in the approximate_counts table."""
    VISITS = "VISITS"
    SHORTENED_URLS = "SHORTENED_URLS"


class ShortenedUrl(SQLModel, table=True):
    """
    Main table storing URL shortening mappings.

    Fields:
    - short_base64: Base64 encoded short code (primary key)
    - url: The long URL that was shortened
    - blocked: Set by moderation; blocked URLs are never redirected to
    - created_at: Timestamp when URL was shortened
    """
    __tablename__ = "shortened_urls"

    short_base64: str = Field(
        sa_column=Column(String(128), primary_key=True)
    )
    url: str = Field(sa_column=Column(Text, nullable=False))
    blocked: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, default=False, server_default=false())
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )


class Visit(SQLModel, table=True):
    """
    Visit table, append-only.

    Only the timestamp is recorded; statistics are the ordered list of
    timestamps for a short URL.
    """
    __tablename__ = "visits"

    id: Optional[int] = Field(default=None, primary_key=True)
    shortened_url_id: str = Field(
        sa_column=Column(
            String(128),
            ForeignKey("shortened_urls.short_base64", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    timestamp: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )


class ApproximateCount(SQLModel, table=True):
    """One row per ApproximateCountKind, seeded by the initial migration."""
    __tablename__ = "approximate_counts"

    kind: str = Field(sa_column=Column(String(32), primary_key=True))
    count: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))


class BlockedHostname(SQLModel, table=True):
    """Hostnames blocked at runtime, on top of the configured BLOCKED_HOSTNAMES."""
    __tablename__ = "blocked_hostnames"

    hostname: str = Field(sa_column=Column(String(253), primary_key=True))
