"""
API Request and Response Schemas

This module defines all Pydantic models for API requests and responses.
Separated from endpoints to keep concerns separated and enable reuse.
"""

from datetime import datetime

from pydantic import BaseModel, HttpUrl, Field


class ShortenRequest(BaseModel):
    """Request model for URL shortening endpoint."""
    url: HttpUrl = Field(..., description="The long URL to shorten")


class ShortenResponse(BaseModel):
    """Response model for URL shortening endpoint."""
    short_code: str = Field(..., description="The generated short code")
    short_url: str = Field(..., description="The complete short URL")
    original_url: str = Field(..., description="The original long URL")


class StatsResponse(BaseModel):
    """Response model for statistics endpoint."""
    url: str
    visits: list[datetime] = Field(..., description="Visit timestamps, oldest first")
    visit_count: int


class ApproximateCountsResponse(BaseModel):
    """Service-wide totals. Approximate: may drift slightly from exact row counts."""
    shortened_urls: int
    visits: int
