"""
FastAPI Endpoints for URL Shortener Service

This module defines all REST API endpoints with minimal logic.
Endpoints only handle:
- Request validation (Pydantic models, short code format)
- Rate limiting
- Mapping service results and errors to HTTP responses
- Delegating to service layer

Design Principles:
- Thin endpoints: Only validation and rate limiting
- Service layer: All business logic
- Error handling: Proper HTTP status codes
"""

from fastapi import APIRouter, Request, Depends, HTTPException, BackgroundTasks, status
from fastapi.responses import RedirectResponse

from shortener.api.dependencies import (
    get_redirect_service,
    get_short_code_generator,
    get_stats_service,
    get_url_service,
    get_visit_service,
)
from shortener.api.schemas import ApproximateCountsResponse, ShortenRequest, ShortenResponse, StatsResponse
from shortener.core.exceptions import BlockedURLError, DatabaseError, InvalidURLError, UniqueShortCodeTimeoutError
from shortener.core.rate_limit import limiter, RATE_LIMITS
from shortener.core.setting import settings
from shortener.core.types import ShortCode
from shortener.core.validators import sanitize_short_code
from shortener.db.models import ApproximateCountKind
from shortener.services.background_tasks import track_visit_background
from shortener.services.redirect_service import RedirectService
from shortener.services.short_code_generator import ShortCodeGenerator
from shortener.services.stats_service import StatsService
from shortener.services.url_service import URLShorteningService
from shortener.services.visit_service import VisitService


router = APIRouter()


def _require_short_code(short_code: str, generator: ShortCodeGenerator) -> ShortCode:
    sanitized_code = sanitize_short_code(short_code, generator.characters)
    if not sanitized_code:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid short code format: '{short_code}'"
        )
    return sanitized_code


@router.post(
    "/shorten",
    response_model=ShortenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a short URL",
    description="Takes a long URL and returns a shortened version with a unique code"
)
@limiter.limit(RATE_LIMITS["shorten"])
async def create_short_url(
    request: Request,  # Required for rate limiting (slowapi expects parameter named 'request')
    body: ShortenRequest,
    url_service: URLShorteningService = Depends(get_url_service)
) -> ShortenResponse:
    """
    Create a new short URL from a long URL.

    Raises:
        HTTPException 400: If the URL is invalid
        HTTPException 403: If the URL's hostname is blocked
        HTTPException 503: If no unique short code could be generated
    """
    try:
        shortened = await url_service.create_short_url(str(body.url))
    except InvalidURLError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except BlockedURLError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="URLs from this hostname are not allowed"
        )
    except UniqueShortCodeTimeoutError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not generate a short code, please try again later"
        )
    except DatabaseError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )

    return ShortenResponse(
        short_code=shortened.short_code,
        short_url=f"{settings.BASE_URL}/{shortened.short_code}",
        original_url=shortened.original_url
    )


@router.get(
    "/stats",
    response_model=ApproximateCountsResponse,
    summary="Get service totals",
    description="Returns the approximate number of shortened URLs and visits"
)
@limiter.limit(RATE_LIMITS["stats"])
async def get_approximate_counts(
    request: Request,
    stats_service: StatsService = Depends(get_stats_service)
) -> ApproximateCountsResponse:
    counts = await stats_service.approximate_counts()
    return ApproximateCountsResponse(
        shortened_urls=counts.get(ApproximateCountKind.SHORTENED_URLS.value, 0),
        visits=counts.get(ApproximateCountKind.VISITS.value, 0),
    )


@router.get(
    "/stats/{short_code}",
    response_model=StatsResponse,
    summary="Get URL statistics",
    description="Returns the long URL and the timestamps of every visit"
)
@limiter.limit(RATE_LIMITS["stats"])
async def get_url_stats(
    short_code: str,
    request: Request,
    stats_service: StatsService = Depends(get_stats_service),
    generator: ShortCodeGenerator = Depends(get_short_code_generator)
) -> StatsResponse:
    """
    Get statistics for a short URL.

    Raises:
        HTTPException 400: If short code format is invalid
        HTTPException 404: If short code not found
    """
    code = _require_short_code(short_code, generator)

    stats = await stats_service.stats_for_url(code)

    if not stats:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Short code '{code}' not found"
        )

    return StatsResponse(url=stats.url, visits=stats.visits, visit_count=len(stats.visits))


@router.get(
    "/{short_code}",
    status_code=status.HTTP_302_FOUND,
    summary="Redirect to original URL",
    description="Takes a short code and redirects to the original long URL"
)
@limiter.limit(RATE_LIMITS["redirect"])
async def redirect_to_url(
    short_code: str,
    request: Request,
    background_tasks: BackgroundTasks,
    redirect_service: RedirectService = Depends(get_redirect_service),
    visit_service: VisitService = Depends(get_visit_service),
    generator: ShortCodeGenerator = Depends(get_short_code_generator)
) -> RedirectResponse:
    """
    Redirect to the original URL for a given short code.

    The visit is tracked after the response has been sent.

    Raises:
        HTTPException 400: If short code format is invalid
        HTTPException 404: If short code not found
        HTTPException 410: If the URL is blocked
    """
    code = _require_short_code(short_code, generator)

    try:
        original_url = await redirect_service.get_redirect_url(code)
    except BlockedURLError:
        raise HTTPException(
            status_code=status.HTTP_410_GONE,
            detail="This link has been disabled"
        )

    if not original_url:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Short code '{code}' not found"
        )

    background_tasks.add_task(track_visit_background, visit_service, code)

    return RedirectResponse(
        url=original_url,
        status_code=status.HTTP_302_FOUND
    )
