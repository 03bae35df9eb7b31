"""
Background Task Helpers

Work scheduled after the response has been sent. The storage gateway opens
its own session per operation, so nothing here depends on the request.
"""

import logging

from shortener.core.exceptions import ShortCodeNotFoundError
from shortener.core.types import ShortCode
from shortener.services.visit_service import VisitService

logger = logging.getLogger(__name__)


async def track_visit_background(visit_service: VisitService, short_code: ShortCode) -> None:
    """
    Background task to track a visit.

    Failures are logged: the redirect has already been answered, so there
    is no caller left to report them to.
    """
    try:
        await visit_service.track_url_visit(short_code)
    except ShortCodeNotFoundError:
        logger.warning(f"Visit for unknown short code {short_code} was not tracked")
    except Exception as e:
        logger.error(
            f"Failed to track visit for {short_code}: {str(e)}",
            exc_info=True
        )
