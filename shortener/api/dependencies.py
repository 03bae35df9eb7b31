"""
FastAPI Dependencies

Hand the per-instance objects created in shortener.core.lifecycle to the
endpoints, wrapped in the service classes they need.
"""

from fastapi import Depends, Request

from shortener.db.gateway import StorageGateway
from shortener.services.blocklist_cache import BlockedHostnameCache
from shortener.services.redirect_service import RedirectService
from shortener.services.short_code_generator import ShortCodeGenerator
from shortener.services.stats_service import StatsService
from shortener.services.url_service import URLShorteningService
from shortener.services.visit_service import VisitService


def get_storage_gateway(request: Request) -> StorageGateway:
    return request.app.state.storage_gateway


def get_blocklist_cache(request: Request) -> BlockedHostnameCache:
    return request.app.state.blocklist_cache


def get_short_code_generator(request: Request) -> ShortCodeGenerator:
    return request.app.state.short_code_generator


def get_url_service(
    gateway: StorageGateway = Depends(get_storage_gateway),
    generator: ShortCodeGenerator = Depends(get_short_code_generator),
    blocklist: BlockedHostnameCache = Depends(get_blocklist_cache),
) -> URLShorteningService:
    return URLShorteningService(gateway, generator, blocklist=blocklist)


def get_redirect_service(
    url_service: URLShorteningService = Depends(get_url_service),
    blocklist: BlockedHostnameCache = Depends(get_blocklist_cache),
) -> RedirectService:
    return RedirectService(url_service, blocklist)


def get_visit_service(gateway: StorageGateway = Depends(get_storage_gateway)) -> VisitService:
    return VisitService(gateway)


def get_stats_service(gateway: StorageGateway = Depends(get_storage_gateway)) -> StatsService:
    return StatsService(gateway)
