"""
Service Lifecycle

Builds the long-lived objects of one application instance on startup and
releases them on shutdown:
- Database engine and storage gateway
- Blocked hostname cache (seeded from settings, loaded from the database)
- Short code generator

Everything is stored on app.state and reaches request handlers through the
dependencies in shortener.api.dependencies, so tests can build an app
against their own database.
"""

import logging

from fastapi import FastAPI

from shortener.core.setting import Settings, settings as default_settings
from shortener.db.gateway import StorageGateway
from shortener.db.session import create_session_maker, create_tables, get_database_adapter
from shortener.services.blocklist_cache import BlockedHostnameCache
from shortener.services.short_code_generator import ShortCodeGenerator

logger = logging.getLogger(__name__)


async def initialize_services(app: FastAPI, settings: Settings = default_settings) -> None:
    """
    Initialize database access and shared services for an application.

    Raises:
        ValueError: If the short code configuration is unusable
    """
    if getattr(app.state, "storage_gateway", None) is not None:
        logger.warning("Services already initialized")
        return

    generator = ShortCodeGenerator(settings.SHORT_CODE_CHARACTERS, settings.SHORT_CODE_LENGTH)

    adapter = get_database_adapter(settings.DATABASE_URL)
    engine = adapter.create_engine(settings.DATABASE_URL)
    logger.info(f"Using {adapter.get_dialect_name()} database")

    if settings.AUTO_CREATE_TABLES:
        await create_tables(engine)

    gateway = StorageGateway(create_session_maker(engine), adapter)
    await gateway.ensure_approximate_counts()

    blocklist = BlockedHostnameCache(
        gateway,
        seed_hostnames=settings.BLOCKED_HOSTNAMES,
        ttl=settings.BLOCKED_HOSTNAMES_CACHE_TTL,
    )
    await blocklist.refresh(force=True)

    app.state.engine = engine
    app.state.storage_gateway = gateway
    app.state.blocklist_cache = blocklist
    app.state.short_code_generator = generator

    logger.info(
        f"Services initialized: "
        f"short_code_length={settings.SHORT_CODE_LENGTH}, "
        f"alphabet_size={len(settings.SHORT_CODE_CHARACTERS)}, "
        f"blocked_hostnames={len(blocklist.hostnames)}"
    )


async def shutdown_services(app: FastAPI) -> None:
    """Dispose of the database engine."""
    engine = getattr(app.state, "engine", None)
    if engine is not None:
        logger.info("Disposing database engine")
        await engine.dispose()

    app.state.engine = None
    app.state.storage_gateway = None
    app.state.blocklist_cache = None
    app.state.short_code_generator = None
