"""Pytest configuration and fixtures."""

import pytest
from sqlalchemy import update

from shortener.core.types import encode_short_code
from shortener.db.gateway import StorageGateway
from shortener.db.models import ShortenedUrl
from shortener.db.session import create_session_maker, create_tables
from shortener.db.sqlite_adapter import SQLiteAdapter
from shortener.services.short_code_generator import ShortCodeGenerator
from shortener.services.url_service import URLShorteningService


class SequenceGenerator(ShortCodeGenerator):
    """Generator returning predetermined codes, for forcing collisions."""

    def __init__(self, codes):
        super().__init__("ABCDEFGH", 4)
        self.codes = list(codes)
        self.calls = 0

    def generate(self):
        code = self.codes[min(self.calls, len(self.codes) - 1)]
        self.calls += 1
        return code


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest.fixture
async def engine(database_url):
    engine = SQLiteAdapter().create_engine(database_url)
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def gateway(engine) -> StorageGateway:
    gateway = StorageGateway(create_session_maker(engine), SQLiteAdapter())
    await gateway.ensure_approximate_counts()
    return gateway


@pytest.fixture
def generator() -> ShortCodeGenerator:
    return ShortCodeGenerator("0123456789abcdefghijklmnopqrstuvwxyz", 8)


@pytest.fixture
def url_service(gateway, generator) -> URLShorteningService:
    return URLShorteningService(gateway, generator)


@pytest.fixture
def sequence_generator():
    """Factory for generators that return the given codes in order, repeating the last one."""
    return SequenceGenerator


async def _flag_as_blocked(gateway: StorageGateway, short_code: str) -> None:
    async with gateway.session_maker() as session:
        async with session.begin():
            await session.execute(
                update(ShortenedUrl)
                .where(ShortenedUrl.short_base64 == encode_short_code(short_code))
                .values(blocked=True)
            )


@pytest.fixture
def flag_as_blocked():
    """Set the moderation flag of a shortened URL, as the moderation tooling would."""
    return _flag_as_blocked
