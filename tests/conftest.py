import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from cardbinder.catalog.store import Catalog, get_catalog_cache
from cardbinder.models.catalog import CatalogEntry
from cardbinder.models.db import Base


@pytest.fixture(autouse=True)
def clear_catalog_cache():
    """Drop the process-wide catalog cache between tests.

    The cache holds an asyncio.Lock, which must not leak across event loops.
    """
    get_catalog_cache.cache_clear()
    yield
    get_catalog_cache.cache_clear()


@pytest.fixture
def catalog_entries() -> list[CatalogEntry]:
    """Small catalog: OP01 has 5 cards, OP02 has 2, ST01 has 1."""
    return [
        CatalogEntry(
            code="OP01-001",
            name="Roronoa Zoro",
            set="OP01",
            set_name="Romance Dawn",
            rarity="L",
            color="Red",
            type="LEADER",
            traits=("Supernovas", "Straw Hat Crew"),
            market_price=1.5,
        ),
        CatalogEntry(
            code="OP01-002", name="Trafalgar Law", set="OP01", set_name="Romance Dawn"
        ),
        CatalogEntry(
            code="OP01-003", name="Monkey.D.Luffy", set="OP01", set_name="Romance Dawn"
        ),
        CatalogEntry(code="OP01-004", name="Usopp", set="OP01", set_name="Romance Dawn"),
        CatalogEntry(code="OP01-005", name="Uta", set="OP01", set_name="Romance Dawn"),
        CatalogEntry(
            code="OP02-001",
            name="Edward.Newgate",
            set="OP02",
            set_name="Paramount War",
            market_price=4.0,
        ),
        CatalogEntry(code="OP02-002", name="Monkey.D.Garp", set="OP02"),
        CatalogEntry(
            code="ST01-001",
            name="Monkey.D.Luffy",
            set="ST01",
            set_name="Straw Hat Crew",
            type="LEADER",
        ),
    ]


@pytest.fixture
def catalog(catalog_entries: list[CatalogEntry]) -> Catalog:
    """Loaded catalog over the sample entries."""
    return Catalog(catalog_entries)


@pytest.fixture
async def async_engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def session(async_engine) -> AsyncSession:
    """Provide a database session for tests."""
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session
