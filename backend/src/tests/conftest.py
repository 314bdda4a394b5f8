import pytest
import pytest_asyncio
from typing import AsyncGenerator, Awaitable, Callable, Optional
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, AsyncEngine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from backend.src.main import app
from backend.src.core.database import get_db
from backend.src.core.onchain import DecorationChainState, get_onchain_client
from backend.src.models import Base, Decoration, Player, Tank, Fish
from backend.src.tests.utils.fake_chain import FakeOnChainClient

# Use SQLite in memory for tests to avoid async connection issues
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database per test, shared by every connection."""
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """
    Creates a fresh database session for each test.
    """
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with TestingSessionLocal() as session_obj:
        try:
            yield session_obj
        except Exception:
            await session_obj.rollback()
            raise
        finally:
            await session_obj.close()


@pytest.fixture
def chain() -> FakeOnChainClient:
    return FakeOnChainClient()


@pytest_asyncio.fixture
async def client(
    session: AsyncSession, chain: FakeOnChainClient
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create an HTTP client that uses the test database session and fake ledger.
    """
    app.dependency_overrides[get_db] = lambda: session
    app.dependency_overrides[get_onchain_client] = lambda: chain

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    # Clean up
    app.dependency_overrides.clear()


@pytest.fixture
def create_player(session: AsyncSession) -> Callable[..., Awaitable[Player]]:
    """Insert a player row directly, bypassing the ledger."""

    async def _create_player(address: str, **fields) -> Player:
        player = Player(address=address, **fields)
        session.add(player)
        await session.commit()
        await session.refresh(player)
        return player

    return _create_player


@pytest.fixture
def create_tank(
    session: AsyncSession, chain: FakeOnChainClient
) -> Callable[..., Awaitable[Tank]]:
    """Insert a tank row and give it an on-chain capacity in the fake ledger."""

    async def _create_tank(tank_id: int, owner: str, capacity: int = 10) -> Tank:
        tank = Tank(id=tank_id, owner=owner, name=f"Tank {tank_id}")
        session.add(tank)
        await session.commit()
        chain.capacities[tank_id] = capacity
        return tank

    return _create_tank


@pytest.fixture
def create_fish(session: AsyncSession) -> Callable[..., Awaitable[Fish]]:
    """Insert a fish row with optional tank and parents."""

    async def _create_fish(
        fish_id: int,
        owner: str = "0xowner",
        tank_id: Optional[int] = None,
        parent1_id: Optional[int] = None,
        parent2_id: Optional[int] = None,
    ) -> Fish:
        fish = Fish(
            id=fish_id,
            owner=owner,
            tank_id=tank_id,
            species="Guppy",
            parent1_id=parent1_id,
            parent2_id=parent2_id,
        )
        session.add(fish)
        await session.commit()
        return fish

    return _create_fish


@pytest.fixture
def create_decoration(
    session: AsyncSession, chain: FakeOnChainClient
) -> Callable[..., Awaitable[Decoration]]:
    """Insert a decoration row and give it an XP multiplier in the fake ledger."""

    async def _create_decoration(
        decoration_id: int,
        owner: str = "0xowner",
        kind: str = "Plant",
        is_active: bool = False,
        xp_multiplier: int = 100,
    ) -> Decoration:
        decoration = Decoration(
            id=decoration_id, owner=owner, kind=kind, is_active=is_active
        )
        session.add(decoration)
        await session.commit()
        chain.decorations[decoration_id] = DecorationChainState(xp_multiplier=xp_multiplier)
        return decoration

    return _create_decoration
