from collections.abc import Sequence

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from arcanaflow.api.dependencies import get_interpreter
from arcanaflow.db.database import get_session
from arcanaflow.main import app
from arcanaflow.models.card import Arcana, DrawnCard, Keywords, TarotCard
from arcanaflow.models.db import Base
from arcanaflow.services.card_catalog import CardCatalog, get_card_catalog


def make_card(
    card_id: str,
    tags: Sequence[str] = (),
    arcana: Arcana = Arcana.MAJOR,
    suit: str | None = None,
    number: int = 0,
) -> TarotCard:
    """Build a card with placeholder text fields."""
    return TarotCard(
        id=card_id,
        name=card_id.replace("_", " ").title(),
        arcana=arcana,
        suit=suit,
        number=number,
        archetype="The Tester",
        keywords=Keywords(upright=(f"{card_id} up",), reversed=(f"{card_id} down",)),
        situational_tags=tuple(tags),
    )


class FakeInterpreter:
    """Returns canned narration and records every call."""

    def __init__(self, narration: str = "First. Second. Third"):
        self.narration = narration
        self.calls: list[tuple[str, list[DrawnCard]]] = []

    async def interpret(self, query: str, cards: Sequence[DrawnCard]) -> str:
        self.calls.append((query, list(cards)))
        return self.narration


class RecordingStore:
    """Stands in for ReadingStore and keeps saved readings in memory."""

    def __init__(self) -> None:
        self.saved: list[tuple[str, str, list[DrawnCard], str]] = []

    async def save_reading(
        self,
        session_id: str,
        query: str,
        cards: Sequence[DrawnCard],
        narration: str,
    ) -> int | None:
        self.saved.append((session_id, query, list(cards), narration))
        return len(self.saved)


@pytest.fixture
def card_factory():
    return make_card


@pytest.fixture
def catalog() -> CardCatalog:
    """The bundled 78-card catalog."""
    return get_card_catalog()


@pytest.fixture
def small_catalog() -> CardCatalog:
    """Four cards; only the last resonates with 'job'."""
    return CardCatalog(
        (
            make_card("alpha", tags=["love"]),
            make_card("beta", tags=["travel"]),
            make_card("gamma"),
            make_card("delta", tags=["job", "career"]),
        )
    )


@pytest.fixture
def fake_interpreter() -> FakeInterpreter:
    return FakeInterpreter()


@pytest.fixture
def recording_store() -> RecordingStore:
    return RecordingStore()


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
def session_factory(async_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory) -> AsyncSession:
    """Provide a database session for tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory, fake_interpreter):
    """Provide an async test client with overridden database session and interpreter."""

    async def override_get_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_interpreter] = lambda: fake_interpreter

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
