"""Root conftest — shared configuration and database fixtures.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - Services are wired exactly as in main.wire_services, with a recording notifier

Design Decisions:
    - SQLite in-memory: fast, no external dependency; PostgreSQL-only SQL is
      covered by compiling statements against the postgresql dialect
"""

import os

# Never touch a real database from tests
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402

from car_registry.db.base import Base  # noqa: E402
from car_registry.infrastructure.car_store import SqlCarStore  # noqa: E402
from car_registry.infrastructure.database import DatabaseSessionManager  # noqa: E402
from car_registry.services.car_read_service import CarReadService  # noqa: E402
from car_registry.services.car_write_service import CarWriteService  # noqa: E402
from tests.factories import FLEET, RecordingNotifier, build_car  # noqa: E402


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def db_manager(test_engine):
    return DatabaseSessionManager.from_engine(test_engine)


@pytest.fixture
def store(db_manager):
    return SqlCarStore(db_manager)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def read_service(store):
    return CarReadService(store)


@pytest.fixture
def write_service(store, read_service, notifier):
    return CarWriteService(store, read_service, notifier)


@pytest.fixture
async def fleet(write_service, notifier):
    """Seed tests/factories.FLEET through the write service; returns {model: id}."""
    ids = {}
    for spec in FLEET:
        spec = dict(spec)
        car = build_car(spec.pop("n"), model=spec.pop("model"), **spec)
        ids[car.construction.model] = await write_service.create(car)
    notifier.sent.clear()
    return ids
