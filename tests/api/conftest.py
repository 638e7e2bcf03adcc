"""API test fixtures — ASGI client against the app wired to the test database."""

import pytest
from httpx import ASGITransport, AsyncClient

from car_registry.main import app, wire_services


@pytest.fixture
async def client(db_manager, notifier):
    """HTTP client; services wired as the lifespan would, on the in-memory DB."""
    wire_services(app, db_manager, notifier)
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as ac:
        yield ac
