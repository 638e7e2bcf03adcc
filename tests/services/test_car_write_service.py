"""Car Write Service — create, optimistic update and transactional delete.

Tests cover:
    - create assigns id and version 0, persists construction, notifies once
    - duplicate VIN raises DuplicateKeyError and leaves the row count unchanged
    - a failing notifier never fails or undoes the create
    - update returns stored version + 1 with no gaps across N updates
    - update replaces attributes but never the construction
    - malformed tokens → VersionInvalidError; older tokens → VersionOutdatedError
    - a token ahead of the stored version is accepted
    - of two concurrent updates from the same version, the loser gets
      VersionOutdatedError
    - delete removes car and construction; second delete returns False
"""

import asyncio
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from car_registry.core.errors import (
    DuplicateKeyError, NotFoundError,
    VersionInvalidError, VersionOutdatedError,
)
from car_registry.infrastructure.car_store import SqlCarStore
from car_registry.infrastructure.database import DatabaseSessionManager
from car_registry.models.car import Car
from car_registry.models.construction import Construction
from car_registry.services.car_read_service import CarReadService
from car_registry.services.car_write_service import CarWriteService
from tests.factories import RecordingNotifier, build_car, make_vin


async def _count(db_manager, model) -> int:
    async with db_manager.session() as session:
        result = await session.execute(select(func.count()).select_from(model))
        return result.scalar_one()


def _changes(n: int = 1, **overrides) -> Car:
    """Update payload: same VIN as build_car(n) unless overridden."""
    fields = dict(
        ncap_rating=2, engine="ELECTRIC", price=Decimal("19999.99"),
        discount=Decimal("0.250"), available=False, tags=["TESLA"],
    )
    fields.update(overrides)
    return build_car(n, with_construction=False, **fields)


# ─── create ──────────────────────────────────────────────────────

async def test_create_returns_id_with_version_zero(write_service, read_service):
    car_id = await write_service.create(build_car(1, model="Coupe Alpha"))

    stored = await read_service.find_by_id(car_id)
    assert stored.version == 0
    assert stored.vin == make_vin(1)
    assert stored.construction.model == "Coupe Alpha"


async def test_create_sends_notification(write_service, notifier):
    car_id = await write_service.create(build_car(1, model="Coupe Alpha"))
    assert notifier.sent == [
        (f"New car {car_id}", "Car with construction Coupe Alpha created"),
    ]


async def test_create_without_construction_notifies_with_placeholder(
    write_service, notifier,
):
    car_id = await write_service.create(build_car(1, with_construction=False))
    assert notifier.sent == [
        (f"New car {car_id}", "Car with construction N/A created"),
    ]


async def test_create_duplicate_vin_raises(write_service, db_manager, notifier):
    await write_service.create(build_car(1))
    before = await _count(db_manager, Car)

    with pytest.raises(DuplicateKeyError) as exc_info:
        await write_service.create(build_car(1, model="Other Model"))

    assert exc_info.value.value == make_vin(1)
    assert await _count(db_manager, Car) == before
    assert await _count(db_manager, Construction) == before
    assert len(notifier.sent) == 1


async def test_failing_notifier_does_not_fail_create(store, db_manager):
    read_service = CarReadService(store)
    failing = RecordingNotifier(fail=True)
    service = CarWriteService(store, read_service, failing)

    car_id = await service.create(build_car(1))

    assert len(failing.sent) == 1
    assert (await read_service.find_by_id(car_id)).id == car_id
    assert await _count(db_manager, Car) == 1


async def test_ids_are_not_reused_after_delete(write_service):
    first = await write_service.create(build_car(1))
    await write_service.delete(first)
    second = await write_service.create(build_car(2))
    assert second != first


# ─── update ──────────────────────────────────────────────────────

async def test_update_returns_next_version(write_service, read_service):
    car_id = await write_service.create(build_car(1))

    version = await write_service.update(car_id, _changes(), '"0"')

    assert version == 1
    assert (await read_service.find_by_id(car_id)).version == 1


async def test_sequential_updates_have_no_gaps(write_service):
    car_id = await write_service.create(build_car(1))

    versions = []
    for expected in range(5):
        versions.append(
            await write_service.update(car_id, _changes(), f'"{expected}"'),
        )

    assert versions == [1, 2, 3, 4, 5]


async def test_update_replaces_attributes(write_service, read_service):
    car_id = await write_service.create(build_car(1))

    await write_service.update(car_id, _changes(homepage=None), '"0"')

    stored = await read_service.find_by_id(car_id)
    assert stored.ncap_rating == 2
    assert stored.engine == "ELECTRIC"
    assert stored.price == Decimal("19999.99")
    assert stored.available is False
    assert stored.tags == ["TESLA"]
    assert stored.homepage is None


async def test_update_never_replaces_construction(write_service, read_service):
    car_id = await write_service.create(build_car(1, model="Coupe Alpha"))
    changes = build_car(1, model="Replacement")

    await write_service.update(car_id, changes, '"0"')

    stored = await read_service.find_by_id(car_id)
    assert stored.construction.model == "Coupe Alpha"


async def test_update_with_identical_values_still_bumps_version(write_service):
    car_id = await write_service.create(build_car(1))
    assert await write_service.update(car_id, build_car(1), '"0"') == 1


async def test_update_with_previous_version_is_outdated(write_service, read_service):
    car_id = await write_service.create(build_car(1))
    await write_service.update(car_id, _changes(), '"0"')
    await write_service.update(car_id, _changes(), '"1"')
    stored_version = (await read_service.find_by_id(car_id)).version

    with pytest.raises(VersionOutdatedError) as exc_info:
        await write_service.update(car_id, _changes(), f'"{stored_version - 1}"')

    assert exc_info.value.version == stored_version - 1
    assert (await read_service.find_by_id(car_id)).version == stored_version


@pytest.mark.parametrize("token", ["notanumber", '"-1"', "0", '""', None])
async def test_update_with_malformed_token_is_invalid(
    write_service, read_service, token,
):
    car_id = await write_service.create(build_car(1))

    with pytest.raises(VersionInvalidError):
        await write_service.update(car_id, _changes(), token)

    stored = await read_service.find_by_id(car_id)
    assert stored.version == 0
    assert stored.ncap_rating == 4


async def test_update_with_newer_version_is_accepted(write_service):
    car_id = await write_service.create(build_car(1))
    assert await write_service.update(car_id, _changes(), '"7"') == 1


async def test_update_missing_car_raises_not_found(write_service, db_manager):
    with pytest.raises(NotFoundError):
        await write_service.update(424242, _changes(), '"0"')
    assert await _count(db_manager, Car) == 0


async def test_update_token_checked_before_lookup(write_service):
    with pytest.raises(VersionInvalidError):
        await write_service.update(424242, _changes(), "bogus")


@pytest.fixture
async def file_db_manager(tmp_path):
    """File-backed database: concurrent sessions use separate connections."""
    manager = DatabaseSessionManager(f"sqlite+aiosqlite:///{tmp_path / 'cars.db'}")
    await manager.create_schema()
    yield manager
    await manager.dispose()


async def test_concurrent_updates_from_same_version(file_db_manager):
    store = SqlCarStore(file_db_manager)
    read_service = CarReadService(store)
    service = CarWriteService(store, read_service, RecordingNotifier())
    car_id = await service.create(build_car(1))

    results = await asyncio.gather(
        service.update(car_id, _changes(ncap_rating=1), '"0"'),
        service.update(car_id, _changes(ncap_rating=2), '"0"'),
        return_exceptions=True,
    )

    assert 1 in results
    losers = [r for r in results if isinstance(r, Exception)]
    assert len(losers) == 1
    assert isinstance(losers[0], VersionOutdatedError)
    assert losers[0].version == 0
    assert (await read_service.find_by_id(car_id)).version == 1


# ─── delete ──────────────────────────────────────────────────────

async def test_delete_removes_car_and_construction(write_service, db_manager):
    car_id = await write_service.create(build_car(1))

    assert await write_service.delete(car_id) is True

    assert await _count(db_manager, Car) == 0
    assert await _count(db_manager, Construction) == 0


async def test_delete_twice_is_idempotent(write_service):
    car_id = await write_service.create(build_car(1))
    assert await write_service.delete(car_id) is True
    assert await write_service.delete(car_id) is False


async def test_delete_missing_returns_false(write_service):
    assert await write_service.delete(31337) is False


async def test_delete_car_without_construction(write_service, db_manager):
    car_id = await write_service.create(build_car(1, with_construction=False))
    assert await write_service.delete(car_id) is True
    assert await _count(db_manager, Car) == 0


async def test_delete_leaves_other_cars(write_service, read_service, fleet):
    assert await write_service.delete(fleet["Sedan Gamma"]) is True
    remaining = await read_service.find()
    assert {car.construction.model for car in remaining} == {
        "Coupe Alpha", "Roadster Beta", "Suv Orion",
    }
