"""Car Lifecycle — end-to-end path through read and write services.

nonexistent → version 0 → version 1 → stale update rejected → deleted → not found
"""

import pytest

from car_registry.core.errors import NotFoundError, VersionOutdatedError
from tests.factories import build_car, make_vin


async def test_full_lifecycle(write_service, read_service, notifier):
    car_id = await write_service.create(build_car(1, model="Coupe Alpha"))
    assert (await read_service.find_by_id(car_id)).version == 0
    assert len(notifier.sent) == 1

    changes = build_car(1, with_construction=False, ncap_rating=5)
    assert await write_service.update(car_id, changes, '"0"') == 1

    with pytest.raises(VersionOutdatedError):
        await write_service.update(car_id, changes, '"0"')

    found = await read_service.find({"vin": make_vin(1)})
    assert [car.id for car in found] == [car_id]

    assert await write_service.delete(car_id) is True
    with pytest.raises(NotFoundError):
        await read_service.find_by_id(car_id)
    with pytest.raises(NotFoundError):
        await read_service.find({"vin": make_vin(1)})
    assert await write_service.delete(car_id) is False
