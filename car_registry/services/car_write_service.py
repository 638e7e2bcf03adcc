"""Car Write Service — create, optimistic update and transactional delete.

Invariants:
    - create rejects a VIN that already exists (DuplicateKeyError), row count unchanged
    - create persists car and construction in one transaction, then notifies;
      a failing notifier never undoes or fails the create
    - update validates the token shape first (VersionInvalidError), then loads,
      checks and writes inside ONE transaction
    - update never touches the construction; returns stored version + 1
    - delete removes construction then car inside ONE transaction;
      a missing car yields False, never an error

Design Decisions:
    - Version check is strict less-than: a token ahead of the stored version
      is accepted (ADR: preserved behavior, see core/enforce_version.py)
    - A concurrent commit between read and write is caught by the version
      column at flush and reported as VersionOutdatedError(supplied)
    - Store, read service and notifier are constructor arguments (no globals)
"""

import logging
from datetime import datetime, timezone

from car_registry.core.domain_types import CarId, EntityKind, Version
from car_registry.core.enforce_version import check_version_current, parse_version_token
from car_registry.core.errors import (
    ConcurrencyError, DuplicateKeyError, ErrorContext, NotFoundError, VersionOutdatedError,
)
from car_registry.core.repository_protocols import CarStore, Notifier
from car_registry.models.car import Car, UPDATABLE_ATTRIBUTES
from car_registry.services.car_read_service import CarReadService

logger = logging.getLogger(__name__)


class CarWriteService:
    """Write operations on cars."""

    def __init__(
        self, store: CarStore, read_service: CarReadService, notifier: Notifier,
    ):
        self._store = store
        self._read_service = read_service
        self._notifier = notifier

    async def create(self, car: Car) -> CarId:
        """Persist a new car with its construction; return the assigned id."""
        logger.debug(f"create: vin={car.vin}")
        await self._validate_create(car)

        async with self._store.transaction() as uow:
            stored = await uow.persist(car)
        logger.debug(
            f"create: id={stored.id}, version={stored.version}",
            extra={"car_id": stored.id, "version": stored.version},
        )

        await self._send_notification(stored)
        return stored.id

    async def update(
        self, car_id: CarId, changes: Car, version_token: str | None,
    ) -> Version:
        """Replace all attributes of an existing car; return the new version."""
        logger.debug(
            f"update: id={car_id}, token={version_token!r}",
            extra={"car_id": car_id},
        )
        version = parse_version_token(version_token)

        async with self._store.transaction() as uow:
            stored = await self._read_service.find_by_id(car_id, reader=uow)
            check_version_current(version, stored.version)

            for attribute in UPDATABLE_ATTRIBUTES:
                setattr(stored, attribute, getattr(changes, attribute))
            stored.updated_at = datetime.now(timezone.utc)

            try:
                updated = await uow.persist(stored)
            except ConcurrencyError as e:
                raise VersionOutdatedError(
                    version, ErrorContext(car_id=car_id),
                ) from e

        logger.debug(
            f"update: id={car_id}, new version={updated.version}",
            extra={"car_id": car_id, "version": updated.version},
        )
        return updated.version

    async def delete(self, car_id: CarId) -> bool:
        """Delete a car and its construction; True only if a car row was removed."""
        logger.debug(f"delete: id={car_id}", extra={"car_id": car_id})
        async with self._store.transaction() as uow:
            try:
                car = await self._read_service.find_by_id(car_id, reader=uow)
            except NotFoundError:
                logger.debug(f"delete: car {car_id} does not exist")
                return False

            if car.construction is not None:
                await uow.delete(EntityKind.CONSTRUCTION, car.construction.id)
            affected = await uow.delete(EntityKind.CAR, car_id)

        logger.debug(f"delete: affected={affected}", extra={"car_id": car_id})
        return affected > 0

    async def _validate_create(self, car: Car) -> None:
        try:
            await self._read_service.find({"vin": car.vin})
        except NotFoundError:
            return
        raise DuplicateKeyError(car.vin)

    async def _send_notification(self, car: Car) -> None:
        model = car.construction.model if car.construction is not None else "N/A"
        subject = f"New car {car.id}"
        body = f"Car with construction {model} created"
        try:
            await self._notifier.notify(subject, body)
        except Exception as e:
            logger.warning(
                f"Notification for car {car.id} failed: {e}",
                extra={"car_id": car.id},
            )
