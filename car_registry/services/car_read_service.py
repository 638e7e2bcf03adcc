"""Car Read Service — single lookup and criteria search with explicit not-found semantics.

Invariants:
    - find_by_id returns a fully loaded car (construction included) or raises NotFoundError
    - find() with no criteria returns every car and never raises for emptiness
    - Unknown criteria keys or uncoercible values fail the whole request with
      NotFoundError("invalid criteria") BEFORE anything reaches the store
    - A search with criteria that matches nothing raises NotFoundError(criteria)

Design Decisions:
    - Reads run outside a transaction unless a reader (unit of work) is passed:
      the write service passes its own so check and write share one snapshot
    - Invalid criteria conflated with not-found (ADR: preserved behavior,
      transport maps both to 404)
"""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from car_registry.core.criteria import coerce_criteria, invalid_criteria_keys
from car_registry.core.domain_types import CarId
from car_registry.core.errors import ErrorContext, NotFoundError
from car_registry.core.query_translator import translate_lookup, translate_search
from car_registry.core.repository_protocols import CarReader, CarStore
from car_registry.models.car import Car

logger = logging.getLogger(__name__)

INVALID_CRITERIA = "invalid criteria"


class CarReadService:
    """Read operations on cars."""

    def __init__(self, store: CarStore):
        self._store = store

    async def find_by_id(self, car_id: CarId, reader: CarReader | None = None) -> Car:
        """Find one car by id or raise NotFoundError."""
        logger.debug(f"find_by_id: id={car_id}", extra={"car_id": car_id})
        source = reader or self._store
        car = await source.fetch_one(translate_lookup(car_id))
        if car is None:
            raise NotFoundError(car_id, ErrorContext(car_id=car_id))
        return car

    async def find(self, criteria: Mapping[str, Any] | None = None) -> list[Car]:
        """Search cars; empty or missing criteria means all cars."""
        if not criteria:
            logger.debug("find: no criteria")
            return await self._store.fetch_all(translate_search(None))

        shown = {key: str(value) for key, value in criteria.items()}
        logger.debug(f"find: criteria={shown}", extra={"criteria": shown})

        invalid = invalid_criteria_keys(criteria)
        if invalid:
            logger.debug(f"find: invalid criteria keys {invalid}")
            raise NotFoundError(INVALID_CRITERIA, ErrorContext(criteria=shown))
        try:
            typed = coerce_criteria(criteria)
        except ValidationError as e:
            logger.debug(f"find: criteria values rejected: {e.error_count()} error(s)")
            raise NotFoundError(INVALID_CRITERIA, ErrorContext(criteria=shown))

        cars = await self._store.fetch_all(translate_search(typed))
        if not cars:
            raise NotFoundError(shown, ErrorContext(criteria=shown))
        logger.debug(f"find: {len(cars)} car(s)")
        return cars
