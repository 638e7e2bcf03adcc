"""SQL Car Store — SQLAlchemy implementation of the CarStore / CarUnitOfWork protocols.

Invariants:
    - Reads outside transaction() use a short-lived session of their own
    - transaction() commits on normal exit and rolls back on any exception
    - persist() flushes immediately: id and version are assigned on return
    - A version mismatch at flush surfaces as ConcurrencyError, never as
      a generic DatabaseError

Design Decisions:
    - Unit of work wraps one AsyncSession: reads inside a transaction see the
      same snapshot the subsequent write is checked against
    - Explicit commit/rollback instead of session.begin(): a failed flush closes
      the transaction, and the domain error raised for it must reach the caller
    - delete() issues a DELETE statement by primary key and returns rowcount,
      so removing a missing row is a no-op reported as 0
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from car_registry.core.domain_types import EntityKind
from car_registry.core.errors import ConcurrencyError
from car_registry.core.predicates import Conjunction, Lookup
from car_registry.infrastructure.database import DatabaseSessionManager
from car_registry.infrastructure.sql_lowering import lower_lookup, lower_search
from car_registry.models.car import Car
from car_registry.models.construction import Construction

logger = logging.getLogger(__name__)

_MODELS = {
    EntityKind.CAR: Car,
    EntityKind.CONSTRUCTION: Construction,
}


class SqlUnitOfWork:
    """Reads and writes bound to one AsyncSession / transaction."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def fetch_one(self, query: Lookup) -> Car | None:
        result = await self._session.execute(lower_lookup(query))
        return result.scalars().unique().one_or_none()

    async def fetch_all(self, query: Conjunction) -> list[Car]:
        result = await self._session.execute(lower_search(query))
        return list(result.scalars().unique().all())

    async def persist(self, car: Car) -> Car:
        self._session.add(car)
        try:
            await self._session.flush()
        except StaleDataError as e:
            logger.warning(
                f"Stale version on flush for car {car.id}",
                extra={"car_id": car.id},
            )
            raise ConcurrencyError(
                f"Car {car.id} was modified by another transaction",
            ) from e
        return car

    async def delete(self, kind: EntityKind, entity_id: int) -> int:
        model = _MODELS[kind]
        result = await self._session.execute(
            delete(model).where(model.id == entity_id),
        )
        return result.rowcount


class SqlCarStore:
    """CarStore backed by a DatabaseSessionManager."""

    def __init__(self, db: DatabaseSessionManager):
        self._db = db

    async def fetch_one(self, query: Lookup) -> Car | None:
        async with self._db.session() as session:
            return await SqlUnitOfWork(session).fetch_one(query)

    async def fetch_all(self, query: Conjunction) -> list[Car]:
        async with self._db.session() as session:
            return await SqlUnitOfWork(session).fetch_all(query)

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[SqlUnitOfWork, None]:
        async with self._db.session() as session:
            try:
                yield SqlUnitOfWork(session)
                await session.commit()
            except BaseException:
                await session.rollback()
                raise
