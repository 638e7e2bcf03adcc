"""Boundary Protocols — contracts between core services and the store / notifier.

Invariants:
    - Services depend on these Protocols only; implementations are injected
    - transaction() commits on normal exit and rolls back on ANY exception
    - persist() returns the stored car with store-assigned id and version
    - delete() reports the number of affected rows (0 when nothing matched)

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - CarLike instead of the ORM class: core stays free of persistence imports
"""

from contextlib import AbstractAsyncContextManager
from typing import Any, Protocol

from car_registry.core.domain_types import EntityKind
from car_registry.core.predicates import Conjunction, Lookup


class ConstructionLike(Protocol):
    """Structural contract for the owned construction details."""
    id: int | None
    model: str
    variant: str | None


class CarLike(Protocol):
    """Structural contract for car records handed across the boundary."""
    id: int | None
    version: int | None
    vin: str
    construction: ConstructionLike | None


class CarReader(Protocol):
    """Executes predicates, always eager-loading the construction."""
    async def fetch_one(self, query: Lookup) -> Any | None: ...
    async def fetch_all(self, query: Conjunction) -> list[Any]: ...


class CarUnitOfWork(CarReader, Protocol):
    """Reads and writes sharing one transaction."""
    async def persist(self, car: Any) -> Any: ...
    async def delete(self, kind: EntityKind, entity_id: int) -> int: ...


class CarStore(CarReader, Protocol):
    """Entry point to the relational store."""
    def transaction(self) -> AbstractAsyncContextManager[CarUnitOfWork]: ...


class Notifier(Protocol):
    """Fire-and-forget notification channel. May fail independently of the caller."""
    async def notify(self, subject: str, body: str) -> None: ...
