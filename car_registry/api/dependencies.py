"""Route Dependencies — hand services built in the lifespan to route handlers.

Invariants:
    - Services are created once per application in main.lifespan and stored on app.state
    - Route modules never construct services or sessions themselves

Design Decisions:
    - app.state over module-level singletons: tests swap services through
      app.dependency_overrides without patching modules
"""

from fastapi import Request

from car_registry.infrastructure.database import DatabaseSessionManager
from car_registry.services.car_read_service import CarReadService
from car_registry.services.car_write_service import CarWriteService


def get_read_service(request: Request) -> CarReadService:
    return request.app.state.read_service


def get_write_service(request: Request) -> CarWriteService:
    return request.app.state.write_service


def get_db_manager(request: Request) -> DatabaseSessionManager | None:
    return getattr(request.app.state, "db_manager", None)


def get_notifier(request: Request):
    return getattr(request.app.state, "notifier", None)
