"""Car Read Routes — lookup by id (with conditional GET) and criteria search.

Invariants:
    - GET /{id} sets ETag to the quoted version; If-None-Match equal to it → 304
    - GET with query parameters passes them verbatim as criteria
    - Not-found and invalid criteria both surface as 404 (via global handler)
"""

import logging

from fastapi import APIRouter, Depends, Header, Request, Response, status
from fastapi.responses import JSONResponse

from car_registry.api.dependencies import get_read_service
from car_registry.core.enforce_version import format_version_token
from car_registry.schemas.car import CarResponse
from car_registry.services.car_read_service import CarReadService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/cars", tags=["cars"])


@router.get("/{car_id}")
async def get_car(
    car_id: int,
    if_none_match: str | None = Header(None),
    service: CarReadService = Depends(get_read_service),
):
    """Get one car; 304 when the client already holds the current version."""
    car = await service.find_by_id(car_id)
    etag = format_version_token(car.version)
    if if_none_match == etag:
        logger.debug(f"get_car: {car_id} not modified", extra={"car_id": car_id})
        return Response(status_code=status.HTTP_304_NOT_MODIFIED)
    return JSONResponse(
        content=CarResponse.model_validate(car).model_dump(mode="json"),
        headers={"ETag": etag},
    )


@router.get("")
async def search_cars(
    request: Request, service: CarReadService = Depends(get_read_service),
):
    """Search cars by query parameters; no parameters lists all cars."""
    cars = await service.find(dict(request.query_params))
    return {
        "cars": [
            CarResponse.model_validate(car).model_dump(mode="json")
            for car in cars
        ],
    }
