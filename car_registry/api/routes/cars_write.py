"""Car Write Routes — create, conditional update and delete.

Invariants:
    - POST returns 201 with a Location header pointing at the new car
    - PUT requires If-Match (428 without it) and returns 204 with the new ETag
    - DELETE returns 204 whether or not the car existed

Design Decisions:
    - Missing If-Match answered here, not in the service: the service only
      knows malformed tokens (412), absence is an HTTP precondition concern
"""

import logging

from fastapi import APIRouter, Depends, Header, Request, Response, status
from fastapi.responses import JSONResponse

from car_registry.api.dependencies import get_write_service
from car_registry.core.enforce_version import format_version_token
from car_registry.schemas.car import CarCreate, CarUpdate
from car_registry.services.car_write_service import CarWriteService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/cars", tags=["cars"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_car(
    body: CarCreate,
    request: Request,
    service: CarWriteService = Depends(get_write_service),
):
    """Create a car with its construction details."""
    car_id = await service.create(body.to_model())
    location = f"{str(request.url.replace(query='')).rstrip('/')}/{car_id}"
    logger.debug(f"create_car: location={location}", extra={"car_id": car_id})
    return Response(
        status_code=status.HTTP_201_CREATED, headers={"Location": location},
    )


@router.put("/{car_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_car(
    car_id: int,
    body: CarUpdate,
    if_match: str | None = Header(None),
    service: CarWriteService = Depends(get_write_service),
):
    """Replace the attributes of a car (optimistic concurrency via If-Match)."""
    if if_match is None:
        return JSONResponse(
            status_code=status.HTTP_428_PRECONDITION_REQUIRED,
            content={
                "error": {
                    "code": "PRECONDITION_REQUIRED",
                    "message": 'Header "If-Match" is missing',
                    "category": "precondition",
                    "severity": "error",
                },
            },
        )
    version = await service.update(car_id, body.to_model(), if_match)
    return Response(
        status_code=status.HTTP_204_NO_CONTENT,
        headers={"ETag": format_version_token(version)},
    )


@router.delete("/{car_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_car(
    car_id: int, service: CarWriteService = Depends(get_write_service),
):
    """Delete a car and its construction details (idempotent)."""
    deleted = await service.delete(car_id)
    logger.debug(f"delete_car: {car_id} deleted={deleted}", extra={"car_id": car_id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)
