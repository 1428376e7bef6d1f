"""
CityInfo API: Points of Interest Route Handlers
===============================================

What:  CRUD for /api/cities/{cityId}/pointsofinterest.
How:   Each write handler runs the same pipeline:

    parse body → structural validation → cross-field validation
        → city exists? → point exists? → map / mutate → save() → response

    Validation failures short-circuit to 400 (ValidationError), missing
    resources to 404 (NotFoundError), and a failed save() to 500
    (DatabaseError). All three are rendered by the global handlers in main.py.

Routes:
    GET    /api/cities/{city_id}/pointsofinterest          list
    GET    /api/cities/{city_id}/pointsofinterest/{id}     detail
    POST   /api/cities/{city_id}/pointsofinterest          create  (201 + Location)
    PUT    /api/cities/{city_id}/pointsofinterest/{id}     replace (204)
    PATCH  /api/cities/{city_id}/pointsofinterest/{id}     JSON Patch (204)
    DELETE /api/cities/{city_id}/pointsofinterest/{id}     delete  (204, sends mail)

GET and POST bodies are JSON, or XML when the Accept header asks for it
(see cityinfo.responses).
"""

import logging
from typing import List

from fastapi import APIRouter, BackgroundTasks, Body, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from cityinfo.dependencies import get_city_info_repository, get_mail_service
from cityinfo.exceptions import CityInfoError, DatabaseError, NotFoundError, ValidationError
from cityinfo.middleware.request_id import request_id_var
from cityinfo.models.city import PointOfInterest
from cityinfo.responses import represent
from cityinfo.schemas.common import ErrorResponse
from cityinfo.schemas.point_of_interest import (
    PatchOperation,
    PointOfInterestForCreation,
    PointOfInterestForUpdate,
    PointOfInterestResponse,
)
from cityinfo.services import mapper
from cityinfo.services.json_patch import apply_patch
from cityinfo.services.mail_base import MailService
from cityinfo.services.repository_base import CityInfoRepository
from cityinfo.services.validation import (
    validate_patched_point_of_interest,
    validate_point_of_interest_input,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cities/{city_id}/pointsofinterest", tags=["Points of Interest"])

_NOT_FOUND = {"description": "City or point of interest not found", "model": ErrorResponse}
_INVALID = {"description": "Validation failed", "model": ErrorResponse}
_XML = {"content": {"application/xml": {}}}


async def _require_point_of_interest(
    repository: CityInfoRepository, city_id: int, point_of_interest_id: int
) -> PointOfInterest:
    """Guard shared by the nested routes: city first, then the point itself."""
    if not await repository.city_exists(city_id):
        raise NotFoundError(resource="city", resource_id=city_id)

    point_of_interest = await repository.get_point_of_interest_for_city(city_id, point_of_interest_id)
    if point_of_interest is None:
        raise NotFoundError(resource="point of interest", resource_id=point_of_interest_id)
    return point_of_interest


async def _save(repository: CityInfoRepository, action: str) -> None:
    if not await repository.save():
        raise DatabaseError(context={"action": action})


@router.get(
    "",
    response_model=List[PointOfInterestResponse],
    responses={
        200: _XML,
        404: _NOT_FOUND,
        500: {"description": "Unexpected fault", "model": ErrorResponse},
    },
    summary="List points of interest of a city",
)
async def get_points_of_interest(
    city_id: int,
    request: Request,
    repository: CityInfoRepository = Depends(get_city_info_repository),
):
    """
    List the points of interest of a city.

    Unlike the other routes, unexpected faults are caught here, logged at
    CRITICAL and answered with a generic 500 body.
    """
    try:
        if not await repository.city_exists(city_id):
            logger.info(
                "City with id %d wasn't found when accessing points of interest.", city_id
            )
            raise NotFoundError(resource="city", resource_id=city_id)

        points_of_interest = await repository.get_points_of_interest_for_city(city_id)
        return represent(
            request,
            mapper.to_point_of_interest_responses(points_of_interest),
            root="PointsOfInterest",
            item="PointOfInterest",
        )

    except CityInfoError:
        raise
    except Exception:
        logger.critical(
            "Exception while getting points of interest for city with id %d.",
            city_id,
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "server_error",
                "message": "A problem happened while handling your request.",
                "request_id": request_id_var.get(""),
            },
        )


@router.get(
    "/{point_of_interest_id}",
    name="get_point_of_interest",
    response_model=PointOfInterestResponse,
    responses={200: _XML, 404: _NOT_FOUND},
    summary="Get a single point of interest",
)
async def get_point_of_interest(
    city_id: int,
    point_of_interest_id: int,
    request: Request,
    repository: CityInfoRepository = Depends(get_city_info_repository),
) -> Response:
    point_of_interest = await _require_point_of_interest(repository, city_id, point_of_interest_id)
    return represent(
        request,
        mapper.to_point_of_interest_response(point_of_interest),
        root="PointOfInterest",
    )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=PointOfInterestResponse,
    responses={201: _XML, 400: _INVALID, 404: _NOT_FOUND},
    summary="Create a point of interest",
)
async def create_point_of_interest(
    city_id: int,
    request: Request,
    point_of_interest: PointOfInterestForCreation = Body(...),
    repository: CityInfoRepository = Depends(get_city_info_repository),
) -> Response:
    """
    Create a point of interest in a city.

    Responds 201 with the created representation and a Location header
    pointing at GET /api/cities/{city_id}/pointsofinterest/{id}.
    """
    validate_point_of_interest_input(point_of_interest)

    if not await repository.city_exists(city_id):
        raise NotFoundError(resource="city", resource_id=city_id)

    entity = mapper.to_point_of_interest_entity(point_of_interest)
    await repository.add_point_of_interest_for_city(city_id, entity)
    await _save(repository, "create point of interest")

    created = mapper.to_point_of_interest_response(entity)
    location = request.url_for(
        "get_point_of_interest",
        city_id=city_id,
        point_of_interest_id=created.id,
    )
    logger.info("Created point of interest %d for city %d", created.id, city_id)
    return represent(
        request,
        created,
        root="PointOfInterest",
        status_code=status.HTTP_201_CREATED,
        headers={"Location": str(location)},
    )


@router.put(
    "/{point_of_interest_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={400: _INVALID, 404: _NOT_FOUND},
    summary="Replace a point of interest",
)
async def update_point_of_interest(
    city_id: int,
    point_of_interest_id: int,
    point_of_interest: PointOfInterestForUpdate = Body(...),
    repository: CityInfoRepository = Depends(get_city_info_repository),
) -> Response:
    """Full replace: every mutable field takes the body's value (omitted → null)."""
    validate_point_of_interest_input(point_of_interest)

    entity = await _require_point_of_interest(repository, city_id, point_of_interest_id)

    mapper.apply_point_of_interest_update(point_of_interest, entity)
    await repository.update_point_of_interest_for_city(city_id, entity)
    await _save(repository, "update point of interest")

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch(
    "/{point_of_interest_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={400: _INVALID, 404: _NOT_FOUND},
    summary="Partially update a point of interest with JSON Patch",
)
async def partially_update_point_of_interest(
    city_id: int,
    point_of_interest_id: int,
    operations: List[PatchOperation] = Body(...),
    repository: CityInfoRepository = Depends(get_city_info_repository),
) -> Response:
    """
    Apply a JSON Patch document to a point of interest.

    Steps:
        1. Load the entity (404 for unknown city / point)
        2. Map it to a transient PointOfInterestForUpdate
        3. Apply the operations in order to a copy (400 if any cannot apply)
        4. Validate the patched copy, structural and cross-field (400)
        5. Map the copy back onto the entity and save
    """
    entity = await _require_point_of_interest(repository, city_id, point_of_interest_id)

    to_patch = mapper.to_point_of_interest_for_update(entity)
    patched, patch_errors = apply_patch(
        to_patch.model_dump(),
        operations,
        members=PointOfInterestForUpdate.model_fields.keys(),
    )
    if patch_errors:
        raise ValidationError(errors=patch_errors)

    validated = validate_patched_point_of_interest(patched)

    mapper.apply_point_of_interest_update(validated, entity)
    await repository.update_point_of_interest_for_city(city_id, entity)
    await _save(repository, "patch point of interest")

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{point_of_interest_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={404: _NOT_FOUND},
    summary="Delete a point of interest",
)
async def delete_point_of_interest(
    city_id: int,
    point_of_interest_id: int,
    background_tasks: BackgroundTasks,
    repository: CityInfoRepository = Depends(get_city_info_repository),
    mail_service: MailService = Depends(get_mail_service),
) -> Response:
    """
    Delete a point of interest.

    After a successful save, a "Point of interest deleted." mail is scheduled
    as a background task. Its outcome does not affect the response.
    """
    entity = await _require_point_of_interest(repository, city_id, point_of_interest_id)
    deleted_id, deleted_name = entity.id, entity.name

    await repository.delete_point_of_interest(entity)
    await _save(repository, "delete point of interest")

    background_tasks.add_task(
        mail_service.send,
        "Point of interest deleted.",
        f"Point of interest {deleted_name} with id {deleted_id} was deleted",
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
