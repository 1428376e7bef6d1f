"""
CityInfo API: Cities Route Handlers
===================================

What:  GET /api/cities (list) and GET /api/cities/{id} (detail).
How:   Reads through the injected CityInfoRepository and maps entities to
       their summary or full representation, rendered as JSON or XML
       depending on the Accept header.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import Response

from cityinfo.dependencies import get_city_info_repository
from cityinfo.exceptions import NotFoundError
from cityinfo.responses import represent
from cityinfo.schemas.city import CityResponse, CityWithoutPointsOfInterest
from cityinfo.schemas.common import ErrorResponse
from cityinfo.services import mapper
from cityinfo.services.repository_base import CityInfoRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cities", tags=["Cities"])

_XML = {"application/xml": {}}


@router.get(
    "",
    response_model=List[CityWithoutPointsOfInterest],
    responses={200: {"content": _XML}},
    summary="List cities",
    description="Returns every city ordered by name, without points of interest.",
)
async def get_cities(
    request: Request,
    repository: CityInfoRepository = Depends(get_city_info_repository),
) -> Response:
    cities = await repository.get_cities()
    return represent(
        request,
        mapper.to_cities_without_points_of_interest(cities),
        root="Cities",
        item="City",
    )


@router.get(
    "/{city_id}",
    response_model=None,
    responses={
        200: {
            "description": "The city (full view when points are included)",
            "model": CityResponse,
            "content": _XML,
        },
        404: {"description": "City not found", "model": ErrorResponse},
    },
    summary="Get a single city",
)
async def get_city(
    city_id: int,
    request: Request,
    include_points_of_interest: bool = Query(
        default=False,
        alias="includePointsOfInterest",
        description="Include the nested points of interest in the response",
    ),
    repository: CityInfoRepository = Depends(get_city_info_repository),
) -> Response:
    """
    Get a city by id.

    Returns the summary view {id, name, description} unless
    includePointsOfInterest=true, in which case the full view with nested
    points of interest is returned.
    """
    city = await repository.get_city(city_id, include_points_of_interest)
    if city is None:
        raise NotFoundError(resource="city", resource_id=city_id)

    if include_points_of_interest:
        return represent(request, mapper.to_city_response(city), root="City")
    return represent(request, mapper.to_city_without_points_of_interest(city), root="City")
