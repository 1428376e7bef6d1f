"""
CityInfo API: Representation Mapper
===================================

What:  Pure conversions between persisted entities and API representations.
How:   Plain functions with no I/O and no session access beyond reading
       already-loaded attributes.

    City            → CityResponse (full) | CityWithoutPointsOfInterest (summary)
    PointOfInterest → PointOfInterestResponse | PointOfInterestForUpdate
    PointOfInterestForCreation → new PointOfInterest (no id)
    PointOfInterestForUpdate   → overwrite name/description of an existing entity
"""

from typing import Iterable, List

from cityinfo.models.city import City, PointOfInterest
from cityinfo.schemas.city import CityResponse, CityWithoutPointsOfInterest
from cityinfo.schemas.point_of_interest import (
    PointOfInterestForCreation,
    PointOfInterestForUpdate,
    PointOfInterestResponse,
)


def to_city_without_points_of_interest(city: City) -> CityWithoutPointsOfInterest:
    """Summary view. Never touches city.points_of_interest."""
    return CityWithoutPointsOfInterest(
        id=city.id,
        name=city.name,
        description=city.description,
    )


def to_cities_without_points_of_interest(
    cities: Iterable[City],
) -> List[CityWithoutPointsOfInterest]:
    return [to_city_without_points_of_interest(city) for city in cities]


def to_city_response(city: City) -> CityResponse:
    """Full view. The points of interest must already be loaded."""
    points = to_point_of_interest_responses(city.points_of_interest)
    return CityResponse(
        id=city.id,
        name=city.name,
        description=city.description,
        number_of_points_of_interest=len(points),
        points_of_interest=points,
    )


def to_point_of_interest_response(point_of_interest: PointOfInterest) -> PointOfInterestResponse:
    return PointOfInterestResponse(
        id=point_of_interest.id,
        name=point_of_interest.name,
        description=point_of_interest.description,
    )


def to_point_of_interest_responses(
    points_of_interest: Iterable[PointOfInterest],
) -> List[PointOfInterestResponse]:
    return [to_point_of_interest_response(p) for p in points_of_interest]


def to_point_of_interest_entity(creation: PointOfInterestForCreation) -> PointOfInterest:
    """New, unsaved entity. The store assigns the identifier."""
    return PointOfInterest(name=creation.name, description=creation.description)


def to_point_of_interest_for_update(point_of_interest: PointOfInterest) -> PointOfInterestForUpdate:
    """
    Transient update view of an existing entity (the PATCH starting point).

    model_construct skips validation: stored data is copied as-is, and the
    patched result is validated separately.
    """
    return PointOfInterestForUpdate.model_construct(
        name=point_of_interest.name,
        description=point_of_interest.description,
    )


def apply_point_of_interest_update(
    update: PointOfInterestForUpdate, point_of_interest: PointOfInterest
) -> PointOfInterest:
    """Overwrite exactly the mutable fields (name, description) of the entity."""
    point_of_interest.name = update.name
    point_of_interest.description = update.description
    return point_of_interest
