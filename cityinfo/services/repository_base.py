"""
CityInfo API: Abstract City Info Repository
===========================================

What:  Abstract base class defining the data-access contract for cities and
       their points of interest.
How:   Concrete stores inherit from CityInfoRepository and implement every
       method. Handlers only ever see this interface.
Who:   Called by the route handlers in cityinfo.routes.
When:  Instantiated per request by cityinfo.dependencies.get_city_info_repository.

Implementations:
    - InMemoryCityInfoRepository: seeded CitiesDataStore, mutated directly
    - SqlAlchemyCityInfoRepository: AsyncSession, mutations staged until save()

Contract notes:
    - Lookups return None for missing records; the caller decides on 404.
    - Nested operations do not check that the city exists. Handlers call
      city_exists() first.
    - Mutations become durable only after save() returns True.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from cityinfo.models.city import City, PointOfInterest


class CityInfoRepository(ABC):
    """Query and mutation façade over a City / PointOfInterest store."""

    @abstractmethod
    async def get_cities(self) -> List[City]:
        """All cities ordered by name ascending. No pagination, no filtering."""
        ...

    @abstractmethod
    async def get_city(
        self, city_id: int, include_points_of_interest: bool = False
    ) -> Optional[City]:
        """
        A single city, or None.

        Args:
            city_id: City identifier.
            include_points_of_interest: Eagerly load the nested collection.
                When False, callers must not touch city.points_of_interest.
        """
        ...

    @abstractmethod
    async def city_exists(self, city_id: int) -> bool:
        ...

    @abstractmethod
    async def get_points_of_interest_for_city(self, city_id: int) -> List[PointOfInterest]:
        """All points of interest for a city (no existence check on the city)."""
        ...

    @abstractmethod
    async def get_point_of_interest_for_city(
        self, city_id: int, point_of_interest_id: int
    ) -> Optional[PointOfInterest]:
        """A single point of interest scoped to a city, or None."""
        ...

    @abstractmethod
    async def add_point_of_interest_for_city(
        self, city_id: int, point_of_interest: PointOfInterest
    ) -> None:
        """
        Append a new point of interest to the city's collection.

        The city must exist. The identifier is assigned by the store: directly
        for the memory store, at save() for the relational store.
        """
        ...

    @abstractmethod
    async def update_point_of_interest_for_city(
        self, city_id: int, point_of_interest: PointOfInterest
    ) -> None:
        """
        Keep an already-modified point of interest staged for save().

        The mapper has overwritten the entity's fields in place; this call
        never removes the entity.
        """
        ...

    @abstractmethod
    async def delete_point_of_interest(self, point_of_interest: PointOfInterest) -> None:
        ...

    @abstractmethod
    async def save(self) -> bool:
        """
        Commit staged mutations.

        Returns:
            True on success, False when the store failed to persist.
        """
        ...
