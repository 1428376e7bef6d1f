"""
CityInfo API: In-Memory Repository
==================================

What:  CityInfoRepository backed by a CitiesDataStore.
How:   Reads and writes the store's entity lists directly. save() has nothing
       to commit and always reports success.

Identifier allocation:
    New points of interest receive (highest id across ALL cities) + 1, so ids
    are unique store-wide and strictly increasing.
"""

import logging
from typing import List, Optional

from cityinfo.models.city import City, PointOfInterest
from cityinfo.services.data_store import CitiesDataStore
from cityinfo.services.repository_base import CityInfoRepository

logger = logging.getLogger(__name__)


class InMemoryCityInfoRepository(CityInfoRepository):
    """Repository over the process-lifetime in-memory store."""

    def __init__(self, store: CitiesDataStore):
        self.store = store

    def _find_city(self, city_id: int) -> Optional[City]:
        return next((c for c in self.store.cities if c.id == city_id), None)

    async def get_cities(self) -> List[City]:
        return sorted(self.store.cities, key=lambda c: c.name)

    async def get_city(
        self, city_id: int, include_points_of_interest: bool = False
    ) -> Optional[City]:
        # The collection is always in memory, so eager loading is a no-op here
        return self._find_city(city_id)

    async def city_exists(self, city_id: int) -> bool:
        return self._find_city(city_id) is not None

    async def get_points_of_interest_for_city(self, city_id: int) -> List[PointOfInterest]:
        city = self._find_city(city_id)
        if city is None:
            return []
        return list(city.points_of_interest)

    async def get_point_of_interest_for_city(
        self, city_id: int, point_of_interest_id: int
    ) -> Optional[PointOfInterest]:
        city = self._find_city(city_id)
        if city is None:
            return None
        return next(
            (p for p in city.points_of_interest if p.id == point_of_interest_id),
            None,
        )

    async def add_point_of_interest_for_city(
        self, city_id: int, point_of_interest: PointOfInterest
    ) -> None:
        city = self._find_city(city_id)
        point_of_interest.id = self.store.max_point_of_interest_id() + 1
        point_of_interest.city_id = city_id
        city.points_of_interest.append(point_of_interest)
        logger.info(
            "Added point of interest %d to city %d (in memory)",
            point_of_interest.id,
            city_id,
        )

    async def update_point_of_interest_for_city(
        self, city_id: int, point_of_interest: PointOfInterest
    ) -> None:
        # The entity is the stored object; its fields are already updated
        pass

    async def delete_point_of_interest(self, point_of_interest: PointOfInterest) -> None:
        for city in self.store.cities:
            if point_of_interest in city.points_of_interest:
                city.points_of_interest.remove(point_of_interest)
                logger.info("Removed point of interest %d (in memory)", point_of_interest.id)
                return

    async def save(self) -> bool:
        return True
