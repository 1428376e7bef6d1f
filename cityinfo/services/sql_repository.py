"""
CityInfo API: SQLAlchemy Repository
===================================

What:  CityInfoRepository backed by the relational tables through an AsyncSession.
How:   Queries with SQLAlchemy 2.0 select(); mutations are staged on the
       session and written by save(), which commits.
Who:   Built per request by cityinfo.dependencies with the request's session.

Query patterns:
    get_cities()                        SELECT ... FROM cities ORDER BY name
    get_city(id, include=True)          + selectinload(points_of_interest)
    city_exists(id)                     SELECT EXISTS (SELECT 1 FROM cities WHERE id = :id)
    get_point_of_interest_for_city()    WHERE city_id = :city AND id = :id
"""

import logging
from typing import List, Optional

from sqlalchemy import exists, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from cityinfo.models.city import City, PointOfInterest
from cityinfo.services.repository_base import CityInfoRepository

logger = logging.getLogger(__name__)

# Identifier columns are 32-bit INTEGER on PostgreSQL. Ids outside this range
# cannot match a row, and binding them fails in the driver (int4 out of range
# on asyncpg, OverflowError on SQLite), so lookups answer "not found" up front.
ID_MIN = -(2 ** 31)
ID_MAX = 2 ** 31 - 1


def _storable_id(*ids: int) -> bool:
    return all(ID_MIN <= value <= ID_MAX for value in ids)


class SqlAlchemyCityInfoRepository(CityInfoRepository):
    """Repository over the `cities` / `points_of_interest` tables."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_cities(self) -> List[City]:
        result = await self.session.execute(select(City).order_by(City.name))
        return list(result.scalars().all())

    async def get_city(
        self, city_id: int, include_points_of_interest: bool = False
    ) -> Optional[City]:
        if not _storable_id(city_id):
            return None
        query = select(City).where(City.id == city_id)
        if include_points_of_interest:
            query = query.options(selectinload(City.points_of_interest))
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def city_exists(self, city_id: int) -> bool:
        if not _storable_id(city_id):
            return False
        result = await self.session.execute(
            select(exists().where(City.id == city_id))
        )
        return bool(result.scalar())

    async def get_points_of_interest_for_city(self, city_id: int) -> List[PointOfInterest]:
        if not _storable_id(city_id):
            return []
        result = await self.session.execute(
            select(PointOfInterest)
            .where(PointOfInterest.city_id == city_id)
            .order_by(PointOfInterest.id)
        )
        return list(result.scalars().all())

    async def get_point_of_interest_for_city(
        self, city_id: int, point_of_interest_id: int
    ) -> Optional[PointOfInterest]:
        if not _storable_id(city_id, point_of_interest_id):
            return None
        result = await self.session.execute(
            select(PointOfInterest).where(
                PointOfInterest.city_id == city_id,
                PointOfInterest.id == point_of_interest_id,
            )
        )
        return result.scalar_one_or_none()

    async def add_point_of_interest_for_city(
        self, city_id: int, point_of_interest: PointOfInterest
    ) -> None:
        # Setting the foreign key avoids lazy-loading the city's collection,
        # which an AsyncSession cannot do implicitly
        point_of_interest.city_id = city_id
        self.session.add(point_of_interest)

    async def update_point_of_interest_for_city(
        self, city_id: int, point_of_interest: PointOfInterest
    ) -> None:
        # Field changes on a persistent entity are tracked by the session;
        # add() is a no-op for it and re-attaches a detached one
        point_of_interest.city_id = city_id
        self.session.add(point_of_interest)

    async def delete_point_of_interest(self, point_of_interest: PointOfInterest) -> None:
        await self.session.delete(point_of_interest)

    async def save(self) -> bool:
        """Commit the session; on failure roll back, log, and report False."""
        try:
            await self.session.commit()
            return True
        except SQLAlchemyError as e:
            logger.error("Commit failed: %s", str(e), exc_info=True)
            await self.session.rollback()
            return False
