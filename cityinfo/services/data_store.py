"""
CityInfo API: In-Memory Cities Data Store
=========================================

What:  Holds the seeded City / PointOfInterest records for the memory backend,
       and builds the seed rows the database backend inserts on first start.
How:   Entities are transient instances of the ORM classes, so both stores
       share one entity type and one mapper.
Who:   Created by create_app() and kept on app.state; read and mutated through
       InMemoryCityInfoRepository.
When:  One store per application instance. Nothing is persisted; a restart
       returns to the seed data.

Concurrency:
    No synchronization. Simultaneous writers race; this store is meant for
    development and demos.
"""

import logging
from typing import List

from cityinfo.models.city import City, PointOfInterest

logger = logging.getLogger(__name__)


def build_seed_cities() -> List[City]:
    """
    Return fresh seed entities.

    A new object graph is built on each call: ORM instances may belong to at
    most one session or store.
    """
    new_york = City(
        id=1,
        name="New York City",
        description="The one with that big park.",
    )

    antwerp = City(
        id=2,
        name="Antwerp",
        description="The one with the cathedral that was never really finished.",
    )
    antwerp.points_of_interest.extend([
        PointOfInterest(
            id=1,
            city_id=2,
            name="Cathedral",
            description="A Gothic style cathedral, conceived by architects Jan and Pieter Appelmans.",
        ),
        PointOfInterest(
            id=3,
            city_id=2,
            name="Antwerp Central Station",
            description="The finest example of railway architecture in Belgium.",
        ),
    ])

    return [new_york, antwerp]


class CitiesDataStore:
    """
    Process-lifetime container for the in-memory entities.

    Attributes:
        cities: The owned list of City entities, each owning its points of interest.
    """

    def __init__(self, cities: List[City] | None = None):
        self.cities: List[City] = cities if cities is not None else build_seed_cities()
        logger.info("In-memory store initialized with %d cities", len(self.cities))

    def max_point_of_interest_id(self) -> int:
        """Highest point-of-interest id across every city, 0 when there are none."""
        return max(
            (poi.id for city in self.cities for poi in city.points_of_interest),
            default=0,
        )
