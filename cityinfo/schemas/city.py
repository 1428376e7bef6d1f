"""
CityInfo API: City Schemas
==========================

What:  Response models for the /api/cities endpoints.

Views:
    CityWithoutPointsOfInterest → summary {id, name, description}
                                  (list endpoint, and single city by default)
    CityResponse                → full view with nested points of interest
                                  (GET /api/cities/{id}?includePointsOfInterest=true)
"""

from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from cityinfo.schemas.point_of_interest import PointOfInterestResponse


class CityWithoutPointsOfInterest(BaseModel):
    """Summary view of a city."""
    id: int = Field(description="City identifier")
    name: str = Field(description="City name")
    description: Optional[str] = Field(default=None, description="City description")

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


class CityResponse(CityWithoutPointsOfInterest):
    """Full view of a city, including its points of interest."""
    number_of_points_of_interest: int = Field(
        default=0,
        description="Count of the nested points of interest",
    )
    points_of_interest: List[PointOfInterestResponse] = Field(
        default_factory=list,
        description="Points of interest owned by this city",
    )
