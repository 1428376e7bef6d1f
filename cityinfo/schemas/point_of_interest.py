"""
CityInfo API: Point of Interest Schemas
=======================================

What:  Pydantic models for the point-of-interest API contract.
How:   FastAPI validates request bodies against the input models and
       serializes responses through the output model. JSON keys are camelCase;
       input models also accept snake_case.

Models:
    PointOfInterestResponse     → GET/POST response body {id, name, description}
    PointOfInterestForCreation  → POST body
    PointOfInterestForUpdate    → PUT body, and the transient view PATCH edits
    PatchOperation              → one entry of a PATCH document
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

NAME_MAX_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 200


class PointOfInterestResponse(BaseModel):
    """Read view of a point of interest."""
    id: int = Field(description="Point of interest identifier")
    name: str = Field(description="Display name")
    description: Optional[str] = Field(default=None, description="Free-text description")

    model_config = {"from_attributes": True}


class _PointOfInterestInput(BaseModel):
    """Fields and rules shared by the creation and update bodies."""
    name: str = Field(
        min_length=1,
        max_length=NAME_MAX_LENGTH,
        description="Display name (required, max 50 characters)",
    )
    description: Optional[str] = Field(
        default=None,
        max_length=DESCRIPTION_MAX_LENGTH,
        description="Description (optional, max 200 characters, must differ from the name)",
    )

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


class PointOfInterestForCreation(_PointOfInterestInput):
    """Body of POST /api/cities/{cityId}/pointsofinterest. Carries no id."""


class PointOfInterestForUpdate(_PointOfInterestInput):
    """
    Body of PUT, and the transient representation a PATCH document is applied to.

    PUT is a full replace: an omitted description becomes null.
    """


class PatchOperation(BaseModel):
    """
    One JSON Patch (RFC 6902) operation.

    Example PATCH body:
        [
            {"op": "replace", "path": "/name", "value": "Updated name"},
            {"op": "remove", "path": "/description"}
        ]
    """
    op: Literal["add", "remove", "replace", "move", "copy", "test"]
    path: str = Field(description="JSON Pointer to the target member, e.g. /name")
    value: Any = Field(default=None, description="Value for add, replace and test")
    from_: Optional[str] = Field(
        default=None,
        alias="from",
        description="Source JSON Pointer for move and copy",
    )

    model_config = {"populate_by_name": True}

    @property
    def has_value(self) -> bool:
        """True when the client sent a value member, even an explicit null."""
        return "value" in self.model_fields_set
