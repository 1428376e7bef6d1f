"""
CityInfo API: Point of Interest Validation
==========================================

What:  Field-level validation rules and error collection for point-of-interest
       input, plus conversion of pydantic errors into the API's error shape.
How:   Errors are accumulated into {field key: [messages]} and raised together
       as a single ValidationError (400). Field keys are PascalCase property
       names ("Name", "Description").

Rules:
    Structural   name required (1-50 chars), description optional (max 200)
                 → enforced by the pydantic input models
    Cross-field  description must differ from name
                 → enforced here, for POST, PUT and the patched PATCH view
"""

from typing import Any, Dict, List, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

from cityinfo.exceptions import ValidationError
from cityinfo.schemas.point_of_interest import PointOfInterestForUpdate

DESCRIPTION_EQUALS_NAME_MESSAGE = "The provided description should be different from the name."

# Request sections FastAPI prefixes error locations with
_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


def field_key(loc: Sequence[Any]) -> str:
    """
    Build an error key from a pydantic/FastAPI error location.

    ("body", "name")        → "Name"
    ("body", 0, "op")       → "[0].Op"
    ("body",)               → "Body"
    """
    parts = list(loc)
    if parts and parts[0] in _LOCATION_PREFIXES:
        prefix = parts.pop(0)
        if not parts:
            return str(prefix).capitalize()

    key = ""
    for part in parts:
        if isinstance(part, int):
            key += f"[{part}]"
        else:
            text = str(part)
            text = text[:1].upper() + text[1:]
            key = f"{key}.{text}" if key else text
    return key or "Body"


def errors_from_pydantic(errors: Sequence[Dict[str, Any]]) -> Dict[str, List[str]]:
    """Group pydantic error dicts by field key, keeping their order."""
    grouped: Dict[str, List[str]] = {}
    for error in errors:
        key = field_key(error.get("loc", ()))
        if error.get("type") == "missing":
            message = f"The {key} field is required."
        else:
            message = error.get("msg", "Invalid value.")
        grouped.setdefault(key, []).append(message)
    return grouped


def add_error(errors: Dict[str, List[str]], key: str, message: str) -> None:
    errors.setdefault(key, []).append(message)


def check_description_differs_from_name(
    name: Optional[str],
    description: Optional[str],
    errors: Dict[str, List[str]],
) -> None:
    if name is not None and description == name:
        add_error(errors, "Description", DESCRIPTION_EQUALS_NAME_MESSAGE)


def validate_point_of_interest_input(dto: Any) -> None:
    """
    Cross-field check for an already structurally-valid POST/PUT body.

    Raises:
        ValidationError: description equals name.
    """
    errors: Dict[str, List[str]] = {}
    check_description_differs_from_name(dto.name, dto.description, errors)
    if errors:
        raise ValidationError(errors=errors)


def validate_patched_point_of_interest(data: Dict[str, Any]) -> PointOfInterestForUpdate:
    """
    Re-run structural and cross-field validation on a patched representation.

    Both rule sets are evaluated before raising, so a response can report
    "Name too long" and "Description equals name" together.

    Returns:
        The validated PointOfInterestForUpdate.

    Raises:
        ValidationError: any rule failed.
    """
    errors: Dict[str, List[str]] = {}
    validated: Optional[PointOfInterestForUpdate] = None

    try:
        validated = PointOfInterestForUpdate.model_validate(data)
    except PydanticValidationError as e:
        errors.update(errors_from_pydantic(e.errors()))

    name = data.get("name")
    description = data.get("description")
    if isinstance(name, str):
        check_description_differs_from_name(name, description, errors)

    if errors or validated is None:
        raise ValidationError(errors=errors)
    return validated
