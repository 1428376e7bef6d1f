"""
CityInfo API: Custom Exception Hierarchy
========================================

What:  Application-specific exceptions for the error scenarios of the API.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by route handlers and services; caught by global handlers.

Exception Hierarchy:
    CityInfoError (base)         → 500 Internal Server Error
    ├── ValidationError          → 400 Bad Request (field-level errors)
    ├── NotFoundError            → 404 Not Found
    └── DatabaseError            → 500 Internal Server Error (generic message)
"""

from typing import Any, Dict, List, Optional


class CityInfoError(Exception):
    """
    Base exception for all CityInfo application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only where the handler says so)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(CityInfoError):
    """
    Raised when client input fails validation.

    What:    The request body (or the patched representation) broke one or
             more rules. Errors are collected per field before raising, so a
             single response reports every problem found.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "One or more validation errors occurred.",
            "details": {
                "errors": {
                    "Description": ["The provided description should be different from the name."]
                }
            }
        }
    """

    def __init__(
        self,
        errors: Optional[Dict[str, List[str]]] = None,
        message: str = "One or more validation errors occurred.",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        self.errors: Dict[str, List[str]] = errors or {}
        ctx["errors"] = self.errors
        super().__init__(message=message, context=ctx)


class NotFoundError(CityInfoError):
    """
    Raised when a requested resource does not exist.

    When:    Unknown city id, or unknown point of interest within a city.
    HTTP:    404 Not Found

    The repository returns None for missing records; handlers convert that
    into this exception so the global handler can answer with 404.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)


class DatabaseError(CityInfoError):
    """
    Raised when persisting changes fails.

    When:    The repository's save() reports failure (commit raised).
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. Details are logged
    server-side only.
    """

    def __init__(
        self,
        message: str = "A problem happened while handling your request.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
