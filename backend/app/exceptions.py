"""
DeviceLab Backend — Custom Exception Hierarchy
================================================

What:  Defines application-specific exceptions for each failure kind.
Why:   Services classify store and input failures once; global handlers in
       main.py turn each class into a status code and a JSON body.
How:   Each exception carries a human-readable message and an optional
       context dict (logged server-side, returned as `details` where useful).
Who:   Raised by services; caught by global handlers.

Exception Hierarchy:
    DeviceLabError (base)
    ├── MissingParameterError  → 400 Bad Request
    ├── InvalidIdFormatError   → 400 Bad Request
    ├── ValidationError        → 400 Bad Request
    ├── NotFoundError          → 404 Not Found
    ├── DuplicateKeyError      → 409 Conflict
    └── DatabaseError          → 500 Internal Server Error

Every error is terminal for its request; nothing is retried.
"""

from typing import Any, Dict, List, Optional


class DeviceLabError(Exception):
    """
    Base exception for all DeviceLab application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class MissingParameterError(DeviceLabError):
    """
    Raised when a required query parameter is absent.

    When:    GET /scenes without deviceId, GET /tests without sceneId.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        parameter: str,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["parameter"] = parameter
        super().__init__(message=message or f"{parameter} is required", context=ctx)
        self.parameter = parameter


class InvalidIdFormatError(DeviceLabError):
    """
    Raised when an identifier is not a 24-character hex string.

    Checked before any store lookup, so a malformed id never costs a query.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        resource: str,
        value: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if value is not None:
            ctx["value"] = value
        super().__init__(message=f"Invalid {resource} ID format", context=ctx)
        self.resource = resource


class ValidationError(DeviceLabError):
    """
    Raised when client input breaks a field constraint.

    What:    Name missing or too long, malformed IP, unknown state, empty
             bulk list. Several field problems are joined into one message.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Validation error: Device name is required, Please enter a valid IP address",
            "details": {"errors": ["Device name is required", "Please enter a valid IP address"]}
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field

    @classmethod
    def from_errors(cls, errors: List[str]) -> "ValidationError":
        """Aggregate several field messages into a single error."""
        return cls(
            message=f"Validation error: {', '.join(errors)}",
            context={"errors": list(errors)},
        )


class NotFoundError(DeviceLabError):
    """
    Raised when a target or referenced record does not exist.

    When:    Updating/deleting a missing record, or writing a scene/test whose
             parent device/scene is gone. Listing children of a well-formed
             but unknown parent also raises this rather than returning [].
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource.capitalize()} not found", context=ctx)


class DuplicateKeyError(DeviceLabError):
    """
    Raised when a write would break a unique index.

    When:    Creating or updating a device with an IP another device uses.
    HTTP:    409 Conflict
    """

    def __init__(
        self,
        message: str = "A record with this key already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(DeviceLabError):
    """
    Raised when a store operation fails for an unclassified reason.

    The message is a generic per-operation text ("Failed to create device");
    the driver error is logged server-side only.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
