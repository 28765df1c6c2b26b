"""
DeviceLab Backend — Shared Pydantic Schemas
=============================================

What:  Base model and response models shared by every resource.
Why:   The wire format is camelCase (deviceId, createdAt) while Python code
       stays snake_case. One base class carries that mapping.
How:   alias_generator=to_camel renders aliases in responses; populate_by_name
       lets services build models with snake_case keyword arguments.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for every request/response schema: camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    """Plain acknowledgement, e.g. after deleting a scene."""
    message: str = Field(description="Human-readable result")


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "Device not found",
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(CamelModel):
    """Returned by GET /health for monitoring and container probes."""
    status: str = Field(description="OK or DEGRADED")
    timestamp: datetime = Field(description="Server time (UTC)")
    version: str = Field(description="Application version")
    database: str = Field(description="Store connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
