"""
DeviceLab Backend — Device Schemas
====================================

Request bodies carry raw client input. Trimming, length limits and the IP
format are enforced by DeviceService so direct service callers get the same
rules as HTTP clients.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from app.schemas.common import CamelModel


class DeviceCreate(CamelModel):
    """Body of POST /devices."""
    name: str = Field(description="Device name (max 100 characters)", examples=["Living room hub"])
    ip: str = Field(description="IPv4 address, unique across devices", examples=["192.168.1.20"])


class DeviceUpdate(CamelModel):
    """Body of PUT /devices/{id}. Only the fields present are changed."""
    name: Optional[str] = Field(default=None, description="New device name")
    ip: Optional[str] = Field(default=None, description="New IPv4 address")


class DeviceResponse(CamelModel):
    id: str = Field(description="Device identifier (24 hex characters)")
    name: str
    ip: str
    created_at: datetime
    updated_at: datetime


class DeviceDeleteResponse(CamelModel):
    message: str
    deleted_scenes: int = Field(description="Scenes removed along with the device")


class DeviceDeleteAllResponse(CamelModel):
    message: str
    deleted_devices: int
    deleted_scenes: int
