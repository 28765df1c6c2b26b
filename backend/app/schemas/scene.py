"""
DeviceLab Backend — Scene Schemas
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from app.schemas.common import CamelModel


class SceneCreate(CamelModel):
    """Body of POST /scenes."""
    name: str = Field(description="Scene name (max 100 characters)", examples=["Evening"])
    device_id: str = Field(description="Identifier of an existing device")


class SceneUpdate(CamelModel):
    """Body of PUT /scenes/{id}. Only the fields present are changed."""
    name: Optional[str] = Field(default=None)
    device_id: Optional[str] = Field(default=None, description="Move the scene to another device")


class SceneResponse(CamelModel):
    id: str
    name: str
    device_id: str
    created_at: datetime
    updated_at: datetime
