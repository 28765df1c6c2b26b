"""
DeviceLab Backend — Scene Route Handlers
==========================================

What:  GET /scenes?deviceId=, POST /scenes, PUT/DELETE /scenes/{id}.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.common import ErrorResponse, MessageResponse
from app.schemas.scene import SceneCreate, SceneResponse, SceneUpdate
from app.services.scene_service import scene_service

router = APIRouter(prefix="/scenes", tags=["Scenes"])

_ERRORS = {
    400: {"description": "Missing parameter, invalid input or id format", "model": ErrorResponse},
    404: {"description": "Scene or device not found", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


@router.get(
    "",
    response_model=List[SceneResponse],
    responses=_ERRORS,
    summary="Get all scenes for a specific device",
)
async def list_scenes(
    # Optional here so a missing value reaches the service as MissingParameter
    device_id: Optional[str] = Query(
        default=None,
        alias="deviceId",
        description="The device ID to get scenes for",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> List[SceneResponse]:
    return await scene_service.list_scenes_by_device(db, device_id)


@router.post(
    "",
    response_model=SceneResponse,
    status_code=201,
    responses=_ERRORS,
    summary="Create a new scene",
)
async def create_scene(
    body: SceneCreate,
    db: AsyncSession = Depends(get_db_session),
) -> SceneResponse:
    return await scene_service.create_scene(db, name=body.name, device_id=body.device_id)


@router.put(
    "/{scene_id}",
    response_model=SceneResponse,
    responses=_ERRORS,
    summary="Update a scene by ID",
)
async def update_scene(
    scene_id: str,
    body: SceneUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> SceneResponse:
    changes = body.model_dump(exclude_unset=True)
    return await scene_service.update_scene(db, scene_id, changes)


@router.delete(
    "/{scene_id}",
    response_model=MessageResponse,
    responses=_ERRORS,
    summary="Delete a scene by ID",
    description="Tests that belong to the scene are not deleted.",
)
async def delete_scene(
    scene_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await scene_service.delete_scene(db, scene_id)
