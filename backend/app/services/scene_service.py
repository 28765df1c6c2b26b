"""
DeviceLab Backend — Scene Service
===================================

What:  CRUD over scenes, each owned by one device.
Who:   Called by the /scenes route handlers.

The owning device is checked explicitly before every write that sets
device_id (create, and update when deviceId is supplied). The store itself
does not enforce the reference. Deleting a scene leaves its tests alone.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError, MissingParameterError, ValidationError
from app.models.device import Device
from app.models.scene import Scene
from app.schemas.common import MessageResponse
from app.schemas.scene import SceneResponse
from app.services.persistence import commit, fetch_or_404
from app.services.validation import clean_name, ensure_object_id

logger = logging.getLogger(__name__)


class SceneService:
    """Business logic layer for scene operations."""

    async def _ensure_device(self, db: AsyncSession, device_id: str, failure_message: str) -> None:
        ensure_object_id(device_id, "device")
        await fetch_or_404(db, Device, device_id, "device", failure_message=failure_message)

    async def list_scenes_by_device(
        self, db: AsyncSession, device_id: Optional[str]
    ) -> List[SceneResponse]:
        """
        Scenes of one device, newest first.

        Raises:
            MissingParameterError: device_id omitted or empty
            InvalidIdFormatError:  device_id malformed
            NotFoundError:         no such device (never an empty list)
        """
        if not device_id:
            raise MissingParameterError("deviceId", message="Device ID is required")
        await self._ensure_device(db, device_id, failure_message="Failed to fetch scenes")

        try:
            result = await db.execute(
                select(Scene)
                .where(Scene.device_id == device_id)
                .order_by(Scene.created_at.desc())
            )
            scenes = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Store error listing scenes for %s: %s", device_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch scenes",
                context={"device_id": device_id},
            ) from e

        return [SceneResponse.model_validate(scene) for scene in scenes]

    async def create_scene(self, db: AsyncSession, name: str, device_id: str) -> SceneResponse:
        await self._ensure_device(db, device_id, failure_message="Failed to create scene")

        errors: List[str] = []
        clean = clean_name(name, "Scene", errors)
        if errors:
            raise ValidationError.from_errors(errors)

        scene = Scene(name=clean, device_id=device_id)
        db.add(scene)
        await commit(db, failure_message="Failed to create scene", context={"device_id": device_id})

        logger.info("Scene created: %s (%s) on device %s", scene.id, scene.name, device_id)
        return SceneResponse.model_validate(scene)

    async def update_scene(
        self,
        db: AsyncSession,
        scene_id: str,
        changes: Dict[str, Any],
    ) -> SceneResponse:
        """
        Apply a partial update.

        A supplied device_id is re-checked (format, then existence) before the
        scene itself is looked up.
        """
        ensure_object_id(scene_id, "scene")

        if "device_id" in changes:
            new_device_id = changes["device_id"]
            if new_device_id is None:
                raise ValidationError.from_errors(["Device ID is required"])
            await self._ensure_device(db, new_device_id, failure_message="Failed to update scene")

        scene = await fetch_or_404(
            db, Scene, scene_id, "scene", failure_message="Failed to update scene"
        )

        errors: List[str] = []
        if "name" in changes:
            name = clean_name(changes["name"], "Scene", errors)
        if errors:
            raise ValidationError.from_errors(errors)

        if "name" in changes:
            scene.name = name
        if "device_id" in changes:
            scene.device_id = changes["device_id"]

        await commit(db, failure_message="Failed to update scene", context={"scene_id": scene_id})

        logger.info("Scene updated: %s", scene_id)
        return SceneResponse.model_validate(scene)

    async def delete_scene(self, db: AsyncSession, scene_id: str) -> MessageResponse:
        ensure_object_id(scene_id, "scene")
        scene = await fetch_or_404(
            db, Scene, scene_id, "scene", failure_message="Failed to delete scene"
        )

        await db.delete(scene)
        await commit(db, failure_message="Failed to delete scene", context={"scene_id": scene_id})

        logger.info("Scene deleted: %s", scene_id)
        return MessageResponse(message="Scene deleted successfully")


scene_service = SceneService()
