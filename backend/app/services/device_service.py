"""
DeviceLab Backend — Device Service
====================================

What:  CRUD over devices, plus the cascade that removes a device's scenes.
Who:   Called by the /devices route handlers.

Cascade:
    Deleting one device deletes every scene whose device_id matches it.
    Deleting all devices first collects every device id, deletes the scenes
    pointing at any of them, then deletes the devices. Tests under those
    scenes are left in place.

    Each step commits on its own. If the process dies between steps the
    store keeps whatever finished: a device delete that committed stays
    deleted even if its scenes were not yet removed.
"""

import logging
from typing import Any, Dict, List

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError, ValidationError
from app.models.device import Device
from app.models.scene import Scene
from app.schemas.device import (
    DeviceDeleteAllResponse,
    DeviceDeleteResponse,
    DeviceResponse,
)
from app.services.persistence import commit, fetch_or_404
from app.services.validation import clean_ip, clean_name, ensure_object_id

logger = logging.getLogger(__name__)

DUPLICATE_IP_MESSAGE = "A device with this IP address already exists"


class DeviceService:
    """
    Business logic layer for device operations.

    Responsibilities:
        - list_devices(): All devices, newest first
        - create_device(): Validate and insert; IP must be unique
        - update_device(): Partial update of name and/or ip
        - delete_device(): Remove one device and its scenes
        - delete_all_devices(): Remove every device and every scene they own
    """

    async def list_devices(self, db: AsyncSession) -> List[DeviceResponse]:
        try:
            result = await db.execute(select(Device).order_by(Device.created_at.desc()))
            devices = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Store error listing devices: %s", str(e), exc_info=True)
            raise DatabaseError(message="Failed to fetch devices") from e

        return [DeviceResponse.model_validate(device) for device in devices]

    async def create_device(self, db: AsyncSession, name: str, ip: str) -> DeviceResponse:
        """
        Insert a new device.

        Raises:
            ValidationError:   Name missing/too long or IP malformed
                               (all problems reported together)
            DuplicateKeyError: Another device already uses this IP
        """
        errors: List[str] = []
        clean = clean_name(name, "Device", errors)
        address = clean_ip(ip, errors)
        if errors:
            raise ValidationError.from_errors(errors)

        device = Device(name=clean, ip=address)
        db.add(device)
        await commit(
            db,
            failure_message="Failed to create device",
            duplicate_message=DUPLICATE_IP_MESSAGE,
            context={"ip": address},
        )

        logger.info("Device created: %s (%s, %s)", device.id, device.name, device.ip)
        return DeviceResponse.model_validate(device)

    async def update_device(
        self,
        db: AsyncSession,
        device_id: str,
        changes: Dict[str, Any],
    ) -> DeviceResponse:
        """
        Apply a partial update.

        Only keys present in `changes` are touched. Supplied values go through
        the same rules as on create; an explicit None for a field is rejected.

        Raises:
            InvalidIdFormatError, NotFoundError, ValidationError, DuplicateKeyError
        """
        ensure_object_id(device_id, "device")
        device = await fetch_or_404(
            db, Device, device_id, "device", failure_message="Failed to update device"
        )

        errors: List[str] = []
        updates: Dict[str, str] = {}
        if "name" in changes:
            updates["name"] = clean_name(changes["name"], "Device", errors)
        if "ip" in changes:
            updates["ip"] = clean_ip(changes["ip"], errors)
        if errors:
            raise ValidationError.from_errors(errors)

        for field, value in updates.items():
            setattr(device, field, value)

        await commit(
            db,
            failure_message="Failed to update device",
            duplicate_message=DUPLICATE_IP_MESSAGE,
            context={"device_id": device_id, "fields": sorted(updates)},
        )

        logger.info("Device updated: %s (fields: %s)", device_id, ", ".join(sorted(updates)) or "none")
        return DeviceResponse.model_validate(device)

    async def delete_device(self, db: AsyncSession, device_id: str) -> DeviceDeleteResponse:
        """Delete one device, then every scene that references it."""
        ensure_object_id(device_id, "device")
        device = await fetch_or_404(
            db, Device, device_id, "device", failure_message="Failed to delete device"
        )

        await db.delete(device)
        await commit(db, failure_message="Failed to delete device", context={"device_id": device_id})

        deleted_scenes = await self._delete_scenes_for(db, [device_id])
        logger.info("Device deleted: %s (cascade removed %d scene(s))", device_id, deleted_scenes)

        return DeviceDeleteResponse(
            message="Device deleted successfully",
            deleted_scenes=deleted_scenes,
        )

    async def delete_all_devices(self, db: AsyncSession) -> DeviceDeleteAllResponse:
        """
        Delete every device and every scene belonging to any of them.

        Order: collect device ids → delete their scenes → delete all devices.
        Scenes whose device_id matches no current device are not touched.
        """
        try:
            result = await db.execute(select(Device.id))
            device_ids = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Store error collecting device ids: %s", str(e), exc_info=True)
            raise DatabaseError(message="Failed to delete all devices and scenes") from e

        deleted_scenes = await self._delete_scenes_for(db, device_ids)

        try:
            result = await db.execute(delete(Device))
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Store error deleting devices: %s", str(e), exc_info=True)
            raise DatabaseError(message="Failed to delete all devices and scenes") from e
        deleted_devices = result.rowcount or 0
        await commit(db, failure_message="Failed to delete all devices and scenes")

        logger.info("Deleted all devices: %d device(s), %d scene(s)", deleted_devices, deleted_scenes)
        return DeviceDeleteAllResponse(
            message="All devices and related scenes deleted successfully",
            deleted_devices=deleted_devices,
            deleted_scenes=deleted_scenes,
        )

    async def _delete_scenes_for(self, db: AsyncSession, device_ids: List[str]) -> int:
        """Delete scenes owned by any of `device_ids`; returns how many went."""
        if not device_ids:
            return 0
        try:
            result = await db.execute(
                delete(Scene).where(Scene.device_id.in_(device_ids))
            )
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Store error deleting scenes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to delete related scenes",
                context={"device_count": len(device_ids)},
            ) from e
        await commit(db, failure_message="Failed to delete related scenes")
        return result.rowcount or 0


device_service = DeviceService()
