"""
DeviceLab Backend — Device Route Handlers
===========================================

What:  GET/POST /devices, PUT/DELETE /devices/{id}, DELETE /devices.
How:   Extracts path and body, delegates to DeviceService, returns JSON.
       Errors raised by the service are turned into responses by the
       global handlers in main.py.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.common import ErrorResponse
from app.schemas.device import (
    DeviceCreate,
    DeviceDeleteAllResponse,
    DeviceDeleteResponse,
    DeviceResponse,
    DeviceUpdate,
)
from app.services.device_service import device_service

router = APIRouter(prefix="/devices", tags=["Devices"])

_ERRORS = {
    400: {"description": "Invalid input or id format", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


@router.get(
    "",
    response_model=List[DeviceResponse],
    responses=_ERRORS,
    summary="Get all devices",
    description="Returns every device, newest first.",
)
async def list_devices(db: AsyncSession = Depends(get_db_session)) -> List[DeviceResponse]:
    return await device_service.list_devices(db)


@router.post(
    "",
    response_model=DeviceResponse,
    status_code=201,
    responses={
        **_ERRORS,
        409: {"description": "IP address already in use", "model": ErrorResponse},
    },
    summary="Add a new device",
)
async def create_device(
    body: DeviceCreate,
    db: AsyncSession = Depends(get_db_session),
) -> DeviceResponse:
    return await device_service.create_device(db, name=body.name, ip=body.ip)


@router.put(
    "/{device_id}",
    response_model=DeviceResponse,
    responses={
        **_ERRORS,
        404: {"description": "Device not found", "model": ErrorResponse},
        409: {"description": "IP address already in use", "model": ErrorResponse},
    },
    summary="Update a device by ID",
    description="Only the fields present in the body are changed.",
)
async def update_device(
    device_id: str,
    body: DeviceUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> DeviceResponse:
    changes = body.model_dump(exclude_unset=True)
    return await device_service.update_device(db, device_id, changes)


@router.delete(
    "/{device_id}",
    response_model=DeviceDeleteResponse,
    responses={
        **_ERRORS,
        404: {"description": "Device not found", "model": ErrorResponse},
    },
    summary="Delete a device by ID",
    description="Also deletes every scene that belongs to the device.",
)
async def delete_device(
    device_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> DeviceDeleteResponse:
    return await device_service.delete_device(db, device_id)


@router.delete(
    "",
    response_model=DeviceDeleteAllResponse,
    responses=_ERRORS,
    summary="Delete all devices and their related scenes",
)
async def delete_all_devices(db: AsyncSession = Depends(get_db_session)) -> DeviceDeleteAllResponse:
    return await device_service.delete_all_devices(db)
