"""
DeviceLab Backend — Test Route Handlers
=========================================

What:  GET /tests?sceneId=, GET /tests/{id}, POST /tests, POST /tests/bulk,
       PUT /tests/{id}/start-stop.

Bulk status:
    201 when at least one test was created, 400 when none were. The body
    has the same shape either way; failedTests is omitted when empty.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.common import ErrorResponse
from app.schemas.test import (
    BulkTestCreate,
    BulkTestResponse,
    StartStopResponse,
    TestCreate,
    TestResponse,
)
from app.services.test_service import test_service

router = APIRouter(prefix="/tests", tags=["Tests"])

_ERRORS = {
    400: {"description": "Missing parameter, invalid input or id format", "model": ErrorResponse},
    404: {"description": "Test or scene not found", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


@router.get(
    "",
    response_model=List[TestResponse],
    responses=_ERRORS,
    summary="Get all tests for a specific scene",
)
async def list_tests(
    scene_id: Optional[str] = Query(
        default=None,
        alias="sceneId",
        description="The scene ID to get tests for",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> List[TestResponse]:
    return await test_service.list_tests_by_scene(db, scene_id)


@router.post(
    "",
    response_model=TestResponse,
    status_code=201,
    responses=_ERRORS,
    summary="Create a new test",
)
async def create_test(
    body: TestCreate,
    db: AsyncSession = Depends(get_db_session),
) -> TestResponse:
    return await test_service.create_test(
        db, name=body.name, scene_id=body.scene_id, state=body.state
    )


@router.post(
    "/bulk",
    response_model=BulkTestResponse,
    response_model_exclude_none=True,
    status_code=201,
    responses={
        **_ERRORS,
        400: {"description": "Invalid input, or no test could be created", "model": BulkTestResponse},
    },
    summary="Create multiple tests at once",
    description=(
        "Names are validated up front. Each test is then inserted on its own; "
        "a failure on one entry is reported in failedTests and does not stop the rest."
    ),
)
async def create_tests_bulk(
    body: BulkTestCreate,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> BulkTestResponse:
    result = await test_service.create_tests_bulk(db, scene_id=body.scene_id, tests=body.tests)
    if not result.success:
        response.status_code = 400
    return result


@router.put(
    "/{test_id}/start-stop",
    response_model=StartStopResponse,
    responses=_ERRORS,
    summary="Start or stop a test by toggling its state",
)
async def start_stop_test(
    test_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> StartStopResponse:
    return await test_service.start_stop_test(db, test_id)


@router.get(
    "/{test_id}",
    response_model=TestResponse,
    responses=_ERRORS,
    summary="Get a specific test by ID",
)
async def get_test(
    test_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> TestResponse:
    return await test_service.get_test(db, test_id)
