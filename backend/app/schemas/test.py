"""
DeviceLab Backend — Test Schemas
==================================

What:  Request/response models for single, bulk and toggle operations.

Bulk response shape:
    {
        "success": true,
        "message": "2 test(s) created successfully, 1 failed",
        "createdTests": [...],
        "failedTests": [{"name": "...", "error": "..."}]
    }
    failedTests is left out when nothing failed (the route serializes with
    exclude_none).
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from app.schemas.common import CamelModel

TestState = Literal["active", "inactive"]


class TestCreate(CamelModel):
    """Body of POST /tests."""
    __test__ = False

    name: str = Field(description="Test name (max 100 characters)")
    scene_id: str = Field(description="Identifier of an existing scene")
    state: Optional[TestState] = Field(default=None, description="Defaults to inactive")


class BulkTestItem(CamelModel):
    # null is accepted here and rejected by the service with the batch message
    name: Optional[str] = None
    state: Optional[TestState] = None


class BulkTestCreate(CamelModel):
    """Body of POST /tests/bulk."""
    scene_id: str
    tests: List[BulkTestItem] = Field(description="At least one entry")


class TestResponse(CamelModel):
    __test__ = False

    id: str
    name: str
    scene_id: str
    state: TestState
    created_at: datetime
    updated_at: datetime


class FailedTest(CamelModel):
    name: str
    error: str


class BulkTestResponse(CamelModel):
    success: bool = Field(description="True if at least one test was created")
    message: str
    created_tests: List[TestResponse]
    failed_tests: Optional[List[FailedTest]] = None


class StartStopResponse(CamelModel):
    id: str
    name: str
    scene_id: str
    state: TestState
    message: str = Field(description="Which transition happened")
