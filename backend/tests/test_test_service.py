"""
DeviceLab Backend — Test Service Tests
========================================

What:  Single create, bulk create (up-front validation and continue-on-error
       inserts), the start/stop toggle and lookups by id and scene.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from app.exceptions import (
    InvalidIdFormatError,
    MissingParameterError,
    NotFoundError,
    ValidationError,
)
from app.schemas.test import BulkTestItem
from app.services.device_service import DeviceService
from app.services.scene_service import SceneService
from app.services.test_service import TestService

MISSING_ID = "aaaaaaaaaaaaaaaaaaaaaaaa"


async def _scene(db):
    device = await DeviceService().create_device(db, "Hub", "10.0.0.1")
    return await SceneService().create_scene(db, "Evening", device.id)


class TestSingleTests:
    """Tests for create, get and list of single tests."""

    def setup_method(self):
        self.service = TestService()

    @pytest.mark.asyncio
    async def test_create_defaults_to_inactive(self, db_session):
        """A test created without a state should be inactive."""
        scene = await _scene(db_session)

        created = await self.service.create_test(db_session, " Lights on ", scene.id)

        assert created.name == "Lights on"
        assert created.state == "inactive"
        assert created.scene_id == scene.id

    @pytest.mark.asyncio
    async def test_create_with_explicit_state(self, db_session):
        """A supplied state should be kept."""
        scene = await _scene(db_session)

        created = await self.service.create_test(db_session, "Lights on", scene.id, state="active")

        assert created.state == "active"

    @pytest.mark.asyncio
    async def test_create_rejects_unknown_state(self, db_session):
        """An unknown state should raise ValidationError."""
        scene = await _scene(db_session)

        with pytest.raises(ValidationError, match="State must be one of"):
            await self.service.create_test(db_session, "Lights on", scene.id, state="paused")

    @pytest.mark.asyncio
    async def test_create_with_unknown_scene(self, db_session):
        """An unknown scene should raise NotFoundError."""
        with pytest.raises(NotFoundError, match="Scene not found"):
            await self.service.create_test(db_session, "Lights on", MISSING_ID)

    @pytest.mark.asyncio
    async def test_get_by_id(self, db_session):
        """A stored test should be returned by id."""
        scene = await _scene(db_session)
        created = await self.service.create_test(db_session, "Lights on", scene.id)

        fetched = await self.service.get_test(db_session, created.id)

        assert fetched.id == created.id
        assert fetched.name == "Lights on"

    @pytest.mark.asyncio
    async def test_get_malformed_and_unknown(self, db_session):
        """Bad ids fail on format, unknown ones on lookup."""
        with pytest.raises(InvalidIdFormatError, match="Invalid test ID format"):
            await self.service.get_test(db_session, "123")
        with pytest.raises(NotFoundError, match="Test not found"):
            await self.service.get_test(db_session, MISSING_ID)

    @pytest.mark.asyncio
    async def test_list_by_scene(self, db_session):
        """Only the scene's tests should be listed."""
        scene = await _scene(db_session)
        await self.service.create_test(db_session, "One", scene.id)
        await self.service.create_test(db_session, "Two", scene.id)

        listed = await self.service.list_tests_by_scene(db_session, scene.id)

        assert sorted(t.name for t in listed) == ["One", "Two"]

    @pytest.mark.asyncio
    async def test_list_parameter_checks(self, db_session):
        """Missing, malformed and unknown scene ids each fail their own way."""
        with pytest.raises(MissingParameterError, match="Scene ID is required"):
            await self.service.list_tests_by_scene(db_session, "")
        with pytest.raises(InvalidIdFormatError):
            await self.service.list_tests_by_scene(db_session, "scene-1")
        with pytest.raises(NotFoundError):
            await self.service.list_tests_by_scene(db_session, MISSING_ID)


class TestStartStop:
    """Tests for the active/inactive toggle."""

    def setup_method(self):
        self.service = TestService()

    @pytest.mark.asyncio
    async def test_toggle_twice_returns_to_starting_state(self, db_session):
        """Two toggles should land back on the first state."""
        scene = await _scene(db_session)
        created = await self.service.create_test(db_session, "Lights on", scene.id)

        started = await self.service.start_stop_test(db_session, created.id)
        stopped = await self.service.start_stop_test(db_session, created.id)

        assert started.state == "active"
        assert started.message == "Test started successfully"
        assert stopped.state == "inactive"
        assert stopped.message == "Test stopped successfully"
        assert (await self.service.get_test(db_session, created.id)).state == "inactive"

    @pytest.mark.asyncio
    async def test_toggle_from_active(self, db_session):
        """An active test should be stopped."""
        scene = await _scene(db_session)
        created = await self.service.create_test(db_session, "Lights on", scene.id, state="active")

        result = await self.service.start_stop_test(db_session, created.id)

        assert result.state == "inactive"
        assert result.message == "Test stopped successfully"

    @pytest.mark.asyncio
    async def test_toggle_unknown_test(self, db_session):
        """Toggling an unknown test should raise NotFoundError."""
        with pytest.raises(NotFoundError):
            await self.service.start_stop_test(db_session, MISSING_ID)
        with pytest.raises(InvalidIdFormatError):
            await self.service.start_stop_test(db_session, "x")


class TestBulkCreate:
    """Tests for create_tests_bulk."""

    def setup_method(self):
        self.service = TestService()

    @pytest.mark.asyncio
    async def test_all_created(self, db_session):
        """Every valid entry should be created in order."""
        scene = await _scene(db_session)
        items = [BulkTestItem(name="A"), BulkTestItem(name=" B ", state="active")]

        result = await self.service.create_tests_bulk(db_session, scene.id, items)

        assert result.success is True
        assert result.message == "2 test(s) created successfully"
        assert [(t.name, t.state) for t in result.created_tests] == [("A", "inactive"), ("B", "active")]
        assert result.failed_tests is None

    @pytest.mark.asyncio
    async def test_empty_list_rejected_before_any_insert(self, db_session):
        """An empty list should raise ValidationError."""
        scene = await _scene(db_session)

        with pytest.raises(ValidationError, match="At least one test must be provided"):
            await self.service.create_tests_bulk(db_session, scene.id, [])

        assert await self.service.list_tests_by_scene(db_session, scene.id) == []

    @pytest.mark.asyncio
    async def test_one_blank_name_fails_whole_batch(self, db_session):
        """One blank name should stop the batch before any insert."""
        scene = await _scene(db_session)
        items = [
            BulkTestItem(name="A"),
            BulkTestItem(name=""),
            BulkTestItem(name="B", state="active"),
        ]

        with pytest.raises(ValidationError, match="All tests must have a valid name"):
            await self.service.create_tests_bulk(db_session, scene.id, items)

        assert await self.service.list_tests_by_scene(db_session, scene.id) == []

    @pytest.mark.asyncio
    async def test_overlong_name_fails_whole_batch(self, db_session):
        """One name over the limit should stop the batch."""
        scene = await _scene(db_session)

        with pytest.raises(ValidationError, match="Test names cannot exceed 100 characters"):
            await self.service.create_tests_bulk(
                db_session, scene.id, [BulkTestItem(name="ok"), BulkTestItem(name="y" * 101)]
            )

    @pytest.mark.asyncio
    async def test_null_name_fails_whole_batch(self, db_session):
        """A null name gets the same batch message as a blank one."""
        scene = await _scene(db_session)

        with pytest.raises(ValidationError, match="All tests must have a valid name"):
            await self.service.create_tests_bulk(
                db_session, scene.id, [BulkTestItem(name="A"), BulkTestItem(name=None)]
            )

        assert await self.service.list_tests_by_scene(db_session, scene.id) == []

    @pytest.mark.asyncio
    async def test_scene_checked_first(self, db_session):
        """The scene id is checked before the list contents."""
        with pytest.raises(InvalidIdFormatError):
            await self.service.create_tests_bulk(db_session, "bad", [])
        with pytest.raises(NotFoundError):
            await self.service.create_tests_bulk(db_session, MISSING_ID, [BulkTestItem(name="A")])

    @pytest.mark.asyncio
    async def test_store_failure_on_one_entry_does_not_stop_the_rest(self, mock_db_session):
        """A failed commit is rolled back and the loop continues."""
        mock_db_session.get = AsyncMock(return_value=MagicMock())
        mock_db_session.commit = AsyncMock(
            side_effect=[None, OperationalError("INSERT", {}, Exception("disk I/O error")), None]
        )
        items = [
            BulkTestItem(name="A"),
            BulkTestItem(name="Flaky"),
            BulkTestItem(name="B", state="active"),
        ]

        result = await self.service.create_tests_bulk(mock_db_session, MISSING_ID, items)

        assert result.success is True
        assert result.message == "2 test(s) created successfully, 1 failed"
        assert [t.name for t in result.created_tests] == ["A", "B"]
        assert [(f.name, f.error) for f in result.failed_tests] == [("Flaky", "Failed to create test")]
        assert mock_db_session.commit.await_count == 3
        mock_db_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_every_entry_failing_is_not_a_success(self, mock_db_session):
        """No created entries means success is False."""
        mock_db_session.get = AsyncMock(return_value=MagicMock())
        mock_db_session.commit = AsyncMock(
            side_effect=OperationalError("INSERT", {}, Exception("read-only database"))
        )

        result = await self.service.create_tests_bulk(
            mock_db_session, MISSING_ID, [BulkTestItem(name="A"), BulkTestItem(name="B")]
        )

        assert result.success is False
        assert result.message == "0 test(s) created successfully, 2 failed"
        assert result.created_tests == []
        assert len(result.failed_tests) == 2
