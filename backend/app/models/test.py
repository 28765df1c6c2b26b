"""
DeviceLab Backend — Test SQLAlchemy Model
===========================================

What:  ORM model representing the `tests` table.
Who:   Used by TestService.

A test belongs to a scene (scene_id, checked by the service) and is either
running ("active") or idle ("inactive"). New tests start inactive.
Deleting a scene or its device leaves its tests in place.
"""

from sqlalchemy import CheckConstraint, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.mixins import NAME_MAX_LENGTH, RecordMixin

STATE_ACTIVE = "active"
STATE_INACTIVE = "inactive"
TEST_STATES = (STATE_ACTIVE, STATE_INACTIVE)


class Test(RecordMixin, Base):
    """A runnable test attached to a scene."""

    # Not a pytest test class
    __test__ = False

    __tablename__ = "tests"

    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)

    scene_id: Mapped[str] = mapped_column(
        String(24),
        nullable=False,
        comment="Identifier of the owning scene",
    )

    state: Mapped[str] = mapped_column(
        String(8),
        nullable=False,
        default=STATE_INACTIVE,
        server_default=text("'inactive'"),
        comment="active or inactive",
    )

    __table_args__ = (
        CheckConstraint("state IN ('active', 'inactive')", name="ck_tests_state"),
        Index("idx_tests_name", "name"),
        Index("idx_tests_scene_id", "scene_id"),
        Index("idx_tests_state", "state"),
        Index("idx_tests_scene_id_state", "scene_id", "state"),
    )

    def __repr__(self) -> str:
        return f"<Test(id={self.id}, name='{self.name}', state='{self.state}')>"
