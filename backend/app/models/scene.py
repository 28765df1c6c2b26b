"""
DeviceLab Backend — Scene SQLAlchemy Model
============================================

What:  ORM model representing the `scenes` table.
Who:   Used by SceneService and by DeviceService's cascade delete.

device_id holds the owning device's identifier. It is checked by the
service before every write, not by a store-level foreign key.
"""

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.mixins import NAME_MAX_LENGTH, RecordMixin


class Scene(RecordMixin, Base):
    """A named configuration belonging to one device."""

    __tablename__ = "scenes"

    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)

    device_id: Mapped[str] = mapped_column(
        String(24),
        nullable=False,
        comment="Identifier of the owning device",
    )

    __table_args__ = (
        Index("idx_scenes_name", "name"),
        Index("idx_scenes_device_id", "device_id"),
    )

    def __repr__(self) -> str:
        return f"<Scene(id={self.id}, name='{self.name}', device_id='{self.device_id}')>"
