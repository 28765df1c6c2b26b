"""
DeviceLab Backend — Device SQLAlchemy Model
=============================================

What:  ORM model representing the `devices` table.
Who:   Used by DeviceService for CRUD and by Alembic for schema management.

Table Design:
    - ip is unique across all devices (uq_devices_ip); a second insert with
      the same address raises IntegrityError, which the service reports as
      a duplicate key.
    - Scenes point at devices by id string only; there is no foreign key.
      DeviceService deletes dependent scenes itself.
"""

from sqlalchemy import Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.mixins import NAME_MAX_LENGTH, RecordMixin


class Device(RecordMixin, Base):
    """A networked device addressed by its IPv4 address."""

    __tablename__ = "devices"

    name: Mapped[str] = mapped_column(
        String(NAME_MAX_LENGTH),
        nullable=False,
        comment="Display name, trimmed, at most 100 characters",
    )

    ip: Mapped[str] = mapped_column(
        String(15),
        nullable=False,
        comment="IPv4 dotted-quad address, unique across devices",
    )

    __table_args__ = (
        UniqueConstraint("ip", name="uq_devices_ip"),
        Index("idx_devices_name", "name"),
        Index("idx_devices_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Device(id={self.id}, name='{self.name}', ip='{self.ip}')>"
