"""
DeviceLab Backend — Shared Column Mixins
==========================================

What:  Columns every record carries: identifier and UTC timestamps.
Why:   Devices, scenes and tests are keyed and timestamped the same way.
How:   Declarative mixin; concrete models inherit it alongside Base.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import new_object_id

NAME_MAX_LENGTH = 100


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecordMixin:
    """
    Identifier plus created/updated timestamps.

    `id` is assigned from new_object_id() when the row is first flushed.
    `updated_at` is refreshed by SQLAlchemy on every UPDATE issued through
    the ORM; bulk statements set it explicitly.
    """

    id: Mapped[str] = mapped_column(
        String(24),
        primary_key=True,
        default=new_object_id,
        comment="24-character hex identifier",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        comment="When this record was created (UTC)",
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        comment="When this record was last modified (UTC)",
    )
